"""Unit tests for the users service client."""

from unittest.mock import MagicMock

import pytest
import requests

from infrastructure.operations import OperationStatus
from integrations.users import (
    DEFAULT_DISPLAY_NAME,
    User,
    UserDirectoryClient,
    UserDirectoryError,
    is_valid_email,
)


def _response(payload=None, status_code=200, json_error=None):
    response = MagicMock()
    response.status_code = status_code
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code}", response=response
        )
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    response.headers = {}
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(session):
    return UserDirectoryClient(
        base_url="http://users.test/api/v1/users/", timeout=2.0, session=session
    )


@pytest.mark.unit
class TestGetUser:
    def test_unwraps_result_envelope(self, client, session):
        session.get.return_value = _response(
            {"result": {"_id": "u-1", "email": "a@b.co", "name": "Ada"}}
        )

        user = client.get_user("u-1")

        session.get.assert_called_once_with("http://users.test/api/v1/users/u-1", timeout=2.0)
        assert user.id == "u-1"
        assert user.email == "a@b.co"
        assert user.display_name == "Ada"

    def test_accepts_bare_payload_without_id(self, client, session):
        session.get.return_value = _response({"email": "a@b.co"})

        user = client.get_user("u-9")

        assert user.id == "u-9"
        assert user.display_name == DEFAULT_DISPLAY_NAME

    def test_empty_payload_is_not_found(self, client, session):
        session.get.return_value = _response({"result": None})

        with pytest.raises(UserDirectoryError, match="not found"):
            client.get_user("u-1")

    def test_http_error_is_classified(self, client, session):
        session.get.return_value = _response(status_code=503)

        with pytest.raises(UserDirectoryError) as exc_info:
            client.get_user("u-1")

        assert exc_info.value.result.status == OperationStatus.TRANSIENT_ERROR

    def test_timeout_is_wrapped(self, client, session):
        session.get.side_effect = requests.Timeout("slow")

        with pytest.raises(UserDirectoryError) as exc_info:
            client.get_user("u-1")

        assert exc_info.value.result.error_code == "TIMEOUT"

    def test_invalid_json_is_wrapped(self, client, session):
        session.get.return_value = _response(json_error=ValueError("not json"))

        with pytest.raises(UserDirectoryError, match="Invalid users service response"):
            client.get_user("u-1")


@pytest.mark.unit
class TestListUsers:
    def test_skips_malformed_entries(self, client, session):
        session.get.return_value = _response(
            {"result": [{"_id": "u-1", "email": "a@b.co"}, {"email": "no-id@b.co"}]}
        )

        users = client.list_users()

        session.get.assert_called_once_with("http://users.test/api/v1/users", timeout=2.0)
        assert [u.id for u in users] == ["u-1"]

    def test_non_list_payload_raises(self, client, session):
        session.get.return_value = _response({"result": {"_id": "u-1"}})

        with pytest.raises(UserDirectoryError):
            client.list_users()


@pytest.mark.unit
class TestUserModel:
    @pytest.mark.parametrize(
        "email,expected",
        [
            ("user@example.com", True),
            ("first.last@sub.example.org", True),
            ("no-at-sign.example.com", False),
            ("user@nodot", False),
            ("user name@example.com", False),
            ("  padded@example.com  ", True),
            ("double@@example.com", False),
            ("", False),
            (None, False),
        ],
    )
    def test_is_valid_email(self, email, expected):
        assert is_valid_email(email) is expected

    def test_only_explicit_false_opts_out(self):
        opted_out = User.model_validate(
            {"_id": "u", "preferences": {"promotions": False, "recommendations": False}}
        )
        unset = User.model_validate({"_id": "u", "preferences": {}})
        opted_in = User.model_validate(
            {"_id": "u", "preferences": {"promotions": True, "orderUpdates": True}}
        )

        assert opted_out.preferences.promotions_opted_out
        assert opted_out.preferences.recommendations_opted_out
        assert not unset.preferences.promotions_opted_out
        assert not unset.preferences.recommendations_opted_out
        assert not opted_in.preferences.promotions_opted_out
        assert opted_in.preferences.order_updates is True
