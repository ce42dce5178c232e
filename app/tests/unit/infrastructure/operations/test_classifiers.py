"""Unit tests for error classifiers.

Tests cover:
- requests exception classification for the users service
- smtplib exception classification for the SMTP mailer
- AWS SDK error classification for the DynamoDB store
"""

import smtplib
from unittest.mock import Mock

import pytest
import requests
from botocore.exceptions import ClientError

from infrastructure.operations.classifiers import (
    classify_aws_error,
    classify_http_error,
    classify_smtp_error,
)
from infrastructure.operations.status import OperationStatus


def _http_error(status_code, headers=None):
    response = Mock()
    response.status_code = status_code
    response.headers = headers or {}
    return requests.HTTPError(f"{status_code} error", response=response)


@pytest.mark.unit
class TestClassifyHttpError:
    def test_timeout_is_transient(self):
        result = classify_http_error(requests.Timeout("read timed out"))

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == "TIMEOUT"

    def test_connection_error_is_transient(self):
        result = classify_http_error(requests.ConnectionError("refused"))

        assert result.is_retryable
        assert result.error_code == "CONNECTION_ERROR"

    def test_429_uses_retry_after_header(self):
        result = classify_http_error(_http_error(429, {"Retry-After": "30"}))

        assert result.error_code == "RATE_LIMITED"
        assert result.retry_after == 30

    def test_429_with_malformed_header_defaults_to_60(self):
        result = classify_http_error(_http_error(429, {"Retry-After": "soon"}))

        assert result.retry_after == 60

    def test_404_is_not_found(self):
        assert classify_http_error(_http_error(404)).status == OperationStatus.NOT_FOUND

    def test_401_is_permanent(self):
        result = classify_http_error(_http_error(401))

        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == "UNAUTHORIZED"

    def test_503_is_transient(self):
        assert classify_http_error(_http_error(503)).is_retryable

    def test_400_is_permanent(self):
        assert classify_http_error(_http_error(400)).status == OperationStatus.PERMANENT_ERROR


@pytest.mark.unit
class TestClassifySmtpError:
    def test_authentication_failure_is_permanent(self):
        exc = smtplib.SMTPAuthenticationError(535, b"bad credentials")

        result = classify_smtp_error(exc)

        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == "UNAUTHORIZED"

    def test_recipients_refused_is_permanent(self):
        exc = smtplib.SMTPRecipientsRefused({"a@b.co": (550, b"no such user")})

        assert classify_smtp_error(exc).error_code == "RECIPIENT_REFUSED"

    def test_4xx_reply_is_transient(self):
        exc = smtplib.SMTPDataError(451, b"try again later")

        assert classify_smtp_error(exc).is_retryable

    def test_5xx_reply_is_permanent(self):
        exc = smtplib.SMTPDataError(554, b"rejected")

        assert classify_smtp_error(exc).error_code == "SMTP_REJECTED"

    def test_socket_error_is_transient(self):
        result = classify_smtp_error(ConnectionRefusedError("refused"))

        assert result.is_retryable
        assert result.error_code == "CONNECTION_ERROR"


@pytest.mark.unit
class TestClassifyAwsError:
    def _client_error(self, code):
        return ClientError({"Error": {"Code": code, "Message": "m"}}, "PutItem")

    def test_throttling_is_transient(self):
        result = classify_aws_error(
            self._client_error("ProvisionedThroughputExceededException")
        )

        assert result.error_code == "RATE_LIMITED"
        assert result.is_retryable

    def test_access_denied_is_permanent(self):
        result = classify_aws_error(self._client_error("AccessDeniedException"))

        assert result.status == OperationStatus.PERMANENT_ERROR

    def test_resource_not_found(self):
        result = classify_aws_error(self._client_error("ResourceNotFoundException"))

        assert result.status == OperationStatus.NOT_FOUND

    def test_validation_is_permanent(self):
        result = classify_aws_error(self._client_error("ValidationException"))

        assert result.error_code == "INVALID_REQUEST"

    def test_non_client_error_is_transient(self):
        assert classify_aws_error(OSError("network down")).is_retryable
