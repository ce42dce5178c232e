"""Unit tests for the email dispatcher."""

import pytest

from infrastructure.operations import OperationResult
from modules.notifications.dispatcher import (
    DispatchReceipt,
    EmailDispatchError,
    mark_dispatched,
)
from modules.notifications.models import NotificationType
from tests.factories import make_notification, make_user


@pytest.mark.unit
class TestEmailDispatcher:
    def test_send_resolves_user_and_renders(self, dispatcher, mailer, directory):
        receipt = dispatcher.send(
            "u-1", "Subject", NotificationType.ORDER_UPDATE, {"orderId": "o-1"}
        )

        email = mailer.sent[0]
        assert directory.lookups == ["u-1"]
        assert email.to == "user1@example.com"
        assert email.sender == "notifications@example.com"
        assert email.subject == "Subject"
        assert f"/api/v1/notifications/track/{receipt.tracking_id}" in email.html
        assert receipt.success is True
        assert receipt.message_id == "msg-1"

    def test_preresolved_user_skips_lookup(self, dispatcher, directory):
        dispatcher.send(
            "u-1",
            "Subject",
            NotificationType.PROMOTION,
            {},
            user=make_user(),
            tracking_id="t-fixed",
        )

        assert directory.lookups == []

    def test_unknown_user_raises_retryable(self, dispatcher):
        with pytest.raises(EmailDispatchError) as exc_info:
            dispatcher.send("missing", "S", NotificationType.ORDER_UPDATE, {})

        assert exc_info.value.retryable is True
        assert exc_info.value.user_id == "missing"

    def test_user_without_email_raises(self, dispatcher, mailer):
        with pytest.raises(EmailDispatchError):
            dispatcher.send(
                "u-2", "S", NotificationType.ORDER_UPDATE, {}, user=make_user("u-2", email=None)
            )

        assert mailer.sent == []

    def test_mailer_failure_raises_with_retryability(self, dispatcher, mailer):
        mailer.results = [OperationResult.permanent_error("rejected")]

        with pytest.raises(EmailDispatchError) as exc_info:
            dispatcher.send("u-1", "S", NotificationType.ORDER_UPDATE, {})

        assert exc_info.value.retryable is False


@pytest.mark.unit
def test_mark_dispatched_records_receipt(store):
    record = store.create(make_notification())

    updated = mark_dispatched(
        store, record, DispatchReceipt(success=True, message_id="m-1", tracking_id="t-1")
    )

    assert updated.email_sent is True
    assert updated.sent_at is not None
    assert updated.metadata["trackingId"] == "t-1"
    assert updated.metadata["messageId"] == "m-1"
