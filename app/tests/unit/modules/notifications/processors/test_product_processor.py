"""Unit tests for the product (promotion) event processor."""

from unittest.mock import MagicMock

import pytest

from integrations.mailer import SmtpMailer
from modules.notifications.dispatcher import EmailDispatcher
from modules.notifications.models import MessageContext, NotificationType
from modules.notifications.processors import ProcessingOutcome, ProductEventProcessor
from modules.notifications.processors.product import PROMOTION_SUBJECT
from modules.notifications.store import NotificationFilter
from tests.factories import make_user

CONTEXT = MessageContext("product-events", 0, 3)


@pytest.fixture
def processor(processor_deps):
    return ProductEventProcessor(**processor_deps)


@pytest.mark.unit
class TestProductEventProcessor:
    def test_creates_and_emails_promotion(self, processor, store, mailer):
        event = {
            "userId": "u-1",
            "eventType": "FLASH_SALE",
            "details": {"message": "50% off"},
            "metadata": {"batchId": "B-1"},
        }

        assert processor.process(event, CONTEXT) is True

        [record] = store.find(NotificationFilter(user_id="u-1"))
        assert record.type == NotificationType.PROMOTION
        assert record.content == {
            "message": "50% off",
            "eventType": "FLASH_SALE",
            "name": "User One",
        }
        assert record.metadata["batchId"] == "B-1"
        assert record.metadata["isAutomated"] is True
        assert record.email_sent is True
        assert mailer.sent[0].subject == PROMOTION_SUBJECT.format(name="User One")

    def test_defaults_and_generated_batch_id(self, processor, store):
        processor.process({"userId": "u-1"}, CONTEXT)

        record = store.find(NotificationFilter())[0]
        assert record.content["message"] == "Promotional event processed"
        assert record.metadata["batchId"].startswith("RETRY_")

    def test_opted_out_user_is_recorded_without_email(
        self, processor, store, directory, mailer
    ):
        directory.add(make_user(preferences={"promotions": False}))

        assert processor.process({"userId": "u-1"}, CONTEXT) is True

        [record] = store.find(NotificationFilter(user_id="u-1"))
        assert record.email_sent is False
        assert record.sent_at is not None
        assert record.metadata["emailSuppressed"] == "opted_out"
        assert mailer.sent == []

    def test_event_email_is_used_when_user_email_is_invalid(
        self, processor, store, directory, mailer
    ):
        directory.add(make_user(email="broken"))

        processor.process({"userId": "u-1", "email": "fallback@example.com"}, CONTEXT)

        assert mailer.sent[0].to == "fallback@example.com"
        assert store.find(NotificationFilter())[0].email == "fallback@example.com"

    def test_header_injection_in_name_is_recorded_once_without_email(
        self, processor_deps, store, directory, publisher, sleeps
    ):
        smtp = MagicMock()
        smtp.__enter__.return_value = smtp
        processor_deps["dispatcher"] = EmailDispatcher(
            directory=directory,
            mailer=SmtpMailer(host="smtp.test", connection_factory=lambda: smtp),
            sender="notifications@example.com",
            service_url="http://notifications.test",
        )
        processor = ProductEventProcessor(**processor_deps)
        event = {"userId": "u-1", "details": {"name": "Bob\nBcc: evil@example.com"}}

        assert processor.handle(event, CONTEXT) == ProcessingOutcome.HANDLED

        [record] = store.find(NotificationFilter(user_id="u-1"))
        assert record.email_sent is False
        assert sleeps == []
        assert publisher.published == []
        smtp.send_message.assert_not_called()

    def test_unexpected_dispatcher_error_is_swallowed(
        self, processor, store, sleeps, publisher
    ):
        processor.dispatcher = MagicMock()
        processor.dispatcher.send.side_effect = RuntimeError("template blew up")

        assert processor.handle({"userId": "u-1"}, CONTEXT) == ProcessingOutcome.HANDLED

        [record] = store.find(NotificationFilter(user_id="u-1"))
        assert record.email_sent is False
        assert sleeps == []
        assert publisher.published == []

    @pytest.mark.parametrize(
        "event",
        [
            {"userId": "u-1", "details": "oops"},
            {"userId": "u-1", "details": ["a"]},
            {"userId": "u-1", "metadata": "B-1"},
        ],
    )
    def test_non_object_details_or_metadata_are_invalid(
        self, processor, store, directory, sleeps, publisher, event
    ):
        assert processor.handle(event, CONTEXT) == ProcessingOutcome.INVALID
        assert sleeps == []
        assert directory.lookups == []
        assert publisher.published == []
        assert store.count(NotificationFilter()) == 0
