"""Unit tests for the user event processor."""

import pytest

from modules.notifications.models import (
    MessageContext,
    NotificationPriority,
    NotificationType,
)
from modules.notifications.processors import ProcessingOutcome, UserEventProcessor
from modules.notifications.store import NotificationFilter


@pytest.fixture
def processor(processor_deps):
    return UserEventProcessor(**processor_deps)


@pytest.mark.unit
class TestUserEventProcessor:
    def test_creates_critical_user_update(self, processor, store, mailer):
        event = {"userId": "u-1", "type": "USER_CREATED"}

        assert processor.process(event, MessageContext("user-events", 0, 1)) is True

        [record] = store.find(NotificationFilter(user_id="u-1"))
        assert record.type == NotificationType.USER_UPDATE
        assert record.priority == NotificationPriority.CRITICAL
        assert record.content == {
            "message": "User event processed",
            "eventType": "USER_CREATED",
        }
        assert record.metadata["updateType"] == "USER_CREATED"
        assert record.email_sent is True
        assert "Welcome to Our Backend System, User One!" in mailer.sent[0].html

    def test_details_become_content(self, processor, store):
        event = {"userId": "u-1", "details": {"field": "email"}}

        processor.process(event, MessageContext("user-events", 0, 1))

        assert store.find(NotificationFilter())[0].content == {"field": "email"}

    def test_missing_user_id_is_invalid(self, processor, sleeps):
        outcome = processor.handle({"type": "USER_CREATED"}, MessageContext("user-events", 0, 1))

        assert outcome == ProcessingOutcome.INVALID
        assert sleeps == []

    def test_non_object_details_are_invalid(self, processor, store, sleeps):
        outcome = processor.handle(
            {"userId": "u-1", "details": "oops"}, MessageContext("user-events", 0, 1)
        )

        assert outcome == ProcessingOutcome.INVALID
        assert sleeps == []
        assert store.count(NotificationFilter()) == 0
