"""Unit tests for the dead letter escalator."""

import base64
import json

import pytest

from modules.notifications.dead_letter import DeadLetterEscalator
from modules.notifications.models import MessageContext
from tests.factories import FakePublisher


@pytest.mark.unit
class TestDeadLetterEscalator:
    def test_escalate_publishes_envelope(self, escalator, publisher):
        ok = escalator.escalate(
            "order-events", b'{"a": 1}', {"partition": 1, "offset": 5, "reason": "boom"}
        )

        assert ok is True
        topic, key, value = publisher.published[0]
        body = json.loads(value)
        assert topic == "dead-letter-queue"
        assert key == "order-events-1-5"
        assert base64.b64decode(body["originalMessage"]) == b'{"a": 1}'
        assert body["metadata"]["reason"] == "boom"
        assert body["metadata"]["originalTopic"] == "order-events"

    def test_publish_failure_is_swallowed(self):
        escalator = DeadLetterEscalator(FakePublisher(error=RuntimeError("broker down")))

        assert escalator.escalate("user-events", b"x", {"partition": 0, "offset": 0}) is False

    def test_handle_failed_message_prefers_raw_bytes(self, escalator, publisher):
        context = MessageContext("user-events", 0, 3, raw=b'{"userId":"u-1"}')

        escalator.handle_failed_message(
            "user-events", {"userId": "u-1"}, RuntimeError("exhausted"), context
        )

        body = json.loads(publisher.published[0][2])
        assert base64.b64decode(body["originalMessage"]) == b'{"userId":"u-1"}'
        assert body["metadata"]["reason"] == "exhausted"

    def test_handle_failed_message_serializes_event_without_raw(
        self, escalator, publisher
    ):
        context = MessageContext("user-events", 0, 3)

        escalator.handle_failed_message(
            "user-events", {"userId": "u-1"}, None, context, reason="High Priority Event Processing Failed"
        )

        body = json.loads(publisher.published[0][2])
        assert json.loads(base64.b64decode(body["originalMessage"])) == {"userId": "u-1"}
        assert body["metadata"]["reason"] == "High Priority Event Processing Failed"
