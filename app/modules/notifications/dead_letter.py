"""Dead letter escalation.

Publishes messages that could not be processed to the dead letter topic
with enough context (original bytes, bus coordinates, reason) to inspect
or replay them. Escalation never raises: a failed publish is logged and the
message is not escalated again.
"""

import json
from typing import Any, Dict, Optional

from infrastructure.logging import get_module_logger
from integrations.bus import Publisher
from modules.notifications.models import DeadLetterEnvelope, MessageContext, utc_now

logger = get_module_logger()


class DeadLetterEscalator:
    """Publish exhausted messages to the dead letter topic.

    Args:
        publisher: Bus publisher
        topic: Dead letter topic name
    """

    def __init__(self, publisher: Publisher, topic: str = "dead-letter-queue") -> None:
        self.publisher = publisher
        self.topic = topic

    def escalate(
        self, original_topic: str, raw_payload: bytes, metadata: Dict[str, Any]
    ) -> bool:
        """Publish one dead letter envelope.

        Args:
            original_topic: Topic the message was read from
            raw_payload: Original message bytes
            metadata: ``partition``, ``offset`` and ``reason``

        Returns:
            True if the envelope was acknowledged, False if publishing failed
        """
        envelope = DeadLetterEnvelope(
            original_topic=original_topic,
            partition=int(metadata.get("partition", -1)),
            offset=int(metadata.get("offset", -1)),
            original_message=raw_payload or b"",
            reason=str(metadata.get("reason") or "Unknown failure"),
            timestamp=utc_now(),
        )

        try:
            self.publisher.publish(self.topic, envelope.key, envelope.to_bytes())
        except Exception as exc:
            logger.error(
                "dead_letter_publish_failed",
                key=envelope.key,
                dead_letter_topic=self.topic,
                reason=envelope.reason,
                error=str(exc),
                exc_info=True,
            )
            return False

        logger.warning(
            "dead_letter_published",
            key=envelope.key,
            dead_letter_topic=self.topic,
            reason=envelope.reason,
        )
        return True

    def handle_failed_message(
        self,
        topic: str,
        event: Any,
        error: Optional[BaseException],
        context: MessageContext,
        reason: Optional[str] = None,
    ) -> bool:
        """Escalate a message whose processing failed.

        The original record bytes from ``context`` are preserved when
        available; otherwise the event is serialized as JSON.

        Args:
            topic: Topic the message was read from
            event: Decoded event (or None when decoding failed)
            error: Exception that ended processing, if any
            context: Bus coordinates of the record
            reason: Explicit reason; defaults to the error message

        Returns:
            True if the envelope was published
        """
        if context.raw is not None:
            raw = context.raw
        else:
            try:
                raw = json.dumps(event, default=str).encode("utf-8")
            except (TypeError, ValueError):
                raw = repr(event).encode("utf-8")

        return self.escalate(
            topic,
            raw,
            {
                "partition": context.partition,
                "offset": context.offset,
                "reason": reason or (str(error) if error else "Unknown failure"),
            },
        )
