"""User event processor (``user-events``, high priority)."""

from typing import Any, Dict

from infrastructure.resilience.retry import RetryAttempt
from modules.notifications.models import (
    MessageContext,
    Notification,
    NotificationPriority,
    NotificationType,
)
from modules.notifications.processors.base import (
    EventProcessor,
    ProcessingOutcome,
    require_fields,
    require_objects,
)


class UserEventProcessor(EventProcessor):
    """Turn user lifecycle events into critical ``user_update`` notifications."""

    family = "user"

    def validate(self, event: Dict[str, Any]) -> None:
        require_fields(event, "userId")
        require_objects(event, "details")

    def execute(
        self, event: Dict[str, Any], context: MessageContext, attempt: RetryAttempt
    ) -> ProcessingOutcome:
        user = self.resolve_user(event["userId"])
        event_type = event.get("type")

        record = self.persist(
            Notification(
                user_id=event["userId"],
                email=user.email if user.has_valid_email else None,
                type=NotificationType.USER_UPDATE,
                content=event.get("details")
                or {"message": "User event processed", "eventType": event_type},
                priority=NotificationPriority.CRITICAL,
                metadata={
                    "updateType": event_type,
                    "retryCount": attempt.retry_count,
                },
            )
        )
        self.dispatch(record, f"Notification: {record.type.value}", user=user)
        return ProcessingOutcome.HANDLED
