"""Product event processor (``product-events``, standard priority)."""

import time
from typing import Any, Dict

from infrastructure.resilience.retry import RetryAttempt
from modules.notifications.models import (
    MessageContext,
    Notification,
    NotificationPriority,
    NotificationType,
    utc_now,
)
from modules.notifications.processors.base import (
    EventProcessor,
    ProcessingOutcome,
    require_fields,
    require_objects,
)

PROMOTION_SUBJECT = "🎉 Special Promotion Just for You, {name}!"


class ProductEventProcessor(EventProcessor):
    """Turn product events into ``promotion`` notifications.

    Users who opted out of promotions still get the notification recorded,
    but no email: the record is created with ``sent_at`` stamped and
    ``metadata.emailSuppressed`` set.
    """

    family = "product"

    def validate(self, event: Dict[str, Any]) -> None:
        require_fields(event, "userId")
        require_objects(event, "details", "metadata")

    def execute(
        self, event: Dict[str, Any], context: MessageContext, attempt: RetryAttempt
    ) -> ProcessingOutcome:
        user = self.resolve_user(event["userId"])
        details = event.get("details") or {}
        event_metadata = event.get("metadata") or {}
        name = details.get("name") or user.display_name
        opted_out = user.preferences.promotions_opted_out

        if not user.has_valid_email and event.get("email"):
            user = user.model_copy(update={"email": event["email"]})

        metadata: Dict[str, Any] = {
            "batchId": event_metadata.get("batchId")
            or f"RETRY_{int(time.time() * 1000)}",
            "isAutomated": True,
            "retryCount": attempt.retry_count,
        }
        if opted_out:
            metadata["emailSuppressed"] = "opted_out"

        record = self.persist(
            Notification(
                user_id=event["userId"],
                email=user.email if user.has_valid_email else None,
                type=NotificationType.PROMOTION,
                content={
                    "message": details.get("message") or "Promotional event processed",
                    "eventType": event.get("eventType"),
                    "name": name,
                },
                priority=NotificationPriority.STANDARD,
                metadata=metadata,
                sent_at=utc_now() if opted_out else None,
            )
        )

        if opted_out:
            self.log.info(
                "email_dispatch_suppressed",
                notification_id=record.id,
                reason="opted_out",
            )
            return ProcessingOutcome.HANDLED

        self.dispatch(record, PROMOTION_SUBJECT.format(name=name), user=user)
        return ProcessingOutcome.HANDLED
