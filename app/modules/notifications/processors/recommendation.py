"""Recommendation event processor (``recommendation-events``, standard priority)."""

import numbers
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
    EventValidationError,
    ProcessingOutcome,
    require_fields,
)

RECOMMENDATION_FIELDS = ("productId", "name", "category")


class RecommendationEventProcessor(EventProcessor):
    """Record ``recommendation`` notifications for later delivery.

    Emails are not sent here; the recommendation flush job picks up unsent
    records. Users who opted out of recommendations get nothing recorded.
    """

    family = "recommendation"

    def validate(self, event: Dict[str, Any]) -> None:
        require_fields(event, "userId")

        items = event.get("recommendations")
        if not isinstance(items, list) or not items:
            raise EventValidationError(["recommendations must be a non-empty list"])

        errors = []
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                errors.append(f"recommendations[{index}] must be an object")
                continue
            for field in RECOMMENDATION_FIELDS:
                if item.get(field) is None or item.get(field) == "":
                    errors.append(f"recommendations[{index}] missing {field}")
            price = item.get("price")
            if isinstance(price, bool) or not isinstance(price, numbers.Real):
                errors.append(f"recommendations[{index}] price must be a number")
        if errors:
            raise EventValidationError(errors)

    def execute(
        self, event: Dict[str, Any], context: MessageContext, attempt: RetryAttempt
    ) -> ProcessingOutcome:
        user = self.resolve_user(event["userId"])

        if user.preferences.recommendations_opted_out:
            self.log.info(
                "recommendation_skipped", user_id=user.id, reason="opted_out"
            )
            return ProcessingOutcome.SKIPPED

        self.persist(
            Notification(
                user_id=event["userId"],
                email=user.email if user.has_valid_email else None,
                type=NotificationType.RECOMMENDATION,
                content={
                    "recommendations": event["recommendations"],
                    "timestamp": event.get("timestamp"),
                },
                priority=NotificationPriority.STANDARD,
                metadata={
                    "recommendationSource": event.get("type") or "RECOMMENDATIONS",
                    "generatedAt": event.get("timestamp"),
                    "userPreferences": user.preferences.model_dump(by_alias=True),
                    "retryCount": attempt.retry_count,
                },
            )
        )
        return ProcessingOutcome.HANDLED
