"""Periodic delivery of pending recommendation emails.

Pending records (``type=recommendation``, ``email_sent`` False, no
``sent_at``) are sent in batches; the records of one batch are dispatched
concurrently and the next batch starts once the previous one finished.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List

from infrastructure.logging import get_module_logger
from integrations.users import UserDirectoryClient, UserDirectoryError
from modules.notifications.dispatcher import (
    EmailDispatchError,
    EmailDispatcher,
    mark_dispatched,
)
from modules.notifications.models import (
    Notification,
    NotificationType,
    NotificationUpdate,
    utc_now,
)
from modules.notifications.store import NotificationFilter, NotificationStore

logger = get_module_logger()

RECOMMENDATION_SUBJECT = "Your Personalized Product Recommendations"

SENT = "sent"
SUPPRESSED = "suppressed"
INVALID_EMAIL = "invalid_email"
FAILED = "failed"

PENDING_RECOMMENDATIONS = NotificationFilter(
    type=NotificationType.RECOMMENDATION, email_sent=False, unsent_only=True
)


class RecommendationFlush:
    """Email recorded recommendations that have not been sent yet.

    Args:
        store: Notification store
        directory: Users service client
        dispatcher: Email dispatcher
        limit: Records picked per run
        concurrency: Records dispatched in parallel per batch
    """

    def __init__(
        self,
        store: NotificationStore,
        directory: UserDirectoryClient,
        dispatcher: EmailDispatcher,
        limit: int = 10,
        concurrency: int = 5,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.store = store
        self.directory = directory
        self.dispatcher = dispatcher
        self.limit = limit
        self.concurrency = concurrency

    def run(self) -> Dict[str, int]:
        """Run one flush.

        Returns:
            Count of records per outcome (sent, suppressed, invalid_email, failed)
        """
        pending = self.store.find(PENDING_RECOMMENDATIONS, limit=self.limit)
        stats = {SENT: 0, SUPPRESSED: 0, INVALID_EMAIL: 0, FAILED: 0}
        if not pending:
            logger.debug("recommendation_flush_idle")
            return stats

        for batch in self._batches(pending):
            with ThreadPoolExecutor(
                max_workers=len(batch), thread_name_prefix="recommendation-flush"
            ) as executor:
                for outcome in executor.map(self._deliver, batch):
                    stats[outcome] += 1

        logger.info("recommendation_flush_completed", pending=len(pending), **stats)
        return stats

    def _batches(self, records: List[Notification]) -> List[List[Notification]]:
        return [
            records[i : i + self.concurrency]
            for i in range(0, len(records), self.concurrency)
        ]

    def _deliver(self, notification: Notification) -> str:
        try:
            return self._deliver_one(notification)
        except Exception as exc:
            logger.error(
                "recommendation_delivery_failed",
                notification_id=notification.id,
                error=str(exc),
                exc_info=True,
            )
            return FAILED

    def _deliver_one(self, notification: Notification) -> str:
        try:
            user = self.directory.get_user(notification.user_id)
        except UserDirectoryError as exc:
            logger.warning(
                "recommendation_user_lookup_failed",
                notification_id=notification.id,
                error=str(exc),
            )
            return FAILED

        if user.preferences.recommendations_opted_out:
            self.store.update(
                notification.id,
                NotificationUpdate(
                    email_sent=False,
                    sent_at=utc_now(),
                    metadata={"emailSuppressed": "opted_out"},
                ),
            )
            logger.info(
                "recommendation_email_suppressed",
                notification_id=notification.id,
                reason="opted_out",
            )
            return SUPPRESSED

        if not user.has_valid_email:
            logger.error(
                "recommendation_invalid_email",
                notification_id=notification.id,
                user_id=user.id,
            )
            return INVALID_EMAIL

        try:
            receipt = self.dispatcher.send(
                user.id,
                RECOMMENDATION_SUBJECT,
                NotificationType.RECOMMENDATION,
                notification.content,
                user=user,
            )
        except EmailDispatchError as exc:
            logger.warning(
                "recommendation_email_failed",
                notification_id=notification.id,
                error=str(exc),
            )
            return FAILED

        mark_dispatched(self.store, notification, receipt)
        return SENT
