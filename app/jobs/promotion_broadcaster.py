"""Periodic promotion broadcast.

Each tick samples eligible users (valid email, promotions not opted out)
and creates and emails one promotion notification per sampled user. A
failure for one user never affects the others.
"""

import random
import time
from typing import Optional

from infrastructure.logging import get_module_logger
from integrations.users import User, UserDirectoryClient
from modules.notifications.dispatcher import (
    EmailDispatchError,
    EmailDispatcher,
    mark_dispatched,
)
from modules.notifications.models import (
    Notification,
    NotificationPriority,
    NotificationType,
)
from modules.notifications.processors.product import PROMOTION_SUBJECT
from modules.notifications.store import NotificationStore

logger = get_module_logger()

PROMOTION_MESSAGE = "Check out our latest promotions! Limited time offers await you."
PROMOTION_EVENT_TYPE = "PROMOTIONAL_CAMPAIGN"


class PromotionBroadcaster:
    """Send a promotion to a random sample of eligible users.

    Args:
        store: Notification store
        directory: Users service client
        dispatcher: Email dispatcher
        sample_size: Users per tick
        rng: Random source, injectable for deterministic tests
    """

    def __init__(
        self,
        store: NotificationStore,
        directory: UserDirectoryClient,
        dispatcher: EmailDispatcher,
        sample_size: int = 10,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.store = store
        self.directory = directory
        self.dispatcher = dispatcher
        self.sample_size = sample_size
        self.rng = rng or random.Random()

    @staticmethod
    def is_eligible(user: User) -> bool:
        return user.has_valid_email and not user.preferences.promotions_opted_out

    def run(self) -> int:
        """Run one broadcast tick.

        Returns:
            Number of promotion notifications created

        Raises:
            UserDirectoryError: If the user list cannot be fetched
        """
        users = self.directory.list_users()
        eligible = [u for u in users if self.is_eligible(u)]
        if not eligible:
            logger.info("promotion_broadcast_skipped", reason="no_eligible_users")
            return 0

        sample = self.rng.sample(eligible, min(self.sample_size, len(eligible)))
        batch_id = f"PROMO_{int(time.time() * 1000)}"

        created = 0
        for user in sample:
            if self._notify(user, batch_id):
                created += 1

        logger.info(
            "promotion_broadcast_completed",
            batch_id=batch_id,
            eligible=len(eligible),
            sampled=len(sample),
            created=created,
        )
        return created

    def _notify(self, user: User, batch_id: str) -> bool:
        content = {
            "message": PROMOTION_MESSAGE,
            "eventType": PROMOTION_EVENT_TYPE,
            "name": user.display_name,
        }
        try:
            record = self.store.create(
                Notification(
                    user_id=user.id,
                    email=user.email,
                    type=NotificationType.PROMOTION,
                    content=content,
                    priority=NotificationPriority.STANDARD,
                    metadata={
                        "batchId": batch_id,
                        "isAutomated": True,
                        "userPreferences": user.preferences.model_dump(by_alias=True),
                    },
                )
            )
        except Exception as exc:
            logger.error(
                "promotion_notification_failed",
                user_id=user.id,
                error=str(exc),
                exc_info=True,
            )
            return False

        try:
            receipt = self.dispatcher.send(
                user.id,
                PROMOTION_SUBJECT.format(name=user.display_name),
                NotificationType.PROMOTION,
                content,
                user=user,
            )
            mark_dispatched(self.store, record, receipt)
        except EmailDispatchError as exc:
            logger.warning(
                "promotion_email_failed", user_id=user.id, error=str(exc)
            )
        except Exception as exc:
            logger.error(
                "promotion_status_update_failed",
                notification_id=record.id,
                error=str(exc),
                exc_info=True,
            )
        return True
