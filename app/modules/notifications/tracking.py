"""Read receipts: explicit mark-as-read and email open tracking."""

import base64
from typing import Optional, Sequence

from infrastructure.logging import get_module_logger
from modules.notifications.models import (
    Notification,
    NotificationPriority,
    NotificationUpdate,
    utc_now,
)
from modules.notifications.store import NotificationFilter, NotificationStore

logger = get_module_logger()

# 1x1 transparent GIF
TRANSPARENT_PIXEL = base64.b64decode(
    "R0lGODlhAQABAIAAAAAAAP///yH5BAEAAAAALAAAAAABAAEAAAIBRAA7"
)


def _read_update() -> NotificationUpdate:
    return NotificationUpdate(read=True, metadata={"readAt": utc_now().isoformat()})


def track_open(store: NotificationStore, tracking_id: str) -> Optional[Notification]:
    """Mark the notification carrying ``tracking_id`` as read.

    Unknown tracking ids change nothing.

    Returns:
        The updated notification, or None if no notification matched
    """
    matches = store.find(NotificationFilter(tracking_id=tracking_id), limit=1)
    if not matches:
        logger.info("tracking_id_unknown", tracking_id=tracking_id)
        return None

    notification = matches[0]
    if notification.read:
        return notification

    updated = store.update(notification.id, _read_update())
    logger.info(
        "email_opened",
        notification_id=updated.id,
        user_id=updated.user_id,
        tracking_id=tracking_id,
    )
    return updated


def mark_read(
    store: NotificationStore,
    user_id: str,
    priority: Optional[NotificationPriority] = None,
    notification_ids: Optional[Sequence[str]] = None,
) -> int:
    """Mark a user's unread notifications as read.

    Args:
        store: Notification store
        user_id: Owning user
        priority: Only notifications with this priority
        notification_ids: Only these notifications

    Returns:
        Number of notifications updated
    """
    unread = store.find(
        NotificationFilter(
            user_id=user_id,
            priority=priority,
            read=False,
            ids=list(notification_ids) if notification_ids else None,
        )
    )
    for notification in unread:
        store.update(notification.id, _read_update())

    logger.info("notifications_marked_read", user_id=user_id, count=len(unread))
    return len(unread)
