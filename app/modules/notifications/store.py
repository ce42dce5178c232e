"""Notification storage.

Protocol-based storage so the in-memory backend (development, tests) and the
DynamoDB backend (production) are interchangeable.
"""

import threading
import uuid
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from infrastructure.logging import get_module_logger
from modules.notifications.models import (
    Notification,
    NotificationPriority,
    NotificationType,
    NotificationUpdate,
    utc_now,
)

logger = get_module_logger()


class NotificationNotFoundError(Exception):
    """Raised when updating a notification id the store does not hold."""


@dataclass(frozen=True)
class NotificationFilter:
    """Criteria for finding notifications. Unset fields match anything.

    Attributes:
        user_id: Owning user
        type: Notification type
        priority: Notification priority
        read: Read flag
        email_sent: Email sent flag
        unsent_only: Only records without ``sent_at``
        tracking_id: ``metadata.trackingId``
        ids: Restrict to these notification ids
    """

    user_id: Optional[str] = None
    type: Optional[NotificationType] = None
    priority: Optional[NotificationPriority] = None
    read: Optional[bool] = None
    email_sent: Optional[bool] = None
    unsent_only: bool = False
    tracking_id: Optional[str] = None
    ids: Optional[Sequence[str]] = None

    def matches(self, notification: Notification) -> bool:
        if self.user_id is not None and notification.user_id != self.user_id:
            return False
        if self.type is not None and notification.type != self.type:
            return False
        if self.priority is not None and notification.priority != self.priority:
            return False
        if self.read is not None and notification.read != self.read:
            return False
        if self.email_sent is not None and notification.email_sent != self.email_sent:
            return False
        if self.unsent_only and notification.sent_at is not None:
            return False
        if self.tracking_id is not None and notification.tracking_id != self.tracking_id:
            return False
        if self.ids is not None and notification.id not in self.ids:
            return False
        return True


class NotificationStore(Protocol):
    """Storage interface for notifications.

    Methods:
        create: Persist a new notification, assigning id and created_at
        get: Fetch one notification by id
        find: Notifications matching a filter, with limit/offset
        count: Number of notifications matching a filter
        update: Apply a NotificationUpdate to one notification
    """

    def create(self, notification: Notification) -> Notification: ...

    def get(self, notification_id: str) -> Optional[Notification]: ...

    def find(
        self,
        criteria: NotificationFilter,
        limit: Optional[int] = None,
        offset: int = 0,
        newest_first: bool = False,
    ) -> List[Notification]: ...

    def count(self, criteria: NotificationFilter) -> int: ...

    def update(
        self, notification_id: str, update: NotificationUpdate
    ) -> Notification: ...


class InMemoryNotificationStore:
    """Thread-safe in-memory notification store.

    Records are copied on the way in and out so callers never share mutable
    state with the store.
    """

    def __init__(self) -> None:
        self._records: dict[str, Notification] = {}
        self._lock = threading.Lock()

    def create(self, notification: Notification) -> Notification:
        record = notification.model_copy(
            update={"id": uuid.uuid4().hex, "created_at": utc_now()}, deep=True
        )
        with self._lock:
            self._records[record.id] = record

        logger.debug(
            "notification_created",
            notification_id=record.id,
            user_id=record.user_id,
            type=record.type.value,
        )
        return record.model_copy(deep=True)

    def get(self, notification_id: str) -> Optional[Notification]:
        with self._lock:
            record = self._records.get(notification_id)
        return record.model_copy(deep=True) if record else None

    def find(
        self,
        criteria: NotificationFilter,
        limit: Optional[int] = None,
        offset: int = 0,
        newest_first: bool = False,
    ) -> List[Notification]:
        with self._lock:
            matches = [r for r in self._records.values() if criteria.matches(r)]

        matches.sort(key=lambda r: r.created_at, reverse=newest_first)
        end = offset + limit if limit is not None else None
        return [r.model_copy(deep=True) for r in matches[offset:end]]

    def count(self, criteria: NotificationFilter) -> int:
        with self._lock:
            return sum(1 for r in self._records.values() if criteria.matches(r))

    def update(self, notification_id: str, update: NotificationUpdate) -> Notification:
        with self._lock:
            record = self._records.get(notification_id)
            if record is None:
                raise NotificationNotFoundError(notification_id)
            updated = update.apply(record)
            self._records[notification_id] = updated

        logger.debug(
            "notification_updated",
            notification_id=notification_id,
            fields=sorted(update.model_dump(exclude_defaults=True).keys()),
        )
        return updated.model_copy(deep=True)

    def clear(self) -> None:
        """Clear all records (for testing)."""
        with self._lock:
            self._records.clear()
