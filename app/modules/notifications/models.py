"""Notification domain models.

Notifications are created once and then only have their read/sent status
and metadata updated. ``type`` and ``content`` are fixed at creation.
"""

import base64
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class NotificationType(str, Enum):
    """Kind of notification; selects the email template and triggers."""

    PROMOTION = "promotion"
    ORDER_UPDATE = "order_update"
    RECOMMENDATION = "recommendation"
    USER_UPDATE = "user_update"
    EMAIL = "email"


class NotificationPriority(str, Enum):
    """Informational routing tag mirroring the consumer group."""

    CRITICAL = "critical"
    STANDARD = "standard"


class Notification(BaseModel):
    """A persisted notification.

    Attributes:
        id: Opaque identifier assigned by the store
        user_id: Owning user
        email: Recipient resolved at creation; None means no dispatch
        type: NotificationType
        content: JSON-serializable payload, shape depends on ``type``
        priority: NotificationPriority
        metadata: Retry counters, batch ids, tracking id, message id, timestamps
        email_sent: True only after a confirmed dispatch
        read: Set by the read endpoints and the tracking pixel
        sent_at: Set when dispatch is confirmed or intentionally suppressed
        created_at: Set by the store
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
    )

    id: Optional[str] = None
    user_id: str
    email: Optional[str] = None
    type: NotificationType
    content: Any
    priority: NotificationPriority = NotificationPriority.STANDARD
    metadata: Dict[str, Any] = Field(default_factory=dict)
    email_sent: bool = False
    read: bool = False
    sent_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def tracking_id(self) -> Optional[str]:
        return self.metadata.get("trackingId")


class NotificationUpdate(BaseModel):
    """The only mutations allowed on an existing notification.

    ``metadata`` is merged into the stored metadata, never replacing it.
    """

    read: Optional[bool] = None
    email_sent: Optional[bool] = None
    sent_at: Optional[datetime] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def apply(self, notification: Notification) -> Notification:
        """Return a copy of ``notification`` with this update applied."""
        changes: Dict[str, Any] = {}
        if self.read is not None:
            changes["read"] = self.read
        if self.email_sent is not None:
            changes["email_sent"] = self.email_sent
        if self.sent_at is not None:
            changes["sent_at"] = self.sent_at
        if self.metadata:
            changes["metadata"] = {**notification.metadata, **self.metadata}
        return notification.model_copy(update=changes, deep=True)


@dataclass(frozen=True)
class MessageContext:
    """Bus coordinates of the record being processed.

    Attributes:
        topic: Source topic
        partition: Source partition
        offset: Offset within the partition
        raw: Original record bytes, preserved for dead lettering
    """

    topic: str
    partition: int
    offset: int
    raw: Optional[bytes] = None

    @property
    def key(self) -> str:
        return f"{self.topic}-{self.partition}-{self.offset}"


@dataclass(frozen=True)
class DeadLetterEnvelope:
    """Record published to the dead letter topic.

    The key is ``{originalTopic}-{partition}-{offset}`` and the value carries
    the original bytes base64 encoded together with the failure reason.
    """

    original_topic: str
    partition: int
    offset: int
    original_message: bytes
    reason: str
    timestamp: datetime

    @property
    def key(self) -> str:
        return f"{self.original_topic}-{self.partition}-{self.offset}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "originalMessage": base64.b64encode(self.original_message).decode("ascii"),
            "metadata": {
                "originalTopic": self.original_topic,
                "partition": self.partition,
                "offset": self.offset,
                "reason": self.reason,
            },
            "timestamp": self.timestamp.isoformat().replace("+00:00", "Z"),
        }

    def to_bytes(self) -> bytes:
        return json.dumps(self.to_dict()).encode("utf-8")
