"""Email dispatch for notifications.

Resolves the recipient through the users service, renders the template for
the notification type with an open tracking pixel, and hands the message
to the configured mailer.
"""

import uuid
from dataclasses import dataclass
from typing import Any, Optional

from infrastructure.logging import get_module_logger
from integrations.mailer import Mailer, OutboundEmail
from integrations.users import User, UserDirectoryClient, UserDirectoryError
from modules.notifications.models import (
    Notification,
    NotificationType,
    NotificationUpdate,
    utc_now,
)
from modules.notifications.store import NotificationStore
from modules.notifications.templates import (
    render_email_html,
    render_email_text,
    tracking_url,
)

logger = get_module_logger()


class EmailDispatchError(Exception):
    """Raised when an email could not be dispatched.

    Attributes:
        user_id: Intended recipient
        retryable: Whether the underlying failure was transient
    """

    def __init__(self, message: str, user_id: str, retryable: bool = False):
        super().__init__(message)
        self.user_id = user_id
        self.retryable = retryable


@dataclass(frozen=True)
class DispatchReceipt:
    """Outcome of a confirmed dispatch."""

    success: bool
    message_id: Optional[str]
    tracking_id: str


def new_tracking_id() -> str:
    return uuid.uuid4().hex


class EmailDispatcher:
    """Send notification emails.

    Args:
        directory: Users service client for recipient lookup
        mailer: Transport
        sender: From address
        service_url: Public base URL used to build tracking links
    """

    def __init__(
        self,
        directory: UserDirectoryClient,
        mailer: Mailer,
        sender: str,
        service_url: str,
    ) -> None:
        self.directory = directory
        self.mailer = mailer
        self.sender = sender
        self.service_url = service_url

    def send(
        self,
        user_id: str,
        subject: str,
        notification_type: NotificationType,
        content: Any,
        user: Optional[User] = None,
        tracking_id: Optional[str] = None,
    ) -> DispatchReceipt:
        """Render and send one notification email.

        Args:
            user_id: Recipient user id
            subject: Subject line
            notification_type: Selects the template
            content: Notification content
            user: Already resolved user, skips the directory lookup
            tracking_id: Tracking id to embed; generated when omitted

        Returns:
            DispatchReceipt with the mailer message id and tracking id

        Raises:
            EmailDispatchError: If the user cannot be resolved, has no email,
                or the mailer reports a failure
        """
        if user is None:
            try:
                user = self.directory.get_user(user_id)
            except UserDirectoryError as exc:
                raise EmailDispatchError(
                    f"Could not resolve recipient: {exc}", user_id, retryable=True
                ) from exc

        if not user.email:
            raise EmailDispatchError("Recipient has no email address", user_id)

        tracking_id = tracking_id or new_tracking_id()
        email = OutboundEmail(
            sender=self.sender,
            to=user.email,
            subject=subject,
            text=render_email_text(content),
            html=render_email_html(
                notification_type,
                content,
                user.display_name,
                tracking_url(self.service_url, tracking_id),
            ),
        )

        logger.info(
            "email_dispatch_started",
            user_id=user_id,
            type=notification_type.value,
            tracking_id=tracking_id,
        )
        result = self.mailer.send(email)
        if not result.is_success:
            raise EmailDispatchError(
                result.message, user_id, retryable=result.is_retryable
            )

        message_id = (result.data or {}).get("messageId")
        logger.info(
            "email_dispatched",
            user_id=user_id,
            type=notification_type.value,
            message_id=message_id,
            tracking_id=tracking_id,
        )
        return DispatchReceipt(success=True, message_id=message_id, tracking_id=tracking_id)


def mark_dispatched(
    store: NotificationStore, notification: Notification, receipt: DispatchReceipt
) -> Notification:
    """Record a confirmed dispatch on the stored notification."""
    return store.update(
        notification.id,
        NotificationUpdate(
            email_sent=True,
            sent_at=utc_now(),
            metadata={
                "trackingId": receipt.tracking_id,
                "messageId": receipt.message_id,
            },
        ),
    )
