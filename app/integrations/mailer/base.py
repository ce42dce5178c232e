"""Mailer contract shared by every transport."""

from dataclasses import dataclass
from typing import Protocol

from infrastructure.operations import OperationResult


@dataclass(frozen=True)
class OutboundEmail:
    """A rendered email ready for a transport.

    Fields:
        sender: From address
        to: Recipient address
        subject: Subject line
        text: Plain text part
        html: HTML part
    """

    sender: str
    to: str
    subject: str
    text: str
    html: str


class Mailer(Protocol):
    """Email transport.

    ``send`` never raises for delivery failures; it returns an
    OperationResult whose ``data`` holds ``{"messageId": ...}`` on success.
    """

    def send(self, email: OutboundEmail) -> OperationResult: ...


class MailerError(Exception):
    """Raised when a mailer cannot be constructed from configuration."""
