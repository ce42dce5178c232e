"""Email transports (SMTP and SendGrid)."""

from integrations.mailer.base import Mailer, MailerError, OutboundEmail
from integrations.mailer.factory import create_mailer
from integrations.mailer.sendgrid_api import SendGridMailer
from integrations.mailer.smtp import SmtpMailer

__all__ = [
    "Mailer",
    "MailerError",
    "OutboundEmail",
    "SendGridMailer",
    "SmtpMailer",
    "create_mailer",
]
