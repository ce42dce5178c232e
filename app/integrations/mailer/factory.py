"""Mailer factory for selecting the transport from configuration."""

from infrastructure.configuration.integrations import MailerSettings
from infrastructure.logging import get_module_logger
from integrations.mailer.base import Mailer, MailerError
from integrations.mailer.sendgrid_api import SendGridMailer
from integrations.mailer.smtp import SmtpMailer

logger = get_module_logger()


def create_mailer(settings: MailerSettings) -> Mailer:
    """Create a mailer for the configured backend.

    Args:
        settings: Mailer settings

    Returns:
        Mailer instance

    Raises:
        MailerError: If the backend is unknown or missing credentials
    """
    backend = settings.MAILER_BACKEND.lower()

    if backend == "smtp":
        logger.info(
            "mailer_created",
            backend="smtp",
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
        )
        return SmtpMailer(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            secure=settings.SMTP_SECURE,
            user=settings.SMTP_USER,
            password=settings.SMTP_PASS,
            timeout=settings.SMTP_TIMEOUT_SECONDS,
        )

    if backend == "sendgrid":
        if not settings.SENDGRID_API_KEY:
            raise MailerError("SENDGRID_API_KEY is required for the sendgrid backend")
        logger.info("mailer_created", backend="sendgrid")
        return SendGridMailer(api_key=settings.SENDGRID_API_KEY)

    raise MailerError(
        f"Unknown mailer backend: {settings.MAILER_BACKEND}. "
        "Valid options: 'smtp', 'sendgrid'"
    )
