"""Outbound email integration settings."""

from typing import Optional

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class MailerSettings(IntegrationSettings):
    """Mailer transport configuration.

    Environment Variables:
        MAILER_BACKEND: 'smtp' or 'sendgrid' (default: smtp)
        SENDER_EMAIL: From address on every message
        SMTP_HOST: SMTP relay host
        SMTP_PORT: SMTP relay port (default: 587)
        SMTP_SECURE: Use implicit TLS (SMTP over SSL) instead of STARTTLS
        SMTP_USER: SMTP username
        SMTP_PASS: SMTP password
        SMTP_TIMEOUT_SECONDS: Socket timeout for SMTP sessions (default: 10)
        SENDGRID_API_KEY: API key when MAILER_BACKEND is 'sendgrid'

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        if settings.mailer.MAILER_BACKEND == "sendgrid":
            api_key = settings.mailer.SENDGRID_API_KEY
        ```
    """

    MAILER_BACKEND: str = Field(default="smtp", alias="MAILER_BACKEND")
    SENDER_EMAIL: str = Field(
        default="notifications@example.com", alias="SENDER_EMAIL"
    )
    SMTP_HOST: str = Field(default="localhost", alias="SMTP_HOST")
    SMTP_PORT: int = Field(default=587, alias="SMTP_PORT")
    SMTP_SECURE: bool = Field(default=False, alias="SMTP_SECURE")
    SMTP_USER: Optional[str] = Field(default=None, alias="SMTP_USER")
    SMTP_PASS: Optional[str] = Field(default=None, alias="SMTP_PASS")
    SMTP_TIMEOUT_SECONDS: float = Field(default=10.0, alias="SMTP_TIMEOUT_SECONDS")
    SENDGRID_API_KEY: Optional[str] = Field(default=None, alias="SENDGRID_API_KEY")
