"""Unit tests for create_mailer."""

import pytest

from infrastructure.configuration.integrations import MailerSettings
from integrations.mailer import MailerError, SendGridMailer, SmtpMailer, create_mailer


@pytest.mark.unit
class TestCreateMailer:
    def test_smtp_backend(self):
        mailer = create_mailer(
            MailerSettings(MAILER_BACKEND="smtp", SMTP_HOST="relay.test", SMTP_PORT=2525)
        )

        assert isinstance(mailer, SmtpMailer)
        assert mailer.host == "relay.test"
        assert mailer.port == 2525

    def test_sendgrid_backend(self):
        mailer = create_mailer(
            MailerSettings(MAILER_BACKEND="SendGrid", SENDGRID_API_KEY="SG.test")
        )

        assert isinstance(mailer, SendGridMailer)

    def test_sendgrid_without_key_fails(self):
        with pytest.raises(MailerError, match="SENDGRID_API_KEY"):
            create_mailer(MailerSettings(MAILER_BACKEND="sendgrid", SENDGRID_API_KEY=None))

    def test_unknown_backend_fails(self):
        with pytest.raises(MailerError, match="Unknown mailer backend"):
            create_mailer(MailerSettings(MAILER_BACKEND="pigeon"))
