"""SMTP mailer backed by smtplib."""

import smtplib
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Callable, Optional

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult, classify_smtp_error
from integrations.mailer.base import OutboundEmail

logger = get_module_logger()


class SmtpMailer:
    """Send multipart (text + html) messages through an SMTP relay.

    With ``secure`` the connection uses implicit TLS; otherwise STARTTLS is
    negotiated whenever the server offers it.

    Args:
        host: SMTP relay host
        port: SMTP relay port
        secure: Use SMTP over SSL
        user: Optional login
        password: Optional password
        timeout: Socket timeout in seconds
        connection_factory: Optional override returning a connected smtplib client
    """

    def __init__(
        self,
        host: str,
        port: int = 587,
        secure: bool = False,
        user: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 10.0,
        connection_factory: Optional[Callable[[], smtplib.SMTP]] = None,
    ) -> None:
        self.host = host
        self.port = port
        self.secure = secure
        self.user = user
        self.password = password
        self.timeout = timeout
        self._connection_factory = connection_factory or self._connect

    def _connect(self) -> smtplib.SMTP:
        if self.secure:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        return smtplib.SMTP(self.host, self.port, timeout=self.timeout)

    def _build_message(self, email: OutboundEmail) -> EmailMessage:
        domain = email.sender.rsplit("@", 1)[-1] if "@" in email.sender else None
        message = EmailMessage()
        message["From"] = email.sender
        message["To"] = email.to
        message["Subject"] = email.subject
        message["Message-ID"] = make_msgid(domain=domain)
        message.set_content(email.text)
        message.add_alternative(email.html, subtype="html")
        return message

    def send(self, email: OutboundEmail) -> OperationResult:
        try:
            message = self._build_message(email)
        except (ValueError, TypeError) as exc:
            logger.error("smtp_message_invalid", to=email.to, error=str(exc))
            return OperationResult.permanent_error(
                f"Invalid message: {exc}", error_code="INVALID_MESSAGE"
            )
        message_id = message["Message-ID"]

        try:
            with self._connection_factory() as smtp:
                if not self.secure:
                    smtp.ehlo()
                    if smtp.has_extn("starttls"):
                        smtp.starttls()
                        smtp.ehlo()
                if self.user and self.password:
                    smtp.login(self.user, self.password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            result = classify_smtp_error(exc)
            logger.error(
                "smtp_send_failed",
                to=email.to,
                error=result.message,
                error_code=result.error_code,
            )
            return result

        logger.info("smtp_message_sent", to=email.to, message_id=message_id)
        return OperationResult.success(data={"messageId": message_id})
