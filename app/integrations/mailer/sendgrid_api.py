"""SendGrid mailer."""

import json
from typing import Any, Optional

from python_http_client.exceptions import HTTPError
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult
from integrations.mailer.base import OutboundEmail

logger = get_module_logger()


def _extract_error_details(body: Any) -> Optional[str]:
    """Human readable description of a SendGrid error payload."""
    if body in (None, b"", ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    try:
        parsed = json.loads(body) if isinstance(body, str) else body
    except json.JSONDecodeError:
        return body

    if isinstance(parsed, dict) and isinstance(parsed.get("errors"), list):
        messages = [
            str(item["message"])
            for item in parsed["errors"]
            if isinstance(item, dict) and item.get("message")
        ]
        if messages:
            return "; ".join(messages)
    return str(parsed)


class SendGridMailer:
    """Send messages through the SendGrid v3 API.

    Args:
        api_key: SendGrid API key
        client: Optional preconfigured SendGridAPIClient
    """

    def __init__(self, api_key: str, client: Optional[SendGridAPIClient] = None):
        self.client = client or SendGridAPIClient(api_key)

    def send(self, email: OutboundEmail) -> OperationResult:
        message = Mail(
            from_email=email.sender,
            to_emails=email.to,
            subject=email.subject,
            plain_text_content=email.text,
            html_content=email.html,
        )

        try:
            response = self.client.send(message)
        except HTTPError as exc:
            details = _extract_error_details(getattr(exc, "body", None))
            status_code = getattr(exc, "status_code", None)
            logger.error(
                "sendgrid_send_failed",
                to=email.to,
                status_code=status_code,
                error=details or str(exc),
            )
            if isinstance(status_code, int) and (
                status_code == 429 or status_code >= 500
            ):
                return OperationResult.transient_error(
                    f"SendGrid unavailable ({status_code})", error_code="SERVER_ERROR"
                )
            return OperationResult.permanent_error(
                f"SendGrid rejected message: {details or exc}",
                error_code="SENDGRID_REJECTED",
            )
        except OSError as exc:
            logger.error("sendgrid_send_failed", to=email.to, error=str(exc))
            return OperationResult.transient_error(
                f"SendGrid connection error: {exc}", error_code="CONNECTION_ERROR"
            )

        status_code = getattr(response, "status_code", None)
        if not isinstance(status_code, int) or not 200 <= status_code < 300:
            details = _extract_error_details(getattr(response, "body", None))
            logger.error(
                "sendgrid_unexpected_response",
                to=email.to,
                status_code=status_code,
                error=details,
            )
            return OperationResult.permanent_error(
                f"SendGrid responded with status {status_code}",
                error_code="SENDGRID_REJECTED",
            )

        headers = getattr(response, "headers", None) or {}
        message_id = headers.get("X-Message-Id")
        logger.info("sendgrid_message_sent", to=email.to, message_id=message_id)
        return OperationResult.success(data={"messageId": message_id})
