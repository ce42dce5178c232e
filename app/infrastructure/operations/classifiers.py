"""Error classifiers for integration exceptions.

Converts exceptions raised by the HTTP, SMTP and AWS client libraries into
standardized OperationResult objects.

Key Functions:
- classify_http_error(): requests exceptions → OperationResult
- classify_smtp_error(): smtplib/socket exceptions → OperationResult
- classify_aws_error(): AWS SDK errors → OperationResult

Usage:
    from infrastructure.operations.classifiers import classify_http_error

    try:
        response = session.get(url, timeout=5)
        response.raise_for_status()
    except requests.RequestException as exc:
        return classify_http_error(exc)
"""

import smtplib
from typing import Optional

import requests
from botocore.exceptions import ClientError

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus


def classify_http_error(exc: Exception) -> OperationResult:
    """Classify requests exceptions into OperationResult.

    Status Code Mapping:
    - 429: Rate limiting → TRANSIENT_ERROR with retry_after
    - 404: Not found → NOT_FOUND
    - 401/403: Auth failure → PERMANENT_ERROR
    - 5xx: Server error → TRANSIENT_ERROR
    - Other 4xx → PERMANENT_ERROR
    - Timeouts and connection failures → TRANSIENT_ERROR

    Args:
        exc: Exception raised while calling an HTTP service

    Returns:
        OperationResult with appropriate status, message, error_code, and
        retry_after (if applicable)
    """
    if isinstance(exc, requests.Timeout):
        return OperationResult.transient_error(
            f"Request timed out: {exc}", error_code="TIMEOUT"
        )

    if not isinstance(exc, requests.HTTPError) or exc.response is None:
        return OperationResult.transient_error(
            f"Connection error: {type(exc).__name__}: {str(exc)}",
            error_code="CONNECTION_ERROR",
        )

    status_code: Optional[int] = exc.response.status_code

    if status_code == 429:
        retry_after = 60
        header_value = exc.response.headers.get("Retry-After")
        if header_value:
            try:
                retry_after = int(header_value)
            except (ValueError, TypeError):
                pass  # Use default if header is malformed

        return OperationResult.error(
            OperationStatus.TRANSIENT_ERROR,
            "HTTP service rate limited",
            error_code="RATE_LIMITED",
            retry_after=retry_after,
        )

    if status_code == 404:
        return OperationResult.error(
            OperationStatus.NOT_FOUND,
            "HTTP resource not found",
            error_code="NOT_FOUND",
        )

    if status_code in (401, 403):
        return OperationResult.permanent_error(
            f"HTTP service rejected credentials ({status_code})",
            error_code="UNAUTHORIZED",
        )

    if status_code and 500 <= status_code < 600:
        return OperationResult.transient_error(
            f"HTTP server error ({status_code})",
            error_code="SERVER_ERROR",
        )

    return OperationResult.permanent_error(
        f"HTTP client error ({status_code}): {str(exc)}",
        error_code="HTTP_ERROR",
    )


def classify_smtp_error(exc: Exception) -> OperationResult:
    """Classify SMTP failures into OperationResult.

    4xx SMTP replies and socket level failures are transient; 5xx replies,
    refused recipients and authentication failures are permanent.

    Args:
        exc: Exception raised by smtplib or the underlying socket

    Returns:
        OperationResult describing the failure
    """
    if isinstance(exc, smtplib.SMTPAuthenticationError):
        return OperationResult.permanent_error(
            "SMTP authentication failed", error_code="UNAUTHORIZED"
        )

    if isinstance(exc, smtplib.SMTPRecipientsRefused):
        return OperationResult.permanent_error(
            f"SMTP recipients refused: {list(exc.recipients)}",
            error_code="RECIPIENT_REFUSED",
        )

    if isinstance(exc, smtplib.SMTPResponseException):
        if 400 <= exc.smtp_code < 500:
            return OperationResult.transient_error(
                f"SMTP temporary failure ({exc.smtp_code})",
                error_code="SMTP_TEMPORARY",
            )
        return OperationResult.permanent_error(
            f"SMTP rejected message ({exc.smtp_code})",
            error_code="SMTP_REJECTED",
        )

    return OperationResult.transient_error(
        f"SMTP connection error: {type(exc).__name__}: {str(exc)}",
        error_code="CONNECTION_ERROR",
    )


def classify_aws_error(exc: Exception) -> OperationResult:
    """Classify AWS SDK errors into OperationResult.

    Follows the AWS SDK convention of treating unknown errors as transient.

    Error Code Mapping:
    - Throttling / ProvisionedThroughputExceeded → TRANSIENT_ERROR
    - AccessDeniedException → PERMANENT_ERROR
    - ResourceNotFoundException → NOT_FOUND
    - ValidationException, ConditionalCheckFailedException → PERMANENT_ERROR
    - Other → TRANSIENT_ERROR

    Args:
        exc: Exception raised by boto3/botocore

    Returns:
        OperationResult with appropriate status and error_code
    """
    if not isinstance(exc, ClientError):
        return OperationResult.transient_error(
            f"AWS connection error: {type(exc).__name__}: {str(exc)}",
            error_code="CONNECTION_ERROR",
        )

    error_code = exc.response.get("Error", {}).get("Code", "Unknown")

    if error_code in (
        "ThrottlingException",
        "ProvisionedThroughputExceededException",
        "RequestLimitExceeded",
    ):
        return OperationResult.error(
            OperationStatus.TRANSIENT_ERROR,
            "AWS API throttled",
            error_code="RATE_LIMITED",
            retry_after=1,
        )

    if error_code == "AccessDeniedException":
        return OperationResult.permanent_error(
            "AWS API access denied", error_code="FORBIDDEN"
        )

    if error_code == "ResourceNotFoundException":
        return OperationResult.error(
            OperationStatus.NOT_FOUND,
            "AWS resource not found",
            error_code="NOT_FOUND",
        )

    if error_code in ("ValidationException", "ConditionalCheckFailedException"):
        return OperationResult.permanent_error(
            f"AWS request rejected: {error_code}", error_code="INVALID_REQUEST"
        )

    return OperationResult.transient_error(
        f"AWS client error: {error_code}", error_code="AWS_CLIENT_ERROR"
    )
