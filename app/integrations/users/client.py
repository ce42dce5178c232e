"""Users service HTTP client.

Looks up users by id and lists all users for the batch jobs. Responses may
wrap the payload under ``result``.

Usage:
    client = UserDirectoryClient(base_url="http://users:3001/api/v1/users")
    user = client.get_user("u-1")
"""

from typing import Any, Optional

import requests
from pydantic import ValidationError

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult, classify_http_error
from integrations.users.models import User

logger = get_module_logger()


class UserDirectoryError(Exception):
    """Raised when a user cannot be resolved.

    Attributes:
        result: Classified OperationResult describing the failure
    """

    def __init__(self, message: str, result: Optional[OperationResult] = None):
        super().__init__(message)
        self.result = result or OperationResult.transient_error(message)


def _unwrap(payload: Any) -> Any:
    if isinstance(payload, dict) and "result" in payload:
        return payload["result"]
    return payload


class UserDirectoryClient:
    """Client for the users service.

    Args:
        base_url: Users collection URL; a user is ``{base_url}/{user_id}``
        timeout: Request timeout in seconds
        session: Optional requests session (shared connection pool)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, url: str) -> Any:
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            result = classify_http_error(exc)
            logger.warning(
                "users_service_request_failed",
                url=url,
                error=result.message,
                error_code=result.error_code,
            )
            raise UserDirectoryError(result.message, result) from exc
        except ValueError as exc:
            # Body was not JSON
            raise UserDirectoryError(
                f"Invalid users service response: {exc}",
                OperationResult.transient_error(str(exc), error_code="INVALID_BODY"),
            ) from exc

    def get_user(self, user_id: str) -> User:
        """Fetch one user.

        Args:
            user_id: User identifier

        Returns:
            The resolved User

        Raises:
            UserDirectoryError: On timeout, non-2xx status or missing payload
        """
        payload = _unwrap(self._get(f"{self.base_url}/{user_id}"))
        if not isinstance(payload, dict) or not payload:
            raise UserDirectoryError(f"User {user_id} not found in users service")

        payload.setdefault("_id", user_id)
        try:
            user = User.model_validate(payload)
        except ValidationError as exc:
            raise UserDirectoryError(f"Malformed user {user_id}: {exc}") from exc

        logger.debug("user_resolved", user_id=user_id)
        return user

    def list_users(self) -> list[User]:
        """Fetch every user.

        Entries that fail validation are skipped and logged.

        Raises:
            UserDirectoryError: On transport failure or a non-list payload
        """
        payload = _unwrap(self._get(self.base_url))
        if not isinstance(payload, list):
            raise UserDirectoryError("Users service returned no user list")

        users: list[User] = []
        for entry in payload:
            try:
                users.append(User.model_validate(entry))
            except ValidationError as exc:
                logger.warning("user_entry_skipped", error=str(exc))
        logger.info("users_listed", count=len(users))
        return users
