"""Users service integration."""

from integrations.users.client import UserDirectoryClient, UserDirectoryError
from integrations.users.models import (
    DEFAULT_DISPLAY_NAME,
    User,
    UserPreferences,
    is_valid_email,
)

__all__ = [
    "DEFAULT_DISPLAY_NAME",
    "User",
    "UserDirectoryClient",
    "UserDirectoryError",
    "UserPreferences",
    "is_valid_email",
]
