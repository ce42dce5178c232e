"""
Dependency injection services.

Provides type aliases and provider functions for FastAPI dependency injection.
"""

from infrastructure.services.dependencies import (
    SettingsDep,
    NotificationStoreDep,
)
from infrastructure.services.providers import (
    get_settings,
    get_notification_store,
)

__all__ = [
    "SettingsDep",
    "NotificationStoreDep",
    "get_settings",
    "get_notification_store",
]
