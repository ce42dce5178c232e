"""
Type aliases for FastAPI dependency injection.

Provides annotated type hints for common infrastructure dependencies.
"""

from typing import Annotated
from fastapi import Depends
from infrastructure.configuration import Settings
from infrastructure.services.providers import get_notification_store, get_settings
from modules.notifications.store import NotificationStore

# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Notification store dependency, resolved from the pipeline context on app.state
NotificationStoreDep = Annotated[NotificationStore, Depends(get_notification_store)]

__all__ = [
    "SettingsDep",
    "NotificationStoreDep",
]
