"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for core infrastructure services.
"""

from functools import lru_cache

from fastapi import Request

from infrastructure.configuration import Settings
from modules.notifications.store import NotificationStore


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    This is the single source of truth for settings across the entire application.
    The @lru_cache decorator ensures only ONE instance is created per process,
    even if called from multiple packages.

    Infrastructure packages should use this directly:
        from infrastructure.services.providers import get_settings
        settings = get_settings()

    Route handlers should use the DI type alias for testability:
        from infrastructure.services import SettingsDep
        @router.get("/config")
        def get_config(settings: SettingsDep):
            return settings.model_dump()

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


def get_notification_store(request: Request) -> NotificationStore:
    """Provider for the notification store owned by the running pipeline.

    The store lives on the pipeline context built during application
    startup, so it is read from ``app.state`` rather than cached here.

    Returns:
        NotificationStore: The store shared by consumers, jobs and routes
    """
    return request.app.state.pipeline.store
