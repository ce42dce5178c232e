"""Infrastructure configuration module - public API.

This module provides centralized configuration management for the
notification service using Pydantic BaseSettings with domain-based
organization.

Exports:
    Settings: Main settings class (for testing/overrides)
    RetrySettings: Retry policy settings class (for testing)

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    retries = settings.retry.ORDER_MAX_RETRIES
    region = settings.aws.AWS_REGION

    if settings.is_production:
        # Production-specific logic...
    ```
"""

from infrastructure.configuration.settings import Settings
from infrastructure.configuration.infrastructure.retry import RetrySettings

__all__ = ["Settings", "RetrySettings"]
