"""Infrastructure modules for the notification service.

Centralized infrastructure components:
- configuration: Settings management (Settings, RetrySettings)
- logging: Structured logging (get_module_logger, bind_message_context)
- operations: Operation results and error classification
- resilience: Bounded retry with exponential backoff
- services: Dependency injection services (SettingsDep, NotificationStoreDep, get_settings)
"""

# Observability
from infrastructure.logging import get_module_logger

# Operations
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    # Observability
    "get_module_logger",
    # Operations
    "OperationResult",
    "OperationStatus",
]
