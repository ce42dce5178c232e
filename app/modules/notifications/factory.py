"""Notification store factory for selecting the backend from configuration."""

from typing import Any, Callable, Optional

from infrastructure.configuration import Settings
from infrastructure.logging import get_module_logger
from integrations.aws.dynamodb import get_dynamodb_table
from modules.notifications.dynamodb_store import DynamoDBNotificationStore
from modules.notifications.store import InMemoryNotificationStore, NotificationStore

logger = get_module_logger()


def create_notification_store(
    settings: Settings,
    backend: Optional[str] = None,
    table_factory: Optional[Callable[..., Any]] = None,
) -> NotificationStore:
    """Create a notification store for the configured backend.

    Args:
        settings: Application settings
        backend: Optional override of NOTIFICATION_STORE_BACKEND
        table_factory: Optional override for binding the DynamoDB table

    Returns:
        NotificationStore instance

    Raises:
        ValueError: If backend is unknown
    """
    backend = (backend or settings.notifications.NOTIFICATION_STORE_BACKEND).lower()

    if backend == "memory":
        logger.info("notification_store_created", backend="memory")
        return InMemoryNotificationStore()

    if backend == "dynamodb":
        table_name = settings.notifications.NOTIFICATIONS_TABLE_NAME
        table = (table_factory or get_dynamodb_table)(settings.aws, table_name)
        logger.info("notification_store_created", backend="dynamodb", table=table_name)
        return DynamoDBNotificationStore(table)

    raise ValueError(
        f"Unknown notification store backend: {backend}. "
        "Valid options: 'memory', 'dynamodb'"
    )
