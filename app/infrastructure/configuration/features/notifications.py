"""Notifications feature settings."""

from pydantic import Field

from infrastructure.configuration.base import FeatureSettings


class NotificationsFeatureSettings(FeatureSettings):
    """Notification storage and batch job configuration.

    Environment Variables:
        NOTIFICATION_STORE_BACKEND: 'memory' or 'dynamodb' (default: memory)
        NOTIFICATIONS_TABLE_NAME: DynamoDB table for notifications
        BATCH_JOBS_ENABLED: Run the promotion and recommendation jobs (default: True)
        PROMOTION_INTERVAL_SECONDS: Promotion broadcast period (default: 300)
        PROMOTION_SAMPLE_SIZE: Users sampled per promotion tick (default: 10)
        RECOMMENDATION_FLUSH_INTERVAL_SECONDS: Flush period (default: 300)
        RECOMMENDATION_FLUSH_LIMIT: Records scanned per flush (default: 10)
        RECOMMENDATION_FLUSH_CONCURRENCY: Emails sent in parallel per batch (default: 5)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        if settings.notifications.BATCH_JOBS_ENABLED:
            interval = settings.notifications.PROMOTION_INTERVAL_SECONDS
        ```
    """

    NOTIFICATION_STORE_BACKEND: str = Field(
        default="memory", alias="NOTIFICATION_STORE_BACKEND"
    )
    NOTIFICATIONS_TABLE_NAME: str = Field(
        default="notifications", alias="NOTIFICATIONS_TABLE_NAME"
    )
    BATCH_JOBS_ENABLED: bool = Field(default=True, alias="BATCH_JOBS_ENABLED")
    PROMOTION_INTERVAL_SECONDS: int = Field(
        default=300, alias="PROMOTION_INTERVAL_SECONDS"
    )
    PROMOTION_SAMPLE_SIZE: int = Field(default=10, alias="PROMOTION_SAMPLE_SIZE")
    RECOMMENDATION_FLUSH_INTERVAL_SECONDS: int = Field(
        default=300, alias="RECOMMENDATION_FLUSH_INTERVAL_SECONDS"
    )
    RECOMMENDATION_FLUSH_LIMIT: int = Field(
        default=10, alias="RECOMMENDATION_FLUSH_LIMIT"
    )
    RECOMMENDATION_FLUSH_CONCURRENCY: int = Field(
        default=5, alias="RECOMMENDATION_FLUSH_CONCURRENCY"
    )
