"""Retry policy settings for the event processors."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class RetrySettings(InfrastructureSettings):
    """Per event family retry policies.

    Each event family retries its processing with exponential backoff. The
    delay before retry ``n`` (0-based) is ``base_delay_ms * 2 ** n`` and a
    message gets ``max_retries + 1`` attempts in total before it is moved to
    the dead letter topic.

    Environment Variables:
        ORDER_MAX_RETRIES: Retries for order events (default: 3)
        ORDER_BASE_DELAY_MS: Base backoff for order events (default: 1000)
        USER_MAX_RETRIES: Retries for user events (default: 5)
        USER_BASE_DELAY_MS: Base backoff for user events (default: 500)
        PRODUCT_MAX_RETRIES: Retries for product events (default: 5)
        PRODUCT_BASE_DELAY_MS: Base backoff for product events (default: 500)
        RECOMMENDATION_MAX_RETRIES: Retries for recommendation events (default: 3)
        RECOMMENDATION_BASE_DELAY_MS: Base backoff for recommendation events (default: 1000)

    Exponential Backoff:
        Example with the order defaults (3 retries, base=1000ms):
            Retry 0: 1000ms
            Retry 1: 2000ms
            Retry 2: 4000ms
            Then dead lettered

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        max_retries = settings.retry.ORDER_MAX_RETRIES
        ```
    """

    ORDER_MAX_RETRIES: int = Field(
        default=3,
        alias="ORDER_MAX_RETRIES",
        description="Retries for order events before dead lettering",
    )
    ORDER_BASE_DELAY_MS: int = Field(
        default=1000,
        alias="ORDER_BASE_DELAY_MS",
        description="Base exponential backoff delay for order events (ms)",
    )
    USER_MAX_RETRIES: int = Field(
        default=5,
        alias="USER_MAX_RETRIES",
        description="Retries for user events before dead lettering",
    )
    USER_BASE_DELAY_MS: int = Field(
        default=500,
        alias="USER_BASE_DELAY_MS",
        description="Base exponential backoff delay for user events (ms)",
    )
    PRODUCT_MAX_RETRIES: int = Field(
        default=5,
        alias="PRODUCT_MAX_RETRIES",
        description="Retries for product events before dead lettering",
    )
    PRODUCT_BASE_DELAY_MS: int = Field(
        default=500,
        alias="PRODUCT_BASE_DELAY_MS",
        description="Base exponential backoff delay for product events (ms)",
    )
    RECOMMENDATION_MAX_RETRIES: int = Field(
        default=3,
        alias="RECOMMENDATION_MAX_RETRIES",
        description="Retries for recommendation events before dead lettering",
    )
    RECOMMENDATION_BASE_DELAY_MS: int = Field(
        default=1000,
        alias="RECOMMENDATION_BASE_DELAY_MS",
        description="Base exponential backoff delay for recommendation events (ms)",
    )
