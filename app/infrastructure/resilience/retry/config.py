"""Retry policy configuration.

Defines the bounded exponential backoff policy used by the event processors.
"""

from dataclasses import dataclass

from infrastructure.configuration import RetrySettings


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff policy.

    An operation gets ``max_retries + 1`` attempts. The delay awaited before
    retry ``n`` (``n`` being the 0-based retry count of the attempt that just
    failed) is ``base_delay_ms * 2 ** n``.

    Attributes:
        max_retries: Retries allowed after the first attempt
        base_delay_ms: Delay before the first retry, in milliseconds

    Example:
        policy = RetryPolicy(max_retries=3, base_delay_ms=1000)
        policy.delay_for(0)  # 1.0
        policy.delay_for(2)  # 4.0
    """

    max_retries: int = 3
    base_delay_ms: int = 1000

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.base_delay_ms < 0:
            raise ValueError("base_delay_ms must be >= 0")

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def delay_ms_for(self, retry_count: int) -> int:
        """Backoff in milliseconds before retry ``retry_count``."""
        return self.base_delay_ms * (2**retry_count)

    def delay_for(self, retry_count: int) -> float:
        """Backoff in seconds before retry ``retry_count``."""
        return self.delay_ms_for(retry_count) / 1000.0

    def worst_case_seconds(self, attempt_seconds: float) -> float:
        """Upper bound in seconds on a full retry chain.

        Args:
            attempt_seconds: Longest a single attempt can run
        """
        return self.max_attempts * attempt_seconds + sum(
            self.delay_for(n) for n in range(self.max_retries)
        )


def policies_from_settings(settings: RetrySettings) -> dict[str, RetryPolicy]:
    """Build the per event family policies from settings.

    Args:
        settings: Retry settings loaded from the environment

    Returns:
        Mapping of family name ('order', 'user', 'product', 'recommendation')
        to its RetryPolicy
    """
    return {
        "order": RetryPolicy(
            max_retries=settings.ORDER_MAX_RETRIES,
            base_delay_ms=settings.ORDER_BASE_DELAY_MS,
        ),
        "user": RetryPolicy(
            max_retries=settings.USER_MAX_RETRIES,
            base_delay_ms=settings.USER_BASE_DELAY_MS,
        ),
        "product": RetryPolicy(
            max_retries=settings.PRODUCT_MAX_RETRIES,
            base_delay_ms=settings.PRODUCT_BASE_DELAY_MS,
        ),
        "recommendation": RetryPolicy(
            max_retries=settings.RECOMMENDATION_MAX_RETRIES,
            base_delay_ms=settings.RECOMMENDATION_BASE_DELAY_MS,
        ),
    }
