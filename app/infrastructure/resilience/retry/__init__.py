"""Bounded retry with exponential backoff.

Architecture:
- RetryPolicy: max retries and base delay, computes backoff delays
- RetryAttempt: state handed to each attempt
- run_with_retry: iterative runner with an injectable sleep
- RetryExhaustedError: raised with the last error once attempts run out

Usage:
    from infrastructure.resilience.retry import RetryPolicy, run_with_retry

    policy = RetryPolicy(max_retries=3, base_delay_ms=1000)

    def persist(attempt):
        return store.create(notification)

    try:
        record = run_with_retry(persist, policy, operation_name="order_event")
    except RetryExhaustedError as exc:
        escalate(reason=str(exc.last_error))
"""

from infrastructure.resilience.retry.config import RetryPolicy, policies_from_settings
from infrastructure.resilience.retry.models import (
    RetryAttempt,
    RetryExhaustedError,
    RetryResult,
)
from infrastructure.resilience.retry.runner import run_with_retry

__all__ = [
    # Models
    "RetryAttempt",
    "RetryExhaustedError",
    "RetryResult",
    # Configuration
    "RetryPolicy",
    "policies_from_settings",
    # Runner
    "run_with_retry",
]
