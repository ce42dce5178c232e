"""Resilience patterns and implementations.

Currently provides bounded retry with exponential backoff for the event
processors.
"""

from infrastructure.resilience.retry import (
    RetryAttempt,
    RetryExhaustedError,
    RetryPolicy,
    RetryResult,
    policies_from_settings,
    run_with_retry,
)

__all__ = [
    "RetryAttempt",
    "RetryExhaustedError",
    "RetryPolicy",
    "RetryResult",
    "policies_from_settings",
    "run_with_retry",
]
