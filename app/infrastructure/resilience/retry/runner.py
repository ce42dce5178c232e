"""Iterative retry runner.

Runs an operation under a RetryPolicy, awaiting the backoff delay between
attempts with an injectable sleep function so callers (and tests) control
the clock.
"""

import time
from typing import Callable, Optional, TypeVar

from infrastructure.logging import get_module_logger
from infrastructure.resilience.retry.config import RetryPolicy
from infrastructure.resilience.retry.models import (
    RetryAttempt,
    RetryExhaustedError,
    RetryResult,
)

logger = get_module_logger()

T = TypeVar("T")


def run_with_retry(
    operation: Callable[[RetryAttempt], T],
    policy: RetryPolicy,
    sleep: Callable[[float], None] = time.sleep,
    should_retry: Optional[Callable[[Exception], bool]] = None,
    operation_name: str = "operation",
) -> T:
    """Run ``operation`` until it succeeds or the policy is exhausted.

    Args:
        operation: Callable receiving the current RetryAttempt
        policy: Backoff policy bounding the attempts
        sleep: Function awaiting a delay in seconds
        should_retry: Optional predicate; returning False for an exception
            stops retrying immediately
        operation_name: Name used in log events

    Returns:
        Whatever ``operation`` returns on its first successful attempt

    Raises:
        RetryExhaustedError: When the final allowed attempt fails, or an
            exception is rejected by ``should_retry``
    """
    last_error: Optional[Exception] = None

    for retry_count in range(policy.max_attempts):
        attempt = RetryAttempt(
            retry_count=retry_count,
            max_retries=policy.max_retries,
            last_error=str(last_error) if last_error else None,
        )
        try:
            result = operation(attempt)
        except Exception as exc:
            last_error = exc
            outcome = _classify(exc, attempt, should_retry)

            if outcome == RetryResult.PERMANENT_FAILURE:
                logger.warning(
                    "retry_exhausted",
                    operation=operation_name,
                    attempts=retry_count + 1,
                    error=str(exc),
                )
                raise RetryExhaustedError(exc, retry_count + 1) from exc

            delay = policy.delay_for(retry_count)
            logger.info(
                "retry_scheduled",
                operation=operation_name,
                retry_count=retry_count,
                max_retries=policy.max_retries,
                delay_seconds=delay,
                error=str(exc),
            )
            sleep(delay)
            continue

        if retry_count:
            logger.info(
                "retry_succeeded",
                operation=operation_name,
                attempts=retry_count + 1,
            )
        return result

    # Only reachable with a zero-attempt policy, which RetryPolicy rejects
    raise RetryExhaustedError(
        last_error or RuntimeError("no attempts made"), policy.max_attempts
    )


def _classify(
    exc: Exception,
    attempt: RetryAttempt,
    should_retry: Optional[Callable[[Exception], bool]],
) -> RetryResult:
    if attempt.is_last:
        return RetryResult.PERMANENT_FAILURE
    if should_retry is not None and not should_retry(exc):
        return RetryResult.PERMANENT_FAILURE
    return RetryResult.RETRY
