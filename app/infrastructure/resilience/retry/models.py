"""Retry models.

Data structures describing the outcome of a retried operation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RetryResult(Enum):
    """Outcome of a single attempt.

    Values:
        SUCCESS: Operation completed successfully
        RETRY: Operation failed but is retryable, back off and try again
        PERMANENT_FAILURE: Operation failed and no attempts remain
    """

    SUCCESS = "success"
    RETRY = "retry"
    PERMANENT_FAILURE = "permanent_failure"


@dataclass
class RetryAttempt:
    """State of one attempt, passed to the operation being retried.

    Fields:
        retry_count: 0 for the first attempt, n for the n-th retry
        max_retries: Retries allowed by the policy
        last_error: Error raised by the previous attempt, if any
    """

    retry_count: int
    max_retries: int
    last_error: Optional[str] = None

    @property
    def is_last(self) -> bool:
        return self.retry_count >= self.max_retries


class RetryExhaustedError(Exception):
    """Raised when every attempt allowed by the policy has failed.

    Attributes:
        last_error: Exception raised by the final attempt
        attempts: Number of attempts made
    """

    def __init__(self, last_error: Exception, attempts: int) -> None:
        super().__init__(str(last_error))
        self.last_error = last_error
        self.attempts = attempts
