"""Unit tests for RetryPolicy."""

import pytest

from infrastructure.resilience.retry import RetryPolicy


@pytest.mark.unit
class TestRetryPolicy:
    def test_attempts_are_retries_plus_one(self):
        assert RetryPolicy(max_retries=3).max_attempts == 4
        assert RetryPolicy(max_retries=0).max_attempts == 1

    def test_backoff_doubles(self):
        policy = RetryPolicy(max_retries=3, base_delay_ms=1000)

        assert [policy.delay_ms_for(n) for n in range(3)] == [1000, 2000, 4000]
        assert policy.delay_for(2) == 4.0

    def test_worst_case_covers_every_attempt_and_backoff(self):
        policy = RetryPolicy(max_retries=3, base_delay_ms=1000)

        assert policy.worst_case_seconds(5.0) == 4 * 5.0 + 1.0 + 2.0 + 4.0
        assert RetryPolicy(max_retries=0).worst_case_seconds(2.0) == 2.0

    def test_negative_values_are_rejected(self):
        with pytest.raises(ValueError):
            RetryPolicy(max_retries=-1)
        with pytest.raises(ValueError):
            RetryPolicy(base_delay_ms=-5)
