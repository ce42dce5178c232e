"""Unit tests for run_with_retry."""

from unittest.mock import MagicMock, patch

import pytest

from infrastructure.resilience.retry import (
    RetryExhaustedError,
    RetryPolicy,
    run_with_retry,
)


@pytest.mark.unit
class TestRunWithRetry:
    def test_returns_first_success_without_sleeping(self):
        sleep = MagicMock()
        operation = MagicMock(return_value="ok")

        result = run_with_retry(operation, RetryPolicy(max_retries=3), sleep=sleep)

        assert result == "ok"
        operation.assert_called_once()
        sleep.assert_not_called()

    def test_retries_with_exponential_backoff(self):
        sleeps = []
        operation = MagicMock(side_effect=[ValueError("a"), ValueError("b"), "ok"])

        result = run_with_retry(
            operation, RetryPolicy(max_retries=3, base_delay_ms=500), sleep=sleeps.append
        )

        assert result == "ok"
        assert sleeps == [0.5, 1.0]
        retry_counts = [call.args[0].retry_count for call in operation.call_args_list]
        assert retry_counts == [0, 1, 2]

    def test_attempt_carries_previous_error(self):
        seen = []

        def operation(attempt):
            seen.append(attempt.last_error)
            if attempt.retry_count == 0:
                raise RuntimeError("first failure")
            return True

        run_with_retry(operation, RetryPolicy(max_retries=1), sleep=lambda _: None)

        assert seen == [None, "first failure"]

    def test_exhaustion_raises_with_last_error(self):
        sleeps = []
        errors = [RuntimeError(f"e{i}") for i in range(4)]
        operation = MagicMock(side_effect=errors)

        with pytest.raises(RetryExhaustedError) as exc_info:
            run_with_retry(
                operation,
                RetryPolicy(max_retries=3, base_delay_ms=1000),
                sleep=sleeps.append,
            )

        assert operation.call_count == 4
        assert exc_info.value.attempts == 4
        assert exc_info.value.last_error is errors[-1]
        assert sleeps == [1.0, 2.0, 4.0]

    def test_should_retry_false_stops_immediately(self):
        operation = MagicMock(side_effect=KeyError("fatal"))
        sleep = MagicMock()

        with pytest.raises(RetryExhaustedError) as exc_info:
            run_with_retry(
                operation,
                RetryPolicy(max_retries=5),
                sleep=sleep,
                should_retry=lambda exc: not isinstance(exc, KeyError),
            )

        assert exc_info.value.attempts == 1
        sleep.assert_not_called()

    @patch("infrastructure.resilience.retry.runner.logger")
    def test_logs_retry_and_exhaustion(self, mock_logger):
        operation = MagicMock(side_effect=[ValueError("a"), ValueError("b")])

        with pytest.raises(RetryExhaustedError):
            run_with_retry(
                operation,
                RetryPolicy(max_retries=1),
                sleep=lambda _: None,
                operation_name="order_event",
            )

        assert mock_logger.info.call_args_list[0].args[0] == "retry_scheduled"
        assert mock_logger.warning.call_args.args[0] == "retry_exhausted"
        assert mock_logger.warning.call_args.kwargs["operation"] == "order_event"
