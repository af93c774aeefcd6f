"""Tests for quantive_export.utils.retry module."""

from unittest.mock import MagicMock, patch

import pytest

from quantive_export.utils.retry import RetryConfig, calculate_backoff_delay, with_retry


class TransientError(Exception):
    pass


class PermanentError(Exception):
    pass


def _is_transient(error: Exception) -> bool:
    return isinstance(error, TransientError)


class TestRetryConfig:
    """Tests for RetryConfig validation."""

    def test_defaults(self):
        config = RetryConfig()

        assert config.max_retries == 0
        assert config.base_delay_seconds == 2.0
        assert config.max_delay_seconds == 60.0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_retries": -1},
            {"base_delay_seconds": -0.5},
            {"jitter_factor": 1.5},
            {"base_delay_seconds": 10.0, "max_delay_seconds": 5.0},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            RetryConfig(**kwargs)


class TestCalculateBackoffDelay:
    """Tests for calculate_backoff_delay."""

    def test_exponential_without_jitter(self):
        config = RetryConfig(base_delay_seconds=1.0, jitter_factor=0.0)

        assert [calculate_backoff_delay(n, config) for n in range(4)] == [1.0, 2.0, 4.0, 8.0]

    def test_capped_at_max_delay(self):
        config = RetryConfig(base_delay_seconds=1.0, max_delay_seconds=5.0, jitter_factor=0.0)

        assert calculate_backoff_delay(10, config) == 5.0

    def test_jitter_within_bounds(self):
        config = RetryConfig(base_delay_seconds=2.0, jitter_factor=0.5)

        for _ in range(20):
            delay = calculate_backoff_delay(0, config)
            assert 2.0 <= delay <= 3.0


@patch("quantive_export.utils.retry.time.sleep")
class TestWithRetry:
    """Tests for the with_retry decorator."""

    def test_success_first_try(self, mock_sleep):
        func = MagicMock(return_value="ok")

        result = with_retry(RetryConfig(max_retries=3), _is_transient)(func)("arg")

        assert result == "ok"
        func.assert_called_once_with("arg")
        mock_sleep.assert_not_called()

    def test_retries_transient_errors(self, mock_sleep):
        func = MagicMock(side_effect=[TransientError(), TransientError(), "ok"])
        on_retry = MagicMock()
        config = RetryConfig(max_retries=3, base_delay_seconds=1.0, jitter_factor=0.0)

        result = with_retry(config, _is_transient, on_retry=on_retry)(func)()

        assert result == "ok"
        assert func.call_count == 3
        assert [c.args[0] for c in on_retry.call_args_list] == [1, 2]
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1.0, 2.0]

    def test_permanent_error_not_retried(self, mock_sleep):
        func = MagicMock(side_effect=PermanentError("boom"))

        with pytest.raises(PermanentError):
            with_retry(RetryConfig(max_retries=3), _is_transient)(func)()

        func.assert_called_once()
        mock_sleep.assert_not_called()

    def test_last_error_reraised_when_exhausted(self, mock_sleep):
        errors = [TransientError("first"), TransientError("second"), TransientError("last")]
        func = MagicMock(side_effect=errors)

        with pytest.raises(TransientError, match="last"):
            with_retry(RetryConfig(max_retries=2, base_delay_seconds=0.0), _is_transient)(func)()

        assert func.call_count == 3

    def test_zero_retries(self, mock_sleep):
        func = MagicMock(side_effect=TransientError())

        with pytest.raises(TransientError):
            with_retry(RetryConfig(max_retries=0), _is_transient)(func)()

        func.assert_called_once()
