"""Tests for the fetch backoff policy."""

import pytest

from lambda_runtime.backoff import BackoffPolicy
from lambda_runtime.config import RuntimeSettings


class TestDelay:
    def test_exponential_growth(self):
        policy = BackoffPolicy(base_delay_ms=100, max_delay_ms=10_000)
        assert [policy.delay_ms(attempt) for attempt in (1, 2, 3, 4)] == [100, 200, 400, 800]

    def test_capped_at_max_delay(self):
        policy = BackoffPolicy(base_delay_ms=100, max_delay_ms=300)
        assert policy.delay_ms(10) == 300

    def test_non_decreasing(self):
        policy = BackoffPolicy()
        delays = [policy.delay_ms(attempt) for attempt in range(1, 20)]
        assert delays == sorted(delays)

    def test_attempt_zero_uses_base_delay(self):
        assert BackoffPolicy().delay_ms(0) == 100


class TestShouldRetry:
    def test_retries_below_cap(self):
        policy = BackoffPolicy(max_attempts=3)
        assert policy.should_retry(1) is True
        assert policy.should_retry(2) is True

    def test_stops_at_cap(self):
        assert BackoffPolicy(max_attempts=3).should_retry(3) is False

    def test_single_attempt_never_retries(self):
        assert BackoffPolicy(max_attempts=1).should_retry(1) is False


class TestValidation:
    def test_max_below_base_rejected(self):
        with pytest.raises(ValueError):
            BackoffPolicy(base_delay_ms=500, max_delay_ms=100)

    def test_zero_attempts_rejected(self):
        with pytest.raises(ValueError):
            BackoffPolicy(max_attempts=0)

    def test_zero_factor_rejected(self):
        with pytest.raises(ValueError):
            BackoffPolicy(backoff_factor=0)


class TestFromSettings:
    def test_uses_settings(self):
        settings = RuntimeSettings(
            aws_lambda_runtime_api="localhost:9001",
            fetch_retry_base_delay_ms=50,
            fetch_retry_max_delay_ms=400,
            fetch_retry_max_attempts=7,
        )
        policy = BackoffPolicy.from_settings(settings)
        assert policy == BackoffPolicy(base_delay_ms=50, max_delay_ms=400, max_attempts=7)

    def test_max_raised_to_base(self):
        settings = RuntimeSettings(
            aws_lambda_runtime_api="localhost:9001",
            fetch_retry_base_delay_ms=500,
            fetch_retry_max_delay_ms=100,
        )
        assert BackoffPolicy.from_settings(settings).max_delay_ms == 500
