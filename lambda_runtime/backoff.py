"""Bounded exponential backoff for retryable fetch failures."""

from dataclasses import dataclass

from lambda_runtime.config import RuntimeSettings


@dataclass(frozen=True)
class BackoffPolicy:
    """Exponential backoff with a delay cap and an attempt cap.

    Example:
        policy = BackoffPolicy(base_delay_ms=100, max_delay_ms=2000, max_attempts=5)
        policy.delay_ms(1)  # 100
        policy.delay_ms(3)  # 400
        policy.should_retry(5)  # False
    """

    base_delay_ms: int = 100
    max_delay_ms: int = 2_000
    max_attempts: int = 5
    backoff_factor: int = 2

    def __post_init__(self) -> None:
        """Validate the policy bounds."""
        if self.base_delay_ms < 1 or self.max_delay_ms < self.base_delay_ms:
            error_message = (
                f"Invalid delays: base={self.base_delay_ms}ms, max={self.max_delay_ms}ms"
            )
            raise ValueError(error_message)
        if self.max_attempts < 1 or self.backoff_factor < 1:
            error_message = (
                f"Invalid policy: max_attempts={self.max_attempts}, "
                f"backoff_factor={self.backoff_factor}"
            )
            raise ValueError(error_message)

    @classmethod
    def from_settings(cls, settings: RuntimeSettings) -> "BackoffPolicy":
        """Build the policy from runtime settings."""
        return cls(
            base_delay_ms=settings.fetch_retry_base_delay_ms,
            max_delay_ms=max(
                settings.fetch_retry_max_delay_ms,
                settings.fetch_retry_base_delay_ms,
            ),
            max_attempts=settings.fetch_retry_max_attempts,
        )

    def delay_ms(self, attempt: int) -> int:
        """Delay to wait after a failed attempt.

        Args:
            attempt: Number of the attempt that just failed (1-based).

        Returns:
            Delay in milliseconds, non-decreasing in ``attempt`` and capped.
        """
        exponent = max(attempt - 1, 0)
        delay = self.base_delay_ms * (self.backoff_factor**exponent)
        return min(delay, self.max_delay_ms)

    def should_retry(self, attempt: int) -> bool:
        """Whether another attempt is allowed after ``attempt`` failed."""
        return attempt < self.max_attempts
