"""Retry policy for per-check result fetches."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RetryPolicy:
    """Linear backoff: wait ``attempt * step_seconds`` after a failed attempt.

    Attributes:
        max_attempts: Total attempts, including the first (1 = no retries).
        step_seconds: Backoff increment per attempt.
    """

    max_attempts: int = 3
    step_seconds: float = 1.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            msg = "max_attempts must be >= 1"
            raise ValueError(msg)
        if self.step_seconds < 0:
            msg = "step_seconds must be >= 0"
            raise ValueError(msg)

    def delay_after(self, attempt: int) -> float:
        """Delay before the next try, given the 1-based failed attempt number."""
        return self.step_seconds * attempt

    def should_retry(self, attempt: int) -> bool:
        return attempt < self.max_attempts
