"""Exception types and statistics helpers for retry utilities."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class RetryStatistics:
    """Statistics captured during a retry session."""

    attempts: int = 0
    retries: int = 0
    total_delay: float = 0.0
    start_time: float = 0.0
    end_time: float = 0.0
    errors: list[str] = field(default_factory=list)

    @property
    def duration(self) -> float:
        """Total time spent retrying."""
        return self.end_time - self.start_time

    def record_retry(self, delay: float, reason: str) -> None:
        self.retries += 1
        self.total_delay += delay
        self.errors.append(reason)


class RetryExhaustedError(Exception):
    """Error raised after exhausting retry attempts without a usable result."""

    def __init__(
        self,
        attempts: int,
        last_exception: BaseException | None = None,
        statistics: RetryStatistics | None = None,
        operation: str = "operation",
    ) -> None:
        """Initialize the error with context."""
        self.attempts = attempts
        self.last_exception = last_exception
        self.statistics = statistics
        self.operation = operation
        message = f"Could not complete {operation} after {attempts} attempts"
        if last_exception is not None:
            message = f"{message}. Last error: {last_exception}"
        super().__init__(message)
