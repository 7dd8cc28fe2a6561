from __future__ import annotations

from push_service.utils.retry.exceptions import RetryExhaustedError, RetryStatistics
from push_service.utils.retry.strategies import (
    INITIAL_DELAY,
    MAX_CEILING,
    BackoffScheduler,
)

__all__ = [
    "INITIAL_DELAY",
    "MAX_CEILING",
    "BackoffScheduler",
    "RetryExhaustedError",
    "RetryStatistics",
]
