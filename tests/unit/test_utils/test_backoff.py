"""Unit tests for the backoff scheduler and retry statistics."""
from __future__ import annotations

import random

import pytest

from push_service.utils.retry import (
    INITIAL_DELAY,
    MAX_CEILING,
    BackoffScheduler,
    RetryExhaustedError,
    RetryStatistics,
)


class FixedRandom(random.Random):
    """Random source that always returns the same sample."""

    def __init__(self, value: float) -> None:
        super().__init__()
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.mark.unit
class TestBackoffScheduler:
    """Test suite for BackoffScheduler."""

    def test_defaults(self):
        """Test that defaults are one second doubling up to 1024 seconds."""
        scheduler = BackoffScheduler()
        assert scheduler.initial_ceiling == INITIAL_DELAY == 1.0
        assert scheduler.max_ceiling == MAX_CEILING == 1024.0

    def test_delay_lower_bound(self):
        """Test that the smallest sample is half the ceiling."""
        scheduler = BackoffScheduler(rng=FixedRandom(0.0))
        delay, _ = scheduler.next(8.0)
        assert delay == 4.0

    def test_delay_upper_bound_is_open(self):
        """Test that samples stay below 1.5x the ceiling."""
        scheduler = BackoffScheduler(rng=FixedRandom(0.999999))
        delay, _ = scheduler.next(8.0)
        assert 4.0 <= delay < 12.0

    def test_delays_within_bounds(self):
        """Test that seeded samples stay in [ceiling/2, ceiling*1.5)."""
        scheduler = BackoffScheduler(rng=random.Random(42))
        ceiling = scheduler.initial_ceiling
        for _ in range(200):
            delay, new_ceiling = scheduler.next(ceiling)
            assert ceiling / 2 <= delay < ceiling * 1.5
            ceiling = new_ceiling

    def test_ceiling_doubles_until_cap(self):
        """Test that the ceiling stops doubling once doubling would reach the cap."""
        scheduler = BackoffScheduler(rng=random.Random(1))
        ceiling = scheduler.initial_ceiling
        ceilings = []
        for _ in range(13):
            _, ceiling = scheduler.next(ceiling)
            ceilings.append(ceiling)

        assert ceilings[:9] == [2.0, 4.0, 8.0, 16.0, 32.0, 64.0, 128.0, 256.0, 512.0]
        # 512 * 2 == 1024 is not below the cap
        assert ceilings[9:] == [512.0, 512.0, 512.0, 512.0]

    def test_custom_bounds(self):
        """Test that a small cap freezes the ceiling early."""
        scheduler = BackoffScheduler(initial_delay=0.5, max_ceiling=1.5, rng=FixedRandom(0.0))
        assert scheduler.next(0.5) == (0.25, 1.0)
        assert scheduler.next(1.0) == (0.5, 1.0)

    def test_delays_helper(self):
        """Test that delays() returns one sample per retry."""
        scheduler = BackoffScheduler(rng=FixedRandom(0.0))
        assert scheduler.delays(4) == [0.5, 1.0, 2.0, 4.0]
        assert scheduler.delays(0) == []

    def test_same_seed_same_delays(self):
        """Test that the schedule is reproducible with a seeded source."""
        first = BackoffScheduler(rng=random.Random(7)).delays(10)
        second = BackoffScheduler(rng=random.Random(7)).delays(10)
        assert first == second

    @pytest.mark.parametrize(
        ("initial_delay", "max_ceiling"),
        [(0.0, 10.0), (-1.0, 10.0), (5.0, 5.0), (5.0, 1.0)],
    )
    def test_invalid_bounds(self, initial_delay, max_ceiling):
        """Test that nonsensical bounds are rejected."""
        with pytest.raises(ValueError):
            BackoffScheduler(initial_delay=initial_delay, max_ceiling=max_ceiling)


@pytest.mark.unit
class TestRetryStatistics:
    """Test suite for RetryStatistics and RetryExhaustedError."""

    def test_record_retry(self):
        """Test that retries accumulate delay and reasons."""
        stats = RetryStatistics()
        stats.record_retry(0.75, "transport")
        stats.record_retry(1.5, "parse")

        assert stats.retries == 2
        assert stats.total_delay == pytest.approx(2.25)
        assert stats.errors == ["transport", "parse"]

    def test_duration(self):
        stats = RetryStatistics(start_time=10.0, end_time=12.5)
        assert stats.duration == 2.5

    def test_exhausted_message_names_attempts(self):
        """Test that the message names the attempt count and last error."""
        error = RetryExhaustedError(
            attempts=43,
            last_exception=OSError("connection reset"),
            operation="send message",
        )
        assert str(error) == (
            "Could not complete send message after 43 attempts. Last error: connection reset"
        )
        assert error.attempts == 43

    def test_exhausted_without_last_exception(self):
        error = RetryExhaustedError(attempts=3)
        assert str(error) == "Could not complete operation after 3 attempts"
        assert error.statistics is None
