from __future__ import annotations

import random

INITIAL_DELAY = 1.0
MAX_CEILING = 1024.0


class BackoffScheduler:
    """Half-jitter exponential backoff.

    Each call to :meth:`next` samples a delay from ``[ceiling / 2, ceiling * 1.5)``
    and returns the ceiling to use for the following retry. The ceiling doubles
    until doubling would meet or exceed ``max_ceiling``, after which it stays put.

    The scheduler never sleeps; callers own the sleep primitive.
    """

    def __init__(
        self,
        initial_delay: float = INITIAL_DELAY,
        max_ceiling: float = MAX_CEILING,
        rng: random.Random | None = None,
    ) -> None:
        if initial_delay <= 0:
            msg = "initial_delay must be positive"
            raise ValueError(msg)
        if max_ceiling <= initial_delay:
            msg = "max_ceiling must be larger than initial_delay"
            raise ValueError(msg)
        self.initial_delay = initial_delay
        self.max_ceiling = max_ceiling
        self.rng = rng or random.SystemRandom()

    @property
    def initial_ceiling(self) -> float:
        return self.initial_delay

    def next(self, ceiling: float) -> tuple[float, float]:
        # random() is in [0, 1), which keeps the upper bound open
        delay = ceiling / 2 + self.rng.random() * ceiling
        new_ceiling = ceiling * 2 if ceiling * 2 < self.max_ceiling else ceiling
        return delay, new_ceiling

    def delays(self, count: int) -> list[float]:
        """Sample ``count`` consecutive delays starting from the initial ceiling."""
        ceiling = self.initial_ceiling
        values: list[float] = []
        for _ in range(count):
            delay, ceiling = self.next(ceiling)
            values.append(delay)
        return values
