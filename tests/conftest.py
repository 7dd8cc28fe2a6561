"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: isolated settings without .env or PUSH_* leakage
    - Push Fixtures: messages, scripted transports, backoff without waiting
"""

from __future__ import annotations

import random
from unittest.mock import AsyncMock

import pytest

from push_service.core.settings import PushSettings, clear_all_caches
from push_service.infra.push import Message, PushTransport
from push_service.utils.retry import BackoffScheduler

# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch):
    """Drop cached settings and any PUSH_ variables from the environment."""
    for name in ("PUSH_API_KEY", "PUSH_ENDPOINT", "PUSH_DEFAULT_RETRIES"):
        monkeypatch.delenv(name, raising=False)
    clear_all_caches()
    yield
    clear_all_caches()


@pytest.fixture
def push_settings() -> PushSettings:
    """Push settings with a test API key and no .env file."""
    return PushSettings(api_key="test-api-key", default_retries=2, _env_file=None)


# ============================================================================
# Push Fixtures
# ============================================================================


class SleepRecorder:
    """Drop-in for asyncio.sleep that records delays instead of waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def scheduler() -> BackoffScheduler:
    """Backoff scheduler with a seeded random source."""
    return BackoffScheduler(rng=random.Random(4815162342))


@pytest.fixture
def mock_transport() -> AsyncMock:
    """Transport double; script responses through ``post.side_effect``."""
    return AsyncMock(spec=PushTransport)


@pytest.fixture
def message() -> Message:
    return Message(
        collapse_key="sync",
        time_to_live=108,
        delay_while_idle=True,
        data={"k1": "v1", "k2": "v2"},
    )
