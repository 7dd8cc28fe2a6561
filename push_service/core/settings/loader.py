"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the process.

Usage:
    from push_service.core.settings.loader import get_push_settings

    settings = get_push_settings()  # First call: loads and validates
    settings = get_push_settings()  # Subsequent calls: returns cached instance

Testing:
    In tests, clear the cache to force reload:
    get_push_settings.cache_clear()

    Or override with custom values:
    settings = PushSettings(api_key="test-key", default_retries=0)
"""

from __future__ import annotations

from functools import lru_cache

from .logs import LoggingSettings
from .push import PushSettings
from .unified import get_settings


@lru_cache(maxsize=1)
def get_push_settings() -> PushSettings:
    """Get cached push delivery settings.

    Returns:
        Validated and frozen PushSettings instance.
    """
    return PushSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings.

    Returns:
        Validated and frozen LoggingSettings instance.
    """
    return LoggingSettings()


def clear_all_caches() -> None:
    """Clear every cached settings instance (tests and reloads)."""
    get_push_settings.cache_clear()
    get_logging_settings.cache_clear()
    get_settings.cache_clear()
