"""Unified settings composition for convenient access.

Usage:
    from push_service.core.settings import get_settings

    settings = get_settings()
    print(settings.push.endpoint)
    print(settings.logging.level)

Each nested settings class still respects its own env prefix (PUSH_, LOG_).
For code that only needs one domain, prefer the get_*_settings() loaders.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .logs import LoggingSettings
from .push import PushSettings


class Settings(BaseSettings):
    """Unified settings composing all domain settings.

    Example:
        settings = Settings()
        assert settings.push.default_retries == 3
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra="ignore",
    )

    push: PushSettings = Field(default_factory=PushSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get unified settings instance (cached)."""
    return Settings()
