"""Modular Pydantic Settings v2 configuration.

Settings are split by domain (push delivery, logging), loaded from environment
variables (or a local .env file), validated once and cached.

Import settings via cached loaders:
    from push_service.core.settings import get_push_settings

Or use unified settings for convenient access to all domains:
    from push_service.core.settings import get_settings

    settings = get_settings()
    print(settings.push.default_retries)

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables (production)
    3. .env file (development only)
"""

from __future__ import annotations

from .loader import clear_all_caches, get_logging_settings, get_push_settings
from .logs import LoggingSettings
from .push import DEFAULT_SEND_ENDPOINT, PushSettings
from .unified import Settings, get_settings

__all__ = [
    "DEFAULT_SEND_ENDPOINT",
    "LoggingSettings",
    "PushSettings",
    "Settings",
    "clear_all_caches",
    "get_logging_settings",
    "get_push_settings",
    "get_settings",
]
