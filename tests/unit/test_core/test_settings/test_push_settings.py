"""Unit tests for push and logging settings."""
from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from push_service.core.settings import (
    DEFAULT_SEND_ENDPOINT,
    LoggingSettings,
    PushSettings,
    get_push_settings,
    get_settings,
)


@pytest.mark.unit
class TestPushSettings:
    """Test suite for PushSettings."""

    def test_defaults(self):
        settings = PushSettings(_env_file=None)

        assert settings.api_key is None
        assert not settings.is_configured
        assert settings.endpoint == DEFAULT_SEND_ENDPOINT
        assert settings.uses_https
        assert settings.default_retries == 3
        assert settings.backoff_initial_delay == 1.0
        assert settings.backoff_max_delay == 1024.0

    def test_api_key_is_secret(self):
        settings = PushSettings(api_key="AIza-secret", _env_file=None)
        assert settings.is_configured
        assert "AIza-secret" not in repr(settings)
        assert settings.api_key.get_secret_value() == "AIza-secret"

    def test_environment_prefix(self, monkeypatch):
        monkeypatch.setenv("PUSH_API_KEY", "env-key")
        monkeypatch.setenv("PUSH_ENDPOINT", "http://localhost:9000/send")

        settings = PushSettings(_env_file=None)

        assert settings.api_key.get_secret_value() == "env-key"
        assert not settings.uses_https

    def test_backoff_bounds_validated(self):
        with pytest.raises(ValidationError, match="backoff_max_delay"):
            PushSettings(backoff_initial_delay=10.0, backoff_max_delay=5.0, _env_file=None)

    def test_negative_retries_rejected(self):
        with pytest.raises(ValidationError):
            PushSettings(default_retries=-1, _env_file=None)

    def test_frozen(self):
        settings = PushSettings(_env_file=None)
        with pytest.raises(ValidationError):
            settings.default_retries = 5

    def test_loader_is_cached(self):
        assert get_push_settings() is get_push_settings()

    def test_unified_settings(self, monkeypatch):
        monkeypatch.setenv("PUSH_DEFAULT_RETRIES", "4")
        assert get_settings().push.default_retries == 4


@pytest.mark.unit
class TestLoggingSettings:
    """Test suite for LoggingSettings."""

    def test_file_path_only_when_enabled(self):
        settings = LoggingSettings(file_path=Path("/tmp/push.jsonl"), _env_file=None)
        assert settings.effective_file_path is None

        enabled = LoggingSettings(file_enabled=True, file_path=Path("/tmp/push.jsonl"), _env_file=None)
        assert enabled.effective_file_path == Path("/tmp/push.jsonl")

    def test_levels_normalized(self):
        settings = LoggingSettings(level="debug", console_level="warning", _env_file=None)
        assert settings.level == "DEBUG"
        assert settings.effective_console_level == "WARNING"
        assert settings.effective_file_level == "DEBUG"

    def test_to_logging_kwargs(self):
        kwargs = LoggingSettings(json_logs=False, _env_file=None).to_logging_kwargs()

        assert kwargs["log_level"] == "INFO"
        assert kwargs["json_logs"] is False
        assert kwargs["file_path"] is None
        assert kwargs["service_name"] == "push-service"
