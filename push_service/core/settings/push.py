"""Push delivery settings.

Environment variables use PUSH_ prefix.
Example: PUSH_API_KEY=AIza..., PUSH_DEFAULT_RETRIES=5
"""

from __future__ import annotations

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SEND_ENDPOINT = "https://gcm-http.googleapis.com/gcm/send"


class PushSettings(BaseSettings):
    """Push delivery configuration.

    Only the API key is required to send; everything else has production
    defaults matching the vendor's documented behavior.

    Environment variables use PUSH_ prefix.
    Example: PUSH_ENDPOINT=https://gcm-http.googleapis.com/gcm/send
    """

    # Credentials
    api_key: SecretStr | None = Field(
        default=None,
        description="Server API key sent as 'Authorization: key=<api_key>'",
    )

    # Endpoint
    endpoint: str = Field(
        default=DEFAULT_SEND_ENDPOINT,
        min_length=1,
        description="Send endpoint URL",
    )
    timeout: float = Field(
        default=30.0,
        ge=1.0,
        le=300.0,
        description="HTTP request timeout in seconds",
    )

    # Retry behavior
    default_retries: int = Field(
        default=3,
        ge=0,
        le=20,
        description="Retries used when a send call does not pass an explicit count",
    )
    backoff_initial_delay: float = Field(
        default=1.0,
        gt=0.0,
        le=60.0,
        description="Initial backoff ceiling in seconds",
    )
    backoff_max_delay: float = Field(
        default=1024.0,
        gt=0.0,
        le=3600.0,
        description="Backoff ceiling cap in seconds",
    )

    # Connection pool
    max_keepalive_connections: int = Field(
        default=20,
        ge=0,
        le=1000,
        description="Maximum idle keep-alive connections",
    )
    max_connections: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Maximum concurrent connections",
    )

    @model_validator(mode="after")
    def validate_backoff_bounds(self) -> PushSettings:
        """Ensure the backoff cap is above the initial ceiling."""
        if self.backoff_max_delay <= self.backoff_initial_delay:
            msg = "backoff_max_delay must be greater than backoff_initial_delay"
            raise ValueError(msg)
        return self

    model_config = SettingsConfigDict(
        env_prefix="PUSH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @property
    def is_configured(self) -> bool:
        """Check if an API key is available for sending."""
        return self.api_key is not None and bool(self.api_key.get_secret_value())

    @property
    def uses_https(self) -> bool:
        return self.endpoint.startswith("https://")
