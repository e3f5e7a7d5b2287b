"""Environment-based configuration using pydantic-settings.

Example:
    >>> from modusign_mcp.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.base_url
    'https://api.modusign.co.kr'

    # Or with environment variables:
    # MODUSIGN_EMAIL=you@example.com
    # MODUSIGN_API_KEY=...
    # MODUSIGN_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, NonNegativeFloat, PositiveFloat, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from modusign_mcp.foundation.errors import ConfigurationError

DEFAULT_BASE_URL = "https://api.modusign.co.kr"


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MODUSIGN_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class HttpSettings(BaseSettings):
    """HTTP transport defaults."""

    model_config = SettingsConfigDict(
        env_prefix="MODUSIGN_HTTP_",
        extra="ignore",
    )

    timeout: PositiveFloat = Field(default=30.0, description="Request timeout in seconds")
    user_agent: str = "modusign-mcp/1.0"


class RetrySettings(BaseSettings):
    """Throttle (HTTP 429) retry configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MODUSIGN_RETRY_",
        extra="ignore",
    )

    max_retries: Annotated[int, Field(ge=0, le=10)] = 3
    default_delay: NonNegativeFloat = Field(
        default=1.0,
        description="Delay in seconds when the response carries no retry-after header",
    )


class FileSettings(BaseSettings):
    """Local file access configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MODUSIGN_FILES_",
        extra="ignore",
    )

    shell_fallback: bool = Field(
        default=True,
        description="Retry unreadable paths through a spawned process (sandboxed filesystems)",
    )


class ModusignSettings(BaseSettings):
    """Root settings.

    Example environment variables:
        MODUSIGN_EMAIL=you@example.com
        MODUSIGN_API_KEY=...
        MODUSIGN_BASE_URL=https://api.modusign.co.kr
        MODUSIGN_HTTP_TIMEOUT=60
        MODUSIGN_RETRY_MAX_RETRIES=3
        MODUSIGN_FILES_SHELL_FALLBACK=false
    """

    model_config = SettingsConfigDict(
        env_prefix="MODUSIGN_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    email: str | None = Field(default=None, description="Account email used as the Basic auth identity")
    api_key: SecretStr | None = Field(default=None, description="API key used as the Basic auth secret")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="Remote service base URL")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    files: FileSettings = Field(default_factory=FileSettings)

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email(cls, v: str | None) -> str | None:
        if isinstance(v, str):
            v = v.strip()
        return v or None

    @field_validator("api_key", mode="before")
    @classmethod
    def _blank_key(cls, v: str | None) -> str | None:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("base_url", mode="before")
    @classmethod
    def _normalize_base_url(cls, v: str | None) -> str:
        if not v or not str(v).strip():
            return DEFAULT_BASE_URL
        return str(v).strip().rstrip("/")

    def require_credentials(self) -> tuple[str, str]:
        """Return (email, api_key) or raise ConfigurationError naming what is missing."""
        email, api_key = self.email, self.api_key
        if email is None or api_key is None:
            missing = [
                name for name, value in (("MODUSIGN_EMAIL", email), ("MODUSIGN_API_KEY", api_key))
                if value is None
            ]
            raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")
        return email, api_key.get_secret_value()


@lru_cache(maxsize=1)
def get_settings() -> ModusignSettings:
    """Get the global settings instance (cached)."""
    return ModusignSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
