"""Configuration management using pydantic-settings."""

from .settings import (
    DEFAULT_BASE_URL,
    FileSettings,
    HttpSettings,
    LoggingSettings,
    ModusignSettings,
    RetrySettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "DEFAULT_BASE_URL",
    "FileSettings",
    "HttpSettings",
    "LoggingSettings",
    "ModusignSettings",
    "RetrySettings",
    "clear_settings_cache",
    "get_settings",
]
