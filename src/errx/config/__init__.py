"""Configuration management using pydantic-settings."""

from .settings import (
    ErrxSettings,
    LoggingSettings,
    StackSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "ErrxSettings",
    "LoggingSettings",
    "StackSettings",
    "clear_settings_cache",
    "get_settings",
]
