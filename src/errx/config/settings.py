"""Environment-based configuration using pydantic-settings.

Example:
    >>> from errx.config import get_settings
    >>> settings = get_settings()
    >>> settings.stack.max_depth
    32
    >>> settings.logging.level
    'INFO'

    # Or with environment variables:
    # ERRX_STACK_MAX_DEPTH=16
    # ERRX_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StackSettings(BaseSettings):
    """Stack capture configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ERRX_STACK_",
        extra="ignore",
    )

    max_depth: Annotated[int, Field(ge=1, le=32, description="Max frames captured per error")] = 32


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ERRX_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class ErrxSettings(BaseSettings):
    """Root settings, loaded from ``ERRX_`` environment variables and ``.env``.

    Example environment variables:
        ERRX_DEBUG=true
        ERRX_STACK_MAX_DEPTH=16
        ERRX_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="ERRX_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    debug: bool = Field(default=False, description="Enable debug mode")

    stack: StackSettings = Field(default_factory=StackSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @computed_field
    @property
    def log_level(self) -> str:
        """Effective log level; debug mode forces DEBUG."""
        return "DEBUG" if self.debug else self.logging.level


@lru_cache(maxsize=1)
def get_settings() -> ErrxSettings:
    """Get the global settings instance (cached)."""
    return ErrxSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next ``get_settings()`` re-reads the environment."""
    get_settings.cache_clear()
