"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.constants import PubSubChannels
from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import BusyTimeoutMs, ConnectionTimeoutS


class RedisSettings(BaseModel):
    """Coordination store configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    url: str = Field(
        default="redis://localhost:6379/0",
        validation_alias=AliasChoices("url", "redis_url"),
    )
    socket_timeout_s: float = Field(
        default=5.0,
        gt=0,
        le=60,
        validation_alias=AliasChoices("socket_timeout_s", "socket_timeout"),
    )
    health_check_interval_s: int = Field(
        default=30,
        ge=0,
        le=600,
        validation_alias=AliasChoices("health_check_interval_s", "health_check_interval"),
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate coordination store URL format."""
        if not v.startswith(("redis://", "rediss://", "unix://")):
            raise ValueError(ErrorMessages.INVALID_REDIS_URL)
        return v


class DatabaseSettings(BaseModel):
    """Database configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    url: str = Field(
        default="sqlite:///data/playback.db",
        validation_alias=AliasChoices("url", "database_url", "db_url"),
    )
    busy_timeout_ms: BusyTimeoutMs = Field(
        default=5000,
        validation_alias=AliasChoices("busy_timeout_ms", "busy_timeout"),
    )
    connection_timeout_s: ConnectionTimeoutS = Field(
        default=10,
        validation_alias=AliasChoices("connection_timeout_s", "connection_timeout"),
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate database URL format."""
        if not v.startswith("sqlite://"):
            raise ValueError(ErrorMessages.INVALID_DATABASE_URL)
        return v


class SchedulerSettings(BaseModel):
    """Skip and session-end scheduler configuration."""

    model_config = SettingsConfigDict(frozen=True)

    skip_poll_interval_ms: int = Field(default=1000, ge=50, le=60_000)
    session_end_poll_interval_s: int = Field(default=60, ge=1, le=3600)
    command_channel: str = Field(default=PubSubChannels.WORKER, min_length=1)
    resubscribe_delay_s: float = Field(default=1.0, ge=0)


class PresenceSettings(BaseModel):
    """Listener presence and session liveness configuration."""

    model_config = SettingsConfigDict(frozen=True)

    activity_timeout_s: int = Field(default=120, ge=1)
    session_live_timeout_s: int = Field(default=900, ge=1)

    @property
    def activity_timeout(self) -> timedelta:
        return timedelta(seconds=self.activity_timeout_s)

    @property
    def session_live_timeout(self) -> timedelta:
        return timedelta(seconds=self.session_live_timeout_s)


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - REDIS__URL, REDIS__SOCKET_TIMEOUT_S (nested with ``__``)
    - DATABASE__URL, DATABASE__BUSY_TIMEOUT_MS
    - SCHEDULER__SKIP_POLL_INTERVAL_MS, SCHEDULER__COMMAND_CHANNEL
    - PRESENCE__ACTIVITY_TIMEOUT_S, PRESENCE__SESSION_LIVE_TIMEOUT_S
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    redis: RedisSettings = Field(default_factory=RedisSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)
    presence: PresenceSettings = Field(default_factory=PresenceSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
