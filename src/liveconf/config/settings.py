"""Engine settings.

This module provides the EngineSettings class and settings singleton. These
are the knobs of liveconf itself (logging, watcher defaults), not the
application configuration liveconf binds.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from liveconf.config.validators import (
    validate_log_format,
    validate_log_level,
    validate_separator,
)


class EngineSettings(BaseSettings):
    """Settings for the configuration engine.

    Read from ``LIVECONF_*`` environment variables, validated by Pydantic.
    """

    model_config = SettingsConfigDict(
        env_prefix="LIVECONF_",
        case_sensitive=False,
        extra="ignore",
    )

    # Telemetry
    log_level: str = Field(
        default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_format: str = Field(default="console", description="Log format (json or console)")

    # Watcher defaults
    debounce_ms: int = Field(
        default=300, ge=0, description="Quiet period before an event-driven watcher reloads"
    )
    interval_ms: int = Field(
        default=5000, gt=0, description="Polling period of interval watchers"
    )

    # Environment sources
    env_separator: str = Field(
        default="__", description="Separator mapping flat variable names to nested paths"
    )
    env_json_parse: bool = Field(
        default=True, description="Opportunistically JSON-parse environment values"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        return validate_log_level(v)

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        return validate_log_format(v)

    @field_validator("env_separator")
    @classmethod
    def validate_env_separator(cls, v: str) -> str:
        """Validate environment separator."""
        return validate_separator(v)


_settings: EngineSettings | None = None


def get_settings() -> EngineSettings:
    """Get the engine settings singleton.

    Returns:
        EngineSettings instance (singleton pattern).
    """
    global _settings
    if _settings is None:
        _settings = EngineSettings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
