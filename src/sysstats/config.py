"""Runtime settings for system-stats.

Values come from ``SYSSTATS_*`` environment variables; the defaults give the
stock behavior, so a bare start needs no configuration at all.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Server settings."""

    model_config = SettingsConfigDict(
        env_prefix="SYSSTATS_",
        case_sensitive=False,
        extra="ignore",
    )

    command_timeout: float = Field(
        default=30.0, gt=0, description="Seconds before a metric command is killed"
    )
    max_process_limit: int = Field(
        default=100, ge=1, description="Largest accepted 'limit' for the processes tool"
    )
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["console", "json"] = Field(
        default="console", description="Log renderer written to stderr"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}, got {v!r}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, loaded on first use."""
    return Settings()
