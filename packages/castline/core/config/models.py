"""Configuration models for Castline."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from castline.core.timeline.vocabulary import (
    DEFAULT_CAST_DURATION_S,
    DEFAULT_TIME_RESOLUTION_S,
    DEFAULT_TIMELINE_LENGTH_S,
    MAX_TIME_RESOLUTION_S,
    MAX_TIMELINE_LENGTH_S,
    MIN_TIME_RESOLUTION_S,
    MIN_TIMELINE_LENGTH_S,
)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = Field(default=False, description="Emit JSON log records")
    filename: str | None = Field(default=None, description="Log file path (stdout if unset)")


class TimelineDefaults(BaseModel):
    """Timeline settings applied to fresh states and snapshots lacking them."""

    length_s: float = Field(
        default=DEFAULT_TIMELINE_LENGTH_S,
        ge=MIN_TIMELINE_LENGTH_S,
        le=MAX_TIMELINE_LENGTH_S,
        description="Visible timeline length in seconds",
    )
    resolution_s: float = Field(
        default=DEFAULT_TIME_RESOLUTION_S,
        ge=MIN_TIME_RESOLUTION_S,
        le=MAX_TIME_RESOLUTION_S,
        description="Time grid spacing in seconds",
    )
    default_cast_duration_s: float = Field(
        default=DEFAULT_CAST_DURATION_S,
        gt=0,
        description="Cast duration used when a skill has no positive effect duration",
    )


class EnemyDefaults(BaseModel):
    """Base stats for the fixed enemy actor."""

    name: str = "Enemy"
    atk: float = Field(default=1000.0, ge=0)
    crit: float = Field(default=200.0, ge=0)
    crit_dmg: float = Field(default=200.0, ge=0)


class AppConfig(BaseModel):
    """Application-level configuration."""

    model_config = ConfigDict(extra="ignore")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    timeline: TimelineDefaults = Field(default_factory=TimelineDefaults)
    enemy: EnemyDefaults = Field(default_factory=EnemyDefaults)


__all__ = [
    "AppConfig",
    "EnemyDefaults",
    "LoggingConfig",
    "TimelineDefaults",
]
