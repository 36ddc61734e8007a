"""Configuration management for Castline."""

from castline.core.config.loader import (
    configure_logging,
    load_app_config,
    load_config,
)
from castline.core.config.models import (
    AppConfig,
    EnemyDefaults,
    LoggingConfig,
    TimelineDefaults,
)

__all__ = [
    # Loaders
    "load_config",
    "load_app_config",
    "configure_logging",
    # Models
    "AppConfig",
    "EnemyDefaults",
    "LoggingConfig",
    "TimelineDefaults",
]
