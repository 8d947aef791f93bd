"""Core app services for settings and logging."""

from .config import (
    AppConfig,
    ChartTextConfig,
    LoggingConfig,
    TelemetryConfig,
    config_path,
    load_config,
    save_config,
    toggle_text,
)

__all__ = [
    "AppConfig",
    "ChartTextConfig",
    "LoggingConfig",
    "TelemetryConfig",
    "config_path",
    "load_config",
    "save_config",
    "toggle_text",
]
