"""Configuration package for the guide exporter."""

from pivotlaunch.config.app_config import (
    AppConfig,
    ExportConfig,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "ExportConfig",
    "clear_config_cache",
    "load_app_config",
]
