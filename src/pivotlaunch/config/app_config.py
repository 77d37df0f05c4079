"""Application configuration loader.

Loads centralized configuration from data/config/app_config_v1.yaml,
falling back to built-in defaults when the file is missing. Keys missing
from the file keep their default values.

Usage:
    from pivotlaunch.config.app_config import load_app_config

    config = load_app_config()
    config.export.filename_for("docx")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/app_config_v1.yaml")


@dataclass
class ExportConfig:
    """Export defaults."""

    default_format: str = "docx"
    document_title: str = "Pivot-and-Launch Project-Based Learning Guide"
    author: str = "Pivot-and-Launch PBL Toolkit"
    filenames: dict[str, str] = field(default_factory=dict)

    def filename_for(self, fmt: str) -> str:
        """Default download filename for a format tag."""
        return self.filenames.get(fmt) or _get_defaults()["export"]["filenames"].get(
            fmt, f"PBL-Templates-Export.{fmt}"
        )


@dataclass
class AppConfig:
    """Application-wide configuration."""

    export: ExportConfig = field(default_factory=ExportConfig)
    paths: dict[str, str] = field(default_factory=dict)

    @property
    def db_path(self) -> Path:
        return Path(self.paths.get("db_path", "db/pivotlaunch.db"))

    @property
    def overlays_file(self) -> Path:
        return Path(self.paths.get("overlays_file", "data/config/overlays_v1.yaml"))


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "export": {
            "default_format": "docx",
            "document_title": "Pivot-and-Launch Project-Based Learning Guide",
            "author": "Pivot-and-Launch PBL Toolkit",
            "filenames": {
                "docx": "PBL-Templates-Professional-Guide.docx",
                "word-html": "PBL-Templates-Professional-Guide.html",
                "pdf-html": "PBL-Templates-Professional-Guide-Print.html",
                "json": "PBL-Templates-Complete-Data.json",
                "csv": "PBL-Templates-Data.csv",
            },
        },
        "paths": {
            "db_path": "db/pivotlaunch.db",
            "overlays_file": "data/config/overlays_v1.yaml",
        },
    }


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    defaults = _get_defaults()

    export_data = data.get("export") or {}
    filenames = dict(defaults["export"]["filenames"])
    filenames.update(export_data.get("filenames") or {})
    export = ExportConfig(
        default_format=export_data.get("default_format", defaults["export"]["default_format"]),
        document_title=export_data.get("document_title", defaults["export"]["document_title"]),
        author=export_data.get("author", defaults["export"]["author"]),
        filenames=filenames,
    )

    paths = dict(defaults["paths"])
    paths.update(data.get("paths") or {})

    return AppConfig(export=export, paths=paths)


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    data: dict[str, Any]

    if CONFIG_FILE.exists():
        logger.debug("loading_app_config", source=str(CONFIG_FILE))
        data = yaml.safe_load(CONFIG_FILE.read_text(encoding="utf-8")) or {}
    else:
        logger.info("using_default_config")
        data = _get_defaults()

    _cached_config = _parse_config(data)
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
