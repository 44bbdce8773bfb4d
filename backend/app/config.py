"""Portal file service configuration.

Loads settings from a single YAML file:
  * portal.settings.yaml : non-secret configuration

Relative paths inside the file (the file storage directory) are resolved
against the project root when the settings live in a ``config/`` directory,
and against the settings file's own directory otherwise.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

SETTINGS_FILE = Path("portal.settings.yaml")

DEFAULT_MAX_FILE_SIZE_BYTES = 20 * 1024 * 1024


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.warning("Config file not found: %s", path)
        return {}
    with path.open(encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


def _base_dir_for(settings_path: Path) -> Path:
    settings_dir = settings_path.resolve().parent
    if settings_dir.name == "config":
        return settings_dir.parent
    return settings_dir


# ---------------------------------------------------------------------------
# Settings models
# ---------------------------------------------------------------------------


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000


class LoggingSettings(BaseModel):
    level: str = "info"


class FileStorageSettings(BaseModel):
    """Where and how uploaded files are stored on disk."""
    directory:           str  = "./files"
    ftp_enabled:         bool = False
    # Dot, comma or space separated, e.g. ".pdf.png.docx" or "pdf,png,docx".
    # Empty disables the whitelist.
    upload_extensions:   str  = ""
    max_file_size_bytes: int  = DEFAULT_MAX_FILE_SIZE_BYTES

    @field_validator("upload_extensions", mode="before")
    @classmethod
    def _join_extension_list(cls, value: Any) -> Any:
        # YAML lists are accepted as well as the flat string form
        if isinstance(value, (list, tuple)):
            return ",".join(str(v) for v in value)
        if value is None:
            return ""
        return value

    @field_validator("max_file_size_bytes")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("max_file_size_bytes must be >= 0 (0 = unlimited)")
        return value


class MessageSettings(BaseModel):
    default_locale: str = "en"


class AppConfig(BaseModel):
    server:       ServerSettings      = Field(default_factory=ServerSettings)
    logging:      LoggingSettings     = Field(default_factory=LoggingSettings)
    file_storage: FileStorageSettings = Field(default_factory=FileStorageSettings)
    messages:     MessageSettings     = Field(default_factory=MessageSettings)


# ---------------------------------------------------------------------------
# Public loader
# ---------------------------------------------------------------------------


def load_config(settings_path: Optional[Path] = None) -> AppConfig:
    """Load *portal.settings.yaml* into an :class:`AppConfig`."""
    path = Path(settings_path) if settings_path else SETTINGS_FILE
    data = _load_yaml(path)

    config = AppConfig(**data)

    directory = Path(config.file_storage.directory)
    if not directory.is_absolute():
        directory = _base_dir_for(path) / directory
        config.file_storage.directory = str(directory)

    logger.info(
        "Settings loaded (server=%s:%s, file_storage.directory=%s, ftp_enabled=%s)",
        config.server.host,
        config.server.port,
        config.file_storage.directory,
        config.file_storage.ftp_enabled,
    )
    return config


_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Return the process-wide config, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: Optional[AppConfig]) -> None:
    """Replace (or clear) the process-wide config."""
    global _config
    _config = config
