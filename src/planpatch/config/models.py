"""Configuration models for PlanPatch.

This module defines Pydantic models for all configuration sections,
including validation and defaults.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


def default_data_dir() -> Path:
    """Get the default application data directory.

    Returns:
        ``$XDG_DATA_HOME/planpatch`` if set, else ``~/.local/share/planpatch``.
    """
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        base = Path(xdg_data)
    else:
        base = Path.home() / ".local" / "share"
    return base / "planpatch"


class StorageConfig(BaseModel):
    """Where backups and the undo history live.

    Attributes:
        data_dir: Application-private data directory.
        backups_dir: Backup directory name, relative to data_dir.
        history_file: Undo history file, relative to data_dir.
    """

    model_config = ConfigDict(validate_assignment=True)

    data_dir: Path = Field(default_factory=default_data_dir)
    backups_dir: str = "backups"
    history_file: str = "history/undo_history.json"

    @field_validator("data_dir", mode="before")
    @classmethod
    def expand_data_dir(cls, v: str | Path) -> Path:
        """Expand ~ in the data directory."""
        return Path(v).expanduser()

    @field_validator("backups_dir", "history_file")
    @classmethod
    def validate_relative(cls, v: str) -> str:
        """Require non-empty relative locations."""
        if not v or not v.strip():
            raise ValueError("Storage location must be a non-empty string")
        if Path(v).is_absolute():
            raise ValueError(f"Storage location must be relative: {v}")
        return v.strip()

    @property
    def backups_path(self) -> Path:
        """Absolute backup directory."""
        return self.data_dir / self.backups_dir

    @property
    def history_path(self) -> Path:
        """Absolute undo history file."""
        return self.data_dir / self.history_file


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Console log level name.
        file_logging: Whether to write a rotating log file.
        log_file: Explicit log file; defaults to <data_dir>/logs/planpatch.log.
    """

    model_config = ConfigDict(validate_assignment=True)

    level: str = "WARNING"
    file_logging: bool = True
    log_file: Path | None = None

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate the level name."""
        level = v.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


class ApplyConfig(BaseModel):
    """Change application settings.

    Attributes:
        detect_encoding: Detect file encoding before a modify and keep it.
        default_description: Change set description when none is given.
    """

    model_config = ConfigDict(validate_assignment=True)

    detect_encoding: bool = True
    default_description: str = "Applied plan changes"


class PlanPatchConfig(BaseModel):
    """Root configuration model.

    Attributes:
        storage: Backup and history locations.
        logging: Logging settings.
        apply: Change application settings.
    """

    model_config = ConfigDict(validate_assignment=True)

    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    apply: ApplyConfig = Field(default_factory=ApplyConfig)
