"""Core package containing errors and logging."""

from planpatch.core.errors import (
    ApplyError,
    BackupError,
    ConfigError,
    LedgerError,
    PlanPatchError,
    ProtocolError,
)
from planpatch.core.logging import get_logger, setup_logging

__all__ = [
    "ApplyError",
    "BackupError",
    "ConfigError",
    "LedgerError",
    "PlanPatchError",
    "ProtocolError",
    "get_logger",
    "setup_logging",
]
