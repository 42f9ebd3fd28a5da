"""Logging infrastructure for PlanPatch."""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.logging import RichHandler

LOGGER_NAME = "PlanPatch"

# Log level mapping for environment variable
LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Log file settings
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 5

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def parse_log_level(value: str | None, default: int = logging.WARNING) -> int:
    """Convert a level name such as "info" to a logging constant.

    Args:
        value: Level name, case-insensitive. None yields the default.
        default: Level used for missing or unknown names.

    Returns:
        Logging level constant.
    """
    if not value:
        return default
    return LOG_LEVEL_MAP.get(value.upper(), default)


def get_log_level_from_env() -> int:
    """Get logging level from PLANPATCH_LOG_LEVEL environment variable.

    Returns:
        Logging level constant. Defaults to WARNING if not set or invalid.
    """
    return parse_log_level(os.environ.get("PLANPATCH_LOG_LEVEL"))


def get_default_log_file(data_dir: Path) -> Path:
    """Get the default log file path inside a data directory.

    Args:
        data_dir: Application data directory.

    Returns:
        Path to the log file.
    """
    return data_dir / "logs" / "planpatch.log"


def setup_logging(
    level: int | None = None,
    log_file: Path | None = None,
    console_output: bool = True,
    rich_console: bool = True,
    file_logging: bool = True,
) -> None:
    """Configure logging for PlanPatch.

    Level precedence: explicit ``level``, then PLANPATCH_LOG_LEVEL, then
    WARNING. The file handler always records DEBUG and rotates at 10 MB.

    Args:
        level: Console logging level. If None, uses env var or default.
        log_file: File path for log output. Required for file logging.
        console_output: Show logs on console (default: True).
        rich_console: Use Rich for console formatting (default: True).
        file_logging: Write logs to file when log_file is given.
    """
    handlers: list[logging.Handler] = []

    if level is None:
        level = get_log_level_from_env()

    if file_logging and log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=MAX_LOG_SIZE,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    if console_output:
        if rich_console:
            console_handler: logging.Handler = RichHandler(
                rich_tracebacks=True,
                show_time=True,
                show_path=False,
                level=level,
            )
        else:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            console_handler.setLevel(level)
        handlers.append(console_handler)

    root_logger = logging.getLogger(LOGGER_NAME)
    # DEBUG here so the file handler sees everything
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    for handler in handlers:
        root_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name.

    Args:
        name: The name for the logger (will be prefixed with 'PlanPatch.').

    Returns:
        A configured Logger instance.
    """
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
