"""Configuration sources for PlanPatch.

This module implements the Strategy pattern for loading configuration
from different sources (JSON files, YAML files, environment variables).
"""

from __future__ import annotations

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, ClassVar

import yaml

from planpatch.core import ConfigError, get_logger

logger = get_logger("config.sources")


class IConfigSource(ABC):
    """Interface for configuration sources."""

    @abstractmethod
    def load(self) -> dict[str, Any]:
        """Load configuration from source.

        Returns:
            Dictionary containing configuration data.
            Returns empty dict if source doesn't exist.

        Raises:
            ConfigError: If source exists but cannot be parsed.
        """
        ...

    @abstractmethod
    def exists(self) -> bool:
        """Check if source exists."""
        ...


class JsonFileSource(IConfigSource):
    """Load configuration from JSON file."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> dict[str, Any]:
        """Load configuration from JSON file.

        Raises:
            ConfigError: If file exists but contains invalid JSON.
        """
        if not self.exists():
            return {}

        try:
            content = self._path.read_text(encoding="utf-8")
            if not content.strip():
                return {}
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning("Invalid JSON in %s: %s", self._path, e)
            raise ConfigError(f"Invalid JSON in {self._path}: {e}") from e
        except OSError as e:
            logger.warning("Cannot read %s: %s", self._path, e)
            raise ConfigError(f"Cannot read {self._path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"JSON root must be object, got {type(data).__name__}")
        return data

    def exists(self) -> bool:
        return self._path.is_file()

    @property
    def path(self) -> Path:
        return self._path

    def __repr__(self) -> str:
        return f"JsonFileSource({self._path})"


class YamlFileSource(IConfigSource):
    """Load configuration from YAML file."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> dict[str, Any]:
        """Load configuration from YAML file.

        Raises:
            ConfigError: If file exists but contains invalid YAML.
        """
        if not self.exists():
            return {}

        try:
            with self._path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.warning("Invalid YAML in %s: %s", self._path, e)
            raise ConfigError(f"Invalid YAML in {self._path}: {e}") from e
        except OSError as e:
            logger.warning("Cannot read %s: %s", self._path, e)
            raise ConfigError(f"Cannot read {self._path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"YAML root must be mapping, got {type(data).__name__}")
        return data

    def exists(self) -> bool:
        return self._path.is_file()

    @property
    def path(self) -> Path:
        return self._path

    def __repr__(self) -> str:
        return f"YamlFileSource({self._path})"


class EnvironmentSource(IConfigSource):
    """Load configuration from environment variables.

    - PLANPATCH_DATA_DIR -> storage.data_dir
    - PLANPATCH_LOG_LEVEL -> logging.level
    - PLANPATCH_FILE_LOGGING -> logging.file_logging
    - PLANPATCH_DETECT_ENCODING -> apply.detect_encoding
    """

    MAPPINGS: ClassVar[dict[str, tuple[str, str]]] = {
        "PLANPATCH_DATA_DIR": ("storage", "data_dir"),
        "PLANPATCH_LOG_LEVEL": ("logging", "level"),
        "PLANPATCH_FILE_LOGGING": ("logging", "file_logging"),
        "PLANPATCH_DETECT_ENCODING": ("apply", "detect_encoding"),
    }

    BOOLEAN_KEYS: ClassVar[frozenset[str]] = frozenset({
        "file_logging", "detect_encoding"
    })

    def __init__(self, environ: dict[str, str] | None = None) -> None:
        """Initialize environment source.

        Args:
            environ: Environment dictionary. Defaults to os.environ.
        """
        self._environ = environ if environ is not None else dict(os.environ)

    def load(self) -> dict[str, Any]:
        config: dict[str, Any] = {}

        for env_var, (section, key) in self.MAPPINGS.items():
            value = self._environ.get(env_var)
            if value is None:
                continue
            if key in self.BOOLEAN_KEYS:
                converted: Any = value.lower() in ("true", "1", "yes", "on")
            else:
                converted = value
            config.setdefault(section, {})[key] = converted

        return config

    def exists(self) -> bool:
        """Environment always exists."""
        return True

    def __repr__(self) -> str:
        return "EnvironmentSource()"
