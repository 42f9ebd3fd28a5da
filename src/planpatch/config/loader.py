"""Configuration loader for PlanPatch.

This module implements the ConfigLoader class that handles hierarchical
configuration loading, merging and validation.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from planpatch.config.models import PlanPatchConfig
from planpatch.config.sources import (
    EnvironmentSource,
    IConfigSource,
    JsonFileSource,
    YamlFileSource,
)
from planpatch.core import ConfigError, get_logger

logger = get_logger("config.loader")


class ConfigLoader:
    """Configuration loader with hierarchical merging.

    Load order (later overrides earlier):
    1. Defaults (from PlanPatchConfig)
    2. User settings (~/.planpatch/settings.json or .yaml)
    3. Project settings (.planpatch/settings.json or .yaml)
    4. Local settings (.planpatch/settings.local.json)
    5. Environment variables (PLANPATCH_*)
    """

    def __init__(
        self,
        user_dir: Path | None = None,
        project_dir: Path | None = None,
        environ: dict[str, str] | None = None,
    ) -> None:
        """Initialize configuration loader.

        Args:
            user_dir: User configuration directory. Defaults to ~/.planpatch
            project_dir: Project configuration directory. Defaults to ./.planpatch
            environ: Environment mapping. Defaults to os.environ.
        """
        self._user_dir = user_dir or Path.home() / ".planpatch"
        self._project_dir = project_dir or Path.cwd() / ".planpatch"
        self._environ = environ
        self._config: PlanPatchConfig | None = None

    @property
    def config(self) -> PlanPatchConfig:
        """Get current configuration, loading if necessary."""
        if self._config is None:
            self._config = self.load_all()
        return self._config

    @property
    def user_dir(self) -> Path:
        return self._user_dir

    @property
    def project_dir(self) -> Path:
        return self._project_dir

    def load_all(self) -> PlanPatchConfig:
        """Load and merge all configuration sources.

        Returns:
            Validated PlanPatchConfig with all sources merged.

        Raises:
            ConfigError: If the merged configuration does not validate.
        """
        config: dict[str, Any] = {}

        for directory in (self._user_dir, self._project_dir):
            config = self._load_and_merge(config, self._settings_source(directory))

        local_json = self._project_dir / "settings.local.json"
        config = self._load_and_merge(config, JsonFileSource(local_json))

        config = self._load_and_merge(config, EnvironmentSource(self._environ))

        try:
            return PlanPatchConfig.model_validate(config)
        except ValidationError as e:
            logger.error("Configuration validation failed: %s", e)
            raise ConfigError(f"Configuration validation failed: {e}") from e

    @staticmethod
    def _settings_source(directory: Path) -> IConfigSource:
        """Pick settings.json, falling back to settings.yaml."""
        json_path = directory / "settings.json"
        if json_path.exists():
            return JsonFileSource(json_path)
        return YamlFileSource(directory / "settings.yaml")

    def _load_and_merge(
        self,
        base: dict[str, Any],
        source: IConfigSource,
    ) -> dict[str, Any]:
        """Load from source and merge into base config.

        Unreadable sources are logged and skipped.
        """
        try:
            if source.exists():
                override = source.load()
                if override:
                    logger.debug("Loaded config from %s", source)
                    return self.merge(base, override)
        except ConfigError as e:
            logger.warning("Skipped config source %s: %s", source, e)
        except FileNotFoundError:
            logger.debug("Config source %s disappeared before load", source)
        return base

    def merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two configuration dictionaries.

        Nested dictionaries are merged recursively; other values are
        replaced. The result shares no references with the inputs.
        """
        result = copy.deepcopy(base)

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self.merge(result[key], value)
            else:
                result[key] = copy.deepcopy(value)

        return result
