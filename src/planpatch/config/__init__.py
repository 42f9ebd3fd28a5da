"""Configuration system for PlanPatch."""

from planpatch.config.loader import ConfigLoader
from planpatch.config.models import (
    ApplyConfig,
    LoggingConfig,
    PlanPatchConfig,
    StorageConfig,
)
from planpatch.config.sources import (
    EnvironmentSource,
    IConfigSource,
    JsonFileSource,
    YamlFileSource,
)

__all__ = [
    "ApplyConfig",
    "ConfigLoader",
    "EnvironmentSource",
    "IConfigSource",
    "JsonFileSource",
    "LoggingConfig",
    "PlanPatchConfig",
    "StorageConfig",
    "YamlFileSource",
]
