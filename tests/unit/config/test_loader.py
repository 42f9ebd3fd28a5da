"""Tests for configuration loader."""

from pathlib import Path

import pytest

from planpatch.config.loader import ConfigLoader
from planpatch.core import ConfigError


def make_loader(tmp_path: Path, environ: dict[str, str] | None = None) -> ConfigLoader:
    return ConfigLoader(
        user_dir=tmp_path / "user",
        project_dir=tmp_path / "project",
        environ=environ if environ is not None else {},
    )


class TestConfigLoaderInit:
    """Tests for ConfigLoader initialization."""

    def test_default_directories(self, temp_home: Path, temp_project: Path) -> None:
        loader = ConfigLoader()

        assert loader.user_dir == temp_home / ".planpatch"
        assert loader.project_dir == temp_project / ".planpatch"


class TestConfigLoaderLoadAll:
    """Tests for ConfigLoader.load_all()."""

    def test_load_defaults_only(self, tmp_path: Path) -> None:
        config = make_loader(tmp_path).load_all()

        assert config.logging.level == "WARNING"
        assert config.apply.detect_encoding is True

    def test_load_user_yaml(self, tmp_path: Path) -> None:
        user_dir = tmp_path / "user"
        user_dir.mkdir()
        (user_dir / "settings.yaml").write_text("logging:\n  level: info\n")

        config = make_loader(tmp_path).load_all()

        assert config.logging.level == "INFO"

    def test_user_json_preferred_over_yaml(self, tmp_path: Path) -> None:
        user_dir = tmp_path / "user"
        user_dir.mkdir()
        (user_dir / "settings.json").write_text('{"logging": {"level": "error"}}')
        (user_dir / "settings.yaml").write_text("logging:\n  level: info\n")

        config = make_loader(tmp_path).load_all()

        assert config.logging.level == "ERROR"

    def test_precedence(self, tmp_path: Path) -> None:
        """Later sources override earlier ones, section by section."""
        user_dir = tmp_path / "user"
        project_dir = tmp_path / "project"
        user_dir.mkdir()
        project_dir.mkdir()
        (user_dir / "settings.json").write_text(
            '{"logging": {"level": "debug", "file_logging": false},'
            ' "apply": {"default_description": "from user"}}'
        )
        (project_dir / "settings.json").write_text('{"logging": {"level": "info"}}')
        (project_dir / "settings.local.json").write_text(
            '{"apply": {"default_description": "from local"}}'
        )

        config = make_loader(tmp_path, {"PLANPATCH_LOG_LEVEL": "critical"}).load_all()

        assert config.logging.level == "CRITICAL"
        assert config.logging.file_logging is False
        assert config.apply.default_description == "from local"

    def test_invalid_file_is_skipped(self, tmp_path: Path) -> None:
        project_dir = tmp_path / "project"
        project_dir.mkdir()
        (project_dir / "settings.json").write_text("{not json")

        config = make_loader(tmp_path).load_all()

        assert config.logging.level == "WARNING"

    def test_invalid_values_raise_config_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="validation failed"):
            make_loader(tmp_path, {"PLANPATCH_LOG_LEVEL": "loud"}).load_all()

    def test_config_property_caches(self, tmp_path: Path) -> None:
        loader = make_loader(tmp_path)

        assert loader.config is loader.config


class TestConfigLoaderMerge:
    """Tests for ConfigLoader.merge()."""

    def test_deep_merge(self, tmp_path: Path) -> None:
        loader = make_loader(tmp_path)
        base = {"a": {"x": 1, "y": 2}, "b": 1}

        result = loader.merge(base, {"a": {"y": 3}, "c": 4})

        assert result == {"a": {"x": 1, "y": 3}, "b": 1, "c": 4}

    def test_inputs_not_mutated(self, tmp_path: Path) -> None:
        loader = make_loader(tmp_path)
        base = {"a": {"x": 1}}
        override = {"a": {"y": [1]}}

        result = loader.merge(base, override)
        result["a"]["y"].append(2)

        assert base == {"a": {"x": 1}}
        assert override == {"a": {"y": [1]}}
