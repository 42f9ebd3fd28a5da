"""Tests for configuration sources."""

import json
from pathlib import Path

import pytest

from planpatch.config.sources import (
    EnvironmentSource,
    JsonFileSource,
    YamlFileSource,
)
from planpatch.core import ConfigError


class TestJsonFileSource:
    """Tests for JsonFileSource."""

    def test_load_valid_json(self, tmp_path: Path) -> None:
        """Test loading valid JSON file."""
        config_file = tmp_path / "settings.json"
        config_file.write_text('{"storage": {"data_dir": "/data"}}')

        data = JsonFileSource(config_file).load()

        assert data["storage"]["data_dir"] == "/data"

    def test_load_whitespace_only(self, tmp_path: Path) -> None:
        """Test loading whitespace-only file returns empty dict."""
        config_file = tmp_path / "settings.json"
        config_file.write_text("   \n\t  ")

        assert JsonFileSource(config_file).load() == {}

    def test_load_missing_file(self, tmp_path: Path) -> None:
        """Test loading missing file returns empty dict."""
        assert JsonFileSource(tmp_path / "nonexistent.json").load() == {}

    def test_load_invalid_json(self, tmp_path: Path) -> None:
        """Test loading invalid JSON raises ConfigError."""
        config_file = tmp_path / "settings.json"
        config_file.write_text('{"broken": }')

        with pytest.raises(ConfigError) as exc_info:
            JsonFileSource(config_file).load()

        assert "Invalid JSON" in str(exc_info.value)

    def test_load_non_object_json(self, tmp_path: Path) -> None:
        """Test loading non-object JSON raises ConfigError."""
        config_file = tmp_path / "settings.json"
        config_file.write_text(json.dumps(["array", "not", "object"]))

        with pytest.raises(ConfigError, match="root must be object"):
            JsonFileSource(config_file).load()

    def test_exists_false_directory(self, tmp_path: Path) -> None:
        """Test exists returns False for directory."""
        assert JsonFileSource(tmp_path).exists() is False

    def test_path_property(self, tmp_path: Path) -> None:
        config_file = tmp_path / "settings.json"
        assert JsonFileSource(config_file).path == config_file


class TestYamlFileSource:
    """Tests for YamlFileSource."""

    def test_load_valid_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "settings.yaml"
        config_file.write_text("logging:\n  level: debug\n  file_logging: false\n")

        data = YamlFileSource(config_file).load()

        assert data == {"logging": {"level": "debug", "file_logging": False}}

    def test_load_empty_yaml(self, tmp_path: Path) -> None:
        """Test an empty YAML document loads as empty dict."""
        config_file = tmp_path / "settings.yaml"
        config_file.write_text("")

        assert YamlFileSource(config_file).load() == {}

    def test_load_invalid_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "settings.yaml"
        config_file.write_text("logging: [unclosed")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            YamlFileSource(config_file).load()

    def test_load_non_mapping_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "settings.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="root must be mapping"):
            YamlFileSource(config_file).load()


class TestEnvironmentSource:
    """Tests for EnvironmentSource."""

    def test_empty_environment(self) -> None:
        assert EnvironmentSource({}).load() == {}

    def test_maps_variables_to_sections(self) -> None:
        source = EnvironmentSource({
            "PLANPATCH_DATA_DIR": "/tmp/pp",
            "PLANPATCH_LOG_LEVEL": "info",
        })

        assert source.load() == {
            "storage": {"data_dir": "/tmp/pp"},
            "logging": {"level": "info"},
        }

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("true", True), ("1", True), ("YES", True), ("on", True), ("false", False), ("0", False)],
    )
    def test_boolean_conversion(self, value: str, expected: bool) -> None:
        data = EnvironmentSource({"PLANPATCH_FILE_LOGGING": value}).load()

        assert data["logging"]["file_logging"] is expected

    def test_ignores_unrelated_variables(self) -> None:
        assert EnvironmentSource({"HOME": "/root", "PLANPATCH_OTHER": "x"}).load() == {}

    def test_defaults_to_os_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PLANPATCH_DETECT_ENCODING", "false")

        data = EnvironmentSource().load()

        assert data == {"apply": {"detect_encoding": False}}

    def test_always_exists(self) -> None:
        assert EnvironmentSource({}).exists() is True
