"""
Unit tests for configuration loading and validation.

Tests strict validation and error handling for the settings file.
"""

import os
import tempfile

import pytest
import yaml

from dev_expense_tracker.config.loader import (
    AnalyticsConfig,
    AppConfig,
    ExportConfig,
    LoggingConfig,
    StorageConfig,
    load_app_config,
    resolve_config,
)


class TestConfigLoading:
    """Test configuration loading and validation."""

    def setup_method(self):
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self):
        """Clean up test environment."""
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write_config(self, config_data, filename: str = "config.yaml") -> str:
        """Write configuration data to temporary file."""
        config_path = os.path.join(self.temp_dir, filename)
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(config_data, f)
        return config_path

    def test_valid_config_loads_correctly(self):
        """Test that a full configuration loads correctly."""
        config_path = self._write_config({
            "storage": {"db_path": "data/ledger.db"},
            "export": {"directory": "exports", "filename": "spend.csv"},
            "analytics": {"enabled": False},
            "logging": {"level": "debug", "json": True},
        })
        config = load_app_config(config_path)

        assert config.storage.db_path == "data/ledger.db"
        assert config.export == ExportConfig(directory="exports", filename="spend.csv")
        assert config.analytics.enabled is False
        assert config.logging.level == "debug"
        assert config.logging.json is True

    def test_partial_config_uses_defaults(self):
        """Test that omitted sections and keys keep their defaults."""
        config = load_app_config(self._write_config({"analytics": {"enabled": False}}))

        assert config.storage == StorageConfig()
        assert config.export.filename == "dev-expenses.csv"
        assert config.logging == LoggingConfig()
        assert config.analytics == AnalyticsConfig(enabled=False)

    def test_empty_file_gives_defaults(self):
        """Test that an empty file is the default configuration."""
        config_path = os.path.join(self.temp_dir, "empty.yaml")
        open(config_path, "w").close()
        assert load_app_config(config_path) == AppConfig()

    def test_missing_file_raises_error(self):
        """Test that an explicit missing file is an error."""
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_app_config(os.path.join(self.temp_dir, "missing.yaml"))

    def test_invalid_yaml_raises_error(self):
        """Test that malformed YAML is reported."""
        config_path = os.path.join(self.temp_dir, "bad.yaml")
        with open(config_path, "w", encoding="utf-8") as f:
            f.write("storage: [unclosed")
        with pytest.raises(yaml.YAMLError):
            load_app_config(config_path)

    def test_unknown_top_level_key(self):
        """Test that unknown sections are rejected."""
        with pytest.raises(ValueError, match="Unknown configuration keys"):
            load_app_config(self._write_config({"sync": {"enabled": True}}))

    def test_unknown_section_key(self):
        """Test that unknown keys inside a section are rejected."""
        with pytest.raises(ValueError, match="Unknown keys in storage"):
            load_app_config(self._write_config({"storage": {"path": "x.db"}}))

    def test_non_mapping_config(self):
        """Test that a top-level list is rejected."""
        with pytest.raises(ValueError, match="must be a mapping"):
            load_app_config(self._write_config(["storage"]))

    def test_section_must_be_dictionary(self):
        """Test that scalar sections are rejected."""
        with pytest.raises(ValueError, match="'export' must be a dictionary"):
            load_app_config(self._write_config({"export": "here"}))

    @pytest.mark.parametrize("section,data", [
        ("analytics", {"enabled": "yes"}),
        ("logging", {"json": 1}),
        ("storage", {"db_path": 5}),
    ])
    def test_wrong_types_rejected(self, section, data):
        """Test that wrongly typed values are rejected."""
        with pytest.raises(ValueError, match="must be of type"):
            load_app_config(self._write_config({section: data}))

    def test_invalid_log_level(self):
        """Test that unknown log levels are rejected."""
        with pytest.raises(ValueError, match="level must be one of"):
            load_app_config(self._write_config({"logging": {"level": "LOUD"}}))

    def test_empty_db_path_rejected(self):
        """Test that a blank database path is rejected."""
        with pytest.raises(ValueError, match="db_path cannot be empty"):
            load_app_config(self._write_config({"storage": {"db_path": " "}}))

    def test_export_filename_must_be_plain(self):
        """Test that export file names cannot include directories."""
        with pytest.raises(ValueError, match="must not contain a directory"):
            load_app_config(self._write_config({"export": {"filename": "out/x.csv"}}))


class TestResolveConfig:
    """Test choosing which config file to load."""

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        """Test that no file means default configuration."""
        monkeypatch.chdir(tmp_path)
        assert resolve_config() == AppConfig()

    def test_picks_up_default_file(self, tmp_path, monkeypatch):
        """Test that ./dev-expense-tracker.yaml is used when present."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "dev-expense-tracker.yaml").write_text(
            "storage:\n  db_path: found.db\n", encoding="utf-8"
        )
        assert resolve_config().storage.db_path == "found.db"

    def test_explicit_path_must_exist(self, tmp_path):
        """Test that an explicit path is not silently ignored."""
        with pytest.raises(FileNotFoundError):
            resolve_config(str(tmp_path / "nope.yaml"))
