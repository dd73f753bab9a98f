"""
Configuration management and loading.

Handles the optional YAML settings file for storage, export, analytics
and logging.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

import yaml

from dev_expense_tracker.export.csv_exporter import EXPORT_FILENAME
from dev_expense_tracker.storage.db import DEFAULT_DB_PATH

DEFAULT_CONFIG_FILENAME = "dev-expense-tracker.yaml"

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class StorageConfig:
    """Where the ledger is persisted."""
    db_path: str = DEFAULT_DB_PATH

    def __post_init__(self):
        """Validate the database path is set."""
        if not self.db_path.strip():
            raise ValueError("db_path cannot be empty")


@dataclass(frozen=True)
class ExportConfig:
    """Where CSV exports are written."""
    directory: str = "."
    filename: str = EXPORT_FILENAME

    def __post_init__(self):
        """Validate the export file name."""
        if not self.filename.strip():
            raise ValueError("filename cannot be empty")
        if Path(self.filename).name != self.filename:
            raise ValueError("filename must not contain a directory")


@dataclass(frozen=True)
class AnalyticsConfig:
    """Usage analytics switch."""
    enabled: bool = True


@dataclass(frozen=True)
class LoggingConfig:
    """Log output settings."""
    level: str = "WARNING"
    json: bool = False

    def __post_init__(self):
        """Validate log level."""
        if self.level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"level must be one of: {list(VALID_LOG_LEVELS)}")


@dataclass(frozen=True)
class AppConfig:
    """Complete application configuration."""
    storage: StorageConfig = field(default_factory=StorageConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_SECTION_SCHEMAS = {
    "storage": {"db_path": str},
    "export": {"directory": str, "filename": str},
    "analytics": {"enabled": bool},
    "logging": {"level": str, "json": bool},
}


def load_app_config(path: str) -> AppConfig:
    """Load and validate configuration from a YAML file.

    Strict validation rejects unknown keys and wrongly typed values so a
    typo never silently falls back to a default.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated AppConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if raw_config is None:
        return AppConfig()
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration must be a mapping")

    unknown_keys = set(raw_config.keys()) - set(_SECTION_SCHEMAS)
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")

    sections = {
        name: _parse_section(raw_config.get(name) or {}, name)
        for name in _SECTION_SCHEMAS
    }

    return AppConfig(
        storage=StorageConfig(**sections["storage"]),
        export=ExportConfig(**sections["export"]),
        analytics=AnalyticsConfig(**sections["analytics"]),
        logging=LoggingConfig(**sections["logging"]),
    )


def _parse_section(data: Dict, path: str) -> Dict:
    """Validate one configuration section against its schema.

    Args:
        data: Section data
        path: Section name for error messages

    Returns:
        Validated keyword arguments for the section's dataclass

    Raises:
        ValueError: If the section is invalid
    """
    if not isinstance(data, dict):
        raise ValueError(f"'{path}' must be a dictionary")

    schema = _SECTION_SCHEMAS[path]
    unknown_keys = set(data.keys()) - set(schema)
    if unknown_keys:
        raise ValueError(f"Unknown keys in {path}: {unknown_keys}")

    for key, expected_type in schema.items():
        if key in data and not isinstance(data[key], expected_type):
            raise ValueError(f"'{key}' in {path} must be of type {expected_type.__name__}")

    return dict(data)


def resolve_config(path: Optional[str] = None) -> AppConfig:
    """Load the config file given, or the default file if present.

    Args:
        path: Explicit config path; must exist when given

    Returns:
        AppConfig, defaults when no file is given or found
    """
    if path is not None:
        return load_app_config(path)
    if Path(DEFAULT_CONFIG_FILENAME).exists():
        return load_app_config(DEFAULT_CONFIG_FILENAME)
    return AppConfig()
