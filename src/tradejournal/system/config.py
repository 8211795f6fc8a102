"""
System configuration for TradeJournal.

One configuration for the whole application, loaded from YAML:

    journal:
      snapshot_path: data/journal.json

    report:
      currency: USD
      hide_amounts: false
      date_format: "%m/%d/%Y"
      recent_trades: 5

    logging:
      level: INFO
      format: console

Load order:
1. Explicit path passed to SystemConfig.load()
2. config/system.yaml in the working directory
3. Built-in defaults

Values may reference environment variables as ${VAR} or ${VAR:-default}.
"""

import os
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Literal

import yaml

from tradejournal.system.log_system import LoggingConfig as LoggerConfig

DEFAULT_CONFIG_PATH = Path("config/system.yaml")

_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@dataclass
class JournalConfig:
    """Where journal records come from.

    Attributes:
        snapshot_path: Default JSON snapshot read by the CLI report command
    """

    snapshot_path: str = "data/journal.json"


@dataclass
class ReportConfig:
    """Presentation settings for CLI reports.

    Attributes:
        currency: ISO 4217 code used when a portfolio does not specify one
        hide_amounts: Mask monetary values in output
        date_format: strftime format for dates in tables
        recent_trades: Number of most recent closed trades to list
    """

    currency: str = "USD"
    hide_amounts: bool = False
    date_format: str = "%m/%d/%Y"
    recent_trades: int = 5

    def __post_init__(self) -> None:
        if self.recent_trades < 0:
            raise ValueError(f"recent_trades cannot be negative, got {self.recent_trades}")
        if len(self.currency) != 3:
            raise ValueError(f"currency must be a 3-letter ISO code, got '{self.currency}'")


@dataclass
class LoggingConfig:
    """Logging section of the system configuration."""

    level: LogLevel = "INFO"
    format: Literal["console", "json"] = "console"
    timestamp_format: Literal["iso", "compact", "time", "short"] = "compact"
    enable_file: bool = False
    file_path: str = "logs/tradejournal.log"
    file_level: LogLevel = "WARNING"
    file_rotation: bool = True
    max_file_size_mb: int = 10
    backup_count: int = 3

    def to_logger_config(self) -> LoggerConfig:
        """Convert to the logging system's configuration model."""
        return LoggerConfig(
            level=self.level,
            format=self.format,
            timestamp_format=self.timestamp_format,
            enable_file=self.enable_file,
            file_path=Path(self.file_path),
            file_level=self.file_level,
            file_rotation=self.file_rotation,
            max_file_size_mb=self.max_file_size_mb,
            backup_count=self.backup_count,
        )


@dataclass
class SystemConfig:
    """Complete system configuration."""

    journal: JournalConfig = field(default_factory=JournalConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, path: str | Path | None = None) -> "SystemConfig":
        """
        Load configuration from YAML, merged over built-in defaults.

        Args:
            path: Explicit config file. Falls back to config/system.yaml, then defaults.

        Returns:
            SystemConfig instance

        Raises:
            ValueError: If the YAML cannot be parsed or holds invalid values
        """
        config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH

        if not config_path.exists():
            return cls()

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML from {config_path}: {e}")

        if not isinstance(raw, dict):
            raise ValueError(f"Top level of {config_path} must be a mapping")

        return cls._from_dict(_substitute_env_vars(raw))

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "SystemConfig":
        """Build config from a (possibly partial) dictionary."""
        merged = _deep_merge(_defaults_as_dict(), data)
        return cls(
            journal=_build_section(JournalConfig, merged.get("journal", {})),
            report=_build_section(ReportConfig, merged.get("report", {})),
            logging=_build_section(LoggingConfig, merged.get("logging", {})),
        )


def _defaults_as_dict() -> dict[str, Any]:
    defaults = SystemConfig()
    return {
        "journal": {f.name: getattr(defaults.journal, f.name) for f in fields(JournalConfig)},
        "report": {f.name: getattr(defaults.report, f.name) for f in fields(ReportConfig)},
        "logging": {f.name: getattr(defaults.logging, f.name) for f in fields(LoggingConfig)},
    }


def _build_section(section_cls: type, values: dict[str, Any]) -> Any:
    known = {f.name for f in fields(section_cls)}
    unknown = set(values) - known
    if unknown:
        raise ValueError(f"Unknown {section_cls.__name__} keys: {sorted(unknown)}")
    return section_cls(**values)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into a copy of base."""
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _substitute_env_vars(value: Any) -> Any:
    """Expand ${VAR} and ${VAR:-default} in every string of a parsed YAML tree.

    Unset variables without a default are left untouched.
    """
    if isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env_vars(v) for v in value]
    if isinstance(value, str):

        def replace(match: re.Match[str]) -> str:
            name, default = match.group(1), match.group(2)
            if name in os.environ:
                return os.environ[name]
            if default is not None:
                return default
            return match.group(0)

        return _ENV_VAR_PATTERN.sub(replace, value)
    return value


_system_config: SystemConfig | None = None


def get_system_config() -> SystemConfig:
    """Get the process-wide system configuration, loading it on first use."""
    global _system_config
    if _system_config is None:
        _system_config = SystemConfig.load()
    return _system_config


def reload_system_config(path: str | Path | None = None) -> SystemConfig:
    """Force reload of the process-wide system configuration."""
    global _system_config
    _system_config = SystemConfig.load(path)
    return _system_config
