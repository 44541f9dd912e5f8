"""
System configuration.

One YAML file configures the whole tool. Missing files or keys fall back to
built-in defaults; `${VAR}` placeholders are substituted from the environment.

Example config/tradeboard.yaml:

    analysis:
      max_drawdowns: 5
      drawdown_threshold: 0.02
      annualization_factor: 252

    output:
      default_results_dir: output/reports

    logging:
      level: INFO
      enable_file: false
"""

import os
import re
from dataclasses import asdict, dataclass, field, fields
from decimal import Decimal
from pathlib import Path
from typing import Any, Literal, TypeVar

import yaml

from tradeboard.system.log_system import LoggingConfig as LoggerConfig

DEFAULT_CONFIG_PATH = Path("config/tradeboard.yaml")
CONFIG_ENV_VAR = "TRADEBOARD_CONFIG"

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

_Section = TypeVar("_Section")


@dataclass
class AnalysisConfig:
    """Metrics computation settings.

    Attributes:
        max_drawdowns: Number of largest drawdown periods to surface
        drawdown_threshold: Minimum decline from peak (fraction) for a drawdown point
        annualization_factor: Periods per year used to scale the Sharpe ratio
        default_strategy_name: Display name when no symbol can be derived
    """

    max_drawdowns: int = 5
    drawdown_threshold: Decimal = Decimal("0.02")
    annualization_factor: int = 252
    default_strategy_name: str = "Trading Strategy"

    def __post_init__(self) -> None:
        if not isinstance(self.drawdown_threshold, Decimal):
            self.drawdown_threshold = Decimal(str(self.drawdown_threshold))
        if self.max_drawdowns < 0:
            raise ValueError(f"max_drawdowns must be >= 0, got {self.max_drawdowns}")
        if self.annualization_factor <= 0:
            raise ValueError(f"annualization_factor must be > 0, got {self.annualization_factor}")


@dataclass
class OutputConfig:
    """Report output settings."""

    default_results_dir: str = "output/reports"
    report_filename: str = "metrics.json"


@dataclass
class LoggingConfig:
    """Logging section of the system config (see log_system.LoggingConfig)."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json"] = "console"
    timestamp_format: Literal["iso", "compact", "time", "short"] = "compact"
    enable_file: bool = True
    file_path: str = "logs/tradeboard.log"
    file_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    file_rotation: bool = True
    max_file_size_mb: int = 10
    backup_count: int = 3
    console_width: int = 0

    def to_logger_config(self) -> LoggerConfig:
        """Convert to the LoggingConfig model consumed by LoggerFactory."""
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
            console_width=self.console_width,
        )


@dataclass
class SystemConfig:
    """Complete system configuration."""

    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, path: Path | str | None = None) -> "SystemConfig":
        """
        Load configuration from YAML, merged over defaults.

        Resolution order for the file: explicit path, $TRADEBOARD_CONFIG,
        config/tradeboard.yaml. A missing file yields the defaults.
        """
        if path is None:
            env_path = os.environ.get(CONFIG_ENV_VAR)
            path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH
        path = Path(path)

        defaults = asdict(cls())
        if not path.exists():
            return cls._from_dict(defaults)

        with open(path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file {path} must contain a mapping, got {type(loaded).__name__}")

        merged = _deep_merge(defaults, _substitute_env_vars(loaded))
        return cls._from_dict(merged)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "SystemConfig":
        """Build config from a (possibly partial) dictionary."""
        unknown = sorted(set(data) - {f.name for f in fields(cls)})
        if unknown:
            raise ValueError(f"Unknown config section(s): {', '.join(map(str, unknown))}")
        return cls(
            analysis=_build_section(AnalysisConfig, "analysis", data.get("analysis")),
            output=_build_section(OutputConfig, "output", data.get("output")),
            logging=_build_section(LoggingConfig, "logging", data.get("logging")),
        )


def _build_section(section_cls: type[_Section], name: str, values: Any) -> _Section:
    """Instantiate one config section; unknown keys raise ValueError naming them."""
    if values is None:
        return section_cls()
    if not isinstance(values, dict):
        raise ValueError(f"Config section '{name}' must be a mapping, got {type(values).__name__}")
    unknown = sorted(set(values) - {f.name for f in fields(section_cls)})
    if unknown:
        raise ValueError(f"Unknown key(s) in config section '{name}': {', '.join(map(str, unknown))}")
    return section_cls(**values)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into a copy of base; override wins."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _substitute_env_vars(value: Any) -> Any:
    """Replace ${VAR} in strings (recursively); undefined vars are left as-is."""
    if isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env_vars(v) for v in value]
    if isinstance(value, str):
        return _ENV_VAR_PATTERN.sub(lambda m: os.environ.get(m.group(1), m.group(0)), value)
    return value


_system_config: SystemConfig | None = None


def get_system_config(path: Path | str | None = None) -> SystemConfig:
    """
    Get the system config singleton.

    An explicit path always reloads from that file.
    """
    global _system_config
    if path is not None:
        _system_config = SystemConfig.load(path)
    elif _system_config is None:
        _system_config = SystemConfig.load()
    return _system_config


def reload_system_config(path: Path | str | None = None) -> SystemConfig:
    """Force reload of the system config singleton."""
    global _system_config
    _system_config = SystemConfig.load(path)
    return _system_config
