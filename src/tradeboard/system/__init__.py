"""
System configuration package.

Exports:
    - SystemConfig: Complete system configuration dataclass
    - AnalysisConfig: Metrics computation settings
    - get_system_config: Get system config singleton
    - reload_system_config: Force reload system config
    - LoggerFactory: Factory for creating configured loggers
    - LoggingConfig: Logging configuration model
"""

from tradeboard.system.config import AnalysisConfig, SystemConfig, get_system_config, reload_system_config
from tradeboard.system.log_system import LoggerFactory, LoggingConfig

__all__ = [
    "SystemConfig",
    "AnalysisConfig",
    "get_system_config",
    "reload_system_config",
    "LoggerFactory",
    "LoggingConfig",
]
