"""Centralized logging configuration for tradeboard."""

import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Literal

import structlog
from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingConfig(BaseModel):
    """Configuration for logging system.

    Logging Levels Guide:

    INFO (Default):
    - Dataset loaded (summary)
    - Metrics computed (round trips, total return)

    DEBUG:
    - Trades found per strategy/symbol
    - Dropped unpaired trades
    - Config resolution

    WARNING:
    - Dataset holds no trades
    - Superseded or failed recomputation

    ERROR:
    - Malformed input, unparseable trade fields

    Timestamp Format Options:
    - "iso": 2025-10-22T20:50:07.288824Z (full ISO format)
    - "compact": 251022-205007.28 (YYMMDD-HHMMSS.ms) - recommended
    - "time": 20:50:07.28 (time only)
    - "short": 1022T205007 (MMDDTHHMMSS)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Minimum log level (INFO=user-friendly, DEBUG=verbose, WARNING=issues only)",
    )
    format: Literal["console", "json"] = Field(
        default="console",
        description="Output format: console, or json",
    )
    timestamp_format: Literal["iso", "compact", "time", "short"] = Field(
        default="compact",
        description="Timestamp format for console output",
    )
    enable_file: bool = Field(
        default=True,
        description="Enable logging to file (WARNING and above by default)",
    )
    file_path: Path | None = Field(
        default=None,
        description="Path to log file (uses logs/tradeboard.log if None)",
    )
    file_level: LogLevel = Field(
        default="WARNING",
        description="Minimum log level for file output",
    )
    file_rotation: bool = Field(
        default=True,
        description="Enable log file rotation (when file gets too large)",
    )
    max_file_size_mb: int = Field(
        default=10,
        description="Maximum log file size in MB before rotation",
    )
    backup_count: int = Field(
        default=3,
        description="Number of rotated log files to keep",
    )
    console_width: int = Field(
        default=0,
        description="Maximum console line width (0 = no limit)",
    )


class LoggerFactory:
    """
    Factory for creating and configuring structured loggers.

    Call configure() once at application startup, then use get_logger()
    to get configured logger instances.

    Example:
        # At startup
        config = LoggingConfig(level="DEBUG", enable_file=True, file_path=Path("tradeboard.log"))
        LoggerFactory.configure(config)

        # In modules
        logger = LoggerFactory.get_logger()
        logger.info("metrics.computed", round_trips=12)
    """

    _config: LoggingConfig | None = None
    _configured: bool = False

    @classmethod
    def configure(cls, config: LoggingConfig | None = None) -> None:
        """
        Configure the logging system.

        Args:
            config: LoggingConfig instance. If None, uses default configuration.
        """
        if config is None:
            config = LoggingConfig()

        cls._config = config

        processors = cls._build_common_processors(config.timestamp_format)

        console_handler = logging.StreamHandler(stream=sys.stderr)
        console_handler.setLevel(getattr(logging, config.level))
        console_processor: Any
        if config.format == "console":
            console_processor = cls._custom_console_renderer()
        else:
            console_processor = structlog.processors.JSONRenderer()
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=console_processor,
                foreign_pre_chain=processors,
            )
        )

        handlers: list[logging.Handler] = [console_handler]
        root_level = getattr(logging, config.level)

        if config.enable_file:
            if config.file_path is None:
                config.file_path = Path("logs/tradeboard.log")

            file_handler = cls._configure_file_logging(config, processors)
            handlers.append(file_handler)
            root_level = min(root_level, getattr(logging, config.file_level))

        logging.basicConfig(level=root_level, handlers=handlers, force=True)

        configured_processors = list(processors)
        if config.format == "console":
            configured_processors.extend(
                [
                    structlog.dev.set_exc_info,
                    structlog.processors.ExceptionRenderer(
                        structlog.dev.plain_traceback,  # type: ignore[arg-type]
                    ),
                ]
            )
        else:
            configured_processors.append(structlog.processors.format_exc_info)
        configured_processors.append(structlog.stdlib.ProcessorFormatter.wrap_for_formatter)

        structlog.configure(
            processors=configured_processors,
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        cls._configured = True

    @classmethod
    def _build_common_processors(cls, timestamp_format: str) -> list[Any]:
        """Processors shared by both structlog and stdlib handlers before rendering."""
        return [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            cls._get_timestamper(timestamp_format),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.CallsiteParameterAdder(
                [
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
        ]

    @staticmethod
    def _get_timestamper(fmt: str) -> Any:
        """Get timestamper for the configured format.

        Uses 'log_timestamp' so it never collides with domain fields such as
        a trade's 'time'.
        """

        def add_timestamp_processor(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
            now = datetime.now(timezone.utc)
            ms = now.microsecond // 10000

            if fmt == "compact":
                event_dict["log_timestamp"] = now.strftime(f"%y%m%d-%H%M%S.{ms:02d}")
            elif fmt == "time":
                event_dict["log_timestamp"] = now.strftime(f"%H:%M:%S.{ms:02d}")
            elif fmt == "short":
                event_dict["log_timestamp"] = now.strftime("%m%dT%H%M%S")
            else:
                event_dict["log_timestamp"] = now.isoformat()

            return event_dict

        return add_timestamp_processor

    @staticmethod
    def _custom_console_renderer() -> Callable[[Any, str, dict[str, Any]], str]:
        """Console renderer: timestamp, colored level, event, context, location."""
        config = LoggerFactory.get_config()

        def renderer(logger: Any, name: str, event_dict: dict[str, Any]) -> str:
            timestamp = event_dict.pop("log_timestamp", "")
            level = event_dict.pop("level", "info").upper()
            event = event_dict.pop("event", "")
            filename = event_dict.pop("filename", "")
            lineno = event_dict.pop("lineno", "")
            logger_name = event_dict.pop("logger", "")

            formatted = _SystemLogFormatters.format_system_log(event, event_dict, level, timestamp)
            if formatted is None:
                formatted = _SystemLogFormatters.format_fallback(event, event_dict, level, timestamp)

            if filename and lineno:
                module_file = Path(filename).stem
                if logger_name and logger_name != "tradeboard" and not logger_name.endswith(module_file):
                    location = f"{logger_name}.{module_file}:{lineno}"
                else:
                    location = f"{logger_name or module_file}:{lineno}"
                formatted = f"{formatted} {_SystemLogFormatters.GRAY}({location}){_SystemLogFormatters.RESET}"

            if config.console_width > 0 and len(formatted) > config.console_width:
                formatted = formatted[: config.console_width]
            return formatted

        return renderer

    @classmethod
    def _configure_file_logging(cls, config: LoggingConfig, pre_chain: list[Any]) -> logging.Handler:
        """Configure JSON-lines file output."""
        file_path = config.file_path
        assert file_path is not None  # Already defaulted in configure()

        file_path.parent.mkdir(parents=True, exist_ok=True)

        handler: logging.Handler
        if config.file_rotation:
            handler = RotatingFileHandler(
                filename=str(file_path),
                maxBytes=config.max_file_size_mb * 1024 * 1024,
                backupCount=config.backup_count,
                encoding="utf-8",
            )
        else:
            handler = logging.FileHandler(
                filename=str(file_path),
                encoding="utf-8",
            )

        handler.setLevel(getattr(logging, config.file_level))
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.processors.JSONRenderer(),
                foreign_pre_chain=pre_chain,
            )
        )

        return handler

    @classmethod
    def get_logger(cls, name: str | None = None):
        """
        Get a configured logger instance.

        Args:
            name: Optional logger name. If None, uses the calling module's __name__.

        Returns:
            Configured structlog BoundLogger instance.
        """
        if not cls._configured:
            cls.configure()

        if name is None:
            import inspect

            frame = inspect.currentframe()
            if frame and frame.f_back:
                name = frame.f_back.f_globals.get("__name__", "tradeboard")
            else:
                name = "tradeboard"

        return structlog.get_logger(name)

    @classmethod
    def get_config(cls) -> LoggingConfig:
        """Get current logging configuration."""
        if cls._config is None:
            return LoggingConfig()
        return cls._config

    @classmethod
    def is_configured(cls) -> bool:
        """Check if logging has been configured."""
        return cls._configured

    @classmethod
    def reset(cls) -> None:
        """Reset logging configuration (mainly for testing)."""
        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
            handler.close()
        root_logger.handlers.clear()
        root_logger.setLevel(logging.NOTSET)
        cls._config = None
        cls._configured = False
        structlog.reset_defaults()


class _SystemLogFormatters:
    """ANSI formatters for console logs, keyed on the event name prefix."""

    CYAN = "\033[36m"
    MAGENTA = "\033[35m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    GRAY = "\033[90m"
    DIM = "\033[2m"
    BOLD = "\033[1m"
    RESET = "\033[0m"

    LEVEL_COLORS = {
        "DEBUG": CYAN,
        "INFO": GREEN,
        "WARNING": YELLOW,
        "ERROR": RED,
        "CRITICAL": MAGENTA,
    }

    _CATEGORIES = {
        "extraction.": "Extraction",
        "metrics.": "Metrics",
        "dashboard.": "Dashboard",
        "loader.": "Loader",
        "report.": "Report",
    }

    _METADATA_KEYS = ("log_timestamp", "level", "event", "filename", "lineno", "logger")

    @classmethod
    def format_system_log(cls, event: str, event_dict: dict[str, Any], level: str, timestamp: str) -> str | None:
        """
        Format a log line for a known event category.

        Returns formatted string, or None to use fallback formatting.
        """
        for prefix, category in cls._CATEGORIES.items():
            if event.startswith(prefix):
                color = cls.LEVEL_COLORS.get(level, cls.RESET)
                msg = event[len(prefix) :].replace("_", " ").title()
                parts = [
                    f"{cls.DIM}{timestamp}{cls.RESET}",
                    f"{color}{category}{cls.RESET}",
                    f"{cls.BOLD}{msg}{cls.RESET}",
                ]
                context = cls._format_context(event_dict)
                if context:
                    parts.append(context)
                return " | ".join(parts)
        return None

    @classmethod
    def format_fallback(cls, event: str, event_dict: dict[str, Any], level: str, timestamp: str) -> str:
        """Plain `timestamp [level] event | key=value` line."""
        color = cls.LEVEL_COLORS.get(level, "")
        parts = [timestamp, f"[{color}{level.lower()}{cls.RESET}]", str(event)]
        context = cls._format_context(event_dict)
        if context:
            parts.append(f"{cls.GRAY}|{cls.RESET} {context}")
        return " ".join(p for p in parts if p)

    @classmethod
    def _format_context(cls, event_dict: dict[str, Any]) -> str:
        context_parts = []
        for key, value in sorted(event_dict.items()):
            if key.startswith("_") or key in cls._METADATA_KEYS:
                continue
            context_parts.append(f"{key}={cls.CYAN}{value}{cls.RESET}")
        return " ".join(context_parts)
