"""
Logging configuration for Squire.

Console output goes through a rich handler; files can be written in the
standard, detailed or JSON line format. Library modules only ever call
logging.getLogger(__name__); applications choose handlers here.
"""

import json
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from rich.console import Console
from rich.logging import RichHandler

from .config import ConfigManager


class LogLevel(Enum):
    """Log level enumeration."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def from_name(cls, name: Union[str, "LogLevel"]) -> "LogLevel":
        if isinstance(name, cls):
            return name
        try:
            return cls[str(name).upper()]
        except KeyError:
            raise ValueError(f"Unknown log level: {name!r}")


class LogFormat(Enum):
    """Log format types."""
    STANDARD = "standard"
    JSON = "json"
    DETAILED = "detailed"


_STANDARD_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        for attr_name, attr_value in record.__dict__.items():
            if attr_name not in _STANDARD_RECORD_ATTRS and not attr_name.startswith('_'):
                log_data[attr_name] = attr_value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str, ensure_ascii=False, separators=(',', ':'))


def create_formatter(log_format: LogFormat) -> logging.Formatter:
    """Create the formatter for a log format."""
    if log_format is LogFormat.JSON:
        return JSONFormatter()
    if log_format is LogFormat.DETAILED:
        return logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s'
        )
    return logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')


def setup_logging(
    level: Union[str, LogLevel] = LogLevel.INFO,
    log_format: Union[str, LogFormat] = LogFormat.STANDARD,
    log_file: Optional[Union[str, Path]] = None,
    rich_console: bool = True,
    console: Optional[Console] = None,
) -> logging.Logger:
    """
    Configure the root logger.

    Args:
        level: Log level name or LogLevel
        log_format: Format for file output, and for console output when rich is disabled
        log_file: Optional file receiving log records
        rich_console: Use a rich handler for console output
        console: Console for the rich handler (default: stderr console)

    Returns:
        The squire_chunking package logger
    """
    log_level = LogLevel.from_name(level)
    log_format = LogFormat(log_format)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level.value)

    if rich_console:
        console_handler: logging.Handler = RichHandler(
            console=console or Console(stderr=True),
            show_time=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        console_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    else:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(create_formatter(log_format))
    console_handler.setLevel(log_level.value)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(log_level.value)
        file_handler.setFormatter(create_formatter(log_format))
        root_logger.addHandler(file_handler)

    package_logger = logging.getLogger("squire_chunking")
    package_logger.setLevel(log_level.value)
    return package_logger


def setup_logging_from_config(config_manager: ConfigManager) -> logging.Logger:
    """Configure logging from the 'logging' section of the configuration."""
    logging_config = config_manager.get("logging", {}) or {}
    return setup_logging(
        level=logging_config.get("level", "INFO"),
        log_format=logging_config.get("format", LogFormat.STANDARD.value),
        log_file=logging_config.get("file"),
        rich_console=logging_config.get("rich_console", True),
    )
