"""
Utilities package for Squire.

Provides configuration management, the configuration bridge for chunking
options, and logging setup.
"""

from .config import ConfigManager
from .chunking_config_bridge import ChunkingConfigBridge
from .logging_config import LogFormat, LogLevel, JSONFormatter, setup_logging, setup_logging_from_config

__all__ = [
    "ConfigManager",
    "ChunkingConfigBridge",
    "LogFormat",
    "LogLevel",
    "JSONFormatter",
    "setup_logging",
    "setup_logging_from_config",
]
