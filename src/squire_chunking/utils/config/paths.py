"""
Configuration file paths and constants for Squire.

This module provides the ConfigPaths dataclass containing default paths
used throughout the configuration system.
"""

from dataclasses import dataclass
from pathlib import Path

BUNDLED_SCHEMA_FILE = Path(__file__).with_name("config_schema.json")


@dataclass
class ConfigPaths:
    """Configuration file paths and constants."""

    DEFAULT_CONFIG_FILE: str = "squire.config.json"
    DEFAULT_CONFIG_DIR: str = "./config/defaults"
    SCHEMA_DIR: str = "./config/schema"
    ENV_FILE: str = ".env"
    DEFAULT_CONFIG_SCHEMA: str = "config_schema.json"
