"""Configuration management package.

This package provides a modular configuration system with support for:
- JSON schema validation
- Environment variable overrides (including .env files)
- Configuration inheritance through 'extends'
- Project default configuration

Usage:
    from squire_chunking.utils.config import ConfigManager

    config = ConfigManager()
    max_tokens = config.get("chunking.max_tokens", 512)
"""

from .manager import ConfigManager
from .paths import ConfigPaths
from .file_operations import FileOperations
from .schema_validation import SchemaValidator
from .inheritance import ConfigInheritance
from .environment import EnvironmentHandler

__all__ = [
    'ConfigManager',
    'ConfigPaths',
    'FileOperations',
    'SchemaValidator',
    'ConfigInheritance',
    'EnvironmentHandler'
]
