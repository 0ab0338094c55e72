"""
Main configuration manager for Squire.

This module provides the ConfigManager class that orchestrates loading,
inheritance, environment overrides and schema validation.
"""

import logging
import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ...exceptions.config_exceptions import (
    ConfigurationError,
    ConfigurationFileNotFoundError,
)
from .environment import EnvironmentHandler
from .file_operations import FileOperations
from .inheritance import ConfigInheritance
from .paths import ConfigPaths
from .schema_validation import SchemaValidator


logger = logging.getLogger(__name__)

_MISSING = object()


class ConfigManager:
    """
    Configuration manager for Squire.

    Loads configuration from, in increasing precedence:
    - config/defaults/default_config.json (when present)
    - the main configuration file and its 'extends' chain
    - SQUIRE_* environment variables, including those from a .env file

    The merged result is validated against the JSON schema.

    Example:
        >>> config = ConfigManager(project_root="/srv/squire")
        >>> config.get("chunking.max_tokens", 512)
        512
    """

    def __init__(
        self,
        config_file: Optional[str] = None,
        project_root: Optional[Union[str, Path]] = None,
        load_env: bool = True,
        environment_handler: Optional[EnvironmentHandler] = None,
    ) -> None:
        """
        Initialize the ConfigManager.

        Args:
            config_file: Path to main configuration file (default: squire.config.json)
            project_root: Project root directory (default: current working directory)
            load_env: Whether to load environment variables from the .env file
            environment_handler: Environment override handler (default: reads os.environ)
        """
        self.project_root = Path(project_root or os.getcwd()).resolve()
        self.paths = ConfigPaths()
        self.config_file = config_file or self.paths.DEFAULT_CONFIG_FILE

        self._config: Dict[str, Any] = {}
        self._loaded = False

        self.logger = logger

        self.file_ops = FileOperations(self.project_root, self.paths.ENV_FILE)
        self.schema_validator = SchemaValidator(self.file_ops, self.paths)
        self.inheritance = ConfigInheritance(self.file_ops, self.paths)
        self.env_handler = environment_handler or EnvironmentHandler()

        if load_env:
            self.file_ops.load_environment_variables()

    @property
    def config(self) -> Dict[str, Any]:
        """Get the current configuration. Loads if not already loaded."""
        if not self._loaded:
            self.load_config()
        return deepcopy(self._config)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load_config(self, force_reload: bool = False, validate: bool = True) -> Dict[str, Any]:
        """
        Load configuration from all sources.

        Args:
            force_reload: Force reloading even if already loaded
            validate: Whether to validate configuration against the schema

        Returns:
            Loaded configuration dictionary

        Raises:
            ConfigurationFileNotFoundError: If the main configuration file is missing
            ConfigurationError: If loading, merging or validation fails
        """
        if self._loaded and not force_reload:
            self.logger.debug("Configuration already loaded, returning cached version")
            return deepcopy(self._config)

        self.logger.info(f"Loading configuration from {self.config_file}")

        try:
            main_config_path = self.file_ops.resolve_path(self.config_file)
            raw_config = self.file_ops.load_json_file(main_config_path)

            self.logger.debug("Resolving configuration inheritance")
            inherited_config = self.inheritance.resolve_config_inheritance(raw_config)

            self.logger.debug("Merging with default configuration")
            merged_config = self.inheritance.merge_with_defaults(inherited_config)

            self.logger.debug("Applying environment variable overrides")
            final_config = self.env_handler.apply_environment_overrides(merged_config)
            final_config.pop('extends', None)

            if validate:
                self.schema_validator.validate_config(final_config, config_file=str(main_config_path))

        except ConfigurationFileNotFoundError as e:
            self.logger.error(f"Configuration file not found: {e}")
            self._loaded = False
            raise
        except ConfigurationError as e:
            self.logger.error(f"Configuration loading failed: {e}")
            self._loaded = False
            raise

        self._config = final_config
        self._loaded = True
        self.logger.info("Configuration loaded successfully")
        return deepcopy(self._config)

    def reload_config(self) -> Dict[str, Any]:
        """Force reload configuration from all sources."""
        return self.load_config(force_reload=True)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by key using dot notation.

        Args:
            key: Configuration key (supports dot notation like 'chunking.max_tokens')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value: Any = self.config
        try:
            for k in key.split('.'):
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value by key using dot notation.

        This modifies the in-memory configuration only.
        """
        if not self._loaded:
            self.load_config()

        keys = key.split('.')
        config = self._config
        for k in keys[:-1]:
            if not isinstance(config.get(k), dict):
                config[k] = {}
            config = config[k]
        config[keys[-1]] = value

    def has(self, key: str) -> bool:
        """Check if a configuration key exists."""
        return self.get(key, _MISSING) is not _MISSING

    def reset(self) -> None:
        """Reset configuration state, forcing reload on next access."""
        self._config = {}
        self._loaded = False
