"""
Configuration inheritance and merging for Squire.

This module resolves 'extends' chains between configuration files and merges
user configuration over the project defaults.
"""

import logging
from copy import deepcopy
from typing import Any, Dict, Optional, Set

from ...exceptions.config_exceptions import (
    ConfigurationError,
    ConfigurationMergeError,
)
from .file_operations import FileOperations
from .paths import ConfigPaths


logger = logging.getLogger(__name__)


class ConfigInheritance:
    """
    Configuration inheritance and merging.

    Handles configuration inheritance using 'extends' fields, deep merging,
    and default configuration integration.
    """

    def __init__(self, file_ops: FileOperations, paths: ConfigPaths) -> None:
        self.file_ops = file_ops
        self.paths = paths
        self.logger = logger

    def resolve_config_inheritance(
        self,
        config: Dict[str, Any],
        visited_files: Optional[Set[str]] = None
    ) -> Dict[str, Any]:
        """
        Resolve configuration inheritance using the 'extends' field.

        Args:
            config: Configuration dictionary that may contain an 'extends' field
            visited_files: Files already visited, to detect circular references

        Returns:
            Configuration with the parent chain merged underneath it

        Raises:
            ConfigurationMergeError: If a parent is missing or a cycle is detected
        """
        if visited_files is None:
            visited_files = set()

        if 'extends' not in config:
            return config

        resolved_extends_path = str(self.file_ops.resolve_path(config['extends']))

        if resolved_extends_path in visited_files:
            raise ConfigurationMergeError(
                f"Circular reference detected in configuration inheritance: {resolved_extends_path}",
                sorted(visited_files) + [resolved_extends_path]
            )

        visited_files.add(resolved_extends_path)

        try:
            parent_config = self.file_ops.load_json_file(resolved_extends_path)
        except ConfigurationError as e:
            raise ConfigurationMergeError(
                f"Failed to resolve configuration inheritance: {e}",
                [resolved_extends_path]
            ) from e

        resolved_parent = self.resolve_config_inheritance(parent_config, visited_files.copy())
        current_config = {k: v for k, v in config.items() if k != 'extends'}

        self.logger.debug(f"Merged configuration over parent {resolved_extends_path}")
        return self.deep_merge_dicts(resolved_parent, current_config)

    def merge_with_defaults(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge configuration over the project default configuration, if present.

        Args:
            config: User configuration

        Returns:
            Configuration merged with defaults
        """
        default_config_path = self.file_ops.resolve_path(
            f"{self.paths.DEFAULT_CONFIG_DIR}/default_config.json"
        )

        if not default_config_path.exists():
            self.logger.debug(f"No default configuration at {default_config_path}")
            return config

        default_config = self.file_ops.load_json_file(default_config_path)
        resolved_defaults = self.resolve_config_inheritance(default_config)
        return self.deep_merge_dicts(resolved_defaults, config)

    def deep_merge_dicts(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """
        Deep merge two dictionaries, with override values taking precedence.

        Args:
            base: Base dictionary
            override: Override dictionary (values take precedence)

        Returns:
            Merged dictionary
        """
        result = deepcopy(base)

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self.deep_merge_dicts(result[key], value)
            else:
                result[key] = deepcopy(value)

        return result
