"""
Environment variable handling for configuration management.

This module maps SQUIRE_* environment variables onto configuration keys and
converts their string values to the types the schema expects.
"""

import logging
import os
from copy import deepcopy
from typing import Any, Dict, Mapping, Optional, Tuple

from ...exceptions.config_exceptions import (
    EnvironmentVariableError,
)


logger = logging.getLogger(__name__)

# Environment variable -> (configuration key, value type)
ENV_MAPPING: Dict[str, Tuple[str, str]] = {
    'SQUIRE_CHUNK_STRATEGY': ('chunking.strategy', 'string'),
    'SQUIRE_CHUNK_MAX_TOKENS': ('chunking.max_tokens', 'integer'),
    'SQUIRE_CHUNK_OVERLAP_TOKENS': ('chunking.overlap_tokens', 'integer'),
    'SQUIRE_CHUNK_MIN_TOKENS': ('chunking.min_tokens', 'integer'),
    'SQUIRE_CHUNK_PRESERVE_PARAGRAPHS': ('chunking.preserve_paragraphs', 'boolean'),
    'SQUIRE_CHUNK_PRESERVE_SENTENCES': ('chunking.preserve_sentences', 'boolean'),
    'SQUIRE_CHUNK_HYBRID_TOLERANCE': ('chunking.hybrid_tolerance', 'float'),
    'SQUIRE_LOG_LEVEL': ('logging.level', 'string'),
    'SQUIRE_LOG_FORMAT': ('logging.format', 'string'),
    'SQUIRE_LOG_FILE': ('logging.file', 'string'),
}

_TRUE_VALUES = ('true', '1', 'yes', 'on', 'enabled')
_FALSE_VALUES = ('false', '0', 'no', 'off', 'disabled')


class EnvironmentHandler:
    """
    Environment variable overrides for configuration.

    Handles environment variable overrides and type conversion.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        """
        Initialize environment handler.

        Args:
            environ: Environment to read from (default: os.environ at lookup time)
        """
        self._environ = environ
        self.logger = logger

    def get_env_mapping(self) -> Dict[str, Tuple[str, str]]:
        """Get mapping of environment variable names to configuration keys and types."""
        return dict(ENV_MAPPING)

    def convert_env_value(self, value: str, target_type: str = 'string', variable_name: Optional[str] = None) -> Any:
        """
        Convert an environment variable string to a Python value.

        Args:
            value: Environment variable value
            target_type: Target type ('string', 'boolean', 'integer', 'float')
            variable_name: Variable name for error reporting

        Returns:
            Converted value

        Raises:
            EnvironmentVariableError: If conversion fails
        """
        try:
            if target_type == 'boolean':
                lowered = value.strip().lower()
                if lowered in _TRUE_VALUES:
                    return True
                if lowered in _FALSE_VALUES:
                    return False
                raise ValueError(f"expected one of {', '.join(_TRUE_VALUES + _FALSE_VALUES)}")
            elif target_type == 'integer':
                return int(value)
            elif target_type == 'float':
                return float(value)
            else:
                return value
        except ValueError as e:
            raise EnvironmentVariableError(
                f"Failed to convert environment variable value '{value}' to {target_type}: {e}",
                variable_name
            ) from e

    def apply_environment_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply environment variable overrides to configuration.

        Args:
            config: Base configuration dictionary

        Returns:
            New configuration with overrides applied

        Raises:
            EnvironmentVariableError: If a set variable cannot be converted
        """
        environ = self._environ if self._environ is not None else os.environ
        result = deepcopy(config)

        for env_var, (config_key, target_type) in ENV_MAPPING.items():
            env_value = environ.get(env_var)
            if env_value is None or env_value == '':
                continue

            converted_value = self.convert_env_value(env_value, target_type, env_var)
            self._set_nested_value(result, config_key, converted_value)
            self.logger.debug(f"Applied environment override: {env_var} -> {config_key}")

        return result

    def _set_nested_value(self, config: Dict[str, Any], key_path: str, value: Any) -> None:
        """Set a nested value in configuration using dot notation."""
        keys = key_path.split('.')
        current = config

        for key in keys[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value
