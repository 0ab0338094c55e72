"""
Schema validation for configuration management.

This module loads the JSON schema and validates configuration against it
with jsonschema, reporting every violation rather than the first only.
"""

import logging
from typing import Any, Dict, Optional

import jsonschema

from ...exceptions.config_exceptions import (
    ConfigurationError,
    ConfigurationSchemaError,
    ConfigurationValidationError,
)
from .file_operations import FileOperations
from .paths import BUNDLED_SCHEMA_FILE, ConfigPaths


logger = logging.getLogger(__name__)


class SchemaValidator:
    """
    Schema validation for configuration management.

    A project schema under ``config/schema`` takes precedence over the schema
    bundled with the package.
    """

    def __init__(self, file_ops: FileOperations, paths: ConfigPaths) -> None:
        self.file_ops = file_ops
        self.paths = paths
        self.logger = logger

    def load_schema(self, schema_file: Optional[str] = None) -> Dict[str, Any]:
        """
        Load the JSON schema for configuration validation.

        Args:
            schema_file: Path to schema file (default: project schema, then bundled schema)

        Returns:
            Loaded JSON schema

        Raises:
            ConfigurationSchemaError: If schema loading fails
        """
        if schema_file:
            schema_path = self.file_ops.resolve_path(schema_file)
        else:
            schema_path = self.file_ops.resolve_path(
                f"{self.paths.SCHEMA_DIR}/{self.paths.DEFAULT_CONFIG_SCHEMA}"
            )
            if not schema_path.exists():
                schema_path = BUNDLED_SCHEMA_FILE

        try:
            schema = self.file_ops.load_json_file(schema_path)
        except ConfigurationError as e:
            raise ConfigurationSchemaError(
                f"Failed to load configuration schema: {e}",
                str(schema_path)
            ) from e

        self.logger.debug(f"Loaded configuration schema from {schema_path}")
        return schema

    def validate_config_against_schema(
        self,
        config: Dict[str, Any],
        schema: Dict[str, Any],
        config_file: str = "unknown"
    ) -> None:
        """
        Validate configuration against a JSON schema.

        Args:
            config: Configuration dictionary to validate
            schema: JSON schema
            config_file: Configuration file name for error reporting

        Raises:
            ConfigurationValidationError: If validation fails
            ConfigurationSchemaError: If the schema itself is invalid
        """
        try:
            validator_class = jsonschema.validators.validator_for(schema)
            validator_class.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ConfigurationSchemaError(
                f"Invalid JSON schema: {e.message}",
                schema_errors=[e.message]
            ) from e

        errors = sorted(validator_class(schema).iter_errors(config), key=lambda e: [str(p) for p in e.absolute_path])
        if not errors:
            return

        validation_errors = []
        invalid_fields = []
        for error in errors:
            field_path = ".".join(str(p) for p in error.absolute_path)
            validation_errors.append(f"{field_path}: {error.message}" if field_path else error.message)
            if field_path:
                invalid_fields.append(field_path)

        raise ConfigurationValidationError(
            f"Configuration validation failed: {errors[0].message}",
            config_file,
            validation_errors,
            invalid_fields
        )

    def validate_config(
        self,
        config: Dict[str, Any],
        schema_file: Optional[str] = None,
        config_file: str = "unknown"
    ) -> bool:
        """
        Validate configuration against the schema.

        Returns:
            True if validation passes

        Raises:
            ConfigurationValidationError: If validation fails
            ConfigurationSchemaError: If schema is invalid
        """
        schema = self.load_schema(schema_file)
        self.validate_config_against_schema(config, schema, config_file)
        return True
