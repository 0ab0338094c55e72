"""
Configuration-related exceptions for Squire.

Custom exception classes for configuration loading, schema validation,
inheritance and environment variable errors, each carrying suggested fixes
that are appended to the message.
"""

from typing import List, Optional


class ConfigurationError(Exception):
    """Base exception for configuration-related errors."""

    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ) -> None:
        """
        Initialize configuration error.

        Args:
            message: Error description
            config_file: Configuration file path that caused the error
            suggestions: List of suggested fixes
        """
        super().__init__(message)
        self.config_file = config_file
        self.suggestions = suggestions or []

    def __str__(self) -> str:
        """Return formatted error message with suggestions."""
        msg = super().__str__()

        if self.config_file:
            msg = f"{msg}\nConfig file: {self.config_file}"

        if self.suggestions:
            msg += "\n\nSuggestions:"
            for i, suggestion in enumerate(self.suggestions, 1):
                msg += f"\n  {i}. {suggestion}"

        return msg


class ConfigurationFileNotFoundError(ConfigurationError):
    """Exception raised when a configuration file is not found."""

    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        searched_paths: Optional[List[str]] = None
    ) -> None:
        suggestions = [
            "Check that the configuration file exists at the given path",
            "Pass an absolute path if the project root is not the working directory",
        ]

        if searched_paths:
            suggestions.append(f"Searched in: {', '.join(searched_paths)}")

        super().__init__(message, config_file, suggestions)
        self.searched_paths = searched_paths or []


class ConfigurationValidationError(ConfigurationError):
    """Exception raised when configuration validation fails."""

    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        validation_errors: Optional[List[str]] = None,
        invalid_fields: Optional[List[str]] = None
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error description
            config_file: Configuration file with validation errors
            validation_errors: List of specific validation error messages
            invalid_fields: List of field names that failed validation
        """
        suggestions = [
            "Compare the chunking section with config/defaults/default_config.json",
            "Keep chunking.overlap_tokens below chunking.max_tokens",
        ]

        if invalid_fields:
            suggestions.append(f"Fix these fields: {', '.join(invalid_fields)}")

        super().__init__(message, config_file, suggestions)
        self.validation_errors = validation_errors or []
        self.invalid_fields = invalid_fields or []

    def __str__(self) -> str:
        """Return formatted validation error with details."""
        msg = super().__str__()

        if self.validation_errors:
            msg += "\n\nValidation errors:"
            for i, error in enumerate(self.validation_errors, 1):
                msg += f"\n  {i}. {error}"

        return msg


class EnvironmentVariableError(ConfigurationError):
    """Exception raised when an environment override cannot be applied."""

    def __init__(
        self,
        message: str,
        variable_name: Optional[str] = None
    ) -> None:
        suggestions = ["Check the value type expected for the variable"]

        if variable_name:
            suggestions.append(f"Fix or unset {variable_name} in the environment or .env file")

        super().__init__(message, None, suggestions)
        self.variable_name = variable_name


class ConfigurationSchemaError(ConfigurationError):
    """Exception raised when the configuration schema is invalid or missing."""

    def __init__(
        self,
        message: str,
        schema_file: Optional[str] = None,
        schema_errors: Optional[List[str]] = None
    ) -> None:
        suggestions = [
            "Ensure the schema file exists and is valid JSON",
            "Check schema syntax against the JSON Schema specification",
        ]

        super().__init__(message, schema_file, suggestions)
        self.schema_errors = schema_errors or []


class ConfigurationMergeError(ConfigurationError):
    """Exception raised when resolving 'extends' inheritance fails."""

    def __init__(
        self,
        message: str,
        source_files: Optional[List[str]] = None
    ) -> None:
        suggestions = [
            "Check that every 'extends' path points to an existing JSON file",
            "Remove circular 'extends' references",
        ]

        super().__init__(message, None, suggestions)
        self.source_files = source_files or []
