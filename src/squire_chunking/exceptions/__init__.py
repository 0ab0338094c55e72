"""
Exceptions package for Squire.

This package contains the custom exception classes for the chunking engine
and its configuration layer.
"""

from .chunking_exceptions import (
    ChunkingErrorCode,
    ChunkingError,
    EmptyTextError,
    InvalidChunkingOptionsError,
    ChunkAssemblyError,
    ChunkBudgetExceededError,
)

from .config_exceptions import (
    ConfigurationError,
    ConfigurationFileNotFoundError,
    ConfigurationValidationError,
    EnvironmentVariableError,
    ConfigurationSchemaError,
    ConfigurationMergeError,
)

__all__ = [
    "ChunkingErrorCode",
    "ChunkingError",
    "EmptyTextError",
    "InvalidChunkingOptionsError",
    "ChunkAssemblyError",
    "ChunkBudgetExceededError",
    "ConfigurationError",
    "ConfigurationFileNotFoundError",
    "ConfigurationValidationError",
    "EnvironmentVariableError",
    "ConfigurationSchemaError",
    "ConfigurationMergeError",
]
