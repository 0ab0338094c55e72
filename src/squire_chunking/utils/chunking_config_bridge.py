"""
Configuration Bridge for Document Chunking

This module provides the ChunkingConfigBridge class that maps the 'chunking'
section of the ConfigManager configuration onto ChunkingOptions, so chunkers
can be driven from configuration files and environment variables.
"""

import logging
from typing import Any, Dict, List, Optional

from ..core.document_processor.chunking import (
    DEFAULT_CHUNKING_OPTIONS,
    ChunkingOptions,
    ChunkingResult,
    chunk_document,
    with_defaults,
)
from ..exceptions.chunking_exceptions import InvalidChunkingOptionsError
from ..exceptions.config_exceptions import (
    ConfigurationFileNotFoundError,
    ConfigurationValidationError,
)
from .config import ConfigManager

logger = logging.getLogger(__name__)

CHUNKING_SECTION = "chunking"


class ChunkingConfigBridge:
    """
    Bridge between ConfigManager and ChunkingOptions.

    Features:
    - Mapping from the 'chunking' configuration section to ChunkingOptions
    - Runtime parameter overrides
    - Fallback to defaults when no configuration file exists
    - Cached options, refreshed by reload_config()

    Example:
        >>> bridge = ChunkingConfigBridge(ConfigManager("squire.config.json"))
        >>> options = bridge.get_chunking_options({"max_tokens": 256})
        >>> result = bridge.chunk(text, "doc-1")
    """

    def __init__(self, config_manager: ConfigManager) -> None:
        """
        Initialize the configuration bridge.

        Args:
            config_manager: ConfigManager instance for loading configuration

        Raises:
            TypeError: If config_manager is not a ConfigManager instance
        """
        if not isinstance(config_manager, ConfigManager):
            raise TypeError(f"config_manager must be ConfigManager, got: {type(config_manager)}")

        self.config_manager = config_manager
        self._options_cache: Optional[ChunkingOptions] = None

        logger.debug("ChunkingConfigBridge initialized")

    def get_chunking_options(self, overrides: Optional[Dict[str, Any]] = None) -> ChunkingOptions:
        """
        Get ChunkingOptions from the current configuration.

        Args:
            overrides: Optional option overrides applied over the configuration

        Returns:
            ChunkingOptions mapped from configuration

        Raises:
            ConfigurationValidationError: If the configured or overridden options are invalid
        """
        if self._options_cache is None:
            self._options_cache = self._load_options()

        if not overrides:
            return self._options_cache

        try:
            options = with_defaults(overrides, base=self._options_cache)
        except InvalidChunkingOptionsError as e:
            raise ConfigurationValidationError(
                f"Invalid chunking overrides: {e.message}",
                invalid_fields=e.invalid_fields
            ) from e

        logger.debug(f"Applied chunking overrides: {sorted(overrides)}")
        return options

    def _load_options(self) -> ChunkingOptions:
        try:
            chunking_config = self.config_manager.get(CHUNKING_SECTION, {}) or {}
        except ConfigurationFileNotFoundError as e:
            logger.warning(f"Failed to load chunking config, using defaults: {e}")
            return DEFAULT_CHUNKING_OPTIONS

        logger.debug(f"Loaded chunking config keys: {sorted(chunking_config)}")

        try:
            options = with_defaults(chunking_config)
        except InvalidChunkingOptionsError as e:
            raise ConfigurationValidationError(
                f"Invalid chunking configuration: {e.message}",
                self.config_manager.config_file,
                invalid_fields=[f"{CHUNKING_SECTION}.{name}" for name in e.invalid_fields]
            ) from e

        logger.debug(f"Generated ChunkingOptions: {options}")
        return options

    def chunk(self, text: str, document_id: str, overrides: Optional[Dict[str, Any]] = None) -> ChunkingResult:
        """Chunk text with the configured strategy and options."""
        return chunk_document(text, document_id, self.get_chunking_options(overrides))

    def reload_config(self) -> None:
        """Reload configuration from source files and drop cached options."""
        logger.info("Reloading chunking configuration")
        self.config_manager.reload_config()
        self._options_cache = None

    def get_supported_parameters(self) -> List[str]:
        """Get the option names accepted in the 'chunking' section."""
        return list(DEFAULT_CHUNKING_OPTIONS.to_dict())
