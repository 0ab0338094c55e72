"""
Chunking-related exceptions for Squire.

Custom exception classes raised inside the chunking engine. Chunkers never let
these escape to callers: the shared pipeline converts them into a failed
ChunkingResult carrying the matching error code.
"""

from enum import Enum
from typing import List, Optional


class ChunkingErrorCode(str, Enum):
    """Error codes reported on a failed ChunkingResult."""
    EMPTY_TEXT = "EMPTY_TEXT"
    INVALID_OPTIONS = "INVALID_OPTIONS"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class ChunkingError(Exception):
    """Base exception for chunking errors."""

    error_code: ChunkingErrorCode = ChunkingErrorCode.UNKNOWN_ERROR

    def __init__(
        self,
        message: str,
        suggestions: Optional[List[str]] = None
    ) -> None:
        """
        Initialize chunking error.

        Args:
            message: Error description
            suggestions: List of suggested fixes
        """
        super().__init__(message)
        self.message = message
        self.suggestions = suggestions or []

    def __str__(self) -> str:
        """Return formatted error message with suggestions."""
        msg = super().__str__()

        if self.suggestions:
            msg += "\n\nSuggestions:"
            for i, suggestion in enumerate(self.suggestions, 1):
                msg += f"\n  {i}. {suggestion}"

        return msg


class EmptyTextError(ChunkingError):
    """Exception raised when the input has no non-whitespace content."""

    error_code = ChunkingErrorCode.EMPTY_TEXT

    def __init__(self, message: str = "Text is empty") -> None:
        super().__init__(
            message,
            ["Check that text extraction produced content before chunking"]
        )


class InvalidChunkingOptionsError(ChunkingError, ValueError):
    """Exception raised when chunking options fail validation."""

    error_code = ChunkingErrorCode.INVALID_OPTIONS

    def __init__(self, message: str, invalid_fields: Optional[List[str]] = None) -> None:
        """
        Initialize options error.

        Args:
            message: Error description
            invalid_fields: Names of the options that failed validation
        """
        suggestions = []
        if invalid_fields:
            suggestions.append(f"Fix these options: {', '.join(invalid_fields)}")
        super().__init__(message, suggestions)
        self.invalid_fields = invalid_fields or []


class ChunkAssemblyError(ChunkingError):
    """Exception raised when segments cannot be assembled into chunks."""


class ChunkBudgetExceededError(ChunkAssemblyError):
    """Exception raised when an assembled chunk breaks its token ceiling."""

    def __init__(self, chunk_index: int, token_count: int, token_ceiling: int) -> None:
        super().__init__(
            f"Chunk {chunk_index} has {token_count} tokens, exceeding ceiling of {token_ceiling}"
        )
        self.chunk_index = chunk_index
        self.token_count = token_count
        self.token_ceiling = token_ceiling
