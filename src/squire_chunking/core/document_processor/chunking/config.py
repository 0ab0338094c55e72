"""
Chunking Configuration Module

Contains the strategy enumeration and the options record shared by every
chunker. Options are immutable: overrides always produce a new value, so
a chunker never sees options change underneath it.

Components:
- ChunkingStrategy: Enumeration of the available chunking strategies
- ChunkingOptions: Validated, immutable chunking parameters
- DEFAULT_CHUNKING_OPTIONS: Default options record
- with_defaults: Merge partial overrides over the defaults
"""

import json
import logging
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from ....exceptions.chunking_exceptions import InvalidChunkingOptionsError

logger = logging.getLogger(__name__)

# Allowed overshoot for fixed-size chunks whose boundary words do not split evenly
FIXED_TOKEN_SLACK = 10

DEFAULT_HYBRID_TOLERANCE = 1.5


class ChunkingStrategy(str, Enum):
    """
    Enumeration of chunking strategies.

    Values double as the strategy tag stored on every chunk.
    """
    FIXED = "fixed"  # Token windows, structure ignored
    SEMANTIC = "semantic"  # Paragraph grouping, no hard ceiling
    HYBRID = "hybrid"  # Paragraph grouping with enforced ceiling and overlap

    def __str__(self) -> str:
        return self.value


CHUNKING_STRATEGIES = tuple(strategy.value for strategy in ChunkingStrategy)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class ChunkingOptions:
    """
    Immutable configuration for a single chunking call.

    Attributes:
        strategy: Strategy tag; chunkers stamp their own tag regardless
        max_tokens: Token ceiling for each chunk
        overlap_tokens: Tokens repeated between neighbouring chunks (< max_tokens)
        min_tokens: Chunks below this are merged into a neighbour where possible
        preserve_paragraphs: Group paragraphs rather than sentences
        preserve_sentences: Snap hybrid re-splits to sentence ends
        hybrid_tolerance: Multiplier on max_tokens bounding hybrid chunks after overlap

    Example:
        >>> options = ChunkingOptions(max_tokens=200, overlap_tokens=20)
        >>> smaller = options.copy(max_tokens=100)
    """

    strategy: ChunkingStrategy = ChunkingStrategy.HYBRID
    max_tokens: int = 512
    overlap_tokens: int = 50
    min_tokens: int = 50
    preserve_paragraphs: bool = True
    preserve_sentences: bool = True
    hybrid_tolerance: float = DEFAULT_HYBRID_TOLERANCE

    def __post_init__(self) -> None:
        """
        Validate option values.

        Raises:
            InvalidChunkingOptionsError: If any option is invalid or inconsistent
        """
        if not isinstance(self.strategy, ChunkingStrategy):
            try:
                object.__setattr__(self, "strategy", ChunkingStrategy(self.strategy))
            except ValueError:
                raise InvalidChunkingOptionsError(
                    f"strategy must be one of {', '.join(CHUNKING_STRATEGIES)}, got: {self.strategy!r}",
                    ["strategy"]
                )

        if not _is_int(self.max_tokens) or self.max_tokens <= 0:
            raise InvalidChunkingOptionsError(
                f"max_tokens must be positive integer, got: {self.max_tokens!r}",
                ["max_tokens"]
            )

        if not _is_int(self.overlap_tokens) or self.overlap_tokens < 0:
            raise InvalidChunkingOptionsError(
                f"overlap_tokens must be non-negative integer, got: {self.overlap_tokens!r}",
                ["overlap_tokens"]
            )

        if self.overlap_tokens >= self.max_tokens:
            raise InvalidChunkingOptionsError(
                f"overlap_tokens ({self.overlap_tokens}) must be less than max_tokens ({self.max_tokens})",
                ["overlap_tokens", "max_tokens"]
            )

        if not _is_int(self.min_tokens) or self.min_tokens < 0:
            raise InvalidChunkingOptionsError(
                f"min_tokens must be non-negative integer, got: {self.min_tokens!r}",
                ["min_tokens"]
            )

        for name in ("preserve_paragraphs", "preserve_sentences"):
            if not isinstance(getattr(self, name), bool):
                raise InvalidChunkingOptionsError(
                    f"{name} must be bool, got: {type(getattr(self, name))}",
                    [name]
                )

        if (
            not isinstance(self.hybrid_tolerance, (int, float))
            or isinstance(self.hybrid_tolerance, bool)
            or self.hybrid_tolerance < 1.0
        ):
            raise InvalidChunkingOptionsError(
                f"hybrid_tolerance must be a number >= 1.0, got: {self.hybrid_tolerance!r}",
                ["hybrid_tolerance"]
            )

        if self.overlap_tokens > self.max_tokens * 0.5:
            logger.warning(
                f"Large overlap ratio ({self.overlap_tokens / self.max_tokens:.1%}) may cause excessive duplication"
            )

        if self.min_tokens > self.max_tokens:
            logger.debug(
                f"min_tokens ({self.min_tokens}) exceeds max_tokens ({self.max_tokens}), "
                f"small-chunk merging is limited by max_tokens"
            )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert options to a dictionary for serialization.

        Returns:
            Dictionary with the strategy stored as its string tag
        """
        return {
            "strategy": self.strategy.value,
            "max_tokens": self.max_tokens,
            "overlap_tokens": self.overlap_tokens,
            "min_tokens": self.min_tokens,
            "preserve_paragraphs": self.preserve_paragraphs,
            "preserve_sentences": self.preserve_sentences,
            "hybrid_tolerance": self.hybrid_tolerance,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChunkingOptions":
        """
        Create options from a dictionary.

        Args:
            data: Mapping of option names to values; missing names take defaults

        Returns:
            ChunkingOptions instance

        Raises:
            InvalidChunkingOptionsError: If a key is unknown or a value is invalid
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(key for key in data if key not in known)
        if unknown:
            raise InvalidChunkingOptionsError(
                f"Unknown chunking options: {', '.join(unknown)}",
                unknown
            )
        return cls(**dict(data))

    def to_json(self, indent: Optional[int] = None) -> str:
        """Convert options to a JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, json_str: str) -> "ChunkingOptions":
        """
        Create options from a JSON string.

        Raises:
            json.JSONDecodeError: If JSON is invalid
            InvalidChunkingOptionsError: If option values are invalid
        """
        return cls.from_dict(json.loads(json_str))

    def copy(self, **overrides) -> "ChunkingOptions":
        """
        Create a copy of these options with parameter overrides.

        Example:
            >>> options = ChunkingOptions(max_tokens=1000)
            >>> small = options.copy(max_tokens=500, overlap_tokens=100)
        """
        data = self.to_dict()
        data.update(overrides)
        return self.from_dict(data)


DEFAULT_CHUNKING_OPTIONS = ChunkingOptions()

OptionsInput = Union[None, ChunkingOptions, Mapping[str, Any]]


def with_defaults(
    overrides: OptionsInput = None,
    base: ChunkingOptions = DEFAULT_CHUNKING_OPTIONS
) -> ChunkingOptions:
    """
    Merge partial overrides over a base options record.

    Args:
        overrides: None, a complete ChunkingOptions, or a mapping of option names
        base: Options supplying every value not overridden

    Returns:
        New validated ChunkingOptions

    Raises:
        InvalidChunkingOptionsError: If overrides contain unknown keys or invalid values
    """
    if overrides is None:
        return base

    if isinstance(overrides, ChunkingOptions):
        return overrides

    if not isinstance(overrides, Mapping):
        raise InvalidChunkingOptionsError(
            f"options must be ChunkingOptions or a mapping, got: {type(overrides)}"
        )

    return base.copy(**overrides)


def options_for_strategy(options: ChunkingOptions, strategy: ChunkingStrategy) -> ChunkingOptions:
    """Return options stamped with the given strategy tag."""
    if options.strategy is strategy:
        return options
    return replace(options, strategy=strategy)
