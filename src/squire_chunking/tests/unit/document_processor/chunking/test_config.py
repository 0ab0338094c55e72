"""Tests for ChunkingOptions - configuration for chunking parameters."""

import dataclasses
import json
import logging

import pytest

from squire_chunking.core.document_processor.chunking import (
    CHUNKING_STRATEGIES,
    DEFAULT_CHUNKING_OPTIONS,
    ChunkingOptions,
    ChunkingStrategy,
    with_defaults,
)
from squire_chunking.exceptions import InvalidChunkingOptionsError


class TestChunkingStrategy:
    """Tests for the strategy enumeration."""

    def test_strategy_tags(self):
        """Test strategy values double as chunk tags."""
        assert CHUNKING_STRATEGIES == ("fixed", "semantic", "hybrid")
        assert str(ChunkingStrategy.FIXED) == "fixed"
        assert ChunkingStrategy("hybrid") is ChunkingStrategy.HYBRID


class TestChunkingOptions:
    """Tests for ChunkingOptions creation and validation."""

    def test_creation_with_defaults(self):
        """Test creating ChunkingOptions with default values."""
        options = ChunkingOptions()
        assert options.strategy is ChunkingStrategy.HYBRID
        assert options.max_tokens == 512
        assert options.overlap_tokens == 50
        assert options.min_tokens == 50
        assert options.preserve_paragraphs is True
        assert options.preserve_sentences is True
        assert options.hybrid_tolerance == 1.5

    def test_strategy_string_is_converted(self):
        """Test a strategy tag string becomes the enum member."""
        options = ChunkingOptions(strategy="fixed")
        assert options.strategy is ChunkingStrategy.FIXED

    def test_unknown_strategy(self):
        """Test an unknown strategy tag is rejected."""
        with pytest.raises(InvalidChunkingOptionsError, match="strategy must be one of"):
            ChunkingOptions(strategy="sliding")

    def test_max_tokens_positive(self):
        """Test max_tokens must be a positive integer."""
        with pytest.raises(InvalidChunkingOptionsError, match="max_tokens must be positive integer"):
            ChunkingOptions(max_tokens=0)
        with pytest.raises(InvalidChunkingOptionsError):
            ChunkingOptions(max_tokens=True)

    def test_overlap_less_than_max(self):
        """Test overlap_tokens must stay below max_tokens."""
        with pytest.raises(InvalidChunkingOptionsError, match=r"overlap_tokens \(150\) must be less than max_tokens \(100\)"):
            ChunkingOptions(max_tokens=100, overlap_tokens=150)
        with pytest.raises(InvalidChunkingOptionsError):
            ChunkingOptions(max_tokens=100, overlap_tokens=100)

    def test_min_tokens_non_negative(self):
        """Test min_tokens must not be negative."""
        with pytest.raises(InvalidChunkingOptionsError, match="min_tokens must be non-negative integer"):
            ChunkingOptions(min_tokens=-1)

    def test_hybrid_tolerance_at_least_one(self):
        """Test hybrid_tolerance below 1.0 is rejected."""
        with pytest.raises(InvalidChunkingOptionsError, match="hybrid_tolerance"):
            ChunkingOptions(hybrid_tolerance=0.5)

    def test_error_reports_invalid_fields(self):
        """Test the error names the failing options and is a ValueError."""
        with pytest.raises(ValueError) as exc_info:
            ChunkingOptions(max_tokens=100, overlap_tokens=150)
        assert exc_info.value.invalid_fields == ["overlap_tokens", "max_tokens"]
        assert "Fix these options" in str(exc_info.value)

    def test_large_overlap_warns(self, caplog):
        """Test an overlap above half the budget logs a warning."""
        with caplog.at_level(logging.WARNING, logger="squire_chunking"):
            ChunkingOptions(max_tokens=100, overlap_tokens=60)
        assert "Large overlap ratio" in caplog.text

    def test_options_are_immutable(self):
        """Test options cannot be changed after creation."""
        options = ChunkingOptions()
        with pytest.raises(dataclasses.FrozenInstanceError):
            options.max_tokens = 10


class TestChunkingOptionsSerialization:
    """Tests for dictionary and JSON conversion."""

    def test_to_dict(self):
        """Test conversion to a plain dictionary."""
        data = ChunkingOptions(strategy="semantic", max_tokens=256).to_dict()
        assert data["strategy"] == "semantic"
        assert data["max_tokens"] == 256
        assert set(data) == {
            "strategy", "max_tokens", "overlap_tokens", "min_tokens",
            "preserve_paragraphs", "preserve_sentences", "hybrid_tolerance",
        }

    def test_from_dict_fills_defaults(self):
        """Test missing keys take default values."""
        options = ChunkingOptions.from_dict({"max_tokens": 300})
        assert options.max_tokens == 300
        assert options.overlap_tokens == DEFAULT_CHUNKING_OPTIONS.overlap_tokens

    def test_from_dict_rejects_unknown_keys(self):
        """Test unknown option names are reported."""
        with pytest.raises(InvalidChunkingOptionsError, match="Unknown chunking options: chunk_size") as exc_info:
            ChunkingOptions.from_dict({"chunk_size": 100})
        assert exc_info.value.invalid_fields == ["chunk_size"]

    def test_json_conversion(self):
        """Test JSON output parses back to equal options."""
        options = ChunkingOptions(strategy="fixed", max_tokens=128, overlap_tokens=16)
        assert json.loads(options.to_json())["overlap_tokens"] == 16
        assert ChunkingOptions.from_json(options.to_json()) == options

    def test_copy_with_overrides(self):
        """Test copy() returns new options and leaves the original alone."""
        options = ChunkingOptions(max_tokens=1000)
        smaller = options.copy(max_tokens=500, overlap_tokens=100)
        assert smaller.max_tokens == 500
        assert smaller.overlap_tokens == 100
        assert options.max_tokens == 1000


class TestWithDefaults:
    """Tests for merging partial overrides."""

    def test_none_gives_defaults(self):
        assert with_defaults(None) is DEFAULT_CHUNKING_OPTIONS

    def test_options_pass_through(self):
        options = ChunkingOptions(max_tokens=64, overlap_tokens=8)
        assert with_defaults(options) is options

    def test_mapping_overrides(self):
        """Test a partial mapping is merged over the defaults."""
        options = with_defaults({"max_tokens": 100, "strategy": "fixed"})
        assert options.max_tokens == 100
        assert options.strategy is ChunkingStrategy.FIXED
        assert options.min_tokens == DEFAULT_CHUNKING_OPTIONS.min_tokens

    def test_merged_values_are_validated(self):
        """Test overrides inconsistent with the defaults are rejected."""
        with pytest.raises(InvalidChunkingOptionsError, match="overlap_tokens"):
            with_defaults({"max_tokens": 40})

    def test_custom_base(self):
        base = ChunkingOptions(max_tokens=200, overlap_tokens=0)
        assert with_defaults({"min_tokens": 5}, base=base).max_tokens == 200

    def test_rejects_other_types(self):
        with pytest.raises(InvalidChunkingOptionsError, match="options must be ChunkingOptions or a mapping"):
            with_defaults([("max_tokens", 100)])
