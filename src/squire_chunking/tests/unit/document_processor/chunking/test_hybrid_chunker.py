"""Tests for HybridChunker - semantic grouping with enforced ceiling and overlap."""

import pytest

from squire_chunking.core.document_processor.chunking import (
    ChunkingOptions,
    ChunkingStrategy,
    HybridChunker,
    hybrid_chunker,
    hybrid_token_ceiling,
)
from squire_chunking.exceptions import ChunkingErrorCode

SENTENCE = "One two three four five six seven eight nine ten."


class TestHybridCeiling:
    """Tests for the hybrid token ceiling."""

    def test_default_tolerance(self):
        assert hybrid_token_ceiling(ChunkingOptions(max_tokens=100)) == 150

    def test_custom_tolerance(self):
        assert hybrid_token_ceiling(ChunkingOptions(max_tokens=100, hybrid_tolerance=1.2)) == 120
        assert hybrid_token_ceiling(ChunkingOptions(max_tokens=7, overlap_tokens=0, hybrid_tolerance=1.5)) == 10


class TestHybridChunker:
    """Tests for the hybrid strategy."""

    def test_small_document_single_chunk(self, sample_text, document_id):
        result = hybrid_chunker.chunk(sample_text, document_id)

        assert result.success
        assert result.chunk_count == 1
        assert result.chunks[0].chunking_strategy is ChunkingStrategy.HYBRID
        assert not result.chunks[0].has_overlap_before
        assert not result.chunks[0].has_overlap_after

    def test_oversized_paragraph_resplit_within_ceiling(self, document_id):
        """Test a single huge paragraph is re-split and overlapped within the ceiling."""
        text = "Word " * 500
        result = hybrid_chunker.chunk(text, document_id, {"max_tokens": 100})

        assert result.chunk_count == 5
        assert [c.token_count for c in result.chunks] == [100, 150, 150, 150, 150]
        assert all(c.token_count <= 150 for c in result.chunks)
        assert result.chunks[1].metadata["overlap_tokens"] == 50
        assert result.chunks[2].metadata["split_index"] == 2
        assert result.chunks[2].metadata["split_count"] == 5

    def test_overlap_taken_from_previous_text(self, document_id):
        """Test overlap repeats the previous chunk's own trailing words."""
        text = " ".join(f"w{i}" for i in range(300))
        result = hybrid_chunker.chunk(text, document_id, {"max_tokens": 100, "overlap_tokens": 10})

        assert result.chunk_count == 3
        second, third = result.chunks[1].content.split(), result.chunks[2].content.split()
        assert second[:11] == [f"w{i}" for i in range(90, 101)]
        assert third[:11] == [f"w{i}" for i in range(190, 201)]
        assert result.chunks[0].has_overlap_after
        assert result.chunks[1].has_overlap_before and result.chunks[1].has_overlap_after
        assert not result.chunks[2].has_overlap_after

    def test_no_overlap_requested(self, long_document, document_id):
        result = hybrid_chunker.chunk(long_document, document_id, {"max_tokens": 100, "overlap_tokens": 0})

        assert result.chunk_count > 1
        assert not any(c.has_overlap_before or c.has_overlap_after for c in result.chunks)
        assert all(c.token_count <= 100 for c in result.chunks)

    @pytest.mark.parametrize("max_tokens,overlap_tokens,tolerance", [
        (200, 50, 1.5),
        (100, 30, 1.2),
        (60, 10, 1.0),
    ])
    def test_ceiling_respected(self, long_document, document_id, max_tokens, overlap_tokens, tolerance):
        options = ChunkingOptions(
            max_tokens=max_tokens, overlap_tokens=overlap_tokens, hybrid_tolerance=tolerance
        )
        result = hybrid_chunker.chunk(long_document, document_id, options)

        assert result.success
        assert all(c.token_count <= hybrid_token_ceiling(options) for c in result.chunks)

    def test_sections_follow_headings(self, sample_markdown, document_id):
        result = hybrid_chunker.chunk(sample_markdown, document_id, {"max_tokens": 100, "overlap_tokens": 0})

        assert result.chunks[0].section_title == "Squire Knowledge Base"
        assert result.chunks[1].section_title == "Introduction"

    def test_split_pieces_inherit_section(self, document_id):
        text = "# Big Section\n\n" + ("Word " * 300).strip()
        result = hybrid_chunker.chunk(text, document_id, {"max_tokens": 100, "overlap_tokens": 0})

        assert all(c.section_title == "Big Section" for c in result.chunks)
        assert [c.metadata.get("split_index") for c in result.chunks[1:]] == [0, 1, 2]

    def test_resplit_ends_on_sentences(self, document_id):
        """Test re-split pieces end at sentence boundaries when sentences are preserved."""
        text = " ".join([SENTENCE] * 20)
        options = {"max_tokens": 100, "overlap_tokens": 0, "min_tokens": 0}

        preserved = hybrid_chunker.chunk(text, document_id, options)
        assert preserved.chunk_count == 3
        assert all(c.content.endswith("ten.") for c in preserved.chunks)

        ignored = hybrid_chunker.chunk(text, document_id, {**options, "preserve_sentences": False})
        assert not ignored.chunks[0].content.endswith("ten.")

    def test_empty_text(self, document_id):
        result = hybrid_chunker.chunk("", document_id)
        assert result.error_code is ChunkingErrorCode.EMPTY_TEXT

    def test_detector_type_checked(self):
        with pytest.raises(TypeError):
            HybridChunker(boundary_detector=object())

    def test_long_last_word_still_overlapped(self, document_id):
        """Test paragraphs ending in a word over the overlap budget still overlap."""
        url = "https://example.com/" + "a" * 40
        paragraph = " ".join(["word"] * 80 + [url])
        text = "\n\n".join([paragraph] * 4)
        result = hybrid_chunker.chunk(
            text, document_id, {"max_tokens": 100, "overlap_tokens": 10, "min_tokens": 0}
        )

        assert result.chunk_count == 4
        assert [(c.has_overlap_before, c.has_overlap_after) for c in result.chunks] == [
            (False, True), (True, True), (True, True), (True, False)
        ]
        for chunk in result.chunks[1:]:
            assert chunk.content.startswith(url + "\n\n")
            assert chunk.metadata["overlap_tokens"] == 15
            assert chunk.token_count == 110
