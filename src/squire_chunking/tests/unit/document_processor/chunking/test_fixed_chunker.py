"""Tests for FixedChunker and the windowing functions."""

from squire_chunking.core.document_processor.chunking import (
    FIXED_TOKEN_SLACK,
    ChunkingStrategy,
    FixedChunker,
    count_tokens,
    fixed_chunker,
)
from squire_chunking.core.document_processor.chunking.fixed_chunker import (
    WordSpan,
    absorb_small_tail,
    trailing_text,
    window_spans,
    word_spans,
)
from squire_chunking.exceptions import ChunkingErrorCode


def word_counter(text: str) -> int:
    return len(text.split())


class TestWindowing:
    """Tests for the pure windowing functions."""

    def test_word_spans(self):
        spans = word_spans("alpha  beta\ngamma", 10)
        assert [(s.start, s.end) for s in spans] == [(0, 5), (7, 11), (12, 17)]
        assert [s.tokens for s in spans] == [2, 1, 2]

    def test_oversized_word_is_split(self):
        """Test a word over budget becomes several spans that each fit."""
        spans = word_spans("x" * 1000, 100)
        assert [s.tokens for s in spans] == [100, 100, 50]
        assert spans[-1].end == 1000

    def test_windows_with_overlap(self):
        """Test windows back up by the overlap budget."""
        spans = [WordSpan(i, i + 1, 1) for i in range(25)]
        assert window_spans(spans, 10, 3) == [(0, 10), (7, 17), (14, 24), (21, 25)]

    def test_windows_without_overlap(self):
        spans = [WordSpan(i, i + 1, 1) for i in range(25)]
        assert window_spans(spans, 10) == [(0, 10), (10, 20), (20, 25)]

    def test_windows_snap_to_sentence_end(self):
        """Test window ends move back to a sentence end in the second half."""
        spans = [WordSpan(i * 2, i * 2 + 1, 1) for i in range(20)]
        sentence_ends = {spans[6].end}
        assert window_spans(spans, 10, 0, sentence_ends)[0] == (0, 7)

    def test_absorb_small_tail(self):
        spans = [WordSpan(i, i + 1, 1) for i in range(12)]
        assert absorb_small_tail([(0, 10), (10, 12)], spans, 5, 15) == [(0, 12)]
        assert absorb_small_tail([(0, 10), (10, 12)], spans, 5, 11) == [(0, 10), (10, 12)]
        assert absorb_small_tail([(0, 10), (10, 12)], spans, 2, 15) == [(0, 10), (10, 12)]

    def test_trailing_text(self):
        assert trailing_text("one two three four", 2, word_counter) == "three four"
        assert trailing_text("one two", 0, word_counter) == ""


class TestFixedChunker:
    """Tests for the fixed-size strategy."""

    def test_short_text_single_chunk(self, document_id):
        """Test text within budget becomes one chunk without overlap."""
        text = "This short piece of text has exactly eleven words in it."
        result = fixed_chunker.chunk(text, document_id)

        assert result.success
        assert result.chunk_count == 1
        chunk = result.chunks[0]
        assert chunk.content == text
        assert chunk.token_count == count_tokens(text)
        assert chunk.chunking_strategy is ChunkingStrategy.FIXED
        assert not chunk.has_overlap_before
        assert not chunk.has_overlap_after
        assert chunk.section_title is None
        assert chunk.page_number is None

    def test_overlapping_windows(self, document_id):
        """Test consecutive chunks share the overlap words."""
        text = "word " * 250
        result = fixed_chunker.chunk(text, document_id, {"max_tokens": 100, "overlap_tokens": 20})

        assert result.chunk_count == 3
        first, middle, last = result.chunks
        assert first.has_overlap_after and not first.has_overlap_before
        assert middle.has_overlap_before and middle.has_overlap_after
        assert last.has_overlap_before and not last.has_overlap_after
        assert middle.metadata["start_word_index"] == 80
        assert [c.token_count for c in result.chunks] == [100, 100, 90]

    def test_overlap_repeats_previous_words(self, document_id):
        """Test an interior chunk starts with the last words of its predecessor."""
        text = " ".join(f"w{i}" for i in range(250))
        result = fixed_chunker.chunk(text, document_id, {"max_tokens": 100, "overlap_tokens": 20})

        for previous, current in zip(result.chunks, result.chunks[1:]):
            assert current.content.split()[:20] == previous.content.split()[-20:]

    def test_large_paragraph_split(self, document_id):
        text = ("Word " * 500).strip()
        result = fixed_chunker.chunk(text, document_id, {"max_tokens": 100})

        assert result.chunk_count > 1
        assert all(c.token_count <= 100 + FIXED_TOKEN_SLACK for c in result.chunks)

    def test_small_tail_absorbed(self, document_id):
        """Test a trailing window below min_tokens merges into its neighbour."""
        text = "Word " * 105
        result = fixed_chunker.chunk(
            text, document_id, {"max_tokens": 100, "overlap_tokens": 0, "min_tokens": 50}
        )

        assert result.chunk_count == 1
        assert result.chunks[0].token_count == 105
        assert result.chunks[0].token_count <= 100 + FIXED_TOKEN_SLACK

    def test_unbroken_text_is_split(self, document_id):
        """Test text without whitespace is cut and nothing is lost."""
        text = "x" * 1000
        result = fixed_chunker.chunk(text, document_id, {"max_tokens": 100, "overlap_tokens": 0})

        assert result.chunk_count == 3
        assert "".join(c.content for c in result.chunks) == text
        assert all(c.token_count <= 100 for c in result.chunks)

    def test_every_word_covered(self, sample_text, document_id):
        """Test non-overlapping chunks reproduce the document's words in order."""
        result = fixed_chunker.chunk(sample_text, document_id, {"max_tokens": 40, "overlap_tokens": 0})

        words = [word for chunk in result.chunks for word in chunk.content.split()]
        assert words == sample_text.split()
        assert all(c.token_count <= 40 + FIXED_TOKEN_SLACK for c in result.chunks)

    def test_content_sliced_from_source(self, sample_text, document_id):
        result = fixed_chunker.chunk(sample_text, document_id, {"max_tokens": 60, "overlap_tokens": 10})
        for chunk in result.chunks:
            start, end = chunk.metadata["start_char"], chunk.metadata["end_char"]
            assert sample_text[start:end] == chunk.content

    def test_custom_counter(self, document_id):
        """Test the injected counter drives every budget decision."""
        chunker = FixedChunker(token_counter=word_counter)
        result = chunker.chunk(
            "one two three four five six", document_id,
            {"max_tokens": 2, "overlap_tokens": 0, "min_tokens": 0}
        )

        assert [c.content for c in result.chunks] == ["one two", "three four", "five six"]
        assert [c.token_count for c in result.chunks] == [2, 2, 2]

    def test_counter_failure_reported(self, document_id):
        def broken_counter(text):
            raise RuntimeError("boom")

        result = FixedChunker(token_counter=broken_counter).chunk("Some text.", document_id)

        assert not result.success
        assert result.error_code is ChunkingErrorCode.UNKNOWN_ERROR
        assert "boom" in result.error

    def test_empty_text(self, document_id):
        result = fixed_chunker.chunk("  \n ", document_id)
        assert result.error_code is ChunkingErrorCode.EMPTY_TEXT
        assert result.chunks == []
