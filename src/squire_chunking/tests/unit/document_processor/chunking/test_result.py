"""Tests for DocumentChunk and ChunkingResult."""

import json
from datetime import datetime, timezone

import pytest

from squire_chunking.core.document_processor.chunking import (
    ChunkingResult,
    ChunkingStrategy,
    DocumentChunk,
)
from squire_chunking.exceptions import ChunkingErrorCode


def make_chunk(index: int = 0, content: str = "Chunk content here.", **overrides) -> DocumentChunk:
    values = dict(
        id=f"chunk-{index}",
        document_id="doc-1",
        chunk_index=index,
        content=content,
        token_count=5,
        chunking_strategy=ChunkingStrategy.HYBRID,
        metadata={
            "word_count": len(content.split()),
            "has_overlap_before": False,
            "has_overlap_after": True,
            "start_char": 0,
            "end_char": len(content),
        },
        created_at=datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
        page_number=2,
        section_title="Introduction",
    )
    values.update(overrides)
    return DocumentChunk(**values)


class TestDocumentChunk:
    """Tests for the chunk record."""

    def test_metadata_properties(self):
        chunk = make_chunk()
        assert chunk.word_count == 3
        assert chunk.has_overlap_before is False
        assert chunk.has_overlap_after is True

    def test_to_row_uses_storage_columns(self):
        """Test storage rows carry object_id and JSON metadata."""
        row = make_chunk().to_row()

        assert row["object_id"] == "doc-1"
        assert "document_id" not in row
        assert row["chunking_strategy"] == "hybrid"
        assert json.loads(row["metadata"])["has_overlap_after"] is True
        assert row["created_at"] == "2024-05-01T12:30:00+00:00"
        assert row["page_number"] == 2
        assert row["section_title"] == "Introduction"

    def test_from_row_restores_chunk(self):
        chunk = make_chunk()
        assert DocumentChunk.from_row(chunk.to_row()) == chunk

    def test_from_row_accepts_decoded_values(self):
        """Test rows from drivers that decode JSON and timestamps."""
        chunk = make_chunk(page_number=None, section_title=None)
        row = chunk.to_row()
        row["metadata"] = dict(chunk.metadata)
        row["created_at"] = chunk.created_at
        del row["page_number"]

        restored = DocumentChunk.from_row(row)
        assert restored.metadata == chunk.metadata
        assert restored.created_at == chunk.created_at
        assert restored.page_number is None

    def test_to_dict(self):
        data = make_chunk().to_dict()
        assert data["document_id"] == "doc-1"
        assert data["metadata"]["word_count"] == 3
        assert json.dumps(data)

    def test_preview(self):
        """Test previews collapse whitespace and cut long content."""
        chunk = make_chunk(content="word\n\n" * 60)
        preview = chunk.get_preview()
        assert len(preview) == 100
        assert preview.endswith("...")
        assert "\n" not in preview
        assert make_chunk().get_preview() == "Chunk content here."

    def test_chunks_are_immutable(self):
        with pytest.raises(AttributeError):
            make_chunk().content = "changed"

    def test_repr(self):
        assert "index=0" in repr(make_chunk())


class TestChunkingResult:
    """Tests for the result envelope."""

    def test_succeeded_totals_tokens(self):
        chunks = [make_chunk(0), make_chunk(1, token_count=7)]
        result = ChunkingResult.succeeded(chunks, 1.5)

        assert result.success
        assert result.chunk_count == 2
        assert result.total_tokens == 12
        assert result.error is None
        assert result.error_code is None

    def test_failed_has_no_chunks(self):
        result = ChunkingResult.failed("Text is empty", ChunkingErrorCode.EMPTY_TEXT)

        assert not result.success
        assert result.chunks == []
        assert result.total_tokens == 0
        assert result.to_dict()["error_code"] == "EMPTY_TEXT"
