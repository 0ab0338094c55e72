"""
Chunk Result Module

Contains the chunk record produced by every strategy and the result envelope
returned from a chunking call.

Components:
- DocumentChunk: Immutable chunk with provenance and metadata
- ChunkingResult: Success or failure envelope for a chunking call
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from ....exceptions.chunking_exceptions import ChunkingErrorCode
from .config import ChunkingStrategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentChunk:
    """
    A single chunk of a document, ready for embedding and storage.

    Chunks are never mutated after assembly. The metadata dictionary always
    carries ``word_count``, ``has_overlap_before`` and ``has_overlap_after``,
    plus character offsets and strategy-specific keys where known.

    Attributes:
        id: Unique chunk identifier (uuid4)
        document_id: Identifier of the owning document
        chunk_index: 0-based position within the document
        content: Stripped, non-empty chunk text
        token_count: Estimated tokens in content
        chunking_strategy: Strategy that produced the chunk
        metadata: Word count, overlap flags and strategy details
        created_at: UTC timestamp of assembly
        page_number: 1-based page of the chunk start, if known
        section_title: Title of the enclosing section, if known

    Example:
        >>> chunk.to_row()["chunk_index"]
        0
    """

    id: str
    document_id: str
    chunk_index: int
    content: str
    token_count: int
    chunking_strategy: ChunkingStrategy
    metadata: Dict[str, Any]
    created_at: datetime
    page_number: Optional[int] = None
    section_title: Optional[str] = None

    @property
    def word_count(self) -> int:
        return self.metadata["word_count"]

    @property
    def has_overlap_before(self) -> bool:
        return self.metadata["has_overlap_before"]

    @property
    def has_overlap_after(self) -> bool:
        return self.metadata["has_overlap_after"]

    def get_preview(self, max_length: int = 100) -> str:
        """Get a single-line preview of the chunk content."""
        preview = " ".join(self.content.split())
        if len(preview) <= max_length:
            return preview
        return preview[:max_length - 3] + "..."

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert chunk to a JSON-friendly dictionary.

        Returns:
            Dictionary with the strategy as its tag and the timestamp as ISO 8601
        """
        return {
            "id": self.id,
            "document_id": self.document_id,
            "chunk_index": self.chunk_index,
            "content": self.content,
            "token_count": self.token_count,
            "page_number": self.page_number,
            "section_title": self.section_title,
            "chunking_strategy": self.chunking_strategy.value,
            "metadata": dict(self.metadata),
            "created_at": self.created_at.isoformat(),
        }

    def to_row(self) -> Dict[str, Any]:
        """
        Convert chunk to a document_chunks storage row.

        The row uses the storage column names and stores metadata as a JSON
        string; embeddings are attached by the storage layer.
        """
        return {
            "id": self.id,
            "object_id": self.document_id,
            "chunk_index": self.chunk_index,
            "content": self.content,
            "token_count": self.token_count,
            "page_number": self.page_number,
            "section_title": self.section_title,
            "chunking_strategy": self.chunking_strategy.value,
            "metadata": json.dumps(self.metadata),
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "DocumentChunk":
        """
        Rebuild a chunk from a document_chunks storage row.

        Args:
            row: Row mapping as produced by to_row(); metadata may be a JSON
                string or an already decoded mapping, created_at an ISO string
                or a datetime

        Returns:
            DocumentChunk equal in content to the stored chunk
        """
        metadata = row.get("metadata") or {}
        if isinstance(metadata, str):
            metadata = json.loads(metadata)

        created_at = row["created_at"]
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)

        return cls(
            id=row["id"],
            document_id=row["object_id"],
            chunk_index=row["chunk_index"],
            content=row["content"],
            token_count=row["token_count"],
            chunking_strategy=ChunkingStrategy(row["chunking_strategy"]),
            metadata=dict(metadata),
            created_at=created_at,
            page_number=row.get("page_number"),
            section_title=row.get("section_title"),
        )

    def __repr__(self) -> str:
        return (
            f"DocumentChunk(index={self.chunk_index}, tokens={self.token_count}, "
            f"strategy={self.chunking_strategy.value}, preview='{self.get_preview(50)}')"
        )


@dataclass
class ChunkingResult:
    """
    Outcome of a chunking call.

    Chunkers never raise to their callers: every failure is reported here with
    an error message and code.

    Attributes:
        success: Whether chunking completed
        chunks: Assembled chunks, empty on failure
        total_tokens: Sum of chunk token counts
        processing_duration_ms: Wall-clock duration of the call
        error: Human-readable failure description
        error_code: Machine-readable failure code
    """

    success: bool
    chunks: List[DocumentChunk] = field(default_factory=list)
    total_tokens: int = 0
    processing_duration_ms: float = 0.0
    error: Optional[str] = None
    error_code: Optional[ChunkingErrorCode] = None

    @classmethod
    def succeeded(cls, chunks: List[DocumentChunk], processing_duration_ms: float) -> "ChunkingResult":
        """Build a successful result, totalling chunk tokens."""
        return cls(
            success=True,
            chunks=list(chunks),
            total_tokens=sum(chunk.token_count for chunk in chunks),
            processing_duration_ms=processing_duration_ms,
        )

    @classmethod
    def failed(
        cls,
        error: str,
        error_code: ChunkingErrorCode,
        processing_duration_ms: float = 0.0
    ) -> "ChunkingResult":
        """Build a failed result with no chunks."""
        return cls(
            success=False,
            processing_duration_ms=processing_duration_ms,
            error=error,
            error_code=error_code,
        )

    @property
    def chunk_count(self) -> int:
        return len(self.chunks)

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to a JSON-friendly dictionary."""
        return {
            "success": self.success,
            "chunks": [chunk.to_dict() for chunk in self.chunks],
            "total_tokens": self.total_tokens,
            "processing_duration_ms": self.processing_duration_ms,
            "error": self.error,
            "error_code": self.error_code.value if self.error_code else None,
        }
