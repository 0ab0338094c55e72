"""
Squire chunking engine.

Splits extracted document text into token-bounded, overlapping chunks for
embedding and semantic search.

Usage:
    from squire_chunking import hybrid_chunker

    result = hybrid_chunker.chunk(text, document_id, {"max_tokens": 256})
    if result.success:
        for chunk in result.chunks:
            store(chunk.to_row())
"""

from .core.document_processor.chunking import (
    CHUNKING_STRATEGIES,
    DEFAULT_CHUNKING_OPTIONS,
    ChunkingOptions,
    ChunkingResult,
    ChunkingStrategy,
    DocumentChunk,
    FixedChunker,
    HybridChunker,
    SemanticChunker,
    chunk_document,
    count_tokens,
    fixed_chunker,
    get_chunker,
    hybrid_chunker,
    semantic_chunker,
    truncate_to_tokens,
)
from .exceptions import ChunkingErrorCode

__version__ = "0.1.0"

__all__ = [
    "CHUNKING_STRATEGIES",
    "DEFAULT_CHUNKING_OPTIONS",
    "ChunkingErrorCode",
    "ChunkingOptions",
    "ChunkingResult",
    "ChunkingStrategy",
    "DocumentChunk",
    "FixedChunker",
    "HybridChunker",
    "SemanticChunker",
    "chunk_document",
    "count_tokens",
    "fixed_chunker",
    "get_chunker",
    "hybrid_chunker",
    "semantic_chunker",
    "truncate_to_tokens",
]
