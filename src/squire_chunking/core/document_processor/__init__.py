"""
Document Processor Package

Turns extracted document text into chunks ready for embedding. Text
extraction itself happens upstream; this package starts from decoded text.

Components:
- chunking/: Chunking engine with boundary detection and overlap management
"""

from .chunking import (
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

__all__ = [
    "CHUNKING_STRATEGIES",
    "DEFAULT_CHUNKING_OPTIONS",
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
