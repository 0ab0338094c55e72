"""
Chunking Package - Document Chunking Engine

Splits extracted document text into token-bounded chunks for embedding and
retrieval. Three interchangeable strategies share one interface and return a
ChunkingResult instead of raising.

Components:
- count_tokens / truncate_to_tokens: Injectable token estimation
- BoundaryDetector: Paragraph, sentence, heading and page break detection
- ChunkingOptions: Immutable, validated chunking parameters
- DocumentChunk / ChunkingResult: Chunk record and result envelope
- ChunkAssembler: Index, id, count and overlap flag stamping
- FixedChunker: Token windows with overlap, structure ignored
- SemanticChunker: Paragraph grouping without overlap
- HybridChunker: Semantic grouping with enforced ceiling and overlap (default)
- get_chunker / chunk_document: Strategy dispatch
"""

from .tokens import (
    TokenCounter,
    count_tokens,
    count_words,
    truncate_to_tokens
)

from .config import (
    CHUNKING_STRATEGIES,
    DEFAULT_CHUNKING_OPTIONS,
    FIXED_TOKEN_SLACK,
    ChunkingOptions,
    ChunkingStrategy,
    with_defaults
)

from .boundary import (
    Boundary,
    BoundaryDetector,
    BoundaryType,
    DocumentSection,
    DocumentStructure,
    TextUnit
)

from .result import ChunkingResult, DocumentChunk

from .assembler import ChunkAssembler, ChunkSegment, run_chunking, validate_chunks

from .fixed_chunker import FixedChunker, fixed_chunker

from .semantic_chunker import SemanticChunker, semantic_chunker

from .hybrid_chunker import HybridChunker, hybrid_chunker, hybrid_token_ceiling

from .registry import DocumentChunker, chunk_document, get_chunker

__all__ = [
    "TokenCounter",
    "count_tokens",
    "count_words",
    "truncate_to_tokens",
    "CHUNKING_STRATEGIES",
    "DEFAULT_CHUNKING_OPTIONS",
    "FIXED_TOKEN_SLACK",
    "ChunkingOptions",
    "ChunkingStrategy",
    "with_defaults",
    "Boundary",
    "BoundaryDetector",
    "BoundaryType",
    "DocumentSection",
    "DocumentStructure",
    "TextUnit",
    "ChunkingResult",
    "DocumentChunk",
    "ChunkAssembler",
    "ChunkSegment",
    "run_chunking",
    "validate_chunks",
    "FixedChunker",
    "fixed_chunker",
    "SemanticChunker",
    "semantic_chunker",
    "HybridChunker",
    "hybrid_chunker",
    "hybrid_token_ceiling",
    "DocumentChunker",
    "chunk_document",
    "get_chunker",
]
