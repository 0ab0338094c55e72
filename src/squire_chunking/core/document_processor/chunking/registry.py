"""
Strategy registry for chunkers.

Maps strategy tags to chunker instances and dispatches a chunking call on the
strategy named in the options.
"""

import logging
from typing import Dict, Optional, Protocol, Union

from ....exceptions.chunking_exceptions import ChunkingErrorCode, InvalidChunkingOptionsError
from .config import ChunkingStrategy, OptionsInput, with_defaults
from .fixed_chunker import fixed_chunker
from .hybrid_chunker import hybrid_chunker
from .result import ChunkingResult
from .semantic_chunker import semantic_chunker

logger = logging.getLogger(__name__)


class DocumentChunker(Protocol):
    """Interface shared by every chunking strategy."""

    strategy: ChunkingStrategy

    def chunk(self, text: str, document_id: str, options: OptionsInput = None) -> ChunkingResult:
        """Chunk text, reporting failures in the result."""
        ...


_CHUNKERS: Dict[ChunkingStrategy, DocumentChunker] = {
    ChunkingStrategy.FIXED: fixed_chunker,
    ChunkingStrategy.SEMANTIC: semantic_chunker,
    ChunkingStrategy.HYBRID: hybrid_chunker,
}


def get_chunker(strategy: Union[str, ChunkingStrategy, None] = None) -> DocumentChunker:
    """
    Get the chunker for a strategy.

    Args:
        strategy: Strategy tag or enum member; None selects the default strategy

    Returns:
        Shared chunker instance for the strategy

    Raises:
        InvalidChunkingOptionsError: If the strategy is unknown
    """
    if strategy is None:
        return hybrid_chunker
    try:
        return _CHUNKERS[ChunkingStrategy(strategy)]
    except ValueError:
        raise InvalidChunkingOptionsError(f"Unknown chunking strategy: {strategy!r}", ["strategy"])


def chunk_document(text: Optional[str], document_id: str, options: OptionsInput = None) -> ChunkingResult:
    """
    Chunk a document with the strategy named in its options.

    Args:
        text: Document text
        document_id: Identifier of the owning document
        options: None, ChunkingOptions, or a mapping of overrides; the strategy
            defaults to hybrid

    Returns:
        ChunkingResult from the selected chunker
    """
    try:
        resolved = with_defaults(options)
    except InvalidChunkingOptionsError as e:
        logger.error(f"Chunking failed for document {document_id}: {e.message}")
        return ChunkingResult.failed(e.message, ChunkingErrorCode.INVALID_OPTIONS)

    chunker = get_chunker(resolved.strategy)
    logger.debug(f"Dispatching document {document_id} to {resolved.strategy.value} chunker")
    return chunker.chunk(text, document_id, resolved)
