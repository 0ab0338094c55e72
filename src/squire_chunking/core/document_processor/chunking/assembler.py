"""
Chunk Assembly Module

Turns the ordered segments a strategy produces into final DocumentChunk
records, and runs the pipeline shared by every strategy: input check,
options merge, segmentation, assembly, validation and error wrapping.

Components:
- ChunkSegment: Strategy output awaiting assembly
- ChunkAssembler: Stamps index, ids, counts and overlap flags
- validate_chunks: Post-assembly invariant checks
- run_chunking: Shared chunking pipeline returning a ChunkingResult
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from ....exceptions.chunking_exceptions import (
    ChunkAssemblyError,
    ChunkBudgetExceededError,
    ChunkingError,
    ChunkingErrorCode,
    EmptyTextError,
)
from .config import ChunkingOptions, ChunkingStrategy, OptionsInput, options_for_strategy, with_defaults
from .result import ChunkingResult, DocumentChunk
from .tokens import TokenCounter, count_tokens, count_words

logger = logging.getLogger(__name__)


@dataclass
class ChunkSegment:
    """
    A piece of text chosen by a strategy, before it becomes a chunk.

    Attributes:
        content: Segment text, stripped during assembly
        start_char: Source offset of the segment start, if known
        end_char: Source offset of the segment end, if known
        section_title: Enclosing section title, if known
        page_number: Page of the segment start, if known
        has_overlap_before: Whether content repeats text from the previous segment
        has_overlap_after: Whether the next segment repeats text from this one
        metadata: Strategy-specific metadata merged into the chunk metadata
    """
    content: str
    start_char: Optional[int] = None
    end_char: Optional[int] = None
    section_title: Optional[str] = None
    page_number: Optional[int] = None
    has_overlap_before: bool = False
    has_overlap_after: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)


SegmentBuilder = Callable[[str, ChunkingOptions], List[ChunkSegment]]
TokenCeiling = Callable[[ChunkingOptions], Optional[int]]


class ChunkAssembler:
    """
    Builds DocumentChunk records from ordered segments.

    The assembler trusts the section and page provenance it is given and
    never re-derives it. Token counts are always recomputed from the final
    content with the injected counter.
    """

    def __init__(self, token_counter: TokenCounter = count_tokens) -> None:
        if not callable(token_counter):
            raise TypeError(f"token_counter must be callable, got: {type(token_counter)}")
        self.token_counter = token_counter

    def assemble(
        self,
        segments: Sequence[ChunkSegment],
        document_id: str,
        strategy: ChunkingStrategy
    ) -> List[DocumentChunk]:
        """
        Assemble segments into chunks.

        Args:
            segments: Ordered strategy output
            document_id: Identifier of the owning document
            strategy: Strategy tag stamped on every chunk

        Returns:
            Chunks indexed 0..n-1 in segment order

        Raises:
            ChunkAssemblyError: If a segment has no content
        """
        created_at = datetime.now(timezone.utc)
        last_index = len(segments) - 1
        chunks = []

        for index, segment in enumerate(segments):
            content = segment.content.strip()
            if not content:
                raise ChunkAssemblyError(f"Segment {index} of document {document_id} has no content")

            metadata = dict(segment.metadata)
            if segment.start_char is not None and segment.end_char is not None:
                metadata["start_char"] = segment.start_char
                metadata["end_char"] = segment.end_char
            metadata["word_count"] = count_words(content)
            metadata["has_overlap_before"] = segment.has_overlap_before and index > 0
            metadata["has_overlap_after"] = segment.has_overlap_after and index < last_index

            chunks.append(DocumentChunk(
                id=str(uuid.uuid4()),
                document_id=document_id,
                chunk_index=index,
                content=content,
                token_count=self.token_counter(content),
                chunking_strategy=strategy,
                metadata=metadata,
                created_at=created_at,
                page_number=segment.page_number,
                section_title=segment.section_title,
            ))

        return chunks


def validate_chunks(chunks: Sequence[DocumentChunk], token_ceiling: Optional[int] = None) -> None:
    """
    Check assembled chunks against the chunk invariants.

    Args:
        chunks: Assembled chunks
        token_ceiling: Maximum token count per chunk, or None for no ceiling

    Raises:
        ChunkAssemblyError: If indexes are not contiguous or content is empty
        ChunkBudgetExceededError: If a chunk exceeds the token ceiling
    """
    for expected_index, chunk in enumerate(chunks):
        if chunk.chunk_index != expected_index:
            raise ChunkAssemblyError(
                f"Chunk index {chunk.chunk_index} found where {expected_index} was expected"
            )
        if not chunk.content.strip():
            raise ChunkAssemblyError(f"Chunk {chunk.chunk_index} has empty content")
        if token_ceiling is not None and chunk.token_count > token_ceiling:
            raise ChunkBudgetExceededError(chunk.chunk_index, chunk.token_count, token_ceiling)

    if chunks:
        if chunks[0].has_overlap_before or chunks[-1].has_overlap_after:
            raise ChunkAssemblyError("Overlap flags set on the document edges")


def _elapsed_ms(start_time: float) -> float:
    return round((time.perf_counter() - start_time) * 1000, 3)


def run_chunking(
    strategy: ChunkingStrategy,
    text: Optional[str],
    document_id: str,
    options: OptionsInput,
    build_segments: SegmentBuilder,
    assembler: ChunkAssembler,
    token_ceiling: Optional[TokenCeiling] = None
) -> ChunkingResult:
    """
    Run one chunking call through the shared pipeline.

    Empty input is rejected before options are merged or text is segmented.
    No exception escapes: chunking errors keep their own error code and any
    other fault is logged and reported as UNKNOWN_ERROR.

    Args:
        strategy: Strategy tag of the calling chunker
        text: Document text
        document_id: Identifier of the owning document
        options: None, ChunkingOptions, or a mapping of overrides
        build_segments: Strategy segmentation function
        assembler: Assembler with the chunker's token counter
        token_ceiling: Function giving the per-chunk ceiling for the options

    Returns:
        ChunkingResult describing the outcome
    """
    start_time = time.perf_counter()

    try:
        if text is None or (isinstance(text, str) and not text.strip()):
            raise EmptyTextError()
        if not isinstance(text, str):
            raise TypeError(f"text must be str, got: {type(text)}")

        resolved = options_for_strategy(with_defaults(options), strategy)
        segments = build_segments(text, resolved)
        chunks = assembler.assemble(segments, document_id, strategy)
        validate_chunks(chunks, token_ceiling(resolved) if token_ceiling else None)

    except EmptyTextError as e:
        logger.warning(f"Skipping chunking for document {document_id}: {e.message}")
        return ChunkingResult.failed(e.message, e.error_code, _elapsed_ms(start_time))
    except ChunkingError as e:
        logger.error(f"Chunking failed for document {document_id} ({e.error_code.value}): {e.message}")
        return ChunkingResult.failed(e.message, e.error_code, _elapsed_ms(start_time))
    except Exception as e:
        logger.exception(f"Unexpected error chunking document {document_id}")
        return ChunkingResult.failed(
            str(e) or type(e).__name__,
            ChunkingErrorCode.UNKNOWN_ERROR,
            _elapsed_ms(start_time)
        )

    duration_ms = _elapsed_ms(start_time)
    logger.info(
        f"Chunking complete: {len(chunks)} chunks created for document {document_id} "
        f"using {strategy.value} strategy in {duration_ms:.1f}ms"
    )
    return ChunkingResult.succeeded(chunks, duration_ms)
