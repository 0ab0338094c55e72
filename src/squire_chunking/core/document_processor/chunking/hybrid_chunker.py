"""
Hybrid Chunking Module

Default chunking strategy. Combines semantic grouping with fixed-size
re-splitting and an overlap pass:

1. Group paragraphs (or sentences) semantically up to max_tokens
2. Re-split any group still over max_tokens into fixed windows, ending
   windows on sentence boundaries where possible
3. Prefix each chunk with trailing words of the previous one, keeping every
   chunk within max_tokens * hybrid_tolerance

Components:
- hybrid_token_ceiling: Per-chunk token ceiling for the options
- HybridChunker: Hybrid chunking strategy
"""

import logging
import math
from typing import List, Optional, Tuple

from ....exceptions.chunking_exceptions import EmptyTextError
from .assembler import ChunkAssembler, ChunkSegment, run_chunking
from .boundary import BoundaryDetector
from .config import ChunkingOptions, ChunkingStrategy, OptionsInput
from .fixed_chunker import absorb_small_tail, trailing_text, window_spans, word_spans
from .result import ChunkingResult
from .semantic_chunker import PARAGRAPH_SEPARATOR, SENTENCE_SEPARATOR, group_to_segment, group_units
from .tokens import TokenCounter, count_tokens

logger = logging.getLogger(__name__)

# A piece together with the separator placed between injected overlap and its text
_Piece = Tuple[ChunkSegment, str]


def hybrid_token_ceiling(options: ChunkingOptions) -> int:
    return math.floor(options.max_tokens * options.hybrid_tolerance)


class HybridChunker:
    """
    Hybrid chunking strategy.

    Composes the semantic grouping and fixed windowing functions rather than
    the other chunkers themselves, so a single token counter and boundary
    detector govern the whole pass.

    Example:
        >>> chunker = HybridChunker()
        >>> result = chunker.chunk(text, "doc-1", {"max_tokens": 200})
        >>> all(c.token_count <= 300 for c in result.chunks)
        True
    """

    strategy = ChunkingStrategy.HYBRID

    def __init__(
        self,
        token_counter: TokenCounter = count_tokens,
        boundary_detector: Optional[BoundaryDetector] = None
    ) -> None:
        """
        Initialize the hybrid chunker.

        Args:
            token_counter: Token estimator used for every budget decision
            boundary_detector: Detector for paragraphs, sentences and headings

        Raises:
            TypeError: If token_counter is not callable or the detector has the wrong type
        """
        if boundary_detector is not None and not isinstance(boundary_detector, BoundaryDetector):
            raise TypeError(f"boundary_detector must be BoundaryDetector, got: {type(boundary_detector)}")

        self.assembler = ChunkAssembler(token_counter)
        self.token_counter = token_counter
        self.detector = boundary_detector or BoundaryDetector()
        logger.debug("HybridChunker initialized")

    def chunk(self, text: str, document_id: str, options: OptionsInput = None) -> ChunkingResult:
        """
        Chunk text semantically with an enforced ceiling and overlap.

        Args:
            text: Document text
            document_id: Identifier of the owning document
            options: None, ChunkingOptions, or a mapping of overrides

        Returns:
            ChunkingResult; failures are reported, never raised
        """
        return run_chunking(
            self.strategy, text, document_id, options,
            self.build_segments, self.assembler, hybrid_token_ceiling
        )

    def build_segments(self, text: str, options: ChunkingOptions) -> List[ChunkSegment]:
        structure = self.detector.analyze(text)
        units = self.detector.segment(text, options.preserve_paragraphs, structure)
        if not units:
            raise EmptyTextError("Text contains no content outside page break markers")

        sections = self.detector.detect_sections(text, structure)
        pieces: List[_Piece] = []

        for group in group_units(units, options, self.token_counter):
            segment = group_to_segment(group, sections)
            segment.metadata["unit_count"] = len(group.units)

            if self.token_counter(segment.content) <= options.max_tokens:
                pieces.append((segment, PARAGRAPH_SEPARATOR))
            else:
                pieces.extend(self._split_oversized(segment, options))

        segments = self._apply_overlap(pieces, options)
        logger.debug(f"Hybrid pass produced {len(segments)} segments from {len(units)} units")
        return segments

    def _split_oversized(self, segment: ChunkSegment, options: ChunkingOptions) -> List[_Piece]:
        """Re-split a segment over max_tokens into fixed windows without overlap."""
        content = segment.content
        spans = word_spans(content, options.max_tokens, self.token_counter)

        sentence_ends = None
        if options.preserve_sentences:
            sentence_ends = set(self.detector.sentence_end_offsets(content))
            sentence_ends.update(m.start() for m in self.detector.paragraph_pattern.finditer(content))

        windows = window_spans(spans, options.max_tokens, 0, sentence_ends)
        windows = absorb_small_tail(windows, spans, options.min_tokens, options.max_tokens)
        logger.debug(
            f"Re-splitting {self.token_counter(content)}-token segment into {len(windows)} pieces"
        )

        pieces = []
        for i, (start, end) in enumerate(windows):
            piece = ChunkSegment(
                content=content[spans[start].start:spans[end - 1].end],
                section_title=segment.section_title,
                page_number=segment.page_number,
                metadata={
                    **segment.metadata,
                    "split_index": i,
                    "split_count": len(windows),
                },
            )
            pieces.append((piece, PARAGRAPH_SEPARATOR if i == 0 else SENTENCE_SEPARATOR))
        return pieces

    def _apply_overlap(self, pieces: List[_Piece], options: ChunkingOptions) -> List[ChunkSegment]:
        """
        Prefix each piece with trailing words of the previous piece.

        Overlap is taken from the previous piece's own text, never from the
        overlap already injected into it. When the previous piece's last word
        alone costs more than overlap_tokens, that word is repeated if it fits
        under the ceiling.
        """
        ceiling = hybrid_token_ceiling(options)
        base_contents = [piece.content for piece, _ in pieces]
        segments: List[ChunkSegment] = []

        for i, (piece, separator) in enumerate(pieces):
            if i == 0 or options.overlap_tokens == 0:
                segments.append(piece)
                continue

            previous = base_contents[i - 1]
            room = ceiling - self.token_counter(piece.content)
            budget = min(options.overlap_tokens, room)
            prefix = trailing_text(previous, budget, self.token_counter)
            if not prefix:
                # A last word over the overlap budget is still repeated when it fits
                prefix = trailing_text(previous.split()[-1], room, self.token_counter)
            combined = f"{prefix}{separator}{piece.content}"

            # Counters that are not additive over words can overshoot the budget
            while prefix and self.token_counter(combined) > ceiling:
                budget -= 1
                prefix = trailing_text(previous, budget, self.token_counter)
                combined = f"{prefix}{separator}{piece.content}"

            if prefix:
                piece.content = combined
                piece.has_overlap_before = True
                piece.metadata["overlap_tokens"] = self.token_counter(prefix)
                segments[-1].has_overlap_after = True
            segments.append(piece)

        return segments


hybrid_chunker = HybridChunker()
