"""
Semantic Chunking Module

Groups consecutive paragraphs (or sentences) into chunks up to the token
budget, so chunks follow the document's own structure. There is no hard
ceiling: a paragraph larger than the budget becomes a chunk of its own.

Components:
- UnitGroup: Units collected into one prospective chunk
- join_units: Rebuild chunk text from its units
- group_units: Greedy unit grouping shared with the hybrid strategy
- group_to_segment: Convert a group into an assembler segment
- SemanticChunker: Semantic chunking strategy
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ....exceptions.chunking_exceptions import EmptyTextError
from .assembler import ChunkAssembler, ChunkSegment, run_chunking
from .boundary import BoundaryDetector, DocumentSection, TextUnit
from .config import ChunkingOptions, ChunkingStrategy, OptionsInput
from .result import ChunkingResult
from .tokens import TokenCounter, count_tokens

logger = logging.getLogger(__name__)

PARAGRAPH_SEPARATOR = "\n\n"
SENTENCE_SEPARATOR = " "


def join_units(units: Sequence[TextUnit]) -> str:
    """Join units with blank lines between paragraphs and spaces within one."""
    parts = []
    for i, unit in enumerate(units):
        if i > 0:
            same_paragraph = unit.paragraph_index == units[i - 1].paragraph_index
            parts.append(SENTENCE_SEPARATOR if same_paragraph else PARAGRAPH_SEPARATOR)
        parts.append(unit.text)
    return "".join(parts)


@dataclass
class UnitGroup:
    """Consecutive units destined for the same chunk."""
    units: List[TextUnit] = field(default_factory=list)
    tokens: int = 0

    def add(self, unit: TextUnit, tokens: int) -> None:
        self.units.append(unit)
        self.tokens += tokens

    def extend(self, other: "UnitGroup") -> None:
        self.units.extend(other.units)
        self.tokens += other.tokens

    @property
    def content(self) -> str:
        return join_units(self.units)

    @property
    def starts_section(self) -> bool:
        return bool(self.units) and self.units[0].is_heading

    @property
    def paragraph_count(self) -> int:
        return len({unit.paragraph_index for unit in self.units})


def _should_close(group: UnitGroup, unit: TextUnit, unit_tokens: int, options: ChunkingOptions) -> bool:
    if group.tokens + unit_tokens > options.max_tokens:
        return True
    return unit.is_heading and group.tokens >= options.min_tokens


def _detach_trailing_heading(group: UnitGroup, counter: TokenCounter) -> UnitGroup:
    """Remove a heading left at the end of a closing group and return it as a new group."""
    carried = UnitGroup()
    if len(group.units) > 1 and group.units[-1].is_heading:
        heading = group.units.pop()
        heading_tokens = counter(heading.text)
        group.tokens -= heading_tokens
        carried.add(heading, heading_tokens)
    return carried


def group_units(
    units: Sequence[TextUnit],
    options: ChunkingOptions,
    counter: TokenCounter = count_tokens
) -> List[UnitGroup]:
    """
    Greedily merge consecutive units into groups within max_tokens.

    A heading starts a new group once the current group holds min_tokens, and
    a heading stranded at the end of a closing group moves forward with its
    body. A final group below min_tokens joins the previous group unless it opens
    a new section, even when the merge passes max_tokens.

    Args:
        units: Paragraph or sentence units in document order
        options: Chunking options supplying the budgets
        counter: Token estimator

    Returns:
        Non-empty groups in document order
    """
    groups: List[UnitGroup] = []
    current = UnitGroup()

    for unit in units:
        unit_tokens = counter(unit.text)
        if current.units and _should_close(current, unit, unit_tokens, options):
            carried = _detach_trailing_heading(current, counter)
            groups.append(current)
            current = carried
        current.add(unit, unit_tokens)

    if current.units:
        if (
            groups
            and current.tokens < options.min_tokens
            and not current.starts_section
        ):
            logger.debug(f"Merging {current.tokens}-token trailing group into previous group")
            groups[-1].extend(current)
        else:
            groups.append(current)

    return groups


def group_to_segment(group: UnitGroup, sections: Sequence[DocumentSection]) -> ChunkSegment:
    """Build an assembler segment carrying the group's section and page."""
    first, last = group.units[0], group.units[-1]
    return ChunkSegment(
        content=group.content,
        start_char=first.start_char,
        end_char=last.end_char,
        section_title=BoundaryDetector.section_title_at(sections, first.start_char),
        page_number=first.page_number,
    )


class SemanticChunker:
    """
    Semantic chunking strategy.

    Chunks never overlap. Section titles come from the nearest heading at or
    before each chunk start, and page numbers from page break markers.

    Example:
        >>> result = SemanticChunker().chunk(markdown_text, "doc-1")
        >>> result.chunks[0].section_title
        'Introduction'
    """

    strategy = ChunkingStrategy.SEMANTIC

    def __init__(
        self,
        token_counter: TokenCounter = count_tokens,
        boundary_detector: Optional[BoundaryDetector] = None
    ) -> None:
        """
        Initialize the semantic chunker.

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
        logger.debug("SemanticChunker initialized")

    def chunk(self, text: str, document_id: str, options: OptionsInput = None) -> ChunkingResult:
        """
        Chunk text along paragraph boundaries.

        Args:
            text: Document text
            document_id: Identifier of the owning document
            options: None, ChunkingOptions, or a mapping of overrides

        Returns:
            ChunkingResult; failures are reported, never raised
        """
        return run_chunking(
            self.strategy, text, document_id, options,
            self.build_segments, self.assembler
        )

    def build_segments(self, text: str, options: ChunkingOptions) -> List[ChunkSegment]:
        structure = self.detector.analyze(text)
        units = self.detector.segment(text, options.preserve_paragraphs, structure)
        if not units:
            raise EmptyTextError("Text contains no content outside page break markers")

        sections = self.detector.detect_sections(text, structure)
        segments = []
        for group in group_units(units, options, self.token_counter):
            segment = group_to_segment(group, sections)
            segment.metadata["paragraph_count"] = group.paragraph_count
            segments.append(segment)

        logger.debug(
            f"Semantic grouping produced {len(segments)} segments from {len(units)} units "
            f"across {len(sections)} sections"
        )
        return segments


semantic_chunker = SemanticChunker()
