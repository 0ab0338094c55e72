"""
Boundary Detection Module

Locates the structural boundaries chunkers split on: paragraph breaks,
sentence breaks, headings and page breaks. All operations are pure
functions of the input text.

Components:
- BoundaryType: Enumeration of boundary kinds
- Boundary: A detected boundary with its offsets
- DocumentSection: A heading and the character range it governs
- TextUnit: A paragraph or sentence span of the source text
- DocumentStructure: Headings and page breaks found in one text
- BoundaryDetector: Regex-driven boundary detection and segmentation
"""

import bisect
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

PAGE_BREAK_MARKER = "--- Page Break ---"


class BoundaryType(Enum):
    """Kinds of boundary found in extracted text."""
    PARAGRAPH = "paragraph"
    SENTENCE = "sentence"
    HEADING = "heading"
    PAGE_BREAK = "page_break"


@dataclass(frozen=True)
class Boundary:
    """
    A boundary located in the source text.

    Attributes:
        boundary_type: Kind of boundary
        position: Offset where the boundary starts
        end: Offset where the boundary ends (exclusive)
        title: Heading text, for heading boundaries
        level: Heading level (1-6), for heading boundaries
    """
    boundary_type: BoundaryType
    position: int
    end: int
    title: Optional[str] = None
    level: Optional[int] = None


@dataclass(frozen=True)
class DocumentSection:
    """A heading together with the range of text it governs."""
    title: str
    level: int
    start_char: int
    end_char: int
    page_number: Optional[int] = None


@dataclass(frozen=True)
class TextUnit:
    """
    A contiguous span of source text used as a chunking unit.

    Attributes:
        text: Stripped span text
        start_char: Offset of the first character in the source
        end_char: Offset after the last character in the source
        paragraph_index: Index of the paragraph the span belongs to
        is_heading: Whether the span consists solely of a heading
        page_number: 1-based page of the span start, None without page breaks
    """
    text: str
    start_char: int
    end_char: int
    paragraph_index: int
    is_heading: bool = False
    page_number: Optional[int] = None


@dataclass(frozen=True)
class _Heading:
    start: int
    end: int
    level: int
    title: str


@dataclass(frozen=True)
class DocumentStructure:
    """Headings and page break offsets of a text, found in a single scan."""
    headings: Tuple[_Heading, ...]
    page_breaks: Tuple[int, ...]


class BoundaryDetector:
    """
    Regex-driven detector for paragraph, sentence, heading and page boundaries.

    Paragraphs are separated by blank lines or form feeds. Sentences end with
    '.', '!' or '?' followed by whitespace and a capital letter, or by the end
    of the text. Headings are markdown '#' lines, setext headings underlined
    with '=' or '-', and short ALL-CAPS lines. Page breaks are form feeds and
    the extractor's page break marker line.

    Example:
        >>> detector = BoundaryDetector()
        >>> units = detector.split_paragraphs("# Intro\\n\\nFirst paragraph.")
        >>> [unit.is_heading for unit in units]
        [True, False]
    """

    MAX_CAPS_HEADING_WORDS = 8
    MAX_CAPS_HEADING_LENGTH = 80

    def __init__(self) -> None:
        self._compile_boundary_patterns()
        logger.debug("BoundaryDetector initialized")

    def _compile_boundary_patterns(self) -> None:
        """Compile regex patterns for boundary detection."""
        self.paragraph_pattern = re.compile(r"\n\s*\n|\f")
        self.sentence_pattern = re.compile(r"(?<=[.!?])\s+(?=[A-Z])")
        self.markdown_heading_pattern = re.compile(
            r"^[ \t]{0,3}(#{1,6})[ \t]+(.+?)[ \t]*#*[ \t]*$", re.MULTILINE
        )
        self.setext_heading_pattern = re.compile(
            r"^([^\n]*\S)[^\S\n]*\n[ \t]*(={2,}|-{2,})[ \t]*$", re.MULTILINE
        )
        self.caps_heading_pattern = re.compile(
            r"^[ \t]*([A-Z][A-Z0-9 \t&,:;'()/\-]*[A-Z0-9)])[ \t]*$", re.MULTILINE
        )
        self.page_break_pattern = re.compile(
            r"^[ \t]*-{3}[ \t]*page[ \t]+break[ \t]*-{3}[ \t]*$|\f",
            re.MULTILINE | re.IGNORECASE
        )

    # Page breaks

    def find_page_breaks(self, text: str) -> List[int]:
        """Return the offsets of page break markers and form feeds, ascending."""
        return [match.start() for match in self.page_break_pattern.finditer(text)]

    @staticmethod
    def page_number_at(page_breaks: Sequence[int], offset: int) -> Optional[int]:
        """
        Return the 1-based page containing offset.

        Returns None when the text has no page breaks, since page numbers are
        unknown rather than all being page 1.
        """
        if not page_breaks:
            return None
        return bisect.bisect_left(page_breaks, offset) + 1

    def _is_page_break_marker(self, span: str) -> bool:
        match = self.page_break_pattern.fullmatch(span.strip())
        return match is not None

    # Headings

    def _find_headings(self, text: str) -> List[_Heading]:
        headings: Dict[int, _Heading] = {}

        for match in self.markdown_heading_pattern.finditer(text):
            start = match.start(1)
            headings[start] = _Heading(
                start=start,
                end=match.end(),
                level=len(match.group(1)),
                title=match.group(2).strip(),
            )

        for match in self.setext_heading_pattern.finditer(text):
            start, _ = _strip_span(text, match.start(1), match.end(1))
            title = match.group(1).strip()
            if start in headings or title.startswith("#") or self._is_page_break_marker(title):
                continue
            headings[start] = _Heading(
                start=start,
                end=match.end(),
                level=1 if match.group(2).startswith("=") else 2,
                title=title,
            )

        # Underlined caps titles are already registered as setext headings
        claimed = [(h.start, h.end) for h in headings.values()]
        for match in self.caps_heading_pattern.finditer(text):
            start = match.start(1)
            if any(s <= start < e for s, e in claimed) or not self._is_caps_heading(match.group(1)):
                continue
            headings[start] = _Heading(
                start=start,
                end=match.end(1),
                level=2,
                title=match.group(1).strip(),
            )

        return [headings[start] for start in sorted(headings)]

    def _is_caps_heading(self, line: str) -> bool:
        letters = [char for char in line if char.isalpha()]
        return (
            len(letters) >= 3
            and len(line) <= self.MAX_CAPS_HEADING_LENGTH
            and len(line.split()) <= self.MAX_CAPS_HEADING_WORDS
        )

    def analyze(self, text: str) -> DocumentStructure:
        """Scan text once for headings and page breaks."""
        return DocumentStructure(
            headings=tuple(self._find_headings(text)),
            page_breaks=tuple(self.find_page_breaks(text)),
        )

    def detect_sections(
        self,
        text: str,
        structure: Optional[DocumentStructure] = None
    ) -> List[DocumentSection]:
        """
        Detect headed sections in text.

        Each section runs from its heading to the next heading, or to the end
        of the text for the last one.

        Args:
            text: Source text
            structure: Result of analyze(text), scanned here when omitted

        Returns:
            Sections ordered by start offset
        """
        structure = structure or self.analyze(text)
        headings = structure.headings
        page_breaks = structure.page_breaks
        sections = []

        for i, heading in enumerate(headings):
            end_char = headings[i + 1].start if i + 1 < len(headings) else len(text)
            sections.append(DocumentSection(
                title=heading.title,
                level=heading.level,
                start_char=heading.start,
                end_char=end_char,
                page_number=self.page_number_at(page_breaks, heading.start),
            ))

        logger.debug(f"Detected {len(sections)} sections")
        return sections

    @staticmethod
    def section_title_at(sections: Sequence[DocumentSection], offset: int) -> Optional[str]:
        """Return the title of the last section starting at or before offset."""
        starts = [section.start_char for section in sections]
        index = bisect.bisect_right(starts, offset) - 1
        if index < 0:
            return None
        return sections[index].title

    # Segmentation

    def split_paragraphs(
        self,
        text: str,
        structure: Optional[DocumentStructure] = None
    ) -> List[TextUnit]:
        """
        Split text into paragraph units.

        Text without any paragraph break yields a single unit spanning the
        whole stripped buffer. Page break marker lines separate units and are
        not returned as units themselves.

        Args:
            text: Source text
            structure: Result of analyze(text), scanned here when omitted

        Returns:
            Paragraph units in document order
        """
        structure = structure or self.analyze(text)
        heading_ends = {heading.start: heading.end for heading in structure.headings}
        page_breaks = structure.page_breaks

        units = []
        for start, end in self._paragraph_spans(text):
            span_start, span_end = _strip_span(text, start, end)
            if span_start >= span_end or self._is_page_break_marker(text[span_start:span_end]):
                continue

            units.append(TextUnit(
                text=text[span_start:span_end],
                start_char=span_start,
                end_char=span_end,
                paragraph_index=len(units),
                is_heading=heading_ends.get(span_start, -1) >= span_end,
                page_number=self.page_number_at(page_breaks, span_start),
            ))

        return units

    def _paragraph_spans(self, text: str) -> List[Tuple[int, int]]:
        spans = []
        position = 0
        for match in self.paragraph_pattern.finditer(text):
            spans.append((position, match.start()))
            position = match.end()
        spans.append((position, len(text)))
        return spans

    def split_sentences(self, unit: TextUnit) -> List[TextUnit]:
        """
        Split a paragraph unit into sentence units.

        Headings are returned whole. Offsets stay relative to the source text.
        """
        if unit.is_heading:
            return [unit]

        sentences = []
        for start, end in self._sentence_spans(unit.text):
            span_start, span_end = _strip_span(unit.text, start, end)
            if span_start < span_end:
                sentences.append(TextUnit(
                    text=unit.text[span_start:span_end],
                    start_char=unit.start_char + span_start,
                    end_char=unit.start_char + span_end,
                    paragraph_index=unit.paragraph_index,
                    page_number=unit.page_number,
                ))

        return sentences or [unit]

    def _sentence_spans(self, text: str) -> List[Tuple[int, int]]:
        spans = []
        position = 0
        for match in self.sentence_pattern.finditer(text):
            spans.append((position, match.start()))
            position = match.end()
        spans.append((position, len(text)))
        return spans

    def sentence_end_offsets(self, text: str) -> List[int]:
        """Return the offsets just after each sentence in text, ascending."""
        ends = [match.start() for match in self.sentence_pattern.finditer(text)]
        stripped_end = len(text.rstrip())
        if stripped_end and (not ends or ends[-1] < stripped_end):
            ends.append(stripped_end)
        return ends

    def segment(
        self,
        text: str,
        preserve_paragraphs: bool = True,
        structure: Optional[DocumentStructure] = None
    ) -> List[TextUnit]:
        """
        Segment text into chunking units.

        Args:
            text: Source text
            preserve_paragraphs: Return paragraph units when True, sentence units otherwise
            structure: Result of analyze(text), scanned here when omitted

        Returns:
            Units in document order
        """
        paragraphs = self.split_paragraphs(text, structure)
        if preserve_paragraphs:
            return paragraphs

        units = []
        for paragraph in paragraphs:
            units.extend(self.split_sentences(paragraph))
        return units

    def detect(self, text: str) -> List[Boundary]:
        """
        Detect every boundary in text.

        Args:
            text: Source text

        Returns:
            Boundaries ordered by position
        """
        boundaries = []

        for match in self.paragraph_pattern.finditer(text):
            boundaries.append(Boundary(BoundaryType.PARAGRAPH, match.start(), match.end()))

        for match in self.sentence_pattern.finditer(text):
            boundaries.append(Boundary(BoundaryType.SENTENCE, match.start(), match.end()))

        for heading in self._find_headings(text):
            boundaries.append(Boundary(
                BoundaryType.HEADING, heading.start, heading.end, heading.title, heading.level
            ))

        for match in self.page_break_pattern.finditer(text):
            boundaries.append(Boundary(BoundaryType.PAGE_BREAK, match.start(), match.end()))

        order = list(BoundaryType)
        boundaries.sort(key=lambda b: (b.position, order.index(b.boundary_type)))
        return boundaries


def _strip_span(text: str, start: int, end: int) -> Tuple[int, int]:
    """Narrow [start, end) to exclude leading and trailing whitespace."""
    while start < end and text[start].isspace():
        start += 1
    while end > start and text[end - 1].isspace():
        end -= 1
    return start, end
