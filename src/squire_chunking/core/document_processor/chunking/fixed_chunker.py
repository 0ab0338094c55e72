"""
Fixed-Size Chunking Module

Splits text into token-bounded windows of whole words with a configurable
overlap, ignoring document structure. The windowing functions are pure and
are reused by the hybrid strategy to re-split oversized units.

Components:
- WordSpan: A word's character range and token cost
- word_spans: Tokenize text into word spans, splitting oversized words
- window_spans: Greedy token windows over word spans with overlap
- absorb_small_tail: Fold an undersized final window into its neighbour
- trailing_text: Trailing words of a text within a token budget
- FixedChunker: Fixed-size chunking strategy
"""

import logging
import re
from dataclasses import dataclass
from typing import Collection, List, Optional, Sequence, Tuple

from .assembler import ChunkAssembler, ChunkSegment, run_chunking
from .config import FIXED_TOKEN_SLACK, ChunkingOptions, ChunkingStrategy, OptionsInput
from .result import ChunkingResult
from .tokens import TokenCounter, count_tokens, truncate_to_tokens

logger = logging.getLogger(__name__)

_WORD_PATTERN = re.compile(r"\S+")

Window = Tuple[int, int]


@dataclass(frozen=True)
class WordSpan:
    """Character range [start, end) of a word and its token cost."""
    start: int
    end: int
    tokens: int


def word_spans(text: str, max_tokens: int, counter: TokenCounter = count_tokens) -> List[WordSpan]:
    """
    Tokenize text into whitespace-delimited word spans.

    A word costing more than max_tokens is cut into consecutive pieces that
    each fit the budget, so every span can start a window on its own.
    """
    spans = []
    for match in _WORD_PATTERN.finditer(text):
        tokens = counter(match.group())
        if tokens <= max_tokens:
            spans.append(WordSpan(match.start(), match.end(), tokens))
            continue

        logger.debug(f"Splitting oversized word of {tokens} tokens at offset {match.start()}")
        position = match.start()
        while position < match.end():
            piece = truncate_to_tokens(text[position:match.end()], max_tokens, counter) or text[position]
            spans.append(WordSpan(position, position + len(piece), counter(piece)))
            position += len(piece)

    return spans


def _tokens_between(spans: Sequence[WordSpan], start: int, end: int) -> int:
    return sum(span.tokens for span in spans[start:end])


def _snap_to_sentence(
    spans: Sequence[WordSpan],
    start: int,
    end: int,
    sentence_ends: Collection[int],
    min_window_tokens: float
) -> int:
    """Move a window end back to the last sentence end keeping min_window_tokens."""
    used = _tokens_between(spans, start, end)
    for last in range(end - 1, start, -1):
        if spans[last].end in sentence_ends and used >= min_window_tokens:
            return last + 1
        used -= spans[last].tokens
    return end


def window_spans(
    spans: Sequence[WordSpan],
    max_tokens: int,
    overlap_tokens: int = 0,
    sentence_ends: Optional[Collection[int]] = None
) -> List[Window]:
    """
    Group word spans into greedy token windows.

    Each window takes words until the next word would exceed max_tokens. The
    following window starts overlap_tokens worth of words before the end of
    the previous one (at least one word when overlap is requested), but always
    leaves room for at least one new word.

    Args:
        spans: Word spans, none costing more than max_tokens
        max_tokens: Token budget per window
        overlap_tokens: Tokens to repeat at the start of the next window
        sentence_ends: Character offsets of sentence ends; when given, window
            ends snap back to a sentence end in the second half of the window

    Returns:
        Windows as (start, end) span index pairs, end exclusive
    """
    windows: List[Window] = []
    start = 0
    total = len(spans)

    while start < total:
        end = start
        used = 0
        while end < total and (end == start or used + spans[end].tokens <= max_tokens):
            used += spans[end].tokens
            end += 1

        if sentence_ends and end < total:
            end = _snap_to_sentence(spans, start, end, sentence_ends, max_tokens / 2)

        windows.append((start, end))
        if end >= total:
            break

        next_start = end
        if overlap_tokens > 0:
            backed = 0
            while next_start - 1 > start and backed + spans[next_start - 1].tokens <= overlap_tokens:
                next_start -= 1
                backed += spans[next_start].tokens
            if next_start == end and end - 1 > start:
                next_start = end - 1
                backed = spans[next_start].tokens
            while next_start < end and backed + spans[end].tokens > max_tokens:
                backed -= spans[next_start].tokens
                next_start += 1

        # Prevent infinite loop
        if next_start <= start:
            logger.warning(f"Window position did not advance at span {start}, forcing progress")
            next_start = start + 1

        start = next_start

    return windows


def absorb_small_tail(
    windows: List[Window],
    spans: Sequence[WordSpan],
    min_tokens: int,
    token_ceiling: int
) -> List[Window]:
    """
    Fold the last window into the previous one when it adds too little.

    The final window is merged when its words not already in the previous
    window cost less than min_tokens and the merged window stays within
    token_ceiling.
    """
    if len(windows) < 2:
        return windows

    previous_start, previous_end = windows[-2]
    last_start, last_end = windows[-1]
    new_tokens = _tokens_between(spans, max(last_start, previous_end), last_end)
    merged_tokens = _tokens_between(spans, previous_start, last_end)

    if new_tokens < min_tokens and merged_tokens <= token_ceiling:
        logger.debug(f"Absorbing {new_tokens}-token tail window into previous window")
        return windows[:-2] + [(previous_start, last_end)]
    return windows


def trailing_text(text: str, max_tokens: int, counter: TokenCounter = count_tokens) -> str:
    """Return the longest run of trailing words of text costing at most max_tokens."""
    if max_tokens <= 0:
        return ""

    used = 0
    start = None
    for match in reversed(list(_WORD_PATTERN.finditer(text))):
        cost = counter(match.group())
        if used + cost > max_tokens:
            break
        used += cost
        start = match.start()

    return text[start:].rstrip() if start is not None else ""


def fixed_token_ceiling(options: ChunkingOptions) -> int:
    return options.max_tokens + FIXED_TOKEN_SLACK


class FixedChunker:
    """
    Fixed-size chunking strategy.

    Produces windows of whole words sliced from the source text, so chunk
    content keeps the source formatting. Text within max_tokens becomes a
    single chunk without overlap.

    Example:
        >>> result = FixedChunker().chunk(text, "doc-1", {"max_tokens": 100, "overlap_tokens": 20})
        >>> result.chunks[1].has_overlap_before
        True
    """

    strategy = ChunkingStrategy.FIXED

    def __init__(self, token_counter: TokenCounter = count_tokens) -> None:
        """
        Initialize the fixed chunker.

        Args:
            token_counter: Token estimator used for every budget decision

        Raises:
            TypeError: If token_counter is not callable
        """
        self.assembler = ChunkAssembler(token_counter)
        self.token_counter = token_counter
        logger.debug("FixedChunker initialized")

    def chunk(self, text: str, document_id: str, options: OptionsInput = None) -> ChunkingResult:
        """
        Chunk text into fixed-size token windows.

        Args:
            text: Document text
            document_id: Identifier of the owning document
            options: None, ChunkingOptions, or a mapping of overrides

        Returns:
            ChunkingResult; failures are reported, never raised
        """
        return run_chunking(
            self.strategy, text, document_id, options,
            self.build_segments, self.assembler, fixed_token_ceiling
        )

    def build_segments(self, text: str, options: ChunkingOptions) -> List[ChunkSegment]:
        spans = word_spans(text, options.max_tokens, self.token_counter)

        if self.token_counter(text) <= options.max_tokens:
            windows = [(0, len(spans))]
        else:
            windows = window_spans(spans, options.max_tokens, options.overlap_tokens)
            windows = absorb_small_tail(windows, spans, options.min_tokens, fixed_token_ceiling(options))

        segments = []
        for i, (start, end) in enumerate(windows):
            start_char = spans[start].start
            end_char = spans[end - 1].end
            segments.append(ChunkSegment(
                content=text[start_char:end_char],
                start_char=start_char,
                end_char=end_char,
                has_overlap_before=i > 0 and start < windows[i - 1][1],
                has_overlap_after=i + 1 < len(windows) and windows[i + 1][0] < end,
                metadata={"start_word_index": start, "end_word_index": end},
            ))

        logger.debug(f"Fixed windowing produced {len(segments)} segments from {len(spans)} words")
        return segments


fixed_chunker = FixedChunker()
