"""
Token Estimation Module

Approximates model tokens for budget decisions. Every chunker receives its
counter as a constructor argument so a stricter tokenizer can be swapped in
without touching the chunking logic.

Components:
- TokenCounter: Callable signature shared by all chunkers
- count_tokens: Default word-based estimator (~4 characters per token)
- truncate_to_tokens: Cut text down to a token budget
- count_words: Whitespace-delimited word count
"""

import logging
import math
import re
from typing import Callable

logger = logging.getLogger(__name__)

TokenCounter = Callable[[str], int]

CHARS_PER_TOKEN = 4

_WORD_PATTERN = re.compile(r"\S+")


def _word_tokens(word: str) -> int:
    return max(1, math.ceil(len(word) / CHARS_PER_TOKEN))


def count_tokens(text: str) -> int:
    """
    Estimate the number of model tokens in text.

    Each whitespace-delimited word costs one token per started block of
    four characters, with a minimum of one. The estimate is therefore
    additive over words: the count of a concatenation is the sum of the
    counts of its pieces whenever they are joined by whitespace.

    Args:
        text: Text to measure

    Returns:
        Non-negative token estimate, 0 for empty or whitespace-only text

    Raises:
        TypeError: If text is not a string
    """
    if not isinstance(text, str):
        raise TypeError(f"text must be str, got: {type(text)}")

    return sum(_word_tokens(match.group()) for match in _WORD_PATTERN.finditer(text))


def count_words(text: str) -> int:
    """Count whitespace-delimited words."""
    return len(text.split())


def truncate_to_tokens(text: str, max_tokens: int, counter: TokenCounter = count_tokens) -> str:
    """
    Return the longest word-aligned prefix of text within max_tokens.

    Text already within budget is returned unchanged. When the first word
    alone exceeds the budget it is cut at a character boundary instead.

    Args:
        text: Text to truncate
        max_tokens: Token budget for the returned prefix
        counter: Token counter used to measure the prefix

    Returns:
        Prefix of text whose token count is at most max_tokens
    """
    if counter(text) <= max_tokens:
        return text

    if max_tokens <= 0:
        return ""

    end = 0
    used = 0
    for match in _WORD_PATTERN.finditer(text):
        word_cost = counter(match.group())
        if used + word_cost > max_tokens:
            break
        used += word_cost
        end = match.end()

    # Non-additive counters can disagree with the running sum
    while end > 0 and counter(text[:end]) > max_tokens:
        previous = [m.end() for m in _WORD_PATTERN.finditer(text, 0, end) if m.end() < end]
        end = previous[-1] if previous else 0

    if end > 0:
        return text[:end]

    leading = len(text) - len(text.lstrip())
    return text[:leading] + _truncate_word(text[leading:], max_tokens, counter)


def _truncate_word(word: str, max_tokens: int, counter: TokenCounter) -> str:
    """Binary search the longest character prefix of a single word within budget."""
    low, high = 0, len(word)
    while low < high:
        middle = (low + high + 1) // 2
        if counter(word[:middle]) <= max_tokens:
            low = middle
        else:
            high = middle - 1

    if low == 0:
        logger.debug(f"Token budget {max_tokens} too small for any prefix of word")
    return word[:low]
