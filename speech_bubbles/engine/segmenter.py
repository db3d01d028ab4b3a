"""
Segmenter - Splits a reply into bubble-sized segments.
Text is word-wrapped to the bubble's line width; when it overflows the bubble's
line budget a break point is chosen, preferring sentence endings near the overflow
and falling back to the last word boundary.
"""

import logging
import re
from typing import List

from ..models.segment import BubbleSegment

logger = logging.getLogger(__name__)

# Sentence-terminal punctuation run followed by whitespace
SENTENCE_END = re.compile(r"[.!?]+\s+")

SEARCH_BEFORE = 50
SEARCH_AFTER = 20
MIN_BREAK_RATIO = 0.7
MAX_BREAK_RATIO = 1.3


def count_words(text: str) -> int:
    """Count whitespace-delimited words."""
    return len(text.split())


def wrap_text_to_lines(text: str, max_chars: int) -> List[str]:
    """Greedy word wrap. Explicit newlines always start a new line."""
    if max_chars < 1:
        raise ValueError(f"max_chars must be positive, got {max_chars}")

    lines: List[str] = []
    for paragraph in text.split("\n"):
        words = paragraph.split()
        if not words:
            lines.append("")
            continue

        current = ""
        for word in words:
            if not current:
                current = word
            elif len(current) + 1 + len(word) <= max_chars:
                current += " " + word
            else:
                lines.append(current)
                current = word
        lines.append(current)

    return lines


def _last_whitespace(text: str, end: int) -> int:
    """Index of the last whitespace character at or before ``end``, or -1."""
    for index in range(min(end, len(text) - 1), 0, -1):
        if text[index].isspace():
            return index
    return -1


def find_break_point(text: str,
                     max_chars: int,
                     max_lines: int,
                     search_before: int = SEARCH_BEFORE,
                     search_after: int = SEARCH_AFTER,
                     min_ratio: float = MIN_BREAK_RATIO,
                     max_ratio: float = MAX_BREAK_RATIO) -> int:
    """Find where the next bubble should start.

    Returns -1 when the whole text fits in one bubble, otherwise the character
    offset at which to cut.
    """
    lines = wrap_text_to_lines(text, max_chars)
    if len(lines) <= max_lines:
        return -1

    # Offset at which exactly max_lines wrapped lines are consumed
    target = sum(len(line) for line in lines[:max_lines]) + (max_lines - 1)

    search_start = max(0, target - search_before)
    search_end = min(len(text), target + search_after)
    region = text[search_start:search_end]

    for match in reversed(list(SENTENCE_END.finditer(region))):
        break_point = search_start + match.end()
        if not (target * min_ratio < break_point < target * max_ratio):
            continue
        if len(wrap_text_to_lines(text[:break_point].strip(), max_chars)) <= max_lines:
            return break_point

    boundary = _last_whitespace(text, target)
    if boundary > 0:
        return boundary + 1

    logger.debug(f"Hard break at offset {target}, no word boundary found")
    return max(target, 1)


def segment_text(text: str,
                 max_chars: int,
                 max_lines: int,
                 search_before: int = SEARCH_BEFORE,
                 search_after: int = SEARCH_AFTER,
                 min_ratio: float = MIN_BREAK_RATIO,
                 max_ratio: float = MAX_BREAK_RATIO) -> List[BubbleSegment]:
    """Cut text into an ordered list of bubble segments.

    Segments joined with single spaces give back the trimmed input, up to
    whitespace at the cut points. ``start_index``/``end_index`` are offsets
    into the trimmed input. Empty or whitespace-only input yields [].
    """
    if max_chars < 1 or max_lines < 1:
        raise ValueError(f"Invalid bubble capacity: {max_chars} chars x {max_lines} lines")

    segments: List[BubbleSegment] = []
    source = text.strip()
    offset = 0

    while offset < len(source):
        remaining = source[offset:]
        break_point = find_break_point(
            remaining, max_chars, max_lines,
            search_before=search_before,
            search_after=search_after,
            min_ratio=min_ratio,
            max_ratio=max_ratio,
        )
        cut = len(remaining) if break_point == -1 else break_point

        chunk = remaining[:cut]
        segment = chunk.strip()
        if segment:
            start = offset + len(chunk) - len(chunk.lstrip())
            segments.append(BubbleSegment(
                id=f"segment-{len(segments)}",
                text=segment,
                word_count=count_words(segment),
                start_index=start,
                end_index=start + len(segment),
            ))

        offset += cut
        while offset < len(source) and source[offset].isspace():
            offset += 1

    return segments
