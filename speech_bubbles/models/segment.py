"""
Segment Model - A chunk of a reply sized to fit exactly one bubble.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class BubbleSegment:
    """One bubble's worth of text cut from a longer reply."""
    id: str
    text: str
    word_count: int
    start_index: int
    end_index: int
