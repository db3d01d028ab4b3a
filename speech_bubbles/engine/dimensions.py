"""
Dimension Resolver - Bubble capacity for the current layout.
The engine only consumes the (max_chars, max_lines) pair; the default resolver
derives it from the viewport, how many characters share the screen and how many
bubbles each character is showing.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BubbleDimensions:
    """Pixel size and text capacity of one bubble."""
    max_width: float
    max_height: float
    max_lines: int
    max_chars: int


# (entity_count, bubble_count) -> BubbleDimensions
DimensionResolver = Callable[[int, int], BubbleDimensions]

# "entities-bubbles" -> (width px, lines)
SIZING_TABLE: Dict[str, Tuple[int, int]] = {
    "1-1": (420, 7),
    "1-2": (320, 7),
    "2-1": (350, 7),
    "2-2": (280, 7),
    "3-1": (300, 7),
    "3-2": (240, 7),
}
FALLBACK_SIZING = (280, 8)


def max_chars_for_width(max_width: float, padding: float = 28, char_width: float = 9.5) -> int:
    """Characters per line that fit in a bubble of the given width."""
    return math.floor((max_width - padding) / char_width)


def max_lines_for_height(max_height: float,
                         line_height: float = 32,
                         header_height: float = 30,
                         padding: float = 28) -> int:
    """Lines that fit in a bubble of the given height (never fewer than 2)."""
    return max(2, math.floor((max_height - header_height - padding) / line_height))


class ViewportDimensionResolver:
    """Default resolver driven by viewport size and device flags."""

    def __init__(self,
                 viewport_width: float = 1280,
                 viewport_height: float = 800,
                 is_mobile: bool = False,
                 is_mobile_landscape: bool = False,
                 char_width: float = 9.5,
                 horizontal_padding: float = 28,
                 line_height: float = 32,
                 header_height: float = 30,
                 vertical_padding: float = 28,
                 min_width: float = 220,
                 screen_margin: float = 32):
        self.viewport_width = viewport_width
        self.viewport_height = viewport_height
        self.is_mobile = is_mobile
        self.is_mobile_landscape = is_mobile_landscape

        self.char_width = char_width
        self.horizontal_padding = horizontal_padding
        self.line_height = line_height
        self.header_height = header_height
        self.vertical_padding = vertical_padding
        self.min_width = min_width
        self.screen_margin = screen_margin

    @classmethod
    def from_config(cls, display) -> "ViewportDimensionResolver":
        """Build a resolver from a DisplayConfig section."""
        return cls(
            viewport_width=display.viewport_width,
            viewport_height=display.viewport_height,
            is_mobile=display.is_mobile,
            is_mobile_landscape=display.is_mobile_landscape,
            char_width=display.char_width,
            horizontal_padding=display.horizontal_padding,
            line_height=display.line_height,
            header_height=display.header_height,
            vertical_padding=display.vertical_padding,
            min_width=display.min_bubble_width,
            screen_margin=display.screen_margin,
        )

    def update_viewport(self,
                        width: float,
                        height: float,
                        is_mobile: Optional[bool] = None,
                        is_mobile_landscape: Optional[bool] = None):
        """Record a viewport resize or orientation change."""
        self.viewport_width = width
        self.viewport_height = height
        if is_mobile is not None:
            self.is_mobile = is_mobile
        if is_mobile_landscape is not None:
            self.is_mobile_landscape = is_mobile_landscape
        logger.debug(f"Viewport updated: {width}x{height} "
                     f"(mobile={self.is_mobile}, landscape={self.is_mobile_landscape})")

    def __call__(self, entity_count: int, bubble_count: int) -> BubbleDimensions:
        key = f"{min(entity_count, 3)}-{min(bubble_count, 2)}"
        max_width, max_lines = SIZING_TABLE.get(key, FALLBACK_SIZING)

        if self.is_mobile_landscape:
            # Wider but shorter bubbles
            max_width = min(max_width, self.viewport_width * 0.35)
            max_lines = min(max_lines, 7)
        elif self.is_mobile:
            max_width = min(max_width, self.viewport_width * 0.75)
            max_lines = min(max_lines, 10)

        max_width = max(self.min_width, min(max_width, self.viewport_width - self.screen_margin))
        max_height = max_lines * self.line_height + self.header_height + self.vertical_padding

        return BubbleDimensions(
            max_width=max_width,
            max_height=max_height,
            max_lines=max_lines,
            max_chars=max_chars_for_width(max_width, self.horizontal_padding, self.char_width),
        )
