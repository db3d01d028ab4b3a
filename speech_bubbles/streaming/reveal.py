"""
Text Revealer - Simulates a reply streaming in token by token.
Feeds the growing visible text into the bubble engine, always passing the full
reply along so bubble boundaries are computed once and never shift.
"""

import asyncio
import logging

from ..engine.queue_manager import BubbleQueueManager

logger = logging.getLogger(__name__)


class TextRevealer:
    """Reveals replies a few characters at a time."""

    def __init__(self, manager: BubbleQueueManager, chars_per_tick: int = 3, tick_ms: float = 40):
        if chars_per_tick < 1:
            raise ValueError(f"chars_per_tick must be positive, got {chars_per_tick}")
        self.manager = manager
        self.chars_per_tick = chars_per_tick
        self.tick_ms = tick_ms

    async def reveal(self, entity_id: str, full_text: str):
        """Stream ``full_text`` into the engine for ``entity_id``."""
        logger.info(f"Streaming reply for {entity_id} ({len(full_text)} chars)")

        for end in range(self.chars_per_tick, len(full_text), self.chars_per_tick):
            self.manager.update_text(entity_id, full_text[:end], True, full_text)
            await asyncio.sleep(self.tick_ms / 1000.0)

        self.manager.update_text(entity_id, full_text, False, full_text)
        logger.debug(f"Reply for {entity_id} fully revealed")
