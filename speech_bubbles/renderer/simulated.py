"""
Simulated Renderer - Stands in for the UI layer.
Plays each requested bubble animation by waiting out its duration, then reports
completion back over the event bus. Transitions are printed to the console.
"""

import asyncio
import logging
from typing import Optional

from rich.console import Console
from rich.markup import escape

from ..core.config import TimingConfig
from ..core.event_bus import EventBus
from ..engine.queue_manager import BubbleQueueManager
from ..models.bubble import AnimationState

logger = logging.getLogger(__name__)

ANIMATION_STYLES = {
    AnimationState.SLIDING_IN: ("bold green", "slides in"),
    AnimationState.SLIDING_LEFT: ("cyan", "slides left"),
    AnimationState.FADING_OUT: ("dim", "fades out"),
}


class SimulatedRenderer:
    """Console renderer driven by engine events."""

    def __init__(self,
                 event_bus: EventBus,
                 manager: BubbleQueueManager,
                 timing: TimingConfig,
                 console: Optional[Console] = None):
        self.event_bus = event_bus
        self.manager = manager
        self.timing = timing
        self.console = console or Console()
        self.animations_played = 0

    async def initialize(self):
        """Start listening for animation requests."""
        self.event_bus.subscribe("animation_started", self._on_animation_started)
        self.event_bus.subscribe("bubble_removed", self._on_bubble_removed)
        logger.info("Simulated renderer initialized")

    def duration_for(self, animation: AnimationState) -> float:
        """Animation duration in milliseconds."""
        if animation == AnimationState.FADING_OUT:
            return self.timing.fade_duration_ms
        return self.timing.slide_duration_ms

    async def _on_animation_started(self, entity_id: str, bubble_id: str, animation: AnimationState):
        if animation == AnimationState.IDLE:
            return

        style, verb = ANIMATION_STYLES[animation]
        text = next((b.text for b in self.manager.get_bubbles_for_entity(entity_id)
                     + self.manager.get_retiring_bubbles(entity_id) if b.id == bubble_id), "")
        self.console.print(f"[{style}]{entity_id}[/] {verb}: {escape(text)}")

        await asyncio.sleep(self.duration_for(animation) / 1000.0)
        self.animations_played += 1
        await self.event_bus.emit("animation_complete", entity_id, bubble_id, animation)

    def _on_bubble_removed(self, entity_id: str, bubble_id: str):
        logger.debug(f"Renderer dropped bubble {bubble_id} of {entity_id}")

    async def shutdown(self):
        """Stop listening."""
        self.event_bus.unsubscribe("animation_started", self._on_animation_started)
        self.event_bus.unsubscribe("bubble_removed", self._on_bubble_removed)
        logger.info("Simulated renderer shutdown")
