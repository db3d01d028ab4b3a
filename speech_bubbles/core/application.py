"""
Main application class for Speech Bubbles.
Wires the bubble engine to the event bus, a simulated renderer and a streaming
text source, then plays the configured conversation.
"""

import asyncio
import logging
from typing import Optional

from .config import Config
from .event_bus import EventBus
from ..engine.commands import AnimationComplete, ClearAll
from ..engine.dimensions import ViewportDimensionResolver
from ..engine.queue_manager import BubbleQueueManager
from ..engine.scheduler import BubbleScheduler
from ..models.bubble import AnimationState
from ..renderer.simulated import SimulatedRenderer
from ..streaming.reveal import TextRevealer

logger = logging.getLogger(__name__)


class BubbleApplication:
    """Main application class that orchestrates all components."""

    def __init__(self, config: Config, renderer_console=None):
        self.config = config
        self.running = False
        self.event_bus = EventBus()
        self._renderer_console = renderer_console

        # Core components
        self.manager: Optional[BubbleQueueManager] = None
        self.renderer: Optional[SimulatedRenderer] = None
        self.revealer: Optional[TextRevealer] = None

        logger.info("Speech bubble application initialized")

    async def initialize(self):
        """Initialize all application components."""
        logger.info("Initializing application components...")

        try:
            await self.event_bus.initialize()

            self.manager = BubbleQueueManager(
                dimension_resolver=ViewportDimensionResolver.from_config(self.config.display),
                scheduler=BubbleScheduler(asyncio.get_running_loop()),
                event_bus=self.event_bus,
                timing=self.config.timing,
                segmentation=self.config.segmentation,
                entity_count=len(self.config.demo.characters),
            )

            self.renderer = SimulatedRenderer(
                event_bus=self.event_bus,
                manager=self.manager,
                timing=self.config.timing,
                console=self._renderer_console,
            )
            await self.renderer.initialize()

            self.revealer = TextRevealer(
                self.manager,
                chars_per_tick=self.config.demo.chars_per_tick,
                tick_ms=self.config.demo.tick_ms,
            )

            self._setup_event_handlers()

            logger.info("All components initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize application: {e}", exc_info=True)
            raise

    def _setup_event_handlers(self):
        """Setup event handlers for inter-component communication."""

        # Renderer -> Engine
        self.event_bus.subscribe("animation_complete", self._handle_animation_complete)

        logger.info("Event handlers configured")

    def _handle_animation_complete(self, entity_id: str, bubble_id: str, animation: AnimationState):
        """Forward a finished animation to the engine."""
        if self.manager:
            self.manager.dispatch(AnimationComplete(entity_id, bubble_id, animation))

    async def wait_until_idle(self, poll_ms: float = 50):
        """Block until every entity has shown its whole reply."""
        while self.running and not all(self.manager.is_idle(e) for e in self.manager.entity_ids()):
            await asyncio.sleep(poll_ms / 1000.0)

    async def run(self):
        """Play the configured conversation."""
        try:
            await self.initialize()

            self.running = True
            logger.info("Starting conversation playback")

            await asyncio.gather(*(
                self.revealer.reveal(character.name, character.reply)
                for character in self.config.demo.characters
            ))
            await self.wait_until_idle()

            logger.info("Conversation playback finished")

        except Exception as e:
            logger.error(f"Application error: {e}", exc_info=True)
            raise
        finally:
            await self.shutdown()

    async def shutdown(self):
        """Shutdown the application gracefully."""
        if not self.running and not self.event_bus.running:
            return

        logger.info("Shutting down application...")
        self.running = False

        if self.manager:
            self.manager.dispatch(ClearAll())

        for component in (self.renderer, self.event_bus):
            if component:
                try:
                    await component.shutdown()
                except Exception as e:
                    logger.error(f"Error shutting down component: {e}")

        logger.info("Application shutdown complete")
