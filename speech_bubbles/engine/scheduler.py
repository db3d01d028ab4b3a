"""
Scheduler - Per-entity "show next segment" timers.
Each entity owns at most one timer handle, stored on its queue. Arming replaces
whatever was armed before; firing clears the handle before running the callback
so the callback may arm again.
"""

import asyncio
import logging
from typing import Callable, Optional

from ..models.bubble import EntityQueue

logger = logging.getLogger(__name__)


class BubbleScheduler:
    """Arms and cancels reading-pause timers on top of an event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        # Resolved lazily so the scheduler can be built outside a running loop
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def arm(self, queue: EntityQueue, delay_ms: float, callback: Callable[[], None]):
        """Run ``callback`` after ``delay_ms``, replacing any timer already armed."""
        self.cancel(queue)

        def _fire():
            if queue.timer is not handle:
                return
            queue.timer = None
            callback()

        handle = self.loop.call_later(delay_ms / 1000.0, _fire)
        queue.timer = handle
        logger.debug(f"Timer armed for {queue.entity_id}: {delay_ms:.0f}ms")

    def cancel(self, queue: EntityQueue) -> bool:
        """Cancel the entity's timer. Returns True if one was armed."""
        if queue.timer is None:
            return False
        queue.timer.cancel()
        queue.timer = None
        logger.debug(f"Timer cancelled for {queue.entity_id}")
        return True

    @staticmethod
    def is_armed(queue: EntityQueue) -> bool:
        return queue.timer is not None
