"""
Event Bus - Central event system for component communication.
Carries engine notifications out to the renderer and animation completions back in.
"""

import asyncio
import inspect
import logging
from collections import defaultdict
from typing import Callable, Dict, List, Set

logger = logging.getLogger(__name__)


class EventBus:
    """Async event bus for component communication."""

    def __init__(self):
        self.listeners: Dict[str, List[Callable]] = defaultdict(list)
        self.running = False
        self._tasks: Set[asyncio.Task] = set()

    async def initialize(self):
        """Initialize the event bus."""
        self.running = True
        logger.info("Event bus initialized")

    def subscribe(self, event_name: str, callback: Callable):
        """Subscribe to an event."""
        self.listeners[event_name].append(callback)
        logger.debug(f"Subscribed to event: {event_name}")

    def unsubscribe(self, event_name: str, callback: Callable):
        """Unsubscribe from an event."""
        if callback in self.listeners[event_name]:
            self.listeners[event_name].remove(callback)
            logger.debug(f"Unsubscribed from event: {event_name}")

    async def emit(self, event_name: str, *args, **kwargs):
        """Emit an event to all listeners."""
        if not self.running:
            return

        listeners = list(self.listeners.get(event_name, []))
        if listeners:
            logger.debug(f"Emitting event: {event_name} to {len(listeners)} listeners")

            for callback in listeners:
                try:
                    if inspect.iscoroutinefunction(callback):
                        await callback(*args, **kwargs)
                    else:
                        callback(*args, **kwargs)
                except Exception as e:
                    logger.error(f"Error in event listener for {event_name}: {e}")

    def publish(self, event_name: str, *args, **kwargs):
        """Emit an event from synchronous code.

        Plain listeners run immediately; coroutine listeners are scheduled on the
        running loop.
        """
        if not self.running:
            return

        for callback in list(self.listeners.get(event_name, [])):
            try:
                if inspect.iscoroutinefunction(callback):
                    loop = asyncio.get_running_loop()
                    task = loop.create_task(callback(*args, **kwargs))
                    self._tasks.add(task)
                    task.add_done_callback(self._task_done)
                else:
                    callback(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in event listener for {event_name}: {e}")

    def _task_done(self, task: asyncio.Task):
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Error in async event listener: {task.exception()}")

    async def shutdown(self):
        """Shutdown the event bus."""
        self.running = False
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
        self.listeners.clear()
        logger.info("Event bus shutdown")
