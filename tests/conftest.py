"""
Shared fixtures for the speech bubble tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from speech_bubbles.engine.dimensions import BubbleDimensions
from speech_bubbles.engine.queue_manager import BubbleQueueManager
from speech_bubbles.engine.scheduler import BubbleScheduler


class FakeTimerHandle:
    """Timer handle returned by FakeLoop.call_later."""

    def __init__(self, when, callback, args):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True


class FakeLoop:
    """Just enough of an event loop to drive timers with a manual clock."""

    def __init__(self):
        self.now = 0.0
        self.handles = []

    def call_later(self, delay, callback, *args):
        handle = FakeTimerHandle(self.now + delay, callback, args)
        self.handles.append(handle)
        return handle

    def pending(self):
        return [h for h in self.handles if not h.cancelled and not h.fired]

    def advance(self, seconds):
        """Move the clock forward, firing due timers in order."""
        target = self.now + seconds
        while True:
            due = sorted((h for h in self.pending() if h.when <= target), key=lambda h: h.when)
            if not due:
                break
            handle = due[0]
            self.now = handle.when
            handle.fired = True
            handle.callback(*handle.args)
        self.now = target

    def run_all(self, limit=100):
        """Fire every pending timer, including ones armed while firing."""
        for _ in range(limit):
            pending = self.pending()
            if not pending:
                return
            self.advance(max(h.when for h in pending) - self.now)
        raise AssertionError("timers kept re-arming")


def fixed_resolver(max_chars, max_lines):
    """Dimension resolver that ignores layout and returns a fixed capacity."""
    def resolve(entity_count, bubble_count):
        return BubbleDimensions(max_width=0, max_height=0, max_lines=max_lines, max_chars=max_chars)
    return resolve


@pytest.fixture
def fake_loop():
    return FakeLoop()


@pytest.fixture
def make_manager(fake_loop):
    """Factory for managers on the fake loop with a fixed bubble capacity."""
    def _make(max_chars=20, max_lines=1, **kwargs):
        return BubbleQueueManager(
            dimension_resolver=fixed_resolver(max_chars, max_lines),
            scheduler=BubbleScheduler(fake_loop),
            **kwargs,
        )
    return _make
