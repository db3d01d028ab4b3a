"""
Tests for the event bus.
"""

import asyncio

import pytest

from speech_bubbles.core.event_bus import EventBus


@pytest.mark.asyncio
async def test_emit_reaches_sync_and_async_listeners():
    bus = EventBus()
    await bus.initialize()
    received = []

    async def async_listener(value):
        received.append(("async", value))

    bus.subscribe("ping", lambda value: received.append(("sync", value)))
    bus.subscribe("ping", async_listener)
    await bus.emit("ping", 1)

    assert received == [("sync", 1), ("async", 1)]


@pytest.mark.asyncio
async def test_failing_listener_does_not_stop_others():
    bus = EventBus()
    await bus.initialize()
    received = []

    def broken(value):
        raise RuntimeError("boom")

    bus.subscribe("ping", broken)
    bus.subscribe("ping", received.append)
    await bus.emit("ping", 2)
    bus.publish("ping", 3)

    assert received == [2, 3]


@pytest.mark.asyncio
async def test_publish_schedules_coroutine_listeners():
    bus = EventBus()
    await bus.initialize()
    received = []

    async def listener(value):
        await asyncio.sleep(0)
        received.append(value)

    bus.subscribe("ping", listener)
    bus.publish("ping", "later")
    assert received == []

    for _ in range(3):
        await asyncio.sleep(0)
    assert received == ["later"]


@pytest.mark.asyncio
async def test_nothing_is_delivered_before_initialize_or_after_shutdown():
    bus = EventBus()
    received = []
    bus.subscribe("ping", received.append)

    bus.publish("ping", 1)
    await bus.emit("ping", 2)

    await bus.initialize()
    await bus.shutdown()
    bus.publish("ping", 3)

    assert received == []
    assert not bus.listeners


def test_unsubscribe():
    bus = EventBus()
    bus.running = True
    received = []
    bus.subscribe("ping", received.append)
    bus.unsubscribe("ping", received.append)
    bus.unsubscribe("ping", received.append)

    bus.publish("ping", 1)

    assert received == []
