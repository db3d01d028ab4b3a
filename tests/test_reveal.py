"""
Tests for the streaming text revealer.
"""

import pytest

from speech_bubbles.streaming.reveal import TextRevealer


class RecordingManager:
    def __init__(self):
        self.calls = []

    def update_text(self, entity_id, visible_text, is_streaming, full_text=None):
        self.calls.append((entity_id, visible_text, is_streaming, full_text))


@pytest.mark.asyncio
async def test_reveal_streams_prefixes_then_final_text():
    manager = RecordingManager()
    revealer = TextRevealer(manager, chars_per_tick=4, tick_ms=0)

    await revealer.reveal("aria", "Hello there")

    assert [c[1] for c in manager.calls] == ["Hell", "Hello th", "Hello there"]
    assert [c[2] for c in manager.calls] == [True, True, False]
    assert all(c[3] == "Hello there" for c in manager.calls)


@pytest.mark.asyncio
async def test_reveal_feeds_the_engine(make_manager):
    manager = make_manager(max_chars=20, max_lines=1)
    revealer = TextRevealer(manager, chars_per_tick=5, tick_ms=0)

    await revealer.reveal("aria", "Hello there my good friend")

    assert [b.text for b in manager.get_bubbles_for_entity("aria")] == ["Hello there my good"]
    assert [s.text for s in manager.get_pending_segments("aria")] == ["friend"]


def test_tick_size_must_be_positive(make_manager):
    with pytest.raises(ValueError):
        TextRevealer(make_manager(), chars_per_tick=0)
