"""
Bubble Queue Manager - Per-entity speech bubble queues.
Turns an entity's streamed reply into at most two on-screen bubbles, keeps a
backlog of segments still to show, and promotes the next segment once the
current one has been on screen long enough to read.
"""

import itertools
import logging
from dataclasses import replace
from typing import Dict, List, Optional, Union

from ..core.config import SegmentationConfig, TimingConfig
from ..core.event_bus import EventBus
from ..models.bubble import (
    MAX_BUBBLES,
    AnimationState,
    BubbleState,
    BubbleStatus,
    EntityQueue,
    Slot,
)
from ..models.segment import BubbleSegment
from .commands import AnimationComplete, ClearAll, ClearEntity, Message, TextUpdate
from .dimensions import BubbleDimensions, DimensionResolver, ViewportDimensionResolver
from .lifecycle import Completion, begin_transition, complete_animation, spawn_bubble
from .reading import reading_pause
from .scheduler import BubbleScheduler
from .segmenter import segment_text

logger = logging.getLogger(__name__)

# Shared across managers so bubble ids from a cleared turn never come back
_turns = itertools.count(1)


class BubbleQueueManager:
    """Owns every entity's bubble queue and drives it from text, timers and animations."""

    def __init__(self,
                 dimension_resolver: Optional[DimensionResolver] = None,
                 scheduler: Optional[BubbleScheduler] = None,
                 event_bus: Optional[EventBus] = None,
                 timing: Optional[TimingConfig] = None,
                 segmentation: Optional[SegmentationConfig] = None,
                 entity_count: int = 1):
        self.dimension_resolver = dimension_resolver or ViewportDimensionResolver()
        self.scheduler = scheduler or BubbleScheduler()
        self.event_bus = event_bus
        self.timing = timing or TimingConfig()
        self.segmentation = segmentation or SegmentationConfig()
        self.entity_count = entity_count

        # Entity registry: entity id -> queue state
        self.queues: Dict[str, EntityQueue] = {}

    # ------------------------------------------------------------------
    # Inbound operations
    # ------------------------------------------------------------------

    def dispatch(self, message: Message):
        """Route an inbound message to the matching operation."""
        if isinstance(message, TextUpdate):
            self.update_text(message.entity_id, message.visible_text,
                             message.is_streaming, message.full_text)
        elif isinstance(message, AnimationComplete):
            self.on_animation_complete(message.entity_id, message.bubble_id, message.animation)
        elif isinstance(message, ClearEntity):
            self.clear_entity(message.entity_id)
        elif isinstance(message, ClearAll):
            self.clear_all()
        else:
            raise TypeError(f"Unsupported message: {type(message).__name__}")

    def update_text(self,
                    entity_id: str,
                    visible_text: str,
                    is_streaming: bool,
                    full_text: Optional[str] = None):
        """Feed the latest visible text of an entity's reply.

        ``full_text``, when known, is segmented instead of ``visible_text`` so
        bubble boundaries stay put while the reply is still being revealed.
        Text already committed to an older bubble is never cut again; only the
        part from the active bubble onwards is re-segmented.
        """
        queue = self.queues.get(entity_id)
        if queue is not None and visible_text == queue.last_processed_text:
            return

        source = (full_text if full_text is not None else visible_text or "").strip()
        if not source:
            logger.debug(f"Ignoring empty text update for {entity_id}")
            return

        if queue is None or not queue.bubbles:
            segments = self._segment(source, 1)
            if not segments:
                return
            if queue is None:
                queue = EntityQueue(entity_id=entity_id, turn=next(_turns))
                self.queues[entity_id] = queue
                logger.info(f"Bubble queue created for {entity_id}")
            queue.source_text = source
            self._start_reply(queue, segments)
        else:
            queue.source_text = source
            self._reconcile(queue)

        queue.last_processed_text = visible_text
        logger.debug(f"Text update for {entity_id}: {len(queue.bubbles)} shown, "
                     f"{len(queue.pending_segments)} pending, streaming={is_streaming}")

    def promote_next(self, entity_id: str):
        """Show the next backlog segment, sliding the window if both slots are taken."""
        queue = self.queues.get(entity_id)
        if queue is None:
            return
        if not queue.pending_segments:
            logger.debug(f"Nothing to promote for {entity_id}")
            return
        if queue.is_transitioning:
            logger.debug(f"Promotion skipped for {entity_id}: transition in flight")
            return

        if len(queue.bubbles) < MAX_BUBBLES:
            active = queue.active_bubble()
            index = active.segment_index + 1 if active else 0
            slot = Slot.RIGHT if queue.bubbles else Slot.LEFT

            # The backlog was cut for the bubble count before this promotion
            self._resegment_backlog(queue, len(queue.bubbles) + 1, index)
            segment = queue.pending_segments.pop(0)
            bubble = spawn_bubble(queue, segment, index, slot)
            if bubble is None:
                queue.pending_segments.insert(0, segment)
                return
            self._notify_animation(queue, bubble.id)

            if queue.pending_segments:
                self._arm(queue, bubble.word_count)
        elif begin_transition(queue):
            for bubble in queue.bubbles:
                self._notify_animation(queue, bubble.id)

    def on_animation_complete(self,
                              entity_id: str,
                              bubble_id: str,
                              animation: Union[AnimationState, str]):
        """The renderer finished an animation. Stale reports are ignored."""
        animation = AnimationState(animation)
        queue = self.queues.get(entity_id)
        if queue is None:
            logger.debug(f"Completion for unknown entity {entity_id} ignored")
            return

        if (animation == AnimationState.SLIDING_LEFT and queue.pending_segments
                and queue.animation_of(bubble_id) == animation):
            # The next bubble joins the one sliding over
            moving = queue.find_bubble(bubble_id)
            self._resegment_backlog(queue, MAX_BUBBLES, moving.segment_index + 1)

        outcome, created = complete_animation(queue, bubble_id, animation)

        if outcome == Completion.REMOVED:
            self._publish("bubble_removed", entity_id, bubble_id)
        elif outcome == Completion.SLID and created is not None:
            self._notify_animation(queue, created.id)
            if queue.pending_segments:
                self._arm(queue, created.word_count)

    def clear_entity(self, entity_id: str):
        """Cancel the entity's timer and forget everything about it."""
        queue = self.queues.pop(entity_id, None)
        if queue is None:
            return
        self.scheduler.cancel(queue)
        queue.animations.clear()
        logger.info(f"Bubble queue cleared for {entity_id}")
        self._publish("entity_cleared", entity_id)

    def clear_all(self):
        """Clear every entity, e.g. on conversation reset."""
        for entity_id in list(self.queues):
            self.clear_entity(entity_id)

    def set_entity_count(self, entity_count: int):
        """Number of characters sharing the screen."""
        self.entity_count = entity_count

    # ------------------------------------------------------------------
    # Queries for the renderer
    # ------------------------------------------------------------------

    def get_bubbles_for_entity(self, entity_id: str) -> List[BubbleState]:
        """Live bubbles, left slot first."""
        queue = self.queues.get(entity_id)
        if queue is None:
            return []
        ordered = sorted(queue.bubbles, key=lambda b: (b.slot != Slot.LEFT, b.segment_index))
        return [replace(bubble) for bubble in ordered]

    def get_retiring_bubbles(self, entity_id: str) -> List[BubbleState]:
        """Bubbles that lost their slot but are still fading out."""
        queue = self.queues.get(entity_id)
        if queue is None:
            return []
        return [replace(bubble) for bubble in queue.retiring]

    def get_animation_state(self, entity_id: str, bubble_id: str) -> AnimationState:
        queue = self.queues.get(entity_id)
        if queue is None:
            return AnimationState.IDLE
        return queue.animation_of(bubble_id)

    def get_pending_segments(self, entity_id: str) -> List[BubbleSegment]:
        queue = self.queues.get(entity_id)
        return list(queue.pending_segments) if queue else []

    def is_transitioning(self, entity_id: str) -> bool:
        queue = self.queues.get(entity_id)
        return queue.is_transitioning if queue else False

    def has_timer(self, entity_id: str) -> bool:
        queue = self.queues.get(entity_id)
        return queue is not None and self.scheduler.is_armed(queue)

    def is_idle(self, entity_id: str) -> bool:
        """True once nothing is left to show, wait for or animate."""
        queue = self.queues.get(entity_id)
        if queue is None:
            return True
        return not (queue.pending_segments
                    or queue.is_transitioning
                    or queue.retiring
                    or self.scheduler.is_armed(queue)
                    or queue.is_animating())

    def entity_ids(self) -> List[str]:
        return list(self.queues)

    def get_bubble_dimensions(self, bubble_count: int) -> BubbleDimensions:
        return self.dimension_resolver(self.entity_count, bubble_count)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _segment(self, text: str, bubble_count: int) -> List[BubbleSegment]:
        dimensions = self.get_bubble_dimensions(bubble_count)
        return segment_text(
            text,
            dimensions.max_chars,
            dimensions.max_lines,
            search_before=self.segmentation.search_before,
            search_after=self.segmentation.search_after,
            min_ratio=self.segmentation.min_break_ratio,
            max_ratio=self.segmentation.max_break_ratio,
        )

    def _segment_from(self,
                      source: str,
                      start: int,
                      bubble_count: int,
                      first_index: int) -> List[BubbleSegment]:
        """Segment ``source[start:]``, keeping offsets relative to ``source``."""
        tail = source[start:]
        shift = start + len(tail) - len(tail.lstrip())
        return [
            replace(segment,
                    id=f"segment-{first_index + position}",
                    start_index=segment.start_index + shift,
                    end_index=segment.end_index + shift)
            for position, segment in enumerate(self._segment(tail, bubble_count))
        ]

    def _resegment_backlog(self, queue: EntityQueue, bubble_count: int, first_index: int):
        start = queue.pending_segments[0].start_index
        segments = self._segment_from(queue.source_text, start, bubble_count, first_index)
        if segments:
            queue.pending_segments = segments

    def _start_reply(self, queue: EntityQueue, segments: List[BubbleSegment]):
        first = segments[0]
        bubble = spawn_bubble(queue, first, 0, Slot.LEFT)
        self._notify_animation(queue, bubble.id)

        queue.pending_segments = list(segments[1:])
        if queue.pending_segments:
            self._arm(queue, first.word_count)

    def _reconcile(self, queue: EntityQueue):
        """Line up the latest reply text with what is already on screen.

        Only the text from the active bubble's start onwards is segmented,
        at the capacity for the bubbles currently shown: the first segment
        becomes the active bubble's text and the rest the backlog.
        """
        active = queue.active_bubble()
        segments = self._segment_from(queue.source_text, active.source_start,
                                      len(queue.bubbles), active.segment_index)
        if not segments:
            # The reply no longer reaches the active bubble
            logger.debug(f"Text for {queue.entity_id} ends before {active.id}")
            queue.pending_segments = []
            return

        segment = segments[0]
        active.source_start = segment.start_index
        if active.text != segment.text:
            active.text = segment.text
            active.word_count = segment.word_count
            self._publish("bubble_text_changed", queue.entity_id, active.id, active.text)

        queue.pending_segments = segments[1:]
        if not queue.pending_segments:
            return

        if active.status == BubbleStatus.ACTIVE:
            active.status = BubbleStatus.READING
        if not queue.is_transitioning and not self.scheduler.is_armed(queue):
            self._arm(queue, active.word_count)

    def _arm(self, queue: EntityQueue, word_count: int):
        pause = reading_pause(
            word_count,
            wpm=self.timing.reading_wpm,
            min_ms=self.timing.min_reading_pause_ms,
            max_ms=self.timing.max_reading_pause_ms,
        )
        self.scheduler.arm(queue, pause, lambda: self._on_timer(queue))

    def _on_timer(self, queue: EntityQueue):
        # The queue may have been cleared and recreated since arming
        if self.queues.get(queue.entity_id) is not queue:
            return
        self.promote_next(queue.entity_id)

    def _notify_animation(self, queue: EntityQueue, bubble_id: str):
        self._publish("animation_started", queue.entity_id, bubble_id, queue.animation_of(bubble_id))

    def _publish(self, event_name: str, *args):
        if self.event_bus is not None:
            self.event_bus.publish(event_name, *args)
