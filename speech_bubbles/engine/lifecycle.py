"""
Bubble Lifecycle - Animation-driven state machine for displayed bubbles.

    sliding_in --complete--> idle
    idle --promote--> fading_out (left) + sliding_left (right)
    fading_out --complete--> removed
    sliding_left --complete--> idle in the left slot, next segment slides in on the right

Completions are one-shot: a completion for an animation the bubble is no longer
playing is stale and ignored.
"""

import logging
from enum import Enum
from typing import Optional, Tuple

from ..models.bubble import (
    MAX_BUBBLES,
    AnimationState,
    BubbleState,
    BubbleStatus,
    EntityQueue,
    Slot,
)
from ..models.segment import BubbleSegment

logger = logging.getLogger(__name__)


class Completion(Enum):
    """What a reported animation completion did to the queue."""
    IGNORED = "ignored"
    SETTLED = "settled"
    REMOVED = "removed"
    SLID = "slid"


def spawn_bubble(queue: EntityQueue,
                 segment: BubbleSegment,
                 segment_index: int,
                 slot: Slot) -> Optional[BubbleState]:
    """Materialize a segment as a new bubble entering with ``sliding_in``.

    Refuses rather than evicting when the queue is already full.
    """
    if len(queue.bubbles) >= MAX_BUBBLES:
        logger.warning(f"Refusing bubble for {queue.entity_id}: "
                       f"already showing {len(queue.bubbles)} bubbles")
        return None

    # Only the newest bubble is being read
    for older in queue.bubbles:
        if older.status == BubbleStatus.READING:
            older.status = BubbleStatus.ACTIVE

    bubble = BubbleState(
        id=queue.bubble_id_for(segment_index),
        text=segment.text,
        slot=slot,
        status=BubbleStatus.ACTIVE,
        segment_index=segment_index,
        word_count=segment.word_count,
        source_start=segment.start_index,
    )
    queue.bubbles.append(bubble)
    queue.animations[bubble.id] = AnimationState.SLIDING_IN
    logger.debug(f"Bubble {bubble.id} sliding in ({slot.value}): {bubble.text[:40]!r}")
    return bubble


def begin_transition(queue: EntityQueue) -> bool:
    """Start retiring the left bubble and moving the right one over."""
    left = queue.bubble_in_slot(Slot.LEFT)
    right = queue.bubble_in_slot(Slot.RIGHT)
    if queue.is_transitioning or left is None or right is None:
        return False

    left.status = BubbleStatus.FADING
    right.status = BubbleStatus.TRANSITIONING
    queue.animations[left.id] = AnimationState.FADING_OUT
    queue.animations[right.id] = AnimationState.SLIDING_LEFT
    queue.is_transitioning = True
    logger.debug(f"Transition started for {queue.entity_id}: {left.id} out, {right.id} left")
    return True


def complete_animation(queue: EntityQueue,
                       bubble_id: str,
                       animation: AnimationState) -> Tuple[Completion, Optional[BubbleState]]:
    """Apply a finished animation. Returns the outcome and any bubble it spawned."""
    bubble = queue.find_bubble(bubble_id)
    if bubble is None or animation == AnimationState.IDLE or queue.animation_of(bubble_id) != animation:
        logger.debug(f"Ignoring stale completion {animation.value} for {bubble_id}")
        return Completion.IGNORED, None

    if animation == AnimationState.SLIDING_IN:
        queue.animations[bubble_id] = AnimationState.IDLE
        return Completion.SETTLED, None

    if animation == AnimationState.FADING_OUT:
        queue.bubbles = [b for b in queue.bubbles if b.id != bubble_id]
        queue.retiring = [b for b in queue.retiring if b.id != bubble_id]
        queue.animations.pop(bubble_id, None)
        logger.debug(f"Bubble {bubble_id} removed")
        return Completion.REMOVED, None

    # sliding_left
    bubble.slot = Slot.LEFT
    bubble.status = BubbleStatus.ACTIVE
    queue.animations[bubble_id] = AnimationState.IDLE

    # A partner still fading out no longer occupies a slot
    fading = [b for b in queue.bubbles if b.id != bubble_id and b.status == BubbleStatus.FADING]
    if fading:
        fading_ids = {b.id for b in fading}
        queue.bubbles = [b for b in queue.bubbles if b.id not in fading_ids]
        queue.retiring.extend(fading)

    created = None
    if queue.pending_segments:
        segment = queue.pending_segments.pop(0)
        created = spawn_bubble(queue, segment, bubble.segment_index + 1, Slot.RIGHT)
        if created is None:
            queue.pending_segments.insert(0, segment)

    queue.is_transitioning = False
    return Completion.SLID, created
