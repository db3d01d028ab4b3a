"""
Bubble Model - Displayed bubbles and the per-entity queue that owns them.
Holds the enums for slots, statuses and animation states, and the queue state struct.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .segment import BubbleSegment


class Slot(str, Enum):
    """Position role of a bubble inside the two-bubble window."""
    LEFT = "left"
    RIGHT = "right"


class BubbleStatus(str, Enum):
    """Logical status of a displayed bubble."""
    ACTIVE = "active"
    READING = "reading"
    TRANSITIONING = "transitioning"
    FADING = "fading"


class AnimationState(str, Enum):
    """Animation the renderer should be playing for a bubble."""
    IDLE = "idle"
    SLIDING_IN = "sliding_in"
    SLIDING_LEFT = "sliding_left"
    FADING_OUT = "fading_out"


MAX_BUBBLES = 2


@dataclass
class BubbleState:
    """A bubble currently shown for an entity."""
    id: str
    text: str
    slot: Slot
    status: BubbleStatus = BubbleStatus.ACTIVE
    segment_index: int = 0
    word_count: int = 0

    # Offset of the bubble's first character in the entity's reply text
    source_start: int = 0


@dataclass
class EntityQueue:
    """Everything the engine knows about one speaking entity."""
    entity_id: str
    turn: int
    bubbles: List[BubbleState] = field(default_factory=list)
    last_processed_text: str = ""

    # Trimmed reply text the bubbles and backlog are cut from
    source_text: str = ""
    pending_segments: List[BubbleSegment] = field(default_factory=list)
    is_transitioning: bool = False

    # Bubbles still fading out after their partner finished sliding left
    retiring: List[BubbleState] = field(default_factory=list)

    # Animation state per bubble id, live and retiring alike
    animations: Dict[str, AnimationState] = field(default_factory=dict)

    # Handle of the armed "promote next" timer, if any
    timer: Optional[Any] = None

    def bubble_id_for(self, segment_index: int) -> str:
        """Stable bubble id for a segment of this turn."""
        return f"{self.entity_id}-{self.turn}-{segment_index}"

    def find_bubble(self, bubble_id: str) -> Optional[BubbleState]:
        """Find a live or retiring bubble by id."""
        for bubble in self.bubbles + self.retiring:
            if bubble.id == bubble_id:
                return bubble
        return None

    def active_bubble(self) -> Optional[BubbleState]:
        """The newest bubble, i.e. the one showing the furthest segment."""
        if not self.bubbles:
            return None
        return max(self.bubbles, key=lambda b: b.segment_index)

    def bubble_in_slot(self, slot: Slot) -> Optional[BubbleState]:
        for bubble in self.bubbles:
            if bubble.slot == slot:
                return bubble
        return None

    def animation_of(self, bubble_id: str) -> AnimationState:
        return self.animations.get(bubble_id, AnimationState.IDLE)

    def is_animating(self) -> bool:
        return any(state != AnimationState.IDLE for state in self.animations.values())
