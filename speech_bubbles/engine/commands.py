"""
Inbound messages for the bubble engine.
The streaming layer and the renderer talk to the engine by handing it these
messages instead of calling into its internals.
"""

from dataclasses import dataclass
from typing import Optional, Union

from ..models.bubble import AnimationState


@dataclass(frozen=True)
class TextUpdate:
    """New visible text for an entity's reply."""
    entity_id: str
    visible_text: str
    is_streaming: bool = True
    full_text: Optional[str] = None


@dataclass(frozen=True)
class AnimationComplete:
    """The renderer finished playing an animation on a bubble."""
    entity_id: str
    bubble_id: str
    animation: AnimationState


@dataclass(frozen=True)
class ClearEntity:
    """The entity's turn ended."""
    entity_id: str


@dataclass(frozen=True)
class ClearAll:
    """The conversation was reset."""


Message = Union[TextUpdate, AnimationComplete, ClearEntity, ClearAll]
