# signature/models/interaction_state.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class InteractionMode(str, Enum):
    IDLE = "idle"
    SELECTED = "selected"
    DRAGGING = "dragging"
    RESIZING = "resizing"


@dataclass
class InteractionState:
    """Transient pointer state of one overlay. Reset on page change."""
    selected_id: Optional[int] = None
    mode: InteractionMode = InteractionMode.IDLE
    drag_offset: Tuple[float, float] = (0.0, 0.0)
    pressed: bool = False  # pointer held since a press on an annotation body

    def reset(self) -> None:
        self.selected_id = None
        self.mode = InteractionMode.IDLE
        self.drag_offset = (0.0, 0.0)
        self.pressed = False
