# signature/models/overlay_snapshot.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .annotation import AnnotationView
from .interaction_state import InteractionMode


@dataclass(frozen=True, slots=True)
class OverlaySnapshot:
    """
    Immutable picture of the overlay for one page, rebuilt after every
    mutation and handed to painters. Painters never read the live overlay.
    """
    revision: int
    page_index: int
    scale: float
    canvas_width: float
    canvas_height: float
    annotations: Tuple[AnnotationView, ...]
    selected_id: Optional[int]
    mode: InteractionMode
    pending_label: str

    @property
    def selected(self) -> Optional[AnnotationView]:
        for a in self.annotations:
            if a.id == self.selected_id:
                return a
        return None
