# signature/logic/annotation_overlay.py
"""
AnnotationOverlay – per-document signature annotations and pointer handling
-------------------------------------------------------------------------------
State machine (one selected annotation at most):

    Idle      + press on empty canvas, label set   -> create, Selected
    Idle/Sel. + press on empty canvas              -> Idle (deselect)
    any       + press on annotation body           -> Selected (held)
    Selected  + move while held                    -> Dragging
    any       + press on resize handle             -> selected, Resizing
    any       + press on delete handle             -> removed
    Dragging/Resizing + release                    -> Selected

Every mutation publishes a fresh OverlaySnapshot to the subscribers.
No UI code here.
"""
from __future__ import annotations

import itertools
import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from core.config.config_service import OverlayConfig
from core.exceptions import ConfigurationError
from layout.logic.metrics import GlyphMetrics
from ..models.annotation import Annotation, AnnotationView
from ..models.document_info import PageSize
from ..models.interaction_state import InteractionMode, InteractionState
from ..models.overlay_snapshot import OverlaySnapshot
from .coordinates import CanvasTransform
from .hit_testing import HitRegion, hit_test

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[OverlaySnapshot], None]


class AnnotationOverlay:
    """Owns the page -> annotations map of exactly one open document."""

    def __init__(self, pages: Sequence[PageSize], metrics: Optional[GlyphMetrics], *,
                 scale: Optional[float] = None, settings: Optional[OverlayConfig] = None) -> None:
        if metrics is None:
            raise ConfigurationError("AnnotationOverlay requires a glyph metrics provider")
        if not pages:
            raise ValueError("document has no pages")
        self._pages: Tuple[PageSize, ...] = tuple(pages)
        self._metrics = metrics
        self._cfg = settings or OverlayConfig()
        self._scale = float(scale if scale is not None else self._cfg.render_scale)
        if self._scale <= 0:
            raise ValueError("render scale must be positive")

        self._by_page: Dict[int, List[Annotation]] = {}
        self._ids = itertools.count(1)
        self._page_index = 0
        self._pending_label = ""
        self._state = InteractionState()
        self._revision = 0
        self._listeners: List[SnapshotListener] = []

    # ------------------------------------------------------------------ #
    #  Properties                                                         #
    # ------------------------------------------------------------------ #
    @property
    def page_index(self) -> int:
        return self._page_index

    @property
    def page_count(self) -> int:
        return len(self._pages)

    @property
    def scale(self) -> float:
        return self._scale

    @property
    def mode(self) -> InteractionMode:
        return self._state.mode

    @property
    def selected_id(self) -> Optional[int]:
        return self._state.selected_id

    @property
    def pending_label(self) -> str:
        return self._pending_label

    @property
    def settings(self) -> OverlayConfig:
        return self._cfg

    def transform(self, page_index: Optional[int] = None) -> CanvasTransform:
        idx = self._page_index if page_index is None else page_index
        return CanvasTransform.for_page(self._pages[idx], self._scale)

    def canvas_size(self, page_index: Optional[int] = None) -> Tuple[float, float]:
        idx = self._page_index if page_index is None else page_index
        page = self._pages[idx]
        return page.width * self._scale, page.height * self._scale

    # ------------------------------------------------------------------ #
    #  Observers                                                          #
    # ------------------------------------------------------------------ #
    def subscribe(self, listener: SnapshotListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: SnapshotListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def snapshot(self) -> OverlaySnapshot:
        """Re-measure the current page and return an immutable picture of it."""
        current = self._page_annotations(self._page_index)
        for ann in current:
            self._measure(ann)
        cw, ch = self.canvas_size()
        return OverlaySnapshot(
            revision=self._revision,
            page_index=self._page_index,
            scale=self._scale,
            canvas_width=cw,
            canvas_height=ch,
            annotations=tuple(a.freeze() for a in current),
            selected_id=self._state.selected_id,
            mode=self._state.mode,
            pending_label=self._pending_label,
        )

    def _publish(self) -> None:
        self._revision += 1
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)

    # ------------------------------------------------------------------ #
    #  Queries                                                            #
    # ------------------------------------------------------------------ #
    def annotations(self, page_index: Optional[int] = None) -> Tuple[AnnotationView, ...]:
        idx = self._page_index if page_index is None else page_index
        return tuple(a.freeze() for a in self._by_page.get(idx, ()))

    def annotations_by_page(self) -> Dict[int, Tuple[AnnotationView, ...]]:
        return {idx: tuple(a.freeze() for a in anns)
                for idx, anns in sorted(self._by_page.items()) if anns}

    def __len__(self) -> int:
        return sum(len(v) for v in self._by_page.values())

    # ------------------------------------------------------------------ #
    #  Commands                                                           #
    # ------------------------------------------------------------------ #
    def set_pending_label(self, text: str) -> None:
        self._pending_label = text or ""
        self._publish()

    def set_page(self, page_index: int) -> None:
        """Switch pages; selection is cleared, edits stay."""
        if not 0 <= page_index < len(self._pages):
            raise IndexError(f"page {page_index} out of range")
        self._page_index = page_index
        self._state.reset()
        self._publish()

    def set_render_scale(self, scale: float) -> None:
        """
        Re-express every annotation for a new render scale. Document
        coordinates and the exported size (size / scale) stay unchanged.
        """
        if scale <= 0:
            raise ValueError("render scale must be positive")
        if scale == self._scale:
            return
        ratio = scale / self._scale
        self._scale = float(scale)
        for idx, anns in self._by_page.items():
            t = self.transform(idx)
            for ann in anns:
                ann.size *= ratio
                cx, cy = t.to_canvas(ann.doc_x, ann.doc_y)
                ann.canvas_x, ann.canvas_y = cx, cy
                self._measure(ann)
        self._end_gesture()
        self._publish()

    def add(self, canvas_x: float, canvas_y: float, text: Optional[str] = None,
            *, size: Optional[float] = None) -> AnnotationView:
        """Place a new annotation on the current page and select it."""
        label = self._pending_label if text is None else text
        if not label:
            raise ValueError("annotation text must not be empty")
        doc_x, doc_y = self.transform().to_document(canvas_x, canvas_y)
        ann = Annotation(
            id=next(self._ids), text=label, page_index=self._page_index,
            canvas_x=canvas_x, canvas_y=canvas_y, doc_x=doc_x, doc_y=doc_y,
            size=float(size if size is not None else self._cfg.default_size),
        )
        self._measure(ann)
        self._by_page.setdefault(self._page_index, []).append(ann)
        self._state.selected_id = ann.id
        self._state.mode = InteractionMode.SELECTED
        self._state.pressed = False
        logger.debug("Placed annotation %d on page %d at doc (%.2f, %.2f)",
                      ann.id, ann.page_index, doc_x, doc_y)
        self._publish()
        return ann.freeze()

    def remove(self, annotation_id: int) -> bool:
        for idx, anns in self._by_page.items():
            for ann in anns:
                if ann.id == annotation_id:
                    anns.remove(ann)
                    if self._state.selected_id == annotation_id:
                        self._state.reset()
                    logger.debug("Removed annotation %d from page %d", annotation_id, idx)
                    self._publish()
                    return True
        return False

    def clear(self) -> None:
        self._by_page.clear()
        self._state.reset()
        self._publish()

    # ------------------------------------------------------------------ #
    #  Pointer events (canvas coordinates)                                #
    # ------------------------------------------------------------------ #
    def press(self, x: float, y: float) -> InteractionMode:
        hit = hit_test(self._page_annotations(self._page_index), x, y,
                       margin=self._cfg.hit_margin, handle_size=self._cfg.handle_size)

        if hit is not None:
            ann = hit.annotation
            if hit.region == HitRegion.DELETE:
                self.remove(ann.id)
                return self._state.mode
            self._state.selected_id = ann.id
            if hit.region == HitRegion.RESIZE:
                self._state.mode = InteractionMode.RESIZING
                self._state.pressed = True
            else:
                self._state.mode = InteractionMode.SELECTED
                self._state.pressed = True
                self._state.drag_offset = (x - ann.canvas_x, y - ann.canvas_y)
            self._publish()
            return self._state.mode

        if self._state.selected_id is not None:
            self._state.reset()
            self._publish()
            return self._state.mode

        if self._pending_label:
            self.add(x, y)
            return self._state.mode

        self._state.reset()
        return self._state.mode

    def move(self, x: float, y: float) -> None:
        ann = self._selected()
        if ann is None or not self._state.pressed:
            return
        mode = self._state.mode
        if mode in (InteractionMode.SELECTED, InteractionMode.DRAGGING):
            self._state.mode = InteractionMode.DRAGGING
            dx, dy = self._state.drag_offset
            ann.move_to(x - dx, y - dy, self.transform(ann.page_index))
            self._publish()
        elif mode == InteractionMode.RESIZING:
            ann.size = max(self._cfg.min_size, (x - ann.canvas_x) / 2.0)
            self._measure(ann)
            self._publish()

    def release(self) -> None:
        if self._end_gesture():
            self._publish()

    def leave(self) -> None:
        """Pointer left the canvas: same as releasing it."""
        self.release()

    # ------------------------------------------------------------------ #
    #  Internals                                                          #
    # ------------------------------------------------------------------ #
    def _page_annotations(self, page_index: int) -> List[Annotation]:
        return self._by_page.get(page_index, [])

    def _selected(self) -> Optional[Annotation]:
        sid = self._state.selected_id
        if sid is None:
            return None
        for ann in self._page_annotations(self._page_index):
            if ann.id == sid:
                return ann
        return None

    def _end_gesture(self) -> bool:
        changed = self._state.pressed or self._state.mode in (
            InteractionMode.DRAGGING, InteractionMode.RESIZING)
        self._state.pressed = False
        if self._state.mode in (InteractionMode.DRAGGING, InteractionMode.RESIZING):
            self._state.mode = InteractionMode.SELECTED
        return changed

    def _measure(self, ann: Annotation) -> None:
        ann.width = self._metrics.measure(ann.text, ann.size)
        ann.height = ann.size
