# signature/logic/coordinates.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

from ..models.document_info import PageSize


@dataclass(frozen=True)
class CanvasTransform:
    """
    Canvas (pixels, origin top-left, y down) <-> document (points, origin
    bottom-left, y up) for one rendered page.

        doc_x = canvas_x / scale
        doc_y = (canvas_height - canvas_y) / scale
    """
    scale: float
    canvas_height: float

    def __post_init__(self) -> None:
        if self.scale <= 0:
            raise ValueError("render scale must be positive")

    @classmethod
    def for_page(cls, page: PageSize, scale: float) -> "CanvasTransform":
        return cls(scale=scale, canvas_height=page.height * scale)

    def to_document(self, canvas_x: float, canvas_y: float) -> Tuple[float, float]:
        return canvas_x / self.scale, (self.canvas_height - canvas_y) / self.scale

    def to_canvas(self, doc_x: float, doc_y: float) -> Tuple[float, float]:
        return doc_x * self.scale, self.canvas_height - doc_y * self.scale
