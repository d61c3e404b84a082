# signature/models/annotation.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

from ..logic.coordinates import CanvasTransform


@dataclass(frozen=True)
class Box:
    """Axis-aligned canvas rectangle (top-left origin, y grows downward)."""
    left: float
    top: float
    right: float
    bottom: float

    def expanded(self, margin: float) -> "Box":
        return Box(self.left - margin, self.top - margin, self.right + margin, self.bottom + margin)

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    @classmethod
    def square(cls, cx: float, cy: float, side: float) -> "Box":
        half = side / 2.0
        return cls(cx - half, cy - half, cx + half, cy + half)


@dataclass
class Annotation:
    """
    A movable text mark ("signature") on one page.

    The canvas anchor is the left end of the text baseline in canvas pixels
    (origin top-left); doc_x/doc_y is the same point in PDF points (origin
    bottom-left). Both are always written together via move_to().
    size is the on-screen font size in canvas pixels.
    """
    id: int
    text: str
    page_index: int
    canvas_x: float
    canvas_y: float
    doc_x: float
    doc_y: float
    size: float
    width: float = 0.0
    height: float = 0.0

    def move_to(self, canvas_x: float, canvas_y: float, transform: CanvasTransform) -> None:
        doc_x, doc_y = transform.to_document(canvas_x, canvas_y)
        self.canvas_x, self.canvas_y = canvas_x, canvas_y
        self.doc_x, self.doc_y = doc_x, doc_y

    def bounds(self) -> Box:
        return Box(self.canvas_x, self.canvas_y - self.height,
                   self.canvas_x + self.width, self.canvas_y)

    def freeze(self) -> "AnnotationView":
        return AnnotationView(
            id=self.id, text=self.text, page_index=self.page_index,
            canvas_x=self.canvas_x, canvas_y=self.canvas_y,
            doc_x=self.doc_x, doc_y=self.doc_y,
            size=self.size, width=self.width, height=self.height,
        )


@dataclass(frozen=True)
class AnnotationView:
    """Read-only copy of an Annotation handed to painters and exporters."""
    id: int
    text: str
    page_index: int
    canvas_x: float
    canvas_y: float
    doc_x: float
    doc_y: float
    size: float
    width: float
    height: float

    @property
    def doc_point(self) -> Tuple[float, float]:
        return self.doc_x, self.doc_y

    def bounds(self) -> Box:
        return Box(self.canvas_x, self.canvas_y - self.height,
                   self.canvas_x + self.width, self.canvas_y)
