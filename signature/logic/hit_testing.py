# signature/logic/hit_testing.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from ..models.annotation import Annotation, Box


class HitRegion(str, Enum):
    DELETE = "delete"
    RESIZE = "resize"
    BODY = "body"


@dataclass(frozen=True)
class Hit:
    annotation: Annotation
    region: HitRegion


def delete_handle(box: Box, handle_size: float) -> Box:
    """Square centered on the top-right corner."""
    return Box.square(box.right, box.top, handle_size)


def resize_handle(box: Box, handle_size: float) -> Box:
    """Square centered on the bottom-right corner."""
    return Box.square(box.right, box.bottom, handle_size)


def classify(annotation: Annotation, x: float, y: float, *, handle_size: float) -> HitRegion:
    """Sub-region priority: delete handle > resize handle > body."""
    box = annotation.bounds()
    if delete_handle(box, handle_size).contains(x, y):
        return HitRegion.DELETE
    if resize_handle(box, handle_size).contains(x, y):
        return HitRegion.RESIZE
    return HitRegion.BODY


def hit_test(annotations: Iterable[Annotation], x: float, y: float, *,
             margin: float = 10.0, handle_size: float = 20.0) -> Optional[Hit]:
    """
    Newest annotation wins: candidates are ordered by id (creation order),
    newest first, and the first box (expanded by *margin*) containing the
    point is returned.
    """
    for ann in sorted(annotations, key=lambda a: a.id, reverse=True):
        if ann.bounds().expanded(margin).contains(x, y):
            return Hit(ann, classify(ann, x, y, handle_size=handle_size))
    return None
