# layout/models/page.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Tuple, Union

RGB = Tuple[float, float, float]  # 0.0–1.0 per channel
BLACK: RGB = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class TextStyle:
    """Font name as known to the writer (reportlab standard font or registered TTF)."""
    font: str
    size: float
    color: RGB = BLACK


@dataclass(frozen=True)
class Line:
    """Words that fit on one line, with their measured width."""
    words: Tuple[str, ...]
    width: float

    @property
    def text(self) -> str:
        return " ".join(self.words)


@dataclass(frozen=True)
class PlacedLine:
    """A line positioned on a page; (x, y) is the baseline start in points, origin bottom-left."""
    text: str
    x: float
    y: float
    style: TextStyle
    width: float = 0.0


@dataclass(frozen=True)
class PlacedRule:
    """A straight stroke, e.g. a signature line."""
    x1: float
    y1: float
    x2: float
    y2: float
    thickness: float = 1.0
    color: RGB = BLACK


PageItem = Union[PlacedLine, PlacedRule]


@dataclass
class Page:
    index: int
    items: List[PageItem] = field(default_factory=list)
    remaining: float = 0.0

    @property
    def lines(self) -> List[PlacedLine]:
        return [it for it in self.items if isinstance(it, PlacedLine)]

    @property
    def rules(self) -> List[PlacedRule]:
        return [it for it in self.items if isinstance(it, PlacedRule)]
