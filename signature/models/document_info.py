# signature/models/document_info.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class PageSize:
    """Page viewport in PDF points (crop box), scale 1."""
    width: float
    height: float
    origin_x: float = 0.0
    origin_y: float = 0.0


@dataclass(frozen=True)
class LoadedDocument:
    page_count: int
    viewports: Tuple[PageSize, ...]

    def viewport(self, page_index: int) -> PageSize:
        if not 0 <= page_index < self.page_count:
            raise IndexError(f"page {page_index} out of range 0..{self.page_count - 1}")
        return self.viewports[page_index]
