# signature/logic/page_renderer.py
"""
Rasterization of one PDF page at a given scale (pypdfium2 -> Pillow image).
"""
from __future__ import annotations
import threading
from typing import Protocol

import pypdfium2 as pdfium
from PIL import Image

from core.exceptions import LoadError


class PageRenderer(Protocol):
    def render(self, page_index: int, scale: float) -> Image.Image: ...


class PdfiumPageRenderer:
    """Renders pages of an in-memory PDF. pdfium is not thread safe, hence the lock."""

    def __init__(self, data: bytes) -> None:
        try:
            self._pdf = pdfium.PdfDocument(data)
        except pdfium.PdfiumError as e:
            raise LoadError(f"Cannot open PDF for rendering: {e}") from e
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._pdf)

    def render(self, page_index: int, scale: float) -> Image.Image:
        with self._lock:
            page = self._pdf[page_index]
            try:
                bitmap = page.render(scale=scale)
                return bitmap.to_pil()
            finally:
                page.close()

    def close(self) -> None:
        with self._lock:
            self._pdf.close()
