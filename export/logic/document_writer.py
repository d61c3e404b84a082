# export/logic/document_writer.py
"""
===============================================================================
PdfDocumentWriter – buffered drawing onto new or existing PDFs
-------------------------------------------------------------------------------
Implementation
    - New documents are drawn with reportlab (canvas per page).
    - Existing documents get one reportlab overlay per touched page, merged
      with pypdf (merge_page), like a watermark.
    - Draw calls are only recorded; nothing is rendered before save(), so a
      failing export never leaves a half-written document behind.
===============================================================================
"""
from __future__ import annotations
from dataclasses import dataclass
from io import BytesIO
from typing import Dict, List, Optional, Protocol, Tuple, Union

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PyPdfError
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.pdfgen import canvas

from core.exceptions import FontAcquisitionFailure, LoadError
from layout.models.page import BLACK, RGB

A4 = (595.28, 841.89)


class DocumentWriter(Protocol):
    @property
    def page_count(self) -> int: ...
    def create(self) -> None: ...
    def load(self, data: bytes) -> None: ...
    def add_page(self, size: Optional[Tuple[float, float]] = None) -> int: ...
    def register_font(self, name: str, data: bytes) -> str: ...
    def draw_text(self, page: int, text: str, x: float, y: float, size: float,
                  font: str, color: RGB = BLACK) -> None: ...
    def draw_line(self, page: int, x1: float, y1: float, x2: float, y2: float,
                  thickness: float = 1.0, color: RGB = BLACK) -> None: ...
    def save(self) -> bytes: ...


@dataclass(frozen=True)
class TextOp:
    text: str
    x: float
    y: float
    size: float
    font: str
    color: RGB


@dataclass(frozen=True)
class LineOp:
    x1: float
    y1: float
    x2: float
    y2: float
    thickness: float
    color: RGB


DrawOp = Union[TextOp, LineOp]


class PdfDocumentWriter:
    def __init__(self, default_page_size: Tuple[float, float] = A4) -> None:
        self._default_size = default_page_size
        self._source: Optional[bytes] = None
        self._sizes: List[Tuple[float, float]] = []
        self._origins: List[Tuple[float, float]] = []
        self._ops: Dict[int, List[DrawOp]] = {}
        self._ready = False

    # ------------------------------------------------------------------ #
    @property
    def page_count(self) -> int:
        return len(self._sizes)

    @property
    def is_existing(self) -> bool:
        return self._source is not None

    def page_size(self, page: int) -> Tuple[float, float]:
        return self._sizes[page]

    def operations(self, page: int) -> List[DrawOp]:
        return list(self._ops.get(page, ()))

    # ------------------------------------------------------------------ #
    def create(self) -> None:
        self._source = None
        self._sizes, self._origins, self._ops = [], [], {}
        self._ready = True

    def load(self, data: bytes) -> None:
        try:
            reader = PdfReader(BytesIO(data))
            sizes, origins = [], []
            for page in reader.pages:
                box = page.cropbox
                sizes.append((float(box.width), float(box.height)))
                origins.append((float(box.left), float(box.bottom)))
        except (PyPdfError, ValueError, KeyError, TypeError) as e:
            raise LoadError(f"Cannot load PDF for writing: {e}") from e
        if not sizes:
            raise LoadError("PDF has no pages")
        self._source = bytes(data)
        self._sizes, self._origins, self._ops = sizes, origins, {}
        self._ready = True

    def add_page(self, size: Optional[Tuple[float, float]] = None) -> int:
        self._require_ready()
        if self._source is not None:
            raise ValueError("Cannot add pages to a loaded document")
        self._sizes.append(tuple(size or self._default_size))  # type: ignore[arg-type]
        self._origins.append((0.0, 0.0))
        return len(self._sizes) - 1

    def register_font(self, name: str, data: bytes) -> str:
        try:
            pdfmetrics.registerFont(TTFont(name, BytesIO(data)))
        except (TTFError, ValueError, OSError) as e:
            raise FontAcquisitionFailure(f"Font '{name}' could not be embedded: {e}") from e
        return name

    def draw_text(self, page: int, text: str, x: float, y: float, size: float,
                  font: str, color: RGB = BLACK) -> None:
        self._check_page(page)
        self._ops.setdefault(page, []).append(TextOp(text, x, y, size, font, color))

    def draw_line(self, page: int, x1: float, y1: float, x2: float, y2: float,
                  thickness: float = 1.0, color: RGB = BLACK) -> None:
        self._check_page(page)
        self._ops.setdefault(page, []).append(LineOp(x1, y1, x2, y2, thickness, color))

    # ------------------------------------------------------------------ #
    def save(self) -> bytes:
        self._require_ready()
        if self._source is None:
            return self._save_new()
        return self._save_existing()

    def _save_new(self) -> bytes:
        if not self._sizes:
            raise ValueError("Document has no pages")
        buf = BytesIO()
        c = canvas.Canvas(buf, pagesize=self._sizes[0])
        for index, size in enumerate(self._sizes):
            c.setPageSize(size)
            _paint(c, self._ops.get(index, ()), (0.0, 0.0))
            c.showPage()
        c.save()
        return buf.getvalue()

    def _save_existing(self) -> bytes:
        reader = PdfReader(BytesIO(self._source))
        writer = PdfWriter()
        for index, page in enumerate(reader.pages):
            ops = self._ops.get(index)
            if ops:
                box = page.mediabox
                overlay = _make_overlay(float(box.right), float(box.top), ops, self._origins[index])
                page.merge_page(PdfReader(BytesIO(overlay)).pages[0])
            writer.add_page(page)
        out = BytesIO()
        writer.write(out)
        return out.getvalue()

    # ------------------------------------------------------------------ #
    def _require_ready(self) -> None:
        if not self._ready:
            raise ValueError("Call create() or load() first")

    def _check_page(self, page: int) -> None:
        self._require_ready()
        if not 0 <= page < len(self._sizes):
            raise IndexError(f"page {page} out of range 0..{len(self._sizes) - 1}")


def _make_overlay(width: float, height: float, ops: List[DrawOp], origin: Tuple[float, float]) -> bytes:
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=(width, height))
    _paint(c, ops, origin)
    c.showPage()
    c.save()
    return buf.getvalue()


def _paint(c: canvas.Canvas, ops, origin: Tuple[float, float]) -> None:
    ox, oy = origin
    for op in ops:
        if isinstance(op, TextOp):
            c.setFillColorRGB(*op.color)
            c.setFont(op.font, op.size)
            c.drawString(op.x + ox, op.y + oy, op.text)
        else:
            c.setStrokeColorRGB(*op.color)
            c.setLineWidth(op.thickness)
            c.line(op.x1 + ox, op.y1 + oy, op.x2 + ox, op.y2 + oy)
