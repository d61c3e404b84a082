"""Small PDFs built on the fly for tests."""
from __future__ import annotations

from io import BytesIO
from typing import Optional, Sequence, Tuple

from pypdf import PdfReader, PdfWriter
from pypdf.generic import RectangleObject
from reportlab.pdfgen import canvas


def make_pdf(pages: int = 1, size: Tuple[float, float] = (595.28, 841.89),
             text: str = "Page") -> bytes:
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=size)
    for i in range(pages):
        c.setFont("Helvetica", 12)
        c.drawString(72, size[1] - 72, f"{text} {i + 1}")
        c.showPage()
    c.save()
    return buf.getvalue()


def with_cropbox(data: bytes, box: Sequence[float], page: Optional[int] = 0) -> bytes:
    reader = PdfReader(BytesIO(data))
    writer = PdfWriter()
    for i, p in enumerate(reader.pages):
        if page is None or i == page:
            p.cropbox = RectangleObject(list(box))
        writer.add_page(p)
    out = BytesIO()
    writer.write(out)
    return out.getvalue()
