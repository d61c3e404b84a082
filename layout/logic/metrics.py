# layout/logic/metrics.py
"""
Glyph metrics used by wrapping, pagination and annotation bounding boxes.

ReportLab knows the widths of the 14 standard PDF fonts and of every TTF
registered through pdfmetrics, so measuring with it matches what the writer
will actually draw.
"""
from __future__ import annotations
from typing import Protocol

from reportlab.pdfbase import pdfmetrics

from core.exceptions import ConfigurationError


class GlyphMetrics(Protocol):
    def measure(self, text: str, size: float) -> float: ...


class ReportlabMetrics:
    """Width of *text* at *size* points in one reportlab font."""

    def __init__(self, font_name: str = "Times-Roman") -> None:
        try:
            pdfmetrics.getFont(font_name)
        except KeyError as e:
            raise ConfigurationError(f"Font '{font_name}' is not known to the metrics provider") from e
        self.font_name = font_name

    def measure(self, text: str, size: float) -> float:
        return float(pdfmetrics.stringWidth(text, self.font_name, size))

    def with_font(self, font_name: str) -> "ReportlabMetrics":
        if font_name == self.font_name:
            return self
        return ReportlabMetrics(font_name)

    def __repr__(self) -> str:
        return f"ReportlabMetrics({self.font_name!r})"
