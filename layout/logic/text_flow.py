# layout/logic/text_flow.py
from __future__ import annotations
from typing import List, Optional

from core.exceptions import ConfigurationError
from ..models.page import Line
from .metrics import GlyphMetrics


def require_metrics(metrics: Optional[GlyphMetrics]) -> GlyphMetrics:
    if metrics is None or not callable(getattr(metrics, "measure", None)):
        raise ConfigurationError("No glyph metrics provider configured")
    return metrics


def wrap(text: str, metrics: Optional[GlyphMetrics], font_size: float, max_width: float) -> List[Line]:
    """
    Greedy word wrap.

    Words are appended while "current + space + word" measures <= max_width.
    A single word wider than max_width gets a line of its own and is never split.
    """
    metrics = require_metrics(metrics)
    words = (text or "").split()
    if not words:
        return []

    lines: List[Line] = []
    current: List[str] = [words[0]]

    for word in words[1:]:
        candidate = " ".join(current) + " " + word
        if metrics.measure(candidate, font_size) <= max_width:
            current.append(word)
            continue
        lines.append(_make_line(current, metrics, font_size))
        current = [word]

    lines.append(_make_line(current, metrics, font_size))
    return lines


def _make_line(words: List[str], metrics: GlyphMetrics, font_size: float) -> Line:
    text = " ".join(words)
    return Line(words=tuple(words), width=metrics.measure(text, font_size))
