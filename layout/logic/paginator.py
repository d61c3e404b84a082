# layout/logic/paginator.py
"""
Top-down pagination of content blocks.

The cursor starts at ``height - margin`` and moves down. Before a line is
emitted the remaining budget is checked: if ``cursor - advance`` would drop
below the bottom margin, the page is closed and a fresh one started. Section
titles are not kept together with their body text.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..models.blocks import Alignment, ContentBlock, SignatureFooter, Spacer, TextBlock
from ..models.page import Page, PlacedLine, PlacedRule
from .metrics import GlyphMetrics
from .text_flow import require_metrics, wrap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageGeometry:
    """Page size and uniform margin, in points."""
    width: float = 595.28
    height: float = 841.89
    margin: float = 50.0

    @property
    def top(self) -> float:
        return self.height - self.margin

    @property
    def bottom(self) -> float:
        return self.margin

    @property
    def content_width(self) -> float:
        return self.width - 2 * self.margin

    @property
    def content_height(self) -> float:
        return self.height - 2 * self.margin


class _Cursor:
    def __init__(self, geometry: PageGeometry) -> None:
        self._geo = geometry
        self.pages: List[Page] = []
        self.y = 0.0
        self._new_page()

    @property
    def page(self) -> Page:
        return self.pages[-1]

    def _new_page(self) -> None:
        if self.pages:
            self._finalize()
        self.pages.append(Page(index=len(self.pages)))
        self.y = self._geo.top

    def _finalize(self) -> None:
        self.page.remaining = max(0.0, self.y - self._geo.bottom)

    def ensure(self, needed: float) -> None:
        if self.y - needed < self._geo.bottom:
            self._new_page()

    def finish(self) -> List[Page]:
        self._finalize()
        return self.pages


def _metrics_for(metrics: GlyphMetrics, font: str) -> GlyphMetrics:
    with_font = getattr(metrics, "with_font", None)
    return with_font(font) if callable(with_font) else metrics


def paginate(blocks: Iterable[ContentBlock], geometry: PageGeometry,
             metrics: Optional[GlyphMetrics], *, line_height: float = 14.0) -> List[Page]:
    """Lay out *blocks* into pages. Deterministic for identical input."""
    metrics = require_metrics(metrics)
    cur = _Cursor(geometry)

    for block in blocks:
        if isinstance(block, Spacer):
            cur.y -= block.amount

        elif isinstance(block, TextBlock):
            m = _metrics_for(metrics, block.style.font)
            advance = block.advance if block.advance is not None else line_height
            budget = geometry.content_width - block.indent
            for line in wrap(block.text, m, block.style.size, budget):
                cur.ensure(advance)
                if block.align == Alignment.CENTER:
                    x = (geometry.width - line.width) / 2.0
                else:
                    x = geometry.margin + block.indent
                cur.page.items.append(PlacedLine(line.text, x, cur.y, block.style, line.width))
                cur.y -= advance
            cur.y -= block.gap_after

        elif isinstance(block, SignatureFooter):
            _place_footer(cur, block, geometry)

        else:
            raise TypeError(f"Unsupported content block: {type(block).__name__}")

    pages = cur.finish()
    logger.debug("Paginated into %d page(s)", len(pages))
    return pages


def _place_footer(cur: _Cursor, footer: SignatureFooter, geometry: PageGeometry) -> None:
    cur.ensure(footer.reserved_height)
    rule_y = cur.y - footer.rule_drop
    label_y = rule_y - footer.label_drop
    left_x = geometry.margin
    right_x = geometry.width - geometry.margin - footer.rule_length

    for x, label in zip((left_x, right_x), footer.labels):
        cur.page.items.append(
            PlacedRule(x, rule_y, x + footer.rule_length, rule_y, footer.thickness, footer.color)
        )
        cur.page.items.append(PlacedLine(label, x, label_y, footer.label_style))
    cur.y = label_y
