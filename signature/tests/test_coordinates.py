"""Canvas <-> document coordinate transform."""
from __future__ import annotations

import pytest

from signature.logic.coordinates import CanvasTransform
from signature.models.document_info import PageSize


def test_canvas_point_maps_to_document_point() -> None:
    t = CanvasTransform(scale=1.5, canvas_height=800)
    x, y = t.to_document(100, 200)
    assert x == pytest.approx(66.6667, abs=1e-3)
    assert y == pytest.approx(400.0)


def test_round_trip() -> None:
    t = CanvasTransform.for_page(PageSize(612, 792), 2.0)
    for cx, cy in [(0, 0), (10.5, 1583.2), (1224, 1584), (333.3, 17)]:
        back = t.to_canvas(*t.to_document(cx, cy))
        assert back == pytest.approx((cx, cy))


def test_canvas_height_follows_page_and_scale() -> None:
    t = CanvasTransform.for_page(PageSize(595.28, 841.89), 1.5)
    assert t.canvas_height == pytest.approx(841.89 * 1.5)
    # top-left of the canvas is the top-left of the page
    assert t.to_document(0, 0) == pytest.approx((0, 841.89))


@pytest.mark.parametrize("scale", [0, -1.0])
def test_non_positive_scale_is_rejected(scale: float) -> None:
    with pytest.raises(ValueError):
        CanvasTransform(scale=scale, canvas_height=100)
