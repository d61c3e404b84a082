"""
Render cancellation: a superseded render must never be delivered, even if
it finishes after the newer one.
"""
from __future__ import annotations

import threading
import unittest

from PIL import Image

from signature.logic.render_scheduler import RenderScheduler


class GatedRenderer:
    """Page 0 blocks until released; other pages render immediately."""

    def __init__(self) -> None:
        self.gate = threading.Event()
        self.started = threading.Event()

    def render(self, page_index: int, scale: float) -> Image.Image:
        if page_index == 0:
            self.started.set()
            self.gate.wait(5)
        return Image.new("RGB", (int(10 * scale), int(10 * scale)), "white")


class FailingRenderer:
    def render(self, page_index: int, scale: float) -> Image.Image:
        raise RuntimeError("broken page")


class TestRenderScheduler(unittest.TestCase):
    def test_newer_request_cancels_older(self) -> None:
        renderer = GatedRenderer()
        scheduler = RenderScheduler(renderer)
        delivered = []

        def on_done(page, image):
            delivered.append(page)

        old = scheduler.request("page", 0, 1.0, on_done)
        self.assertTrue(renderer.started.wait(5))
        new = scheduler.request("page", 1, 1.0, on_done)
        self.assertTrue(new.wait(5))
        renderer.gate.set()
        self.assertTrue(old.wait(5))

        self.assertTrue(old.cancelled)
        self.assertIsNone(old.image)
        self.assertEqual(delivered, [1])
        self.assertIs(scheduler.current("page"), new)
        self.assertEqual(new.image.size, (10, 10))

    def test_surfaces_are_independent(self) -> None:
        renderer = GatedRenderer()
        renderer.gate.set()
        scheduler = RenderScheduler(renderer)
        a = scheduler.request("left", 1, 2.0)
        b = scheduler.request("right", 2, 2.0)
        self.assertTrue(a.wait(5) and b.wait(5))
        self.assertFalse(a.cancelled or b.cancelled)

    def test_error_goes_to_error_callback(self) -> None:
        errors = []
        task = RenderScheduler(FailingRenderer()).request(
            "page", 0, 1.0, on_error=lambda page, e: errors.append((page, str(e))))
        self.assertTrue(task.wait(5))
        self.assertEqual(errors, [(0, "broken page")])
        self.assertIsInstance(task.error, RuntimeError)

    def test_cancel_all(self) -> None:
        renderer = GatedRenderer()
        scheduler = RenderScheduler(renderer)
        delivered = []
        task = scheduler.request("page", 0, 1.0, lambda p, i: delivered.append(p))
        renderer.started.wait(5)
        scheduler.cancel_all()
        renderer.gate.set()
        task.wait(5)
        self.assertEqual(delivered, [])
        self.assertIsNone(scheduler.current("page"))


if __name__ == "__main__":
    unittest.main()
