"""
signature/tests/test_annotation_overlay.py

Pointer state machine, hit precedence, snapshots and scale handling of the
annotation overlay. Canvas height is 800 px at scale 1.5 throughout.
"""
from __future__ import annotations

import unittest

from core.config.config_service import OverlayConfig
from core.exceptions import ConfigurationError
from signature.logic.annotation_overlay import AnnotationOverlay
from signature.models.document_info import PageSize
from signature.models.interaction_state import InteractionMode


class HalfEmMetrics:
    def measure(self, text: str, size: float) -> float:
        return len(text) * size * 0.5


PAGE = PageSize(width=400.0, height=800.0 / 1.5)


class TestAnnotationOverlay(unittest.TestCase):
    def setUp(self) -> None:
        self.overlay = AnnotationOverlay([PAGE, PAGE], HalfEmMetrics(), scale=1.5,
                                         settings=OverlayConfig())
        self.snapshots = []
        self.overlay.subscribe(self.snapshots.append)

    def _place(self, x: float = 100, y: float = 200, text: str = "Jane"):
        # "Jane" at size 40 -> 80 x 40 px box spanning (100,160)-(180,200)
        self.overlay.set_pending_label(text)
        self.overlay.press(x, y)
        self.overlay.release()
        return self.overlay.annotations()[-1]

    # ------------------------------------------------------------------ #
    def test_press_on_empty_canvas_with_label_creates_selected_annotation(self) -> None:
        ann = self._place()
        self.assertEqual(self.overlay.mode, InteractionMode.SELECTED)
        self.assertEqual(self.overlay.selected_id, ann.id)
        self.assertAlmostEqual(ann.doc_x, 66.6667, places=3)
        self.assertAlmostEqual(ann.doc_y, 400.0)
        self.assertEqual(ann.size, 40)
        self.assertEqual((ann.width, ann.height), (80, 40))

    def test_press_on_empty_canvas_without_label_stays_idle(self) -> None:
        self.assertEqual(self.overlay.press(50, 50), InteractionMode.IDLE)
        self.assertEqual(len(self.overlay), 0)

    def test_press_on_empty_canvas_deselects_before_creating(self) -> None:
        self._place()
        self.assertEqual(self.overlay.press(350, 500), InteractionMode.IDLE)
        self.assertIsNone(self.overlay.selected_id)
        self.assertEqual(len(self.overlay), 1)
        # next press creates
        self.overlay.press(350, 500)
        self.assertEqual(len(self.overlay), 2)

    def test_delete_handle_removes_selected_annotation(self) -> None:
        self._place()
        self.overlay.press(185, 155)
        self.assertEqual(len(self.overlay), 0)
        self.assertEqual(self.overlay.mode, InteractionMode.IDLE)
        self.assertIsNone(self.overlay.selected_id)

    def test_resize_handle_works_on_unselected_annotation(self) -> None:
        ann = self._place()
        self.overlay.press(350, 500)  # deselect
        self.assertEqual(self.overlay.press(180, 200), InteractionMode.RESIZING)
        self.assertEqual(self.overlay.selected_id, ann.id)
        self.overlay.move(260, 260)
        resized = self.overlay.annotations()[0]
        self.assertEqual(self.overlay.mode, InteractionMode.RESIZING)
        self.assertEqual((resized.canvas_x, resized.canvas_y), (100, 200))
        self.assertEqual(resized.size, 80)

    def test_delete_handle_works_on_unselected_annotation(self) -> None:
        self._place()
        self.overlay.press(350, 500)  # deselect
        self.overlay.press(185, 155)
        self.assertEqual(len(self.overlay), 0)
        self.assertEqual(self.overlay.mode, InteractionMode.IDLE)

    def test_resize_respects_minimum(self) -> None:
        self._place()
        self.assertEqual(self.overlay.press(180, 200), InteractionMode.RESIZING)
        self.overlay.move(110, 200)
        self.assertEqual(self.overlay.annotations()[0].size, 20)
        self.overlay.move(300, 200)
        ann = self.overlay.annotations()[0]
        self.assertEqual(ann.size, 100)
        self.assertEqual(ann.width, 200)
        self.overlay.release()
        self.assertEqual(self.overlay.mode, InteractionMode.SELECTED)

    def test_drag_updates_canvas_and_document_point_together(self) -> None:
        self._place()
        self.overlay.press(120, 180)
        self.overlay.move(220, 280)
        self.assertEqual(self.overlay.mode, InteractionMode.DRAGGING)
        ann = self.overlay.annotations()[0]
        self.assertEqual((ann.canvas_x, ann.canvas_y), (200, 300))
        self.assertAlmostEqual(ann.doc_x, 200 / 1.5)
        self.assertAlmostEqual(ann.doc_y, 500 / 1.5)
        self.overlay.leave()
        self.assertEqual(self.overlay.mode, InteractionMode.SELECTED)

    def test_move_without_press_does_nothing(self) -> None:
        ann = self._place()
        self.overlay.move(300, 300)
        self.assertEqual(self.overlay.annotations()[0], ann)

    def test_margin_extends_hit_area(self) -> None:
        ann = self._place()
        self.overlay.press(350, 500)
        self.overlay.press(95, 205)
        self.assertEqual(self.overlay.selected_id, ann.id)

    def test_newest_annotation_wins_on_overlap(self) -> None:
        first = self.overlay.add(100, 200, "Jane")
        second = self.overlay.add(110, 205, "Jane")
        self.overlay.press(350, 500)
        self.overlay.press(130, 185)
        self.assertNotEqual(first.id, second.id)
        self.assertEqual(self.overlay.selected_id, second.id)

    def test_page_switch_clears_selection_but_keeps_annotations(self) -> None:
        self._place()
        self.overlay.set_page(1)
        self.assertIsNone(self.overlay.selected_id)
        self.assertEqual(self.overlay.mode, InteractionMode.IDLE)
        self.assertEqual(self.overlay.annotations(), ())
        self.assertEqual(len(self.overlay.annotations(0)), 1)
        self.assertEqual(list(self.overlay.annotations_by_page()), [0])

    def test_set_page_out_of_range(self) -> None:
        with self.assertRaises(IndexError):
            self.overlay.set_page(2)

    def test_every_mutation_publishes_a_newer_snapshot(self) -> None:
        self._place()
        revisions = [s.revision for s in self.snapshots]
        self.assertEqual(revisions, sorted(set(revisions)))
        last = self.snapshots[-1]
        self.assertEqual(len(last.annotations), 1)
        self.assertEqual(last.selected.id, last.selected_id)
        self.assertEqual(last.pending_label, "Jane")
        self.assertAlmostEqual(last.canvas_height, 800.0)

    def test_unsubscribed_listener_gets_nothing(self) -> None:
        self.overlay.unsubscribe(self.snapshots.append)
        self.overlay.add(10, 10, "x")
        self.assertEqual(self.snapshots, [])

    def test_scale_change_keeps_document_point_and_exported_size(self) -> None:
        ann = self._place()
        self.overlay.set_render_scale(3.0)
        moved = self.overlay.annotations()[0]
        self.assertAlmostEqual(moved.doc_x, ann.doc_x)
        self.assertAlmostEqual(moved.doc_y, ann.doc_y)
        self.assertAlmostEqual(moved.size / 3.0, ann.size / 1.5)
        self.assertAlmostEqual(moved.canvas_x, 200)
        self.assertAlmostEqual(moved.canvas_y, 400)

    def test_clear_removes_everything(self) -> None:
        self._place()
        self.overlay.set_page(1)
        self._place()
        self.overlay.clear()
        self.assertEqual(len(self.overlay), 0)
        self.assertEqual(self.overlay.annotations_by_page(), {})

    def test_empty_text_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            self.overlay.add(10, 10, "")

    def test_metrics_are_required(self) -> None:
        with self.assertRaises(ConfigurationError):
            AnnotationOverlay([PAGE], None)


if __name__ == "__main__":
    unittest.main()
