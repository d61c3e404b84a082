"""
export/tests/test_export_service.py

End-to-end export of generated contracts and stamped signatures, failure
translation and the one-export-per-document guard.
"""
from __future__ import annotations

import unittest
from io import BytesIO
from pathlib import Path
from tempfile import TemporaryDirectory

from pypdf import PdfReader

from core.exceptions import ConfigurationError, ExportBusyError, ExportFailure, LoadError
from export.logic.document_writer import PdfDocumentWriter, TextOp
from export.logic.export_service import ExportService
from export.logic.font_resolver import FontResolver
from export.logic.save_target import DirectorySaveTarget
from layout.models.document_spec import DocumentSpec
from layout.models.sample_contract import SAMPLE_CONTRACT
from signature.logic.signing_session import SigningSession
from signature.tests.pdf_samples import make_pdf, with_cropbox


class HalfEmMetrics:
    def measure(self, text: str, size: float) -> float:
        return len(text) * size * 0.5


class MemoryTarget:
    def __init__(self) -> None:
        self.saved = {}

    def offer(self, data: bytes, filename: str) -> str:
        self.saved[filename] = data
        return f"memory://{filename}"


class BrokenTarget:
    def offer(self, data: bytes, filename: str) -> str:
        raise OSError("disk full")


class KeepingWriterFactory:
    """Hands out real writers and remembers the last one."""

    def __init__(self) -> None:
        self.last = None

    def __call__(self) -> PdfDocumentWriter:
        self.last = PdfDocumentWriter()
        return self.last


class TestExportService(unittest.TestCase):
    def setUp(self) -> None:
        self.target = MemoryTarget()
        self.writers = KeepingWriterFactory()
        self.service = ExportService(
            save_target=self.target,
            writer_factory=self.writers,
            font_resolver=FontResolver(None, "", fallback="Times-Italic"),
        )
        self.spec = DocumentSpec.from_dict(SAMPLE_CONTRACT)
        self.session = SigningSession(metrics=HalfEmMetrics(), renderer_factory=None)

    # ------------------------------------------------------------------ #
    #  Generate                                                           #
    # ------------------------------------------------------------------ #
    def test_generate_contract(self) -> None:
        location = self.service.generate_contract(self.spec)
        self.assertEqual(location, "memory://Jane_Smith_Contract.pdf")
        reader = PdfReader(BytesIO(self.target.saved["Jane_Smith_Contract.pdf"]))
        pages = self.service.layout_contract(self.spec)
        self.assertEqual(len(reader.pages), len(pages))
        self.assertIn("EMPLOYMENT AGREEMENT", reader.pages[0].extract_text())
        self.assertIn("Employee Signature", reader.pages[-1].extract_text())

    def test_generate_writes_to_directory(self) -> None:
        with TemporaryDirectory() as tmp:
            service = ExportService(save_target=DirectorySaveTarget(tmp),
                                    font_resolver=FontResolver(None, ""))
            location = service.generate_contract(self.spec)
            self.assertEqual(Path(location), Path(tmp) / "Jane_Smith_Contract.pdf")
            self.assertTrue(Path(location).read_bytes().startswith(b"%PDF-"))

    def test_missing_writer_is_a_configuration_error(self) -> None:
        service = ExportService(save_target=self.target, writer_factory=None,
                                font_resolver=FontResolver(None, ""))
        with self.assertRaises(ConfigurationError):
            service.generate_contract(self.spec)
        self.assertEqual(self.target.saved, {})

    # ------------------------------------------------------------------ #
    #  Stamp                                                              #
    # ------------------------------------------------------------------ #
    def test_stamp_uses_document_point_and_normalized_size(self) -> None:
        self.session.open(make_pdf(pages=2), name="offer.pdf")
        overlay = self.session.overlay
        ann = overlay.add(100, 200, "Jane Doe")
        overlay.set_page(1)
        overlay.add(50, 50, "JD", size=60)

        location = self.service.stamp_signatures(self.session)
        self.assertEqual(location, "memory://offer_signed.pdf")

        writer = self.writers.last
        op = writer.operations(0)[0]
        self.assertIsInstance(op, TextOp)
        self.assertEqual((op.x, op.y), (ann.doc_x, ann.doc_y))
        self.assertAlmostEqual(op.size, 40 / 1.5)
        self.assertEqual(op.font, "Times-Italic")
        self.assertAlmostEqual(writer.operations(1)[0].size, 60 / 1.5)

        out = PdfReader(BytesIO(self.target.saved["offer_signed.pdf"]))
        self.assertEqual(len(out.pages), 2)
        self.assertIn("Jane Doe", out.pages[0].extract_text())

    def test_stamp_after_scale_change_exports_same_size(self) -> None:
        self.session.open(make_pdf(), name="offer.pdf")
        ann = self.session.overlay.add(100, 200, "Jane")
        self.session.set_render_scale(2.0)
        self.service.stamp_signatures(self.session)
        op = self.writers.last.operations(0)[0]
        self.assertAlmostEqual(op.size, 40 / 1.5)
        self.assertAlmostEqual(op.x, ann.doc_x)
        self.assertAlmostEqual(op.y, ann.doc_y)

    def test_stamp_onto_cropped_page(self) -> None:
        self.session.open(with_cropbox(make_pdf(), [10, 20, 410, 620]), name="cropped.pdf")
        self.session.overlay.add(30, 30, "Signed")
        self.service.stamp_signatures(self.session)
        out = PdfReader(BytesIO(self.target.saved["cropped_signed.pdf"]))
        self.assertIn("Signed", out.pages[0].extract_text())

    def test_stamp_job_is_unaffected_by_later_session_changes(self) -> None:
        self.session.open(make_pdf(pages=1, text="First"), name="first.pdf")
        self.session.overlay.add(100, 200, "Jane")
        job = self.service.prepare_stamp(self.session)
        self.session.overlay.add(300, 300, "Late")
        self.session.open(make_pdf(pages=2, text="Second"), name="second.pdf")

        self.assertEqual(self.service.stamp_signatures(job), "memory://first_signed.pdf")
        out = PdfReader(BytesIO(self.target.saved["first_signed.pdf"]))
        self.assertEqual(len(out.pages), 1)
        text = out.pages[0].extract_text()
        self.assertIn("First 1", text)
        self.assertIn("Jane", text)
        self.assertNotIn("Late", text)
        self.assertEqual(job.annotation_count, 1)

    def test_stamp_without_document(self) -> None:
        with self.assertRaises(LoadError):
            self.service.stamp_signatures(self.session)

    def test_failed_save_keeps_annotations(self) -> None:
        service = ExportService(save_target=BrokenTarget(), writer_factory=PdfDocumentWriter,
                                font_resolver=FontResolver(None, ""))
        self.session.open(make_pdf(), name="offer.pdf")
        self.session.overlay.add(100, 200, "Jane")
        with self.assertLogs("export.logic.export_service", level="ERROR"):
            with self.assertRaises(ExportFailure):
                service.stamp_signatures(self.session)
        self.assertEqual(len(self.session.overlay), 1)
        self.assertFalse(service.is_exporting(self.session.document))

    # ------------------------------------------------------------------ #
    #  Single flight                                                      #
    # ------------------------------------------------------------------ #
    def test_second_export_of_same_document_is_rejected(self) -> None:
        outer = self

        class ReentrantTarget(MemoryTarget):
            def __init__(self) -> None:
                super().__init__()
                self.inner_error = None

            def offer(self, data: bytes, filename: str) -> str:
                outer.assertTrue(service.is_exporting(outer.spec))
                try:
                    service.generate_contract(outer.spec)
                except ExportBusyError as e:
                    self.inner_error = e
                return super().offer(data, filename)

        target = ReentrantTarget()
        service = ExportService(save_target=target, font_resolver=FontResolver(None, ""))
        service.generate_contract(self.spec)
        self.assertIsInstance(target.inner_error, ExportBusyError)
        self.assertEqual(list(target.saved), ["Jane_Smith_Contract.pdf"])
        self.assertFalse(service.is_exporting(self.spec))

    def test_second_stamp_of_same_document_is_rejected(self) -> None:
        session = self.session
        errors = []

        class ReentrantTarget(MemoryTarget):
            def offer(self, data: bytes, filename: str) -> str:
                try:
                    service.stamp_signatures(session)
                except ExportBusyError as e:
                    errors.append(e)
                return super().offer(data, filename)

        service = ExportService(save_target=ReentrantTarget(), font_resolver=FontResolver(None, ""))
        session.open(make_pdf(), name="offer.pdf")
        session.overlay.add(100, 200, "Jane")
        service.stamp_signatures(service.prepare_stamp(session))
        self.assertEqual(len(errors), 1)
        self.assertFalse(service.is_exporting(session.document))

    def test_background_submit_wraps_unexpected_errors(self) -> None:
        results, errors = [], []

        def job() -> str:
            raise RuntimeError("unpack requires a buffer of 4 bytes")

        with self.assertLogs("export.logic.export_service", level="ERROR"):
            t = self.service.submit(job, on_success=results.append, on_error=errors.append)
            t.join(10)
        self.assertEqual(results, [])
        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], ExportFailure)
        self.assertIsInstance(errors[0].__cause__, RuntimeError)

    def test_background_submit_reports_failure(self) -> None:
        service = ExportService(save_target=BrokenTarget(), font_resolver=FontResolver(None, ""))
        results, errors = [], []
        with self.assertLogs("export.logic.export_service", level="ERROR"):
            t = service.submit(lambda: service.generate_contract(self.spec),
                               on_success=results.append, on_error=errors.append)
            t.join(10)
        self.assertEqual(results, [])
        self.assertIsInstance(errors[0], ExportFailure)


if __name__ == "__main__":
    unittest.main()
