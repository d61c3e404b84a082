# signature/logic/document_loader.py
from __future__ import annotations
import logging
from io import BytesIO

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from core.exceptions import LoadError
from ..models.document_info import LoadedDocument, PageSize

logger = logging.getLogger(__name__)

_PDF_MAGIC = b"%PDF-"


class DocumentLoader:
    """Reads page count and per-page viewports (crop box, points) from PDF bytes."""

    def load(self, data: bytes) -> LoadedDocument:
        if not data:
            raise LoadError("Empty input")
        # the header may be preceded by a little garbage; pdf readers accept up to 1 KiB
        if _PDF_MAGIC not in bytes(data[:1024]):
            raise LoadError("Input is not a PDF document")

        try:
            reader = PdfReader(BytesIO(data))
            viewports = []
            for page in reader.pages:
                box = page.cropbox
                viewports.append(PageSize(
                    width=float(box.width),
                    height=float(box.height),
                    origin_x=float(box.left),
                    origin_y=float(box.bottom),
                ))
        except (PyPdfError, ValueError, KeyError, TypeError) as e:
            raise LoadError(f"Malformed PDF: {e}") from e

        if not viewports:
            raise LoadError("PDF has no pages")

        logger.info("Loaded PDF with %d page(s)", len(viewports))
        return LoadedDocument(page_count=len(viewports), viewports=tuple(viewports))
