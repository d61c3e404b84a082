# signature/logic/signing_session.py
from __future__ import annotations
import logging
from pathlib import Path
from typing import Callable, Optional

from core.config.config_service import OverlayConfig, config_service
from core.exceptions import LoadError
from layout.logic.metrics import GlyphMetrics, ReportlabMetrics
from ..models.document_info import LoadedDocument
from .annotation_overlay import AnnotationOverlay
from .document_loader import DocumentLoader
from .page_renderer import PageRenderer, PdfiumPageRenderer
from .render_scheduler import RenderScheduler

logger = logging.getLogger(__name__)

RendererFactory = Callable[[bytes], PageRenderer]


class SigningSession:
    """
    One open source document: its bytes, page viewports, annotation overlay,
    current page and page renderer. Opening another document replaces all of
    it; nothing is shared between documents.
    """

    def __init__(self, *, metrics: Optional[GlyphMetrics] = None,
                 settings: Optional[OverlayConfig] = None,
                 loader: Optional[DocumentLoader] = None,
                 renderer_factory: Optional[RendererFactory] = PdfiumPageRenderer) -> None:
        self._settings = settings or config_service.overlay
        self._metrics = metrics
        self._loader = loader or DocumentLoader()
        self._renderer_factory = renderer_factory

        self.source_name: Optional[str] = None
        self._data: Optional[bytes] = None
        self._document: Optional[LoadedDocument] = None
        self._overlay: Optional[AnnotationOverlay] = None
        self._renderer: Optional[PageRenderer] = None
        self._scheduler: Optional[RenderScheduler] = None

    # ------------------------------------------------------------------ #
    @property
    def is_open(self) -> bool:
        return self._document is not None

    @property
    def data(self) -> bytes:
        if self._data is None:
            raise LoadError("No document open")
        return self._data

    @property
    def document(self) -> LoadedDocument:
        if self._document is None:
            raise LoadError("No document open")
        return self._document

    @property
    def overlay(self) -> AnnotationOverlay:
        if self._overlay is None:
            raise LoadError("No document open")
        return self._overlay

    @property
    def scheduler(self) -> Optional[RenderScheduler]:
        return self._scheduler

    @property
    def page_index(self) -> int:
        return self.overlay.page_index

    @property
    def page_count(self) -> int:
        return self.document.page_count

    # ------------------------------------------------------------------ #
    def open(self, data: bytes, *, name: Optional[str] = None) -> LoadedDocument:
        """
        Load *data*. On LoadError the currently open document (if any) is
        left untouched.
        """
        document = self._loader.load(data)
        renderer = self._renderer_factory(data) if self._renderer_factory else None
        metrics = self._metrics or ReportlabMetrics(config_service.export.fallback_font)

        self.close()
        self._data = bytes(data)
        self._document = document
        self._overlay = AnnotationOverlay(document.viewports, metrics,
                                          scale=self._settings.render_scale,
                                          settings=self._settings)
        self._renderer = renderer
        self._scheduler = RenderScheduler(renderer) if renderer is not None else None
        self.source_name = name
        logger.info("Opened %s (%d pages)", name or "<memory>", document.page_count)
        return document

    def open_file(self, path: str | Path) -> LoadedDocument:
        p = Path(path)
        try:
            data = p.read_bytes()
        except OSError as e:
            raise LoadError(f"Cannot read {p}: {e}") from e
        return self.open(data, name=p.name)

    def close(self) -> None:
        if self._scheduler is not None:
            self._scheduler.cancel_all()
        close = getattr(self._renderer, "close", None)
        if callable(close):
            close()
        self._data = None
        self._document = None
        self._overlay = None
        self._renderer = None
        self._scheduler = None
        self.source_name = None

    # ------------------------------------------------------------------ #
    #  Navigation                                                         #
    # ------------------------------------------------------------------ #
    def goto(self, page_index: int) -> int:
        page_index = max(0, min(page_index, self.page_count - 1))
        if page_index != self.overlay.page_index:
            self.overlay.set_page(page_index)
        return page_index

    def next_page(self) -> int:
        return self.goto(self.page_index + 1)

    def previous_page(self) -> int:
        return self.goto(self.page_index - 1)

    def set_render_scale(self, scale: float) -> None:
        self.overlay.set_render_scale(scale)
