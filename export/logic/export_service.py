# export/logic/export_service.py
"""
===============================================================================
ExportService – contract generation and signature stamping
-------------------------------------------------------------------------------
Two paths share one document writer:

    generate_contract(spec)     paginate the contract, one draw call per line
    stamp_signatures(session)   draw every annotation at its document point
                                with size = on-screen size / render scale

Both end with writer.save() and SaveTarget.offer(). Exports are
all-or-nothing and at most one export per document runs at a time.
===============================================================================
"""
from __future__ import annotations
import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional, Set, Union

from pypdf.errors import PyPdfError

from core.config.config_service import ExportConfig, LayoutConfig, config_service
from core.exceptions import ConfigurationError, ExportBusyError, ExportFailure, LoadError
from layout.logic.contract_blocks import build_contract_blocks, geometry_from_config
from layout.logic.metrics import GlyphMetrics, ReportlabMetrics
from layout.logic.paginator import paginate
from layout.models.document_spec import DocumentSpec
from layout.models.page import Page, PlacedLine
from signature.logic.signing_session import SigningSession
from .document_writer import DocumentWriter, PdfDocumentWriter
from .font_resolver import FontResolver, HttpFontFetcher
from .naming_strategy import ContractNameStrategy, DefaultSuffixStrategy, NamingContext, NamingStrategy
from .save_target import DirectorySaveTarget, SaveTarget
from .stamp_job import StampJob

logger = logging.getLogger(__name__)

WriterFactory = Callable[[], DocumentWriter]


class ExportService:
    def __init__(self, *, save_target: Optional[SaveTarget] = None,
                 writer_factory: WriterFactory = PdfDocumentWriter,
                 font_resolver: Optional[FontResolver] = None,
                 metrics: Optional[GlyphMetrics] = None,
                 layout: Optional[LayoutConfig] = None,
                 export: Optional[ExportConfig] = None,
                 contract_naming: Optional[NamingStrategy] = None,
                 signed_naming: Optional[NamingStrategy] = None) -> None:
        self._layout = layout or config_service.layout
        self._export = export or config_service.export
        self._save_target = save_target or DirectorySaveTarget(self._export.output_dir)
        self._writer_factory = writer_factory
        self._fonts = font_resolver or FontResolver(
            HttpFontFetcher(timeout=self._export.font_timeout),
            self._export.font_url,
            fallback=self._export.fallback_font,
        )
        self._metrics = metrics if metrics is not None else ReportlabMetrics(self._layout.regular_font)
        self._contract_naming = contract_naming or ContractNameStrategy()
        self._signed_naming = signed_naming or DefaultSuffixStrategy()

        self._lock = threading.Lock()
        self._in_flight: Set[int] = set()

    # ------------------------------------------------------------------ #
    #  Single flight per document                                        #
    # ------------------------------------------------------------------ #
    @contextmanager
    def _single_flight(self, document: object) -> Iterator[None]:
        key = id(document)
        with self._lock:
            if key in self._in_flight:
                raise ExportBusyError("An export of this document is already running")
            self._in_flight.add(key)
        try:
            yield
        finally:
            with self._lock:
                self._in_flight.discard(key)

    def is_exporting(self, document: object) -> bool:
        with self._lock:
            return id(document) in self._in_flight

    # ------------------------------------------------------------------ #
    #  Generate contract                                                  #
    # ------------------------------------------------------------------ #
    def layout_contract(self, spec: DocumentSpec) -> List[Page]:
        if self._metrics is None:
            raise ConfigurationError("No glyph metrics provider configured")
        blocks = build_contract_blocks(spec, self._layout)
        return paginate(blocks, geometry_from_config(self._layout), self._metrics,
                        line_height=self._layout.line_height)

    def render_contract(self, spec: DocumentSpec) -> bytes:
        writer = self._new_writer()
        pages = self.layout_contract(spec)
        writer.create()
        size = (self._layout.page_width, self._layout.page_height)
        for page in pages:
            index = writer.add_page(size)
            for item in page.items:
                if isinstance(item, PlacedLine):
                    writer.draw_text(index, item.text, item.x, item.y, item.style.size,
                                     item.style.font, item.style.color)
                else:
                    writer.draw_line(index, item.x1, item.y1, item.x2, item.y2,
                                     item.thickness, item.color)
        return writer.save()

    def generate_contract(self, spec: DocumentSpec) -> str:
        """Render the contract and offer it. Returns the saved location."""
        with self._single_flight(spec):
            filename = self._contract_naming.propose_name(
                NamingContext(subject=spec.header.employee_name))
            location = self._guarded("contract", lambda: self._save_target.offer(
                self.render_contract(spec), filename))
        logger.info("Contract for %s exported to %s", spec.header.employee_name, location)
        return location

    # ------------------------------------------------------------------ #
    #  Stamp onto existing                                                #
    # ------------------------------------------------------------------ #
    def prepare_stamp(self, session: SigningSession) -> StampJob:
        """Snapshot *session* for export. Call on the thread that owns the session."""
        return StampJob.from_session(session)

    def render_signed(self, job: StampJob) -> bytes:
        scale = job.scale
        writer = self._new_writer()
        writer.load(job.data)
        font = self._fonts.resolve(writer)

        for page_index, annotations in job.annotations.items():
            if not 0 <= page_index < writer.page_count:
                logger.warning("Skipping annotations for missing page %d", page_index)
                continue
            for ann in annotations:
                writer.draw_text(page_index, ann.text, ann.doc_x, ann.doc_y,
                                 ann.size / scale, font)
        return writer.save()

    def stamp_signatures(self, source: Union[SigningSession, StampJob]) -> str:
        """
        Stamp all annotations and offer the result. A session is snapshotted
        first; background callers pass a StampJob taken on the UI thread.
        """
        job = source if isinstance(source, StampJob) else self.prepare_stamp(source)
        with self._single_flight(job.document):
            filename = self._signed_naming.propose_name(
                NamingContext(source_name=job.source_name))
            location = self._guarded("signed document", lambda: self._save_target.offer(
                self.render_signed(job), filename))
        logger.info("Signed document exported to %s (%d annotation(s))",
                    location, job.annotation_count)
        return location

    # ------------------------------------------------------------------ #
    #  Background helper                                                  #
    # ------------------------------------------------------------------ #
    def submit(self, job: Callable[[], str], *, on_success: Callable[[str], None],
               on_error: Callable[[Exception], None]) -> threading.Thread:
        """Run an export in a worker thread; exactly one of the callbacks fires."""
        def worker() -> None:
            try:
                result = job()
            except (ExportFailure, ConfigurationError, LoadError) as e:
                on_error(e)
                return
            except Exception as e:  # untranslated library error
                logger.exception("Export job failed")
                failure = ExportFailure(f"Export failed: {e}")
                failure.__cause__ = e
                on_error(failure)
                return
            on_success(result)

        t = threading.Thread(target=worker, name="export", daemon=True)
        t.start()
        return t

    # ------------------------------------------------------------------ #
    def _new_writer(self) -> DocumentWriter:
        writer = self._writer_factory() if self._writer_factory else None
        if writer is None:
            raise ConfigurationError("No document writer configured")
        return writer

    @staticmethod
    def _guarded(what: str, fn: Callable[[], str]) -> str:
        try:
            return fn()
        except (ExportFailure, ConfigurationError):
            raise
        except (OSError, ValueError, KeyError, IndexError, PyPdfError, LoadError) as e:
            logger.exception("Export of %s failed", what)
            raise ExportFailure(f"Export of {what} failed: {e}") from e
