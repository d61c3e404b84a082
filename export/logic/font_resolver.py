# export/logic/font_resolver.py
from __future__ import annotations
import logging
from typing import Optional, Protocol

import requests

from core.exceptions import FontAcquisitionFailure
from .document_writer import DocumentWriter

logger = logging.getLogger(__name__)

SCRIPT_FONT_NAME = "Sacramento"


class FontFetcher(Protocol):
    def fetch(self, url: str) -> bytes: ...


class HttpFontFetcher:
    """Single GET with a timeout. No retries."""

    def __init__(self, timeout: float = 5.0, session: Optional[requests.Session] = None) -> None:
        self._timeout = timeout
        self._session = session

    def fetch(self, url: str) -> bytes:
        getter = self._session.get if self._session is not None else requests.get
        try:
            response = getter(url, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise FontAcquisitionFailure(f"Font fetch failed: {e}") from e
        if not response.content:
            raise FontAcquisitionFailure("Font fetch returned no data")
        return response.content


class FontResolver:
    """
    Picks the font used for stamped signatures: the decorative script font if
    it can be fetched and embedded, otherwise the built-in italic. Called once
    per export; a failure is logged and never propagated.
    """

    def __init__(self, fetcher: Optional[FontFetcher], url: str, *,
                 fallback: str = "Times-Italic", font_name: str = SCRIPT_FONT_NAME) -> None:
        self._fetcher = fetcher
        self._url = url
        self._fallback = fallback
        self._font_name = font_name

    @property
    def fallback(self) -> str:
        return self._fallback

    def resolve(self, writer: DocumentWriter) -> str:
        if self._fetcher is None or not self._url:
            return self._fallback
        try:
            data = self._fetcher.fetch(self._url)
            return writer.register_font(self._font_name, data)
        except FontAcquisitionFailure as e:
            logger.warning("Could not load script font, falling back to %s: %s", self._fallback, e)
            return self._fallback
