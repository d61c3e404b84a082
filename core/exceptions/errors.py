"""Error taxonomy shared by layout, signing and export."""
from __future__ import annotations


class DocSignError(Exception):
    """Base exception for the workbench."""


class ConfigurationError(DocSignError):
    """A required capability (metrics provider, writer, font) is missing."""


class LoadError(DocSignError):
    """Input is malformed or not a document; the session is left unchanged."""


class FontAcquisitionFailure(DocSignError):
    """The decorative font could not be fetched or parsed. Recovered locally."""


class ExportFailure(DocSignError):
    """Serialization or write failed; nothing was offered to the user."""


class ExportBusyError(ExportFailure):
    """An export for the same document is already in flight."""
