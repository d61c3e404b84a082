from .errors import (
    DocSignError,
    ConfigurationError,
    LoadError,
    FontAcquisitionFailure,
    ExportFailure,
    ExportBusyError,
)

__all__ = [
    "DocSignError",
    "ConfigurationError",
    "LoadError",
    "FontAcquisitionFailure",
    "ExportFailure",
    "ExportBusyError",
]
