"""
core/logging/log_setup.py
=========================

One-time configuration of the standard library logging tree from the
``[Logging]`` section of the configuration.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from core.config.config_service import LoggingConfig, config_service

_configured = False
_lock = threading.Lock()


def configure_logging(cfg: Optional[LoggingConfig] = None, *, force: bool = False) -> None:
    """Install a stream handler on the root logger (idempotent unless *force*)."""
    global _configured
    with _lock:
        if _configured and not force:
            return
        cfg = cfg or config_service.logging
        level = logging.getLevelName(cfg.level.upper())
        if not isinstance(level, int):
            level = logging.INFO
        logging.basicConfig(level=level, format=cfg.format, force=force)
        _configured = True
        logging.getLogger(__name__).debug("Logging configured at %s", logging.getLevelName(level))
