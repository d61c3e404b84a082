# export/logic/save_target.py
from __future__ import annotations
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class SaveTarget(Protocol):
    """Receives finished document bytes; returns where they went."""
    def offer(self, data: bytes, filename: str) -> str: ...


class DirectorySaveTarget:
    """Writes into a directory. The file appears complete or not at all."""

    def __init__(self, directory: str | Path) -> None:
        self._dir = Path(directory).expanduser()

    @property
    def directory(self) -> Path:
        return self._dir

    def offer(self, data: bytes, filename: str) -> str:
        self._dir.mkdir(parents=True, exist_ok=True)
        target = self._dir / Path(filename).name
        fd, tmp = tempfile.mkstemp(prefix=".partial_", suffix=".pdf", dir=self._dir)
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp, target)
        except OSError:
            Path(tmp).unlink(missing_ok=True)
            raise
        logger.info("Saved %s (%d bytes)", target, len(data))
        return str(target)
