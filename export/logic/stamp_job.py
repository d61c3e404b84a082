# export/logic/stamp_job.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from core.exceptions import LoadError
from signature.logic.signing_session import SigningSession
from signature.models.annotation import AnnotationView
from signature.models.document_info import LoadedDocument


@dataclass(frozen=True)
class StampJob:
    """
    Everything a signed export needs, copied from a session on the UI thread.
    Later edits or a newly opened document do not reach a running export.
    """
    document: LoadedDocument
    data: bytes
    source_name: Optional[str]
    scale: float
    annotations: Dict[int, Tuple[AnnotationView, ...]]

    @classmethod
    def from_session(cls, session: SigningSession) -> "StampJob":
        if not session.is_open:
            raise LoadError("No document open")
        overlay = session.overlay
        return cls(
            document=session.document,
            data=session.data,
            source_name=session.source_name,
            scale=overlay.scale,
            annotations=overlay.annotations_by_page(),
        )

    @property
    def annotation_count(self) -> int:
        return sum(len(v) for v in self.annotations.values())
