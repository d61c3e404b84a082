from __future__ import annotations
import os
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol, Optional


@dataclass(frozen=True)
class NamingContext:
    source_name: Optional[str] = None
    subject: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)


class NamingStrategy(Protocol):
    def strategy_id(self) -> str: ...
    def propose_name(self, ctx: NamingContext) -> str: ...


def _slug(text: str) -> str:
    return re.sub(r"\s+", "_", text.strip())


class DefaultSuffixStrategy:
    """Default: file.pdf -> file_signed.pdf (unnamed input -> signed_<timestamp>.pdf)"""
    def strategy_id(self) -> str:
        return "default_suffix"

    def propose_name(self, ctx: NamingContext) -> str:
        if not ctx.source_name:
            return f"signed_{ctx.timestamp:%Y%m%d_%H%M%S}.pdf"
        root, ext = os.path.splitext(os.path.basename(ctx.source_name))
        if ext.lower() != ".pdf":
            ext = ".pdf"
        return f"{root}_signed{ext}"


class ContractNameStrategy:
    """Jane Smith -> Jane_Smith_Contract.pdf"""
    def strategy_id(self) -> str:
        return "contract"

    def propose_name(self, ctx: NamingContext) -> str:
        subject = _slug(ctx.subject or "") or "Document"
        return f"{subject}_Contract.pdf"
