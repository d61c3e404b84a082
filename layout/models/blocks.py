# layout/models/blocks.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from .page import RGB, BLACK, TextStyle


class Alignment(str, Enum):
    LEFT = "left"
    CENTER = "center"


@dataclass(frozen=True)
class TextBlock:
    """
    Wrapped text (title, paragraph, heading or key/value line).

    advance: vertical distance consumed per emitted line (None = layout line height)
    gap_after: extra space after the last line of the block
    """
    text: str
    style: TextStyle
    indent: float = 0.0
    advance: Optional[float] = None
    gap_after: float = 0.0
    align: Alignment = Alignment.LEFT


@dataclass(frozen=True)
class Spacer:
    amount: float


@dataclass(frozen=True)
class SignatureFooter:
    """
    Two signature rules (left/right) with captions underneath.

    reserved_height is the budget that must remain on the page, otherwise the
    footer moves to a new page.
    """
    labels: Tuple[str, str] = ("Employer Signature", "Employee Signature")
    label_style: TextStyle = TextStyle("Times-Roman", 10)
    reserved_height: float = 100.0
    rule_length: float = 200.0
    rule_drop: float = 40.0
    label_drop: float = 15.0
    thickness: float = 1.0
    color: RGB = BLACK


ContentBlock = Union[TextBlock, Spacer, SignatureFooter]
