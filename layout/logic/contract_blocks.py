# layout/logic/contract_blocks.py
from __future__ import annotations
from typing import List, Optional

from core.config.config_service import LayoutConfig
from ..models.blocks import Alignment, ContentBlock, SignatureFooter, Spacer, TextBlock
from ..models.document_spec import DocumentSpec
from ..models.page import TextStyle
from .paginator import PageGeometry

_SUMMARY_COLOR = (0.1, 0.1, 0.3)
_BODY_COLOR = (0.2, 0.2, 0.2)

_TITLE_ADVANCE = 40.0
_INTRO_GAP = 20.0
_SUMMARY_INDENT = 20.0
_SUMMARY_GAP = 30.0
_FOOTER_GAP = 20.0


def geometry_from_config(cfg: LayoutConfig) -> PageGeometry:
    return PageGeometry(width=cfg.page_width, height=cfg.page_height, margin=cfg.margin)


def intro_text(spec: DocumentSpec) -> str:
    h = spec.header
    return (
        f'This Employment Agreement ("Agreement") is entered into as of the Effective Date '
        f'between {h.company_name} ("Company") and {h.employee_name} ("Employee").'
    )


def build_contract_blocks(spec: DocumentSpec, cfg: Optional[LayoutConfig] = None) -> List[ContentBlock]:
    """
    Boilerplate header, key/value summary, one heading + body per section and
    the two-party signature footer.
    """
    cfg = cfg or LayoutConfig()
    body = TextStyle(cfg.regular_font, cfg.body_size)
    bold_body = TextStyle(cfg.bold_font, cfg.body_size, _SUMMARY_COLOR)

    blocks: List[ContentBlock] = [
        TextBlock(spec.title, TextStyle(cfg.bold_font, cfg.title_size),
                  advance=_TITLE_ADVANCE, align=Alignment.CENTER),
        TextBlock(intro_text(spec), body, gap_after=_INTRO_GAP),
    ]

    for key, value in spec.summary():
        blocks.append(TextBlock(f"{key}: {value}", bold_body, indent=_SUMMARY_INDENT))
    blocks.append(Spacer(_SUMMARY_GAP))

    heading = TextStyle(cfg.bold_font, cfg.heading_size)
    section_body = TextStyle(cfg.regular_font, cfg.body_size, _BODY_COLOR)
    for section in spec.sections:
        blocks.append(TextBlock(section.title, heading, advance=cfg.line_height + cfg.heading_gap))
        blocks.append(TextBlock(section.body, section_body, gap_after=cfg.section_gap))

    blocks.append(Spacer(_FOOTER_GAP))
    blocks.append(SignatureFooter(label_style=TextStyle(cfg.regular_font, 10),
                                  reserved_height=cfg.footer_height))
    return blocks
