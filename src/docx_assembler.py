"""Assemble styled paragraphs and write them out as a DOCX document.

Unlike the PDF target there is no manual pagination here: the title,
headings and body paragraphs are emitted in order and Word reflows
them.  Every node is classified on its own, so an Arabic paragraph in
an otherwise English document still gets RTL direction and an Arabic
font.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Inches, Pt, Twips

from bidi_sanitizer import sanitize
from export_request import ExportFailure
from markdown_ast import DocumentNode, Heading, Paragraph
from script_classifier import Direction, classify
from typography import DOCX_BODY_SIZE, DOCX_TITLE_SIZE, docx_heading_size

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════
# Spacing constants (twips)
# ═══════════════════════════════════════════

PAGE_MARGIN = Inches(1)

TITLE_SPACE_AFTER = 400
HEADING_SPACE_BEFORE = 400
HEADING_SPACE_AFTER = 200
BODY_SPACE_BEFORE = 200
BODY_SPACE_AFTER = 200

TITLE_STYLE = "Title"
BODY_STYLE = "Normal"


class Alignment(str, Enum):
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class StyledParagraph:
    text: str
    heading_level: int | None
    alignment: Alignment
    direction: Direction
    font_family: str
    font_size: int  # half-points
    bold: bool
    is_title: bool = False

    @property
    def is_rtl(self) -> bool:
        return self.direction is Direction.RTL

    @property
    def style_name(self) -> str:
        if self.is_title:
            return TITLE_STYLE
        if self.heading_level is not None:
            return f"Heading {self.heading_level}"
        return BODY_STYLE


# ═══════════════════════════════════════════
# Assembly
# ═══════════════════════════════════════════

def _styled(text: str, *, heading_level: int | None, size: int, bold: bool,
            is_title: bool = False) -> StyledParagraph:
    script = classify(text)
    return StyledParagraph(
        text=sanitize(text, script.direction),
        heading_level=heading_level,
        alignment=Alignment.RIGHT if script.is_rtl else Alignment.LEFT,
        direction=script.direction,
        font_family=script.font_family,
        font_size=size,
        bold=bold,
        is_title=is_title,
    )


def assemble(nodes: Iterable[DocumentNode], title: str) -> list[StyledParagraph]:
    """Turn the title and AST nodes into an ordered list of styled paragraphs."""
    paragraphs = [_styled(title, heading_level=None, size=DOCX_TITLE_SIZE, bold=True, is_title=True)]

    for node in nodes:
        if isinstance(node, Heading):
            paragraphs.append(_styled(
                node.text,
                heading_level=node.depth,
                size=docx_heading_size(node.depth),
                bold=True,
            ))
        elif isinstance(node, Paragraph):
            paragraphs.append(_styled(node.text, heading_level=None, size=DOCX_BODY_SIZE, bold=False))

    return paragraphs


# ═══════════════════════════════════════════
# RTL helpers
# ═══════════════════════════════════════════

# Schema order of w:pPr / w:rPr children; new elements must respect it
_PPR_ORDER = (
    "w:pStyle", "w:keepNext", "w:keepLines", "w:pageBreakBefore", "w:framePr",
    "w:widowControl", "w:numPr", "w:suppressLineNumbers", "w:pBdr", "w:shd",
    "w:tabs", "w:suppressAutoHyphens", "w:kinsoku", "w:wordWrap",
    "w:overflowPunct", "w:topLinePunct", "w:autoSpaceDE", "w:autoSpaceDN",
    "w:bidi", "w:adjustRightInd", "w:snapToGrid", "w:spacing", "w:ind",
    "w:contextualSpacing", "w:mirrorIndents", "w:suppressOverlap", "w:jc",
    "w:textDirection", "w:textAlignment", "w:textboxTightWrap",
    "w:outlineLvl", "w:divId", "w:cnfStyle", "w:rPr", "w:sectPr", "w:pPrChange",
)
_RPR_ORDER = (
    "w:rStyle", "w:rFonts", "w:b", "w:bCs", "w:i", "w:iCs", "w:caps",
    "w:smallCaps", "w:strike", "w:dstrike", "w:outline", "w:shadow",
    "w:emboss", "w:imprint", "w:noProof", "w:snapToGrid", "w:vanish",
    "w:webHidden", "w:color", "w:spacing", "w:w", "w:kern", "w:position",
    "w:sz", "w:szCs", "w:highlight", "w:u", "w:effect", "w:bdr", "w:shd",
    "w:fitText", "w:vertAlign", "w:rtl", "w:cs", "w:em", "w:lang",
    "w:eastAsianLayout", "w:specVanish", "w:oMath",
)


def _set_child(parent, tag: str, order: tuple[str, ...], val: str = "1") -> None:
    """Set ``<tag w:val=val>`` on *parent*, inserting it in schema order."""
    elem = parent.find(qn(tag))
    if elem is None:
        elem = OxmlElement(tag)
        successors = order[order.index(tag) + 1:]
        parent.insert_element_before(elem, *successors)
    elem.set(qn("w:val"), val)


def _set_paragraph_rtl(p) -> None:
    """Mark a paragraph as right-to-left at the XML level."""
    _set_child(p._p.get_or_add_pPr(), "w:bidi", _PPR_ORDER)


def _set_run_rtl(run, sp: StyledParagraph) -> None:
    """Mark a run as right-to-left and carry font, size and weight to complex script."""
    rPr = run._r.get_or_add_rPr()
    rPr.get_or_add_rFonts().set(qn("w:cs"), sp.font_family)
    if sp.bold:
        _set_child(rPr, "w:bCs", _RPR_ORDER)
    _set_child(rPr, "w:szCs", _RPR_ORDER, str(sp.font_size))
    _set_child(rPr, "w:rtl", _RPR_ORDER)


# ═══════════════════════════════════════════
# DOCX writer
# ═══════════════════════════════════════════

def configure_margins(doc: Document) -> None:
    """Apply 1-inch margins on every side."""
    for section in doc.sections:
        section.top_margin = PAGE_MARGIN
        section.bottom_margin = PAGE_MARGIN
        section.left_margin = PAGE_MARGIN
        section.right_margin = PAGE_MARGIN


def _apply_spacing(p, sp: StyledParagraph) -> None:
    fmt = p.paragraph_format
    if sp.is_title:
        fmt.space_after = Twips(TITLE_SPACE_AFTER)
    elif sp.heading_level is not None:
        fmt.space_before = Twips(HEADING_SPACE_BEFORE)
        fmt.space_after = Twips(HEADING_SPACE_AFTER)
    else:
        fmt.space_before = Twips(BODY_SPACE_BEFORE)
        fmt.space_after = Twips(BODY_SPACE_AFTER)


def insert_styled_paragraph(doc: Document, sp: StyledParagraph) -> None:
    """Append one styled paragraph (single run) to *doc*."""
    p = doc.add_paragraph(style=sp.style_name)
    p.alignment = WD_ALIGN_PARAGRAPH.RIGHT if sp.alignment is Alignment.RIGHT else WD_ALIGN_PARAGRAPH.LEFT
    _apply_spacing(p, sp)

    run = p.add_run(sp.text)
    run.font.name = sp.font_family
    run.font.size = Pt(sp.font_size / 2)
    run.bold = sp.bold

    if sp.is_rtl:
        _set_paragraph_rtl(p)
        _set_run_rtl(run, sp)


def build_docx(paragraphs: Iterable[StyledParagraph]) -> bytes:
    """Write *paragraphs* into a fresh DOCX document and return its bytes."""
    try:
        doc = Document()
        configure_margins(doc)
        count = 0
        for sp in paragraphs:
            insert_styled_paragraph(doc, sp)
            count += 1

        buf = io.BytesIO()
        doc.save(buf)
    except Exception as e:
        raise ExportFailure(f"DOCX encoding failed: {e}") from e

    logger.info("DOCX document: %d paragraph(s)", count)
    return buf.getvalue()


def render_docx(nodes: list[DocumentNode], title: str) -> bytes:
    """Assemble *nodes* under *title* and encode the result as DOCX."""
    return build_docx(assemble(nodes, title))
