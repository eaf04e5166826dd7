"""Lay out title, headings and paragraphs onto fixed-size PDF pages.

The engine works in millimetres on an A4 portrait page with y growing
downward from the top edge.  It produces a ``PageLayout``: every line
of text with its page, position, font and alignment.  Nothing here
draws; ``pdf_renderer`` turns the layout into a PDF.

Line wrapping is delegated to a ``wrap`` callable supplied by the
rendering backend, so measurement always matches the fonts that will
actually be drawn.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable

from bidi_sanitizer import sanitize
from markdown_ast import DocumentNode, Heading, Paragraph
from script_classifier import ScriptInfo, classify
from typography import PDF_BODY_SIZE, PDF_TITLE_SIZE, pdf_heading_size

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════
# Page geometry (mm)
# ═══════════════════════════════════════════

PAGE_WIDTH = 210.0
PAGE_HEIGHT = 297.0
PAGE_MARGIN = 20.0

TITLE_Y = 20.0
TITLE_GAP = 20.0
TITLE_LINE_HEIGHT = 10.0
HEADING_ADVANCE = 10.0
LINE_HEIGHT = 7.0
PARAGRAPH_SPACING = 5.0

ALIGN_LEFT = "left"
ALIGN_RIGHT = "right"

# (text, font_family, bold, size_pt, max_width_mm) -> lines
WrapFunc = Callable[[str, str, bool, float, float], list]


# ═══════════════════════════════════════════
# Layout records
# ═══════════════════════════════════════════

@dataclass(frozen=True)
class PlacedLine:
    page_index: int
    x: float
    y: float
    text: str
    font_family: str
    bold: bool
    size: float
    align: str


@dataclass
class PageLayout:
    page_width: float = PAGE_WIDTH
    page_height: float = PAGE_HEIGHT
    margin: float = PAGE_MARGIN
    page_count: int = 1
    lines: list[PlacedLine] = field(default_factory=list)

    def lines_on_page(self, page_index: int) -> list[PlacedLine]:
        return [ln for ln in self.lines if ln.page_index == page_index]


@dataclass
class LayoutCursor:
    """Writing position of one pagination run; never shared."""

    page_width: float = PAGE_WIDTH
    page_height: float = PAGE_HEIGHT
    margin: float = PAGE_MARGIN
    page_index: int = 0
    y_position: float = PAGE_MARGIN

    @property
    def bottom(self) -> float:
        return self.page_height - self.margin

    @property
    def text_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def at_page_top(self) -> bool:
        return self.y_position <= self.margin

    def fits(self, height: float) -> bool:
        return self.y_position + height <= self.bottom

    def new_page(self) -> None:
        self.page_index += 1
        self.y_position = self.margin
        logger.debug("Page break -> page %d", self.page_index + 1)

    def advance(self, delta: float) -> None:
        self.y_position += delta

    def anchor_x(self, script: ScriptInfo) -> float:
        """Right margin for RTL text, left margin otherwise."""
        return self.page_width - self.margin if script.is_rtl else self.margin


def _align_for(script: ScriptInfo) -> str:
    return ALIGN_RIGHT if script.is_rtl else ALIGN_LEFT


# ═══════════════════════════════════════════
# Pagination
# ═══════════════════════════════════════════

class _Paginator:
    def __init__(self, wrap: WrapFunc, cursor: LayoutCursor):
        self.wrap = wrap
        self.cursor = cursor
        self.lines: list[PlacedLine] = []

    def _place(self, text: str, script: ScriptInfo, bold: bool, size: float) -> None:
        c = self.cursor
        self.lines.append(PlacedLine(
            page_index=c.page_index,
            x=c.anchor_x(script),
            y=c.y_position,
            text=text,
            font_family=script.font_family,
            bold=bold,
            size=size,
            align=_align_for(script),
        ))

    def place_title(self, title: str) -> None:
        script = classify(title)
        text = sanitize(title, script.direction)
        wrapped = self.wrap(text, script.font_family, True, PDF_TITLE_SIZE, self.cursor.text_width) or [text]

        self.cursor.y_position = TITLE_Y
        for n, line in enumerate(wrapped):
            if n:
                self.cursor.advance(TITLE_LINE_HEIGHT)
            self._place(line, script, True, PDF_TITLE_SIZE)
        self.cursor.advance(TITLE_GAP)

    def place_heading(self, node: Heading) -> None:
        script = classify(node.text)
        if not self.cursor.fits(HEADING_ADVANCE) and not self.cursor.at_page_top:
            self.cursor.new_page()
        self._place(sanitize(node.text, script.direction), script, True, pdf_heading_size(node.depth))
        self.cursor.advance(HEADING_ADVANCE)

    def place_paragraph(self, node: Paragraph) -> None:
        script = classify(node.text)
        text = sanitize(node.text, script.direction)
        wrapped = self.wrap(text, script.font_family, False, PDF_BODY_SIZE, self.cursor.text_width)
        block_height = len(wrapped) * LINE_HEIGHT

        if not self.cursor.fits(block_height) and not self.cursor.at_page_top:
            self.cursor.new_page()

        for line in wrapped:
            # Only a block taller than a whole page gets here without room
            if not self.cursor.fits(LINE_HEIGHT) and not self.cursor.at_page_top:
                self.cursor.new_page()
            self._place(line, script, False, PDF_BODY_SIZE)
            self.cursor.advance(LINE_HEIGHT)
        self.cursor.advance(PARAGRAPH_SPACING)


def paginate(
    nodes: Iterable[DocumentNode],
    title: str,
    wrap: WrapFunc,
    *,
    page_width: float = PAGE_WIDTH,
    page_height: float = PAGE_HEIGHT,
    margin: float = PAGE_MARGIN,
) -> PageLayout:
    """Place the title and every node, in order, onto pages.

    A paragraph that would cross the bottom margin starts a new page;
    it is never split unless it is taller than a full page on its own.
    """
    cursor = LayoutCursor(page_width=page_width, page_height=page_height, margin=margin)
    paginator = _Paginator(wrap, cursor)

    paginator.place_title(title)
    for node in nodes:
        if isinstance(node, Heading):
            paginator.place_heading(node)
        elif isinstance(node, Paragraph):
            paginator.place_paragraph(node)

    return PageLayout(
        page_width=page_width,
        page_height=page_height,
        margin=margin,
        page_count=cursor.page_index + 1,
        lines=paginator.lines,
    )
