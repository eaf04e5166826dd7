"""Render a ``PageLayout`` to PDF bytes with ReportLab.

Fonts are looked up as TTF files in a font directory and registered
with ReportLab; when a file is missing the nearest base-14 face is used
instead.  Base-14 faces only cover WinAnsi, so a line they cannot encode
(Arabic without its TTF, for instance) raises ExportFailure rather than
being drawn as placeholder glyphs.

RTL lines arrive in logical order wrapped in RLM marks.  ReportLab has
no bidi support, so each RTL line is reshaped (Arabic joining forms)
and reordered to visual order before drawing.
"""

from __future__ import annotations

import io
import logging
import threading
from pathlib import Path

import arabic_reshaper
from bidi.algorithm import get_display
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.pdfgen import canvas

from bidi_sanitizer import strip_directional_marks
from export_request import ExportFailure
from markdown_ast import DocumentNode
from pagination import ALIGN_RIGHT, PageLayout, PlacedLine, paginate

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════
# Font configuration
# ═══════════════════════════════════════════

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_FONT_DIR = PROJECT_ROOT / "fonts"

# family -> TTF file stem (Regular / Bold suffix appended)
FONT_FILES = {
    "Noto Naskh Arabic": "NotoNaskhArabic",
    "Noto Sans": "NotoSans",
    "Crimson Pro": "CrimsonPro",
}

# family -> (regular, bold) base-14 fallback
FALLBACK_FACES = {
    "Noto Naskh Arabic": ("Helvetica", "Helvetica-Bold"),
    "Noto Sans": ("Helvetica", "Helvetica-Bold"),
    "Crimson Pro": ("Times-Roman", "Times-Bold"),
}
DEFAULT_FALLBACK = ("Times-Roman", "Times-Bold")
BASE14_FACES = {face for pair in (*FALLBACK_FACES.values(), DEFAULT_FALLBACK) for face in pair}
BASE14_ENCODING = "cp1252"  # WinAnsiEncoding

# pdfmetrics is process-global and exports may run in worker threads
_REGISTER_LOCK = threading.Lock()


class FontRegistry:
    """Map (family, bold) to a ReportLab font name, registering TTFs lazily."""

    def __init__(self, font_dir: Path | str | None = None):
        self.font_dir = Path(font_dir) if font_dir else DEFAULT_FONT_DIR
        self._faces: dict[tuple[str, bool], str] = {}

    def _ttf_path(self, family: str, bold: bool) -> Path | None:
        stem = FONT_FILES.get(family)
        if stem is None:
            return None
        path = self.font_dir / f"{stem}-{'Bold' if bold else 'Regular'}.ttf"
        return path if path.exists() else None

    def face(self, family: str, bold: bool = False) -> str:
        key = (family, bold)
        if key in self._faces:
            return self._faces[key]

        path = self._ttf_path(family, bold)
        if path is not None:
            name = f"{FONT_FILES[family]}-{'Bold' if bold else 'Regular'}"
            with _REGISTER_LOCK:
                if name not in pdfmetrics.getRegisteredFontNames():
                    try:
                        pdfmetrics.registerFont(TTFont(name, str(path)))
                    except TTFError as e:
                        raise ExportFailure(f"Cannot load font {path}: {e}") from e
            logger.debug("Registered %s from %s", name, path)
        else:
            regular, bold_face = FALLBACK_FACES.get(family, DEFAULT_FALLBACK)
            name = bold_face if bold else regular
            logger.warning("Font file for %r not found in %s; using %s", family, self.font_dir, name)

        self._faces[key] = name
        return name

    def wrap(self, text: str, family: str, bold: bool, size: float, max_width_mm: float) -> list[str]:
        """Split *text* into lines no wider than *max_width_mm* in this face."""
        return simpleSplit(text, self.face(family, bold), size, max_width_mm * mm)


# ═══════════════════════════════════════════
# Drawing
# ═══════════════════════════════════════════

def _visual_text(line: PlacedLine) -> str:
    """Text as it should be drawn: RTL lines shaped and in visual order, marks removed."""
    if line.align != ALIGN_RIGHT:
        return strip_directional_marks(line.text)
    visual = get_display(arabic_reshaper.reshape(line.text))
    return strip_directional_marks(visual)


def _check_encodable(text: str, face: str, family: str) -> None:
    """Raise if a base-14 *face* has no glyph for some character of *text*."""
    if face not in BASE14_FACES:
        return
    try:
        text.encode(BASE14_ENCODING)
    except UnicodeEncodeError as e:
        raise ExportFailure(
            f"{face} cannot draw {text[e.start]!r}; install the {family} font files"
        ) from e


def draw_layout(layout: PageLayout, fonts: FontRegistry, title: str = "") -> bytes:
    """Draw every placed line onto a ReportLab canvas and return the PDF."""
    buf = io.BytesIO()
    page_w, page_h = layout.page_width * mm, layout.page_height * mm

    try:
        c = canvas.Canvas(buf, pagesize=(page_w, page_h))
        if title:
            c.setTitle(title)

        for page_index in range(layout.page_count):
            if page_index:
                c.showPage()
            for line in layout.lines_on_page(page_index):
                face = fonts.face(line.font_family, line.bold)
                text = _visual_text(line)
                _check_encodable(text, face, line.font_family)
                c.setFont(face, line.size)
                x, y = line.x * mm, page_h - line.y * mm
                if line.align == ALIGN_RIGHT:
                    c.drawRightString(x, y, text)
                else:
                    c.drawString(x, y, text)

        c.showPage()
        c.save()
    except ExportFailure:
        raise
    except Exception as e:
        raise ExportFailure(f"PDF encoding failed: {e}") from e

    return buf.getvalue()


def render_pdf(nodes: list[DocumentNode], title: str, *, font_dir: Path | str | None = None) -> bytes:
    """Paginate *nodes* under *title* and encode the result as PDF."""
    fonts = FontRegistry(font_dir)
    layout = paginate(nodes, title, fonts.wrap)
    logger.info("PDF layout: %d page(s), %d line(s)", layout.page_count, len(layout.lines))
    return draw_layout(layout, fonts, title=title)
