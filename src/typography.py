"""Font families and point sizes for the PDF and DOCX exports."""

from __future__ import annotations


# ═══════════════════════════════════════════
# Font selection by language
# ═══════════════════════════════════════════

FONT_MAP = {
    "ar": "Noto Naskh Arabic",  # Arabic – Naskh with full joining forms
    "fr": "Noto Sans",
}
DEFAULT_FONT = "Crimson Pro"

MIN_HEADING_DEPTH = 1
MAX_HEADING_DEPTH = 6


# ═══════════════════════════════════════════
# Size policy
# ═══════════════════════════════════════════

# PDF sizes are points
PDF_TITLE_SIZE = 24
PDF_HEADING_BASE = 18
PDF_BODY_SIZE = 12
PDF_MIN_SIZE = 6

# DOCX sizes are half-points (the w:sz unit), so 24 renders as 12pt
DOCX_TITLE_SIZE = 36
DOCX_HEADING_BASE = 28
DOCX_BODY_SIZE = 24
DOCX_MIN_SIZE = 12

HEADING_STEP = 2


def resolve_font(lang: str) -> str:
    """Return the font family for the given language tag."""
    return FONT_MAP.get(lang, DEFAULT_FONT)


def clamp_depth(depth: int) -> int:
    return max(MIN_HEADING_DEPTH, min(int(depth), MAX_HEADING_DEPTH))


def pdf_heading_size(depth: int) -> int:
    """Heading size for the PDF target, never below PDF_MIN_SIZE."""
    return max(PDF_HEADING_BASE - HEADING_STEP * depth, PDF_MIN_SIZE)


def docx_heading_size(depth: int) -> int:
    """Heading size for the DOCX target in half-points, never below DOCX_MIN_SIZE."""
    return max(DOCX_HEADING_BASE - HEADING_STEP * depth, DOCX_MIN_SIZE)
