"""Detect the script of a text span and derive its direction and font.

The heuristic is deliberately cheap: Arabic block first, then French
accents / function words, English otherwise.  The same function drives
both the PDF and the DOCX exports so a span never changes language
between the two.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from typography import resolve_font


# ═══════════════════════════════════════════
# Constants
# ═══════════════════════════════════════════

LANG_ARABIC = "ar"
LANG_FRENCH = "fr"
LANG_ENGLISH = "en"

ARABIC_RE = re.compile(r"[\u0600-\u06FF]")

# Latin-1 Supplement letters only (× and ÷ are excluded)
FRENCH_ACCENT_RE = re.compile(r"[\u00C0-\u00D6\u00D8-\u00F6\u00F8-\u00FF]")
FRENCH_WORDS = ("je", "tu", "il", "nous", "vous", "ils", "le", "la", "les",
                "un", "une", "des", "ce", "cette", "ces")
FRENCH_WORD_RE = re.compile(r"\b(?:" + "|".join(FRENCH_WORDS) + r")\b", re.IGNORECASE)


class Direction(str, Enum):
    LTR = "ltr"
    RTL = "rtl"


@dataclass(frozen=True)
class ScriptInfo:
    language_tag: str
    direction: Direction
    font_family: str

    @property
    def is_rtl(self) -> bool:
        return self.direction is Direction.RTL


# ═══════════════════════════════════════════
# Classification
# ═══════════════════════════════════════════

def detect_language(text: str) -> str:
    """Return 'ar', 'fr' or 'en' for *text* (first matching rule wins)."""
    if ARABIC_RE.search(text):
        return LANG_ARABIC
    if FRENCH_ACCENT_RE.search(text) or FRENCH_WORD_RE.search(text):
        return LANG_FRENCH
    return LANG_ENGLISH


def classify(text: str) -> ScriptInfo:
    """Classify a span into language tag, direction and font family."""
    lang = detect_language(text or "")
    direction = Direction.RTL if lang == LANG_ARABIC else Direction.LTR
    return ScriptInfo(language_tag=lang, direction=direction, font_family=resolve_font(lang))
