"""Normalise directional control characters in right-to-left text."""

from __future__ import annotations

import re

from script_classifier import Direction


RLM = "\u200F"

# ALM, LRM/RLM, LRE..RLO embeddings/overrides, LRI..PDI isolates
DIRECTIONAL_MARKS_RE = re.compile(r"[\u061C\u200E\u200F\u202A-\u202E\u2066-\u2069]")


def strip_directional_marks(text: str) -> str:
    """Remove every Unicode directional formatting character from *text*."""
    return DIRECTIONAL_MARKS_RE.sub("", text)


def sanitize(text: str, direction: Direction) -> str:
    """Strip stray marks from RTL text and wrap it in RLM marks.

    LTR text is returned untouched.  Re-sanitizing an already sanitized
    string gives the same string back.
    """
    if direction is not Direction.RTL:
        return text
    return f"{RLM}{strip_directional_marks(text)}{RLM}"
