"""Tests for RTL directional-mark sanitizing."""

import pytest

from bidi_sanitizer import RLM, sanitize, strip_directional_marks
from script_classifier import Direction

ARABIC = "مرحبا بالعالم"


class TestSanitize:

    def test_ltr_is_identity(self):
        text = "Hello \u200E world"
        assert sanitize(text, Direction.LTR) == text

    def test_rtl_wrapped_in_rlm(self):
        assert sanitize(ARABIC, Direction.RTL) == f"{RLM}{ARABIC}{RLM}"

    def test_rtl_strips_stray_marks(self):
        dirty = "\u202B\u200E" + ARABIC + "\u202C\u2067\u2069\u061C"
        assert sanitize(dirty, Direction.RTL) == f"{RLM}{ARABIC}{RLM}"

    @pytest.mark.parametrize("text", [
        "",
        ARABIC,
        RLM + ARABIC,
        "\u202E" + ARABIC + " abc \u202A",
        "\u200F\u200F\u200F",
        "plain latin",
    ])
    def test_idempotent(self, text):
        once = sanitize(text, Direction.RTL)
        assert sanitize(once, Direction.RTL) == once

    def test_strip_leaves_other_text_alone(self):
        assert strip_directional_marks("a\u200Fb\u2066c") == "abc"
        assert strip_directional_marks("café") == "café"
