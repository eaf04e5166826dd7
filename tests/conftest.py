"""Shared fixtures for the export tests."""

import re
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def split_on_newlines(text, family, bold, size, max_width):
    """Fake wrap: one line per newline-separated chunk, independent of fonts."""
    return text.split("\n") if text else []


@pytest.fixture
def line_wrap():
    return split_on_newlines


@pytest.fixture
def font_dir(tmp_path):
    """An empty font directory, so every family falls back to a base-14 face."""
    d = tmp_path / "fonts"
    d.mkdir()
    return d


PAGE_OBJECT_RE = re.compile(rb"/Type /Page[^s]")


@pytest.fixture
def count_pages():
    """Count the page objects ReportLab writes into a PDF."""
    def _count(pdf: bytes) -> int:
        return len(PAGE_OBJECT_RE.findall(pdf))
    return _count
