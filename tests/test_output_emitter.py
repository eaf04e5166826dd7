"""Tests for filename sanitizing and artifact saving."""

import os

import pytest

import output_emitter
from export_request import ExportFailure, ExportFormat
from output_emitter import emit, make_export_title, sanitize_filename


class TestFilenames:

    @pytest.mark.parametrize("title,expected", [
        ("Test", "Test"),
        ('a/b\\c:d*e?f"g<h>i|j', "abcdefghij"),
        ("Report.", "Report"),
        ("  spaced   out  ", "spaced out"),
        ("", "document"),
        (" . ", "document"),
        ("\u200Fتقرير\u200F", "تقرير"),
        ("tab\there", "tabhere"),
    ])
    def test_sanitize(self, title, expected):
        assert sanitize_filename(title) == expected

    def test_export_title_truncates_prompt(self):
        assert make_export_title("x" * 60) == "x" * 50 + "..."
        assert make_export_title("short") == "short..."


class TestEmit:

    def test_writes_named_file(self, tmp_path):
        path = emit(b"%PDF-1.4 data", "Test", ExportFormat.PDF, tmp_path)
        assert path == tmp_path / "Test.pdf"
        assert path.read_bytes() == b"%PDF-1.4 data"
        assert os.listdir(tmp_path) == ["Test.pdf"]

    def test_creates_destination(self, tmp_path):
        path = emit(b"x", "A: B", ExportFormat.DOCX, tmp_path / "nested" / "out")
        assert path.name == "A B.docx"
        assert path.exists()

    def test_overwrites_existing(self, tmp_path):
        emit(b"old", "Doc", ExportFormat.DOCX, tmp_path)
        path = emit(b"new", "Doc", ExportFormat.DOCX, tmp_path)
        assert path.read_bytes() == b"new"

    def test_write_failure_reported(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        with pytest.raises(ExportFailure):
            emit(b"x", "Doc", ExportFormat.PDF, blocker)

    def test_temp_file_released_on_failure(self, tmp_path, monkeypatch):
        def fail(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(output_emitter.os, "replace", fail)
        with pytest.raises(ExportFailure):
            emit(b"x", "Doc", ExportFormat.PDF, tmp_path)
        assert os.listdir(tmp_path) == []

    def test_temp_file_released_on_interrupt(self, tmp_path, monkeypatch):
        def cancel(src, dst):
            raise KeyboardInterrupt

        monkeypatch.setattr(output_emitter.os, "replace", cancel)
        with pytest.raises(KeyboardInterrupt):
            emit(b"x", "Doc", ExportFormat.PDF, tmp_path)
        assert os.listdir(tmp_path) == []
