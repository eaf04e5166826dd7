"""Request and error types shared by the export pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ExportFailure(Exception):
    """Raised when a document cannot be encoded or written."""


class ExportFormat(str, Enum):
    PDF = "pdf"
    DOCX = "docx"

    @property
    def extension(self) -> str:
        return self.value


@dataclass(frozen=True)
class ExportRequest:
    content: str
    title: str
    target_format: ExportFormat
