"""Save a finished artifact under a filename derived from the document title."""

from __future__ import annotations

import logging
import os
import re
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from bidi_sanitizer import strip_directional_marks
from export_request import ExportFailure, ExportFormat

logger = logging.getLogger(__name__)


TITLE_MAX_CHARS = 50
TITLE_ELLIPSIS = "..."
FALLBACK_FILENAME = "document"

_ILLEGAL_FILENAME_RE = re.compile(r'[<>:"/\\|?*\x00-\x1f\x7f]')
_WHITESPACE_RE = re.compile(r"\s+")


def make_export_title(prompt: str) -> str:
    """Build a document title from the user's prompt: first 50 characters plus '...'."""
    return prompt[:TITLE_MAX_CHARS] + TITLE_ELLIPSIS


def sanitize_filename(title: str) -> str:
    """Strip characters that are illegal in filenames on common platforms."""
    name = strip_directional_marks(title or "")
    name = _ILLEGAL_FILENAME_RE.sub("", name)
    name = _WHITESPACE_RE.sub(" ", name).strip().rstrip(". ")
    return name or FALLBACK_FILENAME


@contextmanager
def _temporary_file(dest_dir: Path, suffix: str) -> Iterator[Path]:
    """Yield a temp file path in *dest_dir*; it is always removed on exit."""
    fd, tmp_name = tempfile.mkstemp(prefix=".export-", suffix=suffix, dir=dest_dir)
    os.close(fd)
    tmp_path = Path(tmp_name)
    try:
        yield tmp_path
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


def emit(data: bytes, title: str, fmt: ExportFormat, dest_dir: Path | str) -> Path:
    """Write *data* to ``<dest_dir>/<title>.<ext>`` and return the final path.

    The bytes go to a temporary file first and are moved into place in a
    single rename, so a failed or interrupted save never leaves a partial
    artifact behind.
    """
    dest_dir = Path(dest_dir)
    target = dest_dir / f"{sanitize_filename(title)}.{fmt.extension}"

    try:
        dest_dir.mkdir(parents=True, exist_ok=True)
        with _temporary_file(dest_dir, f".{fmt.extension}") as tmp:
            tmp.write_bytes(data)
            os.replace(tmp, target)
    except OSError as e:
        raise ExportFailure(f"Could not save {target}: {e}") from e

    logger.info("Saved %s (%d bytes)", target, len(data))
    return target
