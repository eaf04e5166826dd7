"""Export Markdown content as a paginated PDF and/or a DOCX document.

Pipeline:
  1. Parse the Markdown into headings and paragraphs
  2. Classify each span (ar / fr / en) and pick direction + font
  3. Sanitize RTL spans (strip stray bidi marks, wrap in RLM)
  4. PDF: paginate and draw with ReportLab
     DOCX: assemble styled paragraphs and write with python-docx
  5. Save as "<title>.pdf" / "<title>.docx"

Usage:
    python export_pipeline.py notes.md                       # PDF + DOCX
    python export_pipeline.py notes.md -f pdf -t "My notes"
    python export_pipeline.py notes.md -o out/ --font-dir fonts/
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from docx_assembler import render_docx
from export_request import ExportFailure, ExportFormat, ExportRequest
from markdown_ast import DocumentNode, parse_markdown
from output_emitter import emit
from pdf_renderer import DEFAULT_FONT_DIR, render_pdf

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════
# Configuration
# ═══════════════════════════════════════════

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_OUTPUT_DIR = PROJECT_ROOT / "exported"


# ═══════════════════════════════════════════
# Pipeline
# ═══════════════════════════════════════════

def _serialize(nodes: list[DocumentNode], request: ExportRequest, font_dir: Path | str | None) -> bytes:
    if request.target_format is ExportFormat.PDF:
        return render_pdf(nodes, request.title, font_dir=font_dir)
    return render_docx(nodes, request.title)


def render_artifact(request: ExportRequest, *, font_dir: Path | str | None = None) -> bytes:
    """Run the whole pipeline for one request and return the encoded document."""
    nodes = parse_markdown(request.content)
    logger.debug("Parsed %d node(s) for %s export", len(nodes), request.target_format.value)
    return _serialize(nodes, request, font_dir)


def export_document(request: ExportRequest, dest_dir: Path | str, *,
                    font_dir: Path | str | None = None) -> Path:
    """Render *request* and save it as ``<dest_dir>/<title>.<ext>``."""
    data = render_artifact(request, font_dir=font_dir)
    return emit(data, request.title, request.target_format, dest_dir)


async def export_document_async(request: ExportRequest, dest_dir: Path | str, *,
                                font_dir: Path | str | None = None) -> Path:
    """Async variant of :func:`export_document`.

    Each blocking step runs in a worker thread via ``asyncio.to_thread``;
    steps are awaited in sequence and concurrent exports share nothing.
    """
    nodes = await asyncio.to_thread(parse_markdown, request.content)
    data = await asyncio.to_thread(_serialize, nodes, request, font_dir)
    return await asyncio.to_thread(emit, data, request.title, request.target_format, dest_dir)


# ═══════════════════════════════════════════
# CLI
# ═══════════════════════════════════════════

FORMAT_CHOICES = {
    "pdf": [ExportFormat.PDF],
    "docx": [ExportFormat.DOCX],
    "both": [ExportFormat.PDF, ExportFormat.DOCX],
}


def main(argv: list[str] | None = None) -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(description="Export Markdown to PDF and DOCX with RTL-aware typography.")
    parser.add_argument("input", type=Path, help="Path to the input Markdown file.")
    parser.add_argument("-f", "--format", choices=sorted(FORMAT_CHOICES), default="both",
                        help="Output format (default: both).")
    parser.add_argument("-t", "--title", default=None,
                        help="Document title and output filename. Defaults to the input file name.")
    parser.add_argument("-o", "--output", type=Path, default=None,
                        help="Output directory (default: $EXPORT_OUTPUT_DIR or exported/).")
    parser.add_argument("--font-dir", type=Path, default=None,
                        help="Directory holding the TTF fonts (default: $EXPORT_FONT_DIR or fonts/).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    md_path = args.input.expanduser().resolve()
    if not md_path.exists():
        print(f"ERROR: File not found: {md_path}", file=sys.stderr)
        return 2

    out_dir = args.output or Path(os.getenv("EXPORT_OUTPUT_DIR", "") or DEFAULT_OUTPUT_DIR)
    font_dir = args.font_dir or Path(os.getenv("EXPORT_FONT_DIR", "") or DEFAULT_FONT_DIR)
    title = args.title if args.title is not None else md_path.stem
    content = md_path.read_text(encoding="utf-8")

    if not content.strip():
        print(f"  ⚠ {md_path.name} is empty, exporting title only.", file=sys.stderr)

    for fmt in FORMAT_CHOICES[args.format]:
        request = ExportRequest(content=content, title=title, target_format=fmt)
        try:
            path = export_document(request, out_dir.expanduser(), font_dir=font_dir.expanduser())
        except ExportFailure as e:
            print(f"ERROR: {fmt.value.upper()} export failed: {e}", file=sys.stderr)
            return 1
        print(f"OK -> {path}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
