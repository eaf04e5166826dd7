"""Parse Markdown into the flat block sequence used by the exporters.

Only two block kinds survive: headings (with depth) and paragraphs.
Lists and blockquotes are walked through so their paragraphs come out
in document order; table rows, code blocks and raw HTML blocks
degrade to plain paragraphs.  Parsing never raises.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from markdown_it import MarkdownIt
from markdown_it.token import Token

from typography import clamp_depth


# ═══════════════════════════════════════════
# Node types
# ═══════════════════════════════════════════

@dataclass(frozen=True)
class Heading:
    depth: int
    text: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "depth", clamp_depth(self.depth))


@dataclass(frozen=True)
class Paragraph:
    text: str


DocumentNode = Union[Heading, Paragraph]

TABLE_CELL_SEPARATOR = " | "

# Inline tokens whose content is literal text
_TEXT_TOKENS = {"text", "code_inline", "html_inline"}
_BREAK_TOKENS = {"softbreak", "hardbreak"}


# ═══════════════════════════════════════════
# Parser
# ═══════════════════════════════════════════

def _build_parser() -> MarkdownIt:
    md = MarkdownIt("commonmark")
    md.enable("table")
    return md


def _inline_text(token: Token) -> str:
    """Concatenate the literal text of every inline child, no separators."""
    if not token.children:
        return token.content or ""
    parts: list[str] = []
    for child in token.children:
        if child.type in _TEXT_TOKENS:
            parts.append(child.content)
        elif child.type in _BREAK_TOKENS:
            parts.append(" ")
        elif child.type == "image":
            parts.append(_inline_text(child))
    return "".join(parts)


def _first_run_text(token: Token) -> str:
    """Literal text of the first text-bearing inline run of a heading."""
    for child in token.children or []:
        if child.type in _TEXT_TOKENS:
            return child.content
    return token.content or ""


def _walk(tokens: list[Token]) -> list[DocumentNode]:
    nodes: list[DocumentNode] = []
    row_cells: list[str] | None = None
    i = 0

    while i < len(tokens):
        tok = tokens[i]

        if tok.type == "heading_open":
            inline = tokens[i + 1]
            nodes.append(Heading(depth=int(tok.tag[1:]), text=_first_run_text(inline)))
            i += 3  # heading_open, inline, heading_close
            continue

        if tok.type == "paragraph_open":
            inline = tokens[i + 1]
            nodes.append(Paragraph(text=_inline_text(inline)))
            i += 3
            continue

        if tok.type in ("fence", "code_block", "html_block"):
            code = tok.content.strip("\n").rstrip()
            if code:
                nodes.append(Paragraph(text=code))

        elif tok.type == "tr_open":
            row_cells = []
        elif tok.type == "inline" and row_cells is not None:
            row_cells.append(_inline_text(tok).strip())
        elif tok.type == "tr_close":
            if row_cells and any(row_cells):
                nodes.append(Paragraph(text=TABLE_CELL_SEPARATOR.join(row_cells)))
            row_cells = None

        i += 1

    return nodes


def parse_markdown(content: str) -> list[DocumentNode]:
    """Parse *content* into an ordered list of Heading / Paragraph nodes."""
    if not content or not content.strip():
        return []
    return _walk(_build_parser().parse(content))
