"""Tests for the page layout engine."""

from bidi_sanitizer import RLM
from markdown_ast import Heading, Paragraph
from pagination import (
    ALIGN_LEFT,
    ALIGN_RIGHT,
    LINE_HEIGHT,
    PAGE_HEIGHT,
    PAGE_MARGIN,
    PAGE_WIDTH,
    paginate,
)
from pdf_renderer import FontRegistry

BOTTOM = PAGE_HEIGHT - PAGE_MARGIN


def three_line_paragraph(n):
    return Paragraph(f"p{n} a\np{n} b\np{n} c")


class TestTitle:

    def test_title_only_document(self, line_wrap):
        layout = paginate([], "Test", line_wrap)
        assert layout.page_count == 1
        assert len(layout.lines) == 1
        title = layout.lines[0]
        assert (title.x, title.y, title.text, title.bold, title.size) == (PAGE_MARGIN, 20.0, "Test", True, 24)
        assert title.align == ALIGN_LEFT

    def test_rtl_title_right_aligned(self, line_wrap):
        layout = paginate([], "تقرير", line_wrap)
        title = layout.lines[0]
        assert title.align == ALIGN_RIGHT
        assert title.x == PAGE_WIDTH - PAGE_MARGIN
        assert title.text == f"{RLM}تقرير{RLM}"


class TestScenarios:

    def test_heading_then_body(self, line_wrap):
        nodes = [Heading(1, "Title"), Paragraph("Hello world.")]
        layout = paginate(nodes, "Test", line_wrap)

        assert layout.page_count == 1
        _, heading, body = layout.lines
        assert (heading.text, heading.bold, heading.size, heading.y) == ("Title", True, 16, 40.0)
        assert (body.text, body.bold, body.size, body.y) == ("Hello world.", False, 12, 50.0)
        assert heading.font_family == body.font_family == "Crimson Pro"

    def test_arabic_paragraph_right_aligned(self, line_wrap):
        layout = paginate([Paragraph("مرحبا بالعالم")], "Test", line_wrap)
        body = layout.lines[-1]
        assert body.align == ALIGN_RIGHT
        assert body.x == PAGE_WIDTH - PAGE_MARGIN
        assert body.font_family == "Noto Naskh Arabic"
        assert body.text.startswith(RLM) and body.text.endswith(RLM)

    def test_single_page_break_before_overflowing_paragraph(self, line_wrap):
        # 3-line paragraphs advance 26mm from y=40; the tenth no longer fits
        nodes = [three_line_paragraph(n) for n in range(10)]
        layout = paginate(nodes, "Test", line_wrap)

        assert layout.page_count == 2
        page_two = layout.lines_on_page(1)
        assert [ln.text for ln in page_two] == ["p9 a", "p9 b", "p9 c"]
        assert [ln.y for ln in page_two] == [PAGE_MARGIN, PAGE_MARGIN + 7, PAGE_MARGIN + 14]

    def test_paragraphs_never_split_across_pages(self, line_wrap):
        nodes = [three_line_paragraph(n) for n in range(40)]
        layout = paginate(nodes, "Test", line_wrap)

        pages_by_paragraph = {}
        for ln in layout.lines[1:]:
            pages_by_paragraph.setdefault(ln.text.split()[0], set()).add(ln.page_index)
        assert all(len(pages) == 1 for pages in pages_by_paragraph.values())
        assert all(ln.y + LINE_HEIGHT <= BOTTOM for ln in layout.lines)

    def test_page_index_only_increases(self, line_wrap):
        nodes = [three_line_paragraph(n) for n in range(40)]
        indices = [ln.page_index for ln in paginate(nodes, "Test", line_wrap).lines]
        assert indices == sorted(indices)
        assert all(b - a in (0, 1) for a, b in zip(indices, indices[1:]))


class TestOversizedBlocks:

    def test_paragraph_taller_than_a_page_spills(self, line_wrap):
        text = "\n".join(f"line {i}" for i in range(50))
        layout = paginate([Paragraph(text)], "Test", line_wrap)

        assert layout.page_count == 3
        assert len(layout.lines_on_page(1)) == 36
        assert len(layout.lines_on_page(2)) == 14
        assert [ln.text for ln in layout.lines[1:]] == text.split("\n")

    def test_heading_at_bottom_moves_to_next_page(self, line_wrap):
        layout = paginate([Heading(2, "Late")], "Test", line_wrap, page_height=60)
        heading = layout.lines[-1]
        assert layout.page_count == 2
        assert (heading.page_index, heading.y) == (1, PAGE_MARGIN)


class TestDeterminism:

    def test_same_input_same_layout(self, font_dir):
        nodes = [Heading(1, "Intro")] + [Paragraph("lorem ipsum dolor sit amet " * 30)] * 12
        first = paginate(nodes, "Report", FontRegistry(font_dir).wrap)
        second = paginate(nodes, "Report", FontRegistry(font_dir).wrap)
        assert first == second
        assert first.page_count > 1

    def test_node_order_preserved(self, line_wrap):
        nodes = [Heading(1, "A"), Paragraph("b"), Heading(3, "C"), Paragraph("مرحبا"), Paragraph("e")]
        layout = paginate(nodes, "T", line_wrap)
        texts = [ln.text.strip(RLM) for ln in layout.lines[1:]]
        assert texts == ["A", "b", "C", "مرحبا", "e"]

    def test_real_wrapping_respects_text_width(self, font_dir):
        fonts = FontRegistry(font_dir)
        layout = paginate([Paragraph("word " * 200)], "T", fonts.wrap)
        body = layout.lines[1:]
        assert len(body) > 1
        assert all(ln.page_index == 0 for ln in body)
