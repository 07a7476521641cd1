from __future__ import annotations

import pytest

from md_render.paragraphs import Paragraph, split_paragraphs


def test_split_paragraphs_empty_input_yields_one_empty_paragraph() -> None:
    assert split_paragraphs("") == [Paragraph(text="", separator="")]


def test_split_paragraphs_keeps_single_line_breaks_inside() -> None:
    assert split_paragraphs("a\nb\r\nc") == [Paragraph(text="a\nb\r\nc")]


def test_split_paragraphs_keeps_separators_verbatim() -> None:
    assert split_paragraphs("a\n\nb\r\n\r\n\r\nc") == [
        Paragraph(text="a", separator="\n\n"),
        Paragraph(text="b", separator="\r\n\r\n\r\n"),
        Paragraph(text="c"),
    ]


def test_split_paragraphs_leading_and_trailing_separators() -> None:
    assert split_paragraphs("\n\nx\n\n") == [
        Paragraph(text="", separator="\n\n"),
        Paragraph(text="x", separator="\n\n"),
        Paragraph(text=""),
    ]


def test_split_paragraphs_lone_carriage_returns_count_as_line_breaks() -> None:
    assert split_paragraphs("a\r\rb") == [Paragraph(text="a", separator="\r\r"), Paragraph(text="b")]


@pytest.mark.parametrize(
    "text",
    ["", "one", "a\n\nb", "\r\n\r\n", "x\n\r\ny\n", "# h\n\n_i_\n\n\n[a](b)\r\n"],
)
def test_split_paragraphs_reconstructs_input(text: str) -> None:
    paragraphs = split_paragraphs(text)
    assert "".join(p.text + p.separator for p in paragraphs) == text
    assert paragraphs[-1].separator == ""
