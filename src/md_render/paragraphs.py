from __future__ import annotations

import re
from dataclasses import dataclass

_SEPARATOR_RE = re.compile(r"(?:\r\n|\r(?!\n)|\n){2,}")


@dataclass(frozen=True, slots=True)
class Paragraph:
    text: str
    separator: str = ""


def split_paragraphs(text: str) -> list[Paragraph]:
    """Split text on blank lines, keeping each separator verbatim.

    A separator is a run of two or more line breaks (``\\r\\n``, ``\\n`` or
    ``\\r``). Joining ``paragraph.text + paragraph.separator`` for every item
    reproduces the input exactly; the last paragraph has an empty separator.
    """
    paragraphs: list[Paragraph] = []
    start = 0
    for match in _SEPARATOR_RE.finditer(text):
        paragraphs.append(Paragraph(text=text[start : match.start()], separator=match.group()))
        start = match.end()
    paragraphs.append(Paragraph(text=text[start:]))
    return paragraphs
