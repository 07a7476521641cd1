from __future__ import annotations

import logging

from md_render.html_renderer import render_nodes
from md_render.paragraphs import split_paragraphs
from md_render.resolver import resolve
from md_render.tokenizer import tokenize

logger = logging.getLogger(__name__)


def render(text: str) -> str:
    """Convert the supported Markdown subset to HTML.

    Supported: ``__bold__``, ``_italic_``, a ``# `` header at the start of a
    paragraph, ``[description](target)`` links and backslash escapes of
    ``_``, ``#``, ``(`` and ``)``. Paragraphs are separated by blank lines and
    the separators are kept verbatim. Markers that do not form a valid tag are
    emitted as literal text.
    """
    paragraphs = split_paragraphs(text)
    logger.debug("Rendering %d paragraph(s), %d characters", len(paragraphs), len(text))

    out: list[str] = []
    for paragraph in paragraphs:
        tokens = tokenize(paragraph.text)
        nodes = resolve(tokens, source=paragraph.text)
        out.append(render_nodes(nodes))
        out.append(paragraph.separator)
    return "".join(out)


class Md:
    """Stateless object wrapper around :func:`render`."""

    def render(self, text: str) -> str:
        return render(text)
