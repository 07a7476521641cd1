from __future__ import annotations

from collections.abc import Sequence

from md_render.domain.nodes import Container, Leaf, Node, TagKind

_TAG_NAMES: dict[TagKind, str] = {
    TagKind.header: "h1",
    TagKind.bold: "strong",
    TagKind.italic: "em",
}


def render_nodes(nodes: Sequence[Node]) -> str:
    """Render a resolved paragraph tree to HTML.

    Literal text is emitted unchanged; no HTML escaping is applied. The walk is
    iterative so deeply nested emphasis cannot exhaust the recursion limit.
    """
    out: list[str] = []
    pending: list[Node | str] = list(reversed(nodes))
    while pending:
        item = pending.pop()
        match item:
            case str():
                out.append(item)
            case Leaf(text=text):
                out.append(text)
            case Container(kind=TagKind.link, children=children, target=target):
                out.append(f'<a href="{target}">')
                pending.append("</a>")
                pending.extend(reversed(children))
            case Container(kind=kind, children=children):
                tag = _TAG_NAMES[kind]
                out.append(f"<{tag}>")
                pending.append(f"</{tag}>")
                pending.extend(reversed(children))
    return "".join(out)
