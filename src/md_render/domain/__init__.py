"""Core domain types for md-render."""

from md_render.domain.nodes import Container, Leaf, Node, TagKind
from md_render.domain.tokens import ESCAPABLE_CHARS, Token, TokenKind

__all__ = [
    "ESCAPABLE_CHARS",
    "Container",
    "Leaf",
    "Node",
    "TagKind",
    "Token",
    "TokenKind",
]
