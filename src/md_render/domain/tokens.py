from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

ESCAPABLE_CHARS = frozenset("_#()")


class TokenKind(StrEnum):
    plain_text = "plain_text"
    escape = "escape"
    italic_marker = "italic_marker"
    bold_marker = "bold_marker"
    header_marker = "header_marker"
    link_open = "link_open"
    link_description_close = "link_description_close"
    link_target_open = "link_target_open"
    link_target_close = "link_target_close"


EMPHASIS_KINDS = frozenset({TokenKind.italic_marker, TokenKind.bold_marker})


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    text: str
    start: int
    end: int

    @property
    def literal(self) -> str:
        """Text emitted when the token degrades to plain text."""
        if self.kind == TokenKind.escape:
            return self.text[1:]
        return self.text

    @property
    def is_emphasis(self) -> bool:
        return self.kind in EMPHASIS_KINDS
