from __future__ import annotations

import re

from md_render.domain.tokens import ESCAPABLE_CHARS, Token, TokenKind

_PLAIN_RUN_RE = re.compile(r"[^\\_\[]+")
_LINK_STOP_CHARS = frozenset("[]()")

_HEADER_PREFIX = "# "


def tokenize(paragraph: str) -> list[Token]:
    """Split one paragraph into lexical tokens.

    Tokens cover the paragraph without gaps or overlaps. Whether an emphasis
    marker actually opens or closes a tag is decided later by the resolver;
    this pass is purely lexical.
    """
    tokens: list[Token] = []
    length = len(paragraph)
    idx = 0

    if paragraph.startswith(_HEADER_PREFIX):
        tokens.append(Token(TokenKind.header_marker, _HEADER_PREFIX, 0, len(_HEADER_PREFIX)))
        idx = len(_HEADER_PREFIX)

    while idx < length:
        if (match := _PLAIN_RUN_RE.match(paragraph, idx)) is not None:
            end = match.end()
            tokens.append(Token(TokenKind.plain_text, match.group(), idx, end))
            idx = end
            continue

        char = paragraph[idx]
        if char == "\\":
            idx = _read_escape(paragraph, idx, tokens)
        elif char == "_":
            idx = _read_underscores(paragraph, idx, tokens)
        else:
            idx = _read_link(paragraph, idx, tokens)

    return tokens


def _read_escape(paragraph: str, idx: int, tokens: list[Token]) -> int:
    nxt = idx + 1
    if nxt >= len(paragraph) or paragraph[nxt] not in ESCAPABLE_CHARS:
        tokens.append(Token(TokenKind.plain_text, "\\", idx, nxt))
        return nxt

    end = nxt + 1
    if paragraph.startswith("__", nxt):
        end = nxt + 2
    tokens.append(Token(TokenKind.escape, paragraph[idx:end], idx, end))
    return end


def _read_underscores(paragraph: str, idx: int, tokens: list[Token]) -> int:
    if paragraph.startswith("__", idx):
        tokens.append(Token(TokenKind.bold_marker, "__", idx, idx + 2))
        return idx + 2
    tokens.append(Token(TokenKind.italic_marker, "_", idx, idx + 1))
    return idx + 1


def _read_link(paragraph: str, idx: int, tokens: list[Token]) -> int:
    description_close = _scan_link_part(paragraph, idx + 1, closer="]")
    if description_close is None or not paragraph.startswith("(", description_close + 1):
        tokens.append(Token(TokenKind.plain_text, "[", idx, idx + 1))
        return idx + 1

    target_open = description_close + 1
    target_close = _scan_link_part(paragraph, target_open + 1, closer=")")
    if target_close is None:
        tokens.append(Token(TokenKind.plain_text, "[", idx, idx + 1))
        return idx + 1

    tokens.append(Token(TokenKind.link_open, "[", idx, idx + 1))
    if description_close > idx + 1:
        tokens.append(
            Token(TokenKind.plain_text, paragraph[idx + 1 : description_close], idx + 1, description_close),
        )
    tokens.append(Token(TokenKind.link_description_close, "]", description_close, target_open))
    tokens.append(Token(TokenKind.link_target_open, "(", target_open, target_open + 1))
    if target_close > target_open + 1:
        tokens.append(
            Token(TokenKind.plain_text, paragraph[target_open + 1 : target_close], target_open + 1, target_close),
        )
    tokens.append(Token(TokenKind.link_target_close, ")", target_close, target_close + 1))
    return target_close + 1


def _scan_link_part(paragraph: str, idx: int, *, closer: str) -> int | None:
    """Return the offset of ``closer``, or None when the part is malformed.

    A part stops at the first whitespace or bracket/parenthesis character, so a
    failed probe never reads past the next candidate link start.
    """
    for pos in range(idx, len(paragraph)):
        char = paragraph[pos]
        if char == closer:
            return pos
        if char in _LINK_STOP_CHARS or char.isspace():
            return None
    return None
