from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from md_render.domain.nodes import Container, Leaf, Node, TagKind
from md_render.domain.tokens import Token, TokenKind

logger = logging.getLogger(__name__)

_WORD_RE = re.compile(r"\w+")
_DIGIT_RE = re.compile(r"\d")

_EMPHASIS_TAGS: dict[TokenKind, TagKind] = {
    TokenKind.bold_marker: TagKind.bold,
    TokenKind.italic_marker: TagKind.italic,
}


class TokenStreamError(RuntimeError):
    pass


@dataclass(slots=True)
class _Marker:
    index: int
    token: Token
    word: int
    can_open: bool
    can_close: bool
    intraword: bool = False


@dataclass(slots=True)
class _Pair:
    opener: _Marker
    closer: _Marker
    rejected: bool = False

    @property
    def kind(self) -> TokenKind:
        return self.opener.token.kind


@dataclass(slots=True)
class _Frame:
    kind: TagKind | None
    children: list[Node] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)

    def add_text(self, text: str) -> None:
        if text:
            self.pending.append(text)

    def add_node(self, node: Node) -> None:
        self.flush()
        self.children.append(node)

    def flush(self) -> None:
        if self.pending:
            self.children.append(Leaf("".join(self.pending)))
            self.pending = []

    def close(self) -> tuple[Node, ...]:
        self.flush()
        return tuple(self.children)


class _WordIndex:
    """Maps offsets to words (maximal runs of letters, digits and underscores).

    Offsets must be queried in non-decreasing order; the index walks a cursor
    forward instead of searching.
    """

    def __init__(self, source: str) -> None:
        self._source = source
        self._spans = [match.span() for match in _WORD_RE.finditer(source)]
        self._cursor = 0
        self._digits: dict[int, bool] = {}

    def word_at(self, offset: int) -> int:
        while self._spans[self._cursor][1] <= offset:
            self._cursor += 1
        return self._cursor

    def has_digit(self, word: int) -> bool:
        cached = self._digits.get(word)
        if cached is None:
            start, end = self._spans[word]
            cached = _DIGIT_RE.search(self._source, start, end) is not None
            self._digits[word] = cached
        return cached


def resolve(tokens: Sequence[Token], *, source: str) -> tuple[Node, ...]:
    """Resolve a paragraph's tokens into a tree of tags and literal leaves.

    ``source`` is the paragraph the tokens were produced from. Emphasis markers
    are paired per kind with a stack of unmatched openers; pairs that cross
    each other, or bold pairs enclosed by italic ones, are rejected afterwards
    and their markers stay literal. Every pass is linear in the token count.
    """
    _check_coverage(tokens, source)

    markers = _classify_markers(tokens, source)
    pairs = _match_pairs(markers)
    crossing = _reject_crossing(markers, pairs)
    nested = _reject_bold_inside_italic(markers, pairs)
    if crossing or nested:
        logger.debug("Rejected %d crossing and %d nested emphasis pairs", crossing, nested)

    return _build_tree(tokens, pairs)


def _check_coverage(tokens: Sequence[Token], source: str) -> None:
    expected = 0
    for token in tokens:
        if token.start != expected or token.end - token.start != len(token.text):
            raise TokenStreamError(f"token stream has a gap or overlap at offset {expected}: {token!r}")
        expected = token.end
    if expected != len(source):
        raise TokenStreamError(f"token stream ends at {expected}, paragraph length is {len(source)}")


def _classify_markers(tokens: Sequence[Token], source: str) -> list[_Marker]:
    words = _WordIndex(source)
    length = len(source)
    markers: list[_Marker] = []
    for index, token in enumerate(tokens):
        if not token.is_emphasis:
            continue

        before = source[token.start - 1] if token.start > 0 else None
        after = source[token.end] if token.end < length else None
        word = words.word_at(token.start)
        if words.has_digit(word):
            can_open = can_close = False
        else:
            can_open = after is not None and not after.isspace()
            can_close = before is not None and not before.isspace()
        # Punctuation next to a marker is a word boundary.
        intraword = before is not None and after is not None and before.isalnum() and after.isalnum()

        markers.append(
            _Marker(
                index=index,
                token=token,
                word=word,
                can_open=can_open,
                can_close=can_close,
                intraword=intraword,
            ),
        )
    return markers


def _can_pair(opener: _Marker, closer: _Marker) -> bool:
    if closer.token.start <= opener.token.end:
        return False
    if opener.intraword or closer.intraword:
        return opener.word == closer.word
    return True


def _match_pairs(markers: Sequence[_Marker]) -> list[_Pair]:
    stacks: dict[TokenKind, list[_Marker]] = {kind: [] for kind in _EMPHASIS_TAGS}
    pairs: list[_Pair] = []
    for marker in markers:
        stack = stacks[marker.token.kind]
        # An intraword opener can only close within its own word.
        while stack and stack[-1].intraword and stack[-1].word != marker.word:
            stack.pop()
        if marker.can_close and stack and _can_pair(stack[-1], marker):
            pairs.append(_Pair(opener=stack.pop(), closer=marker))
        elif marker.can_open:
            stack.append(marker)
    return pairs


def _endpoint_roles(pairs: Sequence[_Pair]) -> dict[int, tuple[bool, _Pair]]:
    roles: dict[int, tuple[bool, _Pair]] = {}
    for pair in pairs:
        if pair.rejected:
            continue
        roles[pair.opener.index] = (True, pair)
        roles[pair.closer.index] = (False, pair)
    return roles


def _reject_crossing(markers: Sequence[_Marker], pairs: Sequence[_Pair]) -> int:
    """Reject pairs that overlap without one enclosing the other."""
    roles = _endpoint_roles(pairs)
    open_pairs: list[_Pair] = []
    rejected = 0
    for marker in markers:
        role = roles.get(marker.index)
        if role is None:
            continue
        is_opener, pair = role
        if is_opener:
            open_pairs.append(pair)
            continue
        if pair.rejected:
            continue
        while open_pairs[-1] is not pair:
            inner = open_pairs.pop()
            inner.rejected = True
            pair.rejected = True
            rejected += 1
        open_pairs.pop()
        if pair.rejected:
            rejected += 1
    return rejected


def _reject_bold_inside_italic(markers: Sequence[_Marker], pairs: Sequence[_Pair]) -> int:
    roles = _endpoint_roles(pairs)
    italic_depth = 0
    rejected = 0
    for marker in markers:
        role = roles.get(marker.index)
        if role is None:
            continue
        is_opener, pair = role
        if pair.kind == TokenKind.italic_marker:
            italic_depth += 1 if is_opener else -1
        elif is_opener and italic_depth > 0:
            pair.rejected = True
            rejected += 1
    return rejected


def _build_tree(tokens: Sequence[Token], pairs: Sequence[_Pair]) -> tuple[Node, ...]:
    roles = _endpoint_roles(pairs)
    frames = [_Frame(kind=None)]
    idx = 0
    count = len(tokens)
    while idx < count:
        token = tokens[idx]
        kind = token.kind
        if kind == TokenKind.header_marker and idx == 0:
            frames.append(_Frame(kind=TagKind.header))
        elif kind == TokenKind.link_open:
            link, idx = _read_link(tokens, idx)
            frames[-1].add_node(link)
            continue
        elif (role := roles.get(idx)) is not None:
            if role[0]:
                frames.append(_Frame(kind=_EMPHASIS_TAGS[kind]))
            else:
                frame = frames.pop()
                frames[-1].add_node(Container(kind=frame.kind, children=frame.close()))
        else:
            frames[-1].add_text(token.literal)
        idx += 1

    while len(frames) > 1:
        frame = frames.pop()
        if frame.kind != TagKind.header:
            raise TokenStreamError(f"unterminated {frame.kind} span")
        frames[-1].add_node(Container(kind=frame.kind, children=frame.close()))
    return frames[0].close()


def _read_link(tokens: Sequence[Token], idx: int) -> tuple[Container, int]:
    description: list[str] = []
    target: list[str] = []
    parts = description
    idx += 1
    while idx < len(tokens):
        token = tokens[idx]
        idx += 1
        if token.kind == TokenKind.link_target_close:
            children = (Leaf("".join(description)),) if description else ()
            return Container(kind=TagKind.link, children=children, target="".join(target)), idx
        if token.kind == TokenKind.link_target_open:
            parts = target
        elif token.kind == TokenKind.plain_text:
            parts.append(token.text)
    raise TokenStreamError("link group is missing its closing parenthesis")
