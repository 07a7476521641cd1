from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class TagKind(StrEnum):
    bold = "bold"
    italic = "italic"
    header = "header"
    link = "link"


@dataclass(frozen=True, slots=True)
class Leaf:
    text: str


@dataclass(frozen=True, slots=True)
class Container:
    kind: TagKind
    children: tuple[Node, ...] = ()
    target: str | None = None

    def __post_init__(self) -> None:
        if self.kind == TagKind.link and self.target is None:
            raise ValueError("link containers require a target")
        if self.kind != TagKind.link and self.target is not None:
            raise ValueError(f"{self.kind} containers must not carry a target")


Node = Leaf | Container
