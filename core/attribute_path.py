"""Addressing of locations inside a configuration tree."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

Segment = Union[str, int]


@dataclass(frozen=True)
class AttributePath:
    """Ordered sequence of attribute names and element indexes.

    Formats the way Terraform renders paths, e.g. ``container[2].endpoint[0].port``.
    """

    segments: Tuple[Segment, ...] = ()

    @classmethod
    def root(cls, name: str) -> "AttributePath":
        return cls((name,))

    def attr(self, name: str) -> "AttributePath":
        return AttributePath(self.segments + (name,))

    def index(self, position: int) -> "AttributePath":
        return AttributePath(self.segments + (position,))

    @property
    def is_empty(self) -> bool:
        return not self.segments

    def __str__(self) -> str:
        rendered = ""
        for segment in self.segments:
            if isinstance(segment, int):
                rendered += f"[{segment}]"
            elif rendered:
                rendered += f".{segment}"
            else:
                rendered = segment
        return rendered
