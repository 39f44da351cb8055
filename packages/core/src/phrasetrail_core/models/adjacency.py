"""Chapter adjacency rows as loaded from a trail file."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Direction(str, Enum):
    """Which neighbour pointer to follow through an adjacency table."""

    PREVIOUS = "previous"
    NEXT = "next"


@dataclass(frozen=True)
class AdjacencyEntry:
    """
    One row of a trail file: a chapter and its declared neighbours.

    `None` for a neighbour means the row left that column empty. Neighbour
    identifiers are not checked against the chapter set.
    """

    chapter: str
    previous: str | None
    next: str | None

    def neighbour(self, direction: Direction) -> str | None:
        return self.previous if direction is Direction.PREVIOUS else self.next
