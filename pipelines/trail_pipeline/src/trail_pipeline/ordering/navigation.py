"""
Previous/next chapter resolution over a possibly broken adjacency table.

A row may point at a chapter that produced no output (merged, filtered,
renamed). Such pointers are followed through that chapter's own row until
an existing chapter turns up. Dangling pointers and cycles resolve to no
link instead of an error.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from phrasetrail_core.models.adjacency import AdjacencyEntry, Direction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChapterNeighbours:
    chapter: str
    previous: str | None
    next: str | None


class ChapterLinkResolver:
    def __init__(self, entries: Iterable[AdjacencyEntry], exists: Callable[[str], bool]):
        """
        Args:
            entries: Adjacency rows; the first row per chapter is used
            exists: Whether a chapter has output that can be linked to
        """
        self._entries: dict[str, AdjacencyEntry] = {}
        for entry in entries:
            self._entries.setdefault(entry.chapter, entry)
        self._exists = exists

    def __len__(self) -> int:
        return len(self._entries)

    def resolve(self, chapter: str, direction: Direction) -> str | None:
        """
        Follow `direction` pointers from `chapter` to the nearest existing chapter.

        Returns None when the chain ends (empty pointer, or a chapter with
        no row) or comes back to a chapter already visited, the start
        included. Each chapter is visited at most once, so this takes at
        most as many steps as there are rows.
        """
        visited = {chapter}
        entry = self._entries.get(chapter)
        while entry is not None:
            candidate = entry.neighbour(direction)
            if candidate is None or candidate in visited:
                return None
            if self._exists(candidate):
                return candidate
            visited.add(candidate)
            entry = self._entries.get(candidate)
        return None

    def neighbours(self, chapter: str) -> ChapterNeighbours:
        return ChapterNeighbours(
            chapter=chapter,
            previous=self.resolve(chapter, Direction.PREVIOUS),
            next=self.resolve(chapter, Direction.NEXT),
        )

    def resolve_all(self) -> list[ChapterNeighbours]:
        """Neighbours for every existing chapter with a row, in row order."""
        result = [self.neighbours(c) for c in self._entries if self._exists(c)]
        logger.info("Resolved navigation for %d chapters", len(result))
        return result
