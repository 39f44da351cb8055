"""
Trail - the canonical cyclic reading order over chapters.

Chapters live in one array; a chapter's rank is its array position and
its ring neighbours are the adjacent positions, wrapping at both ends.
The Trail is the only authority for ordering Locations.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import Any

from phrasetrail_core.errors.types import CorpusInputError
from phrasetrail_core.models.adjacency import AdjacencyEntry
from phrasetrail_core.models.location import Location

_DIGITS = re.compile(r"(\d+)")


def natural_chapter_key(chapter_id: str) -> tuple[tuple[int, int, str], ...]:
    """Sort key comparing digit runs numerically, so "b_2" sorts before "b_10"."""
    key = []
    for part in _DIGITS.split(chapter_id):
        if not part:
            continue
        if part.isdigit():
            key.append((0, int(part), part))
        else:
            key.append((1, 0, part))
    return tuple(key)


class Trail:
    def __init__(self, chapters: Sequence[str], adjacency: Iterable[AdjacencyEntry] = ()):
        """
        Build a ring over `chapters` in the given order.

        Args:
            chapters: Chapter identifiers, each exactly once, in reading order
            adjacency: Raw neighbour rows kept for navigation resolution;
                not validated against the ring

        Raises:
            CorpusInputError: If a chapter identifier repeats
        """
        self._chapters: tuple[str, ...] = tuple(chapters)
        self._rank: dict[str, int] = {}
        for position, chapter in enumerate(self._chapters):
            if chapter in self._rank:
                raise CorpusInputError("Chapter listed twice on the trail", item=chapter)
            self._rank[chapter] = position

        size = len(self._chapters)
        self._prev: tuple[int, ...] = tuple((i - 1) % size for i in range(size))
        self._next: tuple[int, ...] = tuple((i + 1) % size for i in range(size))
        self._adjacency: tuple[AdjacencyEntry, ...] = tuple(adjacency)

    @classmethod
    def from_chapters(
        cls,
        chapter_ids: Iterable[str],
        *,
        key: Callable[[str], Any] | None = natural_chapter_key,
    ) -> Trail:
        """Default rule: order chapters by `key` (pass None to keep the given order)."""
        ids = list(chapter_ids)
        if key is not None:
            ids.sort(key=key)
        return cls(ids)

    @classmethod
    def from_entries(cls, entries: Iterable[AdjacencyEntry]) -> Trail:
        """
        Explicit rule: row order of a trail table is reading order.

        The ring follows row order, so `successor` and `predecessor` are the
        neighbouring rows. The declared previous/next columns are kept
        as-is and only feed `adjacency()`.
        """
        rows = list(entries)
        return cls([row.chapter for row in rows], adjacency=rows)

    # ------------------------------------------------------------------
    # Ring access
    # ------------------------------------------------------------------

    @property
    def chapters(self) -> tuple[str, ...]:
        return self._chapters

    def __len__(self) -> int:
        return len(self._chapters)

    def __iter__(self) -> Iterator[str]:
        return iter(self._chapters)

    def __contains__(self, chapter: object) -> bool:
        return chapter in self._rank

    def rank(self, chapter: str) -> int:
        try:
            return self._rank[chapter]
        except KeyError:
            raise CorpusInputError("Chapter is not on the trail", item=chapter) from None

    def successor(self, chapter: str) -> str:
        return self._chapters[self._next[self.rank(chapter)]]

    def predecessor(self, chapter: str) -> str:
        return self._chapters[self._prev[self.rank(chapter)]]

    # ------------------------------------------------------------------
    # Location order
    # ------------------------------------------------------------------

    def sort_key(self, location: Location) -> tuple[int, int]:
        return self.rank(location.chapter), location.index

    def compare(self, a: Location, b: Location) -> int:
        """Negative, zero or positive as `a` precedes, equals or follows `b`."""
        key_a = self.sort_key(a)
        key_b = self.sort_key(b)
        return (key_a > key_b) - (key_a < key_b)

    def sorted_locations(self, locations: Iterable[Location]) -> list[Location]:
        return sorted(locations, key=self.sort_key)

    # ------------------------------------------------------------------
    # Adjacency
    # ------------------------------------------------------------------

    def adjacency(self) -> list[AdjacencyEntry]:
        """
        Neighbour rows for navigation.

        The raw table rows when the trail was loaded from a table,
        otherwise the ring's own neighbours.
        """
        if self._adjacency:
            return list(self._adjacency)
        return [
            AdjacencyEntry(chapter=c, previous=self.predecessor(c), next=self.successor(c))
            for c in self._chapters
        ]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Trail):
            return NotImplemented
        return self._chapters == other._chapters and self._adjacency == other._adjacency

    def __repr__(self) -> str:
        return f"Trail(chapters={len(self._chapters)})"
