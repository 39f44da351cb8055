"""
PhraseIndex - phrase text to the Locations where it occurs.

Populated incrementally, possibly from several worker threads at once,
then narrowed to the phrases that repeat.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator

from phrasetrail_core.models.location import Location
from phrasetrail_core.models.phrase import PhraseOccurrence

logger = logging.getLogger(__name__)

# Number of Locations at which a unique phrase occurs, by definition.
UNIQUE_PHRASE_LOCATION_COUNT = 1


class PhraseIndex:
    def __init__(self, length: int):
        self.length = length
        # Inner dicts act as insertion-ordered sets of Locations.
        self._map: dict[str, dict[Location, None]] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_occurrences(cls, length: int, occurrences: Iterable[PhraseOccurrence]) -> PhraseIndex:
        index = cls(length)
        for occ in occurrences:
            index.add(occ.text, occ.location)
        return index

    def add(self, text: str, location: Location) -> None:
        with self._lock:
            locations = self._map.get(text)
            if locations is None:
                self._map[text] = {location: None}
            else:
                locations[location] = None

    def add_all(self, pairs: Iterable[tuple[str, Location]]) -> None:
        """Record a batch of (text, location) pairs under a single lock acquisition."""
        with self._lock:
            for text, location in pairs:
                self._map.setdefault(text, {})[location] = None

    def __contains__(self, text: object) -> bool:
        return text in self._map

    def __len__(self) -> int:
        return len(self._map)

    def __iter__(self) -> Iterator[str]:
        return iter(self._map)

    def phrases(self) -> frozenset[str]:
        return frozenset(self._map)

    def locations(self, text: str) -> list[Location]:
        return list(self._map.get(text, ()))

    def count(self, text: str) -> int:
        return len(self._map.get(text, ()))

    def occurrences(self) -> Iterator[PhraseOccurrence]:
        for text, locations in self._map.items():
            for location in locations:
                yield PhraseOccurrence(text=text, location=location, length=self.length)

    def occurrence_count(self) -> int:
        return sum(len(locs) for locs in self._map.values())

    def is_empty(self) -> bool:
        return not self._map

    def remove_uniques(self) -> int:
        """Drop every phrase with fewer than two Locations; return how many were dropped."""
        with self._lock:
            before = len(self._map)
            self._map = {
                text: locs
                for text, locs in self._map.items()
                if len(locs) > UNIQUE_PHRASE_LOCATION_COUNT
            }
            removed = before - len(self._map)
        logger.info("Removed %d non-repeated %d-word phrases", removed, self.length)
        return removed

    def repeated(self) -> PhraseIndex:
        """Return a new index holding only the phrases with at least two Locations."""
        result = PhraseIndex(self.length)
        with self._lock:
            result._map = {
                text: dict(locs)
                for text, locs in self._map.items()
                if len(locs) > UNIQUE_PHRASE_LOCATION_COUNT
            }
        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PhraseIndex):
            return NotImplemented
        return self.length == other.length and {
            t: set(l) for t, l in self._map.items()
        } == {t: set(l) for t, l in other._map.items()}

    def __repr__(self) -> str:
        return f"PhraseIndex(length={self.length}, phrases={len(self._map)})"
