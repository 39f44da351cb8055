from __future__ import annotations

from collections.abc import Iterator

from phrasetrail_core.errors.types import InvariantViolation
from phrasetrail_core.models.phrase import PhraseOccurrence
from trail_pipeline.index.phrase_index import PhraseIndex


class ChapterIndex:
    """
    Chapter identifier to that chapter's occurrences of one phrase length,
    sorted by word index, with O(1) lookup by starting index.
    """

    def __init__(self, length: int):
        self.length = length
        self._by_chapter: dict[str, dict[int, PhraseOccurrence]] = {}

    @classmethod
    def from_phrase_index(cls, phrases: PhraseIndex) -> ChapterIndex:
        result = cls(phrases.length)
        for occ in phrases.occurrences():
            result.add(occ)
        return result

    def add(self, occurrence: PhraseOccurrence) -> None:
        slots = self._by_chapter.setdefault(occurrence.chapter, {})
        existing = slots.get(occurrence.index)
        if existing is not None and existing.text != occurrence.text:
            # One window per start index per length; two texts there is corruption.
            raise InvariantViolation(
                f"Two different {self.length}-word phrases start at the same position: "
                f'"{existing.text}" and "{occurrence.text}"',
                chapter=occurrence.chapter,
                index=occurrence.index,
            )
        slots[occurrence.index] = occurrence

    def __contains__(self, chapter: object) -> bool:
        return chapter in self._by_chapter

    def __len__(self) -> int:
        return len(self._by_chapter)

    def chapters(self) -> list[str]:
        return list(self._by_chapter)

    def occurrences(self, chapter: str) -> list[PhraseOccurrence]:
        slots = self._by_chapter.get(chapter, {})
        return [slots[i] for i in sorted(slots)]

    def at(self, chapter: str, index: int) -> PhraseOccurrence | None:
        slots = self._by_chapter.get(chapter)
        if slots is None:
            return None
        return slots.get(index)

    def items(self) -> Iterator[tuple[str, list[PhraseOccurrence]]]:
        for chapter in self._by_chapter:
            yield chapter, self.occurrences(chapter)
