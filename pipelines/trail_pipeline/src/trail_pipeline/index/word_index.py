from __future__ import annotations

from collections.abc import Iterable, Iterator

from phrasetrail_core.errors.types import CorpusInputError
from phrasetrail_core.models.location import Chapter, Location
from phrasetrail_core.text import join_words


class WordIndex:
    """Read-only view of every chapter's word sequence, keyed by chapter identifier."""

    def __init__(self, chapters: Iterable[Chapter]):
        self._chapters: dict[str, Chapter] = {}
        for chapter in chapters:
            if chapter.chapter_id in self._chapters:
                raise CorpusInputError("Duplicate chapter identifier", item=chapter.chapter_id)
            self._chapters[chapter.chapter_id] = chapter

    def __len__(self) -> int:
        return len(self._chapters)

    def __contains__(self, chapter_id: object) -> bool:
        return chapter_id in self._chapters

    def __getitem__(self, chapter_id: str) -> Chapter:
        return self._chapters[chapter_id]

    def __iter__(self) -> Iterator[Chapter]:
        return iter(self._chapters.values())

    def chapter_ids(self) -> list[str]:
        return list(self._chapters)

    def word_count(self) -> int:
        return sum(len(c) for c in self._chapters.values())

    @staticmethod
    def windows(chapter: Chapter, length: int) -> Iterator[tuple[str, Location]]:
        """
        Slide a `length`-word window over one chapter.

        Windows never cross the chapter's end; a chapter shorter than
        `length` yields nothing.
        """
        if length < 1:
            raise ValueError(f"Phrase length must be positive, got {length}")
        words = chapter.words
        for start in range(len(words) - length + 1):
            yield join_words(words[start : start + length]), chapter.location(start)

    def phrase_at(self, location: Location, length: int) -> str:
        chapter = self._chapters[location.chapter]
        return join_words(chapter.words_at(location.index, length))
