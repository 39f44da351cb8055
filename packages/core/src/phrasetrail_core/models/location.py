"""
Location and Chapter - positions in the corpus and the word sequences they index.

A Location carries no intrinsic order; sequencing is the Trail's job.
"""

from __future__ import annotations

from dataclasses import dataclass

# Separates the word index from the chapter identifier in serialized form.
ELEMENT_DELIM = ";"


@dataclass(frozen=True)
class Location:
    chapter: str
    index: int

    def __str__(self) -> str:
        return f"{self.index}{ELEMENT_DELIM}{self.chapter}"

    @classmethod
    def parse(cls, text: str) -> Location:
        """
        Parse the `<word-index>;<chapter-identifier>` form written by `__str__`.

        Raises:
            ValueError: If the text has no delimiter, a non-integer index,
                a negative index or an empty chapter.
        """
        index_text, sep, chapter = text.partition(ELEMENT_DELIM)
        if not sep or not chapter:
            raise ValueError(f"Not a location: {text!r}")
        index = int(index_text)
        if index < 0:
            raise ValueError(f"Negative word index in location: {text!r}")
        return cls(chapter=chapter, index=index)


@dataclass(frozen=True)
class Chapter:
    """A chapter's identifier and its immutable word sequence."""

    chapter_id: str
    words: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.words)

    def words_at(self, index: int, length: int) -> tuple[str, ...]:
        return self.words[index : index + length]

    def location(self, index: int) -> Location:
        return Location(chapter=self.chapter_id, index=index)
