"""
Repeated-phrase mining.

For each phrase length L in ascending order, every L-word window of every
chapter is a candidate. A candidate is only recorded when its (L-1)-word
prefix repeated at the previous length: a phrase whose prefix occurs once
cannot occur twice itself. The repeated phrase texts found at L become the
pruning oracle for L+1.

Lengths are strict stage boundaries. Within one length, chapters are
scanned concurrently and write into a shared, lock-guarded PhraseIndex.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from concurrent.futures import Executor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass

from phrasetrail_core.models.location import Chapter, Location
from phrasetrail_core.text import ZERO_WORD_PHRASE, reduced_phrase
from trail_pipeline.index.phrase_index import PhraseIndex
from trail_pipeline.index.word_index import WordIndex

logger = logging.getLogger(__name__)

MIN_PHRASE_SIZE = 1


@dataclass
class MiningConfig:
    """Length range and parallelism for mining."""

    min_phrase_size: int = MIN_PHRASE_SIZE
    max_phrase_size: int | None = None
    max_workers: int = 4

    def __post_init__(self) -> None:
        if self.min_phrase_size < MIN_PHRASE_SIZE:
            raise ValueError(f"min_phrase_size ({self.min_phrase_size}) < {MIN_PHRASE_SIZE}")
        if self.max_phrase_size is not None and self.max_phrase_size < self.min_phrase_size:
            raise ValueError(
                f"max_phrase_size ({self.max_phrase_size}) < min_phrase_size ({self.min_phrase_size})"
            )
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}")


@dataclass(frozen=True)
class PruningOracle:
    """
    Phrase texts of the previous length known to repeat.

    The seed oracle holds only the zero-word phrase and admits every
    candidate, so the first mined length is scanned exhaustively.
    """

    phrases: frozenset[str]
    seed: bool = False

    @classmethod
    def seeded(cls) -> PruningOracle:
        return cls(phrases=frozenset({ZERO_WORD_PHRASE}), seed=True)

    @classmethod
    def from_index(cls, repeated: PhraseIndex) -> PruningOracle:
        return cls(phrases=repeated.phrases())

    def admits(self, text: str) -> bool:
        prefix = ZERO_WORD_PHRASE if self.seed else reduced_phrase(text)
        return prefix in self.phrases

    def __len__(self) -> int:
        return len(self.phrases)


def scan_chapter(chapter: Chapter, length: int, oracle: PruningOracle) -> list[tuple[str, Location]]:
    """Return the `length`-word windows of `chapter` whose prefix the oracle admits."""
    return [
        (text, location)
        for text, location in WordIndex.windows(chapter, length)
        if oracle.admits(text)
    ]


def mine_length(
    words: WordIndex,
    length: int,
    oracle: PruningOracle,
    executor: Executor,
) -> PhraseIndex:
    """
    Find every `length`-word phrase that occurs at two or more Locations.

    Blocks until every chapter has been scanned.
    """
    candidates = PhraseIndex(length)
    futures = [executor.submit(scan_chapter, chapter, length, oracle) for chapter in words]
    for future in as_completed(futures):
        candidates.add_all(future.result())

    logger.info("Got %d candidate %d-word phrases", len(candidates), length)
    candidates.remove_uniques()
    return candidates


def iter_repeated_phrases(words: WordIndex, config: MiningConfig | None = None) -> Iterator[PhraseIndex]:
    """
    Yield the repeated-phrase index for each length, shortest first.

    Stops after `max_phrase_size`, or at the first length with no
    repeats, whichever comes first. The empty length is not yielded.
    """
    config = config or MiningConfig()
    oracle = PruningOracle.seeded()
    length = config.min_phrase_size

    with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
        while config.max_phrase_size is None or length <= config.max_phrase_size:
            logger.info("Finding %d-word phrases", length)
            repeated = mine_length(words, length, oracle, executor)
            if repeated.is_empty():
                logger.info("No repeated %d-word phrases; stopping", length)
                return
            yield repeated
            oracle = PruningOracle.from_index(repeated)
            length += 1


def mine_repeated_phrases(words: WordIndex, config: MiningConfig | None = None) -> dict[int, PhraseIndex]:
    """Collect `iter_repeated_phrases` into a length-keyed dict."""
    return {index.length: index for index in iter_repeated_phrases(words, config)}
