"""
Subsumption filtering.

An occurrence of a length-L phrase at word index i is dependent when a
repeated length-(L+1) phrase in the same chapter covers it: either the one
starting at i-1 (which must end with the shorter text) or the one starting
at i (which must begin with it). Dependent occurrences are only ever part
of a longer repetition and are not linked on their own.

Each length is always compared against the raw mined set of the next
length, never against that length's filtered output.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from enum import Enum

from phrasetrail_core.errors.types import ErrorType, InvariantViolation
from phrasetrail_core.models.phrase import PhraseOccurrence
from phrasetrail_core.text import WORD_SEPARATOR, short_form
from trail_pipeline.diagnostics import Diagnostics
from trail_pipeline.index.chapter_index import ChapterIndex
from trail_pipeline.index.phrase_index import PhraseIndex

logger = logging.getLogger(__name__)


class Dependence(str, Enum):
    INDEPENDENT = "independent"
    DEPENDENT = "dependent"
    SINGLE_SIDED = "single_sided"


def ends_with_phrase(longer: str, shorter: str) -> bool:
    return longer.endswith(WORD_SEPARATOR + shorter)


def starts_with_phrase(longer: str, shorter: str) -> bool:
    return longer.startswith(shorter + WORD_SEPARATOR)


def classify(
    occurrence: PhraseOccurrence,
    left: PhraseOccurrence | None,
    right: PhraseOccurrence | None,
) -> Dependence:
    """
    Decide whether `occurrence` stands on its own.

    Args:
        occurrence: The shorter occurrence at index i
        left: The longer occurrence starting at i-1, if any
        right: The longer occurrence starting at i, if any

    Raises:
        InvariantViolation: If both longer occurrences exist and neither
            contains `occurrence` where it should.
    """
    if left is None and right is None:
        return Dependence.INDEPENDENT

    left_contains = left is not None and ends_with_phrase(left.text, occurrence.text)
    right_contains = right is not None and starts_with_phrase(right.text, occurrence.text)
    if left_contains or right_contains:
        return Dependence.DEPENDENT

    if left is not None and right is not None:
        raise InvariantViolation(
            "Phrase is contained at its position in neither overlapping longer phrase: "
            f'left="{short_form(left.text)}" right="{short_form(right.text)}"',
            phrase=occurrence.text,
            chapter=occurrence.chapter,
            index=occurrence.index,
        )
    return Dependence.SINGLE_SIDED


def _independent_in_chapter(
    chapter: str,
    shorter: ChapterIndex,
    longer: ChapterIndex,
    diagnostics: Diagnostics | None,
) -> list[PhraseOccurrence]:
    occurrences = shorter.occurrences(chapter)
    if chapter not in longer:
        return occurrences

    kept: list[PhraseOccurrence] = []
    for occ in occurrences:
        left = longer.at(chapter, occ.index - 1) if occ.index > 0 else None
        right = longer.at(chapter, occ.index)
        verdict = classify(occ, left, right)
        if verdict is Dependence.INDEPENDENT:
            kept.append(occ)
        elif verdict is Dependence.SINGLE_SIDED and diagnostics is not None:
            overlap = left if left is not None else right
            diagnostics.report(
                ErrorType.SINGLE_SIDED_CONTAINMENT,
                stage="subsumption",
                item=str(occ.location),
                message=(
                    f'Excluding "{short_form(occ.text)}": overlapping longer phrase '
                    f'"{short_form(overlap.text)}" does not contain it'
                ),
                length=occ.length,
            )
    return kept


def independent_occurrences(
    shorter: PhraseIndex,
    longer: PhraseIndex | None,
    *,
    executor: Executor | None = None,
    diagnostics: Diagnostics | None = None,
) -> PhraseIndex:
    """
    Return the occurrences in `shorter` not explained by an occurrence in `longer`.

    Args:
        shorter: Raw repeated phrases of length L
        longer: Raw repeated phrases of length L+1, or None when there are none
        executor: Pool for per-chapter checks; a private pool is used if omitted
        diagnostics: Sink for single-sided containment exclusions

    Returns:
        A new PhraseIndex of length L. Phrases may have dropped below two
        Locations; see `prune_unique_independents`.
    """
    if longer is not None and longer.length != shorter.length + 1:
        raise ValueError(
            f"Expected a {shorter.length + 1}-word index to filter {shorter.length}-word phrases, "
            f"got {longer.length}"
        )
    if executor is None:
        with ThreadPoolExecutor() as pool:
            return independent_occurrences(shorter, longer, executor=pool, diagnostics=diagnostics)

    by_chapter = ChapterIndex.from_phrase_index(shorter)
    longer_by_chapter = (
        ChapterIndex.from_phrase_index(longer) if longer is not None else ChapterIndex(shorter.length + 1)
    )

    result = PhraseIndex(shorter.length)
    futures = [
        executor.submit(_independent_in_chapter, chapter, by_chapter, longer_by_chapter, diagnostics)
        for chapter in by_chapter.chapters()
    ]
    for future in futures:
        result.add_all((occ.text, occ.location) for occ in future.result())

    logger.info(
        "Kept %d of %d %d-word occurrences as independent",
        result.occurrence_count(),
        shorter.occurrence_count(),
        shorter.length,
    )
    return result


def remove_dependent_phrases(
    raw: dict[int, PhraseIndex],
    *,
    max_workers: int = 4,
    diagnostics: Diagnostics | None = None,
) -> dict[int, PhraseIndex]:
    """
    Filter every mined length, longest first.

    The longest length present has nothing longer to be subsumed by, so
    all of its occurrences are independent.
    """
    independent: dict[int, PhraseIndex] = {}
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        for length in sorted(raw, reverse=True):
            independent[length] = independent_occurrences(
                raw[length],
                raw.get(length + 1),
                executor=executor,
                diagnostics=diagnostics,
            )
    return dict(sorted(independent.items()))


def prune_unique_independents(independent: dict[int, PhraseIndex]) -> dict[int, PhraseIndex]:
    """Drop, per length, phrases left with fewer than two independent occurrences."""
    return {length: index.repeated() for length, index in independent.items()}
