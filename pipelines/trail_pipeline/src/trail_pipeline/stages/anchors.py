"""
Anchor graph construction.

Every independent occurrence of a repeated phrase gets one link, to the
next occurrence of the same phrase in trail order; the last occurrence
links back to the first. Each phrase group is sorted once, so the cost is
O(k log k) per phrase with k occurrences.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable
from concurrent.futures import Executor, ThreadPoolExecutor

from phrasetrail_core.errors.types import InvariantViolation
from phrasetrail_core.models.location import Location
from phrasetrail_core.models.phrase import AnchorLink, PhraseOccurrence
from trail_pipeline.index.phrase_index import PhraseIndex
from trail_pipeline.ordering.trail import Trail

logger = logging.getLogger(__name__)


class PhraseCycle:
    """The occurrences of one phrase, in trail order, read as a ring."""

    def __init__(self, phrase: str, locations: Iterable[Location], trail: Trail):
        self.phrase = phrase
        self.locations: list[Location] = trail.sorted_locations(locations)
        self._position = {loc: i for i, loc in enumerate(self.locations)}

    def __len__(self) -> int:
        return len(self.locations)

    def after(self, location: Location) -> Location:
        """
        Return the occurrence following `location`, wrapping to the first.

        Raises:
            InvariantViolation: If `location` is not an occurrence of this phrase
        """
        position = self._position.get(location)
        if position is None:
            raise InvariantViolation(
                "Location is not present among the occurrences of its own phrase",
                phrase=self.phrase,
                chapter=location.chapter,
                index=location.index,
            )
        return self.locations[(position + 1) % len(self.locations)]


def group_by_phrase(occurrences: Iterable[PhraseOccurrence]) -> dict[str, list[Location]]:
    groups: dict[str, list[Location]] = defaultdict(list)
    for occ in occurrences:
        groups[occ.text].append(occ.location)
    return dict(groups)


def build_phrase_cycles(
    occurrences: Iterable[PhraseOccurrence],
    trail: Trail,
    *,
    executor: Executor | None = None,
) -> dict[str, PhraseCycle]:
    groups = group_by_phrase(occurrences)
    if executor is None:
        return {text: PhraseCycle(text, locs, trail) for text, locs in groups.items()}
    futures = {text: executor.submit(PhraseCycle, text, locs, trail) for text, locs in groups.items()}
    return {text: future.result() for text, future in futures.items()}


def link_occurrences(
    occurrences: Iterable[PhraseOccurrence],
    cycles: dict[str, PhraseCycle],
) -> list[AnchorLink]:
    links = []
    for occ in occurrences:
        cycle = cycles.get(occ.text)
        if cycle is None:
            raise InvariantViolation(
                "Occurrence has no phrase group",
                phrase=occ.text,
                chapter=occ.chapter,
                index=occ.index,
            )
        links.append(AnchorLink(phrase=occ.text, source=occ.location, target=cycle.after(occ.location)))
    return links


def build_anchor_links(
    occurrences: Iterable[PhraseOccurrence],
    trail: Trail,
    *,
    max_workers: int = 4,
) -> list[AnchorLink]:
    """
    Link every occurrence to the next occurrence of its phrase along `trail`.

    Args:
        occurrences: Final independent occurrences, any lengths mixed
        trail: Reading order; every occurrence's chapter must be on it
        max_workers: Pool width for sorting phrase groups

    Returns:
        Links ordered by source location along the trail, longer phrases
        first where two links share a source.
    """
    occurrences = list(occurrences)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        cycles = build_phrase_cycles(occurrences, trail, executor=executor)
    links = link_occurrences(occurrences, cycles)
    links.sort(key=lambda link: (trail.sort_key(link.source), -link.length, link.phrase))
    logger.info("Built %d anchor links for %d phrases", len(links), len(cycles))
    return links


def anchor_links_for_indexes(
    final: dict[int, PhraseIndex],
    trail: Trail,
    *,
    max_workers: int = 4,
) -> list[AnchorLink]:
    occurrences = (occ for index in final.values() for occ in index.occurrences())
    return build_anchor_links(occurrences, trail, max_workers=max_workers)


def links_by_chapter(links: Iterable[AnchorLink]) -> dict[str, list[AnchorLink]]:
    """Group links by source chapter, each group ordered by source index."""
    grouped: dict[str, list[AnchorLink]] = defaultdict(list)
    for link in links:
        grouped[link.source.chapter].append(link)
    for chapter_links in grouped.values():
        chapter_links.sort(key=lambda link: (link.source.index, -link.length, link.phrase))
    return dict(grouped)


def links_for_splicing(links: Iterable[AnchorLink], min_phrase_size: int) -> list[AnchorLink]:
    """Links whose phrase is long enough to be turned into an anchor, in source order."""
    return sorted(
        (link for link in links if link.length >= min_phrase_size),
        key=lambda link: (link.source.chapter, link.source.index, -link.length),
    )
