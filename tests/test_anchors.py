"""Tests for anchor graph construction."""

import pytest

from phrasetrail_core.errors.types import CorpusInputError, InvariantViolation
from phrasetrail_core.models.location import Location
from phrasetrail_core.models.phrase import AnchorLink, PhraseOccurrence
from trail_pipeline.index.phrase_index import PhraseIndex
from trail_pipeline.ordering.trail import Trail
from trail_pipeline.stages.anchors import (
    PhraseCycle,
    anchor_links_for_indexes,
    build_anchor_links,
    links_by_chapter,
    links_for_splicing,
)


def _occ(text, chapter, index):
    return PhraseOccurrence.of(text, Location(chapter, index))


def _follow(links, start, steps):
    by_source = {(link.phrase, link.source): link.target for link in links}
    phrase, location = start
    for _ in range(steps):
        location = by_source[(phrase, location)]
    return location


# ---------------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------------

class TestBuildAnchorLinks:
    def test_small_corpus_links(self):
        occurrences = [_occ("w2 w3", "A", 1), _occ("w2 w3", "A", 3), _occ("w2 w3", "B", 0)]
        links = build_anchor_links(occurrences, Trail(["A", "B"]))
        assert [(str(l.source), str(l.target)) for l in links] == [
            ("1;A", "3;A"),
            ("3;A", "0;B"),
            ("0;B", "1;A"),
        ]

    def test_trail_order_decides_successor(self):
        occurrences = [_occ("x y", "A", 0), _occ("x y", "B", 0), _occ("x y", "C", 0)]
        links = build_anchor_links(occurrences, Trail(["C", "A", "B"]))
        targets = {l.source.chapter: l.target.chapter for l in links}
        assert targets == {"C": "A", "A": "B", "B": "C"}

    def test_one_link_per_occurrence_and_cycle_closes(self):
        occurrences = [_occ("p q", c, i) for c in ("A", "B", "C") for i in (2, 9)]
        occurrences += [_occ("r", "B", 4), _occ("r", "C", 1)]
        links = build_anchor_links(occurrences, Trail(["A", "B", "C"]), max_workers=2)

        assert len(links) == len(occurrences)
        sources = [(l.phrase, l.source) for l in links]
        assert len(set(sources)) == len(sources)
        assert _follow(links, ("p q", Location("B", 9)), 6) == Location("B", 9)
        assert _follow(links, ("r", Location("C", 1)), 2) == Location("C", 1)

    def test_targets_are_distinct_within_a_phrase(self):
        occurrences = [_occ("p q", c, i) for c in ("A", "B") for i in (0, 5, 8)]
        links = build_anchor_links(occurrences, Trail(["A", "B"]))
        targets = [l.target for l in links]
        assert len(set(targets)) == len(targets)
        assert {l.target for l in links} == {o.location for o in occurrences}

    def test_longer_phrase_first_at_shared_source(self):
        occurrences = [
            _occ("a", "A", 0),
            _occ("a", "B", 3),
            _occ("a b c", "A", 0),
            _occ("a b c", "B", 0),
        ]
        links = build_anchor_links(occurrences, Trail(["A", "B"]))
        assert [l.phrase for l in links if l.source == Location("A", 0)] == ["a b c", "a"]

    def test_chapter_missing_from_trail(self):
        with pytest.raises(CorpusInputError):
            build_anchor_links([_occ("x", "A", 0), _occ("x", "Z", 0)], Trail(["A"]))

    def test_anchor_links_for_indexes(self):
        final = {
            2: PhraseIndex.from_occurrences(2, [_occ("w2 w3", "A", 1), _occ("w2 w3", "B", 0)]),
            1: PhraseIndex(1),
        }
        links = anchor_links_for_indexes(final, Trail(["A", "B"]))
        assert links == [
            AnchorLink(phrase="w2 w3", source=Location("A", 1), target=Location("B", 0)),
            AnchorLink(phrase="w2 w3", source=Location("B", 0), target=Location("A", 1)),
        ]


# ---------------------------------------------------------------------------
# Phrase cycles
# ---------------------------------------------------------------------------

class TestPhraseCycle:
    def test_after_wraps(self):
        cycle = PhraseCycle("x", [Location("B", 0), Location("A", 4)], Trail(["A", "B"]))
        assert cycle.locations == [Location("A", 4), Location("B", 0)]
        assert cycle.after(Location("B", 0)) == Location("A", 4)

    def test_location_not_in_group(self):
        cycle = PhraseCycle("x", [Location("A", 4), Location("B", 0)], Trail(["A", "B"]))
        with pytest.raises(InvariantViolation):
            cycle.after(Location("A", 5))


# ---------------------------------------------------------------------------
# Grouping helpers
# ---------------------------------------------------------------------------

class TestLinkGrouping:
    LINKS = [
        AnchorLink(phrase="a b", source=Location("B", 7), target=Location("A", 0)),
        AnchorLink(phrase="a b c", source=Location("A", 0), target=Location("B", 2)),
        AnchorLink(phrase="a b", source=Location("A", 0), target=Location("B", 7)),
        AnchorLink(phrase="z", source=Location("B", 2), target=Location("A", 0)),
    ]

    def test_links_by_chapter(self):
        grouped = links_by_chapter(self.LINKS)
        assert sorted(grouped) == ["A", "B"]
        assert [l.phrase for l in grouped["A"]] == ["a b c", "a b"]
        assert [l.source.index for l in grouped["B"]] == [2, 7]

    def test_links_for_splicing_threshold(self):
        spliced = links_for_splicing(self.LINKS, 2)
        assert [(l.phrase, str(l.source)) for l in spliced] == [
            ("a b c", "0;A"),
            ("a b", "0;A"),
            ("a b", "7;B"),
        ]
        assert links_for_splicing(self.LINKS, 4) == []
