"""Tests for the Trail ordering structure and trail files."""

import itertools

import pytest

from phrasetrail_core.errors.types import CorpusInputError, ErrorType
from phrasetrail_core.models.adjacency import AdjacencyEntry
from phrasetrail_core.models.location import Location
from trail_pipeline.diagnostics import Diagnostics
from trail_pipeline.ordering.trail import Trail, natural_chapter_key
from trail_pipeline.ordering.trail_file import canonical_chapter_id, load_trail_file, parse_trail_rows


# ---------------------------------------------------------------------------
# Ring structure
# ---------------------------------------------------------------------------

class TestTrailRing:
    def test_rank_follows_given_order(self):
        trail = Trail(["B", "A", "C"])
        assert [trail.rank(c) for c in ("B", "A", "C")] == [0, 1, 2]

    def test_successor_and_predecessor_wrap(self):
        trail = Trail(["A", "B", "C"])
        assert trail.successor("A") == "B"
        assert trail.successor("C") == "A"
        assert trail.predecessor("A") == "C"
        assert trail.predecessor("B") == "A"

    def test_single_chapter_ring(self):
        trail = Trail(["A"])
        assert trail.successor("A") == "A"
        assert trail.predecessor("A") == "A"

    def test_unknown_chapter(self):
        with pytest.raises(CorpusInputError):
            Trail(["A"]).rank("Z")

    def test_duplicate_chapter(self):
        with pytest.raises(CorpusInputError):
            Trail(["A", "B", "A"])

    def test_walking_successors_visits_every_chapter_once(self):
        trail = Trail(["c1", "c2", "c3", "c4"])
        seen = []
        chapter = "c1"
        for _ in range(len(trail)):
            seen.append(chapter)
            chapter = trail.successor(chapter)
        assert chapter == "c1"
        assert sorted(seen) == ["c1", "c2", "c3", "c4"]


# ---------------------------------------------------------------------------
# Location order
# ---------------------------------------------------------------------------

class TestTrailCompare:
    TRAIL = Trail(["B", "A"])
    LOCATIONS = [
        Location("A", 0),
        Location("A", 7),
        Location("B", 3),
        Location("B", 10),
    ]

    def test_chapter_rank_before_index(self):
        assert self.TRAIL.compare(Location("B", 10), Location("A", 0)) < 0
        assert self.TRAIL.compare(Location("A", 0), Location("A", 7)) < 0

    def test_ties_only_for_identical_locations(self):
        for a, b in itertools.product(self.LOCATIONS, repeat=2):
            assert (self.TRAIL.compare(a, b) == 0) == (a == b)

    def test_antisymmetric(self):
        for a, b in itertools.product(self.LOCATIONS, repeat=2):
            assert self.TRAIL.compare(a, b) == -self.TRAIL.compare(b, a)

    def test_transitive(self):
        for a, b, c in itertools.product(self.LOCATIONS, repeat=3):
            if self.TRAIL.compare(a, b) < 0 and self.TRAIL.compare(b, c) < 0:
                assert self.TRAIL.compare(a, c) < 0

    def test_sorted_locations(self):
        assert self.TRAIL.sorted_locations(self.LOCATIONS) == [
            Location("B", 3),
            Location("B", 10),
            Location("A", 0),
            Location("A", 7),
        ]


# ---------------------------------------------------------------------------
# Construction modes
# ---------------------------------------------------------------------------

class TestTrailConstruction:
    def test_natural_order(self):
        trail = Trail.from_chapters(["BOOK_10", "BOOK_2", "AAA_1", "BOOK_1"])
        assert trail.chapters == ("AAA_1", "BOOK_1", "BOOK_2", "BOOK_10")

    def test_given_order_without_key(self):
        trail = Trail.from_chapters(["z", "a"], key=None)
        assert trail.chapters == ("z", "a")

    def test_natural_key_compares_digits_numerically(self):
        assert natural_chapter_key("ch9") < natural_chapter_key("ch10")

    def test_from_entries_keeps_row_order_and_raw_neighbours(self):
        entries = [
            AdjacencyEntry("B", previous=None, next="missing"),
            AdjacencyEntry("A", previous="B", next=None),
        ]
        trail = Trail.from_entries(entries)
        assert trail.chapters == ("B", "A")
        assert trail.adjacency() == entries
        # The ring itself is always well formed.
        assert trail.successor("A") == "B"

    def test_default_adjacency_is_the_ring(self):
        trail = Trail(["A", "B"])
        assert trail.adjacency() == [
            AdjacencyEntry("A", previous="B", next="B"),
            AdjacencyEntry("B", previous="A", next="A"),
        ]


# ---------------------------------------------------------------------------
# Trail files
# ---------------------------------------------------------------------------

class TestTrailFile:
    def test_canonical_chapter_id(self):
        assert canonical_chapter_id("chapters/AGOT_3.html") == "AGOT_3"
        assert canonical_chapter_id("AGOT_3.txt") == "AGOT_3"
        assert canonical_chapter_id("AGOT_3") == "AGOT_3"
        assert canonical_chapter_id("  ") == ""

    def test_parse_rows(self):
        rows = ["\tA\tB", "A\tB.html\tC\tignored", "", "B\tC\t"]
        entries = parse_trail_rows(rows)
        assert entries == [
            AdjacencyEntry("A", previous=None, next="B"),
            AdjacencyEntry("B", previous="A", next="C"),
            AdjacencyEntry("C", previous="B", next=None),
        ]

    def test_malformed_and_duplicate_rows_are_skipped(self):
        diagnostics = Diagnostics()
        rows = ["A\tB", "\t\tC", "Z\tA\tB", "Y\tA\tQ", "A\tB\tC"]
        entries = parse_trail_rows(rows, source="t.tsv", diagnostics=diagnostics)
        assert [e.chapter for e in entries] == ["A", "B"]
        assert entries[0] == AdjacencyEntry("A", previous="Z", next="B")
        assert len(diagnostics.of_type(ErrorType.MALFORMED_ROW)) == 2
        duplicates = diagnostics.of_type(ErrorType.DUPLICATE_ENTRY)
        assert [d.item for d in duplicates] == ["t.tsv:4"]

    def test_load_trail_file(self, tmp_path):
        path = tmp_path / "trail.tsv"
        path.write_text("C\tA\tB\nA\tB\tC\nB\tC\tA\n", encoding="utf-8")
        trail = Trail.from_entries(load_trail_file(path))
        assert trail.chapters == ("A", "B", "C")

    def test_missing_trail_file_is_fatal(self, tmp_path):
        with pytest.raises(CorpusInputError):
            load_trail_file(tmp_path / "nope.tsv")
