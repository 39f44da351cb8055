"""Tests for phrase files, anchor data files and the navigation table."""

import pytest

from phrasetrail_core.errors.types import CorpusInputError, ErrorType
from phrasetrail_core.models.location import Location
from phrasetrail_core.models.phrase import AnchorLink
from trail_pipeline.diagnostics import Diagnostics
from trail_pipeline.index.phrase_index import PhraseIndex
from trail_pipeline.ordering.navigation import ChapterNeighbours
from trail_pipeline.persist.anchor_files import (
    anchor_file_path,
    clear_anchor_files,
    read_anchor_file,
    write_anchor_files,
    write_navigation_file,
)
from trail_pipeline.persist.phrase_files import (
    available_lengths,
    clear_phrase_files,
    phrase_file_path,
    read_phrase_index,
    read_phrase_indexes,
    write_phrase_index,
    write_phrase_indexes,
)


def _index(length, *entries):
    index = PhraseIndex(length)
    for text, chapter, position in entries:
        index.add(text, Location(chapter, position))
    return index


# ---------------------------------------------------------------------------
# Phrase files
# ---------------------------------------------------------------------------

class TestPhraseFiles:
    def test_line_format(self, tmp_path):
        index = _index(2, ("w2 w3", "B", 0), ("w2 w3", "A", 3), ("w2 w3", "A", 1))
        path = write_phrase_index(tmp_path, index)
        assert path == tmp_path / "phrases_2.txt"
        assert path.read_text(encoding="utf-8") == "w2 w3\t1;A\t3;A\t0;B\n"

    def test_round_trip(self, tmp_path):
        indexes = {
            1: _index(1, ("red", "A", 3), ("red", "B", 9)),
            2: _index(2, ("red fox", "A", 0), ("red fox", "B", 0), ("old fox", "C", 4), ("old fox", "A", 7)),
        }
        write_phrase_indexes(tmp_path, indexes)
        assert available_lengths(tmp_path) == [1, 2]
        assert read_phrase_indexes(tmp_path) == indexes

    def test_no_leftover_temporary_files(self, tmp_path):
        write_phrase_index(tmp_path, _index(1, ("a", "A", 0), ("a", "B", 0)))
        assert [p.name for p in tmp_path.iterdir()] == ["phrases_1.txt"]

    def test_malformed_lines_are_skipped(self, tmp_path):
        phrase_file_path(tmp_path, 2).write_text(
            "good one\t0;A\t5;B\n"
            "three words here\t0;A\n"
            "no locations\n"
            "bad loc\tA;0\n"
            "\n",
            encoding="utf-8",
        )
        diagnostics = Diagnostics()
        index = read_phrase_index(tmp_path, 2, diagnostics=diagnostics)
        assert index.phrases() == frozenset({"good one"})
        assert len(diagnostics.of_type(ErrorType.MALFORMED_ROW)) == 3

    def test_missing_file(self, tmp_path):
        with pytest.raises(CorpusInputError):
            read_phrase_index(tmp_path, 4)

    def test_no_files_at_all(self, tmp_path):
        with pytest.raises(CorpusInputError):
            read_phrase_indexes(tmp_path)

    def test_rewrite_replaces_longer_lengths(self, tmp_path):
        deep = {}
        for n in (1, 2, 3):
            text = " ".join(["x"] * n)
            deep[n] = _index(n, (text, "A", 0), (text, "B", 0))
        write_phrase_indexes(tmp_path, deep)
        write_phrase_indexes(tmp_path, {1: _index(1, ("y", "A", 0), ("y", "B", 0))})
        assert available_lengths(tmp_path) == [1]
        assert read_phrase_indexes(tmp_path)[1].phrases() == frozenset({"y"})

    def test_clear_phrase_files_keeps_other_files(self, tmp_path):
        write_phrase_index(tmp_path, _index(2, ("a b", "A", 0), ("a b", "B", 0)))
        (tmp_path / "notes.txt").write_text("keep", encoding="utf-8")
        assert clear_phrase_files(tmp_path) == 1
        assert [p.name for p in tmp_path.iterdir()] == ["notes.txt"]

    def test_gap_in_lengths_is_fatal(self, tmp_path):
        write_phrase_index(tmp_path, _index(1, ("a", "A", 0), ("a", "B", 0)))
        write_phrase_index(tmp_path, _index(3, ("a b c", "A", 0), ("a b c", "B", 0)))
        with pytest.raises(CorpusInputError, match="phrases_2.txt"):
            read_phrase_indexes(tmp_path)

    def test_explicit_lengths_skip_the_range_check(self, tmp_path):
        write_phrase_index(tmp_path, _index(1, ("a", "A", 0), ("a", "B", 0)))
        write_phrase_index(tmp_path, _index(3, ("a b c", "A", 0), ("a b c", "B", 0)))
        assert sorted(read_phrase_indexes(tmp_path, [3])) == [3]

    def test_available_lengths_ignores_other_files(self, tmp_path):
        (tmp_path / "phrases_10.txt").write_text("", encoding="utf-8")
        (tmp_path / "phrases_3.txt").write_text("", encoding="utf-8")
        (tmp_path / "notes.txt").write_text("", encoding="utf-8")
        assert available_lengths(tmp_path) == [3, 10]
        assert available_lengths(tmp_path / "absent") == []


# ---------------------------------------------------------------------------
# Anchor data files
# ---------------------------------------------------------------------------

class TestAnchorFiles:
    LINKS = [
        AnchorLink(phrase="w2 w3", source=Location("A", 3), target=Location("B", 0)),
        AnchorLink(phrase="w2 w3", source=Location("A", 1), target=Location("A", 3)),
        AnchorLink(phrase="w2 w3", source=Location("B", 0), target=Location("A", 1)),
        AnchorLink(phrase="w4", source=Location("A", 5), target=Location("C", 2)),
    ]

    def test_one_file_per_source_chapter(self, tmp_path):
        paths = write_anchor_files(tmp_path, self.LINKS)
        assert sorted(p.name for p in paths) == ["A.anchordata.txt", "B.anchordata.txt"]
        assert anchor_file_path(tmp_path, "A").read_text(encoding="utf-8") == (
            "w2 w3\t1\t3;A\n"
            "w2 w3\t3\t0;B\n"
            "w4\t5\t2;C\n"
        )

    def test_round_trip_with_threshold(self, tmp_path):
        write_anchor_files(tmp_path, self.LINKS)
        path = anchor_file_path(tmp_path, "A")
        assert read_anchor_file(path) == sorted(
            [link for link in self.LINKS if link.source.chapter == "A"],
            key=lambda link: link.source.index,
        )
        assert [l.phrase for l in read_anchor_file(path, min_phrase_size=2)] == ["w2 w3", "w2 w3"]

    def test_rewrite_drops_stale_chapters(self, tmp_path):
        write_anchor_files(tmp_path, self.LINKS)
        (tmp_path / "notes.txt").write_text("keep", encoding="utf-8")
        write_anchor_files(tmp_path, [link for link in self.LINKS if link.source.chapter == "B"])
        assert sorted(p.name for p in tmp_path.iterdir()) == ["B.anchordata.txt", "notes.txt"]
        assert clear_anchor_files(tmp_path) == 1
        assert clear_anchor_files(tmp_path / "absent") == 0

    def test_malformed_anchor_lines(self, tmp_path):
        path = anchor_file_path(tmp_path, "A")
        path.write_text("ok phrase\t0\t4;B\nmissing column\t1\nbad\tx\t1;B\n", encoding="utf-8")
        diagnostics = Diagnostics()
        links = read_anchor_file(path, diagnostics=diagnostics)
        assert [l.phrase for l in links] == ["ok phrase"]
        assert len(diagnostics.of_type(ErrorType.MALFORMED_ROW)) == 2

    def test_missing_anchor_file(self, tmp_path):
        with pytest.raises(CorpusInputError):
            read_anchor_file(anchor_file_path(tmp_path, "A"))


# ---------------------------------------------------------------------------
# Navigation table
# ---------------------------------------------------------------------------

class TestNavigationFile:
    def test_rows(self, tmp_path):
        path = write_navigation_file(
            tmp_path / "out" / "navigation.tsv",
            [
                ChapterNeighbours("A", previous=None, next="C"),
                ChapterNeighbours("C", previous="A", next=None),
            ],
        )
        assert path.read_text(encoding="utf-8") == "A\t\tC\nC\tA\t\n"
