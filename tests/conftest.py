import pytest

from phrasetrail_core.models.location import Chapter


def make_chapter(chapter_id: str, text: str) -> Chapter:
    return Chapter(chapter_id=chapter_id, words=tuple(text.split()))


@pytest.fixture
def small_corpus():
    """Two chapters sharing the phrase "w2 w3" three times."""
    return [
        make_chapter("A", "w1 w2 w3 w2 w3 w4"),
        make_chapter("B", "w2 w3"),
    ]


@pytest.fixture
def nested_corpus():
    """Two identical chapters: every shorter repeat sits inside "a b c"."""
    return [
        make_chapter("A", "a b c"),
        make_chapter("B", "a b c"),
    ]
