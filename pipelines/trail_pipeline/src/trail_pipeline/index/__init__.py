"""Corpus indexing structures."""

from trail_pipeline.index.word_index import WordIndex
from trail_pipeline.index.phrase_index import UNIQUE_PHRASE_LOCATION_COUNT, PhraseIndex
from trail_pipeline.index.chapter_index import ChapterIndex

__all__ = ["WordIndex", "PhraseIndex", "ChapterIndex", "UNIQUE_PHRASE_LOCATION_COUNT"]
