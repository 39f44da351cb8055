"""Plain-text corpus loading."""

from trail_pipeline.corpus.loader import load_chapter, load_corpus
from trail_pipeline.corpus.words import is_phrase_char, split_words

__all__ = ["load_chapter", "load_corpus", "is_phrase_char", "split_words"]
