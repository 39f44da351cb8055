from __future__ import annotations

from collections.abc import Sequence

from phrasetrail_core.settings import settings

WORD_SEPARATOR = settings.word_separator

# Prefix of every one-word phrase; always treated as repeated.
ZERO_WORD_PHRASE = ""


def join_words(words: Sequence[str]) -> str:
    return WORD_SEPARATOR.join(words)


def phrase_length(text: str) -> int:
    if text == ZERO_WORD_PHRASE:
        return 0
    return text.count(WORD_SEPARATOR) + 1


def reduced_phrase(text: str) -> str:
    """Return `text` without its final word, or the zero-word phrase for one-word texts."""
    index = text.rfind(WORD_SEPARATOR)
    return ZERO_WORD_PHRASE if index < 0 else text[:index]


def short_form(text: str | None) -> str:
    if text is None:
        return "<none>"
    if len(text) < 60:
        return text
    return f"{text[:25]} ... {text[-26:]}"
