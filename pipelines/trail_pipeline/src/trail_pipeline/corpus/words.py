from __future__ import annotations

import re

E_ACUTE = "é"
E_CIRCUMFLEX = "ê"

_WORD = re.compile(rf"[A-Za-z0-9'\-{E_ACUTE}{E_CIRCUMFLEX}]+")


def is_phrase_char(char: str) -> bool:
    return bool(_WORD.fullmatch(char))


def split_words(text: str) -> list[str]:
    """
    Deterministic word extraction from plain chapter text.

    A word is a maximal run of ASCII letters, digits, apostrophes,
    hyphens and the two accented e's; everything else separates words.
    Case is preserved.
    """
    return _WORD.findall(text)
