"""
Per-length phrase files.

Each line holds a phrase followed by its Locations, tab-delimited:

    the king in the north<TAB>12;chapter_07<TAB>48;chapter_31
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from phrasetrail_core.errors.types import CorpusInputError, ErrorType
from phrasetrail_core.models.location import Location
from phrasetrail_core.settings import settings as core_settings
from phrasetrail_core.text import phrase_length
from trail_pipeline.diagnostics import Diagnostics
from trail_pipeline.index.phrase_index import PhraseIndex
from trail_pipeline.persist._io import write_text_replacing

logger = logging.getLogger(__name__)

LOCATION_DELIM = "\t"
NEW_LINE = "\n"

_FILENAME = re.compile(r"^phrases_(\d+)\.txt$")


def phrase_file_path(folder: Path, length: int) -> Path:
    return folder / f"phrases_{length}.txt"


def available_lengths(folder: Path) -> list[int]:
    """Phrase lengths with a file in `folder`, ascending."""
    if not folder.is_dir():
        return []
    lengths = []
    for path in folder.iterdir():
        match = _FILENAME.match(path.name)
        if match and path.is_file():
            lengths.append(int(match.group(1)))
    return sorted(lengths)


def format_phrase_line(text: str, locations: list[Location]) -> str:
    ordered = sorted(locations, key=lambda loc: (loc.chapter, loc.index))
    return LOCATION_DELIM.join([text, *(str(loc) for loc in ordered)])


def clear_phrase_files(folder: Path) -> int:
    """Delete every phrase file in `folder`; return how many were removed."""
    removed = 0
    for length in available_lengths(folder):
        phrase_file_path(folder, length).unlink()
        removed += 1
    if removed:
        logger.info("Removed %d phrase files from %s", removed, folder)
    return removed


def write_phrase_index(folder: Path, index: PhraseIndex) -> Path:
    lines = [format_phrase_line(text, index.locations(text)) for text in sorted(index)]
    path = write_text_replacing(
        phrase_file_path(folder, index.length),
        "".join(line + NEW_LINE for line in lines),
    )
    logger.info("Wrote %d %d-word phrases to %s", len(lines), index.length, path)
    return path


def write_phrase_indexes(folder: Path, indexes: dict[int, PhraseIndex]) -> list[Path]:
    """Replace the phrase files in `folder` with one file per length of `indexes`."""
    clear_phrase_files(folder)
    return [write_phrase_index(folder, indexes[length]) for length in sorted(indexes)]


def read_phrase_index(
    folder: Path,
    length: int,
    *,
    diagnostics: Diagnostics | None = None,
) -> PhraseIndex:
    """
    Load the phrase file for `length` from `folder`.

    Malformed lines are reported and skipped.

    Raises:
        CorpusInputError: If the file is missing or cannot be decoded
    """
    path = phrase_file_path(folder, length)
    if not path.is_file():
        raise CorpusInputError(f"Missing {length}-word phrase file", item=str(path))
    try:
        text = path.read_text(encoding=core_settings.encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise CorpusInputError(f"Cannot read phrase file ({exc})", item=str(path)) from exc

    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    index = PhraseIndex(length)
    for line_no, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        phrase, *fields = line.split(LOCATION_DELIM)
        try:
            if phrase_length(phrase) != length:
                raise ValueError(f"phrase has {phrase_length(phrase)} words")
            if not fields:
                raise ValueError("no locations")
            locations = [Location.parse(field) for field in fields]
        except ValueError as exc:
            diagnostics.report(
                ErrorType.MALFORMED_ROW,
                stage="phrase_file",
                item=f"{path}:{line_no}",
                message=f"Skipping malformed phrase line: {exc}",
            )
            continue
        index.add_all((phrase, loc) for loc in locations)
    return index


def read_phrase_indexes(
    folder: Path,
    lengths: list[int] | None = None,
    *,
    diagnostics: Diagnostics | None = None,
) -> dict[int, PhraseIndex]:
    """
    Load several lengths; every requested length must have a file.

    Without `lengths`, every length present in `folder` is loaded and the
    lengths must form an unbroken range.

    Raises:
        CorpusInputError: If no phrase file exists, or a length inside the
            range has no file
    """
    if lengths is None:
        lengths = available_lengths(folder)
        if not lengths:
            raise CorpusInputError("No phrase files found", item=str(folder))
        for length in range(lengths[0], lengths[-1] + 1):
            if length not in lengths:
                raise CorpusInputError(
                    f"Missing {length}-word phrase file between lengths {lengths[0]} and {lengths[-1]}",
                    item=str(phrase_file_path(folder, length)),
                )
    return {length: read_phrase_index(folder, length, diagnostics=diagnostics) for length in lengths}
