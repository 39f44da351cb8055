"""
Trail files: tab-delimited `previous<TAB>focus<TAB>next` rows, one per chapter.

A fourth column, if present, is ignored. Row order is reading order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from phrasetrail_core.errors.types import CorpusInputError, ErrorType
from phrasetrail_core.models.adjacency import AdjacencyEntry
from phrasetrail_core.settings import settings as core_settings
from trail_pipeline.diagnostics import Diagnostics

logger = logging.getLogger(__name__)

COLUMN_DELIM = "\t"
COLUMN_COUNT = 4
PREV_INDEX = 0
FOCUS_INDEX = 1
NEXT_INDEX = 2

KNOWN_EXTENSIONS = (".txt", ".html")


def canonical_chapter_id(name: str) -> str:
    """
    Reduce a chapter reference to its identifier.

    Trail files may name chapters by identifier or by filename; a folder
    prefix and one known extension are stripped.
    """
    name = name.strip()
    name = name.rsplit("/", 1)[-1].rsplit("\\", 1)[-1]
    for ext in KNOWN_EXTENSIONS:
        if name.endswith(ext) and len(name) > len(ext):
            return name[: -len(ext)]
    return name


def _neighbour(column: str) -> str | None:
    chapter = canonical_chapter_id(column)
    return chapter or None


def parse_trail_rows(
    lines: Iterable[str],
    *,
    source: str = "<trail>",
    diagnostics: Diagnostics | None = None,
) -> list[AdjacencyEntry]:
    """
    Parse trail rows, skipping blank lines.

    Malformed rows and repeated focus chapters are reported to
    `diagnostics` and skipped; the first row for a chapter wins.
    """
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    entries: list[AdjacencyEntry] = []
    seen: set[str] = set()

    for line_no, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if not line.strip():
            continue
        columns = line.split(COLUMN_DELIM, COLUMN_COUNT - 1)
        focus = canonical_chapter_id(columns[FOCUS_INDEX]) if len(columns) > FOCUS_INDEX else ""
        if len(columns) <= NEXT_INDEX or not focus:
            diagnostics.report(
                ErrorType.MALFORMED_ROW,
                stage="trail_file",
                item=f"{source}:{line_no}",
                message=f"Expected previous<TAB>focus<TAB>next, got {line!r}",
            )
            continue
        if focus in seen:
            diagnostics.report(
                ErrorType.DUPLICATE_ENTRY,
                stage="trail_file",
                item=f"{source}:{line_no}",
                message=f"Chapter {focus!r} already has a row; keeping the first",
            )
            continue
        seen.add(focus)
        entries.append(
            AdjacencyEntry(
                chapter=focus,
                previous=_neighbour(columns[PREV_INDEX]),
                next=_neighbour(columns[NEXT_INDEX]),
            )
        )
    return entries


def load_trail_file(path: Path, *, diagnostics: Diagnostics | None = None) -> list[AdjacencyEntry]:
    """
    Read a trail file.

    Raises:
        CorpusInputError: If the file is missing or cannot be decoded
    """
    if not path.is_file():
        raise CorpusInputError("Trail file does not exist", item=str(path))
    try:
        text = path.read_text(encoding=core_settings.encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise CorpusInputError(f"Cannot read trail file ({exc})", item=str(path)) from exc

    entries = parse_trail_rows(text.splitlines(), source=str(path), diagnostics=diagnostics)
    logger.info("Got %d trail rows from %s", len(entries), path)
    return entries
