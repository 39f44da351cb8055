"""
Anchor data files, one per chapter, and the navigation table.

Anchor line: `<phrase>\t<source-index>\t<target-index>;<target-chapter>`.
Navigation line: `<chapter>\t<previous>\t<next>`, empty for no link.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from phrasetrail_core.errors.types import CorpusInputError, ErrorType
from phrasetrail_core.models.location import Location
from phrasetrail_core.models.phrase import AnchorLink
from phrasetrail_core.settings import settings as core_settings
from trail_pipeline.diagnostics import Diagnostics
from trail_pipeline.ordering.navigation import ChapterNeighbours
from trail_pipeline.persist._io import write_text_replacing
from trail_pipeline.stages.anchors import links_by_chapter

logger = logging.getLogger(__name__)

ANCHOR_EXT = ".anchordata.txt"
COLUMN_DELIM = "\t"


def anchor_file_path(folder: Path, chapter: str) -> Path:
    return folder / f"{chapter}{ANCHOR_EXT}"


def chapter_for_anchor_file(path: Path) -> str:
    return path.name[: -len(ANCHOR_EXT)]


def format_anchor_line(link: AnchorLink) -> str:
    return COLUMN_DELIM.join([link.phrase, str(link.source.index), str(link.target)])


def clear_anchor_files(folder: Path) -> int:
    """Delete every anchor data file in `folder`; return how many were removed."""
    if not folder.is_dir():
        return 0
    stale = [path for path in folder.iterdir() if path.is_file() and path.name.endswith(ANCHOR_EXT)]
    for path in stale:
        path.unlink()
    if stale:
        logger.info("Removed %d anchor data files from %s", len(stale), folder)
    return len(stale)


def write_anchor_files(folder: Path, links: Iterable[AnchorLink]) -> list[Path]:
    """Replace the anchor data files in `folder`, one file per source chapter of `links`."""
    clear_anchor_files(folder)
    paths = []
    for chapter, chapter_links in links_by_chapter(links).items():
        body = "".join(format_anchor_line(link) + "\n" for link in chapter_links)
        paths.append(write_text_replacing(anchor_file_path(folder, chapter), body))
        logger.info("Wrote %d anchors for %s", len(chapter_links), chapter)
    return paths


def read_anchor_file(
    path: Path,
    *,
    min_phrase_size: int = 1,
    diagnostics: Diagnostics | None = None,
) -> list[AnchorLink]:
    """
    Rebuild the links of one chapter, keeping phrases of at least `min_phrase_size` words.

    Raises:
        CorpusInputError: If the file is missing or cannot be decoded
    """
    if not path.is_file() or not path.name.endswith(ANCHOR_EXT):
        raise CorpusInputError("Missing anchor data file", item=str(path))
    try:
        text = path.read_text(encoding=core_settings.encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise CorpusInputError(f"Cannot read anchor data file ({exc})", item=str(path)) from exc

    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    chapter = chapter_for_anchor_file(path)
    links = []
    for line_no, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        columns = line.split(COLUMN_DELIM)
        try:
            if len(columns) != 3:
                raise ValueError(f"expected 3 columns, got {len(columns)}")
            phrase, source_index, target = columns
            link = AnchorLink(
                phrase=phrase,
                source=Location(chapter=chapter, index=int(source_index)),
                target=Location.parse(target),
            )
        except ValueError as exc:
            diagnostics.report(
                ErrorType.MALFORMED_ROW,
                stage="anchor_file",
                item=f"{path}:{line_no}",
                message=f"Skipping malformed anchor line: {exc}",
            )
            continue
        if link.length >= min_phrase_size:
            links.append(link)

    links.sort(key=lambda link: (link.source.index, -link.length))
    return links


def write_navigation_file(path: Path, neighbours: Iterable[ChapterNeighbours]) -> Path:
    rows = [
        COLUMN_DELIM.join([n.chapter, n.previous or "", n.next or ""])
        for n in neighbours
    ]
    write_text_replacing(path, "".join(row + "\n" for row in rows))
    logger.info("Wrote navigation for %d chapters to %s", len(rows), path)
    return path
