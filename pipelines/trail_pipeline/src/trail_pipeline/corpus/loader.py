"""Load a directory of plain-text chapter files into Chapter records."""

from __future__ import annotations

import logging
from pathlib import Path

from phrasetrail_core.errors.types import CorpusInputError, ErrorType
from phrasetrail_core.models.location import Chapter
from phrasetrail_core.settings import settings as core_settings
from trail_pipeline.corpus.words import split_words
from trail_pipeline.diagnostics import Diagnostics

logger = logging.getLogger(__name__)


def load_chapter(path: Path) -> Chapter:
    text = path.read_text(encoding=core_settings.encoding)
    return Chapter(chapter_id=path.stem, words=tuple(split_words(text)))


def load_corpus(
    corpus_dir: Path,
    *,
    suffix: str = ".txt",
    diagnostics: Diagnostics | None = None,
) -> list[Chapter]:
    """
    Read every `*{suffix}` file in `corpus_dir` as one chapter.

    Args:
        corpus_dir: Directory holding one text file per chapter
        suffix: File suffix identifying chapter files
        diagnostics: Sink for files that cannot be read

    Returns:
        Chapters sorted by identifier

    Raises:
        CorpusInputError: If `corpus_dir` is not a directory
    """
    if not corpus_dir.is_dir():
        raise CorpusInputError("Corpus directory does not exist", item=str(corpus_dir))

    chapters: list[Chapter] = []
    for path in sorted(corpus_dir.glob(f"*{suffix}")):
        if not path.is_file():
            continue
        try:
            chapters.append(load_chapter(path))
        except (OSError, UnicodeDecodeError) as exc:
            if diagnostics is None:
                raise CorpusInputError(f"Cannot read chapter file ({exc})", item=str(path)) from exc
            diagnostics.report(
                ErrorType.UNREADABLE_ITEM,
                stage="corpus",
                item=str(path),
                message=f"Skipping unreadable chapter file: {exc}",
            )

    logger.info("Loaded %d chapters from %s", len(chapters), corpus_dir)
    return chapters
