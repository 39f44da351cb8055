"""Repeated-phrase pipeline orchestrator.

Runs the stages in memory, threading each stage's output into the next:

    chapters -> mined (per length) -> independent (per length)
             -> anchorable (per length) -> anchor links
    trail rows -> chapter navigation

The CLI runs the same stages one at a time against the stage folders.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from phrasetrail_core.models.location import Chapter
from phrasetrail_core.models.phrase import AnchorLink
from phrasetrail_core.errors.types import StageDiagnostic
from trail_pipeline.diagnostics import Diagnostics
from trail_pipeline.index.phrase_index import PhraseIndex
from trail_pipeline.index.word_index import WordIndex
from trail_pipeline.ordering.navigation import ChapterLinkResolver, ChapterNeighbours
from trail_pipeline.ordering.trail import Trail
from trail_pipeline.stages.anchors import anchor_links_for_indexes
from trail_pipeline.stages.mining import MiningConfig, mine_repeated_phrases
from trail_pipeline.stages.subsumption import prune_unique_independents, remove_dependent_phrases

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class PipelineConfig:
    """Configuration for a full pipeline run."""

    min_phrase_size: int = 1
    max_phrase_size: int | None = None
    max_workers: int = 4

    def mining(self) -> MiningConfig:
        return MiningConfig(
            min_phrase_size=self.min_phrase_size,
            max_phrase_size=self.max_phrase_size,
            max_workers=self.max_workers,
        )


@dataclass
class LengthStats:
    """Counts for one phrase length across the stages."""
    length: int
    repeated_phrases: int = 0
    repeated_occurrences: int = 0
    independent_occurrences: int = 0
    anchorable_phrases: int = 0
    anchorable_occurrences: int = 0


@dataclass
class PipelineResult:
    """Result of a pipeline run."""
    trail: Trail
    mined: dict[int, PhraseIndex] = field(default_factory=dict)
    independent: dict[int, PhraseIndex] = field(default_factory=dict)
    anchorable: dict[int, PhraseIndex] = field(default_factory=dict)
    links: list[AnchorLink] = field(default_factory=list)
    navigation: list[ChapterNeighbours] = field(default_factory=list)
    diagnostics: list[StageDiagnostic] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    def length_stats(self) -> list[LengthStats]:
        stats = []
        for length in sorted(self.mined):
            mined = self.mined[length]
            independent = self.independent.get(length)
            anchorable = self.anchorable.get(length)
            stats.append(
                LengthStats(
                    length=length,
                    repeated_phrases=len(mined),
                    repeated_occurrences=mined.occurrence_count(),
                    independent_occurrences=independent.occurrence_count() if independent else 0,
                    anchorable_phrases=len(anchorable) if anchorable else 0,
                    anchorable_occurrences=anchorable.occurrence_count() if anchorable else 0,
                )
            )
        return stats


# =============================================================================
# Orchestration
# =============================================================================

def run_pipeline(
    chapters: Iterable[Chapter],
    trail: Trail | None = None,
    config: PipelineConfig | None = None,
    *,
    exists: Callable[[str], bool] | None = None,
    diagnostics: Diagnostics | None = None,
) -> PipelineResult:
    """
    Run every stage over an in-memory corpus.

    Args:
        chapters: The corpus
        trail: Reading order; the natural order of chapter identifiers if omitted
        config: Length range and parallelism
        exists: Which chapters navigation may link to; defaults to the corpus chapters
        diagnostics: Sink for skipped items

    Returns:
        PipelineResult with every intermediate stage kept
    """
    started = time.monotonic()
    config = config or PipelineConfig()
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    words = WordIndex(chapters)
    if trail is None:
        trail = Trail.from_chapters(words.chapter_ids())

    logger.info("Mining %d chapters (%d words)", len(words), words.word_count())
    mined = mine_repeated_phrases(words, config.mining())

    independent = remove_dependent_phrases(
        mined, max_workers=config.max_workers, diagnostics=diagnostics
    )
    anchorable = prune_unique_independents(independent)
    links = anchor_links_for_indexes(anchorable, trail, max_workers=config.max_workers)

    resolver = ChapterLinkResolver(trail.adjacency(), exists or words.__contains__)
    navigation = resolver.resolve_all()

    return PipelineResult(
        trail=trail,
        mined=mined,
        independent=independent,
        anchorable=anchorable,
        links=links,
        navigation=navigation,
        diagnostics=diagnostics.records,
        elapsed_seconds=time.monotonic() - started,
    )
