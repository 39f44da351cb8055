"""
Command-line interface for the trail pipeline.

Usage:
    phrasetrail find-repeated <corpus_dir>        # Mine repeated phrases per length
    phrasetrail remove-dependent                  # Drop occurrences inside longer repeats
    phrasetrail remove-unique                     # Drop phrases left with one occurrence
    phrasetrail determine-anchors [--trail FILE]  # Link occurrences along the trail
    phrasetrail link-chapters <trail> <dir>       # Resolve previous/next chapters
    phrasetrail show-anchors <chapter>            # Print one chapter's anchors
    phrasetrail run <corpus_dir> [--trail FILE]   # All of the above, in memory
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from phrasetrail_core.errors.types import PhraseTrailError
from trail_pipeline.corpus.loader import load_corpus
from trail_pipeline.diagnostics import Diagnostics
from trail_pipeline.index.word_index import WordIndex
from trail_pipeline.ordering.navigation import ChapterLinkResolver
from trail_pipeline.ordering.trail import Trail
from trail_pipeline.ordering.trail_file import load_trail_file
from trail_pipeline.persist.anchor_files import anchor_file_path, read_anchor_file, write_anchor_files, write_navigation_file
from trail_pipeline.persist.phrase_files import (
    clear_phrase_files,
    read_phrase_indexes,
    write_phrase_index,
    write_phrase_indexes,
)
from trail_pipeline.settings import Settings, get_settings
from trail_pipeline.stages.anchors import anchor_links_for_indexes
from trail_pipeline.stages.mining import MiningConfig, iter_repeated_phrases
from trail_pipeline.stages.orchestrator import PipelineConfig, run_pipeline
from trail_pipeline.stages.subsumption import prune_unique_independents, remove_dependent_phrases

app = typer.Typer(
    name="phrasetrail",
    help="Repeated-phrase mining and cross-reference links along a chapter trail.",
)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log per-stage progress."),
) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@contextmanager
def _stage(name: str, diagnostics: Diagnostics | None = None) -> Iterator[None]:
    try:
        yield
    except PhraseTrailError as exc:
        console.print(f"[red]{name} failed: {exc}[/red]")
        raise typer.Exit(1)
    if diagnostics is not None and len(diagnostics):
        console.print(f"[yellow]{len(diagnostics)} item(s) skipped:[/yellow]")
        for record in diagnostics:
            console.print(f"  {record.to_log_message()}", markup=False)


def _settings(data_dir: Optional[Path]) -> Settings:
    settings = get_settings()
    if data_dir is not None:
        settings = settings.model_copy(update={"data_dir": data_dir})
    return settings


def _mining_config(
    settings: Settings,
    min_size: Optional[int],
    max_size: Optional[int],
    workers: Optional[int],
) -> MiningConfig:
    try:
        return MiningConfig(
            min_phrase_size=min_size if min_size is not None else settings.min_phrase_size,
            max_phrase_size=max_size if max_size is not None else settings.max_phrase_size,
            max_workers=workers if workers is not None else settings.max_workers,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _workers(settings: Settings, workers: Optional[int]) -> int:
    if workers is None:
        return settings.max_workers
    if workers < 1:
        raise typer.BadParameter(f"--workers must be positive, got {workers}")
    return workers


def _trail_for(trail_file: Optional[Path], chapters: list[str], diagnostics: Diagnostics) -> Trail:
    if trail_file is not None:
        return Trail.from_entries(load_trail_file(trail_file, diagnostics=diagnostics))
    return Trail.from_chapters(chapters)


@app.command("find-repeated")
def find_repeated(
    corpus_dir: Path = typer.Argument(..., help="Directory of plain-text chapter files."),
    min_size: Optional[int] = typer.Option(None, "--min-size", help="Shortest phrase length."),
    max_size: Optional[int] = typer.Option(None, "--max-size", help="Longest phrase length (default: until none repeat)."),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Worker threads."),
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", help="Stage output root."),
) -> None:
    """
    Find every phrase that occurs at two or more places and write one file per length.
    """
    settings = _settings(data_dir)
    diagnostics = Diagnostics()
    out_dir = settings.stage_dir(settings.repeated_dirname)

    with _stage("find-repeated", diagnostics):
        chapters = load_corpus(corpus_dir, suffix=settings.chapter_suffix, diagnostics=diagnostics)
        config = _mining_config(settings, min_size, max_size, workers)
        table = Table(title="Repeated phrases")
        table.add_column("Length", justify="right")
        table.add_column("Phrases", justify="right")
        table.add_column("Occurrences", justify="right")
        clear_phrase_files(out_dir)
        for index in iter_repeated_phrases(WordIndex(chapters), config):
            write_phrase_index(out_dir, index)
            table.add_row(str(index.length), str(len(index)), str(index.occurrence_count()))
        console.print(table)
        console.print(f"[green]✓ Wrote repeated phrases to {out_dir}[/green]")


@app.command("remove-dependent")
def remove_dependent(
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Worker threads."),
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", help="Stage output root."),
) -> None:
    """
    Keep only occurrences that are not part of a longer repeated phrase.
    """
    settings = _settings(data_dir)
    diagnostics = Diagnostics()
    with _stage("remove-dependent", diagnostics):
        raw = read_phrase_indexes(settings.stage_dir(settings.repeated_dirname), diagnostics=diagnostics)
        independent = remove_dependent_phrases(
            raw, max_workers=_workers(settings, workers), diagnostics=diagnostics
        )
        out_dir = settings.stage_dir(settings.independent_dirname)
        write_phrase_indexes(out_dir, independent)
        console.print(f"[green]✓ Wrote independent phrases for {len(independent)} lengths to {out_dir}[/green]")


@app.command("remove-unique")
def remove_unique(
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", help="Stage output root."),
) -> None:
    """
    Drop phrases that have fewer than two independent occurrences left.
    """
    settings = _settings(data_dir)
    diagnostics = Diagnostics()
    with _stage("remove-unique", diagnostics):
        independent = read_phrase_indexes(settings.stage_dir(settings.independent_dirname), diagnostics=diagnostics)
        anchorable = prune_unique_independents(independent)
        out_dir = settings.stage_dir(settings.anchorable_dirname)
        write_phrase_indexes(out_dir, anchorable)
        kept = sum(len(index) for index in anchorable.values())
        console.print(f"[green]✓ Kept {kept} anchorable phrases in {out_dir}[/green]")


@app.command("determine-anchors")
def determine_anchors(
    trail_file: Optional[Path] = typer.Option(None, "--trail", "-t", help="Trail file fixing chapter order."),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Worker threads."),
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", help="Stage output root."),
) -> None:
    """
    Link each occurrence to the next occurrence of the same phrase and write per-chapter anchor files.
    """
    settings = _settings(data_dir)
    diagnostics = Diagnostics()
    with _stage("determine-anchors", diagnostics):
        anchorable = read_phrase_indexes(settings.stage_dir(settings.anchorable_dirname), diagnostics=diagnostics)
        chapters = sorted({occ.chapter for index in anchorable.values() for occ in index.occurrences()})
        trail = _trail_for(trail_file, chapters, diagnostics)
        links = anchor_links_for_indexes(anchorable, trail, max_workers=_workers(settings, workers))
        out_dir = settings.stage_dir(settings.anchors_dirname)
        paths = write_anchor_files(out_dir, links)
        console.print(f"[green]✓ Wrote {len(links)} anchors across {len(paths)} chapters to {out_dir}[/green]")


@app.command("link-chapters")
def link_chapters(
    trail_file: Path = typer.Argument(..., help="Trail file of previous/focus/next rows."),
    chapter_dir: Path = typer.Argument(..., help="Directory holding the chapters that exist."),
    suffix: Optional[str] = typer.Option(None, "--suffix", help="Chapter file suffix."),
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", help="Stage output root."),
) -> None:
    """
    Resolve every chapter's previous and next chapter, skipping chapters that do not exist.
    """
    settings = _settings(data_dir)
    diagnostics = Diagnostics()
    suffix = suffix or settings.chapter_suffix

    def exists(chapter: str) -> bool:
        return (chapter_dir / f"{chapter}{suffix}").is_file()

    with _stage("link-chapters", diagnostics):
        entries = load_trail_file(trail_file, diagnostics=diagnostics)
        neighbours = ChapterLinkResolver(entries, exists).resolve_all()
        path = write_navigation_file(settings.data_dir / settings.navigation_filename, neighbours)
        unlinked = sum(1 for n in neighbours if n.previous is None or n.next is None)
        console.print(f"[green]✓ Wrote navigation for {len(neighbours)} chapters to {path}[/green]")
        if unlinked:
            console.print(f"[dim]{unlinked} chapter(s) have a missing previous or next link[/dim]")


@app.command("show-anchors")
def show_anchors(
    chapter: str = typer.Argument(..., help="Chapter identifier."),
    min_size: Optional[int] = typer.Option(None, "--min-size", help="Shortest phrase to show."),
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", help="Stage output root."),
) -> None:
    """
    Print the anchors that would be spliced into one chapter.
    """
    settings = _settings(data_dir)
    diagnostics = Diagnostics()
    with _stage("show-anchors", diagnostics):
        links = read_anchor_file(
            anchor_file_path(settings.stage_dir(settings.anchors_dirname), chapter),
            min_phrase_size=min_size if min_size is not None else settings.anchor_min_phrase_size,
            diagnostics=diagnostics,
        )
        table = Table(title=f"Anchors in {chapter}")
        table.add_column("Index", justify="right")
        table.add_column("Words", justify="right")
        table.add_column("Phrase")
        table.add_column("Links to")
        for link in links:
            table.add_row(str(link.source.index), str(link.length), link.phrase, str(link.target))
        console.print(table)


@app.command()
def run(
    corpus_dir: Path = typer.Argument(..., help="Directory of plain-text chapter files."),
    trail_file: Optional[Path] = typer.Option(None, "--trail", "-t", help="Trail file fixing chapter order."),
    min_size: Optional[int] = typer.Option(None, "--min-size", help="Shortest phrase length."),
    max_size: Optional[int] = typer.Option(None, "--max-size", help="Longest phrase length."),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Worker threads."),
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", help="Stage output root."),
) -> None:
    """
    Run every stage end to end and write all stage outputs.
    """
    settings = _settings(data_dir)
    diagnostics = Diagnostics()
    with _stage("run", diagnostics):
        chapters = load_corpus(corpus_dir, suffix=settings.chapter_suffix, diagnostics=diagnostics)
        trail = _trail_for(trail_file, [c.chapter_id for c in chapters], diagnostics)
        mining = _mining_config(settings, min_size, max_size, workers)
        config = PipelineConfig(
            min_phrase_size=mining.min_phrase_size,
            max_phrase_size=mining.max_phrase_size,
            max_workers=mining.max_workers,
        )
        result = run_pipeline(chapters, trail, config, diagnostics=diagnostics)

        write_phrase_indexes(settings.stage_dir(settings.repeated_dirname), result.mined)
        write_phrase_indexes(settings.stage_dir(settings.independent_dirname), result.independent)
        write_phrase_indexes(settings.stage_dir(settings.anchorable_dirname), result.anchorable)
        write_anchor_files(settings.stage_dir(settings.anchors_dirname), result.links)
        write_navigation_file(settings.data_dir / settings.navigation_filename, result.navigation)

        table = Table(title="Pipeline summary")
        for column in ("Length", "Repeated", "Occurrences", "Independent", "Anchorable"):
            table.add_column(column, justify="right")
        for stats in result.length_stats():
            table.add_row(
                str(stats.length),
                str(stats.repeated_phrases),
                str(stats.repeated_occurrences),
                str(stats.independent_occurrences),
                str(stats.anchorable_phrases),
            )
        console.print(table)
        console.print(
            f"[green]✓ {len(result.links)} anchors, {len(result.navigation)} chapters linked "
            f"in {result.elapsed_seconds:.1f}s[/green]"
        )


if __name__ == "__main__":
    app()
