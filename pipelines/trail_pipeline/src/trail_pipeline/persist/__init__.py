"""Intermediate and output file formats."""

from trail_pipeline.persist.phrase_files import (
    available_lengths,
    phrase_file_path,
    clear_phrase_files,
    read_phrase_index,
    read_phrase_indexes,
    write_phrase_index,
    write_phrase_indexes,
)
from trail_pipeline.persist.anchor_files import (
    ANCHOR_EXT,
    anchor_file_path,
    clear_anchor_files,
    read_anchor_file,
    write_anchor_files,
    write_navigation_file,
)

__all__ = [
    "available_lengths",
    "phrase_file_path",
    "clear_phrase_files",
    "read_phrase_index",
    "read_phrase_indexes",
    "write_phrase_index",
    "write_phrase_indexes",
    "ANCHOR_EXT",
    "anchor_file_path",
    "clear_anchor_files",
    "read_anchor_file",
    "write_anchor_files",
    "write_navigation_file",
]
