"""Chapter ordering: the Trail and previous/next chapter resolution."""

from trail_pipeline.ordering.trail import Trail, natural_chapter_key
from trail_pipeline.ordering.trail_file import canonical_chapter_id, load_trail_file, parse_trail_rows
from trail_pipeline.ordering.navigation import ChapterLinkResolver, ChapterNeighbours

__all__ = [
    "Trail",
    "natural_chapter_key",
    "canonical_chapter_id",
    "load_trail_file",
    "parse_trail_rows",
    "ChapterLinkResolver",
    "ChapterNeighbours",
]
