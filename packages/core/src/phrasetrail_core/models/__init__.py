"""Core data models."""

from phrasetrail_core.models.location import Chapter, Location
from phrasetrail_core.models.phrase import AnchorLink, PhraseOccurrence
from phrasetrail_core.models.adjacency import AdjacencyEntry, Direction

__all__ = [
    "Chapter",
    "Location",
    "PhraseOccurrence",
    "AnchorLink",
    "AdjacencyEntry",
    "Direction",
]
