"""
PhraseTrail Core

Shared domain models, error taxonomy and phrase-text helpers for the
repeated-phrase cross-reference pipeline.
"""

__version__ = "0.1.0"

from phrasetrail_core.models.location import Chapter, Location
from phrasetrail_core.models.phrase import AnchorLink, PhraseOccurrence
from phrasetrail_core.models.adjacency import AdjacencyEntry, Direction
from phrasetrail_core.errors.types import (
    CorpusInputError,
    ErrorType,
    InvariantViolation,
    PhraseTrailError,
    StageDiagnostic,
)

__all__ = [
    # Models
    "Chapter",
    "Location",
    "PhraseOccurrence",
    "AnchorLink",
    "AdjacencyEntry",
    "Direction",
    # Errors
    "ErrorType",
    "StageDiagnostic",
    "PhraseTrailError",
    "CorpusInputError",
    "InvariantViolation",
]
