"""Error taxonomy and diagnostics records."""

from phrasetrail_core.errors.types import (
    CorpusInputError,
    ErrorType,
    InvariantViolation,
    PhraseTrailError,
    StageDiagnostic,
)

__all__ = [
    "ErrorType",
    "StageDiagnostic",
    "PhraseTrailError",
    "CorpusInputError",
    "InvariantViolation",
]
