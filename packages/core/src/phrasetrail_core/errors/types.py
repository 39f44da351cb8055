"""
Error taxonomy for pipeline stages.

Fatal conditions are raised as exceptions and abort the stage. Soft,
per-item conditions are recorded as StageDiagnostic objects and the
batch continues.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from phrasetrail_core.text import short_form


class ErrorType(str, Enum):
    """Machine-interpretable error categories."""

    INPUT_MISSING = "INPUT_MISSING"
    """A corpus directory, configuration file or required stage file does not exist."""

    UNREADABLE_ITEM = "UNREADABLE_ITEM"
    """One file among many could not be read or decoded."""

    MALFORMED_ROW = "MALFORMED_ROW"
    """A line in a trail, phrase or anchor file does not have the expected shape."""

    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"
    """A trail file names the same focus chapter more than once."""

    INVARIANT_VIOLATION = "INVARIANT_VIOLATION"
    """Upstream construction produced data that contradicts itself."""

    SINGLE_SIDED_CONTAINMENT = "SINGLE_SIDED_CONTAINMENT"
    """The only longer occurrence overlapping a phrase does not contain it."""


class StageDiagnostic(BaseModel):
    """Structured record of a skipped item."""

    error_type: ErrorType
    stage: str = Field(..., description="e.g., 'corpus', 'trail_file', 'subsumption'")
    item: Optional[str] = Field(default=None, description="Path, chapter or phrase concerned")
    message: str = Field(..., description="Human-readable message")
    details: Dict[str, Any] = Field(default_factory=dict, description="Additional context")

    def to_log_message(self) -> str:
        loc = f" @ {self.item}" if self.item else ""
        return f"[{self.error_type.value}] {self.stage}{loc}: {self.message}"


class PhraseTrailError(Exception):
    """Base class for fatal pipeline errors."""

    error_type: ErrorType = ErrorType.INVARIANT_VIOLATION


class CorpusInputError(PhraseTrailError):
    """Missing or unreadable input; the stage publishes nothing."""

    error_type = ErrorType.INPUT_MISSING

    def __init__(self, message: str, *, item: str | None = None):
        self.item = item
        super().__init__(f"{message}: {item}" if item else message)


class InvariantViolation(PhraseTrailError):
    """Upstream data broke a structural guarantee; not user-recoverable."""

    error_type = ErrorType.INVARIANT_VIOLATION

    def __init__(
        self,
        message: str,
        *,
        phrase: str | None = None,
        chapter: str | None = None,
        index: int | None = None,
    ):
        self.phrase = phrase
        self.chapter = chapter
        self.index = index
        context = []
        if phrase is not None:
            context.append(f'phrase="{short_form(phrase)}"')
        if chapter is not None:
            context.append(f"chapter={chapter}")
        if index is not None:
            context.append(f"index={index}")
        suffix = f" ({', '.join(context)})" if context else ""
        super().__init__(message + suffix)
