"""
PhraseOccurrence and AnchorLink.

An occurrence is one appearance of a phrase at a Location. An AnchorLink
joins an occurrence to the next occurrence of the same phrase along the
Trail; links are the terminal output of the pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from phrasetrail_core.models.location import Location
from phrasetrail_core.text import phrase_length


@dataclass(frozen=True)
class PhraseOccurrence:
    text: str
    location: Location
    length: int

    @property
    def chapter(self) -> str:
        return self.location.chapter

    @property
    def index(self) -> int:
        return self.location.index

    @classmethod
    def of(cls, text: str, location: Location) -> PhraseOccurrence:
        return cls(text=text, location=location, length=phrase_length(text))


class AnchorLink(BaseModel):
    """A directed link from one occurrence of a phrase to the next one in reading order."""

    model_config = ConfigDict(frozen=True)

    phrase: str = Field(..., description="Phrase text, words joined by the canonical separator")
    source: Location = Field(..., description="Occurrence carrying the anchor")
    target: Location = Field(..., description="Next occurrence of the same phrase on the trail")

    @property
    def length(self) -> int:
        """Number of words in the linked phrase."""
        return phrase_length(self.phrase)
