"""
Configuration settings for the trail pipeline.

Environment variables:
    PHRASETRAIL_DATA_DIR                 Root folder for stage outputs
    PHRASETRAIL_MIN_PHRASE_SIZE          Shortest phrase length mined
    PHRASETRAIL_MAX_PHRASE_SIZE          Longest phrase length mined (unset: until no repeats)
    PHRASETRAIL_MAX_WORKERS              Thread pool width for per-chapter work
    PHRASETRAIL_ANCHOR_MIN_PHRASE_SIZE   Shortest phrase whose links are spliced
    PHRASETRAIL_CHAPTER_SUFFIX           Suffix of chapter text files
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Trail pipeline settings."""

    model_config = SettingsConfigDict(env_prefix="PHRASETRAIL_", extra="ignore")

    data_dir: Path = Path("data")

    # Mining range
    min_phrase_size: int = Field(default=1, ge=1)
    max_phrase_size: int | None = Field(default=None, ge=1)

    # Parallelism
    max_workers: int = Field(default=4, ge=1)

    # Output
    anchor_min_phrase_size: int = Field(default=3, ge=1)
    chapter_suffix: str = ".txt"

    # Stage folders under data_dir
    repeated_dirname: str = "repeated"
    independent_dirname: str = "independent"
    anchorable_dirname: str = "anchorable"
    anchors_dirname: str = "anchors"
    navigation_filename: str = "navigation.tsv"

    def stage_dir(self, dirname: str) -> Path:
        return self.data_dir / dirname


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
