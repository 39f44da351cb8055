from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PHRASETRAIL_", extra="ignore")

    word_separator: str = " "
    encoding: str = "utf-8"


settings = Settings()
