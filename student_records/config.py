"""
Configuration settings for the student records manager.

Uses Pydantic Settings to load environment variables for logging, the default
database file, and where relative file names are resolved.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Files
    data_dir: Optional[Path] = Field(None, alias="RECORDS_DATA_DIR")
    database: Optional[str] = Field(None, alias="RECORDS_DATABASE")
    write_retries: int = Field(3, ge=1, alias="RECORDS_WRITE_RETRIES")

    # Shell
    prompt: str = Field("CMS", alias="RECORDS_PROMPT")

    # Logging
    log_level: str = Field("WARNING", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
