"""Settings (env prefix IRONLOG_) and logging setup."""

from __future__ import annotations

import sys
from functools import lru_cache
from pathlib import Path

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .normalize import DEFAULT_DATE_LOCALES, DateLocale


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="IRONLOG_", extra="ignore")

    # Default DB next to the package (override with IRONLOG_DB_PATH)
    db_path: str = str(Path(__file__).resolve().parent.parent / "ironlog.db")
    log_level: str = "INFO"
    # Tried in order when parsing export timestamps; JSON list in the environment
    date_locales: list[DateLocale] = Field(default_factory=lambda: list(DEFAULT_DATE_LOCALES))


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Replace loguru's default sink with one on stderr at the configured level."""
    logger.remove()
    logger.add(sys.stderr, level=(level or get_settings().log_level).upper())
