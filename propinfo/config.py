"""Runtime settings, read from the environment (and .env when present)."""

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # ── Storage ──────────────────────────────────────────────────────
    database_dir: Path = Field(
        default=BASE_DIR / "data",
        validation_alias=AliasChoices("DATABASE_DIR", "database_dir"))

    database_name: str = Field(
        default="zillow_scraper",
        validation_alias=AliasChoices("DATABASE_NAME", "database_name"))

    # ── City catalogs ────────────────────────────────────────────────
    public_dir: Path = Field(
        default=BASE_DIR / "public",
        validation_alias=AliasChoices("PUBLIC_DIR", "public_dir"))

    # ── Scrape loop ──────────────────────────────────────────────────
    rate_limit_window_sec: float = Field(
        default=5.0,
        validation_alias=AliasChoices("RATE_LIMIT_WINDOW_SEC", "rate_limit_window_sec"))

    max_total_attempts: int = Field(
        default=5, ge=1,
        validation_alias=AliasChoices("MAX_TOTAL_ATTEMPTS", "max_total_attempts"))

    retry_delay_sec: float = Field(
        default=10.0, ge=0,
        validation_alias=AliasChoices("RETRY_DELAY_SEC", "retry_delay_sec"))

    max_index_attempts: int = Field(
        default=8, ge=1,
        validation_alias=AliasChoices("MAX_INDEX_ATTEMPTS", "max_index_attempts"))

    max_index_page: int = Field(
        default=5, ge=1,
        validation_alias=AliasChoices("MAX_INDEX_PAGE", "max_index_page"))

    fetch_timeout_sec: float = Field(
        default=60.0, gt=0,
        validation_alias=AliasChoices("FETCH_TIMEOUT_SEC", "fetch_timeout_sec"))

    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL", "log_level"))

    @property
    def db_path(self) -> Path:
        return self.database_dir / f"{self.database_name}.db"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def with_overrides(settings: Settings, **overrides) -> Settings:
    """Copy of `settings` with `overrides` applied, re-validated (bounds still hold)."""
    return Settings(**{**settings.model_dump(), **overrides})
