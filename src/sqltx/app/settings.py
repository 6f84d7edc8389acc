# src/sqltx/app/settings.py
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sqltx.infra.db.sqlite import LOCK_MODES

DEFAULT_DB = Path.cwd() / "sqltx.db"
JOURNAL_MODES = ("delete", "truncate", "persist", "memory", "wal", "off")


class Settings(BaseSettings):
    """
    Connection configuration.

    Sources (highest precedence first):
      1. Environment variables (prefixed with SQLTX_, e.g. SQLTX_DB_PATH)
      2. .env file in the working directory
      3. Defaults below
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SQLTX_",
        extra="ignore",
    )

    db_path: Path = Field(default=DEFAULT_DB, description="SQLite DB path")
    lock_mode: str = Field(default="deferred", description="BEGIN mode: deferred/immediate/exclusive")
    busy_timeout_ms: int = Field(default=30000, ge=0, description="PRAGMA busy_timeout")
    journal_mode: str = Field(default="wal", description="PRAGMA journal_mode")
    log_level: str = Field(default="WARNING", description="Root log level for scripts")

    # --- Validators / normalizers ---
    @field_validator("db_path", mode="before")
    @classmethod
    def _expand_user(cls, v):
        if isinstance(v, str | Path):
            return Path(str(v)).expanduser()
        return v

    @field_validator("lock_mode")
    @classmethod
    def _check_lock_mode(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in LOCK_MODES:
            raise ValueError(f"lock_mode must be one of {LOCK_MODES}")
        return v

    @field_validator("journal_mode")
    @classmethod
    def _check_journal_mode(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in JOURNAL_MODES:
            raise ValueError(f"journal_mode must be one of {JOURNAL_MODES}")
        return v

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in logging.getLevelNamesMapping():
            raise ValueError(f"log_level must be a logging level name, got {v!r}")
        return v

    # --- Helpers ---
    def is_memory(self) -> bool:
        return str(self.db_path) == ":memory:"

    def ensure_directories(self) -> None:
        """Create the parent dir for the DB (idempotent)."""
        if not self.is_memory():
            self.db_path.parent.mkdir(parents=True, exist_ok=True)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Singleton-style accessor so imports are cheap and consistent system-wide.
    Also ensures directories exist on first access.
    """
    s = Settings()
    s.ensure_directories()
    return s
