# filepath: src/sqltx/infra/db/conn.py
from __future__ import annotations

import sqlite3

from sqltx.app.settings import Settings, get_settings
from sqltx.infra.db.sqlite import SQLiteDB


def open_connection(settings: Settings | None = None) -> sqlite3.Connection:
    """
    Open a sqlite3 connection in autocommit mode with row_factory set to Row
    so results behave like dicts.
    """
    settings = settings or get_settings()
    conn = sqlite3.connect(
        str(settings.db_path),
        timeout=settings.busy_timeout_ms / 1000,
        isolation_level=None,
    )
    conn.row_factory = sqlite3.Row
    if not settings.is_memory():
        conn.execute(f"PRAGMA journal_mode={settings.journal_mode};")
    conn.execute(f"PRAGMA busy_timeout={settings.busy_timeout_ms};")
    conn.execute("PRAGMA foreign_keys=ON;")
    return conn


def connect(settings: Settings | None = None) -> SQLiteDB:
    settings = settings or get_settings()
    return SQLiteDB(open_connection(settings), lock_mode=settings.lock_mode)
