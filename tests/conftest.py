import os
import sqlite3
import sys
import tempfile

import pytest

# Ensure 'src/' is on sys.path for imports like 'from sqltx.core import transaction'
_REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_SRC_PATH = os.path.join(_REPO_ROOT, "src")
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from sqltx.infra.db.sqlite import SQLiteDB  # noqa: E402


# --- SQLite test DB fixtures ---


@pytest.fixture()
def temp_db_path():
    fd, path = tempfile.mkstemp(prefix="sqltx_", suffix=".db")
    os.close(fd)
    try:
        yield path
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass


@pytest.fixture()
def conn_rw(temp_db_path):
    """Read/write autocommit SQLite connection with a minimal users table."""
    conn = sqlite3.connect(temp_db_path, check_same_thread=False, isolation_level=None)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS users (
          id INTEGER PRIMARY KEY AUTOINCREMENT,
          name TEXT NOT NULL,
          email TEXT UNIQUE NOT NULL
        );
        """
    )
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture()
def db(conn_rw):
    return SQLiteDB(conn_rw)


@pytest.fixture()
def reader(temp_db_path):
    """Second connection, to check what other sessions can see."""
    conn = sqlite3.connect(temp_db_path)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()
