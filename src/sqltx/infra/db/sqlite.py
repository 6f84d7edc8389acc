from __future__ import annotations

import logging
import sqlite3
from collections.abc import Generator
from contextlib import contextmanager

from sqltx.core.context import Context
from sqltx.core.errors import TransactionDone, UnsupportedIsolationLevel
from sqltx.core.options import IsolationLevel, TxOptions
from sqltx.core.protocols import Params

logger = logging.getLogger(__name__)

LOCK_MODES = ("deferred", "immediate", "exclusive")

# VM instructions between cancellation checks while a statement runs
PROGRESS_STEPS = 1000


@contextmanager
def _interruptible(conn: sqlite3.Connection, ctx: Context) -> Generator[None]:
    """
    Fail fast on a done context, and interrupt the running statement if the
    context becomes done while it executes (sqlite3 raises OperationalError
    "interrupted").
    """
    ctx.check()
    conn.set_progress_handler(lambda: 1 if ctx.done() else 0, PROGRESS_STEPS)
    try:
        yield
    finally:
        conn.set_progress_handler(None, 0)


def _execute(conn: sqlite3.Connection, ctx: Context, query: str, params: Params) -> sqlite3.Cursor:
    with _interruptible(conn, ctx):
        return conn.execute(query, params)


def _query(conn: sqlite3.Connection, ctx: Context, query: str, params: Params) -> list:
    with _interruptible(conn, ctx):
        return conn.execute(query, params).fetchall()


def _pragmas_for(options: TxOptions) -> list[str]:
    """Per-transaction pragmas for the options. Each one is reset to 0 afterwards."""
    pragmas: list[str] = []
    level = options.isolation
    if level is IsolationLevel.READ_UNCOMMITTED:
        pragmas.append("read_uncommitted")
    elif level not in (IsolationLevel.DEFAULT, IsolationLevel.SERIALIZABLE):
        raise UnsupportedIsolationLevel(f"sqlite does not support isolation level {level.label}")
    if options.read_only:
        pragmas.append("query_only")
    return pragmas


class SQLiteDB:
    """
    TxBeginner over a sqlite3 connection.

    The connection is switched to autocommit (isolation_level=None) so that
    sqlite3 never opens transactions implicitly; BEGIN/COMMIT/ROLLBACK are
    issued explicitly by SQLiteTx.
    """

    def __init__(self, conn: sqlite3.Connection, *, lock_mode: str = "deferred") -> None:
        lock_mode = lock_mode.strip().lower()
        if lock_mode not in LOCK_MODES:
            raise ValueError(f"lock_mode must be one of {LOCK_MODES}, got {lock_mode!r}")
        if conn.isolation_level is not None:
            conn.isolation_level = None
        self.conn = conn
        self.lock_mode = lock_mode

    def execute(self, ctx: Context, query: str, params: Params = ()) -> sqlite3.Cursor:
        return _execute(self.conn, ctx, query, params)

    def query(self, ctx: Context, query: str, params: Params = ()) -> list:
        return _query(self.conn, ctx, query, params)

    def begin(self, ctx: Context, options: TxOptions | None = None) -> SQLiteTx:
        pragmas = _pragmas_for(options or TxOptions())
        applied: list[str] = []
        with _interruptible(self.conn, ctx):
            try:
                for name in pragmas:
                    self.conn.execute(f"PRAGMA {name} = 1")
                    applied.append(name)
                self.conn.execute(f"BEGIN {self.lock_mode.upper()}")
            except sqlite3.Error:
                _reset_pragmas_after_error(self.conn, applied)
                raise
        logger.debug("BEGIN %s (pragmas=%s)", self.lock_mode.upper(), pragmas)
        return SQLiteTx(self.conn, pragmas)

    def close(self) -> None:
        self.conn.close()


def _reset_pragmas(conn: sqlite3.Connection, pragmas: list[str]) -> None:
    for name in pragmas:
        conn.execute(f"PRAGMA {name} = 0")


def _reset_pragmas_after_error(conn: sqlite3.Connection, pragmas: list[str]) -> None:
    """Reset on a failure path. The error being raised stays the one the caller sees."""
    try:
        _reset_pragmas(conn, pragmas)
    except sqlite3.Error as e:
        logger.debug("resetting pragmas %s failed: %s", pragmas, e)


class SQLiteTx:
    """An open sqlite transaction. Not safe for concurrent use."""

    def __init__(self, conn: sqlite3.Connection, pragmas: list[str] | None = None) -> None:
        self.conn = conn
        self._pragmas = list(pragmas or [])
        self._done = False

    @property
    def done(self) -> bool:
        return self._done

    def _ensure_open(self) -> None:
        if self._done:
            raise TransactionDone("transaction has already been committed or rolled back")

    def execute(self, ctx: Context, query: str, params: Params = ()) -> sqlite3.Cursor:
        self._ensure_open()
        return _execute(self.conn, ctx, query, params)

    def query(self, ctx: Context, query: str, params: Params = ()) -> list:
        self._ensure_open()
        return _query(self.conn, ctx, query, params)

    def commit(self) -> None:
        self._ensure_open()
        self._done = True
        try:
            self.conn.execute("COMMIT")
        except sqlite3.Error:
            # A failed COMMIT (e.g. SQLITE_BUSY) leaves the transaction open.
            self._abandon()
            raise
        _reset_pragmas(self.conn, self._pragmas)
        logger.debug("COMMIT")

    def _abandon(self) -> None:
        try:
            if self.conn.in_transaction:
                self.conn.execute("ROLLBACK")
        except sqlite3.Error as e:
            logger.debug("ROLLBACK after failed COMMIT failed: %s", e)
        _reset_pragmas_after_error(self.conn, self._pragmas)

    def rollback(self) -> None:
        self._ensure_open()
        self._done = True
        try:
            # sqlite may already have rolled back on its own (e.g. SQLITE_FULL)
            if self.conn.in_transaction:
                self.conn.execute("ROLLBACK")
        finally:
            _reset_pragmas(self.conn, self._pragmas)
        logger.debug("ROLLBACK")
