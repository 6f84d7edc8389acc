from sqltx.app.settings import Settings
from sqltx.core.context import background
from sqltx.core.transaction import run_in_transaction
from sqltx.infra.db.conn import connect


def test_connect_applies_settings(tmp_path):
    settings = Settings(db_path=tmp_path / "conn.db", lock_mode="immediate", busy_timeout_ms=1234)
    db = connect(settings)
    try:
        assert db.lock_mode == "immediate"
        assert db.conn.isolation_level is None
        assert db.conn.execute("PRAGMA busy_timeout").fetchone()[0] == 1234
        assert db.conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1
        assert db.conn.execute("PRAGMA journal_mode").fetchone()[0] == "wal"
    finally:
        db.close()


def test_connect_memory_db_rows_behave_like_dicts():
    db = connect(Settings(db_path=":memory:"))
    try:
        ctx = background()
        db.execute(ctx, "CREATE TABLE kv (k TEXT PRIMARY KEY, v TEXT)")
        run_in_transaction(ctx, db, lambda tx: tx.execute(ctx, "INSERT INTO kv VALUES ('a', '1')"))
        rows = db.query(ctx, "SELECT k, v FROM kv")
        assert dict(rows[0]) == {"k": "a", "v": "1"}
    finally:
        db.close()
