import argparse
import logging
import sqlite3
from contextlib import closing
from pathlib import Path

from sqltx.app.settings import Settings, get_settings
from sqltx.core.context import background
from sqltx.core.transaction import run_in_transaction
from sqltx.infra.db.conn import connect
from sqltx.infra.db.sqlite import SQLiteDB


def create_users_table(db: SQLiteDB) -> None:
    db.execute(
        background(),
        """
        CREATE TABLE IF NOT EXISTS users (
          id INTEGER PRIMARY KEY AUTOINCREMENT,
          name TEXT NOT NULL,
          email TEXT UNIQUE NOT NULL
        )
        """,
    )


def insert_user(db: SQLiteDB, name: str, email: str) -> str:
    """Insert a user and read it back inside the same transaction."""
    ctx = background()

    def work(tx):
        tx.execute(ctx, "INSERT INTO users (name, email) VALUES (?, ?)", (name, email))
        rows = tx.query(ctx, "SELECT name FROM users WHERE email = ?", (email,))
        return rows[0]["name"]

    return run_in_transaction(ctx, db, work)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Insert a user inside a transaction.")
    parser.add_argument("--db", type=Path, default=None, help="SQLite file (default: settings)")
    parser.add_argument("--name", default="John")
    parser.add_argument("--email", default="john@gmail.com")
    args = parser.parse_args(argv)

    settings = Settings(db_path=args.db) if args.db else get_settings()
    settings.ensure_directories()
    logging.basicConfig(level=settings.log_level)

    with closing(connect(settings)) as db:
        create_users_table(db)
        try:
            name = insert_user(db, args.name, args.email)
        except sqlite3.IntegrityError as e:
            print(f"❌ Transaction rolled back: {e}")
            return 1
        print(f"successfully inserted user {name} inside transaction")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
