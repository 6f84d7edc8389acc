"""Run several database statements as one all-or-nothing transaction.

``run_in_transaction(ctx, db, fn)`` begins a transaction on ``db``, calls
``fn`` with it, and commits when ``fn`` returns or rolls back when it raises.
Passing an already-open transaction reuses it, so transactional helpers can
call each other freely. A SQLite adapter lives in ``sqltx.infra.db.sqlite``;
try it with ``python -m sqltx.scripts.example_users``.
"""

from sqltx.core.context import Context, background
from sqltx.core.errors import (
    Abort,
    AbortRollbackFailed,
    RollbackFailed,
    RunnerNotTransactional,
    TransactionError,
    TransactionStartFailed,
)
from sqltx.core.options import IsolationLevel, TxOptions
from sqltx.core.protocols import Runner, Tx, TxBeginner
from sqltx.core.transaction import run_in_transaction, transactional

__all__ = [
    "Abort",
    "AbortRollbackFailed",
    "Context",
    "IsolationLevel",
    "RollbackFailed",
    "Runner",
    "RunnerNotTransactional",
    "TransactionError",
    "TransactionStartFailed",
    "Tx",
    "TxBeginner",
    "TxOptions",
    "background",
    "run_in_transaction",
    "transactional",
]
