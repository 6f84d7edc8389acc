from __future__ import annotations

import functools
import inspect
from collections.abc import Callable
from typing import Any, TypeVar

from sqltx.core.context import Context
from sqltx.core.errors import (
    AbortRollbackFailed,
    RollbackFailed,
    RunnerNotTransactional,
    TransactionStartFailed,
)
from sqltx.core.options import TxOptions
from sqltx.core.protocols import Runner, Tx, TxBeginner

T = TypeVar("T")


def run_in_transaction(
    ctx: Context,
    runner: Runner,
    work_unit: Callable[[Runner], T],
    options: TxOptions | None = None,
) -> T:
    """
    Run ``work_unit`` inside a single database transaction.

    All statements should go through the runner handed to ``work_unit``.
    If it raises, the transaction is rolled back and the same exception is
    re-raised; otherwise the transaction is committed and its return value
    is passed back.

    Abnormal terminations (BaseException that is not an Exception, e.g.
    KeyboardInterrupt or ``Abort``) also roll back and are re-raised as-is.

    If ``runner`` is already an open transaction it is reused: no new
    transaction is started, and committing or rolling back stays with
    whoever opened it. This lets transactional functions call each other.
    A runner that can also begin transactions is treated as a connection,
    never as an open transaction.
    """
    if isinstance(runner, Tx) and not isinstance(runner, TxBeginner):
        return work_unit(runner)

    if not isinstance(runner, TxBeginner):
        raise RunnerNotTransactional(runner)

    try:
        tx = runner.begin(ctx, options)
    except Exception as e:
        raise TransactionStartFailed(e) from e

    try:
        result = work_unit(tx)
    except Exception as e:
        try:
            tx.rollback()
        except Exception as rollback_err:
            raise RollbackFailed(e, rollback_err) from rollback_err
        raise
    except BaseException as e:
        try:
            tx.rollback()
        except Exception as rollback_err:
            raise AbortRollbackFailed(e, rollback_err) from rollback_err
        raise

    tx.commit()
    return result


def transactional(
    runner_arg: str = "db",
    options: TxOptions | None = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator form of run_in_transaction.

    The wrapped function must take a ``ctx`` argument and a runner argument
    (named by ``runner_arg``). The body runs with the transaction bound in
    place of the runner.
    """

    def decorator(fn: Callable[..., T]) -> Callable[..., T]:
        sig = inspect.signature(fn)
        if "ctx" not in sig.parameters or runner_arg not in sig.parameters:
            raise TypeError(f"{fn.__name__} must accept 'ctx' and {runner_arg!r} arguments")

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            bound = sig.bind(*args, **kwargs)
            bound.apply_defaults()

            def work(tx: Runner) -> T:
                bound.arguments[runner_arg] = tx
                return fn(*bound.args, **bound.kwargs)

            return run_in_transaction(
                bound.arguments["ctx"], bound.arguments[runner_arg], work, options
            )

        return wrapper

    return decorator
