from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, Protocol, runtime_checkable

from sqltx.core.context import Context
from sqltx.core.options import TxOptions

Params = Sequence[Any] | dict[str, Any]


# Capability contracts. Anything with these methods can be handed to
# run_in_transaction: a real engine adapter or an in-memory fake.
@runtime_checkable
class Runner(Protocol):
    def execute(self, ctx: Context, query: str, params: Params = ()) -> Any: ...
    def query(self, ctx: Context, query: str, params: Params = ()) -> Iterable[Any]: ...


@runtime_checkable
class Tx(Runner, Protocol):
    def commit(self) -> None: ...
    def rollback(self) -> None: ...


@runtime_checkable
class TxBeginner(Runner, Protocol):
    def begin(self, ctx: Context, options: TxOptions | None = None) -> Tx: ...
