from __future__ import annotations


class TransactionError(Exception):
    pass


class RunnerNotTransactional(TransactionError):
    def __init__(self, runner: object) -> None:
        super().__init__(
            f"provided runner does not implement TxBeginner: {type(runner).__name__}"
        )
        self.runner = runner


class TransactionStartFailed(TransactionError):
    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"error starting transaction: {cause}")
        self.cause = cause


class RollbackFailed(TransactionError):
    """The unit of work failed and the compensating rollback failed too."""

    def __init__(self, original: BaseException, rollback_error: BaseException) -> None:
        super().__init__(
            f"unable to rollback after error: {original}, rollback error: {rollback_error}"
        )
        self.original = original
        self.rollback_error = rollback_error


class UnsupportedIsolationLevel(TransactionError):
    pass


class TransactionDone(TransactionError):
    """Commit or rollback was called on a transaction that already finished."""


class Abort(BaseException):
    """
    Abnormal termination a unit of work can raise on purpose.

    Derives from BaseException so ordinary ``except Exception`` handlers
    inside the unit of work let it through, like KeyboardInterrupt.
    """

    def __init__(self, payload: object = None) -> None:
        super().__init__(payload)
        self.payload = payload


class AbortRollbackFailed(BaseException):
    """An abnormal termination whose rollback also failed. Still a BaseException."""

    def __init__(self, payload: BaseException, rollback_error: BaseException) -> None:
        super().__init__(
            f"unable to rollback after abort with value: {payload!r}, "
            f"rollback error: {rollback_error}"
        )
        self.payload = payload
        self.rollback_error = rollback_error


class ContextError(Exception):
    pass


class ContextCancelled(ContextError):
    pass


class DeadlineExceeded(ContextError):
    pass
