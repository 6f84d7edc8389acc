from __future__ import annotations

import threading
import time

from sqltx.core.errors import ContextCancelled, DeadlineExceeded


class Context:
    """
    Cancellation + deadline carrier passed through to every database call.

    A child context is done as soon as its parent is done, or its own
    deadline passes, or it is cancelled directly. Cancelling a child never
    affects the parent.
    """

    def __init__(self, deadline: float | None = None, parent: Context | None = None) -> None:
        self._cancelled = threading.Event()
        self._parent = parent
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self.deadline = deadline

    # --- derivation ---
    def with_cancel(self) -> Context:
        return Context(parent=self)

    def with_timeout(self, seconds: float) -> Context:
        return Context(deadline=time.monotonic() + seconds, parent=self)

    # --- state ---
    def cancel(self) -> None:
        self._cancelled.set()

    def cancelled(self) -> bool:
        if self._cancelled.is_set():
            return True
        return self._parent is not None and self._parent.cancelled()

    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def done(self) -> bool:
        return self.cancelled() or self.expired()

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None when there is none."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def check(self) -> None:
        if self.cancelled():
            raise ContextCancelled("context cancelled")
        if self.expired():
            raise DeadlineExceeded("context deadline exceeded")

    def __repr__(self) -> str:
        return f"Context(deadline={self.deadline!r}, done={self.done()})"


def background() -> Context:
    """Root context with no deadline."""
    return Context()
