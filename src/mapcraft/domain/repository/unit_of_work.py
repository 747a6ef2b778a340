"""Abstract unit of work: groups repository calls into one transaction.

Inside ``begin()`` every repository sharing the unit of work reads and
writes through the same transaction, so an order line's status change and
the ledger writes behind it commit together or not at all.

``begin()`` blocks nest: an inner block joins the outermost one. Callbacks
registered with ``after_commit()`` run once the outermost block has
committed and are dropped if it rolls back.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from contextlib import AbstractContextManager, contextmanager
from typing import Callable, Iterator


class _ThreadState(threading.local):

    def __init__(self) -> None:
        self.depth = 0
        self.pending: list[Callable[[], None]] = []


class UnitOfWork(ABC):

    def __init__(self) -> None:
        self._state = _ThreadState()

    @abstractmethod
    def _transaction(self) -> AbstractContextManager[None]:
        """Open the outermost transaction: commit on clean exit, roll back on error."""

    @contextmanager
    def begin(self) -> Iterator[None]:
        state = self._state
        if state.depth:
            state.depth += 1
            try:
                yield
            finally:
                state.depth -= 1
            return

        state.depth, state.pending = 1, []
        try:
            with self._transaction():
                yield
        finally:
            state.depth = 0
            callbacks, state.pending = state.pending, []

        # Only reached once the transaction has committed.
        for callback in callbacks:
            callback()

    def after_commit(self, callback: Callable[[], None]) -> None:
        """Run *callback* after the current transaction commits (now if none is open)."""
        if self._state.depth:
            self._state.pending.append(callback)
        else:
            callback()
