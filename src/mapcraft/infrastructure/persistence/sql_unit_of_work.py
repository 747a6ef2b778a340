"""SQL-backed UnitOfWork.

The outermost ``begin()`` opens a ``session_scope``; every repository built
on the same session factory joins that session for the rest of the block.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session, sessionmaker

from mapcraft.domain.repository.unit_of_work import UnitOfWork
from mapcraft.infrastructure.persistence.engine import session_scope


class SqlUnitOfWork(UnitOfWork):

    def __init__(self, factory: sessionmaker[Session]) -> None:
        super().__init__()
        self._factory = factory

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        with session_scope(self._factory):
            yield
