"""SQLAlchemy engine creation and transactional scope.

PostgreSQL is the production target: the inventory repository relies on
``SELECT ... FOR UPDATE`` row locks there. SQLite (development, tests)
ignores FOR UPDATE, so every SQLite transaction is opened with
``BEGIN IMMEDIATE`` instead, which serializes writers on the database lock.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from mapcraft.infrastructure.persistence.orm import Base
from mapcraft.logging_config import get_logger

logger = get_logger("db.engine")


def init_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine for *database_url* and make sure the schema exists."""
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False, "timeout": 30},
        )
        _use_immediate_transactions(engine)
    else:
        engine = create_engine(
            database_url,
            echo=echo,
            pool_pre_ping=True,
            isolation_level="READ COMMITTED",
        )

    Base.metadata.create_all(engine)
    logger.info(
        "engine_initialized",
        extra={"dialect": engine.dialect.name, "echo": echo},
    )
    return engine


def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False)


_open_sessions = threading.local()


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """Commit on normal exit, roll back and re-raise on exception.

    A scope opened while another scope on the same factory is active in
    this thread joins the outer session under a SAVEPOINT, so nothing it
    writes is committed before the outer transaction is.
    """
    active = getattr(_open_sessions, "by_factory", None)
    if active is None:
        active = _open_sessions.by_factory = {}

    outer = active.get(factory)
    if outer is not None:
        with outer.begin_nested():
            yield outer
        return

    session = factory()
    active[factory] = session
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        logger.debug("transaction_rolled_back", exc_info=True)
        raise
    finally:
        del active[factory]
        session.close()


def _use_immediate_transactions(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        # Let SQLAlchemy emit BEGIN itself.
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")
