"""Database engine and session management for the registry."""

from __future__ import annotations

from collections.abc import Generator, Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from solplace.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import solplace.models  # noqa: E402,F401


def build_engine(database_url: str, *, echo: bool = False) -> Engine:
    """Create an engine for `database_url`.

    SQLite connections are shared between the request threadpool and the
    event loop, so the same-thread check is disabled for that backend.
    """
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(
        database_url,
        pool_pre_ping=True,
        echo=echo,
        connect_args=connect_args,
    )


engine = build_engine(settings.effective_database_url, echo=settings.sql_debug)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection.

    Endpoints own the transaction: they commit after a successful placement
    and roll back when the engine rejects one.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    """Run a block in one transaction, committing on success."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_tables() -> None:
    """Create all registry tables."""
    Base.metadata.create_all(bind=engine)


def drop_tables() -> None:
    """Drop all registry tables."""
    Base.metadata.drop_all(bind=engine)
