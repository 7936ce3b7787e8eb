"""Database connection and session management."""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from partygen.database.models import Base


def create_cache_engine(url: str | None = None, echo: bool | None = None) -> Engine:
    """Create an engine for the content cache database.

    Args:
        url: SQLAlchemy URL. Defaults to ``settings.cache_database_url``.
        echo: Log SQL statements. Defaults to ``settings.debug``.
    """
    if url is None or echo is None:
        from partygen.config import settings

        url = url or settings.cache_database_url
        echo = settings.debug if echo is None else echo

    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a session factory bound to an engine."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )


def init_db(engine: Engine) -> None:
    """Create the cache tables if they do not exist."""
    Base.metadata.create_all(bind=engine)


def drop_db(engine: Engine) -> None:
    """Drop all cache tables.

    WARNING: This will delete all cached content!
    """
    Base.metadata.drop_all(bind=engine)


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """Get a database session with automatic cleanup.

    Usage:
        with session_scope(factory) as db:
            row = db.get(CachedContent, key)
    """
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
