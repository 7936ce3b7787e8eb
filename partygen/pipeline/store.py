"""Durable key-value stores backing the second cache tier."""

import logging
from typing import Protocol, runtime_checkable

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from partygen.database.connection import (
    create_cache_engine,
    create_session_factory,
    init_db,
    session_scope,
)
from partygen.database.models import CachedContent, utc_now

logger = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStore(Protocol):
    """Opaque string store. No transactions, no queries."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryKeyValueStore:
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class SqlKeyValueStore:
    """Store backed by the ``content_cache`` table.

    Args:
        engine: Engine to use. When omitted one is created from settings
            and disposed by ``close()``.
        create_tables: Create the table on construction.
    """

    def __init__(self, engine: Engine | None = None, create_tables: bool = True) -> None:
        self._owns_engine = engine is None
        self._engine = engine or create_cache_engine()
        self._session_factory: sessionmaker[Session] = create_session_factory(self._engine)
        if create_tables:
            init_db(self._engine)

    @classmethod
    def from_url(cls, url: str) -> "SqlKeyValueStore":
        """Create a store that owns an engine for the given URL."""
        store = cls(engine=create_cache_engine(url, echo=False))
        store._owns_engine = True
        return store

    def get(self, key: str) -> str | None:
        with session_scope(self._session_factory) as db:
            row = db.get(CachedContent, key)
            return row.value if row is not None else None

    def set(self, key: str, value: str) -> None:
        with session_scope(self._session_factory) as db:
            row = db.get(CachedContent, key)
            if row is None:
                db.add(CachedContent(key=key, value=value))
            else:
                row.value = value
                row.updated_at = utc_now()
        logger.debug(f"Persisted cache entry {key}")

    def close(self) -> None:
        """Dispose the engine if this store created it."""
        if self._owns_engine:
            self._engine.dispose()
