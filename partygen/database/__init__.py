"""Durable storage for cached content."""

from partygen.database.connection import (
    create_cache_engine,
    create_session_factory,
    drop_db,
    init_db,
    session_scope,
)
from partygen.database.models import Base, CachedContent

__all__ = [
    "Base",
    "CachedContent",
    "create_cache_engine",
    "create_session_factory",
    "drop_db",
    "init_db",
    "session_scope",
]
