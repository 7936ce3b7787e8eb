"""Two-tier TTL cache for accepted payloads.

Tier 1 is an in-process dict that saves re-reading and re-decoding during
a session. Tier 2 is a durable key-value store that survives restarts.
Reads try tier 1 then tier 2 (promoting hits into tier 1), writes go to
both.

Expired, undecodable or otherwise corrupt entries are all reported as a
miss. Nothing is purged; a later write for the same key overwrites.
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

from sqlalchemy.exc import SQLAlchemyError

from partygen.pipeline.store import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 24 * 60 * 60


@dataclass(frozen=True)
class CacheEntry:
    """A payload and the moment it was written."""

    fingerprint: str
    payload: Any
    written_at: float
    ttl: float

    def is_valid(self, now: float) -> bool:
        return now - self.written_at < self.ttl

    def age_seconds(self, now: float) -> float:
        return now - self.written_at


@dataclass
class CacheStats:
    """Counters for cache traffic."""

    memory_entries: int = 0
    hits: int = 0
    misses: int = 0
    expired: int = 0
    corrupt: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0


class ContentCache:
    """TTL cache over an in-memory map and a durable store.

    Args:
        store: Durable second tier.
        ttl_seconds: Maximum entry age.
        clock: Returns the current time in epoch seconds.
    """

    def __init__(
        self,
        store: KeyValueStore,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._ttl = ttl_seconds
        self._clock = clock
        self._memory: dict[str, CacheEntry] = {}
        self._stats = CacheStats()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, key: str) -> Any | None:
        """Return the cached payload, or None on miss or expiry.

        Args:
            key: Fingerprint to look up.
        """
        now = self._clock()

        entry = self._memory.get(key)
        if entry is not None:
            if entry.is_valid(now):
                self._stats.hits += 1
                logger.debug(f"Cache hit (memory) for {key}, age={entry.age_seconds(now):.0f}s")
                return entry.payload
            del self._memory[key]
            logger.debug(f"Memory entry expired for {key}, checking store")

        try:
            raw = self._store.get(key)
        except SQLAlchemyError as e:
            logger.warning(f"Durable cache read failed for {key}: {e}")
            self._stats.misses += 1
            return None

        if raw is None:
            self._stats.misses += 1
            logger.debug(f"Cache miss for {key}")
            return None

        entry = self._decode(key, raw)
        if entry is None:
            self._stats.corrupt += 1
            self._stats.misses += 1
            logger.warning(f"Ignoring corrupt cache entry for {key}")
            return None

        if not entry.is_valid(now):
            self._stats.expired += 1
            self._stats.misses += 1
            logger.debug(f"Cache entry expired for {key}, age={entry.age_seconds(now):.0f}s")
            return None

        self._memory[key] = entry
        self._stats.hits += 1
        logger.debug(f"Cache hit (store) for {key}, promoted to memory")
        return entry.payload

    def set(self, key: str, payload: Any) -> None:
        """Write a payload to both tiers.

        Args:
            key: Fingerprint.
            payload: JSON-serializable payload.
        """
        entry = CacheEntry(
            fingerprint=key,
            payload=payload,
            written_at=self._clock(),
            ttl=self._ttl,
        )
        self._memory[key] = entry

        envelope = json.dumps(
            {"written_at": entry.written_at, "payload": payload},
            ensure_ascii=False,
        )
        try:
            self._store.set(key, envelope)
        except SQLAlchemyError as e:
            logger.warning(f"Durable cache write failed for {key}: {e}")
            return
        logger.debug(f"Cached payload for {key}")

    def discard(self, key: str) -> None:
        """Drop a key from the in-memory tier."""
        self._memory.pop(key, None)

    def stats(self) -> CacheStats:
        """Snapshot of the cache counters."""
        return CacheStats(
            memory_entries=len(self._memory),
            hits=self._stats.hits,
            misses=self._stats.misses,
            expired=self._stats.expired,
            corrupt=self._stats.corrupt,
        )

    def close(self) -> None:
        """Clear the memory tier and close the store if it supports it."""
        self._memory.clear()
        close = getattr(self._store, "close", None)
        if callable(close):
            close()
        logger.debug("Content cache closed")

    def _decode(self, key: str, raw: str) -> CacheEntry | None:
        try:
            envelope = json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            return None
        if not isinstance(envelope, dict) or "payload" not in envelope:
            return None
        written_at = envelope.get("written_at")
        if isinstance(written_at, bool) or not isinstance(written_at, (int, float)):
            return None
        return CacheEntry(
            fingerprint=key,
            payload=envelope["payload"],
            written_at=float(written_at),
            ttl=self._ttl,
        )
