"""Tests for the two-tier content cache."""

import json
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from partygen.pipeline.cache import CacheEntry, ContentCache
from partygen.pipeline.store import MemoryKeyValueStore
from tests.factories import FakeClock

HOUR = 60 * 60


class TestCacheEntry:
    """Tests for CacheEntry validity."""

    def test_valid_before_ttl(self):
        entry = CacheEntry("k", {"a": 1}, written_at=100.0, ttl=10.0)
        assert entry.is_valid(109.9)

    def test_invalid_at_ttl(self):
        """Validity is strict: now - written_at must be below the TTL."""
        entry = CacheEntry("k", {"a": 1}, written_at=100.0, ttl=10.0)
        assert not entry.is_valid(110.0)


class TestContentCacheTiers:
    """Tests for memory and durable tier interplay."""

    def test_set_writes_both_tiers(self, cache, store, clock):
        cache.set("key", {"word": "pizza"})

        envelope = json.loads(store.get("key"))
        assert envelope == {"written_at": clock.now, "payload": {"word": "pizza"}}
        assert cache.stats().memory_entries == 1

    def test_get_from_memory(self, cache):
        cache.set("key", {"word": "pizza"})

        assert cache.get("key") == {"word": "pizza"}
        assert cache.stats().hits == 1

    def test_durable_hit_survives_new_cache_and_promotes(self, store, clock):
        """A fresh cache over the same store serves earlier writes."""
        ContentCache(store, clock=clock).set("key", {"word": "pizza"})
        reopened = ContentCache(store, clock=clock)

        assert reopened.get("key") == {"word": "pizza"}
        assert reopened.stats().memory_entries == 1

    def test_miss_for_unknown_key(self, cache):
        assert cache.get("missing") is None
        assert cache.stats().misses == 1

    def test_discard_only_clears_memory(self, cache, store):
        cache.set("key", {"word": "pizza"})
        cache.discard("key")

        assert cache.stats().memory_entries == 0
        assert "key" in store


class TestContentCacheTTL:
    """Tests for TTL enforcement."""

    def test_hit_at_23_hours(self, cache, clock):
        cache.set("key", {"n": 1})
        clock.advance(23 * HOUR)

        assert cache.get("key") == {"n": 1}

    def test_miss_at_25_hours(self, cache, clock):
        cache.set("key", {"n": 1})
        clock.advance(25 * HOUR)

        assert cache.get("key") is None
        assert cache.stats().expired == 1

    def test_expired_durable_entry_is_miss(self, store, clock):
        ContentCache(store, clock=clock).set("key", {"n": 1})
        clock.advance(25 * HOUR)

        reopened = ContentCache(store, clock=clock)
        assert reopened.get("key") is None
        assert reopened.stats().expired == 1

    def test_expired_memory_entry_reads_refreshed_store(self, store, clock):
        """A newer write from another cache over the same store is served."""
        first = ContentCache(store, clock=clock)
        second = ContentCache(store, clock=clock)
        first.set("key", {"v": "old"})
        clock.advance(23 * HOUR)
        second.set("key", {"v": "new"})
        clock.advance(2 * HOUR)

        assert first.get("key") == {"v": "new"}
        assert first.stats().hits == 1
        assert first.stats().expired == 0

    def test_expired_entries_are_not_purged(self, cache, store, clock):
        cache.set("key", {"n": 1})
        clock.advance(25 * HOUR)
        cache.get("key")

        assert "key" in store

    def test_custom_ttl(self, store):
        clock = FakeClock()
        cache = ContentCache(store, ttl_seconds=60, clock=clock)
        cache.set("key", {"n": 1})
        clock.advance(61)

        assert cache.get("key") is None


class TestContentCacheCorruption:
    """Tests for corrupt durable entries."""

    @pytest.mark.parametrize(
        "raw",
        [
            "not json at all",
            "[1, 2, 3]",
            '{"payload": {"n": 1}}',
            '{"written_at": "yesterday", "payload": {"n": 1}}',
            '{"written_at": 1700000000.0}',
        ],
    )
    def test_corrupt_entry_is_miss(self, raw, clock):
        store = MemoryKeyValueStore()
        store.set("key", raw)
        cache = ContentCache(store, clock=clock)

        assert cache.get("key") is None
        assert cache.stats().corrupt == 1


class TestContentCacheStoreFailures:
    """Tests for durable store errors."""

    def test_read_error_is_miss(self, clock):
        store = MagicMock()
        store.get.side_effect = SQLAlchemyError("database locked")
        cache = ContentCache(store, clock=clock)

        assert cache.get("key") is None

    def test_write_error_keeps_memory_tier(self, clock):
        store = MagicMock()
        store.set.side_effect = OperationalError("INSERT", {}, Exception("disk full"))
        cache = ContentCache(store, clock=clock)

        cache.set("key", {"n": 1})

        assert cache.get("key") == {"n": 1}


class TestContentCacheLifecycle:
    """Tests for stats and close."""

    def test_hit_rate(self, cache):
        cache.set("key", {"n": 1})
        cache.get("key")
        cache.get("other")

        assert cache.stats().hit_rate == 0.5

    def test_close_clears_memory_and_closes_store(self, clock):
        store = MagicMock()
        cache = ContentCache(store, clock=clock)
        cache.set("key", {"n": 1})

        cache.close()

        assert cache.stats().memory_entries == 0
        store.close.assert_called_once()

    def test_close_without_store_close(self, cache):
        """Stores without close() are fine."""
        cache.close()
