"""Core test fixtures for partygen tests."""

import random
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import create_engine

from partygen.content.fallback import FallbackProvider
from partygen.content.validation import ValidationGate
from partygen.database.models import Base
from partygen.pipeline.cache import ContentCache
from partygen.pipeline.retry import RetryConfig, RetryController
from partygen.pipeline.service import ContentPipeline
from partygen.pipeline.store import MemoryKeyValueStore
from tests.factories import FakeClock, trivia_payload


@pytest.fixture
def engine():
    """Create SQLite in-memory engine for fast tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def cache(store, clock) -> ContentCache:
    return ContentCache(store, ttl_seconds=24 * 60 * 60, clock=clock)


@pytest.fixture
def sleep() -> AsyncMock:
    """Backoff sleep that returns immediately and records delays."""
    return AsyncMock(return_value=None)


@pytest.fixture
def port() -> MagicMock:
    """Generation port double; set ``port.generate`` side effects per test."""
    port = MagicMock()
    port.provider_name = "fake"
    port.generate = AsyncMock(return_value=trivia_payload())
    return port


@pytest.fixture
def make_pipeline(cache, port, sleep):
    """Factory for pipelines wired to the fake port, cache and sleep."""

    def _make(
        dedupe_inflight: bool = False,
        prefetch_capacity: int = 1,
        max_retries: int = 2,
        fallbacks: Any = None,
    ) -> ContentPipeline:
        gate = ValidationGate()
        controller = RetryController(
            port,
            gate,
            RetryConfig(max_retries=max_retries, jitter=False),
            sleep=sleep,
        )
        return ContentPipeline(
            cache=cache,
            controller=controller,
            fallbacks=fallbacks or FallbackProvider(random.Random(7)),
            gate=gate,
            prefetch_capacity=prefetch_capacity,
            dedupe_inflight=dedupe_inflight,
        )

    return _make
