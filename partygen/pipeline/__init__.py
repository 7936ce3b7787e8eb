"""Content acquisition pipeline.

Quick Start:
    from partygen.pipeline import ContentPipeline

    pipeline = ContentPipeline.from_settings()
    result = await pipeline.acquire("trivia", {"topic": "space", "count": 5})
    print(result.source, result.data)
"""

from partygen.pipeline.cache import CacheEntry, CacheStats, ContentCache
from partygen.pipeline.exceptions import (
    ExhaustedRetriesError,
    GenerationError,
    InvalidRequestError,
    NoFallbackAvailableError,
    PermanentGenerationError,
    PipelineError,
    TransientGenerationError,
    ValidationFailure,
)
from partygen.pipeline.fingerprint import FingerprintBuilder
from partygen.pipeline.generation import GenerationPort
from partygen.pipeline.prefetch import PrefetchManager, PrefetchQueue
from partygen.pipeline.request import ContentRequest
from partygen.pipeline.results import (
    NO_FALLBACK,
    ContentResult,
    ContentSource,
    PipelineMetrics,
)
from partygen.pipeline.retry import RetryConfig, RetryController
from partygen.pipeline.service import ContentPipeline
from partygen.pipeline.store import KeyValueStore, MemoryKeyValueStore, SqlKeyValueStore

__all__ = [
    # Service
    "ContentPipeline",
    "ContentRequest",
    # Results
    "ContentResult",
    "ContentSource",
    "NO_FALLBACK",
    "PipelineMetrics",
    # Components
    "CacheEntry",
    "CacheStats",
    "ContentCache",
    "FingerprintBuilder",
    "GenerationPort",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "PrefetchManager",
    "PrefetchQueue",
    "RetryConfig",
    "RetryController",
    "SqlKeyValueStore",
    # Exceptions
    "ExhaustedRetriesError",
    "GenerationError",
    "InvalidRequestError",
    "NoFallbackAvailableError",
    "PermanentGenerationError",
    "PipelineError",
    "TransientGenerationError",
    "ValidationFailure",
]
