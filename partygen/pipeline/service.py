"""Content pipeline service.

The entry point the game layer talks to. ``acquire`` turns a content
request into content, always: from cache when a fresh entry exists,
from the backend when it cooperates within the retry budget, and from
curated fallbacks otherwise. ``prefetch`` and ``consume`` hide backend
latency by producing the next item while the current round is played.
"""

import asyncio
import logging
from typing import Any, Mapping, Protocol

from pydantic import BaseModel

from partygen.config import Settings, get_settings
from partygen.content.fallback import FallbackProvider
from partygen.content.kinds import ContentKind
from partygen.content.schemas import PartySettings, RequestParameters
from partygen.content.validation import ValidationGate
from partygen.llm.base import LLMProvider
from partygen.pipeline.cache import ContentCache
from partygen.pipeline.exceptions import ExhaustedRetriesError, NoFallbackAvailableError
from partygen.pipeline.fingerprint import FingerprintBuilder
from partygen.pipeline.generation import GenerationPort
from partygen.pipeline.prefetch import PrefetchManager
from partygen.pipeline.request import ContentRequest
from partygen.pipeline.results import (
    NO_FALLBACK,
    ContentResult,
    ContentSource,
    PipelineMetrics,
)
from partygen.pipeline.retry import RetryConfig, RetryController
from partygen.pipeline.store import KeyValueStore, SqlKeyValueStore

logger = logging.getLogger(__name__)

ParametersInput = RequestParameters | Mapping[str, Any] | None
SettingsInput = PartySettings | Mapping[str, Any] | None


class FallbackSource(Protocol):
    """Anything that can supply curated content for a kind.

    Raises NoFallbackAvailableError when it has nothing for the kind.
    """

    def fallback(
        self, kind: ContentKind, parameters: RequestParameters | None = None
    ) -> BaseModel:
        ...


class ContentPipeline:
    """Cache, retry, validation, fallback and prefetch behind one API.

    Args:
        cache: Two-tier content cache.
        controller: Retry controller wrapping the generation port.
        fallbacks: Curated content source.
        gate: Validation gate used to re-check cached payloads.
        fingerprints: Fingerprint builder.
        prefetch_capacity: Capacity of each prefetch queue.
        dedupe_inflight: Share one backend run between concurrent
            acquires of the same fingerprint.
    """

    def __init__(
        self,
        cache: ContentCache,
        controller: RetryController,
        fallbacks: FallbackSource | None = None,
        gate: ValidationGate | None = None,
        fingerprints: FingerprintBuilder | None = None,
        prefetch_capacity: int = 1,
        dedupe_inflight: bool = False,
    ) -> None:
        self._cache = cache
        self._controller = controller
        self._fallbacks = fallbacks or FallbackProvider()
        self._gate = gate or ValidationGate()
        self._fingerprints = fingerprints or FingerprintBuilder()
        self._prefetch: PrefetchManager[BaseModel] = PrefetchManager(prefetch_capacity)
        self._dedupe_inflight = dedupe_inflight
        self._inflight: dict[str, asyncio.Task[ContentResult[Any]]] = {}
        self._metrics = PipelineMetrics()

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        provider: LLMProvider | None = None,
        store: KeyValueStore | None = None,
    ) -> "ContentPipeline":
        """Assemble a pipeline from application settings.

        Args:
            settings: Settings to use (global settings when None).
            provider: Backend provider (built from CONTENT_PROVIDER when None).
            store: Durable store (SQL store at CACHE_DATABASE_URL when None).
        """
        settings = settings or get_settings()
        if provider is None:
            from partygen.llm.factory import get_content_provider

            provider = get_content_provider(settings.content_provider)
        if store is None:
            store = SqlKeyValueStore.from_url(settings.cache_database_url)

        gate = ValidationGate()
        controller = RetryController(
            GenerationPort(provider),
            gate,
            RetryConfig(
                max_retries=settings.retry_max_retries,
                initial_delay=settings.retry_initial_delay,
                max_delay=settings.retry_max_delay,
                exponential_base=settings.retry_exponential_base,
                jitter=settings.retry_jitter,
            ),
        )
        return cls(
            cache=ContentCache(store, ttl_seconds=settings.cache_ttl_seconds),
            controller=controller,
            gate=gate,
            prefetch_capacity=settings.prefetch_queue_capacity,
            dedupe_inflight=settings.dedupe_inflight,
        )

    @property
    def cache(self) -> ContentCache:
        return self._cache

    @property
    def metrics(self) -> PipelineMetrics:
        """Pipeline counters. ``requests`` counts acquire calls only."""
        return self._metrics

    # =========================================================================
    # Public API
    # =========================================================================

    async def acquire(
        self,
        kind: ContentKind | str,
        parameters: ParametersInput = None,
        settings: SettingsInput = None,
    ) -> ContentResult[Any]:
        """Get content for a round.

        Args:
            kind: Content kind.
            parameters: Kind parameters.
            settings: Party settings.

        Returns:
            ContentResult. ``ok`` is False only when the kind has no
            fallback.

        Raises:
            InvalidRequestError: If the request itself is invalid.
        """
        request = ContentRequest.build(kind, parameters, settings)
        self._metrics.requests += 1

        if self._dedupe_inflight and not request.varies_per_round:
            result = await self._resolve_shared(request)
        else:
            result = await self._resolve(request)
        return result

    def prefetch(
        self,
        kind: ContentKind | str,
        parameters: ParametersInput = None,
        settings: SettingsInput = None,
    ) -> asyncio.Task[None] | None:
        """Start producing the next item for a request in the background.

        Must be called from a running event loop. Nothing is returned to
        wait on when the queue is already full; a prefetch already running
        for the same request is returned instead of starting another.

        Raises:
            InvalidRequestError: If the request itself is invalid.
        """
        request = ContentRequest.build(kind, parameters, settings)
        fingerprint = self._fingerprints.stable(request)

        if self._prefetch.is_full(fingerprint):
            logger.debug(f"Prefetch skipped for {fingerprint}, queue full")
            return None

        running = self._prefetch.in_flight(fingerprint)
        if running is not None:
            return running

        return self._prefetch.spawn(fingerprint, self._fill(request, fingerprint))

    def consume(
        self,
        kind: ContentKind | str,
        parameters: ParametersInput = None,
        settings: SettingsInput = None,
    ) -> BaseModel | None:
        """Take a prefetched item, or None if nothing is queued.

        Never waits. On None the caller falls through to ``acquire``.
        """
        request = ContentRequest.build(kind, parameters, settings)
        fingerprint = self._fingerprints.stable(request)

        item = self._prefetch.shift(fingerprint)
        if item is None:
            self._metrics.prefetch_misses += 1
            logger.debug(f"Prefetch miss for {fingerprint}")
        else:
            self._metrics.prefetch_hits += 1
            logger.debug(f"Prefetch hit for {fingerprint}")
        return item

    async def wait_idle(self) -> None:
        """Wait for every background prefetch to finish."""
        await self._prefetch.wait_idle()

    async def aclose(self) -> None:
        """Let running work finish, then close the cache."""
        await self.wait_idle()
        if self._inflight:
            await asyncio.gather(*self._inflight.values(), return_exceptions=True)
        self._cache.close()
        logger.info(f"Content pipeline closed: {self._metrics.to_dict()}")

    async def __aenter__(self) -> "ContentPipeline":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # =========================================================================
    # Internals
    # =========================================================================

    async def _resolve(self, request: ContentRequest) -> ContentResult[Any]:
        """Run the cache -> generate -> fallback sequence once."""
        result = await self._produce(request)
        self._metrics.record(result)
        return result

    async def _produce(self, request: ContentRequest) -> ContentResult[Any]:
        key = self._fingerprints.key(request)
        cacheable = request.spec.cacheable

        if cacheable:
            cached = self._read_cache(request, key)
            if cached is not None:
                logger.info(f"Serving {request.kind.value} from cache")
                return ContentResult.success(cached, ContentSource.CACHE, attempts=0)

        try:
            accepted = await self._controller.run(request, fingerprint=key)
        except ExhaustedRetriesError as e:
            logger.warning(
                f"Generation for {request.kind.value} gave up after {e.attempts} "
                f"attempt(s), using fallback: {e.last_error}"
            )
            return self._use_fallback(request, e.attempts)

        if cacheable:
            self._cache.set(key, accepted.payload.model_dump(mode="json"))
        return ContentResult.success(accepted.payload, ContentSource.FRESH, accepted.attempts)

    def _read_cache(self, request: ContentRequest, key: str) -> BaseModel | None:
        """Read and re-check a cached payload; anything unusable is a miss."""
        raw = self._cache.get(key)
        if raw is None:
            return None
        result = self._gate.inspect(request.kind, raw, request.parameters)
        if not result.valid:
            logger.warning(f"Cached payload for {key} no longer validates, ignoring")
            self._cache.discard(key)
            return None
        return result.payload

    def _use_fallback(self, request: ContentRequest, attempts: int) -> ContentResult[Any]:
        try:
            data = self._fallbacks.fallback(request.kind, request.parameters)
        except NoFallbackAvailableError:
            logger.error(f"No fallback available for {request.kind.value}")
            return ContentResult.failure(NO_FALLBACK, attempts)
        return ContentResult.success(data, ContentSource.FALLBACK, attempts)

    async def _resolve_shared(self, request: ContentRequest) -> ContentResult[Any]:
        """Resolve with concurrent identical requests sharing one task."""
        key = self._fingerprints.stable(request)
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._resolve(request))
            self._inflight[key] = task
            task.add_done_callback(lambda t: self._forget_inflight(key, t))
        else:
            logger.debug(f"Joining in-flight acquire for {key}")
        return await asyncio.shield(task)

    def _forget_inflight(self, key: str, task: asyncio.Task[ContentResult[Any]]) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]

    async def _fill(self, request: ContentRequest, fingerprint: str) -> None:
        """Background body of a prefetch."""
        try:
            result = await self._resolve(request)
        except Exception as e:
            logger.error(f"Prefetch for {fingerprint} failed: {e}", exc_info=True)
            return

        if result.ok and result.source in (ContentSource.FRESH, ContentSource.CACHE):
            self._prefetch.push(fingerprint, result.data)
        else:
            logger.info(
                f"Prefetch for {request.kind.value} produced {result.source or result.error_code}, "
                "not queued"
            )
