"""Result and metrics types returned by the content pipeline."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)

NO_FALLBACK = "NO_FALLBACK"


class ContentSource(str, Enum):
    """Where an accepted payload came from."""

    CACHE = "cache"
    FRESH = "fresh"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ContentResult(Generic[T]):
    """Outcome of one acquire.

    ``ok`` is False only when no fallback exists for the kind; then
    ``data`` and ``source`` are None and ``error_code`` is set.
    """

    ok: bool
    attempts: int
    data: T | None = None
    source: ContentSource | None = None
    error_code: str | None = None

    @classmethod
    def success(cls, data: T, source: ContentSource, attempts: int) -> "ContentResult[T]":
        return cls(ok=True, data=data, source=source, attempts=attempts)

    @classmethod
    def failure(cls, error_code: str, attempts: int) -> "ContentResult[T]":
        return cls(ok=False, attempts=attempts, error_code=error_code)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for display or JSON output."""
        if not self.ok:
            return {"ok": False, "error_code": self.error_code, "attempts": self.attempts}
        return {
            "ok": True,
            "source": self.source.value if self.source else None,
            "attempts": self.attempts,
            "data": self.data.model_dump(mode="json") if self.data is not None else None,
        }


@dataclass
class PipelineMetrics:
    """Counters for pipeline traffic."""

    requests: int = 0
    cache_hits: int = 0
    fresh: int = 0
    fallbacks: int = 0
    failures: int = 0
    prefetch_hits: int = 0
    prefetch_misses: int = 0
    total_attempts: int = 0

    @property
    def fallback_rate(self) -> float:
        """Share of resolved requests served from fallback."""
        resolved = self.cache_hits + self.fresh + self.fallbacks
        return self.fallbacks / resolved if resolved > 0 else 0.0

    def record(self, result: ContentResult[Any]) -> None:
        """Record a resolved result."""
        self.total_attempts += result.attempts
        if not result.ok:
            self.failures += 1
        elif result.source == ContentSource.CACHE:
            self.cache_hits += 1
        elif result.source == ContentSource.FRESH:
            self.fresh += 1
        else:
            self.fallbacks += 1

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/display."""
        return {
            "requests": self.requests,
            "cache_hits": self.cache_hits,
            "fresh": self.fresh,
            "fallbacks": self.fallbacks,
            "failures": self.failures,
            "fallback_rate": f"{self.fallback_rate:.1%}",
            "prefetch_hits": self.prefetch_hits,
            "prefetch_misses": self.prefetch_misses,
            "total_attempts": self.total_attempts,
        }
