"""Deterministic keys for cache and prefetch queue lookups."""

import hashlib
import itertools
import json
import time
from typing import Callable

from partygen.pipeline.request import ContentRequest

FINGERPRINT_VERSION = 1


class FingerprintBuilder:
    """Derives fingerprints from content requests.

    The stable fingerprint hashes the canonical JSON form of kind,
    parameters and settings, so semantically identical requests always
    collide and any change that could alter the output does not.

    Kinds flagged ``varies_per_round`` get a uniqueness token appended by
    ``key()`` so a result can never be reused for a later round. Prefetch
    queues use ``stable()`` since a queued item is consumed at most once.

    Args:
        namespace: Prefix shared by every fingerprint.
        token_source: Source of uniqueness tokens (defaults to time_ns).
    """

    def __init__(
        self,
        namespace: str = "partygen",
        token_source: Callable[[], int] = time.time_ns,
    ) -> None:
        self._namespace = namespace
        self._token_source = token_source
        self._counter = itertools.count()

    def canonical(self, request: ContentRequest) -> str:
        """Canonical JSON encoding of everything that shapes the output."""
        return json.dumps(
            {
                "kind": request.kind.value,
                "parameters": request.parameters.model_dump(mode="json"),
                "settings": request.settings.model_dump(mode="json"),
            },
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
        )

    def stable(self, request: ContentRequest) -> str:
        """Fingerprint ignoring the per-round policy."""
        digest = hashlib.sha256(self.canonical(request).encode("utf-8")).hexdigest()[:32]
        return f"{self._namespace}:v{FINGERPRINT_VERSION}:{request.kind.value}:{digest}"

    def key(self, request: ContentRequest) -> str:
        """Fingerprint honouring the per-round policy."""
        base = self.stable(request)
        if request.varies_per_round:
            return f"{base}:{self._token_source()}-{next(self._counter)}"
        return base
