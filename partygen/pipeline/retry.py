"""Retry/backoff controller for content generation.

Runs ATTEMPT -> (accept | backoff -> ATTEMPT) until a payload passes the
validation gate or the retry budget is spent. A backend failure and a
rejected payload are treated the same way. Permanent backend failures
end the loop early since retrying cannot help.
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable

from pydantic import BaseModel

from partygen.content.kinds import get_kind_spec
from partygen.content.prompts import build_prompt
from partygen.content.validation import ValidationGate
from partygen.llm.audit_logger import set_audit_context
from partygen.pipeline.exceptions import (
    ExhaustedRetriesError,
    PermanentGenerationError,
    TransientGenerationError,
    ValidationFailure,
)
from partygen.pipeline.generation import GenerationPort
from partygen.pipeline.request import ContentRequest

logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    """Configuration for retry behavior.

    Attributes:
        max_retries: Retries after the first attempt.
        initial_delay: Delay before the first retry, in seconds.
        max_delay: Maximum delay between retries.
        exponential_base: Base for exponential backoff.
        jitter: Whether to add random jitter.
    """

    max_retries: int = 2
    initial_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    jitter: bool = False

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1


@dataclass(frozen=True)
class Accepted:
    """A validated payload and the number of attempts it took."""

    payload: BaseModel
    attempts: int


def calculate_delay(
    attempt: int,
    config: RetryConfig,
    retry_after: float | None = None,
) -> float:
    """Calculate delay before the next attempt.

    Args:
        attempt: Index of the failed attempt (0-indexed).
        config: Retry configuration.
        retry_after: Optional server-specified retry delay.

    Returns:
        Delay in seconds.
    """
    delay = min(config.initial_delay * (config.exponential_base ** attempt), config.max_delay)

    # Respect retry-after if provided and larger, still bounded by max_delay
    if retry_after is not None:
        delay = min(max(delay, retry_after), config.max_delay)

    if config.jitter:
        # Add random jitter between 0 and 25% of delay
        delay += random.uniform(0, delay * 0.25)

    return delay


class RetryController:
    """Calls the generation port and validation gate under a retry budget.

    Args:
        port: Generation port.
        gate: Validation gate.
        config: Retry configuration.
        sleep: Awaitable delay function (asyncio.sleep by default).
    """

    def __init__(
        self,
        port: GenerationPort,
        gate: ValidationGate,
        config: RetryConfig | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._port = port
        self._gate = gate
        self._config = config or RetryConfig()
        self._sleep = sleep

    @property
    def config(self) -> RetryConfig:
        return self._config

    async def run(self, request: ContentRequest, fingerprint: str | None = None) -> Accepted:
        """Produce a validated payload for the request.

        Args:
            request: Content request.
            fingerprint: Fingerprint for audit logs.

        Returns:
            Accepted payload with the attempt count.

        Raises:
            ExhaustedRetriesError: Budget spent or a permanent failure
                occurred. Carries the attempt count and last error.
        """
        spec = get_kind_spec(request.kind)
        prompt = build_prompt(request.kind, request.parameters, request.settings)
        last_error: Exception | None = None

        for attempt in range(self._config.max_attempts):
            set_audit_context(kind=request.kind.value, fingerprint=fingerprint, attempt=attempt + 1)
            retry_after: float | None = None
            try:
                raw = await self._port.generate(prompt, spec.output_model)
                result = self._gate.inspect(request.kind, raw, request.parameters)
                if not result.valid:
                    raise ValidationFailure(
                        f"{request.kind.value} payload rejected: {len(result.errors)} issue(s)",
                        issues=result.errors,
                    )
                logger.info(
                    f"Accepted {request.kind.value} payload on attempt {attempt + 1}"
                )
                if result.issues:
                    logger.debug(result.format_issues())
                return Accepted(payload=result.payload, attempts=attempt + 1)
            except PermanentGenerationError as e:
                logger.warning(
                    f"Permanent generation failure for {request.kind.value}, "
                    f"not retrying: {e}"
                )
                raise ExhaustedRetriesError(attempt + 1, e) from e
            except ValidationFailure as e:
                last_error = e
                details = "; ".join(i.message for i in e.issues[:3])
                logger.warning(
                    f"Attempt {attempt + 1}/{self._config.max_attempts} for "
                    f"{request.kind.value} rejected: {details}"
                )
            except TransientGenerationError as e:
                last_error = e
                retry_after = e.retry_after
                logger.warning(
                    f"Attempt {attempt + 1}/{self._config.max_attempts} for "
                    f"{request.kind.value} failed: {e}"
                )

            if attempt < self._config.max_retries:
                delay = calculate_delay(attempt, self._config, retry_after)
                logger.debug(f"Backing off {delay:.2f}s before retrying {request.kind.value}")
                await self._sleep(delay)

        raise ExhaustedRetriesError(self._config.max_attempts, last_error)
