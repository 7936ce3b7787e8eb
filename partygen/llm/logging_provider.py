"""Logging wrapper for LLM providers.

Wraps any LLM provider to add audit logging of all calls.
"""

import time
from datetime import datetime
from typing import Any, Sequence

from partygen.llm.base import LLMProvider
from partygen.llm.message_types import Message
from partygen.llm.response_types import LLMResponse
from partygen.llm.audit_logger import (
    LLMAuditEntry,
    LLMAuditLogger,
    get_audit_context,
)


class LoggingProvider:
    """Wrapper that adds audit logging to any LLM provider.

    Delegates all calls to the wrapped provider while logging
    the full request and response for debugging.

    Args:
        provider: The LLM provider to wrap.
        logger: The audit logger to use (optional, uses global if not provided).
    """

    def __init__(
        self,
        provider: LLMProvider,
        logger: LLMAuditLogger | None = None,
    ) -> None:
        self._provider = provider
        self._logger = logger

    @property
    def provider_name(self) -> str:
        """Return provider identifier."""
        return self._provider.provider_name

    @property
    def default_model(self) -> str:
        """Return default model for this provider."""
        return self._provider.default_model

    def _get_logger(self) -> LLMAuditLogger:
        """Get the audit logger."""
        if self._logger is not None:
            return self._logger
        from partygen.llm.audit_logger import get_audit_logger
        return get_audit_logger()

    def _messages_to_dicts(self, messages: Sequence[Message]) -> list[dict[str, Any]]:
        """Convert Message objects to dicts for logging."""
        return [{"role": msg.role.value, "content": msg.content} for msg in messages]

    async def complete_structured(
        self,
        messages: Sequence[Message],
        response_schema: type,
        model: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 1.0,
        system_prompt: str | None = None,
    ) -> LLMResponse:
        """Generate a structured response with logging."""
        start_time = time.perf_counter()
        response: LLMResponse | None = None
        error: str | None = None

        try:
            response = await self._provider.complete_structured(
                messages=messages,
                response_schema=response_schema,
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
                system_prompt=system_prompt,
            )
            return response
        except Exception as e:
            error = f"{type(e).__name__}: {e}"
            raise
        finally:
            entry = LLMAuditEntry(
                timestamp=datetime.now(),
                context=get_audit_context(),
                provider=self._provider.provider_name,
                model=model or self._provider.default_model,
                schema_name=getattr(response_schema, "__name__", "unknown"),
                system_prompt=system_prompt,
                messages=self._messages_to_dicts(messages),
                parameters={"max_tokens": max_tokens, "temperature": temperature},
                response=response,
                error=error,
                duration_seconds=time.perf_counter() - start_time,
            )
            await self._get_logger().log(entry)
