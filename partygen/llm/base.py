"""LLM provider protocol definition.

Defines the interface that every content backend provider implements.
"""

from typing import Protocol, Sequence, runtime_checkable

from partygen.llm.message_types import Message
from partygen.llm.response_types import LLMResponse


@runtime_checkable
class LLMProvider(Protocol):
    """Protocol for LLM providers.

    The pipeline only ever asks for structured output, so that is the
    single completion method a provider must offer.
    """

    @property
    def provider_name(self) -> str:
        """Return provider identifier (e.g., 'gemini', 'anthropic')."""
        ...

    @property
    def default_model(self) -> str:
        """Return default model for this provider."""
        ...

    async def complete_structured(
        self,
        messages: Sequence[Message],
        response_schema: type,
        model: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 1.0,
        system_prompt: str | None = None,
    ) -> LLMResponse:
        """Generate a structured response matching a schema.

        Args:
            messages: Conversation history.
            response_schema: Pydantic model describing the expected output.
            model: Model to use.
            max_tokens: Maximum tokens to generate.
            temperature: Sampling temperature.
            system_prompt: System-level instructions.

        Returns:
            LLMResponse with parsed_content holding the decoded payload.
        """
        ...
