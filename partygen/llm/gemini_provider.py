"""Google Gemini provider implementation."""

import json
from typing import Any, Sequence

from google import genai
from google.genai import errors as genai_errors

from partygen.llm.message_types import Message, MessageRole
from partygen.llm.response_types import LLMResponse, UsageStats
from partygen.llm.exceptions import (
    AuthenticationError,
    RateLimitError,
    ProviderError,
    StructuredOutputError,
    retry_after_seconds,
)


class GeminiProvider:
    """Google Gemini implementation.

    Structured output uses JSON mime type plus a response schema. The
    returned text is decoded here but never trusted to match the schema.
    """

    def __init__(
        self,
        api_key: str | None = None,
        default_model: str = "gemini-3-flash-preview",
        client: genai.Client | None = None,
    ) -> None:
        """Initialize Gemini provider.

        Args:
            api_key: Google API key. If not provided, the SDK reads
                     GOOGLE_API_KEY from the environment.
            default_model: Default model to use for completions.
            client: Optional pre-configured client (for testing).
        """
        self._api_key = api_key
        self._default_model = default_model
        self._client_instance: genai.Client | None = client

    @property
    def provider_name(self) -> str:
        """Return provider identifier."""
        return "gemini"

    @property
    def default_model(self) -> str:
        """Return default model for this provider."""
        return self._default_model

    def _get_client(self) -> genai.Client:
        """Get or create the client."""
        if self._client_instance is None:
            self._client_instance = genai.Client(api_key=self._api_key or None)
        return self._client_instance

    def _convert_messages(
        self, messages: Sequence[Message]
    ) -> tuple[str | None, list[dict[str, Any]]]:
        """Convert our Message types to Gemini contents.

        Returns:
            Tuple of (system_instruction, contents)
        """
        system_instruction: str | None = None
        contents: list[dict[str, Any]] = []

        for msg in messages:
            if msg.role == MessageRole.SYSTEM:
                system_instruction = msg.content
                continue
            role = "user" if msg.role == MessageRole.USER else "model"
            contents.append({"role": role, "parts": [{"text": msg.content}]})

        return system_instruction, contents

    def _handle_api_error(self, error: Exception) -> None:
        """Convert google-genai exceptions to our exception types."""
        if isinstance(error, genai_errors.APIError):
            code = getattr(error, "code", None)
            if code in (401, 403):
                raise AuthenticationError(str(error))
            if code == 429:
                raise RateLimitError(str(error), retry_after=retry_after_seconds(error))
            is_retryable = code is None or code >= 500
            raise ProviderError(str(error), is_retryable=is_retryable, status_code=code)
        raise error

    async def complete_structured(
        self,
        messages: Sequence[Message],
        response_schema: type,
        model: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 1.0,
        system_prompt: str | None = None,
    ) -> LLMResponse:
        """Generate a structured response matching a schema."""
        extracted_system, contents = self._convert_messages(messages)
        final_system = system_prompt or extracted_system

        config: dict[str, Any] = {
            "temperature": temperature,
            "max_output_tokens": max_tokens,
            "response_mime_type": "application/json",
            "response_schema": response_schema,
        }
        if final_system:
            config["system_instruction"] = final_system

        try:
            response = await self._get_client().aio.models.generate_content(
                model=model or self._default_model,
                contents=contents,
                config=config,
            )
        except Exception as e:
            self._handle_api_error(e)
            raise

        text = response.text or ""
        if not text.strip():
            raise StructuredOutputError("Model returned an empty response", raw_output=text)
        try:
            parsed_content = json.loads(text)
        except json.JSONDecodeError as e:
            raise StructuredOutputError(f"Response is not valid JSON: {e}", raw_output=text) from e

        usage = None
        metadata = getattr(response, "usage_metadata", None)
        if metadata is not None:
            prompt_tokens = metadata.prompt_token_count or 0
            completion_tokens = metadata.candidates_token_count or 0
            usage = UsageStats(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=metadata.total_token_count or prompt_tokens + completion_tokens,
            )

        return LLMResponse(
            content=text,
            parsed_content=parsed_content,
            model=model or self._default_model,
            usage=usage,
            raw_response=response,
        )
