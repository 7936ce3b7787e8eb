"""OpenAI provider implementation.

Supports OpenAI API and OpenAI-compatible APIs (DeepSeek, Ollama, vLLM).
"""

import json
from typing import Any, Sequence

from openai import AsyncOpenAI
from openai import (
    AuthenticationError as OpenAIAuthError,
    RateLimitError as OpenAIRateLimitError,
    BadRequestError as OpenAIBadRequestError,
    APIError as OpenAIAPIError,
)

from partygen.llm.message_types import Message
from partygen.llm.response_types import LLMResponse, ToolCall, UsageStats
from partygen.llm.exceptions import (
    AuthenticationError,
    RateLimitError,
    ContentPolicyError,
    ProviderError,
    StructuredOutputError,
    retry_after_seconds,
)


class OpenAIProvider:
    """OpenAI GPT implementation.

    Structured output is forced through function calling, with the
    requested pydantic model as the function parameters schema.
    """

    FUNCTION_NAME = "emit_content"

    def __init__(
        self,
        api_key: str | None = None,
        default_model: str = "gpt-4o-mini",
        base_url: str | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key. If not provided, will use
                     OPENAI_API_KEY environment variable.
            default_model: Default model to use for completions.
            base_url: Custom base URL for OpenAI-compatible APIs.
            client: Optional pre-configured client (for testing).
        """
        self._api_key = api_key
        self._default_model = default_model
        self._base_url = base_url
        self._client_instance: AsyncOpenAI | None = client

    @property
    def provider_name(self) -> str:
        """Return provider identifier."""
        return "openai"

    @property
    def default_model(self) -> str:
        """Return default model for this provider."""
        return self._default_model

    def _get_client(self) -> AsyncOpenAI:
        """Get or create the async client."""
        if self._client_instance is None:
            kwargs: dict[str, Any] = {}
            if self._api_key:
                kwargs["api_key"] = self._api_key
            if self._base_url:
                kwargs["base_url"] = self._base_url
            self._client_instance = AsyncOpenAI(**kwargs)
        return self._client_instance

    def _convert_messages(
        self, messages: Sequence[Message], system_prompt: str | None = None
    ) -> list[dict[str, Any]]:
        """Convert our Message types to OpenAI format."""
        api_messages: list[dict[str, Any]] = []

        if system_prompt:
            api_messages.append({"role": "system", "content": system_prompt})

        for msg in messages:
            api_messages.append({"role": msg.role.value, "content": msg.content})

        return api_messages

    def _parse_response(self, response: Any) -> LLMResponse:
        """Parse OpenAI API response into LLMResponse."""
        choice = response.choices[0]
        message = choice.message

        content = message.content or ""
        tool_calls: list[ToolCall] = []

        if message.tool_calls:
            for tc in message.tool_calls:
                try:
                    arguments = json.loads(tc.function.arguments)
                except json.JSONDecodeError as e:
                    raise StructuredOutputError(
                        f"Function arguments are not valid JSON: {e}",
                        raw_output=tc.function.arguments,
                    ) from e
                tool_calls.append(
                    ToolCall(
                        id=tc.id,
                        name=tc.function.name,
                        arguments=arguments,
                        raw_arguments=tc.function.arguments,
                    )
                )

        usage = None
        if response.usage:
            usage = UsageStats(
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
            )

        return LLMResponse(
            content=content,
            tool_calls=tuple(tool_calls),
            finish_reason=choice.finish_reason,
            model=response.model,
            usage=usage,
            raw_response=response,
        )

    async def _handle_api_error(self, error: Exception) -> None:
        """Convert OpenAI exceptions to our exception types."""
        if isinstance(error, OpenAIAuthError):
            raise AuthenticationError(str(error))
        elif isinstance(error, OpenAIRateLimitError):
            raise RateLimitError(str(error), retry_after=retry_after_seconds(error))
        elif isinstance(error, OpenAIBadRequestError):
            error_str = str(error).lower()
            if "content" in error_str or "policy" in error_str:
                raise ContentPolicyError(str(error))
            raise ProviderError(str(error), is_retryable=False)
        elif isinstance(error, OpenAIAPIError):
            # 5xx errors and connection failures are retryable
            status_code = getattr(error, "status_code", None)
            is_retryable = status_code is None or status_code >= 500
            raise ProviderError(str(error), is_retryable=is_retryable, status_code=status_code)
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
        """Generate a structured response matching a schema.

        Uses OpenAI's function calling to force structured output.
        """
        api_messages = self._convert_messages(messages, system_prompt)
        tool_dict = self._schema_to_openai_tool(response_schema)

        try:
            kwargs: dict[str, Any] = {
                "model": model or self._default_model,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "messages": api_messages,
                "tools": [tool_dict],
                "tool_choice": {"type": "function", "function": {"name": self.FUNCTION_NAME}},
            }

            response = await self._get_client().chat.completions.create(**kwargs)
            parsed_response = self._parse_response(response)

            if parsed_response.has_tool_calls:
                return LLMResponse(
                    content="",
                    tool_calls=parsed_response.tool_calls,
                    parsed_content=parsed_response.tool_calls[0].arguments,
                    finish_reason=parsed_response.finish_reason,
                    model=parsed_response.model,
                    usage=parsed_response.usage,
                    raw_response=parsed_response.raw_response,
                )

            raise StructuredOutputError(
                "Model did not return structured output",
                raw_output=parsed_response.content,
            )
        except StructuredOutputError:
            raise
        except Exception as e:
            await self._handle_api_error(e)
            raise

    def _schema_to_openai_tool(self, schema: type) -> dict[str, Any]:
        """Convert a pydantic model to OpenAI tool format.

        Args:
            schema: Pydantic model class describing the payload.

        Returns:
            Dict in OpenAI's tool format with the model's JSON schema.
        """
        schema_name = getattr(schema, "__name__", "Content")
        if hasattr(schema, "model_json_schema"):
            parameters = schema.model_json_schema()
        else:
            parameters = {"type": "object", "properties": {}, "additionalProperties": True}

        return {
            "type": "function",
            "function": {
                "name": self.FUNCTION_NAME,
                "description": f"Emit a {schema_name}. Return valid JSON matching the schema.",
                "parameters": parameters,
            },
        }
