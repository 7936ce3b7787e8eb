"""Anthropic Claude provider implementation."""

import json
from typing import Any, Sequence

from anthropic import AsyncAnthropic
from anthropic import (
    AuthenticationError as AnthropicAuthError,
    RateLimitError as AnthropicRateLimitError,
    BadRequestError as AnthropicBadRequestError,
    APIError as AnthropicAPIError,
)

from partygen.llm.message_types import Message, MessageRole
from partygen.llm.response_types import LLMResponse, ToolCall, UsageStats
from partygen.llm.exceptions import (
    AuthenticationError,
    RateLimitError,
    ContentPolicyError,
    ProviderError,
    StructuredOutputError,
    retry_after_seconds,
)


class AnthropicProvider:
    """Anthropic Claude implementation.

    Structured output is forced through a single tool whose input schema
    is the requested pydantic model.
    """

    TOOL_NAME = "emit_content"

    def __init__(
        self,
        api_key: str | None = None,
        default_model: str = "claude-3-5-haiku-20241022",
        client: AsyncAnthropic | None = None,
    ) -> None:
        """Initialize Anthropic provider.

        Args:
            api_key: Anthropic API key. If not provided, will use
                     ANTHROPIC_API_KEY environment variable.
            default_model: Default model to use for completions.
            client: Optional pre-configured client (for testing).
        """
        self._api_key = api_key
        self._default_model = default_model
        self._client_instance: AsyncAnthropic | None = client

    @property
    def provider_name(self) -> str:
        """Return provider identifier."""
        return "anthropic"

    @property
    def default_model(self) -> str:
        """Return default model for this provider."""
        return self._default_model

    def _get_client(self) -> AsyncAnthropic:
        """Get or create the async client."""
        if self._client_instance is None:
            self._client_instance = AsyncAnthropic(api_key=self._api_key or None)
        return self._client_instance

    def _convert_messages(
        self, messages: Sequence[Message]
    ) -> tuple[str | None, list[dict[str, Any]]]:
        """Convert our Message types to Anthropic format.

        Returns:
            Tuple of (system_prompt, messages_list)
        """
        system_prompt: str | None = None
        api_messages: list[dict[str, Any]] = []

        for msg in messages:
            if msg.role == MessageRole.SYSTEM:
                system_prompt = msg.content
                continue
            role = "user" if msg.role == MessageRole.USER else "assistant"
            api_messages.append({"role": role, "content": msg.content})

        return system_prompt, api_messages

    def _parse_response(self, response: Any) -> LLMResponse:
        """Parse Anthropic API response into LLMResponse."""
        content = ""
        tool_calls: list[ToolCall] = []

        for block in response.content:
            if block.type == "text":
                content = block.text
            elif block.type == "tool_use":
                tool_calls.append(
                    ToolCall(
                        id=block.id,
                        name=block.name,
                        arguments=block.input,
                        raw_arguments=json.dumps(block.input),
                    )
                )

        usage = None
        if response.usage:
            usage = UsageStats(
                prompt_tokens=response.usage.input_tokens,
                completion_tokens=response.usage.output_tokens,
                total_tokens=response.usage.input_tokens + response.usage.output_tokens,
            )

        return LLMResponse(
            content=content,
            tool_calls=tuple(tool_calls),
            finish_reason=response.stop_reason,
            model=response.model,
            usage=usage,
            raw_response=response,
        )

    async def _handle_api_error(self, error: Exception) -> None:
        """Convert Anthropic exceptions to our exception types."""
        if isinstance(error, AnthropicAuthError):
            raise AuthenticationError(str(error))
        elif isinstance(error, AnthropicRateLimitError):
            raise RateLimitError(str(error), retry_after=retry_after_seconds(error))
        elif isinstance(error, AnthropicBadRequestError):
            error_str = str(error).lower()
            if "content" in error_str or "policy" in error_str:
                raise ContentPolicyError(str(error))
            raise ProviderError(str(error), is_retryable=False)
        elif isinstance(error, AnthropicAPIError):
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

        Uses Anthropic's tool_use feature to force structured output.
        """
        extracted_system, api_messages = self._convert_messages(messages)
        final_system = system_prompt or extracted_system
        tool_dict = self._schema_to_anthropic_tool(response_schema)

        try:
            kwargs: dict[str, Any] = {
                "model": model or self._default_model,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "messages": api_messages,
                "tools": [tool_dict],
                "tool_choice": {"type": "tool", "name": self.TOOL_NAME},
            }
            if final_system:
                kwargs["system"] = final_system

            response = await self._get_client().messages.create(**kwargs)
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

    def _schema_to_anthropic_tool(self, schema: type) -> dict[str, Any]:
        """Convert a pydantic model to Anthropic tool format.

        Args:
            schema: Pydantic model class describing the payload.

        Returns:
            Dict in Anthropic's tool format with the model's JSON schema.
        """
        schema_name = getattr(schema, "__name__", "Content")
        if hasattr(schema, "model_json_schema"):
            input_schema = schema.model_json_schema()
        else:
            input_schema = {"type": "object", "properties": {}, "additionalProperties": True}

        return {
            "name": self.TOOL_NAME,
            "description": f"Emit a {schema_name}. Return valid JSON matching the schema.",
            "input_schema": input_schema,
        }
