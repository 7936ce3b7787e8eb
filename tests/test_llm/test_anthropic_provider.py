"""Tests for Anthropic provider."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from partygen.content.schemas import DebatePrompt
from partygen.llm.anthropic_provider import AnthropicProvider
from partygen.llm.base import LLMProvider
from partygen.llm.exceptions import (
    AuthenticationError,
    ProviderError,
    RateLimitError,
    StructuredOutputError,
)
from partygen.llm.message_types import Message


@pytest.fixture
def mock_tool_response():
    """Create a mock Anthropic API response with the forced tool call."""
    tool_use = MagicMock()
    tool_use.type = "tool_use"
    tool_use.id = "toolu_123"
    tool_use.name = "emit_content"
    tool_use.input = {"topic": "Cats vs dogs", "side_a": "Cats", "side_b": "Dogs"}

    response = MagicMock()
    response.content = [tool_use]
    response.stop_reason = "tool_use"
    response.model = "claude-3-5-haiku-20241022"
    response.usage = MagicMock(input_tokens=20, output_tokens=15)
    return response


@pytest.fixture
def mock_client(mock_tool_response):
    """Create a mock Anthropic client."""
    client = MagicMock()
    client.messages = MagicMock()
    client.messages.create = AsyncMock(return_value=mock_tool_response)
    return client


def _status_error(error_cls, status_code, headers=None):
    import httpx

    mock_response = MagicMock(spec=httpx.Response)
    mock_response.status_code = status_code
    mock_response.headers = headers or {}
    return error_cls(
        message="boom",
        response=mock_response,
        body={"error": {"message": "boom"}},
    )


class TestAnthropicProviderInit:
    """Tests for AnthropicProvider initialization."""

    def test_create_with_api_key(self):
        provider = AnthropicProvider(api_key="test-key")
        assert provider.provider_name == "anthropic"

    def test_custom_default_model(self):
        provider = AnthropicProvider(api_key="test-key", default_model="claude-3-haiku-20240307")
        assert provider.default_model == "claude-3-haiku-20240307"

    def test_implements_protocol(self):
        """Test that AnthropicProvider implements LLMProvider protocol."""
        assert isinstance(AnthropicProvider(api_key="test-key"), LLMProvider)


class TestAnthropicProviderCompleteStructured:
    """Tests for AnthropicProvider.complete_structured."""

    @pytest.mark.asyncio
    async def test_returns_tool_arguments(self, mock_client):
        provider = AnthropicProvider(api_key="test-key", client=mock_client)

        response = await provider.complete_structured([Message.user("Debate!")], DebatePrompt)

        assert response.parsed_content == {"topic": "Cats vs dogs", "side_a": "Cats", "side_b": "Dogs"}
        assert response.usage.total_tokens == 35

    @pytest.mark.asyncio
    async def test_forces_emit_tool(self, mock_client):
        provider = AnthropicProvider(api_key="test-key", client=mock_client)

        await provider.complete_structured([Message.user("Debate!")], DebatePrompt)

        kwargs = mock_client.messages.create.call_args.kwargs
        assert kwargs["tool_choice"] == {"type": "tool", "name": "emit_content"}
        assert kwargs["tools"][0]["input_schema"] == DebatePrompt.model_json_schema()

    @pytest.mark.asyncio
    async def test_system_prompt(self, mock_client):
        provider = AnthropicProvider(api_key="test-key", client=mock_client)

        await provider.complete_structured(
            [Message.system("ignored"), Message.user("Hi")], DebatePrompt, system_prompt="Party host"
        )

        kwargs = mock_client.messages.create.call_args.kwargs
        assert kwargs["system"] == "Party host"
        assert kwargs["messages"] == [{"role": "user", "content": "Hi"}]

    @pytest.mark.asyncio
    async def test_system_message_extraction(self, mock_client):
        provider = AnthropicProvider(api_key="test-key", client=mock_client)

        await provider.complete_structured([Message.system("From message"), Message.user("Hi")], DebatePrompt)

        assert mock_client.messages.create.call_args.kwargs["system"] == "From message"

    @pytest.mark.asyncio
    async def test_text_only_response_is_structured_error(self, mock_client):
        mock_client.messages.create.return_value.content = [MagicMock(type="text", text="Sure!")]
        provider = AnthropicProvider(api_key="test-key", client=mock_client)

        with pytest.raises(StructuredOutputError) as exc_info:
            await provider.complete_structured([Message.user("Hi")], DebatePrompt)

        assert exc_info.value.raw_output == "Sure!"


class TestAnthropicProviderErrorHandling:
    """Tests for error handling."""

    @pytest.mark.asyncio
    async def test_authentication_error(self, mock_client):
        from anthropic import AuthenticationError as AnthropicAuthError

        mock_client.messages.create.side_effect = _status_error(AnthropicAuthError, 401)
        provider = AnthropicProvider(api_key="invalid-key", client=mock_client)

        with pytest.raises(AuthenticationError):
            await provider.complete_structured([Message.user("Hi")], DebatePrompt)

    @pytest.mark.asyncio
    async def test_rate_limit_error_reads_retry_after(self, mock_client):
        from anthropic import RateLimitError as AnthropicRateLimitError

        mock_client.messages.create.side_effect = _status_error(
            AnthropicRateLimitError, 429, headers={"retry-after": "4"}
        )
        provider = AnthropicProvider(api_key="test-key", client=mock_client)

        with pytest.raises(RateLimitError) as exc_info:
            await provider.complete_structured([Message.user("Hi")], DebatePrompt)

        assert exc_info.value.retry_after == 4.0

    @pytest.mark.asyncio
    async def test_server_error_is_retryable(self, mock_client):
        from anthropic import InternalServerError

        mock_client.messages.create.side_effect = _status_error(InternalServerError, 500)
        provider = AnthropicProvider(api_key="test-key", client=mock_client)

        with pytest.raises(ProviderError) as exc_info:
            await provider.complete_structured([Message.user("Hi")], DebatePrompt)

        assert exc_info.value.is_retryable
        assert exc_info.value.status_code == 500
