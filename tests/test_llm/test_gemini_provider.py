"""Tests for Gemini provider."""

import json

import pytest
from unittest.mock import AsyncMock, MagicMock

from google.genai import errors as genai_errors

from partygen.content.schemas import WouldYouRatherPrompt
from partygen.llm.base import LLMProvider
from partygen.llm.exceptions import (
    AuthenticationError,
    ProviderError,
    RateLimitError,
    StructuredOutputError,
)
from partygen.llm.gemini_provider import GeminiProvider
from partygen.llm.message_types import Message

PAYLOAD = {"option_a": "Fly", "option_b": "Be invisible"}


def _response(text: str | None):
    response = MagicMock()
    response.text = text
    response.usage_metadata = MagicMock(
        prompt_token_count=12, candidates_token_count=8, total_token_count=20
    )
    return response


@pytest.fixture
def mock_client():
    """Create a mock google-genai client."""
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=_response(json.dumps(PAYLOAD)))
    return client


def _api_error(code: int, status: str) -> genai_errors.APIError:
    error_cls = genai_errors.ServerError if code >= 500 else genai_errors.ClientError
    return error_cls(code, {"error": {"code": code, "message": "boom", "status": status}})


class TestGeminiProviderInit:
    """Tests for GeminiProvider initialization."""

    def test_defaults(self):
        provider = GeminiProvider(api_key="test-key")
        assert provider.provider_name == "gemini"
        assert provider.default_model == "gemini-3-flash-preview"

    def test_implements_protocol(self):
        assert isinstance(GeminiProvider(api_key="test-key"), LLMProvider)


class TestGeminiProviderCompleteStructured:
    """Tests for GeminiProvider.complete_structured."""

    @pytest.mark.asyncio
    async def test_decodes_json(self, mock_client):
        provider = GeminiProvider(api_key="test-key", client=mock_client)

        response = await provider.complete_structured([Message.user("Dilemma")], WouldYouRatherPrompt)

        assert response.parsed_content == PAYLOAD
        assert response.model == "gemini-3-flash-preview"
        assert response.usage.total_tokens == 20

    @pytest.mark.asyncio
    async def test_request_config(self, mock_client):
        provider = GeminiProvider(api_key="test-key", client=mock_client)

        await provider.complete_structured(
            [Message.user("Dilemma")],
            WouldYouRatherPrompt,
            model="gemini-2.5-pro",
            max_tokens=256,
            temperature=0.3,
            system_prompt="Party host",
        )

        kwargs = mock_client.aio.models.generate_content.await_args.kwargs
        assert kwargs["model"] == "gemini-2.5-pro"
        assert kwargs["contents"] == [{"role": "user", "parts": [{"text": "Dilemma"}]}]
        config = kwargs["config"]
        assert config["response_mime_type"] == "application/json"
        assert config["response_schema"] is WouldYouRatherPrompt
        assert config["max_output_tokens"] == 256
        assert config["temperature"] == 0.3
        assert config["system_instruction"] == "Party host"

    @pytest.mark.asyncio
    async def test_assistant_role_maps_to_model(self, mock_client):
        provider = GeminiProvider(api_key="test-key", client=mock_client)

        await provider.complete_structured(
            [Message.user("a"), Message.assistant("b"), Message.user("c")], WouldYouRatherPrompt
        )

        contents = mock_client.aio.models.generate_content.await_args.kwargs["contents"]
        assert [c["role"] for c in contents] == ["user", "model", "user"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", [None, "", "   ", "not json"])
    async def test_unusable_text(self, mock_client, text):
        mock_client.aio.models.generate_content.return_value = _response(text)
        provider = GeminiProvider(api_key="test-key", client=mock_client)

        with pytest.raises(StructuredOutputError):
            await provider.complete_structured([Message.user("Dilemma")], WouldYouRatherPrompt)


class TestGeminiProviderErrorHandling:
    """Tests for API error mapping."""

    @pytest.mark.asyncio
    async def test_permission_denied(self, mock_client):
        mock_client.aio.models.generate_content.side_effect = _api_error(403, "PERMISSION_DENIED")
        provider = GeminiProvider(api_key="bad", client=mock_client)

        with pytest.raises(AuthenticationError):
            await provider.complete_structured([Message.user("x")], WouldYouRatherPrompt)

    @pytest.mark.asyncio
    async def test_resource_exhausted(self, mock_client):
        mock_client.aio.models.generate_content.side_effect = _api_error(429, "RESOURCE_EXHAUSTED")
        provider = GeminiProvider(api_key="test-key", client=mock_client)

        with pytest.raises(RateLimitError):
            await provider.complete_structured([Message.user("x")], WouldYouRatherPrompt)

    @pytest.mark.asyncio
    async def test_server_error_retryable(self, mock_client):
        mock_client.aio.models.generate_content.side_effect = _api_error(503, "UNAVAILABLE")
        provider = GeminiProvider(api_key="test-key", client=mock_client)

        with pytest.raises(ProviderError) as exc_info:
            await provider.complete_structured([Message.user("x")], WouldYouRatherPrompt)

        assert exc_info.value.is_retryable
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_bad_request_not_retryable(self, mock_client):
        mock_client.aio.models.generate_content.side_effect = _api_error(400, "INVALID_ARGUMENT")
        provider = GeminiProvider(api_key="test-key", client=mock_client)

        with pytest.raises(ProviderError) as exc_info:
            await provider.complete_structured([Message.user("x")], WouldYouRatherPrompt)

        assert not exc_info.value.is_retryable

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, mock_client):
        mock_client.aio.models.generate_content.side_effect = ConnectionError("reset")
        provider = GeminiProvider(api_key="test-key", client=mock_client)

        with pytest.raises(ConnectionError):
            await provider.complete_structured([Message.user("x")], WouldYouRatherPrompt)
