"""LLM provider abstraction layer.

This module provides a unified interface for the generative backends that
produce party content: Google Gemini, Anthropic, and OpenAI (including
OpenAI-compatible APIs).

Quick Start:
    from partygen.llm import get_content_provider, Message

    provider = get_content_provider()  # Uses CONTENT_PROVIDER from settings
    response = await provider.complete_structured(
        messages=[Message.user("Generate a charades prompt")],
        response_schema=CharadePrompt,
    )
    print(response.parsed_content)
"""

# Message types
from partygen.llm.message_types import Message, MessageRole

# Response types
from partygen.llm.response_types import LLMResponse, ToolCall, UsageStats

# Protocol
from partygen.llm.base import LLMProvider

# Providers
from partygen.llm.anthropic_provider import AnthropicProvider
from partygen.llm.openai_provider import OpenAIProvider

# Factory
from partygen.llm.factory import get_content_provider

# Audit logging
from partygen.llm.audit_logger import (
    set_audit_context,
    get_audit_context,
    get_audit_logger,
    LLMAuditContext,
    LLMAuditEntry,
    LLMAuditLogger,
)
from partygen.llm.logging_provider import LoggingProvider

# Exceptions
from partygen.llm.exceptions import (
    LLMError,
    ProviderError,
    RateLimitError,
    AuthenticationError,
    ContentPolicyError,
    UnsupportedProviderError,
    StructuredOutputError,
)

__all__ = [
    # Message types
    "Message",
    "MessageRole",
    # Response types
    "LLMResponse",
    "ToolCall",
    "UsageStats",
    # Protocol
    "LLMProvider",
    # Providers
    "AnthropicProvider",
    "OpenAIProvider",
    # Factory
    "get_content_provider",
    # Audit logging
    "set_audit_context",
    "get_audit_context",
    "get_audit_logger",
    "LLMAuditContext",
    "LLMAuditEntry",
    "LLMAuditLogger",
    "LoggingProvider",
    # Exceptions
    "LLMError",
    "ProviderError",
    "RateLimitError",
    "AuthenticationError",
    "ContentPolicyError",
    "UnsupportedProviderError",
    "StructuredOutputError",
]
