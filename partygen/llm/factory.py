"""LLM provider factory.

Factory functions for creating the content backend provider from the
CONTENT_PROVIDER (provider:model) setting.
"""

from partygen.config import settings, ProviderConfig, parse_provider_config
from partygen.llm.base import LLMProvider
from partygen.llm.anthropic_provider import AnthropicProvider
from partygen.llm.openai_provider import OpenAIProvider
from partygen.llm.exceptions import UnsupportedProviderError


def _create_provider(config: ProviderConfig) -> LLMProvider:
    """Create an LLM provider from a ProviderConfig.

    Args:
        config: Parsed provider configuration with provider type and model.

    Returns:
        Configured LLMProvider instance.

    Raises:
        UnsupportedProviderError: If provider type is not supported.
    """
    if config.provider == "gemini":
        from partygen.llm.gemini_provider import GeminiProvider

        provider: LLMProvider = GeminiProvider(
            api_key=settings.google_api_key,
            default_model=config.model,
        )
    elif config.provider == "anthropic":
        provider = AnthropicProvider(
            api_key=settings.anthropic_api_key,
            default_model=config.model,
        )
    elif config.provider == "openai":
        provider = OpenAIProvider(
            api_key=settings.openai_api_key,
            default_model=config.model,
            base_url=settings.openai_base_url,
        )
    else:
        raise UnsupportedProviderError(f"Provider '{config.provider}' is not supported")

    # Wrap with logging if enabled
    if settings.log_llm_calls:
        from partygen.llm.logging_provider import LoggingProvider
        from partygen.llm.audit_logger import get_audit_logger

        provider = LoggingProvider(provider, get_audit_logger())

    return provider


def get_content_provider(value: str | None = None) -> LLMProvider:
    """Get provider configured for party content generation.

    Uses the CONTENT_PROVIDER env var (format: provider:model) unless an
    explicit value is given.
    Default: gemini:gemini-3-flash-preview

    Args:
        value: Optional provider:model override.

    Returns:
        LLMProvider configured for content generation.
    """
    if value is not None:
        return _create_provider(parse_provider_config(value))
    return _create_provider(settings.content_provider_config)
