"""Application configuration using pydantic-settings."""

from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


ProviderType = Literal["gemini", "anthropic", "openai"]

VALID_PROVIDERS: tuple[str, ...] = ("gemini", "anthropic", "openai")


@dataclass
class ProviderConfig:
    """Parsed provider:model configuration."""

    provider: ProviderType
    model: str


def parse_provider_config(value: str, default_provider: ProviderType = "gemini") -> ProviderConfig:
    """Parse 'provider:model' format into ProviderConfig.

    Args:
        value: String in format 'provider:model' or just 'model'.
        default_provider: Provider to use if only model is specified.

    Returns:
        ProviderConfig with provider and model.

    Examples:
        >>> parse_provider_config("gemini:gemini-3-flash-preview")
        ProviderConfig(provider='gemini', model='gemini-3-flash-preview')

        >>> parse_provider_config("anthropic:claude-3-5-haiku-20241022")
        ProviderConfig(provider='anthropic', model='claude-3-5-haiku-20241022')

        >>> parse_provider_config("gpt-4o-mini", default_provider="openai")
        ProviderConfig(provider='openai', model='gpt-4o-mini')
    """
    if ":" in value:
        first_part = value.split(":")[0]
        if first_part in VALID_PROVIDERS:
            model = value[len(first_part) + 1 :]
            return ProviderConfig(provider=first_part, model=model)  # type: ignore

    return ProviderConfig(provider=default_provider, model=value)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API Keys
    google_api_key: str = ""
    anthropic_api_key: str = ""
    openai_api_key: str = ""
    openai_base_url: str | None = None  # Custom endpoint for OpenAI-compatible APIs

    # ==========================================================================
    # Content backend (provider:model format)
    # ==========================================================================
    # Examples:
    #   CONTENT_PROVIDER=gemini:gemini-3-flash-preview
    #   CONTENT_PROVIDER=anthropic:claude-3-5-haiku-20241022
    #   CONTENT_PROVIDER=openai:gpt-4o-mini
    content_provider: str = "gemini:gemini-3-flash-preview"

    # ==========================================================================
    # Cache
    # ==========================================================================
    cache_database_url: str = "sqlite:///partygen_cache.db"
    cache_ttl_seconds: int = 24 * 60 * 60

    # ==========================================================================
    # Retry / backoff
    # ==========================================================================
    retry_max_retries: int = 2  # 3 attempts in total
    retry_initial_delay: float = 1.0
    retry_exponential_base: float = 2.0
    retry_max_delay: float = 30.0
    retry_jitter: bool = False

    # ==========================================================================
    # Prefetch
    # ==========================================================================
    prefetch_queue_capacity: int = 1

    # Share one backend call between concurrent acquires of the same fingerprint.
    # Off by default: concurrent identical requests each hit the backend.
    dedupe_inflight: bool = False

    # Debug
    debug: bool = False
    log_llm_calls: bool = False
    llm_log_dir: str = "logs/llm"

    @property
    def content_provider_config(self) -> ProviderConfig:
        """Get parsed content provider config."""
        return parse_provider_config(self.content_provider)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience alias
settings = get_settings()
