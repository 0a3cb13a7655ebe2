"""
Application configuration.

Loads settings from environment variables (prefix LINGUACACHE_) with
sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="LINGUACACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================

    environment: str = "development"
    log_level: str = "INFO"

    # ==========================================================================
    # Languages
    # ==========================================================================

    source_language: str = "en"
    target_language: str = "en"
    supported_languages: str = "en"

    # "exact" or "primary_subtag" (treat en and en-US as the same language)
    same_language_policy: str = "exact"

    # ==========================================================================
    # Translation
    # ==========================================================================

    protect_placeholders: bool = True
    translate_timeout_seconds: float = 30.0

    # ==========================================================================
    # Cache
    # ==========================================================================

    cache_max_memory_entries: int = 1000
    cache_persist: bool = True
    cache_ttl_seconds: float | None = None
    cache_failures: bool = False
    cache_path: str = "./data/translation_cache.json"

    # ==========================================================================
    # AI / LLM
    # ==========================================================================

    # API keys come from the provider's own env vars (GOOGLE_API_KEY, ...)
    llm_provider: str = "gemini"
    gemini_model: str = "gemini-2.0-flash"
    openai_model: str = "gpt-4-turbo"
    anthropic_model: str = "claude-3-opus-20240229"

    # ==========================================================================
    # Optional Services
    # ==========================================================================

    sentry_dsn: str = ""

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def supported_languages_list(self) -> list[str]:
        return [s.strip() for s in self.supported_languages.split(",") if s.strip()]

    def model_for(self, provider: str | None = None) -> str:
        """Configured model name for a provider (default: llm_provider)."""
        return {
            "gemini": self.gemini_model,
            "openai": self.openai_model,
            "anthropic": self.anthropic_model,
        }.get(provider or self.llm_provider, self.gemini_model)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
