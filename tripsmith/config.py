"""Typed settings configuration - single source of truth."""

from functools import lru_cache
from pathlib import Path

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Completion service
    openai_api_key: SecretStr | None = None
    openai_planning_model: str = "gpt-4.1"
    openai_fast_model: str = "gpt-4.1-mini"
    completion_timeout_seconds: float = 120.0

    # Wishlist analysis: web search + text parsing, or structured output without tools
    analysis_uses_web_search: bool = True

    # Cloud persistence (optional)
    supabase_url: str | None = None
    supabase_anon_key: SecretStr | None = None
    itineraries_table: str = "itineraries"

    # Local fallback store
    local_store_path: Path = Path(".tripsmith/store.json")
    local_store_namespace: str = "tripsmith_saved_plans"

    # Weather (Open-Meteo, keyless)
    weather_base_url: str = "https://api.open-meteo.com/v1/forecast"
    weather_timeout_seconds: float = 4.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
