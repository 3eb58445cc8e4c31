"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App
    app_name: str = "NewsBrief"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    api_v1_prefix: str = "/api/v1"

    # SQLite (embedded, single file)
    database_url: str = "sqlite+aiosqlite:///./data/news.db"

    # Article source
    news_source: Literal["search", "newsapi"] = "search"
    search_api_url: str = ""
    search_api_key: str = ""  # "NONE" disables the Authorization header
    search_api_prompt_id: str = ""
    search_api_timeout_seconds: float = 60.0
    search_domain_filter: str = ""  # comma-separated allow-list, e.g. "bbc.com,reuters.com"
    newsapi_key: str = ""
    newsapi_language: str = "en"
    newsapi_page_size: int = 20

    # AI summaries
    llm_provider: Literal["openai", "anthropic", "gemini"] = "openai"
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    anthropic_api_key: str = ""
    gemini_api_key: str = ""
    summary_model: str = ""  # empty picks the provider default
    summary_language: str = "English"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def search_domains(self) -> list[str]:
        """Domain allow-list for article searches."""
        return [d.strip() for d in self.search_domain_filter.split(",") if d.strip()]

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
