"""Article sources package - providers that return candidate articles per query."""

from newsbrief.config import Settings
from newsbrief.exceptions import ConfigurationError
from newsbrief.repositories import SearchApiLogRepository
from newsbrief.sources.base import (
    ArticleSource,
    CategoryInfo,
    SearchOptions,
    SearchResultArticle,
    extract_domain,
)
from newsbrief.sources.newsapi import NewsApiClient
from newsbrief.sources.search_api import SearchApiClient


def get_article_source(
    settings: Settings,
    log_repo: SearchApiLogRepository | None = None,
) -> ArticleSource:
    """Get the article source selected by `news_source`."""
    if settings.news_source == "newsapi":
        if not settings.newsapi_key:
            raise ConfigurationError("NEWSAPI_KEY environment variable is not set")
        return NewsApiClient(
            api_key=settings.newsapi_key,
            language=settings.newsapi_language,
            page_size=settings.newsapi_page_size,
            log_repo=log_repo,
        )

    missing = [
        name
        for name, value in (
            ("SEARCH_API_URL", settings.search_api_url),
            ("SEARCH_API_PROMPT_ID", settings.search_api_prompt_id),
        )
        if not value
    ]
    if missing:
        raise ConfigurationError(f"Search API is not configured: {', '.join(missing)} not set")

    try:
        prompt_id = int(settings.search_api_prompt_id)
    except ValueError as e:
        raise ConfigurationError("SEARCH_API_PROMPT_ID must be an integer") from e

    return SearchApiClient(
        api_url=settings.search_api_url,
        api_key=settings.search_api_key,
        prompt_id=prompt_id,
        log_repo=log_repo,
        timeout_seconds=settings.search_api_timeout_seconds,
    )


__all__ = [
    "ArticleSource",
    "CategoryInfo",
    "SearchOptions",
    "SearchResultArticle",
    "SearchApiClient",
    "NewsApiClient",
    "extract_domain",
    "get_article_source",
]
