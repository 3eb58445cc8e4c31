"""NewsAPI client - keyword search over the headline API."""

import json
import logging
import time
from datetime import datetime
from typing import Any

import httpx

from newsbrief.exceptions import ArticleSourceError
from newsbrief.repositories import SearchApiLogRepository
from newsbrief.sources.base import (
    CategoryInfo,
    LoggedSourceClient,
    SearchOptions,
    SearchResultArticle,
    clean_text,
    extract_domain,
)

logger = logging.getLogger(__name__)


class NewsApiClient(LoggedSourceClient):
    """Client for newsapi.org `/v2/everything`."""

    provider_name = "NewsAPI"
    BASE_URL = "https://newsapi.org/v2"

    def __init__(
        self,
        api_key: str,
        language: str = "en",
        page_size: int = 20,
        log_repo: SearchApiLogRepository | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 30.0,
    ):
        super().__init__(log_repo=log_repo, http_client=http_client, timeout_seconds=timeout_seconds)
        self.api_key = api_key
        self.language = language
        self.page_size = page_size

    def build_params(self, query: str, options: SearchOptions) -> dict[str, Any]:
        params: dict[str, Any] = {
            "q": query,
            "from": options.recency_cutoff().strftime("%Y-%m-%dT%H:%M:%S"),
            "sortBy": "publishedAt",
            "language": self.language,
            "pageSize": self.page_size,
        }
        if options.domain_filter:
            params["domains"] = ",".join(options.domain_filter)
        return params

    async def search(
        self,
        query: str,
        options: SearchOptions | None = None,
        category: CategoryInfo | None = None,
    ) -> list[SearchResultArticle]:
        """Search articles matching `query` inside the recency window."""
        options = options or SearchOptions()
        category = category or CategoryInfo()
        params = self.build_params(query, options)
        request_json = json.dumps(params, ensure_ascii=False)
        started = time.perf_counter()

        def elapsed_ms() -> int:
            return int((time.perf_counter() - started) * 1000)

        try:
            response = await self._send(
                "GET", f"{self.BASE_URL}/everything", params=params, headers={"X-Api-Key": self.api_key}
            )
        except httpx.HTTPError as e:
            error = ArticleSourceError(f"NewsAPI request failed: {e}")
            await self._record(query, category, "error", elapsed_ms(), request_json, error_message=str(error))
            raise error from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.is_error or data.get("status") != "ok":
            detail = data.get("message") or response.reason_phrase
            error = ArticleSourceError(f"NewsAPI error: {response.status_code} {detail}")
            await self._record(
                query, category, "error", elapsed_ms(), request_json,
                response_body=response.text, error_message=str(error),
            )
            raise error

        articles = data.get("articles")
        results = self.parse_articles(articles if isinstance(articles, list) else [])
        await self._record(
            query,
            category,
            "success",
            elapsed_ms(),
            request_json,
            result_count=len(results),
            response_body=response.text,
        )
        return results

    def parse_articles(self, articles: list[dict[str, Any]]) -> list[SearchResultArticle]:
        """Drop removed or incomplete items and normalize the rest."""
        results = []
        for article in articles:
            if not isinstance(article, dict):
                continue
            title = str(article.get("title") or "").strip()
            url = str(article.get("url") or "").strip()
            if not title or title == "[Removed]" or not url:
                continue

            source_info = article.get("source")
            source = (source_info.get("name") if isinstance(source_info, dict) else None) or extract_domain(url)
            results.append(
                SearchResultArticle(
                    title=title,
                    url=url,
                    snippet=clean_text(article.get("description")),
                    source=source,
                    image_url=article.get("urlToImage") or None,
                    published_at=self._parse_date(article.get("publishedAt")),
                )
            )
        return results

    @staticmethod
    def _parse_date(value: str | None) -> datetime | None:
        if not value:
            return None
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
