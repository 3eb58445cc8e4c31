"""Search API client - LLM-backed news search returning cited articles."""

import json
import logging
import time
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


class SearchApiClient(LoggedSourceClient):
    """
    Client for a chat-completions style search service.

    The query is sent as a user message; matching articles come back as
    `paas_citations` inside `res.model_extensions`.
    """

    provider_name = "Search API"

    SYSTEM_PROMPT = (
        "You are a professional news research and summarization agent. "
        "Collect news material that is **recent, accurate and well contextualized** "
        "for the request below and summarize it clearly and concisely."
    )

    def __init__(
        self,
        api_url: str,
        api_key: str,
        prompt_id: str | int,
        log_repo: SearchApiLogRepository | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 60.0,
    ):
        super().__init__(log_repo=log_repo, http_client=http_client, timeout_seconds=timeout_seconds)
        self.api_url = api_url
        self.api_key = api_key
        self.prompt_id = int(prompt_id)

    def build_request(self, query: str, options: SearchOptions) -> dict[str, Any]:
        return {
            "is_production": options.is_production,
            "prompt_id": self.prompt_id,
            "messages": [
                {"role": "system", "content": self.SYSTEM_PROMPT},
                {"role": "user", "content": query},
            ],
            "model_extensions": {
                "service_type": "PAAS",
                "return_citations": True,
                "return_images": False,
                "return_related_questions": False,
                "news_filter_off": options.news_filter_off,
                "search_type_extension_limit": options.extension_limit,
                "search_domain_filter": options.domain_filter,
                "search_recency_filter": options.recency_filter,
            },
        }

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key and self.api_key != "NONE":
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def search(
        self,
        query: str,
        options: SearchOptions | None = None,
        category: CategoryInfo | None = None,
    ) -> list[SearchResultArticle]:
        """
        Search news for one query.

        Args:
            query: Search text, usually a category's search query
            options: Recency/content-filter/expansion settings
            category: Category context recorded in the call log

        Returns:
            Visible citations that carry both a title and a URL

        Raises:
            ArticleSourceError: transport failure, non-2xx status, error state
                or a body that is not the expected JSON shape
        """
        options = options or SearchOptions()
        category = category or CategoryInfo()
        request_body = self.build_request(query, options)
        request_json = json.dumps(request_body, ensure_ascii=False)
        started = time.perf_counter()

        def elapsed_ms() -> int:
            return int((time.perf_counter() - started) * 1000)

        try:
            response = await self._send(
                "POST", self.api_url, content=request_json.encode("utf-8"), headers=self._headers()
            )
        except httpx.HTTPError as e:
            error = ArticleSourceError(f"Search API request failed: {e}")
            await self._record(query, category, "error", elapsed_ms(), request_json, error_message=str(error))
            raise error from e

        if response.is_error:
            error = ArticleSourceError(
                f"Search API error: {response.status_code} {response.reason_phrase} - {response.text[:500]}"
            )
            await self._record(query, category, "error", elapsed_ms(), request_json, error_message=str(error))
            raise error

        try:
            data = response.json()
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        except ValueError as e:
            error = ArticleSourceError(f"Search API returned invalid JSON: {e}")
            await self._record(
                query, category, "error", elapsed_ms(), request_json,
                response_body=response.text, error_message=str(error),
            )
            raise error from e

        if data.get("state") != 200:
            error = ArticleSourceError(f"Search API returned error state: {data.get('state')}")
            await self._record(
                query, category, "error", elapsed_ms(), request_json,
                response_body=json.dumps(data, ensure_ascii=False), error_message=str(error),
            )
            raise error

        try:
            res = _object(data.get("res"), "res")
            extensions = _object(res.get("model_extensions"), "res.model_extensions")
            citations = extensions.get("paas_citations") or []
            if not isinstance(citations, list):
                raise ValueError("paas_citations is not a list")
            results = self.parse_citations(citations)
            usage = _object(res.get("usage"), "res.usage")
        except ValueError as e:
            error = ArticleSourceError(f"Search API returned a malformed body: {e}")
            await self._record(
                query, category, "error", elapsed_ms(), request_json,
                response_body=response.text, error_message=str(error),
            )
            raise error from e

        await self._record(
            query,
            category,
            "success",
            elapsed_ms(),
            request_json,
            result_count=len(results),
            response_body=json.dumps(data, ensure_ascii=False),
            tokens_prompt=usage.get("prompt_tokens"),
            tokens_completion=usage.get("completion_tokens"),
        )
        logger.debug(f"Search API returned {len(results)} articles for '{query[:50]}'")
        return results

    def parse_citations(self, citations: list[dict[str, Any]]) -> list[SearchResultArticle]:
        """Convert visible citations into candidate articles."""
        results = []
        for citation in citations:
            if not isinstance(citation, dict):
                continue
            if not citation.get("is_visible") or not citation.get("title") or not citation.get("url"):
                continue

            og_tags = citation.get("og_tags")
            if not isinstance(og_tags, dict):
                og_tags = {}
            url = citation["url"]
            results.append(
                SearchResultArticle(
                    title=citation["title"],
                    url=url,
                    snippet=clean_text(citation.get("snippet") or og_tags.get("description")),
                    source=citation.get("site_name") or extract_domain(url),
                    image_url=citation.get("image") or og_tags.get("image") or None,
                    favicon=citation.get("favicon") or None,
                )
            )
        return results


def _object(value: Any, name: str) -> dict[str, Any]:
    """A missing section reads as empty; anything but an object is malformed."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{name} is not an object")
    return value
