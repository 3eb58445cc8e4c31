"""Shared types for article source providers."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from newsbrief.constants.settings_defaults import (
    DEFAULT_EXTENSION_LIMIT,
    DEFAULT_RECENCY_FILTER,
)
from newsbrief.exceptions import ArticleSourceError
from newsbrief.repositories import SearchApiLogRepository

# Raw request/response bodies are kept for audit up to this size
MAX_AUDIT_BODY_CHARS = 100_000

RECENCY_WINDOWS = {
    "day": timedelta(days=1),
    "week": timedelta(weeks=1),
    "month": timedelta(days=30),
}


def normalize_recency(value: str | None) -> str:
    """Map stored recency values ("1day", "week", ...) to day/week/month."""
    value = (value or DEFAULT_RECENCY_FILTER).strip().lower().lstrip("1")
    return value if value in RECENCY_WINDOWS else "day"


@dataclass
class SearchOptions:
    """
    Provider options for one search.

    Recency, content filter and expansion limit come from the system
    settings table; the domain allow-list and production flag come from
    the process configuration.
    """

    recency_filter: str = "day"
    news_filter_off: bool = True
    extension_limit: str = DEFAULT_EXTENSION_LIMIT
    domain_filter: list[str] = field(default_factory=list)
    is_production: bool = False

    @classmethod
    def from_settings(
        cls,
        resolved: dict[str, Any],
        domain_filter: list[str] | None = None,
        is_production: bool = False,
    ) -> "SearchOptions":
        return cls(
            recency_filter=normalize_recency(resolved.get("recency_filter")),
            news_filter_off=bool(resolved.get("news_filter_off", True)),
            extension_limit=resolved.get("search_type_extension_limit") or DEFAULT_EXTENSION_LIMIT,
            domain_filter=list(domain_filter or []),
            is_production=is_production,
        )

    def recency_cutoff(self, now: datetime | None = None) -> datetime:
        now = now or datetime.now(UTC)
        return now - RECENCY_WINDOWS[normalize_recency(self.recency_filter)]


@dataclass
class CategoryInfo:
    """Category context attached to call logs."""

    id: str | None = None
    name: str | None = None


@dataclass
class SearchResultArticle:
    """Candidate article returned by a provider, before validation."""

    title: str
    url: str
    snippet: str = ""
    source: str = ""
    image_url: str | None = None
    favicon: str | None = None
    published_at: datetime | None = None

    def to_news_input(self, category_id: str | None = None) -> dict[str, Any]:
        """Article creation input for the news store."""
        return {
            "title": (self.title or "").strip(),
            "url": (self.url or "").strip(),
            "source": (self.source or "").strip(),
            "published_at": self.published_at or datetime.now(UTC),
            "image_url": self.image_url or None,
            "category_id": category_id,
        }


class ArticleSource(Protocol):
    """Anything that can search one query and return candidate articles."""

    async def search(
        self,
        query: str,
        options: SearchOptions | None = None,
        category: CategoryInfo | None = None,
    ) -> list[SearchResultArticle]: ...

    async def close(self) -> None: ...


def extract_domain(url: str) -> str:
    """Host name without the www. prefix, or "Unknown"."""
    try:
        host = urlparse(url).hostname
    except ValueError:
        return "Unknown"
    if not host:
        return "Unknown"
    return host.removeprefix("www.")


def clean_text(text: str | None) -> str:
    """Strip markup from provider snippets and descriptions."""
    if not text:
        return ""
    if "<" not in text:
        return text.strip()
    return BeautifulSoup(text, "lxml").get_text(" ", strip=True)


def truncate(text: str | None, limit: int = MAX_AUDIT_BODY_CHARS) -> str | None:
    if text is None:
        return None
    return text[:limit]


class LoggedSourceClient:
    """Base for HTTP source clients that write every call to the search call log."""

    provider_name = "source"

    def __init__(
        self,
        log_repo: SearchApiLogRepository | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 60.0,
    ):
        self.log_repo = log_repo
        self.http = http_client or httpx.AsyncClient(timeout=timeout_seconds, follow_redirects=True)
        self.max_attempts = 3

    async def _record(
        self,
        query: str,
        category: CategoryInfo,
        status: str,
        duration_ms: int,
        request_body: str,
        result_count: int = 0,
        response_body: str | None = None,
        error_message: str | None = None,
        tokens_prompt: int | None = None,
        tokens_completion: int | None = None,
    ) -> None:
        if not self.log_repo:
            return
        await self.log_repo.save(
            search_query=query,
            status=status,
            duration_ms=duration_ms,
            result_count=result_count,
            category_id=category.id,
            category_name=category.name,
            tokens_prompt=tokens_prompt,
            tokens_completion=tokens_completion,
            request_body=truncate(request_body),
            response_body=truncate(response_body),
            error_message=error_message,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.http.aclose()

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Issue a request, retrying transport failures with exponential backoff."""
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=1, min=2, max=10),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        ):
            with attempt:
                return await self.http.request(method, url, **kwargs)
        raise ArticleSourceError(f"{self.provider_name} request was not attempted")
