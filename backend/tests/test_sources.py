"""Tests for the article source clients against a mocked transport."""

import json

import httpx
import pytest

from newsbrief.config import Settings
from newsbrief.exceptions import ArticleSourceError, ConfigurationError
from newsbrief.repositories import SearchApiLogRepository
from newsbrief.sources import (
    CategoryInfo,
    NewsApiClient,
    SearchApiClient,
    SearchOptions,
    extract_domain,
    get_article_source,
)
from newsbrief.sources.base import clean_text, normalize_recency


def search_response(citations: list[dict], state: int = 200) -> dict:
    return {
        "state": state,
        "res": {
            "model_extensions": {"paas_citations": citations},
            "usage": {"prompt_tokens": 120, "completion_tokens": 40},
        },
    }


def make_search_client(handler, log_repo=None) -> SearchApiClient:
    client = SearchApiClient(
        api_url="https://search.example.com/v1/chat",
        api_key="secret",
        prompt_id="42",
        log_repo=log_repo,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    client.max_attempts = 1
    return client


class TestHelpers:
    def test_extract_domain(self) -> None:
        assert extract_domain("https://www.example.com/a/b") == "example.com"
        assert extract_domain("https://news.example.org") == "news.example.org"
        assert extract_domain("not a url") == "Unknown"

    def test_clean_text(self) -> None:
        assert clean_text("<p>Hello <b>world</b></p>") == "Hello world"
        assert clean_text(None) == ""

    def test_normalize_recency(self) -> None:
        assert normalize_recency("1day") == "day"
        assert normalize_recency("1week") == "week"
        assert normalize_recency("month") == "month"
        assert normalize_recency("forever") == "day"


class TestSearchApiClient:
    """Request shape, citation parsing and call logging."""

    async def test_request_and_citations(self, session) -> None:
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["body"] = json.loads(request.content)
            captured["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json=search_response([
                {"is_visible": True, "title": "Chip news", "url": "https://www.chips.com/a",
                 "og_tags": {"description": "<b>Fab</b> expansion", "image": "https://img/1.png"}},
                {"is_visible": False, "title": "Hidden", "url": "https://hidden.com/x"},
                {"is_visible": True, "title": "", "url": "https://untitled.com/y"},
                {"is_visible": True, "title": "Space", "url": "https://space.org/b", "site_name": "Space Org"},
            ]))

        log_repo = SearchApiLogRepository(session)
        client = make_search_client(handler, log_repo)
        options = SearchOptions(recency_filter="week", news_filter_off=False)

        results = await client.search("chips", options, CategoryInfo(id="c1", name="Tech"))

        assert [r.title for r in results] == ["Chip news", "Space"]
        assert results[0].source == "chips.com"
        assert results[0].snippet == "Fab expansion"
        assert results[0].image_url == "https://img/1.png"
        assert results[1].source == "Space Org"

        assert captured["auth"] == "Bearer secret"
        assert captured["body"]["prompt_id"] == 42
        assert captured["body"]["messages"][1] == {"role": "user", "content": "chips"}
        extensions = captured["body"]["model_extensions"]
        assert extensions["service_type"] == "PAAS"
        assert extensions["search_recency_filter"] == "week"
        assert extensions["news_filter_off"] is False

        logs = (await log_repo.find_all_paginated()).data
        assert len(logs) == 1
        assert logs[0].status == "success"
        assert logs[0].result_count == 2
        assert logs[0].tokens_prompt == 120
        assert logs[0].category_name == "Tech"

    async def test_no_auth_header_for_none_key(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json=search_response([]))

        client = make_search_client(handler)
        client.api_key = "NONE"

        assert await client.search("anything") == []
        assert seen["auth"] is None

    async def test_error_status_is_logged_and_raised(self, session) -> None:
        log_repo = SearchApiLogRepository(session)
        client = make_search_client(lambda request: httpx.Response(503, text="unavailable"), log_repo)

        with pytest.raises(ArticleSourceError, match="503"):
            await client.search("chips")

        logs = (await log_repo.find_all_paginated()).data
        assert logs[0].status == "error"
        assert "503" in logs[0].error_message

    async def test_error_state_in_body(self) -> None:
        client = make_search_client(lambda request: httpx.Response(200, json={"state": 500}))

        with pytest.raises(ArticleSourceError, match="error state"):
            await client.search("chips")

    async def test_transport_error(self, session) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        log_repo = SearchApiLogRepository(session)
        client = make_search_client(handler, log_repo)

        with pytest.raises(ArticleSourceError, match="request failed"):
            await client.search("chips")
        assert (await log_repo.find_all_paginated()).total == 1

    @pytest.mark.parametrize(
        ("body", "message"),
        [
            ([1, 2], "invalid JSON"),
            ({"state": 200, "res": "oops"}, "malformed body"),
            ({"state": 200, "res": {"model_extensions": {"paas_citations": {"title": "x"}}}}, "malformed body"),
        ],
    )
    async def test_unexpected_body_shape_is_logged(self, session, body, message) -> None:
        log_repo = SearchApiLogRepository(session)
        client = make_search_client(lambda request: httpx.Response(200, json=body), log_repo)

        with pytest.raises(ArticleSourceError, match=message):
            await client.search("chips")

        logs = (await log_repo.find_all_paginated()).data
        assert len(logs) == 1
        assert logs[0].status == "error"
        assert message in logs[0].error_message

    async def test_domain_filter_and_production_flag(self) -> None:
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=search_response([]))

        client = make_search_client(handler)
        options = SearchOptions(domain_filter=["bbc.com", "reuters.com"], is_production=True)

        await client.search("chips", options)

        assert captured["body"]["is_production"] is True
        assert captured["body"]["model_extensions"]["search_domain_filter"] == ["bbc.com", "reuters.com"]


class TestNewsApiClient:
    async def test_parse_and_params(self) -> None:
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["params"] = dict(request.url.params)
            captured["key"] = request.headers.get("X-Api-Key")
            return httpx.Response(200, json={
                "status": "ok",
                "articles": [
                    {"title": "Rocket lands", "url": "https://www.space.com/r",
                     "source": {"name": "Space.com"}, "description": "Booster caught",
                     "publishedAt": "2024-05-01T10:00:00Z", "urlToImage": "https://img/r.jpg"},
                    {"title": "[Removed]", "url": "https://removed.com"},
                    {"title": "No url", "url": ""},
                ],
            })

        client = NewsApiClient(
            api_key="key",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )
        client.max_attempts = 1

        results = await client.search("rockets", SearchOptions(recency_filter="day"))

        assert len(results) == 1
        assert results[0].source == "Space.com"
        assert results[0].published_at.year == 2024
        assert results[0].snippet == "Booster caught"
        assert captured["params"]["q"] == "rockets"
        assert captured["params"]["sortBy"] == "publishedAt"
        assert captured["key"] == "key"

    async def test_error_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"status": "error", "message": "apiKeyInvalid"})

        client = NewsApiClient(
            api_key="bad",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )
        client.max_attempts = 1

        with pytest.raises(ArticleSourceError, match="apiKeyInvalid"):
            await client.search("rockets")

    async def test_non_object_body_is_logged(self, session) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[1, 2])

        log_repo = SearchApiLogRepository(session)
        client = NewsApiClient(
            api_key="key",
            log_repo=log_repo,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )
        client.max_attempts = 1

        with pytest.raises(ArticleSourceError, match="NewsAPI error: 200"):
            await client.search("rockets")

        logs = (await log_repo.find_all_paginated()).data
        assert len(logs) == 1
        assert logs[0].status == "error"

    async def test_domain_filter_param(self) -> None:
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["params"] = dict(request.url.params)
            return httpx.Response(200, json={"status": "ok", "articles": "none"})

        client = NewsApiClient(api_key="key", http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        client.max_attempts = 1

        assert await client.search("rockets", SearchOptions(domain_filter=["bbc.com", "wired.com"])) == []
        assert captured["params"]["domains"] == "bbc.com,wired.com"


class TestGetArticleSource:
    def test_missing_search_configuration(self) -> None:
        settings = Settings(_env_file=None, news_source="search", search_api_url="", search_api_prompt_id="")

        with pytest.raises(ConfigurationError, match="SEARCH_API_URL"):
            get_article_source(settings)

    def test_prompt_id_must_be_numeric(self) -> None:
        settings = Settings(
            _env_file=None, search_api_url="https://search.example.com", search_api_prompt_id="abc"
        )

        with pytest.raises(ConfigurationError, match="integer"):
            get_article_source(settings)

    def test_newsapi_requires_key(self) -> None:
        with pytest.raises(ConfigurationError, match="NEWSAPI_KEY"):
            get_article_source(Settings(_env_file=None, news_source="newsapi", newsapi_key=""))

    def test_search_client(self) -> None:
        settings = Settings(
            _env_file=None, search_api_url="https://search.example.com", search_api_prompt_id="7"
        )

        source = get_article_source(settings)

        assert isinstance(source, SearchApiClient)
        assert source.prompt_id == 7
