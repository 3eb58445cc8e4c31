"""API tests through the ASGI app with an in-memory database."""

import httpx
import pytest

from newsbrief.config import Settings, get_settings
from newsbrief.db import get_session
from newsbrief.main import create_app
from newsbrief.models.category import DEFAULT_TECH_ID
from newsbrief.repositories import NewsRepository, SummaryLogRepository
from newsbrief.services import FetchRunner, SchedulerService
from tests.conftest import FakeSource, make_article
from tests.test_fetch_service import SCIENCE_QUERY, TECH_QUERY, make_service
from tests.test_repositories import make_news


@pytest.fixture
def source() -> FakeSource:
    return FakeSource({
        TECH_QUERY: [make_article(1), make_article(2)],
        SCIENCE_QUERY: [make_article(3)],
    })


@pytest.fixture
async def app(session_factory, source):
    app = create_app()

    async def override_session():
        async with session_factory() as session:
            yield session

    runner = FetchRunner(
        session_factory,
        settings_provider=lambda: Settings(_env_file=None),
        service_factory=lambda session, settings: make_service(session, source),
    )
    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_settings] = lambda: Settings(_env_file=None, openai_api_key="")
    app.state.fetch_runner = runner
    app.state.scheduler = SchedulerService(session_factory, runner)
    yield app
    app.state.scheduler.shutdown()


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestHealth:
    async def test_health(self, client) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestNewsEndpoints:
    async def test_fetch_then_list(self, client) -> None:
        response = await client.post("/api/v1/news/fetch")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["total"] == {"fetched": 3, "saved": 3, "duplicates": 0, "summarized": 0}
        assert len(body["categories"]) == 2

        listing = await client.get("/api/v1/news", params={"limit": 2})
        data = listing.json()
        assert data["pagination"]["total"] == 3
        assert data["pagination"]["has_more"] is True
        assert len(data["data"]) == 2

        tech_only = await client.get("/api/v1/news", params={"category_id": DEFAULT_TECH_ID})
        assert tech_only.json()["pagination"]["total"] == 2

    async def test_list_validation(self, client) -> None:
        assert (await client.get("/api/v1/news", params={"page": 0})).status_code == 422
        assert (await client.get("/api/v1/news", params={"limit": 51})).status_code == 422

    async def test_fetch_configuration_error(self, client, app, session_factory) -> None:
        app.state.fetch_runner = FetchRunner(
            session_factory,
            settings_provider=lambda: Settings(_env_file=None, search_api_url="", search_api_prompt_id=""),
        )

        response = await client.post("/api/v1/news/fetch")

        assert response.status_code == 500
        assert "SEARCH_API_URL" in response.json()["detail"]

    async def test_get_and_delete(self, client, session) -> None:
        saved = await NewsRepository(session).save(make_news(1))

        assert (await client.get(f"/api/v1/news/{saved.id}")).json()["title"] == "Story 1"
        assert (await client.delete(f"/api/v1/news/{saved.id}")).status_code == 204
        assert (await client.get(f"/api/v1/news/{saved.id}")).status_code == 404

    async def test_summarize_without_provider(self, client) -> None:
        response = await client.post("/api/v1/news/summarize")

        assert response.status_code == 500


class TestCategoryEndpoints:
    async def test_crud(self, client) -> None:
        created = await client.post(
            "/api/v1/categories", json={"name": "Space", "search_query": "rocket launches"}
        )
        assert created.status_code == 201
        category_id = created.json()["id"]

        listing = (await client.get("/api/v1/categories")).json()
        assert listing["total"] == 3

        updated = await client.put(
            f"/api/v1/categories/{category_id}", json={"name": "Orbit", "search_query": "satellites"}
        )
        assert updated.json()["name"] == "Orbit"

        assert (await client.delete(f"/api/v1/categories/{category_id}")).status_code == 204
        assert (await client.get(f"/api/v1/categories/{category_id}")).status_code == 404

    async def test_error_mapping(self, client) -> None:
        duplicate = await client.post(
            "/api/v1/categories", json={"name": "Technology", "search_query": "again"}
        )
        assert duplicate.status_code == 409

        protected = await client.delete(f"/api/v1/categories/{DEFAULT_TECH_ID}")
        assert protected.status_code == 403

        missing = await client.put(
            "/api/v1/categories/missing", json={"name": "X", "search_query": "y"}
        )
        assert missing.status_code == 404

        too_long = await client.post("/api/v1/categories", json={"name": "x" * 51, "search_query": "y"})
        assert too_long.status_code == 422

    async def test_limit(self, client) -> None:
        for n in range(5):
            response = await client.post(
                "/api/v1/categories", json={"name": f"Topic {n}", "search_query": "q"}
            )
            assert response.status_code == 201

        response = await client.post("/api/v1/categories", json={"name": "Extra", "search_query": "q"})
        assert response.status_code == 400


class TestAdminEndpoints:
    async def test_settings_defaults(self, client) -> None:
        response = await client.get("/api/v1/admin/settings")

        assert response.json() == {
            "schedule": "0 */6 * * *",
            "enabled": False,
            "recency_filter": "1day",
            "news_filter_off": True,
            "search_type_extension_limit": "Complex",
        }

    async def test_update_settings_starts_scheduler(self, client) -> None:
        response = await client.post(
            "/api/v1/admin/settings",
            json={"schedule": "0 9 * * *", "enabled": True, "recency_filter": "1week"},
        )

        body = response.json()
        assert body["scheduled"] is True
        assert body["enabled"] is True
        assert body["recency_filter"] == "1week"

        status = (await client.get("/api/v1/admin/scheduler")).json()
        assert status["scheduled"] is True
        assert status["schedule"] == "0 9 * * *"
        assert status["fetch_running"] is False

    async def test_invalid_cron_is_saved_unscheduled(self, client) -> None:
        response = await client.post(
            "/api/v1/admin/settings", json={"schedule": "invalid cron", "enabled": True}
        )

        assert response.status_code == 200
        assert response.json()["scheduled"] is False
        assert response.json()["enabled"] is True

    async def test_schedule_is_required(self, client) -> None:
        response = await client.post("/api/v1/admin/settings", json={"enabled": True})

        assert response.status_code == 422

    async def test_enabled_is_required(self, client) -> None:
        response = await client.post("/api/v1/admin/settings", json={"schedule": "0 9 * * *"})

        assert response.status_code == 422
        status = (await client.get("/api/v1/admin/scheduler")).json()
        assert status["scheduled"] is False

    async def test_fetch_logs(self, client) -> None:
        await client.post("/api/v1/news/fetch")

        response = await client.get("/api/v1/admin/fetch-logs")

        body = response.json()
        assert body["pagination"]["total"] == 1
        assert body["data"][0]["status"] == "success"
        assert body["data"][0]["total_saved"] == 3

    async def test_search_log_not_found(self, client) -> None:
        assert (await client.get("/api/v1/admin/search-logs")).json()["total"] == 0
        assert (await client.get("/api/v1/admin/search-logs/missing")).status_code == 404


class TestSummaryLogEndpoints:
    async def test_list_and_clean(self, client, session) -> None:
        repo = SummaryLogRepository(session)
        await repo.save(model="m", prompt="p", status="success", duration_ms=10, news_id="n1")

        listing = (await client.get("/api/v1/logs/summaries")).json()
        assert listing["stats"]["total_calls"] == 1
        assert len(listing["logs"]) == 1

        by_news = (await client.get("/api/v1/logs/summaries", params={"news_id": "other"})).json()
        assert by_news["logs"] == []

        cleaned = (await client.delete("/api/v1/logs/summaries", params={"days": 30})).json()
        assert cleaned["deleted"] == 0
