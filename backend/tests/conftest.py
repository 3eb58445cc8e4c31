"""Shared fixtures: an in-memory database plus fake providers."""

import os

# Keep the module-level engine off the filesystem
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from typing import Any

import pytest

from newsbrief.agents import Completion, SummaryAgent
from newsbrief.db import init_db, make_engine, make_session_factory
from newsbrief.sources import SearchResultArticle


class FakeSource:
    """Article source returning canned results per query."""

    def __init__(self, results: dict[str, Any] | None = None):
        self.results = results or {}
        self.queries: list[str] = []
        self.options: list[Any] = []
        self.closed = False

    async def search(self, query, options=None, category=None) -> list[SearchResultArticle]:
        self.queries.append(query)
        self.options.append(options)
        result = self.results.get(query, [])
        if isinstance(result, Exception):
            raise result
        return list(result)

    async def close(self) -> None:
        self.closed = True


class FakeCompletionClient:
    """Completion backend that answers with fixed text or raises."""

    model = "fake-model"

    def __init__(self, text: str | None = "A short summary.", error: Exception | None = None):
        self.text = text
        self.error = error
        self.prompts: list[str] = []

    async def complete(self, system, prompt, max_tokens=300, temperature=0.3) -> Completion:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return Completion(text=self.text, prompt_tokens=12, completion_tokens=34)

    async def close(self) -> None:
        pass


def make_article(n: int, **overrides: Any) -> SearchResultArticle:
    data = {
        "title": f"Article {n}",
        "url": f"https://example.com/articles/{n}",
        "snippet": f"Snippet {n}",
        "source": "example.com",
    }
    data.update(overrides)
    return SearchResultArticle(**data)


@pytest.fixture
async def engine():
    engine = make_engine("sqlite+aiosqlite://")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def completion_client() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def summary_agent(completion_client) -> SummaryAgent:
    return SummaryAgent(completion_client)
