"""News fetch service - the per-category fetch, validate, persist, summarize pipeline."""

import logging
import time
from dataclasses import asdict, dataclass, field
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from newsbrief.agents import SummaryAgent, get_summary_agent
from newsbrief.config import Settings
from newsbrief.models import Category, FetchLog, News, validate_news
from newsbrief.repositories import (
    CategoryRepository,
    FetchLogRepository,
    NewsRepository,
    SearchApiLogRepository,
    SummaryLogRepository,
    SystemSettingRepository,
)
from newsbrief.sources import ArticleSource, CategoryInfo, SearchOptions, SearchResultArticle, get_article_source

logger = logging.getLogger(__name__)


@dataclass
class CategoryFetchResult:
    """Counters and error strings for one category within a run."""

    category_id: str
    category_name: str
    fetched: int = 0
    saved: int = 0
    duplicates: int = 0
    summarized: int = 0
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class FetchRunResult:
    """Per-category results of one run, in processing order."""

    categories: list[CategoryFetchResult] = field(default_factory=list)

    @property
    def total_fetched(self) -> int:
        return sum(c.fetched for c in self.categories)

    @property
    def total_saved(self) -> int:
        return sum(c.saved for c in self.categories)

    @property
    def total_duplicates(self) -> int:
        return sum(c.duplicates for c in self.categories)

    @property
    def total_summarized(self) -> int:
        return sum(c.summarized for c in self.categories)

    @property
    def errors(self) -> list[str]:
        return [f"[{c.category_name}] {e}" for c in self.categories for e in c.errors]


class NewsFetchService:
    """
    Collects news for every category and stores new articles.

    Categories run one after another. A failing category is recorded and
    skipped; a failing summary never undoes the article save.
    """

    def __init__(
        self,
        news_repo: NewsRepository,
        settings_repo: SystemSettingRepository,
        source: ArticleSource,
        summary_agent: SummaryAgent | None = None,
        domain_filter: list[str] | None = None,
        is_production: bool = False,
    ):
        self.news_repo = news_repo
        self.settings_repo = settings_repo
        self.source = source
        self.summary_agent = summary_agent
        self.domain_filter = domain_filter or []
        self.is_production = is_production

    async def _search_options(self) -> SearchOptions:
        return SearchOptions.from_settings(
            await self.settings_repo.get_resolved(),
            domain_filter=self.domain_filter,
            is_production=self.is_production,
        )

    async def fetch_category(self, category: Category) -> CategoryFetchResult:
        """Fetch, validate, persist and summarize articles for one category."""
        category_id, category_name = category.id, category.name
        result = CategoryFetchResult(category_id=category_id, category_name=category_name)

        try:
            options = await self._search_options()
            articles = await self.source.search(
                category.search_query,
                options,
                CategoryInfo(id=category.id, name=category.name),
            )
            result.fetched = len(articles)

            for article in articles:
                await self._process_article(article, category, result)

        except Exception as e:
            logger.error(f"Category '{category_name}' fetch failed: {e}")
            if isinstance(e, SQLAlchemyError):
                await self.news_repo.reset()
            return CategoryFetchResult(
                category_id=category_id,
                category_name=category_name,
                errors=[str(e) or type(e).__name__],
            )

        return result

    async def _process_article(
        self,
        article: SearchResultArticle,
        category: Category,
        result: CategoryFetchResult,
    ) -> None:
        news_input = article.to_news_input(category.id)
        if not validate_news(news_input):
            label = news_input["title"] or news_input["url"] or "(untitled)"
            result.errors.append(f"Invalid news data: {label}")
            return

        saved = await self.news_repo.save(News(**news_input))
        if saved is None:
            result.duplicates += 1
            return
        result.saved += 1

        if self.summary_agent:
            await self._summarize(saved, article, result)

    async def _summarize(
        self,
        news: News,
        article: SearchResultArticle,
        result: CategoryFetchResult,
    ) -> None:
        try:
            summary = await self.summary_agent.summarize(
                news.title,
                news.url,
                news.source,
                news.id,
                snippet=article.snippet or None,
            )
        except Exception as e:
            logger.warning(f"AI summary failed for {news.id}: {e}")
            return

        if summary:
            await self.news_repo.update_summary(news.id, summary)
            result.summarized += 1

    async def fetch_all_categories(self, categories: list[Category]) -> FetchRunResult:
        run = FetchRunResult()
        # Detached copies stay readable if a failed category rolls the session back
        snapshots = [Category(**c.model_dump()) for c in categories]
        for category in snapshots:
            run.categories.append(await self.fetch_category(category))
        return run

    async def execute_fetch_and_log(
        self,
        category_repo: CategoryRepository,
        fetch_log_repo: FetchLogRepository,
    ) -> FetchLog:
        """
        Run every category and write one run log row.

        The run is "success" even when single categories failed; "error"
        only when something escapes the per-category guard.
        """
        started = time.perf_counter()

        try:
            categories = await category_repo.find_all()
            run = await self.fetch_all_categories(categories)
        except Exception as e:
            logger.exception("News fetch run failed")
            if isinstance(e, SQLAlchemyError):
                await fetch_log_repo.session.rollback()
            return await fetch_log_repo.save(
                status="error",
                duration_ms=_elapsed_ms(started),
                error_message=str(e) or type(e).__name__,
            )

        log = await fetch_log_repo.save(
            status="success",
            duration_ms=_elapsed_ms(started),
            total_fetched=run.total_fetched,
            total_saved=run.total_saved,
            total_duplicates=run.total_duplicates,
            total_summarized=run.total_summarized,
            category_results=[c.to_dict() for c in run.categories],
        )
        logger.info(
            f"News fetch finished: {run.total_fetched} fetched, {run.total_saved} saved, "
            f"{run.total_duplicates} duplicates, {run.total_summarized} summarized "
            f"across {len(run.categories)} categories"
        )
        return log

    async def close(self) -> None:
        await self.source.close()
        client = getattr(self.summary_agent, "client", None)
        if client is not None and hasattr(client, "close"):
            await client.close()


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def create_news_fetch_service(session: AsyncSession, settings: Settings) -> NewsFetchService:
    """
    Assemble a fetch service from current configuration.

    Raises:
        ConfigurationError: the article source is not configured
    """
    source = get_article_source(settings, log_repo=SearchApiLogRepository(session))
    summary_agent = get_summary_agent(settings, log_repo=SummaryLogRepository(session))
    if summary_agent is None:
        logger.info("AI summaries disabled: no completion provider configured")

    return NewsFetchService(
        news_repo=NewsRepository(session),
        settings_repo=SystemSettingRepository(session),
        source=source,
        summary_agent=summary_agent,
        domain_filter=settings.search_domains,
        is_production=settings.is_production,
    )
