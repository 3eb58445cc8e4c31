"""Services package - fetch pipeline, run control and scheduling."""

from newsbrief.services.fetch_runner import FetchRunner
from newsbrief.services.fetch_service import (
    CategoryFetchResult,
    FetchRunResult,
    NewsFetchService,
    create_news_fetch_service,
)
from newsbrief.services.scheduler_service import SchedulerService
from newsbrief.services.summary_service import backfill_summaries

__all__ = [
    "NewsFetchService",
    "CategoryFetchResult",
    "FetchRunResult",
    "create_news_fetch_service",
    "FetchRunner",
    "SchedulerService",
    "backfill_summaries",
]
