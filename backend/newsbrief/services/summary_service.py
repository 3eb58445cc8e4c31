"""Summary backfill for stored articles that have no AI summary yet."""

import logging
from typing import Any

from newsbrief.agents import SummaryAgent
from newsbrief.repositories import NewsRepository

logger = logging.getLogger(__name__)

MAX_REPORTED_ERRORS = 10


async def backfill_summaries(
    news_repo: NewsRepository,
    summary_agent: SummaryAgent,
    limit: int = 10,
) -> dict[str, Any]:
    """
    Generate summaries for up to `limit` articles missing one.

    Returns processed/succeeded/failed counts and at most ten error strings.
    """
    pending = await news_repo.find_without_summary(limit)
    stats: dict[str, Any] = {"processed": len(pending), "succeeded": 0, "failed": 0, "errors": []}

    for news in pending:
        try:
            summary = await summary_agent.summarize(news.title, news.url, news.source, news.id)
        except Exception as e:
            stats["failed"] += 1
            stats["errors"].append(f"Error for {news.id}: {e}")
            logger.error(f"Error generating summary for {news.id}: {e}")
            continue

        if summary:
            await news_repo.update_summary(news.id, summary)
            stats["succeeded"] += 1
        else:
            stats["failed"] += 1
            stats["errors"].append(f"No summary generated for: {news.title}")

    stats["errors"] = stats["errors"][:MAX_REPORTED_ERRORS]
    return stats
