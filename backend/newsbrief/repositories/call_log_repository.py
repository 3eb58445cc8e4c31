"""Call log stores for the article source and the summary endpoint."""

from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import case, delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from newsbrief.models import SearchApiLog, SummaryLog
from newsbrief.repositories.pagination import PaginatedResult, paginate

# Prompt and query text are capped before storage
MAX_PROMPT_CHARS = 1000


class SearchApiLogRepository:
    """Audit trail of article source calls, including raw request/response bodies."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(
        self,
        search_query: str,
        status: str,
        duration_ms: int,
        result_count: int = 0,
        category_id: str | None = None,
        category_name: str | None = None,
        tokens_prompt: int | None = None,
        tokens_completion: int | None = None,
        request_body: str | None = None,
        response_body: str | None = None,
        error_message: str | None = None,
    ) -> SearchApiLog:
        log = SearchApiLog(
            search_query=search_query[:MAX_PROMPT_CHARS],
            status=status,
            duration_ms=duration_ms,
            result_count=result_count,
            category_id=category_id,
            category_name=category_name,
            tokens_prompt=tokens_prompt,
            tokens_completion=tokens_completion,
            request_body=request_body,
            response_body=response_body,
            error_message=error_message,
        )
        self.session.add(log)
        await self.session.commit()
        return log

    async def find_all_paginated(self, page: int = 1, limit: int = 20) -> PaginatedResult[SearchApiLog]:
        query = select(SearchApiLog).order_by(SearchApiLog.created_at.desc())
        return await paginate(self.session, query, page, limit)

    async def find_by_id(self, log_id: str) -> SearchApiLog | None:
        return await self.session.get(SearchApiLog, log_id)


class SummaryLogRepository:
    """Audit trail of summary completion calls."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(
        self,
        model: str,
        prompt: str,
        status: str,
        duration_ms: int,
        response: str | None = None,
        tokens_input: int | None = None,
        tokens_output: int | None = None,
        news_id: str | None = None,
        error_message: str | None = None,
    ) -> SummaryLog:
        log = SummaryLog(
            model=model,
            prompt=prompt[:MAX_PROMPT_CHARS],
            response=response,
            tokens_input=tokens_input,
            tokens_output=tokens_output,
            duration_ms=duration_ms,
            news_id=news_id,
            status=status,
            error_message=error_message,
        )
        self.session.add(log)
        await self.session.commit()
        return log

    async def find_recent(self, limit: int = 100) -> list[SummaryLog]:
        result = await self.session.execute(
            select(SummaryLog).order_by(SummaryLog.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def find_by_news_id(self, news_id: str) -> list[SummaryLog]:
        result = await self.session.execute(
            select(SummaryLog)
            .where(SummaryLog.news_id == news_id)
            .order_by(SummaryLog.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_stats(self) -> dict[str, Any]:
        result = await self.session.execute(
            select(
                func.count(SummaryLog.id),
                func.sum(case((SummaryLog.status == "success", 1), else_=0)),
                func.sum(case((SummaryLog.status == "error", 1), else_=0)),
                func.coalesce(func.sum(SummaryLog.tokens_input), 0),
                func.coalesce(func.sum(SummaryLog.tokens_output), 0),
                func.coalesce(func.avg(SummaryLog.duration_ms), 0),
            )
        )
        total, success, error, tokens_in, tokens_out, avg_ms = result.one()
        return {
            "total_calls": total or 0,
            "success_calls": success or 0,
            "error_calls": error or 0,
            "total_tokens_input": tokens_in or 0,
            "total_tokens_output": tokens_out or 0,
            "avg_duration_ms": float(avg_ms or 0),
        }

    async def clean_old_logs(self, days_to_keep: int = 30) -> int:
        """Delete logs older than the retention window. Returns the number removed."""
        cutoff = datetime.now(UTC) - timedelta(days=days_to_keep)
        result = await self.session.execute(
            delete(SummaryLog)
            .where(SummaryLog.created_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        return result.rowcount
