"""Run log store - one immutable row per fetch run."""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from newsbrief.models import FetchLog
from newsbrief.repositories.pagination import PaginatedResult, paginate


class FetchLogRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(
        self,
        status: str,
        duration_ms: int,
        total_fetched: int = 0,
        total_saved: int = 0,
        total_duplicates: int = 0,
        total_summarized: int = 0,
        category_results: list[dict[str, Any]] | None = None,
        error_message: str | None = None,
    ) -> FetchLog:
        log = FetchLog(
            status=status,
            duration_ms=duration_ms,
            total_fetched=total_fetched,
            total_saved=total_saved,
            total_duplicates=total_duplicates,
            total_summarized=total_summarized,
            category_results=category_results or [],
            error_message=error_message,
        )
        self.session.add(log)
        await self.session.commit()
        return log

    async def find_all_paginated(self, page: int, limit: int) -> PaginatedResult[FetchLog]:
        query = select(FetchLog).order_by(FetchLog.created_at.desc())
        return await paginate(self.session, query, page, limit)

    async def find_by_id(self, log_id: str) -> FetchLog | None:
        return await self.session.get(FetchLog, log_id)

    async def find_recent(self, limit: int = 10) -> list[FetchLog]:
        result = await self.session.execute(
            select(FetchLog).order_by(FetchLog.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())
