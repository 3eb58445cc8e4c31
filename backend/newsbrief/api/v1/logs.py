"""Summary call log endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from newsbrief.db import get_session as get_db
from newsbrief.repositories import SummaryLogRepository
from newsbrief.schemas.logs import (
    CleanupResponse,
    SummaryLogListResponse,
    SummaryLogResponse,
    SummaryStats,
)

router = APIRouter()


@router.get("/summaries", response_model=SummaryLogListResponse)
async def list_summary_logs(
    limit: int = Query(default=100, ge=1, le=1000),
    news_id: str | None = None,
    db: AsyncSession = Depends(get_db),
) -> SummaryLogListResponse:
    """
    List summary calls with aggregate stats.

    - news_id: every call made for one article, ignoring `limit`
    """
    log_repo = SummaryLogRepository(db)
    if news_id:
        logs = await log_repo.find_by_news_id(news_id)
    else:
        logs = await log_repo.find_recent(limit)

    stats = await log_repo.get_stats()
    return SummaryLogListResponse(
        stats=SummaryStats(**stats),
        logs=[SummaryLogResponse.model_validate(log) for log in logs],
    )


@router.delete("/summaries", response_model=CleanupResponse)
async def clean_summary_logs(
    days: int = Query(default=30, ge=1),
    db: AsyncSession = Depends(get_db),
) -> CleanupResponse:
    """Delete summary calls older than `days`."""
    deleted = await SummaryLogRepository(db).clean_old_logs(days)
    return CleanupResponse(deleted=deleted, message=f"Deleted {deleted} logs older than {days} days")
