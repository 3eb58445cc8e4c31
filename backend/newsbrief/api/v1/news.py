"""News API endpoints - browsing stored articles and triggering runs."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from newsbrief.agents import get_summary_agent
from newsbrief.api.deps import get_fetch_runner
from newsbrief.config import Settings, get_settings
from newsbrief.db import get_session as get_db
from newsbrief.exceptions import FetchInProgressError
from newsbrief.repositories import NewsRepository, SummaryLogRepository
from newsbrief.schemas.fetch import FetchRunResponse
from newsbrief.schemas.news import NewsListResponse, NewsResponse, PaginationMeta, SummarizeResponse
from newsbrief.services import FetchRunner, backfill_summaries

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=NewsListResponse)
async def list_news(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=50),
    category_id: str | None = None,
    db: AsyncSession = Depends(get_db),
) -> NewsListResponse:
    """
    List stored articles, newest publication first.

    - category_id: only articles tagged with this category
    """
    result = await NewsRepository(db).find_all_paginated(page, limit, category_id=category_id)
    return NewsListResponse(
        data=[NewsResponse.model_validate(n) for n in result.data],
        pagination=PaginationMeta(
            page=result.page,
            limit=result.limit,
            total=result.total,
            has_more=result.has_more,
            total_pages=result.total_pages,
        ),
    )


@router.post("/fetch", response_model=FetchRunResponse)
async def trigger_fetch(runner: FetchRunner = Depends(get_fetch_runner)) -> FetchRunResponse:
    """
    Run the fetch pipeline now and wait for it to finish.

    Per-category failures are reported in the body. A run that fails before
    any category is processed (e.g. missing configuration) returns 500.
    """
    try:
        log = await runner.run()
    except FetchInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    if log.status == "error" and not log.category_results:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=log.error_message or "News fetch failed",
        )
    return FetchRunResponse.from_log(log)


@router.post("/summarize", response_model=SummarizeResponse)
async def summarize_pending(
    limit: int = Query(default=10, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> SummarizeResponse:
    """Generate summaries for stored articles that do not have one yet."""
    agent = get_summary_agent(settings, SummaryLogRepository(db))
    if agent is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"No API key configured for LLM provider '{settings.llm_provider}'",
        )

    try:
        stats = await backfill_summaries(NewsRepository(db), agent, limit=limit)
    finally:
        await agent.client.close()

    logger.info(f"Summary backfill: {stats['succeeded']}/{stats['processed']} succeeded")
    return SummarizeResponse(**stats)


@router.get("/{news_id}", response_model=NewsResponse)
async def get_news(news_id: str, db: AsyncSession = Depends(get_db)) -> NewsResponse:
    """Get a specific article by ID."""
    news = await NewsRepository(db).find_by_id(news_id)
    if not news:
        raise HTTPException(status_code=404, detail="News not found")
    return NewsResponse.model_validate(news)


@router.delete("/{news_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_news(news_id: str, db: AsyncSession = Depends(get_db)) -> None:
    if not await NewsRepository(db).delete(news_id):
        raise HTTPException(status_code=404, detail="News not found")
