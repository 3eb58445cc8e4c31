"""Admin API endpoints - runtime settings, run history and scheduler state."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from newsbrief.api.deps import get_fetch_runner, get_scheduler
from newsbrief.constants.settings_defaults import (
    NEWS_FILTER_OFF,
    SEARCH_RECENCY_FILTER,
    SEARCH_TYPE_EXTENSION_LIMIT,
)
from newsbrief.db import get_session as get_db
from newsbrief.repositories import FetchLogRepository, SearchApiLogRepository, SystemSettingRepository
from newsbrief.schemas.fetch import FetchLogListResponse, FetchLogResponse
from newsbrief.schemas.logs import SearchApiLogListResponse, SearchApiLogResponse
from newsbrief.schemas.news import PaginationMeta
from newsbrief.schemas.settings import (
    SchedulerStatus,
    SettingsUpdate,
    SettingsUpdateResponse,
    SystemSettings,
)
from newsbrief.services import FetchRunner, SchedulerService

router = APIRouter()


@router.get("/settings", response_model=SystemSettings)
async def get_system_settings(db: AsyncSession = Depends(get_db)) -> SystemSettings:
    """Get effective settings; unset keys report their defaults."""
    resolved = await SystemSettingRepository(db).get_resolved()
    return SystemSettings(**resolved)


@router.post("/settings", response_model=SettingsUpdateResponse)
async def update_system_settings(
    data: SettingsUpdate,
    db: AsyncSession = Depends(get_db),
    scheduler: SchedulerService = Depends(get_scheduler),
) -> SettingsUpdateResponse:
    """
    Save settings and apply the schedule immediately.

    `scheduled` is false when the schedule is disabled or the cron
    expression could not be parsed; both values are saved either way.
    """
    settings_repo = SystemSettingRepository(db)
    if data.recency_filter is not None:
        await settings_repo.set(SEARCH_RECENCY_FILTER, data.recency_filter)
    if data.news_filter_off is not None:
        await settings_repo.set(NEWS_FILTER_OFF, "true" if data.news_filter_off else "false")
    if data.search_type_extension_limit is not None:
        await settings_repo.set(SEARCH_TYPE_EXTENSION_LIMIT, data.search_type_extension_limit)

    scheduled = await scheduler.update_schedule(data.schedule, data.enabled)

    resolved = await settings_repo.get_resolved()
    return SettingsUpdateResponse(**resolved, scheduled=scheduled)


@router.get("/scheduler", response_model=SchedulerStatus)
async def scheduler_status(
    scheduler: SchedulerService = Depends(get_scheduler),
    runner: FetchRunner = Depends(get_fetch_runner),
) -> SchedulerStatus:
    return SchedulerStatus(
        scheduled=scheduler.is_scheduled,
        schedule=scheduler.schedule,
        next_run_time=scheduler.next_run_time,
        fetch_running=runner.is_running,
    )


@router.get("/fetch-logs", response_model=FetchLogListResponse)
async def list_fetch_logs(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> FetchLogListResponse:
    """List run history, most recent first."""
    result = await FetchLogRepository(db).find_all_paginated(page, limit)
    return FetchLogListResponse(
        data=[FetchLogResponse.model_validate(log) for log in result.data],
        pagination=PaginationMeta(
            page=result.page,
            limit=result.limit,
            total=result.total,
            has_more=result.has_more,
            total_pages=result.total_pages,
        ),
    )


@router.get("/search-logs", response_model=SearchApiLogListResponse)
async def list_search_logs(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> SearchApiLogListResponse:
    result = await SearchApiLogRepository(db).find_all_paginated(page, limit)
    return SearchApiLogListResponse(
        logs=[SearchApiLogResponse.model_validate(log) for log in result.data],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )


@router.get("/search-logs/{log_id}", response_model=SearchApiLogResponse)
async def get_search_log(log_id: str, db: AsyncSession = Depends(get_db)) -> SearchApiLogResponse:
    """Get one search call including its request and response bodies."""
    log = await SearchApiLogRepository(db).find_by_id(log_id)
    if not log:
        raise HTTPException(status_code=404, detail="Log not found")
    return SearchApiLogResponse.model_validate(log)
