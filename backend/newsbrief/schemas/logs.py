"""Call log schemas for the admin dashboard."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class SearchApiLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime
    category_id: str | None = None
    category_name: str | None = None
    search_query: str
    status: str
    duration_ms: int
    result_count: int
    tokens_prompt: int | None = None
    tokens_completion: int | None = None
    request_body: str | None = None
    response_body: str | None = None
    error_message: str | None = None


class SearchApiLogListResponse(BaseModel):
    logs: list[SearchApiLogResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class SummaryLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime
    model: str
    prompt: str
    response: str | None = None
    tokens_input: int | None = None
    tokens_output: int | None = None
    duration_ms: int
    news_id: str | None = None
    status: str
    error_message: str | None = None


class SummaryStats(BaseModel):
    total_calls: int
    success_calls: int
    error_calls: int
    total_tokens_input: int
    total_tokens_output: int
    avg_duration_ms: float


class SummaryLogListResponse(BaseModel):
    success: bool = True
    stats: SummaryStats
    logs: list[SummaryLogResponse]


class CleanupResponse(BaseModel):
    success: bool = True
    deleted: int
    message: str
