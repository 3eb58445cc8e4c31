"""News schemas for API request/response validation."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NewsResponse(BaseModel):
    """Schema for article responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    url: str
    source: str
    published_at: datetime
    summary: str | None = None
    image_url: str | None = None
    category_id: str | None = None
    created_at: datetime


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    has_more: bool
    total_pages: int


class NewsListResponse(BaseModel):
    """Schema for paginated article list response."""

    success: bool = True
    data: list[NewsResponse]
    pagination: PaginationMeta


class SummarizeResponse(BaseModel):
    """Result of a summary backfill over stored articles."""

    success: bool = True
    processed: int
    succeeded: int
    failed: int
    errors: list[str] = Field(default_factory=list)
