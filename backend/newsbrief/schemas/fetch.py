"""Fetch run and run log schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from newsbrief.schemas.news import PaginationMeta

# Cap on error strings returned by the trigger endpoint
MAX_RESPONSE_ERRORS = 20


class CategoryResult(BaseModel):
    category_id: str
    category_name: str
    fetched: int = 0
    saved: int = 0
    duplicates: int = 0
    summarized: int = 0
    errors: list[str] = Field(default_factory=list)


class FetchTotals(BaseModel):
    fetched: int
    saved: int
    duplicates: int
    summarized: int


class FetchRunResponse(BaseModel):
    """Outcome of a manually triggered run, returned even on partial failure."""

    success: bool
    log_id: str
    status: str
    duration_ms: int
    total: FetchTotals
    categories: list[CategoryResult]
    errors: list[str] = Field(default_factory=list)
    error_message: str | None = None

    @classmethod
    def from_log(cls, log: Any) -> "FetchRunResponse":
        categories = [CategoryResult(**c) for c in log.category_results or []]
        errors = [f"[{c.category_name}] {e}" for c in categories for e in c.errors]
        return cls(
            success=log.status == "success",
            log_id=log.id,
            status=log.status,
            duration_ms=log.duration_ms,
            total=FetchTotals(
                fetched=log.total_fetched,
                saved=log.total_saved,
                duplicates=log.total_duplicates,
                summarized=log.total_summarized,
            ),
            categories=categories,
            errors=errors[:MAX_RESPONSE_ERRORS],
            error_message=log.error_message,
        )


class FetchLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime
    status: str
    duration_ms: int
    total_fetched: int
    total_saved: int
    total_duplicates: int
    total_summarized: int
    category_results: list[CategoryResult]
    error_message: str | None = None


class FetchLogListResponse(BaseModel):
    success: bool = True
    data: list[FetchLogResponse]
    pagination: PaginationMeta
