"""Run log model - one row per fetch pipeline execution."""

from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class FetchLog(SQLModel, table=True):
    """Aggregate outcome of one fetch run, with the per-category breakdown as JSON."""

    __tablename__ = "fetch_logs"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC), index=True)

    status: str = Field(max_length=10)  # success, error
    duration_ms: int = Field(default=0)
    total_fetched: int = Field(default=0)
    total_saved: int = Field(default=0)
    total_duplicates: int = Field(default=0)
    total_summarized: int = Field(default=0)

    category_results: list[dict[str, Any]] = Field(
        default_factory=list, sa_column=Column(JSON, default=[])
    )
    error_message: str | None = Field(default=None)
