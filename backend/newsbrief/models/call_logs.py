"""Append-only audit logs for external API calls."""

from datetime import UTC, datetime
from uuid import uuid4

from sqlmodel import Field, SQLModel


class SearchApiLog(SQLModel, table=True):
    """One call to the article source provider."""

    __tablename__ = "search_api_logs"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC), index=True)

    category_id: str | None = Field(default=None)
    category_name: str | None = Field(default=None)
    search_query: str

    status: str = Field(max_length=10)
    duration_ms: int = Field(default=0)
    result_count: int = Field(default=0)
    tokens_prompt: int | None = Field(default=None)
    tokens_completion: int | None = Field(default=None)

    # Raw bodies kept for audit
    request_body: str | None = Field(default=None)
    response_body: str | None = Field(default=None)
    error_message: str | None = Field(default=None)


class SummaryLog(SQLModel, table=True):
    """One call to the summary completion endpoint."""

    __tablename__ = "summary_logs"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC), index=True)

    model: str
    prompt: str
    response: str | None = Field(default=None)
    tokens_input: int | None = Field(default=None)
    tokens_output: int | None = Field(default=None)
    duration_ms: int = Field(default=0)
    news_id: str | None = Field(default=None, index=True)
    status: str = Field(max_length=10)
    error_message: str | None = Field(default=None)
