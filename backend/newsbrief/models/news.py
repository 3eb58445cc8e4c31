"""News article model - one row per unique article URL."""

from datetime import UTC, datetime
from urllib.parse import urlparse
from uuid import uuid4

from sqlmodel import Field, SQLModel


class News(SQLModel, table=True):
    """
    Stored news article.
    The URL is the dedup key; the summary is the only field changed after insert.
    """

    __tablename__ = "news"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    title: str
    url: str = Field(unique=True, index=True)
    source: str
    published_at: datetime = Field(default_factory=lambda: datetime.now(UTC), index=True)
    summary: str | None = Field(default=None)
    image_url: str | None = Field(default=None)

    # Cleared when the owning category is deleted
    category_id: str | None = Field(default=None, foreign_key="categories.id", index=True)

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


def _is_absolute_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


def validate_news(data: dict) -> bool:
    """Check required fields and URL syntax before an article is persisted."""
    for field in ("title", "url", "source"):
        value = data.get(field)
        if not value or not str(value).strip():
            return False

    return _is_absolute_url(data["url"])
