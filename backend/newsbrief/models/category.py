"""Category model - named search queries the fetch pipeline fans out over."""

from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from sqlmodel import Field, SQLModel

MAX_CATEGORIES = 7

DEFAULT_TECH_ID = "default-tech"
DEFAULT_SCIENCE_ID = "default-science"

# Seeded once when the database is first initialized
DEFAULT_CATEGORIES: list[dict[str, Any]] = [
    {
        "id": DEFAULT_TECH_ID,
        "name": "Technology",
        "search_query": "latest IT technology news artificial intelligence AI software startups",
    },
    {
        "id": DEFAULT_SCIENCE_ID,
        "name": "Science",
        "search_query": "latest science news research discoveries space biotech",
    },
]


class Category(SQLModel, table=True):
    """Search category. Built-in categories are immutable and undeletable."""

    __tablename__ = "categories"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    name: str = Field(max_length=50, unique=True, index=True)
    search_query: str = Field(max_length=200)
    is_default: bool = Field(default=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
