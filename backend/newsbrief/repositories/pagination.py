"""Offset pagination helper shared by the list queries."""

import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

T = TypeVar("T")


@dataclass
class PaginatedResult(Generic[T]):
    data: list[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 20

    @property
    def has_more(self) -> bool:
        return (self.page - 1) * self.limit + len(self.data) < self.total

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


async def paginate(session: AsyncSession, query: Select, page: int, limit: int) -> PaginatedResult:
    """Run a count plus one page of `query` (pages start at 1)."""
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await session.execute(count_query)).scalar_one()

    offset = (page - 1) * limit
    result = await session.execute(query.offset(offset).limit(limit))
    return PaginatedResult(
        data=list(result.scalars().all()),
        total=total,
        page=page,
        limit=limit,
    )
