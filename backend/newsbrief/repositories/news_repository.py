"""News store - deduplicated article persistence keyed by URL."""

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from newsbrief.models import News
from newsbrief.repositories.pagination import PaginatedResult, paginate


class NewsRepository:
    """Article CRUD on top of one async session. Every write commits."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, news: News) -> News | None:
        """
        Persist a new article.

        Returns None when the URL is already stored, leaving the store unchanged.
        """
        if await self.find_by_url(news.url):
            return None

        self.session.add(news)
        try:
            await self.session.commit()
        except IntegrityError:
            # Unique URL constraint fired for a concurrent insert
            await self.session.rollback()
            return None
        return news

    async def reset(self) -> None:
        """Roll back a failed transaction so the session can be reused."""
        await self.session.rollback()

    async def find_all(self) -> list[News]:
        result = await self.session.execute(select(News).order_by(News.published_at.desc()))
        return list(result.scalars().all())

    async def find_all_paginated(
        self,
        page: int,
        limit: int,
        category_id: str | None = None,
    ) -> PaginatedResult[News]:
        """Newest-first page of articles, optionally limited to one category."""
        query = select(News)
        if category_id:
            query = query.where(News.category_id == category_id)
        query = query.order_by(News.published_at.desc(), News.created_at.desc())
        return await paginate(self.session, query, page, limit)

    async def find_by_id(self, news_id: str) -> News | None:
        return await self.session.get(News, news_id)

    async def find_by_url(self, url: str) -> News | None:
        result = await self.session.execute(select(News).where(News.url == url))
        return result.scalar_one_or_none()

    async def update_summary(self, news_id: str, summary: str) -> bool:
        result = await self.session.execute(
            update(News).where(News.id == news_id).values(summary=summary)
        )
        await self.session.commit()
        return result.rowcount > 0

    async def find_without_summary(self, limit: int = 10) -> list[News]:
        result = await self.session.execute(
            select(News)
            .where(News.summary.is_(None))
            .order_by(News.published_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def delete(self, news_id: str) -> bool:
        result = await self.session.execute(delete(News).where(News.id == news_id))
        await self.session.commit()
        return result.rowcount > 0
