"""Category store - built-in and user-defined search categories."""

from sqlalchemy import delete, func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from newsbrief.exceptions import (
    CategoryLimitError,
    CategoryNotFoundError,
    DefaultCategoryError,
    DuplicateCategoryError,
)
from newsbrief.models import Category, News
from newsbrief.models.category import MAX_CATEGORIES


class CategoryRepository:
    """Category CRUD. Built-in categories are protected from edits and deletion."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_all(self) -> list[Category]:
        """Built-in categories first, then user categories in creation order."""
        result = await self.session.execute(
            select(Category).order_by(Category.is_default.desc(), Category.created_at.asc())
        )
        return list(result.scalars().all())

    async def find_by_id(self, category_id: str) -> Category | None:
        return await self.session.get(Category, category_id)

    async def find_by_name(self, name: str) -> Category | None:
        result = await self.session.execute(select(Category).where(Category.name == name))
        return result.scalar_one_or_none()

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Category))
        return result.scalar_one()

    async def create(self, name: str, search_query: str) -> Category:
        """Create a user category."""
        name = name.strip()
        if await self.find_by_name(name):
            raise DuplicateCategoryError(f"A category named '{name}' already exists.")

        if await self.count() >= MAX_CATEGORIES:
            raise CategoryLimitError(f"At most {MAX_CATEGORIES} categories can be created.")

        category = Category(name=name, search_query=search_query.strip(), is_default=False)
        self.session.add(category)
        await self.session.commit()
        return category

    async def update(self, category_id: str, name: str, search_query: str) -> Category:
        """Rename a user category and replace its search query."""
        existing = await self._get_mutable(category_id, "edited")

        name = name.strip()
        duplicate = await self.session.execute(
            select(Category.id).where(Category.name == name, Category.id != category_id)
        )
        if duplicate.first():
            raise DuplicateCategoryError(f"A category named '{name}' already exists.")

        existing.name = name
        existing.search_query = search_query.strip()
        await self.session.commit()
        return existing

    async def delete(self, category_id: str) -> bool:
        """
        Delete a user category.
        Its articles are kept with their category reference cleared.
        """
        await self._get_mutable(category_id, "deleted")

        await self.session.execute(
            update(News).where(News.category_id == category_id).values(category_id=None)
        )
        result = await self.session.execute(delete(Category).where(Category.id == category_id))
        await self.session.commit()
        return result.rowcount > 0

    async def _get_mutable(self, category_id: str, action: str) -> Category:
        category = await self.find_by_id(category_id)
        if not category:
            raise CategoryNotFoundError(f"Category {category_id} not found")
        if category.is_default:
            raise DefaultCategoryError(f"Default categories cannot be {action}.")
        return category
