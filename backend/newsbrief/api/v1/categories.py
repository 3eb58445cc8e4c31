"""Category API endpoints."""

from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from newsbrief.db import get_session as get_db
from newsbrief.exceptions import (
    CategoryLimitError,
    CategoryNotFoundError,
    DefaultCategoryError,
    DuplicateCategoryError,
)
from newsbrief.repositories import CategoryRepository
from newsbrief.schemas.category import (
    CategoryCreate,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
)

router = APIRouter()


def _raise_for(error: Exception) -> NoReturn:
    if isinstance(error, CategoryNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, DefaultCategoryError):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(error))
    if isinstance(error, DuplicateCategoryError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    if isinstance(error, CategoryLimitError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    raise error


@router.get("", response_model=CategoryListResponse)
async def list_categories(db: AsyncSession = Depends(get_db)) -> CategoryListResponse:
    """List all categories, defaults first."""
    categories = await CategoryRepository(db).find_all()
    return CategoryListResponse(
        data=[CategoryResponse.model_validate(c) for c in categories],
        total=len(categories),
    )


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    data: CategoryCreate,
    db: AsyncSession = Depends(get_db),
) -> CategoryResponse:
    try:
        category = await CategoryRepository(db).create(data.name, data.search_query)
    except (DuplicateCategoryError, CategoryLimitError) as e:
        _raise_for(e)
    return CategoryResponse.model_validate(category)


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: str, db: AsyncSession = Depends(get_db)) -> CategoryResponse:
    category = await CategoryRepository(db).find_by_id(category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return CategoryResponse.model_validate(category)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str,
    data: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
) -> CategoryResponse:
    """Rename a user category or change its search query. Defaults are read-only."""
    try:
        category = await CategoryRepository(db).update(category_id, data.name, data.search_query)
    except (CategoryNotFoundError, DefaultCategoryError, DuplicateCategoryError) as e:
        _raise_for(e)
    return CategoryResponse.model_validate(category)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(category_id: str, db: AsyncSession = Depends(get_db)) -> None:
    """Delete a user category. Its articles are kept without a category."""
    try:
        await CategoryRepository(db).delete(category_id)
    except (CategoryNotFoundError, DefaultCategoryError) as e:
        _raise_for(e)
