"""Category schemas for API request/response validation."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CategoryBase(BaseModel):
    """Base category schema with shared fields."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=50)
    search_query: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Query sent to the article source for this category",
        examples=["semiconductor industry news", "quantum computing research"],
    )


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(CategoryBase):
    pass


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    search_query: str
    is_default: bool
    created_at: datetime


class CategoryListResponse(BaseModel):
    success: bool = True
    data: list[CategoryResponse]
    total: int
