"""Category schemas."""

from datetime import datetime

from pydantic import Field

from resto_rate.schemas.base import CamelModel

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class CategoryCreate(CamelModel):
    """Create a new category."""

    name: str = Field(..., min_length=1, max_length=100)
    slug: str | None = Field(None, max_length=100, pattern=SLUG_PATTERN)
    description: str | None = Field(None, max_length=2000)


class CategoryResponse(CamelModel):
    """Category response."""

    id: str
    name: str
    slug: str
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CategoryEnvelope(CamelModel):
    category: CategoryResponse


class CategoryListResponse(CamelModel):
    categories: list[CategoryResponse]


class RestaurantCategoriesUpdate(CamelModel):
    """Replace the categories linked to a restaurant."""

    category_ids: list[str] = Field(default_factory=list, max_length=20)
