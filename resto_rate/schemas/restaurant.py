"""Restaurant schemas."""

from datetime import datetime

from pydantic import Field

from resto_rate.schemas.base import CamelModel, Pagination
from resto_rate.schemas.category import CategoryResponse
from resto_rate.schemas.review import ReviewResponse


class RestaurantCreate(CamelModel):
    """Create a new restaurant."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    cuisine_type: str | None = Field(None, max_length=100)
    address: str | None = Field(None, max_length=500)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    phone: str | None = Field(None, max_length=50)
    website: str | None = Field(None, max_length=500)
    price_range: int | None = Field(None, ge=1, le=4)
    category_ids: list[str] = Field(default_factory=list, max_length=20)


class RestaurantUpdate(CamelModel):
    """Update a restaurant. Only fields that are sent are changed."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    cuisine_type: str | None = Field(None, max_length=100)
    address: str | None = Field(None, max_length=500)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    phone: str | None = Field(None, max_length=50)
    website: str | None = Field(None, max_length=500)
    price_range: int | None = Field(None, ge=1, le=4)
    category_ids: list[str] | None = Field(None, max_length=20)


class ReviewStats(CamelModel):
    average_rating: float
    total_reviews: int


class RestaurantResponse(CamelModel):
    """Restaurant response."""

    id: str
    name: str
    description: str | None = None
    cuisine_type: str | None = None
    address: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    phone: str | None = None
    website: str | None = None
    price_range: int | None = None
    average_rating: float = 0.0
    total_reviews: int = 0
    is_active: bool = True
    created_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RestaurantDetail(RestaurantResponse):
    """Restaurant with its categories and review stats."""

    categories: list[CategoryResponse] = []
    review_stats: ReviewStats


class RestaurantEnvelope(CamelModel):
    restaurant: RestaurantResponse


class RestaurantListResponse(CamelModel):
    restaurants: list[RestaurantResponse]
    pagination: Pagination
    authenticated: bool


class RestaurantDetailResponse(CamelModel):
    restaurant: RestaurantDetail
    reviews: list[ReviewResponse]
    authenticated: bool
