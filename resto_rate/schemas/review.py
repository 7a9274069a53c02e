"""Review schemas."""

from datetime import datetime

from pydantic import Field

from resto_rate.schemas.base import CamelModel, Pagination


class ReviewPhotoCreate(CamelModel):
    """Attach a photo to a review."""

    url: str = Field(..., min_length=1, max_length=2048)
    caption: str | None = Field(None, max_length=500)


class ReviewCreate(CamelModel):
    """Create a review for a restaurant."""

    rating: int = Field(..., ge=1, le=5)
    title: str | None = Field(None, max_length=255)
    content: str | None = Field(None, max_length=10000)
    visit_date: datetime | None = None
    photos: list[ReviewPhotoCreate] = Field(default_factory=list, max_length=10)


class ReviewUpdate(CamelModel):
    """Update a review."""

    rating: int | None = Field(None, ge=1, le=5)
    title: str | None = Field(None, max_length=255)
    content: str | None = Field(None, max_length=10000)
    visit_date: datetime | None = None


class HelpfulVoteCreate(CamelModel):
    is_helpful: bool


class ReviewAuthor(CamelModel):
    id: str
    username: str | None = None
    name: str | None = None


class ReviewPhotoResponse(CamelModel):
    id: str
    review_id: str
    url: str
    caption: str | None = None
    order_index: int
    created_at: datetime | None = None


class ReviewResponse(CamelModel):
    """Review with its author and photos."""

    id: str
    restaurant_id: str
    user_id: str
    rating: int
    title: str | None = None
    content: str | None = None
    visit_date: datetime | None = None
    is_verified: bool = False
    helpful_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    user: ReviewAuthor
    photos: list[ReviewPhotoResponse] = []
    user_helpful_vote: bool | None = None


class ReviewEnvelope(CamelModel):
    review: ReviewResponse


class ReviewPhotoEnvelope(CamelModel):
    photo: ReviewPhotoResponse


class ReviewListResponse(CamelModel):
    reviews: list[ReviewResponse]
    pagination: Pagination
