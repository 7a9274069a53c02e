"""Review API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from resto_rate.api.dependencies import CurrentAuth, OptionalAuth, get_review_service
from resto_rate.api.wire import MsgPackResponse, MsgPackRoute
from resto_rate.schemas.base import MessageResponse
from resto_rate.schemas.review import (
    HelpfulVoteCreate,
    ReviewEnvelope,
    ReviewPhotoCreate,
    ReviewPhotoEnvelope,
    ReviewPhotoResponse,
    ReviewUpdate,
)
from resto_rate.services.review_service import ReviewService

router = APIRouter(
    prefix="/api/reviews",
    tags=["reviews"],
    route_class=MsgPackRoute,
    default_response_class=MsgPackResponse,
)


@router.get("/{review_id}", response_model=ReviewEnvelope)
async def get_review(
    review_id: str,
    auth: OptionalAuth,
    service: Annotated[ReviewService, Depends(get_review_service)],
):
    """Get a review with its author, photos and the caller's helpful vote."""
    review = service.get_review(review_id)
    return ReviewEnvelope(review=service.to_response(review, auth.user if auth else None))


@router.put("/{review_id}", response_model=ReviewEnvelope)
async def update_review(
    review_id: str,
    review_data: ReviewUpdate,
    auth: CurrentAuth,
    service: Annotated[ReviewService, Depends(get_review_service)],
):
    """Update a review you wrote."""
    review = service.update_review(review_id, review_data, auth.user)
    return ReviewEnvelope(review=service.to_response(review, auth.user))


@router.delete("/{review_id}", response_model=MessageResponse)
async def delete_review(
    review_id: str,
    auth: CurrentAuth,
    service: Annotated[ReviewService, Depends(get_review_service)],
):
    """Delete a review you wrote."""
    service.delete_review(review_id, auth.user)
    return MessageResponse(message="Review deleted successfully")


@router.post("/{review_id}/photos", response_model=ReviewPhotoEnvelope)
async def add_review_photo(
    review_id: str,
    photo_data: ReviewPhotoCreate,
    auth: CurrentAuth,
    service: Annotated[ReviewService, Depends(get_review_service)],
):
    """Attach a photo to a review you wrote."""
    photo = service.add_photo(review_id, photo_data, auth.user)
    return ReviewPhotoEnvelope(photo=ReviewPhotoResponse.model_validate(photo))


@router.post("/{review_id}/helpful", response_model=ReviewEnvelope)
async def vote_helpful(
    review_id: str,
    vote: HelpfulVoteCreate,
    auth: CurrentAuth,
    service: Annotated[ReviewService, Depends(get_review_service)],
):
    """Mark a review as helpful or not helpful."""
    review = service.vote_helpful(review_id, vote.is_helpful, auth.user)
    return ReviewEnvelope(review=service.to_response(review, auth.user))
