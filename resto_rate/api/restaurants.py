"""Restaurant API endpoints, including a restaurant's categories and reviews."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from resto_rate.api.dependencies import (
    CurrentAuth,
    OptionalAuth,
    get_restaurant_service,
    get_review_service,
)
from resto_rate.api.wire import MsgPackResponse, MsgPackRoute
from resto_rate.schemas.base import MessageResponse, Pagination
from resto_rate.schemas.category import (
    CategoryListResponse,
    CategoryResponse,
    RestaurantCategoriesUpdate,
)
from resto_rate.schemas.restaurant import (
    RestaurantCreate,
    RestaurantDetailResponse,
    RestaurantEnvelope,
    RestaurantListResponse,
    RestaurantResponse,
    RestaurantUpdate,
)
from resto_rate.schemas.review import ReviewCreate, ReviewEnvelope, ReviewListResponse
from resto_rate.services.restaurant_service import RestaurantService
from resto_rate.services.review_service import ReviewService

router = APIRouter(
    prefix="/api/restaurants",
    tags=["restaurants"],
    route_class=MsgPackRoute,
    default_response_class=MsgPackResponse,
)


@router.get("", response_model=RestaurantListResponse)
async def list_restaurants(
    auth: OptionalAuth,
    service: Annotated[RestaurantService, Depends(get_restaurant_service)],
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
    offset: Annotated[int, Query(ge=0)] = 0,
    category: Annotated[str | None, Query(description="Category slug")] = None,
    created_by: Annotated[str | None, Query(alias="createdBy")] = None,
):
    """List active restaurants, newest first."""
    restaurants, total = service.list_restaurants(
        limit=limit, offset=offset, category=category, created_by=created_by
    )
    return RestaurantListResponse(
        restaurants=[RestaurantResponse.model_validate(r) for r in restaurants],
        pagination=Pagination(limit=limit, offset=offset, total=total),
        authenticated=auth is not None,
    )


@router.get("/{restaurant_id}", response_model=RestaurantDetailResponse)
async def get_restaurant(
    restaurant_id: str,
    auth: OptionalAuth,
    service: Annotated[RestaurantService, Depends(get_restaurant_service)],
):
    """Get a restaurant with its categories, review stats and latest reviews."""
    detail, reviews = service.get_detail(restaurant_id)
    viewer = auth.user if auth else None
    return RestaurantDetailResponse(
        restaurant=detail,
        reviews=service.reviews.to_responses(reviews, viewer),
        authenticated=auth is not None,
    )


@router.post("", response_model=RestaurantEnvelope)
async def create_restaurant(
    restaurant_data: RestaurantCreate,
    auth: CurrentAuth,
    service: Annotated[RestaurantService, Depends(get_restaurant_service)],
):
    """Create a restaurant, optionally linked to categories."""
    restaurant = service.create_restaurant(restaurant_data, auth.user)
    return RestaurantEnvelope(restaurant=RestaurantResponse.model_validate(restaurant))


@router.put("/{restaurant_id}", response_model=RestaurantEnvelope)
async def update_restaurant(
    restaurant_id: str,
    restaurant_data: RestaurantUpdate,
    auth: CurrentAuth,
    service: Annotated[RestaurantService, Depends(get_restaurant_service)],
):
    """Update a restaurant you created."""
    restaurant = service.update_restaurant(restaurant_id, restaurant_data, auth.user)
    return RestaurantEnvelope(restaurant=RestaurantResponse.model_validate(restaurant))


@router.delete("/{restaurant_id}", response_model=MessageResponse)
async def delete_restaurant(
    restaurant_id: str,
    auth: CurrentAuth,
    service: Annotated[RestaurantService, Depends(get_restaurant_service)],
):
    """Soft delete a restaurant you created."""
    service.delete_restaurant(restaurant_id, auth.user)
    return MessageResponse(message="Restaurant deleted successfully")


@router.get("/{restaurant_id}/categories", response_model=CategoryListResponse)
async def get_restaurant_categories(
    restaurant_id: str,
    service: Annotated[RestaurantService, Depends(get_restaurant_service)],
):
    """Get the categories linked to a restaurant."""
    categories = service.get_categories(restaurant_id)
    return CategoryListResponse(
        categories=[CategoryResponse.model_validate(c) for c in categories]
    )


@router.put("/{restaurant_id}/categories", response_model=CategoryListResponse)
async def set_restaurant_categories(
    restaurant_id: str,
    update: RestaurantCategoriesUpdate,
    auth: CurrentAuth,
    service: Annotated[RestaurantService, Depends(get_restaurant_service)],
):
    """Replace the categories linked to a restaurant you created."""
    categories = service.set_categories(restaurant_id, update.category_ids, auth.user)
    return CategoryListResponse(
        categories=[CategoryResponse.model_validate(c) for c in categories]
    )


@router.get("/{restaurant_id}/reviews", response_model=ReviewListResponse)
async def list_restaurant_reviews(
    restaurant_id: str,
    auth: OptionalAuth,
    service: Annotated[ReviewService, Depends(get_review_service)],
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
    offset: Annotated[int, Query(ge=0)] = 0,
):
    """List a restaurant's reviews, newest first."""
    reviews, total = service.list_for_restaurant(restaurant_id, limit=limit, offset=offset)
    return ReviewListResponse(
        reviews=service.to_responses(reviews, auth.user if auth else None),
        pagination=Pagination(limit=limit, offset=offset, total=total),
    )


@router.post("/{restaurant_id}/reviews", response_model=ReviewEnvelope)
async def create_review(
    restaurant_id: str,
    review_data: ReviewCreate,
    auth: CurrentAuth,
    service: Annotated[ReviewService, Depends(get_review_service)],
):
    """Review a restaurant. One review per user per restaurant."""
    review = service.create_review(restaurant_id, review_data, auth.user)
    return ReviewEnvelope(review=service.to_response(review, auth.user))
