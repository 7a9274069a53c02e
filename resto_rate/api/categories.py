"""Category API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from resto_rate.api.dependencies import CurrentAuth, get_category_service
from resto_rate.api.wire import MsgPackResponse, MsgPackRoute
from resto_rate.schemas.category import (
    CategoryCreate,
    CategoryEnvelope,
    CategoryListResponse,
    CategoryResponse,
)
from resto_rate.services.category_service import CategoryService

router = APIRouter(
    prefix="/api/categories",
    tags=["categories"],
    route_class=MsgPackRoute,
    default_response_class=MsgPackResponse,
)


@router.get("", response_model=CategoryListResponse)
async def list_categories(
    service: Annotated[CategoryService, Depends(get_category_service)],
):
    """Get all categories ordered by name."""
    return CategoryListResponse(
        categories=[CategoryResponse.model_validate(c) for c in service.list_categories()]
    )


@router.post("", response_model=CategoryEnvelope)
async def create_category(
    category_data: CategoryCreate,
    auth: CurrentAuth,
    service: Annotated[CategoryService, Depends(get_category_service)],
):
    """Create a category. Administrators only."""
    category = service.create_category(category_data, auth.user)
    return CategoryEnvelope(category=CategoryResponse.model_validate(category))
