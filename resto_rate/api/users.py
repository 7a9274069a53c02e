"""User API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from resto_rate.api.dependencies import (
    CurrentAuth,
    OptionalAuth,
    get_session_manager,
    get_user_service,
)
from resto_rate.api.wire import MsgPackResponse, MsgPackRoute
from resto_rate.database import get_db
from resto_rate.schemas.auth import (
    UserEnvelope,
    UserListResponse,
    UserRegister,
    UserResponse,
    UserUpdate,
)
from resto_rate.schemas.base import MessageResponse, Pagination
from resto_rate.services.auth import create_user
from resto_rate.services.sessions import SessionManager
from resto_rate.services.user_service import UserService

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
    route_class=MsgPackRoute,
    default_response_class=MsgPackResponse,
)


@router.get("", response_model=UserListResponse)
async def list_users(
    auth: OptionalAuth,
    service: Annotated[UserService, Depends(get_user_service)],
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
    offset: Annotated[int, Query(ge=0)] = 0,
):
    """List users."""
    users, total = service.list_users(limit=limit, offset=offset)
    return UserListResponse(
        users=[UserResponse.model_validate(u) for u in users],
        pagination=Pagination(limit=limit, offset=offset, total=total),
    )


@router.get("/me/profile", response_model=UserEnvelope)
async def get_my_profile(auth: CurrentAuth):
    """Get the caller's own profile."""
    return UserEnvelope(user=UserResponse.model_validate(auth.user))


@router.get("/{user_id}", response_model=UserEnvelope)
async def get_user(
    user_id: str,
    auth: OptionalAuth,
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Get a user by id."""
    return UserEnvelope(user=UserResponse.model_validate(service.get_user(user_id)))


@router.post("", response_model=UserEnvelope)
async def create_user_account(
    user_data: UserRegister,
    db: Annotated[Session, Depends(get_db)],
):
    """Create a password account without signing it in."""
    user = create_user(db, user_data.username, user_data.password, user_data.age)
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.put("/{user_id}", response_model=UserEnvelope)
async def update_user(
    user_id: str,
    user_data: UserUpdate,
    auth: CurrentAuth,
    service: Annotated[UserService, Depends(get_user_service)],
):
    """Update the caller's own profile."""
    user = service.update_user(user_id, user_data, requester_id=auth.user.id)
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    auth: CurrentAuth,
    service: Annotated[UserService, Depends(get_user_service)],
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
):
    """Delete the caller's own account."""
    service.delete_user(user_id, requester_id=auth.user.id, sessions=sessions)
    return MessageResponse(message="User deleted successfully")
