"""Authentication and user schemas."""

from datetime import datetime

from pydantic import Field

from resto_rate.schemas.base import CamelModel, Pagination

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 31
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 255


class UserRegister(CamelModel):
    """User registration request."""

    username: str = Field(..., min_length=USERNAME_MIN_LENGTH, max_length=USERNAME_MAX_LENGTH)
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    age: int | None = Field(None, ge=0, le=150)


class UserLogin(CamelModel):
    """User login request."""

    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LENGTH)


class UserUpdate(CamelModel):
    """Update the caller's own profile."""

    username: str | None = Field(
        None, min_length=USERNAME_MIN_LENGTH, max_length=USERNAME_MAX_LENGTH
    )
    name: str | None = Field(None, max_length=255)
    age: int | None = Field(None, ge=0, le=150)


class UserResponse(CamelModel):
    """Public user fields. Never includes the password hash."""

    id: str
    google_id: str | None = None
    email: str | None = None
    name: str | None = None
    is_admin: bool = False
    username: str | None = None
    age: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AuthResponse(CamelModel):
    """Authenticated user plus the session token the client must send back."""

    user: UserResponse
    session_id: str
    expires_at: datetime | None = None


class GoogleAuthUrlResponse(CamelModel):
    url: str


class UserEnvelope(CamelModel):
    user: UserResponse


class UserListResponse(CamelModel):
    users: list[UserResponse]
    pagination: Pagination
