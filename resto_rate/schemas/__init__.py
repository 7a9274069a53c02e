"""Pydantic schemas for API requests and responses."""

from resto_rate.schemas.auth import (
    AuthResponse,
    UserLogin,
    UserRegister,
    UserResponse,
    UserUpdate,
)
from resto_rate.schemas.base import MessageResponse, Pagination
from resto_rate.schemas.category import CategoryCreate, CategoryResponse
from resto_rate.schemas.restaurant import (
    RestaurantCreate,
    RestaurantDetail,
    RestaurantResponse,
    RestaurantUpdate,
)
from resto_rate.schemas.review import ReviewCreate, ReviewResponse, ReviewUpdate

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserUpdate",
    "UserResponse",
    "AuthResponse",
    "MessageResponse",
    "Pagination",
    "CategoryCreate",
    "CategoryResponse",
    "RestaurantCreate",
    "RestaurantUpdate",
    "RestaurantResponse",
    "RestaurantDetail",
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
]
