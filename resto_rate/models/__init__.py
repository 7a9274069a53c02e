"""SQLAlchemy models."""

from resto_rate.models.category import Category
from resto_rate.models.restaurant import Restaurant, RestaurantCategory
from resto_rate.models.review import Review, ReviewHelpfulVote, ReviewPhoto
from resto_rate.models.session import UserSession
from resto_rate.models.user import User

__all__ = [
    "User",
    "UserSession",
    "Category",
    "Restaurant",
    "RestaurantCategory",
    "Review",
    "ReviewPhoto",
    "ReviewHelpfulVote",
]
