"""Restaurant service for listing, detail views and owner-only changes."""

import logging

from sqlalchemy.orm import Session

from resto_rate.exceptions import ForbiddenError, InvalidInputError, NotFoundError
from resto_rate.models.category import Category
from resto_rate.models.restaurant import Restaurant, RestaurantCategory
from resto_rate.models.review import Review
from resto_rate.models.user import User
from resto_rate.schemas.category import CategoryResponse
from resto_rate.schemas.restaurant import (
    RestaurantCreate,
    RestaurantDetail,
    RestaurantResponse,
    RestaurantUpdate,
    ReviewStats,
)
from resto_rate.services.category_service import CategoryService
from resto_rate.services.review_service import ReviewService

logger = logging.getLogger(__name__)

DETAIL_REVIEW_LIMIT = 10


class RestaurantService:
    """Service for restaurant-related operations."""

    def __init__(self, db: Session):
        self.db = db
        self.categories = CategoryService(db)
        self.reviews = ReviewService(db)

    def get_restaurant(self, restaurant_id: str) -> Restaurant:
        """Get an active restaurant. Soft-deleted restaurants are not found."""
        restaurant = (
            self.db.query(Restaurant)
            .filter(Restaurant.id == restaurant_id, Restaurant.is_active == True)  # noqa: E712
            .first()
        )
        if not restaurant:
            raise NotFoundError("Restaurant not found")
        return restaurant

    def _get_owned_restaurant(self, restaurant_id: str, user: User, action: str) -> Restaurant:
        restaurant = self.get_restaurant(restaurant_id)
        if restaurant.created_by != user.id:
            raise ForbiddenError(f"You can only {action} restaurants you created")
        return restaurant

    def list_restaurants(
        self,
        limit: int = 20,
        offset: int = 0,
        category: str | None = None,
        created_by: str | None = None,
    ) -> tuple[list[Restaurant], int]:
        """List active restaurants, newest first.

        Args:
            limit: Page size
            offset: Rows to skip
            category: Only restaurants linked to the category with this slug
            created_by: Only restaurants created by this user id

        Returns:
            The page of restaurants and the total matching count
        """
        query = self.db.query(Restaurant).filter(Restaurant.is_active == True)  # noqa: E712

        if category:
            query = (
                query.join(RestaurantCategory, RestaurantCategory.restaurant_id == Restaurant.id)
                .join(Category, Category.id == RestaurantCategory.category_id)
                .filter(Category.slug == category)
            )
        if created_by:
            query = query.filter(Restaurant.created_by == created_by)

        total = query.count()
        restaurants = (
            query.order_by(Restaurant.created_at.desc(), Restaurant.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )
        return restaurants, total

    def get_detail(self, restaurant_id: str) -> tuple[RestaurantDetail, list[Review]]:
        """Restaurant with categories, stats and its latest reviews."""
        restaurant = self.get_restaurant(restaurant_id)
        categories = self.categories.categories_for_restaurant(restaurant.id)
        reviews, _ = self.reviews.list_for_restaurant(restaurant.id, limit=DETAIL_REVIEW_LIMIT)

        detail = RestaurantDetail(
            **RestaurantResponse.model_validate(restaurant).model_dump(),
            categories=[CategoryResponse.model_validate(c) for c in categories],
            review_stats=ReviewStats(
                average_rating=restaurant.average_rating,
                total_reviews=restaurant.total_reviews,
            ),
        )
        return detail, reviews

    def create_restaurant(self, data: RestaurantCreate, user: User) -> Restaurant:
        """Create a restaurant and its category links in one transaction."""
        fields = data.model_dump(exclude={"category_ids"})
        restaurant = Restaurant(**fields, created_by=user.id)

        try:
            category_ids = self.categories.require_categories(data.category_ids)
            self.db.add(restaurant)
            self.db.flush()
            self.categories.replace_links(restaurant.id, category_ids)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(restaurant)
        logger.info(f"User {user.id} created restaurant {restaurant.id} ({restaurant.name})")
        return restaurant

    def update_restaurant(
        self, restaurant_id: str, data: RestaurantUpdate, user: User
    ) -> Restaurant:
        """Update the fields that were sent. Only the creator may update."""
        restaurant = self._get_owned_restaurant(restaurant_id, user, "update")

        changes = data.model_dump(exclude_unset=True)
        category_ids = changes.pop("category_ids", None)
        if not changes and category_ids is None:
            raise InvalidInputError("No update data provided")
        if "name" in changes and not changes["name"]:
            raise InvalidInputError("Restaurant name is required")

        try:
            for field, value in changes.items():
                setattr(restaurant, field, value)
            if category_ids is not None:
                self.categories.replace_links(
                    restaurant.id, self.categories.require_categories(category_ids)
                )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(restaurant)
        return restaurant

    def delete_restaurant(self, restaurant_id: str, user: User) -> None:
        """Soft delete. Only the creator may delete."""
        restaurant = self._get_owned_restaurant(restaurant_id, user, "delete")
        restaurant.soft_delete()
        self.db.commit()
        logger.info(f"Soft-deleted restaurant {restaurant_id}")

    def get_categories(self, restaurant_id: str) -> list[Category]:
        restaurant = self.get_restaurant(restaurant_id)
        return self.categories.categories_for_restaurant(restaurant.id)

    def set_categories(self, restaurant_id: str, category_ids: list[str], user: User) -> list[Category]:
        """Replace a restaurant's categories. Only the creator may change them."""
        restaurant = self._get_owned_restaurant(restaurant_id, user, "update")

        try:
            self.categories.replace_links(
                restaurant.id, self.categories.require_categories(category_ids)
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return self.categories.categories_for_restaurant(restaurant.id)
