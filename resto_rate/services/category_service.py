"""Category operations and restaurant category links."""

import logging
import re

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from resto_rate.exceptions import ConflictError, ForbiddenError, InvalidInputError
from resto_rate.models.category import Category
from resto_rate.models.restaurant import RestaurantCategory
from resto_rate.models.user import User
from resto_rate.schemas.category import CategoryCreate

logger = logging.getLogger(__name__)


def slugify(name: str) -> str:
    """Turn a category name into a URL slug ("Thai & Lao" -> "thai-lao")."""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


class CategoryService:
    """Service for category-related operations."""

    def __init__(self, db: Session):
        self.db = db

    def list_categories(self) -> list[Category]:
        return self.db.query(Category).order_by(Category.name).all()

    def create_category(self, data: CategoryCreate, user: User) -> Category:
        """Create a category. Administrators only."""
        if not user.is_admin:
            raise ForbiddenError("Administrator access required")

        slug = data.slug or slugify(data.name)
        if not slug:
            raise InvalidInputError("Category slug is required")

        category = Category(name=data.name, slug=slug, description=data.description)
        self.db.add(category)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("Category with this name or slug already exists") from e
        self.db.refresh(category)
        logger.info(f"Created category '{category.slug}'")
        return category

    def categories_for_restaurant(self, restaurant_id: str) -> list[Category]:
        return (
            self.db.query(Category)
            .join(RestaurantCategory, RestaurantCategory.category_id == Category.id)
            .filter(RestaurantCategory.restaurant_id == restaurant_id)
            .order_by(Category.name)
            .all()
        )

    def require_categories(self, category_ids: list[str]) -> list[str]:
        """Return the de-duplicated ids, raising if any do not exist."""
        unique_ids = list(dict.fromkeys(category_ids))
        if not unique_ids:
            return []

        found = {
            category_id
            for (category_id,) in self.db.query(Category.id)
            .filter(Category.id.in_(unique_ids))
            .all()
        }
        missing = [category_id for category_id in unique_ids if category_id not in found]
        if missing:
            raise InvalidInputError(f"Invalid category id(s): {', '.join(missing)}")
        return unique_ids

    def replace_links(self, restaurant_id: str, category_ids: list[str]) -> None:
        """Stage replacement of a restaurant's category links. The caller commits."""
        self.db.query(RestaurantCategory).filter(
            RestaurantCategory.restaurant_id == restaurant_id
        ).delete()
        for category_id in category_ids:
            self.db.add(RestaurantCategory(restaurant_id=restaurant_id, category_id=category_id))
