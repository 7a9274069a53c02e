"""Restaurant and RestaurantCategory models."""

from sqlalchemy import Column, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from resto_rate.database import Base
from resto_rate.models.mixins import (
    CreatedAtMixin,
    SoftDeleteMixin,
    TimestampMixin,
    UlidPrimaryKeyMixin,
)


class Restaurant(Base, UlidPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin):
    """Restaurant listing created by a user."""

    __tablename__ = "restaurants"

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    cuisine_type = Column(String(100), nullable=True)
    address = Column(String(500), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    phone = Column(String(50), nullable=True)
    website = Column(String(500), nullable=True)
    price_range = Column(Integer, nullable=True)  # 1-4 ($ to $$$$)

    # Denormalized review stats, recomputed whenever a review changes
    average_rating = Column(Float, default=0.0, nullable=False)
    total_reviews = Column(Integer, default=0, nullable=False)

    created_by = Column(
        String(26), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )

    # Relationships
    creator = relationship("User")
    category_links = relationship(
        "RestaurantCategory",
        back_populates="restaurant",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    reviews = relationship(
        "Review", back_populates="restaurant", cascade="all, delete-orphan", passive_deletes=True
    )


class RestaurantCategory(Base, UlidPrimaryKeyMixin, CreatedAtMixin):
    """Link between a restaurant and a category."""

    __tablename__ = "restaurant_categories"
    __table_args__ = (
        UniqueConstraint("restaurant_id", "category_id", name="uq_restaurant_category"),
    )

    restaurant_id = Column(
        String(26), ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category_id = Column(
        String(26), ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    restaurant = relationship("Restaurant", back_populates="category_links")
    category = relationship("Category")
