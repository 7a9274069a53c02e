"""Review, ReviewPhoto and ReviewHelpfulVote models."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    false,
)
from sqlalchemy.orm import relationship

from resto_rate.database import Base
from resto_rate.models.mixins import CreatedAtMixin, TimestampMixin, UlidPrimaryKeyMixin


class Review(Base, UlidPrimaryKeyMixin, TimestampMixin):
    """A user's rating of a restaurant. One per user per restaurant."""

    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("restaurant_id", "user_id", name="uq_review_restaurant_user"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_review_rating_range"),
    )

    restaurant_id = Column(
        String(26), ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(
        String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    rating = Column(Integer, nullable=False)
    title = Column(String(255), nullable=True)
    content = Column(Text, nullable=True)
    visit_date = Column(DateTime(timezone=True), nullable=True)
    is_verified = Column(Boolean, default=False, server_default=false(), nullable=False)
    helpful_count = Column(Integer, default=0, nullable=False)

    # Relationships
    restaurant = relationship("Restaurant", back_populates="reviews")
    user = relationship("User", back_populates="reviews")
    photos = relationship(
        "ReviewPhoto",
        back_populates="review",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ReviewPhoto.order_index",
    )
    helpful_votes = relationship(
        "ReviewHelpfulVote",
        back_populates="review",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ReviewPhoto(Base, UlidPrimaryKeyMixin, CreatedAtMixin):
    """Photo attached to a review."""

    __tablename__ = "review_photos"

    review_id = Column(
        String(26), ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False, index=True
    )
    url = Column(String(2048), nullable=False)
    caption = Column(String(500), nullable=True)
    order_index = Column(Integer, default=0, nullable=False)

    # Relationships
    review = relationship("Review", back_populates="photos")


class ReviewHelpfulVote(Base, UlidPrimaryKeyMixin, CreatedAtMixin):
    """A user's helpful / not helpful vote on someone's review."""

    __tablename__ = "review_helpful_votes"
    __table_args__ = (UniqueConstraint("review_id", "user_id", name="uq_helpful_review_user"),)

    review_id = Column(
        String(26), ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(
        String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    is_helpful = Column(Boolean, nullable=False)

    # Relationships
    review = relationship("Review", back_populates="helpful_votes")
