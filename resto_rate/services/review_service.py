"""Review service: reviews, photos, helpful votes and restaurant rating stats."""

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from resto_rate.exceptions import ConflictError, ForbiddenError, InvalidInputError, NotFoundError
from resto_rate.models.restaurant import Restaurant
from resto_rate.models.review import Review, ReviewHelpfulVote, ReviewPhoto
from resto_rate.models.user import User
from resto_rate.schemas.review import (
    ReviewCreate,
    ReviewPhotoCreate,
    ReviewResponse,
    ReviewUpdate,
)

logger = logging.getLogger(__name__)

MAX_PHOTOS_PER_REVIEW = 10


def refresh_review_stats(db: Session, restaurant_id: str) -> None:
    """Recompute a restaurant's average rating and review count from its reviews."""
    db.flush()
    average, count = (
        db.query(func.avg(Review.rating), func.count(Review.id))
        .filter(Review.restaurant_id == restaurant_id)
        .one()
    )
    restaurant = db.get(Restaurant, restaurant_id)
    if restaurant is None:
        return
    restaurant.average_rating = round(float(average), 2) if average is not None else 0.0
    restaurant.total_reviews = count


def refresh_helpful_count(db: Session, review: Review) -> None:
    """Recompute a review's helpful count from its votes."""
    db.flush()
    review.helpful_count = (
        db.query(func.count(ReviewHelpfulVote.id))
        .filter(
            ReviewHelpfulVote.review_id == review.id,
            ReviewHelpfulVote.is_helpful == True,  # noqa: E712
        )
        .scalar()
    )


class ReviewService:
    """Service for review-related operations."""

    def __init__(self, db: Session):
        self.db = db

    def _get_active_restaurant(self, restaurant_id: str) -> Restaurant:
        restaurant = (
            self.db.query(Restaurant)
            .filter(Restaurant.id == restaurant_id, Restaurant.is_active == True)  # noqa: E712
            .first()
        )
        if not restaurant:
            raise NotFoundError("Restaurant not found")
        return restaurant

    def get_review(self, review_id: str) -> Review:
        """A review whose restaurant has not been deleted."""
        review = (
            self.db.query(Review)
            .join(Restaurant, Restaurant.id == Review.restaurant_id)
            .filter(Review.id == review_id, Restaurant.is_active == True)  # noqa: E712
            .first()
        )
        if not review:
            raise NotFoundError("Review not found")
        return review

    def _get_own_review(self, review_id: str, user: User, action: str) -> Review:
        review = self.get_review(review_id)
        if review.user_id != user.id:
            raise ForbiddenError(f"You can only {action} reviews you wrote")
        return review

    def to_responses(self, reviews: list[Review], viewer: User | None = None) -> list[ReviewResponse]:
        """Serialize reviews, including the viewer's own helpful vote when known."""
        votes: dict[str, bool] = {}
        if viewer and reviews:
            votes = dict(
                self.db.query(ReviewHelpfulVote.review_id, ReviewHelpfulVote.is_helpful)
                .filter(
                    ReviewHelpfulVote.user_id == viewer.id,
                    ReviewHelpfulVote.review_id.in_([review.id for review in reviews]),
                )
                .all()
            )

        responses = []
        for review in reviews:
            response = ReviewResponse.model_validate(review)
            response.user_helpful_vote = votes.get(review.id)
            responses.append(response)
        return responses

    def to_response(self, review: Review, viewer: User | None = None) -> ReviewResponse:
        return self.to_responses([review], viewer)[0]

    def list_for_restaurant(
        self,
        restaurant_id: str,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Review], int]:
        """Newest reviews first."""
        self._get_active_restaurant(restaurant_id)
        query = self.db.query(Review).filter(Review.restaurant_id == restaurant_id)
        total = query.count()
        reviews = (
            query.options(selectinload(Review.user), selectinload(Review.photos))
            .order_by(Review.created_at.desc(), Review.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )
        return reviews, total

    def create_review(self, restaurant_id: str, data: ReviewCreate, user: User) -> Review:
        """Create a review and update the restaurant's stats in one transaction."""
        self._get_active_restaurant(restaurant_id)

        review = Review(
            restaurant_id=restaurant_id,
            user_id=user.id,
            rating=data.rating,
            title=data.title,
            content=data.content,
            visit_date=data.visit_date,
        )
        for index, photo in enumerate(data.photos):
            review.photos.append(ReviewPhoto(url=photo.url, caption=photo.caption, order_index=index))

        self.db.add(review)
        try:
            self.db.flush()
            refresh_review_stats(self.db, restaurant_id)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("You have already reviewed this restaurant") from e
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(review)
        logger.info(f"User {user.id} reviewed restaurant {restaurant_id} ({data.rating}/5)")
        return review

    def update_review(self, review_id: str, data: ReviewUpdate, user: User) -> Review:
        review = self._get_own_review(review_id, user, "update")

        changes = data.model_dump(exclude_unset=True)
        if not changes:
            raise InvalidInputError("No update data provided")
        if "rating" in changes and changes["rating"] is None:
            raise InvalidInputError("Rating is required")

        for field, value in changes.items():
            setattr(review, field, value)

        try:
            if "rating" in changes:
                refresh_review_stats(self.db, review.restaurant_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(review)
        return review

    def delete_review(self, review_id: str, user: User) -> None:
        review = self._get_own_review(review_id, user, "delete")
        restaurant_id = review.restaurant_id

        try:
            self.db.delete(review)
            refresh_review_stats(self.db, restaurant_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Deleted review {review_id}")

    def add_photo(self, review_id: str, data: ReviewPhotoCreate, user: User) -> ReviewPhoto:
        review = self._get_own_review(review_id, user, "add photos to")
        if len(review.photos) >= MAX_PHOTOS_PER_REVIEW:
            raise InvalidInputError(f"A review can have at most {MAX_PHOTOS_PER_REVIEW} photos")

        photo = ReviewPhoto(
            review_id=review.id,
            url=data.url,
            caption=data.caption,
            order_index=len(review.photos),
        )
        self.db.add(photo)
        self.db.commit()
        self.db.refresh(photo)
        return photo

    def vote_helpful(self, review_id: str, is_helpful: bool, user: User) -> Review:
        """Record or change the user's helpful vote on a review."""
        review = self.get_review(review_id)
        if review.user_id == user.id:
            raise ForbiddenError("You cannot vote on your own review")

        vote = (
            self.db.query(ReviewHelpfulVote)
            .filter(ReviewHelpfulVote.review_id == review_id, ReviewHelpfulVote.user_id == user.id)
            .first()
        )
        if vote:
            vote.is_helpful = is_helpful
        else:
            self.db.add(ReviewHelpfulVote(review_id=review_id, user_id=user.id, is_helpful=is_helpful))

        try:
            refresh_helpful_count(self.db, review)
            self.db.commit()
        except IntegrityError as e:
            # Concurrent first vote by the same user
            self.db.rollback()
            raise ConflictError("Vote already recorded") from e

        self.db.refresh(review)
        return review
