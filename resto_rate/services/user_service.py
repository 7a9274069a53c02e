"""User profile operations."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from resto_rate.exceptions import (
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    UsernameTakenError,
)
from resto_rate.models.review import Review, ReviewHelpfulVote
from resto_rate.models.user import User
from resto_rate.schemas.auth import UserUpdate
from resto_rate.services.review_service import refresh_helpful_count, refresh_review_stats
from resto_rate.services.sessions import SessionManager

logger = logging.getLogger(__name__)


class UserService:
    """Service for user-related operations."""

    def __init__(self, db: Session):
        self.db = db

    def list_users(self, limit: int = 20, offset: int = 0) -> tuple[list[User], int]:
        """Return a page of users ordered by id (creation order) and the total count."""
        query = self.db.query(User)
        total = query.count()
        users = query.order_by(User.id).limit(limit).offset(offset).all()
        return users, total

    def get_user(self, user_id: str) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_user(self, user_id: str, data: UserUpdate, requester_id: str) -> User:
        """Update the requester's own profile."""
        if requester_id != user_id:
            raise ForbiddenError("Cannot update other users")

        changes = data.model_dump(exclude_unset=True)
        if not changes:
            raise InvalidInputError("No update data provided")

        user = self.get_user(user_id)
        if "username" in changes and changes["username"] is None and not user.google_id:
            raise InvalidInputError("Username is required for password accounts")

        for field, value in changes.items():
            setattr(user, field, value)

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise UsernameTakenError() from e
        self.db.refresh(user)
        return user

    def delete_user(self, user_id: str, requester_id: str, sessions: SessionManager) -> None:
        """Delete the requester's own account along with its sessions and reviews."""
        if requester_id != user_id:
            raise ForbiddenError("Cannot delete other users")

        user = self.get_user(user_id)
        reviewed_restaurant_ids = {review.restaurant_id for review in user.reviews}
        voted_review_ids = [
            review_id
            for (review_id,) in self.db.query(ReviewHelpfulVote.review_id)
            .filter(ReviewHelpfulVote.user_id == user_id)
            .all()
        ]

        try:
            sessions.invalidate_user_sessions(user_id, commit=False)
            self.db.query(ReviewHelpfulVote).filter(ReviewHelpfulVote.user_id == user_id).delete()
            self.db.delete(user)
            self.db.flush()
            for restaurant_id in reviewed_restaurant_ids:
                refresh_review_stats(self.db, restaurant_id)
            for review in self.db.query(Review).filter(Review.id.in_(voted_review_ids)).all():
                refresh_helpful_count(self.db, review)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Deleted user {user_id}")
