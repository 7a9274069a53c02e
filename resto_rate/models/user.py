"""User model."""

from sqlalchemy import Boolean, CheckConstraint, Column, Integer, String, false
from sqlalchemy.orm import relationship

from resto_rate.database import Base
from resto_rate.models.mixins import TimestampMixin, UlidPrimaryKeyMixin


class User(Base, UlidPrimaryKeyMixin, TimestampMixin):
    """User identity: a password account, a Google account, or both."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "(username IS NOT NULL AND password_hash IS NOT NULL) OR google_id IS NOT NULL",
            name="ck_users_has_auth_method",
        ),
    )

    google_id = Column(String(255), unique=True, nullable=True, index=True)
    email = Column(String(255), unique=True, nullable=True, index=True)
    name = Column(String(255), nullable=True)
    is_admin = Column(Boolean, default=False, server_default=false(), nullable=False)
    username = Column(String(31), unique=True, nullable=True, index=True)
    password_hash = Column(String(255), nullable=True)  # NULL for Google-only accounts
    age = Column(Integer, nullable=True)

    # Relationships
    sessions = relationship(
        "UserSession", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    reviews = relationship(
        "Review", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
