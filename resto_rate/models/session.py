"""Login session model."""

from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from resto_rate.database import Base
from resto_rate.models.mixins import CreatedAtMixin


class UserSession(Base, CreatedAtMixin):
    """Server-side login record keyed by the SHA-256 of the client token."""

    __tablename__ = "sessions"

    id = Column(String(64), primary_key=True)  # hex sha256 of the token, never the token
    user_id = Column(
        String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    # Relationships
    user = relationship("User", back_populates="sessions")
