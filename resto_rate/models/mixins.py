"""Mixins for SQLAlchemy models."""

from sqlalchemy import Boolean, Column, DateTime, String, func, true
from ulid import ULID


def new_id() -> str:
    """Generate a time-ordered 26-character identifier."""
    return str(ULID())


class UlidPrimaryKeyMixin:
    """Mixin to add a ULID string primary key generated at insert time."""

    id = Column(String(26), primary_key=True, default=new_id)


class CreatedAtMixin:
    """Mixin for rows that are never updated in place."""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class TimestampMixin(CreatedAtMixin):
    """Mixin to add created_at and updated_at timestamp columns."""

    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class SoftDeleteMixin:
    """Mixin to add an active flag instead of deleting rows."""

    is_active = Column(Boolean, default=True, server_default=true(), nullable=False, index=True)

    def soft_delete(self) -> None:
        """Soft delete the record."""
        self.is_active = False
