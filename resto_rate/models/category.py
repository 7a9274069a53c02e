"""Category model."""

from sqlalchemy import Column, String, Text

from resto_rate.database import Base
from resto_rate.models.mixins import TimestampMixin, UlidPrimaryKeyMixin


class Category(Base, UlidPrimaryKeyMixin, TimestampMixin):
    """Cuisine or style category shared by all restaurants."""

    __tablename__ = "categories"

    name = Column(String(100), unique=True, nullable=False)
    slug = Column(String(100), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
