"""Shared schema configuration."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Schema serialized with camelCase keys; accepts snake_case or camelCase input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(CamelModel):
    """Offset/limit pagination metadata."""

    limit: int
    offset: int
    total: int | None = None


class MessageResponse(CamelModel):
    """Plain success message."""

    message: str

