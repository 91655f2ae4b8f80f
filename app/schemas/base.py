"""Shared base for schemas that are built from ORM rows."""
from pydantic import BaseModel, ConfigDict


class BaseResponseSchema(BaseModel):
    """
    Base class for response schemas read from SQLAlchemy models.

    Every `*Response` schema inherits from it so endpoints can return ORM
    objects directly.
    """
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )
