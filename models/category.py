"""
Category schemas.
"""

from pydantic import Field

from models.base import BaseSchema, TimestampMixin


class CategoryResponse(BaseSchema, TimestampMixin):
    """Category row as stored."""

    id: str = Field(..., description="Category UUID")
    name: str = Field(..., description="Unique category name")
