"""
Catalog item (product) schemas for validation and serialization.
"""

from pydantic import Field, field_validator, model_validator
from typing import Optional
from enum import Enum
from uuid import UUID

from models.base import BaseSchema, TimestampMixin


class DonationType(str, Enum):
    """How a catalog item is fulfilled."""
    MONETARY = "monetary"
    PHYSICAL = "physical"


def validate_uuid(value: str) -> str:
    try:
        UUID(value)
    except ValueError:
        raise ValueError("ID da categoria é inválido")
    return value


class CatalogItemCreate(BaseSchema):
    """
    Create a new catalog item.

    Required: name, description, donation_type
    Required for monetary items: target_amount (cents, > 0)
    """

    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Item name shown in the catalog",
        examples=["Impressora", "Cadeiras"]
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=1000,
        description="Item description"
    )
    donation_type: DonationType = Field(
        ...,
        description="monetary or physical"
    )
    target_amount: Optional[int] = Field(
        None,
        gt=0,
        description="Target amount in cents (monetary items only)"
    )
    is_published: bool = Field(
        True,
        description="Whether the item is visible in the public catalog"
    )
    category_ids: list[str] = Field(
        default_factory=list,
        description="Category UUIDs"
    )
    image_path: Optional[str] = Field(
        None,
        description="Storage path of the item photo"
    )

    @field_validator("category_ids")
    @classmethod
    def category_ids_are_uuids(cls, v: list[str]) -> list[str]:
        return [validate_uuid(c) for c in v]

    @model_validator(mode="after")
    def monetary_requires_target(self) -> "CatalogItemCreate":
        """Monetary items need a positive target amount."""
        if self.donation_type == DonationType.MONETARY and not self.target_amount:
            raise ValueError("Valor é obrigatório para produtos monetários")
        return self


class ProductResponse(BaseSchema, TimestampMixin):
    """
    Catalog item row as stored.
    """

    id: str = Field(..., description="Product UUID")
    name: str
    description: str
    donation_type: DonationType
    target_amount: Optional[int] = None
    current_amount: int = 0
    is_fulfilled: bool = False
    is_published: bool = True
    image_path: Optional[str] = None
