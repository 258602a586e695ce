"""Entity: Product."""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field, PlainSerializer

Price = Annotated[
    Decimal,
    Field(ge=0, le=999999, max_digits=8, decimal_places=2),
    PlainSerializer(float, return_type=float, when_used="json"),
]


class ProductBase(BaseModel):
    """Fields a client supplies for a product."""

    name: str = Field(min_length=1, max_length=120, description="Product name")
    price: Price = Field(description="Unit price")
    description: str | None = Field(
        default=None, max_length=500, description="Optional description"
    )


class ProductCreate(ProductBase):
    """Request body for creating a product. Any client-sent id is ignored."""


class Product(ProductBase):
    """Product entity. ``id`` is assigned by the store on insert."""

    id: int | None = Field(default=None, description="Store-assigned identifier")
