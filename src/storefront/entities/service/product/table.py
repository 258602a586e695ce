"""Product database table model."""

from decimal import Decimal

from sqlmodel import Field, SQLModel


class ProductTable(SQLModel, table=True):
    """Database persistence model for products."""

    __tablename__ = "products"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=120)
    price: Decimal = Field(default=Decimal("0"), max_digits=8, decimal_places=2)
    description: str | None = Field(default=None, max_length=500)
