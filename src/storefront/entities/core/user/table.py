"""User database table model."""

from sqlmodel import Field

from src.storefront.entities.core._base import EntityTable


class UserTable(EntityTable, table=True):
    """Database persistence model for users."""

    __tablename__ = "users"

    email: str = Field(max_length=256)
    normalized_email: str = Field(max_length=256, unique=True, index=True)
    password_hash: str = Field(max_length=255)
