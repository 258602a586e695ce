"""Role tables.

Created with the identity schema so role-based authorization can be layered on
later. No endpoint reads or writes them.
"""

from sqlmodel import Field, SQLModel

from src.storefront.entities.core._base import EntityTable


class RoleTable(EntityTable, table=True):
    """A named role."""

    __tablename__ = "roles"

    name: str = Field(max_length=256)
    normalized_name: str = Field(max_length=256, unique=True, index=True)


class UserRoleTable(SQLModel, table=True):
    """Membership of a user in a role."""

    __tablename__ = "user_roles"

    user_id: str = Field(foreign_key="users.id", primary_key=True)
    role_id: str = Field(foreign_key="roles.id", primary_key=True)
