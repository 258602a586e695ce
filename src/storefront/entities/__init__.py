"""Entities module with entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model
- table.py: Database persistence model
- repository.py: Data access layer

Importing this package registers every table with ``SQLModel.metadata``.
"""

from .core.role import RoleTable, UserRoleTable
from .core.user import User, UserRepository, UserTable
from .service.product import Product, ProductCreate, ProductRepository, ProductTable

__all__ = [
    "User",
    "UserTable",
    "UserRepository",
    "RoleTable",
    "UserRoleTable",
    "Product",
    "ProductCreate",
    "ProductTable",
    "ProductRepository",
]
