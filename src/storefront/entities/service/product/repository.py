"""Product repository."""

from src.storefront.core.repositories import Repository

from .entity import Product
from .table import ProductTable


class ProductRepository(Repository[Product, ProductTable]):
    """Data-access layer for products."""

    entity_type = Product
    row_type = ProductTable
