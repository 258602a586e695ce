"""Database initialization and demo data seeding."""

from decimal import Decimal

from loguru import logger

from src.storefront.core.services.database.db_session import DbSessionService
from src.storefront.entities.service.product import Product, ProductRepository

DEMO_PRODUCTS = (
    Product(name="Keyboard", price=Decimal("499.99"), description="Wireless"),
    Product(name="Mouse", price=Decimal("249.50")),
)


def seed_demo_products(database_service: DbSessionService) -> int:
    """Insert the demo products if the product table is empty.

    Returns:
        Number of rows inserted (0 when the table already had rows).
    """
    with database_service.session_scope() as session:
        repository = ProductRepository(session)
        if repository.count() > 0:
            logger.debug("Products present; skipping demo seed")
            return 0
        for product in DEMO_PRODUCTS:
            repository.add(product.model_copy())
    logger.info("Seeded {} demo products", len(DEMO_PRODUCTS))
    return len(DEMO_PRODUCTS)


def init_db(database_service: DbSessionService, seed: bool = True) -> None:
    """Connect, create all tables, and optionally seed demo data."""
    database_service.connect()
    database_service.create_all()
    if seed:
        seed_demo_products(database_service)


if __name__ == "__main__":
    from src.storefront.runtime.context import get_config

    config = get_config().resolve_defaults()
    config.validate_runtime()
    init_db(
        DbSessionService(config.database, config.app.environment),
        seed=config.seed.enabled,
    )
