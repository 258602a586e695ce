"""Database engine and session factory used across the application."""

import time
from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import StaticPool, text
from sqlalchemy.exc import OperationalError
from sqlmodel import Session, SQLModel, create_engine

from src.storefront.runtime.config.config_data import DatabaseConfig


class DbSessionService:
    def __init__(self, config: DatabaseConfig, environment: str = "development"):
        """Initialize the shared database engine and session factory."""
        self._config = config
        self._environment = environment

        logger.info("Configuring database engine for environment: {}", environment)
        self._engine = create_engine(config.url, **self._engine_kwargs())

    def _engine_kwargs(self) -> dict:
        cfg = self._config
        engine_kwargs: dict = {
            "echo": cfg.echo,
            "connect_args": self._get_connect_args(),
        }

        if cfg.is_sqlite:
            if cfg.url in ("sqlite://", "sqlite:///:memory:"):
                # one shared connection so every thread sees the same database
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs.update(
                {
                    "pool_size": cfg.pool_size,
                    "max_overflow": cfg.max_overflow,
                    "pool_timeout": cfg.pool_timeout,
                    "pool_recycle": cfg.pool_recycle,
                    "pool_pre_ping": True,  # Validate connections before use
                }
            )
        return engine_kwargs

    def _get_connect_args(self) -> dict:
        """Get database-specific connection arguments."""
        connect_args = {}

        if "postgresql" in self._config.url:
            connect_args.update(
                {
                    "application_name": f"{self._environment}_storefront_api",
                    "connect_timeout": 30,
                }
            )
        elif self._config.is_sqlite:
            connect_args.update(
                {
                    "check_same_thread": False,
                    "timeout": 20,  # Lock timeout
                }
            )

            if self._environment == "production":
                logger.warning(
                    "SQLite is not recommended for production use. "
                    "Consider PostgreSQL for better performance and reliability."
                )

        return connect_args

    @property
    def engine(self):
        return self._engine

    def connect(self) -> None:
        """Verify connectivity, retrying transient failures with backoff.

        Raises:
            OperationalError: If the database is still unreachable after the
                configured number of attempts.
        """
        retry = self._config.connect_retry
        delay = retry.initial_interval_seconds
        attempt = 1
        while True:
            try:
                with self._engine.connect() as connection:
                    connection.execute(text("SELECT 1"))
                logger.info("Database connection established")
                return
            except OperationalError as exc:
                if attempt >= retry.maximum_attempts:
                    logger.error(
                        "Database unreachable after {} attempts", attempt
                    )
                    raise
                logger.warning(
                    "Database connection attempt {}/{} failed: {}. Retrying in {:.1f}s",
                    attempt,
                    retry.maximum_attempts,
                    exc.orig,
                    delay,
                )
                time.sleep(delay)
                delay = min(delay * retry.backoff_coefficient, retry.maximum_interval_seconds)
                attempt += 1

    def create_all(self) -> None:
        """Create all database tables."""
        import src.storefront.entities  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.")

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,  # Prevent lazy loading issues
            autoflush=True,
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Context manager style helper for startup tasks and tests."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(
                "Database transaction failed: {}: {}", type(e).__name__, e
            )
            raise
        finally:
            db.close()

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.error(
                "Database health check failed: {}: {}", type(e).__name__, e
            )
            return False

    def dispose(self) -> None:
        self._engine.dispose()
