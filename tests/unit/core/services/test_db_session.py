from unittest.mock import patch

import pytest
from sqlalchemy import StaticPool, inspect
from sqlalchemy.exc import OperationalError

from src.storefront.core.services import DbSessionService
from src.storefront.runtime.config.config_data import DatabaseConfig, RetryConfig


class TestDbSessionService:
    def test_in_memory_sqlite_uses_static_pool(self):
        """Should share one connection for an in-memory database."""
        service = DbSessionService(DatabaseConfig(url="sqlite://"))
        try:
            assert isinstance(service.engine.pool, StaticPool)
        finally:
            service.dispose()

    def test_server_database_gets_pool_settings(self):
        """Should pass pool sizing and pre-ping for non-SQLite URLs."""
        service = DbSessionService.__new__(DbSessionService)
        service._config = DatabaseConfig(url="postgresql://user:pw@db/app", pool_size=7)
        service._environment = "production"

        kwargs = service._engine_kwargs()

        assert kwargs["pool_size"] == 7
        assert kwargs["pool_pre_ping"] is True
        assert kwargs["connect_args"]["application_name"] == "production_storefront_api"
        assert "poolclass" not in kwargs

    def test_create_all_creates_every_table(self, database_service: DbSessionService):
        """Should create the identity and product tables."""
        tables = set(inspect(database_service.engine).get_table_names())
        assert {"users", "roles", "user_roles", "products"} <= tables

    def test_health_check(self, database_service: DbSessionService):
        """Should report a reachable database as healthy."""
        assert database_service.health_check() is True

    def test_session_scope_rolls_back_on_error(self, database_service: DbSessionService):
        """Should roll back and re-raise when the block fails."""
        from src.storefront.entities.service.product import ProductRepository, ProductTable

        with pytest.raises(RuntimeError):
            with database_service.session_scope() as db:
                db.add(ProductTable(name="Ghost", price=1))
                db.flush()
                raise RuntimeError("boom")

        with database_service.session_scope() as db:
            assert ProductRepository(db).count() == 0

    def test_connect_retries_transient_failures(self):
        """Should retry with backoff and succeed once the database answers."""
        config = DatabaseConfig(
            url="sqlite://",
            connect_retry=RetryConfig(
                maximum_attempts=3,
                initial_interval_seconds=0.5,
                backoff_coefficient=2.0,
                maximum_interval_seconds=0.75,
            ),
        )
        service = DbSessionService(config)
        real_connect = service.engine.connect
        failure = OperationalError("SELECT 1", {}, Exception("database is starting"))
        attempts = iter([failure, failure])

        def flaky_connect():
            error = next(attempts, None)
            if error is not None:
                raise error
            return real_connect()

        try:
            with (
                patch.object(type(service.engine), "connect", side_effect=flaky_connect),
                patch("src.storefront.core.services.database.db_session.time.sleep") as sleep,
            ):
                service.connect()

            assert [call.args[0] for call in sleep.call_args_list] == [0.5, 0.75]
        finally:
            service.dispose()

    def test_connect_gives_up_after_max_attempts(self):
        """Should re-raise once every attempt has failed."""
        config = DatabaseConfig(
            url="sqlite://",
            connect_retry=RetryConfig(maximum_attempts=2, initial_interval_seconds=0),
        )
        service = DbSessionService(config)
        failure = OperationalError("SELECT 1", {}, Exception("refused"))

        try:
            with (
                patch.object(type(service.engine), "connect", side_effect=failure) as connect,
                patch("src.storefront.core.services.database.db_session.time.sleep"),
            ):
                with pytest.raises(OperationalError):
                    service.connect()
            assert connect.call_count == 2
        finally:
            service.dispose()
