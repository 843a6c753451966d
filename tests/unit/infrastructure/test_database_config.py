"""Tests for connection target resolution and the session service."""

from pathlib import Path

import pytest

from src.rel.core.services.database.db_session import DbSessionService, PoolSettings
from src.rel.core.services.database.db_utils import dsn_to_url, get_database_url
from src.rel.errors import ConnectionFailedError
from src.rel.runtime.config.config_data import DatabaseConfig


class TestDatabaseUrl:
    def test_libpq_dsn(self):
        url = get_database_url(DatabaseConfig(url="dbname=rel sslmode=disable"))

        assert url.drivername == "postgresql"
        assert url.database == "rel"
        assert url.query == {"sslmode": "disable"}
        assert url.host is None

    def test_dsn_with_credentials_and_port(self):
        url = dsn_to_url("host=db port=5433 dbname=rel user=app password=secret")

        assert url.host == "db"
        assert url.port == 5433
        assert url.username == "app"
        assert url.password == "secret"
        assert url.database == "rel"

    def test_sqlalchemy_url(self):
        url = get_database_url(DatabaseConfig(url="postgresql://app@localhost:5432/rel"))

        assert url.username == "app"
        assert url.host == "localhost"
        assert url.database == "rel"

    def test_structured_settings_only(self):
        url = get_database_url(
            DatabaseConfig(url=None, host="localhost", database="rel", user="app", password="pw")
        )

        assert url.drivername == "postgresql"
        assert url.host == "localhost"
        assert url.database == "rel"
        assert url.username == "app"
        assert url.password == "pw"

    def test_structured_settings_override_the_url(self):
        url = get_database_url(
            DatabaseConfig(url="postgresql://app@localhost/rel", database="rel_test", sslmode="require")
        )

        assert url.database == "rel_test"
        assert url.query["sslmode"] == "require"


class TestDbSessionService:
    def test_open_verifies_the_connection(self, db: DbSessionService):
        assert db.open() is db

    def test_unreachable_database_is_fatal(self, tmp_path: Path):
        missing = tmp_path / "no" / "such" / "dir" / "rel.db"
        service = DbSessionService(DatabaseConfig(url=f"sqlite:///{missing}"))

        with pytest.raises(ConnectionFailedError, match="Open"):
            with service:
                pass

    @pytest.mark.parametrize(
        "url",
        ["dbname=rel = sslmode", "nosuchdb://localhost/rel"],
        ids=["malformed-dsn", "unknown-driver"],
    )
    def test_unusable_connection_string_is_fatal(self, url: str):
        with pytest.raises(ConnectionFailedError, match="Open"):
            DbSessionService(DatabaseConfig(url=url))

    def test_pool_settings_from_config(self, tmp_path: Path):
        config = DatabaseConfig(
            url=f"sqlite:///{tmp_path / 'rel.db'}", pool_size=4, max_overflow=6, pool_recycle=300
        )
        with DbSessionService(config) as service:
            settings = service.pool_settings()

        assert settings == PoolSettings(max_idle=4, max_open=10, conn_max_lifetime=300)
        assert str(settings) == "ConnMaxLifetime: 300, MaxIdleConns: 4, MaxOpenConns: 10"

    def test_memory_database_shares_one_connection(self, db: DbSessionService):
        assert db.pool_settings() == PoolSettings(max_idle=1, max_open=1, conn_max_lifetime=-1)

    def test_pool_status_keys(self, db: DbSessionService):
        assert set(db.get_pool_status()) == {"size", "checked_in", "checked_out", "overflow"}

    def test_trace_logs_statements(self, log_messages: list[str]):
        with DbSessionService(DatabaseConfig(url="sqlite://", trace=True)):
            pass

        assert any(message.startswith("[SQL] SELECT 1") for message in log_messages)

    def test_session_scope_rolls_back_on_error(self, db: DbSessionService):
        from src.rel.entities import ProductTable

        with pytest.raises(RuntimeError):
            with db.session_scope() as session:
                session.add(ProductTable(id="foo", name="Foo"))
                session.flush()
                raise RuntimeError("boom")

        with db.session_scope() as session:
            assert session.get(ProductTable, "foo") is None
