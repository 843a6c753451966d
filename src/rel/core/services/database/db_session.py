"""Database engine and session factory shared by both demo programs."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import psycopg2
from loguru import logger
from sqlalchemy import StaticPool, event, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, create_engine

from src.rel.core.naming import NamingConvention
from src.rel.core.services.database.db_utils import get_database_url
from src.rel.errors import ConnectionFailedError
from src.rel.runtime.config.config_data import DatabaseConfig


@dataclass(frozen=True)
class PoolSettings:
    """Configured pool limits, named after the settings they bound."""

    max_idle: int
    max_open: int
    conn_max_lifetime: int

    def __str__(self) -> str:
        return (
            f"ConnMaxLifetime: {self.conn_max_lifetime}, "
            f"MaxIdleConns: {self.max_idle}, "
            f"MaxOpenConns: {self.max_open}"
        )


def _is_memory_sqlite(url: URL) -> bool:
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


class DbSessionService:
    """Owns the one engine a demo run uses.

    Use it as a context manager: the connection is verified on entry and the
    engine is disposed on exit however the block ends.
    """

    def __init__(self, db_config: DatabaseConfig, naming: NamingConvention | None = None):
        self._config = db_config
        self.naming = naming or NamingConvention()
        try:
            self.url = get_database_url(db_config)
            logger.info("Initializing database engine for {}", self.url.render_as_string(hide_password=True))
            self._engine = create_engine(self.url, **self._get_engine_kwargs())
        except (psycopg2.Error, SQLAlchemyError, ValueError) as e:
            raise ConnectionFailedError(f"Open: {e}") from e

        if db_config.trace:
            event.listen(self._engine, "before_cursor_execute", self._trace_statement)

    def _get_engine_kwargs(self) -> dict:
        """Pool and connect arguments for the configured backend."""
        if _is_memory_sqlite(self.url):
            # One shared connection, otherwise every checkout sees an empty database
            return {
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
                "echo": False,
            }

        engine_kwargs = {
            "pool_size": self._config.pool_size,
            "max_overflow": self._config.max_overflow,
            "pool_timeout": self._config.pool_timeout,
            "pool_recycle": self._config.pool_recycle,
            "pool_pre_ping": True,
            "echo": False,
        }
        if self.url.get_backend_name() == "sqlite":
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        return engine_kwargs

    @staticmethod
    def _trace_statement(conn, cursor, statement, parameters, context, executemany) -> None:
        logger.info("[SQL] {} {}", statement, parameters)

    @property
    def engine(self) -> Engine:
        return self._engine

    def open(self) -> "DbSessionService":
        """Verify the database is reachable."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            self._engine.dispose()
            raise ConnectionFailedError(f"Open: {e}") from e
        return self

    def close(self) -> None:
        self._engine.dispose()
        logger.debug("Database engine disposed")

    def __enter__(self) -> "DbSessionService":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,  # rows stay readable after the session closes
            autoflush=True,
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Session that commits when the block succeeds and rolls back otherwise."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.debug(
                "Database transaction rolled back",
                extra={
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            raise
        finally:
            db.close()

    def pool_settings(self) -> PoolSettings:
        """Configured pool limits; in-memory SQLite always shares a single connection."""
        if _is_memory_sqlite(self.url):
            return PoolSettings(max_idle=1, max_open=1, conn_max_lifetime=-1)
        return PoolSettings(
            max_idle=self._config.pool_size,
            max_open=self._config.pool_size + self._config.max_overflow,
            conn_max_lifetime=self._config.pool_recycle,
        )

    def get_pool_status(self) -> dict:
        """Get current connection pool status for monitoring."""
        pool = self._engine.pool
        return {
            "size": getattr(pool, "size", lambda: 0)(),
            "checked_in": getattr(pool, "checkedin", lambda: 0)(),
            "checked_out": getattr(pool, "checkedout", lambda: 0)(),
            "overflow": getattr(pool, "overflow", lambda: 0)(),
        }
