"""Schema creation and table truncation."""

from collections.abc import Sequence

from loguru import logger
from sqlalchemy import MetaData, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel

from src.rel.errors import RelError, TruncateError


def truncate_tables(connection: Connection, metadata: MetaData, names: Sequence[str]) -> None:
    """Remove every row from the named tables on ``connection``.

    PostgreSQL truncates all of them in one statement so foreign keys between
    them never block; other backends delete child tables before parents.
    """
    unknown = [name for name in names if name not in metadata.tables]
    if unknown:
        raise TruncateError(f"Truncate: unknown tables {unknown}")

    try:
        if connection.dialect.name == "postgresql":
            quote = connection.dialect.identifier_preparer.quote
            tables = ", ".join(quote(name) for name in names)
            connection.execute(text(f"TRUNCATE TABLE {tables} CASCADE"))
        else:
            wanted = set(names)
            for table in reversed(metadata.sorted_tables):
                if table.name in wanted:
                    connection.execute(table.delete())
    except SQLAlchemyError as e:
        raise TruncateError(f"Truncate: {e}") from e

    logger.debug("Truncated {}", list(names))


class DbManageService:
    def __init__(self, engine: Engine, metadata: MetaData | None = None):
        self._engine = engine
        self._metadata = metadata if metadata is not None else SQLModel.metadata

    def create_all(self) -> None:
        """Create all database tables."""
        import src.rel.entities  # noqa: F401

        try:
            self._metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            raise RelError(f"Create tables: {e}") from e
        logger.info("Database initialized with tables: {}", sorted(self._metadata.tables))

    def truncate(self, names: Sequence[str]) -> None:
        """Empty the named tables in one transaction."""
        try:
            with self._engine.begin() as connection:
                truncate_tables(connection, self._metadata, names)
        except SQLAlchemyError as e:
            raise TruncateError(f"Truncate: {e}") from e
