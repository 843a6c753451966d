"""Struct-mapping access layer: table models in, table models out.

``DataMapper`` runs each call in its own committed session; ``MapperTransaction``
runs every call in one session until ``commit`` or ``rollback``. Both satisfy
``SqlExecutor``, so helpers accept either.
"""

from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any, Protocol, TypeVar

from pydantic import BaseModel
from sqlalchemy import inspect as sa_inspect
from sqlalchemy import text
from sqlalchemy.engine import RowMapping
from sqlmodel import Session, SQLModel, select

from src.rel.core.services.database.db_manage import DbManageService
from src.rel.core.services.database.db_session import DbSessionService

RowT = TypeVar("RowT", bound=SQLModel)
RecordT = TypeVar("RecordT", bound=BaseModel)


class SqlExecutor(Protocol):
    """What helpers need: run statements, on a plain mapper or inside a transaction."""

    def insert(self, *rows: SQLModel) -> None: ...

    def get(self, model: type[RowT], key: Any) -> RowT | None: ...

    def update(self, *rows: SQLModel) -> int: ...

    def select(self, model: type[RowT], query: str, **params: Any) -> list[RowT]: ...

    def query(self, query: str, **params: Any) -> list[RowMapping]: ...


class _SessionExecutor:
    """Statement implementations shared by the mapper and its transactions."""

    @contextmanager
    def _scope(self) -> Iterator[Session]:
        raise NotImplementedError

    def insert(self, *rows: SQLModel) -> None:
        with self._scope() as session:
            session.add_all(rows)
            session.flush()

    def get(self, model: type[RowT], key: Any) -> RowT | None:
        with self._scope() as session:
            return session.get(model, key)

    def update(self, *rows: SQLModel) -> int:
        """Write rows back by primary key; returns how many existed."""
        updated = 0
        with self._scope() as session:
            for row in rows:
                key = sa_inspect(type(row)).primary_key_from_instance(row)
                identity = key[0] if len(key) == 1 else tuple(key)
                if session.get(type(row), identity) is None:
                    continue
                session.merge(row)
                updated += 1
            session.flush()
        return updated

    def select(self, model: type[RowT], query: str, **params: Any) -> list[RowT]:
        """Run raw SQL and map each row onto ``model``."""
        statement = select(model).from_statement(text(query))
        with self._scope() as session:
            return list(session.exec(statement, params=params).scalars())

    def query(self, query: str, **params: Any) -> list[RowMapping]:
        """Run raw SQL and return the rows as column mappings."""
        with self._scope() as session:
            return list(session.exec(text(query), params=params).mappings())


class MapperTransaction(_SessionExecutor):
    """One open transaction; also a context manager that rolls back unless committed."""

    def __init__(self, session: Session) -> None:
        self._session = session
        self._done = False

    @contextmanager
    def _scope(self) -> Iterator[Session]:
        if self._done:
            raise RuntimeError("Transaction already finished")
        yield self._session

    def commit(self) -> None:
        try:
            self._session.commit()
        finally:
            self._finish()

    def rollback(self) -> None:
        try:
            self._session.rollback()
        finally:
            self._finish()

    def _finish(self) -> None:
        self._done = True
        self._session.close()

    def __enter__(self) -> "MapperTransaction":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self._done:
            self.rollback()


class DataMapper(_SessionExecutor):
    """Runs every call in its own session, committed when the call returns."""

    def __init__(self, db: DbSessionService) -> None:
        self._db = db
        self._manage = DbManageService(db.engine)

    @contextmanager
    def _scope(self) -> Iterator[Session]:
        with self._db.session_scope() as session:
            yield session

    def begin(self) -> MapperTransaction:
        session = self._db.get_session()
        session.begin()
        return MapperTransaction(session)

    def truncate_tables(self, names: list[str]) -> None:
        self._manage.truncate(names)


def rows_to_records(
    rows: Sequence[SQLModel] | Sequence[RowMapping], record_type: type[RecordT]
) -> list[RecordT]:
    """Convert table models (or row mappings) into records."""
    if rows and isinstance(rows[0], Mapping):
        return [record_type.model_validate(dict(row)) for row in rows]
    return [record_type.model_validate(row, from_attributes=True) for row in rows]
