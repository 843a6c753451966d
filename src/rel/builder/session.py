"""Query-builder access layer over SQLAlchemy Core.

Records go in as pydantic models or plain mappings and come back as whatever
record type the caller asks for. Statements are built fluently::

    session.insert_into("product").values(product).exec()
    session.collection("spec").find().order_by("weight").all(Spec)
    session.update("product").set(name="Bar").where("id", "bar").exec()

``BuilderSession`` runs each statement in its own transaction. ``tx(fn)``
hands ``fn`` a ``BuilderTx`` whose statements share one transaction, committed
when ``fn`` returns and rolled back when it raises.
"""

from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any, TypeVar

from pydantic import BaseModel
from sqlalchemy import Column, MetaData, Table, func, insert, select, text, update
from sqlalchemy.engine import Connection, Engine, RowMapping
from sqlmodel import SQLModel

from src.rel.core.naming import NamingConvention
from src.rel.core.services.database.db_manage import truncate_tables

RecordT = TypeVar("RecordT", bound=BaseModel)
ResultT = TypeVar("ResultT")


class _Runner:
    """Resolves tables and supplies the connection statements run on."""

    def __init__(self, naming: NamingConvention, metadata: MetaData) -> None:
        self.naming = naming
        self.metadata = metadata

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        raise NotImplementedError

    def table(self, name: str) -> Table:
        try:
            return self.metadata.tables[self.naming.table(name)]
        except KeyError:
            raise LookupError(f"Unknown table: {name}") from None

    def column(self, table: Table, name: str) -> Column:
        try:
            return table.c[self.naming.column(name)]
        except KeyError:
            raise LookupError(f"Unknown column: {table.name}.{name}") from None

    def row_values(self, record: BaseModel | Mapping[str, Any]) -> dict[str, Any]:
        data = record.model_dump() if isinstance(record, BaseModel) else dict(record)
        return {self.naming.column(key): value for key, value in data.items()}

    def record(self, row: Mapping[str, Any], record_type: type[RecordT]) -> RecordT:
        """Build ``record_type`` from a row, reading each field from its mapped column."""
        values = {}
        for field in record_type.model_fields:
            column = self.naming.column(field)
            if column in row:
                values[field] = row[column]
        return record_type.model_validate(values)

    def insert_into(self, name: str) -> "Inserter":
        return Inserter(self, self.table(name))

    def collection(self, name: str) -> "Collection":
        return Collection(self, self.table(name))

    def update(self, name: str) -> "Updater":
        return Updater(self, self.table(name))

    def query(self, sql: str, **params: Any) -> list[RowMapping]:
        """Raw SQL with named binds, rows returned as column mappings."""
        with self.connect() as conn:
            return list(conn.execute(text(sql), params).mappings())


class Inserter:
    """Single-row INSERT; obtained from a session or a transaction alike."""

    def __init__(self, runner: _Runner, table: Table) -> None:
        self._runner = runner
        self._table = table
        self._values: dict[str, Any] | None = None

    def values(self, record: BaseModel | Mapping[str, Any]) -> "Inserter":
        self._values = self._runner.row_values(record)
        return self

    def exec(self) -> int:
        if self._values is None:
            raise ValueError(f"No values given for insert into {self._table.name}")
        with self._runner.connect() as conn:
            return conn.execute(insert(self._table).values(self._values)).rowcount


class Updater:
    def __init__(self, runner: _Runner, table: Table) -> None:
        self._runner = runner
        self._table = table
        self._values: dict[str, Any] = {}
        self._conditions: list = []

    def set(self, **values: Any) -> "Updater":
        self._values.update(self._runner.row_values(values))
        return self

    def where(self, column: str, value: Any) -> "Updater":
        self._conditions.append(self._runner.column(self._table, column) == value)
        return self

    def exec(self) -> int:
        if not self._values:
            raise ValueError(f"No values given for update of {self._table.name}")
        statement = update(self._table).where(*self._conditions).values(self._values)
        with self._runner.connect() as conn:
            return conn.execute(statement).rowcount


class Result:
    """Lazy SELECT over one collection."""

    def __init__(self, runner: _Runner, table: Table, conditions: Mapping[str, Any]) -> None:
        self._runner = runner
        self._table = table
        self._conditions = [runner.column(table, column) == value for column, value in conditions.items()]
        self._order_by: list = []

    def order_by(self, *columns: str) -> "Result":
        """Order by column names; a leading ``-`` sorts that column descending."""
        for column in columns:
            if column.startswith("-"):
                self._order_by.append(self._runner.column(self._table, column[1:]).desc())
            else:
                self._order_by.append(self._runner.column(self._table, column).asc())
        return self

    def all(self, record_type: type[RecordT]) -> list[RecordT]:
        statement = select(self._table).where(*self._conditions).order_by(*self._order_by)
        with self._runner.connect() as conn:
            rows = conn.execute(statement).mappings().all()
        return [self._runner.record(row, record_type) for row in rows]

    def one(self, record_type: type[RecordT]) -> RecordT | None:
        records = self.all(record_type)
        return records[0] if records else None

    def count(self) -> int:
        statement = select(func.count()).select_from(self._table).where(*self._conditions)
        with self._runner.connect() as conn:
            return conn.execute(statement).scalar_one()


class Collection:
    def __init__(self, runner: _Runner, table: Table) -> None:
        self._runner = runner
        self._table = table

    @property
    def name(self) -> str:
        return self._table.name

    def find(self, **conditions: Any) -> Result:
        return Result(self._runner, self._table, conditions)

    def truncate(self) -> None:
        with self._runner.connect() as conn:
            truncate_tables(conn, self._runner.metadata, [self.name])


class BuilderTx(_Runner):
    """Statements issued through a transaction share its connection."""

    def __init__(self, conn: Connection, naming: NamingConvention, metadata: MetaData) -> None:
        super().__init__(naming, metadata)
        self._conn = conn

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        yield self._conn


class BuilderSession(_Runner):
    """Autocommitting session; every statement is its own transaction."""

    def __init__(
        self,
        engine: Engine,
        naming: NamingConvention,
        metadata: MetaData | None = None,
    ) -> None:
        super().__init__(naming, metadata if metadata is not None else SQLModel.metadata)
        self._engine = engine

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        with self._engine.begin() as conn:
            yield conn

    def tx(self, fn: Callable[[BuilderTx], ResultT]) -> ResultT:
        """Run ``fn`` in one transaction: commit on return, roll back on raise."""
        with self._engine.connect() as conn:
            with conn.begin():
                return fn(BuilderTx(conn, self.naming, self.metadata))

