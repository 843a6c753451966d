"""Column projections for multi-table SELECTs.

Joined tables often share column names (``id`` above all), so each column is
selected under an ``alias.column`` label and split back into one record per
alias when the rows are read.
"""

from collections.abc import Callable, Iterable, Mapping
from typing import TypeVar

from pydantic import BaseModel

from src.rel.core.naming import NamingConvention

CompositeT = TypeVar("CompositeT")


class FieldRegistry:
    """Ordered (field, column) pairs per record type, registered up front."""

    def __init__(self, naming: NamingConvention) -> None:
        self._naming = naming
        self._fields: dict[type[BaseModel], list[tuple[str, str]]] = {}

    def register(self, *record_types: type[BaseModel]) -> "FieldRegistry":
        for record_type in record_types:
            self._fields[record_type] = [
                (name, self._naming.column(name)) for name in record_type.model_fields
            ]
        return self

    def columns(self, record_type: type[BaseModel]) -> list[str]:
        return [column for _, column in self._lookup(record_type)]

    def _lookup(self, record_type: type[BaseModel]) -> list[tuple[str, str]]:
        try:
            return self._fields[record_type]
        except KeyError:
            raise LookupError(f"{record_type.__name__} is not registered") from None

    def join_fields(self, aliases: Mapping[str, type[BaseModel]]) -> str:
        """Projection list such as ``p.id "p.id", p.name "p.name", s.id "s.id"``."""
        fields = []
        for alias, record_type in aliases.items():
            for column in self.columns(record_type):
                fields.append(f'{alias}.{column} "{alias}.{column}"')
        return ", ".join(fields)

    def split_row(
        self, row: Mapping[str, object], aliases: Mapping[str, type[BaseModel]]
    ) -> tuple[BaseModel, ...]:
        """One record per alias, in alias order, from a row labelled by join_fields."""
        records = []
        for alias, record_type in aliases.items():
            values = {
                field: row[f"{alias}.{column}"] for field, column in self._lookup(record_type)
            }
            records.append(record_type.model_validate(values))
        return tuple(records)

    def scan_joined(
        self,
        rows: Iterable[Mapping[str, object]],
        aliases: Mapping[str, type[BaseModel]],
        composite: Callable[..., CompositeT],
    ) -> list[CompositeT]:
        """Build ``composite(*records)`` for every joined row."""
        return [composite(*self.split_row(row, aliases)) for row in rows]
