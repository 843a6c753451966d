"""Name mapping between Python identifiers and database identifiers."""

import re
from typing import Literal

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_SEPARATORS = re.compile(r"[\s\-.]+")

NamingStyle = Literal["snake", "verbatim"]


def to_snake(name: str) -> str:
    """Convert a Camel/Pascal-case name to snake_case.

    ``CreatedAt`` becomes ``created_at``, ``ProductID`` becomes ``product_id``
    and ``URL`` becomes ``url``. Names already in snake_case are unchanged.
    """
    snake = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    snake = _WORD_BOUNDARY.sub(r"\1_\2", snake)
    snake = _SEPARATORS.sub("_", snake)
    return snake.lower()


class NamingConvention:
    """Maps record and field names to table and column names.

    Handed to the session service, the field registry and the builder session
    at construction time instead of living in a module-level global.
    """

    def __init__(self, style: NamingStyle = "snake") -> None:
        if style not in ("snake", "verbatim"):
            raise ValueError(f"Unknown naming style: {style!r}")
        self.style = style

    def column(self, field_name: str) -> str:
        if self.style == "verbatim":
            return field_name
        return to_snake(field_name)

    def table(self, type_name: str) -> str:
        return self.column(type_name)

    def __repr__(self) -> str:
        return f"NamingConvention(style={self.style!r})"
