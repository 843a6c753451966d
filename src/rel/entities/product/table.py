"""Product database table model."""

from src.rel.entities._base import TimestampedTable


class ProductTable(TimestampedTable, table=True):
    """Database persistence model for products."""

    __tablename__ = "product"

    name: str
