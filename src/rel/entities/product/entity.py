"""Entity: Product."""

from typing import Any

from pydantic import Field

from src.rel.entities._base import TimestampedEntity


class Product(TimestampedEntity):
    """Product record as returned by queries and inserted by the builder.

    Specs, images and categories all hang off a product.
    """

    name: str = Field(description="Display name")

    def __eq__(self, other: Any) -> bool:
        """Compare products by business attributes, ignoring timestamps."""
        if not isinstance(other, Product):
            return False

        return self.id == other.id and self.name == other.name

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((self.id, self.name))
