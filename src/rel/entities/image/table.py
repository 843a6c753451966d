"""Image database table model."""

from sqlmodel import Field

from src.rel.entities._base import EntityTable


class ImageTable(EntityTable, table=True):
    """Database persistence model for images."""

    __tablename__ = "image"

    url: str
    product_id: str = Field(foreign_key="product.id", index=True)
