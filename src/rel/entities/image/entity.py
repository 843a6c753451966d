"""Entity: Image."""

from pydantic import Field

from src.rel.entities._base import Entity


class Image(Entity):
    """An image of a product, addressed by URL."""

    url: str = Field(description="Image location")
    product_id: str = Field(description="Owning product id")
