"""Entity: Category."""

from pydantic import BaseModel, Field

from src.rel.entities._base import Entity


class Category(Entity):
    name: str = Field(description="Category name")


class ProductCategory(BaseModel):
    """Membership of a product in a category."""

    product_id: str
    category_id: str
