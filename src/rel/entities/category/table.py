"""Category and product_category table models."""

from sqlmodel import Field, SQLModel

from src.rel.entities._base import EntityTable


class CategoryTable(EntityTable, table=True):
    __tablename__ = "category"

    name: str


class ProductCategoryTable(SQLModel, table=True):
    """Many-to-many link between products and categories."""

    __tablename__ = "product_category"

    product_id: str = Field(foreign_key="product.id", primary_key=True)
    category_id: str = Field(foreign_key="category.id", primary_key=True)
