"""Entities of the catalogue schema.

Each entity package holds two shapes of the same row:
- entity.py: the record, a plain pydantic model returned by queries
- table.py: the SQLModel table model persisted by the mapper

Importing this package registers every table with ``SQLModel.metadata``.
"""

from .category import Category, CategoryTable, ProductCategory, ProductCategoryTable
from .composites import ProductImage, ProductSpec
from .image import Image, ImageTable
from .product import Product, ProductTable
from .spec import Spec, SpecTable

__all__ = [
    "Category",
    "CategoryTable",
    "Image",
    "ImageTable",
    "Product",
    "ProductCategory",
    "ProductCategoryTable",
    "ProductImage",
    "ProductSpec",
    "ProductTable",
    "Spec",
    "SpecTable",
]
