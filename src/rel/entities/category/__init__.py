"""Entity package: Category and its product link table."""

from .entity import Category, ProductCategory
from .table import CategoryTable, ProductCategoryTable

__all__ = ["Category", "CategoryTable", "ProductCategory", "ProductCategoryTable"]
