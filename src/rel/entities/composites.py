"""Composite records produced by join queries."""

from typing import NamedTuple

from src.rel.entities.image import Image
from src.rel.entities.product import Product
from src.rel.entities.spec import Spec


class ProductSpec(NamedTuple):
    product: Product
    spec: Spec


class ProductImage(NamedTuple):
    product: Product
    image: Image
