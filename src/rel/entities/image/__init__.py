"""Entity package: Image."""

from .entity import Image
from .table import ImageTable

__all__ = ["Image", "ImageTable"]
