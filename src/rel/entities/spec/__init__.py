"""Entity package: Spec."""

from .entity import Spec
from .table import SpecTable

__all__ = ["Spec", "SpecTable"]
