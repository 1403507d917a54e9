# olsboot/utils/__init__.py
"""Utility functions module."""
from .helpers import as_xy, format_value

__all__ = [
    "as_xy",
    "format_value",
]
