# olsboot/core/__init__.py
"""Core computational modules for olsboot."""
from . import bootstrap, linalg

__all__ = ["bootstrap", "linalg"]
