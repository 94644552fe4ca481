"""SQLite pantry store used as the reconciliation snapshot."""

from .pantry import PantryDB
from .schema import ensure_schema

__all__ = [
    "PantryDB",
    "ensure_schema",
]
