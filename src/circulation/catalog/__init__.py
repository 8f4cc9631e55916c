"""Catalog of lendable items."""

from .schemas import Item, ItemStatus
from .store import CatalogStore

__all__ = [
    "Item",
    "ItemStatus",
    "CatalogStore",
]
