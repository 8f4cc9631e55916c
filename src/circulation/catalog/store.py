"""Catalog store: the mapping of item identifier to current Item value."""

from ..storage import InMemoryStore
from .schemas import Item


class CatalogStore(InMemoryStore[Item]):
    """Owns every Item value.

    ``put`` overwrites unconditionally; callers that need rules (the
    lending service) check them before writing.
    """

    def __init__(self) -> None:
        super().__init__(key=lambda item: item.item_id)
