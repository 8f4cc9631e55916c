"""Pydantic schemas for catalog items."""

from datetime import date
from enum import Enum
from typing import Optional, Union

from pydantic import Field

from ..schemas import FrozenModel


class ItemStatus(str, Enum):
    """Lifecycle status of a catalog item."""

    AVAILABLE = "available"
    BORROWED = "borrowed"
    RESERVED = "reserved"  # Set only by direct catalog writes
    MAINTENANCE = "maintenance"  # Set only by direct catalog writes


class Item(FrozenModel):
    """A lendable catalog entry.

    Identity is the identifier: two values with the same ``item_id`` are
    equal even if their status differs. A status change produces a new
    value via ``with_status``.
    """

    entity_name = "item"

    item_id: str = Field(..., min_length=1, description="Unique identifier, e.g. ISBN")
    title: str = Field(..., min_length=1)
    contributor: str = Field("Unknown", min_length=1, description="Author or creator")
    category: str = Field("General", min_length=1)
    status: ItemStatus = ItemStatus.AVAILABLE
    publish_date: Optional[date] = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Item):
            return NotImplemented
        return self.item_id == other.item_id

    def __hash__(self) -> int:
        return hash(self.item_id)

    def __str__(self) -> str:
        return f"{self.item_id} - {self.title}"

    @property
    def is_available(self) -> bool:
        """Check if the item can be borrowed."""
        return self.status == ItemStatus.AVAILABLE

    def with_status(self, status: Union[ItemStatus, str]) -> "Item":
        """Return a copy of this item with a different status."""
        return self.model_copy(update={"status": ItemStatus(status)})

    def describe(self) -> str:
        """One-line summary for listings and event details."""
        published = f", {self.publish_date.year}" if self.publish_date else ""
        return (
            f"{self.title} by {self.contributor} [{self.category}{published}]"
            f" - {self.status.value}"
        )
