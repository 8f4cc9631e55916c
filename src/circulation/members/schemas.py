"""Pydantic schemas for borrowers."""

from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Union

from pydantic import Field, field_validator

from ..schemas import FrozenModel


class BorrowerClass(str, Enum):
    """Borrower category; fixes how many items may be held at once."""

    STUDENT = "student"
    FACULTY = "faculty"
    GUEST = "guest"


BORROW_LIMITS: Mapping[BorrowerClass, int] = MappingProxyType({
    BorrowerClass.STUDENT: 3,
    BorrowerClass.FACULTY: 5,
    BorrowerClass.GUEST: 1,
})


def borrow_limit(borrower_class: Union[BorrowerClass, str]) -> int:
    """Maximum concurrently borrowed items for a borrower class."""
    return BORROW_LIMITS[BorrowerClass(borrower_class)]


class Borrower(FrozenModel):
    """A registered borrower.

    ``borrowed_ids`` keeps insertion order and never holds duplicates.
    The lending limit is not checked here; the lending service checks it
    before building an updated value.
    """

    entity_name = "borrower"

    borrower_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    contact: Optional[str] = Field(None, max_length=200)
    borrower_class: BorrowerClass = BorrowerClass.STUDENT
    registration_date: date = Field(default_factory=date.today)
    borrowed_ids: tuple[str, ...] = ()

    @field_validator("borrowed_ids")
    @classmethod
    def unique_borrowed_ids(cls, v):
        """Collapse duplicate identifiers, keeping first-seen order."""
        return tuple(dict.fromkeys(v))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Borrower):
            return NotImplemented
        return self.borrower_id == other.borrower_id

    def __hash__(self) -> int:
        return hash(self.borrower_id)

    def __str__(self) -> str:
        return f"{self.borrower_id} - {self.name}"

    @property
    def limit(self) -> int:
        """Maximum items this borrower may hold."""
        return borrow_limit(self.borrower_class)

    @property
    def borrowed_count(self) -> int:
        return len(self.borrowed_ids)

    def can_borrow_more(self) -> bool:
        """Check if the borrower is below their lending limit."""
        return self.borrowed_count < self.limit

    def holds(self, item_id: str) -> bool:
        """Check if the item is currently on loan to this borrower."""
        return item_id in self.borrowed_ids

    def with_borrowed(self, item_id: str) -> "Borrower":
        """Return a copy with ``item_id`` added to the borrowed set."""
        if self.holds(item_id):
            return self
        return self.model_copy(update={"borrowed_ids": self.borrowed_ids + (item_id,)})

    def without_borrowed(self, item_id: str) -> "Borrower":
        """Return a copy with ``item_id`` removed from the borrowed set."""
        remaining = tuple(i for i in self.borrowed_ids if i != item_id)
        return self.model_copy(update={"borrowed_ids": remaining})

    def describe(self) -> str:
        """One-line summary for listings and event details."""
        return (
            f"{self.name} ({self.borrower_class.value}) - "
            f"{self.borrowed_count}/{self.limit} items"
        )
