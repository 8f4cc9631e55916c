"""Membership store: the mapping of borrower identifier to Borrower value."""

from ..storage import InMemoryStore
from .schemas import Borrower


class MembershipStore(InMemoryStore[Borrower]):
    """Owns every Borrower value.

    There is no operation to add or drop a single borrowed id; callers
    read the borrower, build a new value and ``put`` it.
    """

    def __init__(self) -> None:
        super().__init__(key=lambda borrower: borrower.borrower_id)
