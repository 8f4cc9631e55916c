"""Borrower directory."""

from .schemas import BORROW_LIMITS, Borrower, BorrowerClass, borrow_limit
from .store import MembershipStore

__all__ = [
    "BORROW_LIMITS",
    "Borrower",
    "BorrowerClass",
    "borrow_limit",
    "MembershipStore",
]
