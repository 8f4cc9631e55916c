"""Lending service module.

Provides functionality for:
- Borrowing and returning catalog items
- Enforcing per-borrower lending limits
- Recording every action in the transaction ledger
- Notifying listeners of state changes
- Catalog and lending reports
"""

from ..errors import (
    FailureReason,
    InvalidValueError,
    LendingError,
    LimitExceededError,
    NotAvailableError,
    NotBorrowedByMemberError,
    NotFoundError,
)
from .schemas import LendingResult, LendingStats
from .service import LendingService, get_service, reset_service

__all__ = [
    "LendingService",
    "get_service",
    "reset_service",
    "LendingResult",
    "LendingStats",
    "FailureReason",
    "InvalidValueError",
    "LendingError",
    "LimitExceededError",
    "NotAvailableError",
    "NotBorrowedByMemberError",
    "NotFoundError",
]
