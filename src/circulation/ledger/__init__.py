"""Transaction ledger of borrow and return actions."""

from .ledger import (
    TransactionLedger,
    active_loans,
    overdue_records,
    recent_records,
    records_for_borrower,
    records_for_item,
)
from .schemas import LendingRecord, RecordAction

__all__ = [
    "TransactionLedger",
    "LendingRecord",
    "RecordAction",
    "active_loans",
    "overdue_records",
    "recent_records",
    "records_for_borrower",
    "records_for_item",
]
