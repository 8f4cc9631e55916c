"""Result and report schemas for lending operations."""

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel

from ..catalog.schemas import ItemStatus
from ..errors import ERRORS_BY_REASON, FailureReason
from ..ledger.schemas import LendingRecord


@dataclass(frozen=True)
class LendingResult:
    """Outcome of a borrow or return."""

    success: bool
    message: str
    reason: Optional[FailureReason] = None
    record: Optional[LendingRecord] = None

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls, record: LendingRecord, message: str) -> "LendingResult":
        return cls(success=True, message=message, record=record)

    @classmethod
    def failed(cls, reason: FailureReason, message: str) -> "LendingResult":
        return cls(success=False, message=message, reason=reason)

    def raise_for_failure(self) -> None:
        """Raise the matching LendingError if the operation failed."""
        if self.success or self.reason is None:
            return
        raise ERRORS_BY_REASON[self.reason](self.message)


class LendingStats(BaseModel):
    """Overall catalog and lending statistics."""

    total_items: int
    total_borrowers: int
    total_transactions: int
    available_items: int
    borrowed_items: int
    overdue_records: int  # Borrow records past due, returned or not
    overdue_loans: int  # Items still on loan past due
    items_by_category: dict[str, int]
    items_by_status: dict[ItemStatus, int]
