"""Pydantic schemas for lending records."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator, model_validator

from ..schemas import FrozenModel
from ..utils import utc_now


class RecordAction(str, Enum):
    """Kind of lending action a record captures."""

    BORROW = "borrow"
    RETURN = "return"


class LendingRecord(FrozenModel):
    """One borrow or return action. Immutable once created."""

    entity_name = "lending record"

    transaction_id: str = Field(..., min_length=1)
    borrower_id: str = Field(..., min_length=1)
    item_id: str = Field(..., min_length=1)
    action: RecordAction
    action_at: datetime = Field(default_factory=utc_now)
    due_at: Optional[datetime] = None

    @field_validator("action_at", "due_at")
    @classmethod
    def assume_utc(cls, v):
        """Treat naive timestamps as UTC."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode="after")
    def check_due_date(self):
        """Only borrows carry a due date, and it cannot precede the action."""
        if self.due_at is None:
            return self
        if self.action == RecordAction.RETURN:
            raise ValueError("return records have no due date")
        if self.due_at < self.action_at:
            raise ValueError("due_at must be after action_at")
        return self

    def __str__(self) -> str:
        return (
            f"{self.transaction_id}: {self.borrower_id} {self.action.value} "
            f"{self.item_id} at {self.action_at:%Y-%m-%d %H:%M}"
        )

    @property
    def is_borrow(self) -> bool:
        return self.action == RecordAction.BORROW

    @property
    def is_return(self) -> bool:
        return self.action == RecordAction.RETURN

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        """Check if the due date has passed.

        Args:
            now: Reference time (default: current UTC time)
        """
        if self.due_at is None:
            return False
        return (now or utc_now()) > self.due_at
