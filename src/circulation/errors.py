"""Error taxonomy for the lending service.

Lending outcomes (unknown ids, limits, availability) are recoverable and
surface to callers as failed results; the exceptions below are what the
service raises internally and what ``LendingResult.raise_for_failure``
re-raises. ``InvalidValueError`` is raised when an entity cannot be built.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import ValidationError


class FailureReason(str, Enum):
    """Why a borrow or return was rejected."""

    NOT_FOUND = "not_found"
    LIMIT_EXCEEDED = "limit_exceeded"
    NOT_AVAILABLE = "not_available"
    NOT_BORROWED_BY_MEMBER = "not_borrowed_by_member"
    INVALID_VALUE = "invalid_value"


class LendingError(Exception):
    """Base exception for lending errors."""

    reason: FailureReason = FailureReason.INVALID_VALUE


class NotFoundError(LendingError):
    """Borrower or item identifier is unknown."""

    reason = FailureReason.NOT_FOUND


class LimitExceededError(LendingError):
    """Borrower already holds as many items as their class allows."""

    reason = FailureReason.LIMIT_EXCEEDED


class NotAvailableError(LendingError):
    """Item is not in AVAILABLE status."""

    reason = FailureReason.NOT_AVAILABLE


class NotBorrowedByMemberError(LendingError):
    """Return attempted for an item the borrower does not hold."""

    reason = FailureReason.NOT_BORROWED_BY_MEMBER


class InvalidValueError(LendingError, ValueError):
    """An entity could not be constructed from the given fields."""

    reason = FailureReason.INVALID_VALUE

    def __init__(self, message: str, errors: Optional[list[dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def from_validation_error(cls, entity: str, exc: ValidationError) -> "InvalidValueError":
        """Summarize a pydantic validation error for one entity type."""
        details = exc.errors()
        fields = ", ".join(
            ".".join(str(part) for part in err.get("loc", ())) or "value" for err in details
        )
        return cls(f"Invalid {entity}: {fields}", errors=details)


ERRORS_BY_REASON: dict[FailureReason, type[LendingError]] = {
    FailureReason.NOT_FOUND: NotFoundError,
    FailureReason.LIMIT_EXCEEDED: LimitExceededError,
    FailureReason.NOT_AVAILABLE: NotAvailableError,
    FailureReason.NOT_BORROWED_BY_MEMBER: NotBorrowedByMemberError,
    FailureReason.INVALID_VALUE: InvalidValueError,
}
