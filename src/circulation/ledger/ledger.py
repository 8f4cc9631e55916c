"""Append-only transaction ledger and the derived queries built on it.

The query helpers are plain functions over a record sequence so they can
run on a snapshot without touching the ledger.
"""

import itertools
import threading
import time
from datetime import datetime
from typing import Iterable, Optional

from .schemas import LendingRecord


class TransactionLedger:
    """Ordered log of LendingRecord entries."""

    def __init__(self) -> None:
        self._records: list[LendingRecord] = []
        self._lock = threading.Lock()
        self._sequence = itertools.count(1)

    def next_transaction_id(self) -> str:
        """Issue a new transaction id.

        Ids embed the epoch milliseconds and a per-ledger sequence number,
        so they are unique and sort in issue order.
        """
        with self._lock:
            seq = next(self._sequence)
        return f"TXN{int(time.time() * 1000)}-{seq:06d}"

    def append(self, record: LendingRecord) -> None:
        """Add a record to the end of the log."""
        with self._lock:
            self._records.append(record)

    def all(self) -> list[LendingRecord]:
        """Snapshot of every record in insertion order."""
        with self._lock:
            return list(self._records)

    def clear(self) -> None:
        """Drop all records. Only used when resetting the service."""
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


def overdue_records(
    records: Iterable[LendingRecord],
    now: Optional[datetime] = None,
) -> list[LendingRecord]:
    """Borrow records whose due date has passed."""
    return [r for r in records if r.is_borrow and r.is_overdue(now)]


def recent_records(records: Iterable[LendingRecord], count: int) -> list[LendingRecord]:
    """The ``count`` most recent records, newest first."""
    if count <= 0:
        return []
    return sorted(records, key=lambda r: r.action_at, reverse=True)[:count]


def records_for_borrower(records: Iterable[LendingRecord], borrower_id: str) -> list[LendingRecord]:
    return [r for r in records if r.borrower_id == borrower_id]


def records_for_item(records: Iterable[LendingRecord], item_id: str) -> list[LendingRecord]:
    return [r for r in records if r.item_id == item_id]


def active_loans(records: Iterable[LendingRecord]) -> list[LendingRecord]:
    """Borrow records not yet followed by a return of the same pair.

    Returns the open borrow records in the order they were made.
    """
    open_loans: dict[tuple[str, str], LendingRecord] = {}
    for record in records:
        pair = (record.borrower_id, record.item_id)
        if record.is_borrow:
            open_loans[pair] = record
        else:
            open_loans.pop(pair, None)
    return list(open_loans.values())
