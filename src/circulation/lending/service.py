"""Lending service: the borrow/return state machine and catalog reports."""

import logging
import threading
from collections import Counter
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..catalog.schemas import Item, ItemStatus
from ..catalog.store import CatalogStore
from ..config import get_config
from ..errors import (
    InvalidValueError,
    LendingError,
    LimitExceededError,
    NotAvailableError,
    NotBorrowedByMemberError,
    NotFoundError,
)
from ..events.notifier import EventKind, EventNotifier, Listener
from ..ledger.ledger import (
    TransactionLedger,
    active_loans,
    overdue_records as find_overdue,
    recent_records,
    records_for_borrower,
    records_for_item,
)
from ..ledger.schemas import LendingRecord, RecordAction
from ..members.schemas import Borrower, BorrowerClass
from ..members.store import MembershipStore
from ..search.strategies import SearchStrategy
from ..utils import normalize, utc_now
from .schemas import LendingResult, LendingStats

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class LendingService:
    """Coordinates the catalog, the borrower directory, the ledger and listeners.

    The service is the only writer of its stores. Borrow and return run
    their read-check-write sequence under one lock, so no other borrow or
    return can interleave. Events are published after the lock is released,
    once the change has committed.
    """

    def __init__(
        self,
        catalog: Optional[CatalogStore] = None,
        members: Optional[MembershipStore] = None,
        ledger: Optional[TransactionLedger] = None,
        notifier: Optional[EventNotifier] = None,
        clock: Optional[Clock] = None,
        loan_days: Optional[int] = None,
    ):
        """Initialize the lending service.

        Args:
            catalog: Item store (new empty store if not provided)
            members: Borrower store (new empty store if not provided)
            ledger: Transaction ledger (new empty ledger if not provided)
            notifier: Event notifier (new notifier if not provided)
            clock: Returns the current time (default: UTC now)
            loan_days: Loan period for borrows (default: configured value)
        """
        self.catalog = catalog if catalog is not None else CatalogStore()
        self.members = members if members is not None else MembershipStore()
        self.ledger = ledger if ledger is not None else TransactionLedger()
        self.notifier = notifier if notifier is not None else EventNotifier()
        self.clock = clock or utc_now
        self.loan_days = loan_days if loan_days is not None else get_config().loan_days
        self._lock = threading.RLock()

    # -------------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        """Register a listener for lending events."""
        self.notifier.subscribe(listener)

    def unsubscribe(self, listener: Listener) -> bool:
        """Remove a listener. Returns True if it was registered."""
        return self.notifier.unsubscribe(listener)

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    def add_item(self, item: Item) -> None:
        """Add an item to the catalog, replacing any item with the same id.

        An item currently on loan stays BORROWED whatever status the new
        value carries; a new value cannot itself claim BORROWED.

        Args:
            item: Item to store

        Raises:
            InvalidValueError: If the item is BORROWED but nobody holds it
        """
        with self._lock:
            if self._holder_of(item.item_id) is not None:
                item = item.with_status(ItemStatus.BORROWED)
            elif item.status == ItemStatus.BORROWED:
                raise InvalidValueError(
                    f"Book {item.item_id} is not on loan and cannot be added as borrowed"
                )
            self.catalog.put(item)
        logger.debug("Added item %s", item.item_id)
        self.notifier.publish(EventKind.BOOK_ADDED, f"Book added: {item.title}")

    def get_item(self, item_id: str) -> Optional[Item]:
        """Get an item by identifier.

        Args:
            item_id: Item identifier

        Returns:
            Item or None
        """
        return self.catalog.get(item_id)

    def list_items(self) -> list[Item]:
        """List all items in catalog order."""
        return self.catalog.all()

    def search(self, strategy: SearchStrategy, query: str) -> list[Item]:
        """Search the catalog with a caller-supplied strategy.

        Args:
            strategy: Function of (items, query) returning matches
            query: Search term

        Returns:
            Matching items; empty list when nothing matches
        """
        return list(strategy(self.catalog.all(), query))

    def filter_items(self, predicate: Callable[[Item], bool]) -> list[Item]:
        """Items matching an arbitrary predicate."""
        return self.catalog.filter(predicate)

    def count_items(self, predicate: Callable[[Item], bool]) -> int:
        return len(self.catalog.filter(predicate))

    def available_items(self) -> list[Item]:
        return self.catalog.filter(lambda item: item.status == ItemStatus.AVAILABLE)

    def items_in_category(self, category: str) -> list[Item]:
        """Items whose category matches, ignoring case."""
        wanted = normalize(category)
        return self.catalog.filter(lambda item: normalize(item.category) == wanted)

    def items_by_contributor(self, contributor: str) -> list[Item]:
        """Items whose contributor contains the text, ignoring case."""
        term = normalize(contributor)
        return self.catalog.filter(lambda item: term in item.contributor.lower())

    def items_sorted_by_title(self) -> list[Item]:
        return sorted(self.catalog.all(), key=lambda item: item.title)

    def items_sorted_by_contributor(self) -> list[Item]:
        return sorted(self.catalog.all(), key=lambda item: item.contributor)

    def all_contributors(self) -> list[str]:
        """Distinct contributors, sorted."""
        return sorted({item.contributor for item in self.catalog.all()})

    def all_categories(self) -> list[str]:
        """Distinct categories, sorted."""
        return sorted({item.category for item in self.catalog.all()})

    def category_breakdown(self) -> dict[str, int]:
        """Item count per category, in first-seen order."""
        return dict(Counter(item.category for item in self.catalog.all()))

    def status_breakdown(self) -> dict[ItemStatus, int]:
        """Item count per status present in the catalog."""
        return dict(Counter(item.status for item in self.catalog.all()))

    def most_popular_category(self) -> Optional[str]:
        """Category with the most items, or None for an empty catalog."""
        counts = Counter(item.category for item in self.catalog.all())
        if not counts:
            return None
        return counts.most_common(1)[0][0]

    def all_items_available(self) -> bool:
        """True if no item is out of AVAILABLE status (also for an empty catalog)."""
        return all(item.status == ItemStatus.AVAILABLE for item in self.catalog.all())

    # -------------------------------------------------------------------------
    # Borrowers
    # -------------------------------------------------------------------------

    def add_borrower(self, borrower: Borrower) -> None:
        """Register a borrower, replacing any borrower with the same id.

        A registered borrower keeps the items they currently hold; the
        ``borrowed_ids`` of the new value are ignored. A new borrower must
        not claim any items.

        Args:
            borrower: Borrower to store

        Raises:
            LimitExceededError: If the held items exceed the new class limit
            InvalidValueError: If a new borrower claims to hold items
        """
        with self._lock:
            current = self.members.get(borrower.borrower_id)
            held = current.borrowed_ids if current is not None else borrower.borrowed_ids
            if len(held) > borrower.limit:
                raise LimitExceededError(
                    f"Borrowing limit reached for {borrower.name}: "
                    f"holds {len(held)}, limit {borrower.limit}"
                )
            if current is None and held:
                raise InvalidValueError(
                    f"Member {borrower.borrower_id} cannot be registered holding "
                    f"{', '.join(held)}"
                )
            borrower = borrower.model_copy(update={"borrowed_ids": held})
            self.members.put(borrower)
        logger.debug("Added borrower %s", borrower.borrower_id)
        self.notifier.publish(EventKind.MEMBER_ADDED, f"Member registered: {borrower.name}")

    def get_borrower(self, borrower_id: str) -> Optional[Borrower]:
        """Get a borrower by identifier.

        Args:
            borrower_id: Borrower identifier

        Returns:
            Borrower or None
        """
        return self.members.get(borrower_id)

    def list_borrowers(self) -> list[Borrower]:
        """List all borrowers in registration order."""
        return self.members.all()

    def borrowers_by_class(self, borrower_class: BorrowerClass) -> list[Borrower]:
        wanted = BorrowerClass(borrower_class)
        return self.members.filter(lambda b: b.borrower_class == wanted)

    def borrowers_who_can_borrow_more(self) -> list[Borrower]:
        return self.members.filter(lambda b: b.can_borrow_more())

    def total_borrowed_count(self) -> int:
        """Number of items currently on loan across all borrowers."""
        return sum(b.borrowed_count for b in self.members.all())

    def most_active_borrower(self) -> Optional[Borrower]:
        """Borrower holding the most items, or None if nobody is registered.

        Ties go to the earliest registered borrower.
        """
        borrowers = self.members.all()
        if not borrowers:
            return None
        return max(borrowers, key=lambda b: b.borrowed_count)

    # -------------------------------------------------------------------------
    # Borrow / Return
    # -------------------------------------------------------------------------

    def borrow(self, borrower_id: str, item_id: str) -> LendingResult:
        """Lend an item to a borrower.

        Checks, in order: both ids exist, the borrower is below their
        limit, the item is AVAILABLE. On success the item becomes
        BORROWED, the borrower holds it, and a BORROW record due after
        the loan period is appended.

        Args:
            borrower_id: Borrower identifier
            item_id: Item identifier

        Returns:
            LendingResult; on failure ``reason`` says why and nothing changed
        """
        try:
            with self._lock:
                borrower, item = self._resolve(borrower_id, item_id)
                if not borrower.can_borrow_more():
                    raise LimitExceededError(f"Borrowing limit reached for {borrower.name}")
                if item.status != ItemStatus.AVAILABLE:
                    raise NotAvailableError(f"Book not available: {item.title}")

                now = self.clock()
                record = LendingRecord.create(
                    transaction_id=self.ledger.next_transaction_id(),
                    borrower_id=borrower_id,
                    item_id=item_id,
                    action=RecordAction.BORROW,
                    action_at=now,
                    due_at=now + timedelta(days=self.loan_days),
                )
                self.catalog.put(item.with_status(ItemStatus.BORROWED))
                self.members.put(borrower.with_borrowed(item_id))
                self.ledger.append(record)
        except LendingError as e:
            return self._reject(EventKind.BORROW_FAILED, e)

        message = f"{borrower.name} borrowed {item.title}"
        logger.info("%s (%s)", message, record.transaction_id)
        self.notifier.publish(EventKind.BOOK_BORROWED, message)
        return LendingResult.ok(record, message)

    def return_item(self, borrower_id: str, item_id: str) -> LendingResult:
        """Take an item back from a borrower.

        The item must be in the borrower's borrowed set. On success the
        item becomes AVAILABLE, the borrower no longer holds it, and a
        RETURN record is appended.

        Args:
            borrower_id: Borrower identifier
            item_id: Item identifier

        Returns:
            LendingResult; on failure ``reason`` says why and nothing changed
        """
        try:
            with self._lock:
                borrower, item = self._resolve(borrower_id, item_id)
                if not borrower.holds(item_id):
                    raise NotBorrowedByMemberError(
                        f"{borrower.name} hasn't borrowed {item.title}"
                    )

                record = LendingRecord.create(
                    transaction_id=self.ledger.next_transaction_id(),
                    borrower_id=borrower_id,
                    item_id=item_id,
                    action=RecordAction.RETURN,
                    action_at=self.clock(),
                )
                self.catalog.put(item.with_status(ItemStatus.AVAILABLE))
                self.members.put(borrower.without_borrowed(item_id))
                self.ledger.append(record)
        except LendingError as e:
            return self._reject(EventKind.RETURN_FAILED, e)

        message = f"{borrower.name} returned {item.title}"
        logger.info("%s (%s)", message, record.transaction_id)
        self.notifier.publish(EventKind.BOOK_RETURNED, message)
        return LendingResult.ok(record, message)

    def _resolve(self, borrower_id: str, item_id: str) -> tuple[Borrower, Item]:
        borrower = self.members.get(borrower_id)
        item = self.catalog.get(item_id)
        if borrower is None and item is None:
            raise NotFoundError(f"Member {borrower_id} and book {item_id} not found")
        if borrower is None:
            raise NotFoundError(f"Member not found: {borrower_id}")
        if item is None:
            raise NotFoundError(f"Book not found: {item_id}")
        return borrower, item

    def _holder_of(self, item_id: str) -> Optional[Borrower]:
        holders = self.members.filter(lambda b: b.holds(item_id))
        return holders[0] if holders else None

    def _reject(self, kind: EventKind, error: LendingError) -> LendingResult:
        logger.info("%s (%s): %s", kind.value, error.reason.value, error)
        self.notifier.publish(kind, str(error))
        return LendingResult.failed(error.reason, str(error))

    # -------------------------------------------------------------------------
    # Transactions and Reports
    # -------------------------------------------------------------------------

    def list_transactions(self) -> list[LendingRecord]:
        """All lending records in the order they happened."""
        return self.ledger.all()

    def overdue_records(self) -> list[LendingRecord]:
        """Borrow records past their due date."""
        return find_overdue(self.ledger.all(), self.clock())

    def overdue_loans(self) -> list[LendingRecord]:
        """Open loans past their due date; returned items are left out."""
        return find_overdue(active_loans(self.ledger.all()), self.clock())

    def has_overdue(self) -> bool:
        return bool(self.overdue_records())

    def recent_transactions(self, count: Optional[int] = None) -> list[LendingRecord]:
        """Most recent records, newest first.

        Args:
            count: How many to return (default: configured recent limit)
        """
        if count is None:
            count = get_config().recent_limit
        return recent_records(self.ledger.all(), count)

    def transactions_for_borrower(self, borrower_id: str) -> list[LendingRecord]:
        return records_for_borrower(self.ledger.all(), borrower_id)

    def transactions_for_item(self, item_id: str) -> list[LendingRecord]:
        return records_for_item(self.ledger.all(), item_id)

    def statistics(self) -> LendingStats:
        """Get overall lending statistics.

        Returns:
            LendingStats computed from one consistent snapshot
        """
        with self._lock:
            items = self.catalog.all()
            borrowers = self.members.all()
            records = self.ledger.all()
        now = self.clock()

        return LendingStats(
            total_items=len(items),
            total_borrowers=len(borrowers),
            total_transactions=len(records),
            available_items=sum(1 for i in items if i.status == ItemStatus.AVAILABLE),
            borrowed_items=sum(b.borrowed_count for b in borrowers),
            overdue_records=len(find_overdue(records, now)),
            overdue_loans=len(find_overdue(active_loans(records), now)),
            items_by_category=dict(Counter(i.category for i in items)),
            items_by_status=dict(Counter(i.status for i in items)),
        )

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def reset(self) -> None:
        """Clear every store and listener. Intended for test isolation."""
        with self._lock:
            self.catalog.clear()
            self.members.clear()
            self.ledger.clear()
            self.notifier.clear()
        logger.debug("Lending service reset")


# Global service instance
_service: Optional[LendingService] = None
_service_lock = threading.Lock()


def get_service() -> LendingService:
    """Get or create the process-wide lending service."""
    global _service
    if _service is None:
        with _service_lock:
            if _service is None:
                _service = LendingService()
    return _service


def reset_service() -> None:
    """Drop the process-wide lending service. Used for testing."""
    global _service
    with _service_lock:
        _service = None
