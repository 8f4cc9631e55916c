"""Pytest configuration and shared fixtures.

Provides a lending service with a controllable clock, sample entities and
a listener that records the events it receives.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from circulation.catalog.schemas import Item, ItemStatus
from circulation.config import reset_config
from circulation.lending.service import LendingService, reset_service
from circulation.members.schemas import Borrower, BorrowerClass


class FakeClock:
    """Clock returning a fixed time until advanced."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class EventRecorder:
    """Listener that keeps every (kind, detail) pair it receives."""

    def __init__(self):
        self.events = []

    def __call__(self, kind, detail):
        self.events.append((kind, detail))

    @property
    def kinds(self):
        return [kind for kind, _ in self.events]


# ============================================================================
# Global State
# ============================================================================


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset cached config and the shared service around each test."""
    for name in (
        "CIRCULATION_LOAN_DAYS",
        "CIRCULATION_LOG_LEVEL",
        "CIRCULATION_RECENT_LIMIT",
        "CIRCULATION_SAMPLE_DATA",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    reset_service()
    yield
    reset_config()
    reset_service()


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def clock() -> FakeClock:
    """Clock fixed at 2025-01-15 10:00 UTC."""
    return FakeClock(datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc))


@pytest.fixture
def service(clock) -> LendingService:
    """Empty lending service using the fake clock."""
    return LendingService(clock=clock, loan_days=14)


@pytest.fixture
def recorder(service) -> EventRecorder:
    """Event recorder subscribed to the service."""
    listener = EventRecorder()
    service.subscribe(listener)
    return listener


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_item() -> Item:
    return Item.create(
        item_id="978-0132350884",
        title="Clean Code",
        contributor="Robert C. Martin",
        category="Software Engineering",
        publish_date=date(2008, 8, 1),
    )


@pytest.fixture
def sample_items() -> list[Item]:
    """Five available items across two categories."""
    return [
        Item.create(item_id="978-0134685991", title="Effective Java",
                    contributor="Joshua Bloch", category="Programming"),
        Item.create(item_id="978-0132350884", title="Clean Code",
                    contributor="Robert C. Martin", category="Software Engineering"),
        Item.create(item_id="978-0201633610", title="Design Patterns",
                    contributor="Gang of Four", category="Software Engineering"),
        Item.create(item_id="978-0135957059", title="The Pragmatic Programmer",
                    contributor="David Thomas", category="Programming"),
        Item.create(item_id="978-0596007126", title="Head First Design Patterns",
                    contributor="Eric Freeman", category="Software Engineering"),
    ]


@pytest.fixture
def student() -> Borrower:
    return Borrower.create(
        borrower_id="M001",
        name="John Doe",
        contact="john@example.com",
        borrower_class=BorrowerClass.STUDENT,
    )


@pytest.fixture
def faculty() -> Borrower:
    return Borrower.create(
        borrower_id="M002",
        name="Jane Smith",
        contact="jane@example.com",
        borrower_class=BorrowerClass.FACULTY,
    )


@pytest.fixture
def guest() -> Borrower:
    return Borrower.create(
        borrower_id="M003",
        name="Bob Wilson",
        borrower_class=BorrowerClass.GUEST,
    )


@pytest.fixture
def stocked_service(service, sample_items, student, faculty, guest) -> LendingService:
    """Service holding the sample items and three borrowers."""
    for item in sample_items:
        service.add_item(item)
    for borrower in (student, faculty, guest):
        service.add_borrower(borrower)
    return service


@pytest.fixture
def maintenance_item() -> Item:
    return Item.create(
        item_id="MAINT-1",
        title="Water Damaged Atlas",
        status=ItemStatus.MAINTENANCE,
    )
