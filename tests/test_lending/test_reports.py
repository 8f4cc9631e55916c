"""Tests for LendingService reports and statistics."""

from datetime import timedelta

from circulation.catalog.schemas import Item, ItemStatus
from circulation.config import reset_config
from circulation.lending.schemas import LendingStats
from circulation.members.schemas import Borrower, BorrowerClass


class TestEmptyService:
    """Reports over an empty service."""

    def test_statistics(self, service):
        stats = service.statistics()

        assert stats == LendingStats(
            total_items=0,
            total_borrowers=0,
            total_transactions=0,
            available_items=0,
            borrowed_items=0,
            overdue_records=0,
            overdue_loans=0,
            items_by_category={},
            items_by_status={},
        )

    def test_empty_reports(self, service):
        assert service.most_popular_category() is None
        assert service.most_active_borrower() is None
        assert service.all_items_available() is True
        assert service.all_categories() == []
        assert service.all_contributors() == []
        assert service.overdue_records() == []
        assert service.has_overdue() is False
        assert service.recent_transactions() == []
        assert service.total_borrowed_count() == 0


class TestCatalogReports:
    """Item listing, grouping and sorting."""

    def test_available_items(self, stocked_service):
        stocked_service.borrow("M001", "978-0132350884")

        available = stocked_service.available_items()
        assert len(available) == 4
        assert "978-0132350884" not in [i.item_id for i in available]

    def test_items_in_category_ignores_case(self, stocked_service):
        titles = [i.title for i in stocked_service.items_in_category("programming")]
        assert titles == ["Effective Java", "The Pragmatic Programmer"]

    def test_items_by_contributor(self, stocked_service):
        titles = [i.title for i in stocked_service.items_by_contributor("MARTIN")]
        assert titles == ["Clean Code"]

    def test_sorted_by_title(self, stocked_service):
        titles = [i.title for i in stocked_service.items_sorted_by_title()]
        assert titles == sorted(titles)
        assert titles[0] == "Clean Code"

    def test_sorted_by_contributor(self, stocked_service):
        contributors = [i.contributor for i in stocked_service.items_sorted_by_contributor()]
        assert contributors[0] == "David Thomas"
        assert contributors == sorted(contributors)

    def test_distinct_values(self, stocked_service):
        assert stocked_service.all_categories() == ["Programming", "Software Engineering"]
        assert len(stocked_service.all_contributors()) == 5

    def test_category_breakdown(self, stocked_service):
        assert stocked_service.category_breakdown() == {
            "Programming": 2,
            "Software Engineering": 3,
        }

    def test_status_breakdown(self, stocked_service, maintenance_item):
        stocked_service.add_item(maintenance_item)
        stocked_service.borrow("M001", "978-0132350884")

        assert stocked_service.status_breakdown() == {
            ItemStatus.AVAILABLE: 4,
            ItemStatus.BORROWED: 1,
            ItemStatus.MAINTENANCE: 1,
        }

    def test_most_popular_category(self, stocked_service):
        assert stocked_service.most_popular_category() == "Software Engineering"

    def test_filter_and_count(self, stocked_service):
        def is_java(item):
            return "Java" in item.title

        assert [i.title for i in stocked_service.filter_items(is_java)] == ["Effective Java"]
        assert stocked_service.count_items(is_java) == 1

    def test_all_items_available(self, stocked_service):
        assert stocked_service.all_items_available() is True
        stocked_service.borrow("M001", "978-0132350884")
        assert stocked_service.all_items_available() is False


class TestBorrowerReports:
    """Borrower grouping and activity."""

    def test_borrowers_by_class(self, stocked_service):
        students = stocked_service.borrowers_by_class(BorrowerClass.STUDENT)
        assert [b.borrower_id for b in students] == ["M001"]
        assert [b.borrower_id for b in stocked_service.borrowers_by_class("guest")] == ["M003"]

    def test_borrowers_who_can_borrow_more(self, stocked_service):
        stocked_service.borrow("M003", "978-0132350884")

        ids = [b.borrower_id for b in stocked_service.borrowers_who_can_borrow_more()]
        assert ids == ["M001", "M002"]

    def test_total_borrowed_count(self, stocked_service):
        stocked_service.borrow("M001", "978-0132350884")
        stocked_service.borrow("M002", "978-0134685991")
        assert stocked_service.total_borrowed_count() == 2

    def test_most_active_borrower(self, stocked_service):
        stocked_service.borrow("M002", "978-0132350884")
        stocked_service.borrow("M002", "978-0134685991")
        stocked_service.borrow("M001", "978-0201633610")

        assert stocked_service.most_active_borrower().borrower_id == "M002"

    def test_most_active_borrower_tie(self, stocked_service):
        """Test the earliest registered borrower wins a tie."""
        assert stocked_service.most_active_borrower().borrower_id == "M001"


class TestLedgerReports:
    """Transaction history, overdue and recent records."""

    def test_overdue_after_loan_period(self, stocked_service, clock):
        result = stocked_service.borrow("M001", "978-0132350884")

        clock.advance(days=14)
        assert stocked_service.overdue_records() == []

        clock.advance(seconds=1)
        assert stocked_service.overdue_records() == [result.record]
        assert stocked_service.has_overdue() is True
        assert stocked_service.statistics().overdue_records == 1
        assert stocked_service.statistics().overdue_loans == 1

    def test_returned_loans_still_reported_overdue(self, stocked_service, clock):
        """Overdue is computed from BORROW records alone."""
        stocked_service.borrow("M001", "978-0132350884")
        stocked_service.return_item("M001", "978-0132350884")

        clock.advance(days=30)
        assert len(stocked_service.overdue_records()) == 1
        assert stocked_service.overdue_loans() == []

        stats = stocked_service.statistics()
        assert stats.overdue_records == 1
        assert stats.overdue_loans == 0

    def test_overdue_loans_only_open(self, stocked_service, clock):
        """Test only loans still out are counted as overdue loans."""
        kept = stocked_service.borrow("M001", "978-0132350884").record
        stocked_service.borrow("M002", "978-0134685991")
        stocked_service.return_item("M002", "978-0134685991")

        clock.advance(days=15)

        assert stocked_service.overdue_loans() == [kept]
        assert len(stocked_service.overdue_records()) == 2

    def test_recent_transactions(self, stocked_service, clock):
        stocked_service.borrow("M001", "978-0132350884")
        clock.advance(minutes=1)
        stocked_service.borrow("M002", "978-0134685991")
        clock.advance(minutes=1)
        stocked_service.return_item("M001", "978-0132350884")

        recent = stocked_service.recent_transactions(2)
        assert [(r.borrower_id, r.action.value) for r in recent] == [
            ("M001", "return"),
            ("M002", "borrow"),
        ]
        assert stocked_service.recent_transactions(0) == []
        assert len(stocked_service.recent_transactions(10)) == 3

    def test_recent_transactions_default_limit(self, monkeypatch, stocked_service):
        monkeypatch.setenv("CIRCULATION_RECENT_LIMIT", "1")
        reset_config()
        stocked_service.borrow("M001", "978-0132350884")
        stocked_service.borrow("M002", "978-0134685991")

        recent = stocked_service.recent_transactions()
        assert [r.borrower_id for r in recent] == ["M002"]

    def test_transactions_by_borrower_and_item(self, stocked_service):
        stocked_service.borrow("M001", "978-0132350884")
        stocked_service.return_item("M001", "978-0132350884")
        stocked_service.borrow("M002", "978-0132350884")

        assert len(stocked_service.transactions_for_borrower("M001")) == 2
        assert len(stocked_service.transactions_for_item("978-0132350884")) == 3
        assert stocked_service.transactions_for_item("978-0134685991") == []

    def test_failed_operations_not_recorded(self, stocked_service):
        stocked_service.borrow("nobody", "978-0132350884")
        stocked_service.return_item("M001", "978-0132350884")
        assert stocked_service.list_transactions() == []


class TestStatistics:
    """Aggregate statistics snapshot."""

    def test_stocked_statistics(self, stocked_service):
        stocked_service.borrow("M001", "978-0132350884")
        stocked_service.borrow("M002", "978-0134685991")
        stocked_service.return_item("M002", "978-0134685991")

        stats = stocked_service.statistics()

        assert stats.total_items == 5
        assert stats.total_borrowers == 3
        assert stats.total_transactions == 3
        assert stats.available_items == 4
        assert stats.borrowed_items == 1
        assert stats.overdue_records == 0
        assert stats.overdue_loans == 0
        assert stats.items_by_category == {"Programming": 2, "Software Engineering": 3}
        assert stats.items_by_status == {ItemStatus.AVAILABLE: 4, ItemStatus.BORROWED: 1}

    def test_borrowed_items_matches_catalog(self, stocked_service):
        for item_id in ("978-0132350884", "978-0134685991", "978-0201633610"):
            stocked_service.borrow("M002", item_id)

        stats = stocked_service.statistics()
        assert stats.borrowed_items == stats.items_by_status[ItemStatus.BORROWED] == 3

    def test_statistics_after_adding(self, service, clock):
        service.add_item(Item.create(item_id="X1", title="Only Item"))
        service.add_borrower(Borrower.create(borrower_id="B1", name="Solo"))
        service.borrow("B1", "X1")
        clock.advance(days=15)

        stats = service.statistics()
        assert stats.overdue_records == 1
        assert stats.overdue_loans == 1
        assert stats.items_by_category == {"General": 1}
        assert stats.total_items - stats.available_items == 1

    def test_due_dates_use_loan_period(self, stocked_service, clock):
        record = stocked_service.borrow("M001", "978-0132350884").record
        assert record.due_at == clock.now + timedelta(days=14)
