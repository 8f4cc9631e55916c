"""Sample catalog and borrowers for demos and the interactive shell."""

from datetime import date

from .catalog.schemas import Item
from .lending.service import LendingService
from .members.schemas import Borrower, BorrowerClass

SAMPLE_ITEMS = [
    {
        "item_id": "978-0134685991",
        "title": "Effective Java",
        "contributor": "Joshua Bloch",
        "category": "Programming",
        "publish_date": date(2017, 12, 27),
    },
    {
        "item_id": "978-0596009205",
        "title": "Head First Java",
        "contributor": "Kathy Sierra",
        "category": "Programming",
        "publish_date": date(2005, 2, 9),
    },
    {
        "item_id": "978-0596007126",
        "title": "Head First Design Patterns",
        "contributor": "Eric Freeman",
        "category": "Software Engineering",
        "publish_date": date(2004, 10, 25),
    },
    {
        "item_id": "978-0132350884",
        "title": "Clean Code",
        "contributor": "Robert C. Martin",
        "category": "Software Engineering",
        "publish_date": date(2008, 8, 1),
    },
    {
        "item_id": "978-0201633610",
        "title": "Design Patterns",
        "contributor": "Gang of Four",
        "category": "Software Engineering",
        "publish_date": date(1994, 10, 31),
    },
    {
        "item_id": "978-0135957059",
        "title": "The Pragmatic Programmer",
        "contributor": "David Thomas",
        "category": "Programming",
        "publish_date": date(2019, 9, 13),
    },
]

SAMPLE_BORROWERS = [
    {
        "borrower_id": "M001",
        "name": "John Doe",
        "contact": "john@example.com",
        "borrower_class": BorrowerClass.STUDENT,
    },
    {
        "borrower_id": "M002",
        "name": "Jane Smith",
        "contact": "jane@example.com",
        "borrower_class": BorrowerClass.FACULTY,
    },
    {
        "borrower_id": "M003",
        "name": "Bob Wilson",
        "contact": "bob@example.com",
        "borrower_class": BorrowerClass.STUDENT,
    },
]


def seed_sample_data(service: LendingService) -> None:
    """Add the sample items and borrowers to a service."""
    for fields in SAMPLE_ITEMS:
        service.add_item(Item.create(**fields))
    for fields in SAMPLE_BORROWERS:
        service.add_borrower(Borrower.create(**fields))
