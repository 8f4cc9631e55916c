"""Command-line interface for circulation.

Built with Typer for commands and Rich for output. The CLI only calls the
lending service; all rules live there.
"""

from datetime import date, datetime
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from .catalog.schemas import Item, ItemStatus
from .config import get_config
from .errors import LendingError
from .events.notifier import ConsoleListener
from .ledger.schemas import LendingRecord
from .lending.schemas import LendingResult
from .lending.service import LendingService
from .members.schemas import Borrower, BorrowerClass
from .sample import seed_sample_data
from .search.strategies import STRATEGIES, get_strategy
from .utils import setup_logging

# Create the main app
app = typer.Typer(
    name="circulation",
    help="Lend catalog items to borrowers and track every loan.",
    no_args_is_help=True,
)

# Rich console for pretty output
console = Console()


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {escape(message)}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[dim]{escape(message)}[/dim]")


def print_result(result: LendingResult) -> None:
    if result:
        print_success(result.message)
    else:
        print_error(f"{result.message} ({result.reason.value})")


def format_item_table(items: list[Item], title: str = "Items") -> Table:
    """Create a rich table for displaying items."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan", no_wrap=False, max_width=40)
    table.add_column("Contributor", style="green", max_width=25)
    table.add_column("Category")
    table.add_column("Status", style="yellow")

    for item in items:
        status = item.status.value
        if item.status != ItemStatus.AVAILABLE:
            status = f"[red]{status}[/red]"
        table.add_row(
            escape(item.item_id),
            escape(item.title),
            escape(item.contributor),
            escape(item.category),
            status,
        )

    return table


def format_borrower_table(borrowers: list[Borrower], title: str = "Borrowers") -> Table:
    """Create a rich table for displaying borrowers."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Class")
    table.add_column("Items", justify="center")

    for borrower in borrowers:
        table.add_row(
            escape(borrower.borrower_id),
            escape(borrower.name),
            borrower.borrower_class.value,
            f"{borrower.borrowed_count}/{borrower.limit}",
        )

    return table


def format_record_table(
    records: list[LendingRecord],
    title: str = "Transactions",
    now: Optional[datetime] = None,
) -> Table:
    """Create a rich table for displaying lending records."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Transaction", style="dim")
    table.add_column("Borrower")
    table.add_column("Item", style="cyan")
    table.add_column("Action")
    table.add_column("Date")
    table.add_column("Due")

    for record in records:
        if record.due_at is None:
            due = "-"
        elif record.is_overdue(now):
            due = f"[bold red]{record.due_at:%Y-%m-%d} (overdue)[/bold red]"
        else:
            due = f"{record.due_at:%Y-%m-%d}"
        action = "[blue]BORROW[/blue]" if record.is_borrow else "[green]RETURN[/green]"
        table.add_row(
            record.transaction_id,
            escape(record.borrower_id),
            escape(record.item_id),
            action,
            f"{record.action_at:%Y-%m-%d %H:%M}",
            due,
        )

    return table


def show_statistics(service: LendingService) -> None:
    """Print the statistics panel and breakdowns."""
    stats = service.statistics()
    console.print(Panel(
        f"Total items: {stats.total_items}\n"
        f"Total borrowers: {stats.total_borrowers}\n"
        f"Total transactions: {stats.total_transactions}\n"
        f"Available items: {stats.available_items}\n"
        f"Borrowed items: {stats.borrowed_items}\n"
        f"Overdue loans: {stats.overdue_loans}\n"
        f"Overdue records: {stats.overdue_records}",
        title="Lending Statistics",
        style="cyan",
    ))

    table = Table(title="Items by Category", show_header=True, header_style="bold magenta")
    table.add_column("Category")
    table.add_column("Count", justify="right")
    for category, count in stats.items_by_category.items():
        table.add_row(escape(category), str(count))
    console.print(table)

    table = Table(title="Items by Status", show_header=True, header_style="bold magenta")
    table.add_column("Status")
    table.add_column("Count", justify="right")
    for status, count in stats.items_by_status.items():
        table.add_row(status.value, str(count))
    console.print(table)

    category = service.most_popular_category()
    if category:
        console.print(f"Most popular category: [bold]{escape(category)}[/bold]")
    borrower = service.most_active_borrower()
    if borrower:
        console.print(
            f"Most active borrower: [bold]{escape(borrower.name)}[/bold] "
            f"({borrower.borrowed_count} items)"
        )


def build_service(sample: bool = True, quiet: bool = False) -> LendingService:
    """Create a service for one CLI session."""
    config = get_config()
    problems = config.validate()
    if problems:
        for problem in problems:
            print_error(problem)
        raise typer.Exit(code=1)
    setup_logging(config.log_level)
    service = LendingService(loan_days=config.loan_days)
    if not quiet:
        service.subscribe(ConsoleListener(console))
    if sample:
        seed_sample_data(service)
    return service


# ============================================================================
# Commands
# ============================================================================


@app.command()
def demo(
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Hide event output"),
) -> None:
    """Run a short lending scenario on the sample catalog."""
    service = build_service(sample=True, quiet=quiet)

    console.print(format_item_table(service.list_items(), title="Catalog"))
    console.print(format_borrower_table(service.list_borrowers()))

    steps = [
        ("borrow", "M001", "978-0132350884"),
        ("borrow", "M002", "978-0132350884"),
        ("borrow", "M001", "978-0134685991"),
        ("return", "M003", "978-0134685991"),
        ("return", "M001", "978-0132350884"),
    ]
    for action, borrower_id, item_id in steps:
        if action == "borrow":
            result = service.borrow(borrower_id, item_id)
        else:
            result = service.return_item(borrower_id, item_id)
        print_result(result)

    results = service.search(get_strategy("title"), "clean")
    console.print(format_item_table(results, title="Search: title contains 'clean'"))
    console.print(format_record_table(service.list_transactions()))
    show_statistics(service)


@app.command()
def shell(
    sample: Optional[bool] = typer.Option(
        None, "--sample/--no-sample", help="Load the sample catalog (default from config)"
    ),
) -> None:
    """Interactive menu over an in-memory lending service."""
    if sample is None:
        sample = get_config().sample_data
    service = build_service(sample=sample)

    menu = (
        "1. View all items\n"
        "2. Add item\n"
        "3. Search items\n"
        "4. View all borrowers\n"
        "5. Add borrower\n"
        "6. Borrow item\n"
        "7. Return item\n"
        "8. Transaction history\n"
        "9. Statistics\n"
        "0. Exit"
    )

    while True:
        console.print(Panel(menu, title="Main Menu", style="magenta"))
        choice = IntPrompt.ask("Choice", console=console, default=0)

        if choice == 0:
            console.print("Goodbye!")
            break
        elif choice == 1:
            items = service.list_items()
            if items:
                console.print(format_item_table(items))
            else:
                print_info("No items in the catalog")
        elif choice == 2:
            _shell_add_item(service)
        elif choice == 3:
            name = Prompt.ask(
                "Search by", console=console, choices=list(STRATEGIES), default="title"
            )
            query = Prompt.ask("Search term", console=console)
            results = service.search(get_strategy(name), query)
            if results:
                console.print(format_item_table(results, title=f"Found {len(results)} item(s)"))
            else:
                print_info("No items found")
        elif choice == 4:
            borrowers = service.list_borrowers()
            if borrowers:
                console.print(format_borrower_table(borrowers))
            else:
                print_info("No borrowers registered")
        elif choice == 5:
            _shell_add_borrower(service)
        elif choice == 6:
            borrower_id = Prompt.ask("Borrower ID", console=console)
            item_id = Prompt.ask("Item ID", console=console)
            print_result(service.borrow(borrower_id, item_id))
        elif choice == 7:
            borrower_id = Prompt.ask("Borrower ID", console=console)
            item_id = Prompt.ask("Item ID", console=console)
            print_result(service.return_item(borrower_id, item_id))
        elif choice == 8:
            records = service.list_transactions()
            if records:
                console.print(format_record_table(records))
            else:
                print_info("No transactions recorded")
        elif choice == 9:
            show_statistics(service)
        else:
            print_error(f"Invalid choice: {choice}")


def _shell_add_item(service: LendingService) -> None:
    fields = {
        "item_id": Prompt.ask("ID (ISBN)", console=console),
        "title": Prompt.ask("Title", console=console),
        "contributor": Prompt.ask("Contributor", console=console, default="Unknown"),
        "category": Prompt.ask("Category", console=console, default="General"),
        "publish_date": date.today(),
    }
    try:
        service.add_item(Item.create(**fields))
    except LendingError as e:
        print_error(str(e))
        return
    print_success(f"Added: {fields['title']}")


def _shell_add_borrower(service: LendingService) -> None:
    fields = {
        "borrower_id": Prompt.ask("Borrower ID", console=console),
        "name": Prompt.ask("Name", console=console),
        "contact": Prompt.ask("Contact", console=console, default="") or None,
        "borrower_class": Prompt.ask(
            "Class",
            console=console,
            choices=[c.value for c in BorrowerClass],
            default=BorrowerClass.STUDENT.value,
        ),
    }
    try:
        service.add_borrower(Borrower.create(**fields))
    except LendingError as e:
        print_error(str(e))
        return
    print_success(f"Registered: {fields['name']}")


# ============================================================================
# Version Command
# ============================================================================


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"circulation version {__version__}")


# ============================================================================
# Main Entry Point
# ============================================================================


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
