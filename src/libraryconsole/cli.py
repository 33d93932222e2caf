"""Command-line interface for libraryconsole.

Built with Typer for commands and Rich for output.
"""

import logging
from datetime import date, datetime
from typing import NoReturn, Optional, Union

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .api import BackendClient, BackendError, Services
from .auth import (
    ForgotPasswordRequest,
    LoginRequest,
    ResetPasswordRequest,
    SessionStore,
    SignupRequest,
)
from .config import get_config

# Create the main app
app = typer.Typer(
    name="libraryconsole",
    help="Administer the library: books, readers, lendings and overdue notices.",
    no_args_is_help=True,
)

# Create sub-apps for command groups
auth_app = typer.Typer(help="Log in, log out and manage passwords.")
app.add_typer(auth_app, name="auth")
books_app = typer.Typer(help="Manage books.")
app.add_typer(books_app, name="books")
categories_app = typer.Typer(help="Manage book categories.")
app.add_typer(categories_app, name="categories")
readers_app = typer.Typer(help="Manage readers.")
app.add_typer(readers_app, name="readers")
loans_app = typer.Typer(help="Lend and return books, track overdue loans.")
app.add_typer(loans_app, name="loans")

# Rich console for pretty output
console = Console()


# ============================================================================
# Helper Functions
# ============================================================================


def configure_logging(level: str) -> None:
    """Send log records through Rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=False, show_path=False)],
        force=True,
    )


def get_session_store() -> SessionStore:
    return SessionStore(get_config().session_path)


def get_services() -> Services:
    """Build services against the configured backend, with the stored token."""
    config = get_config()
    session = get_session_store().load()
    client = BackendClient(
        config.api_url,
        timeout=config.api_timeout,
        token=session.token if session else None,
    )
    return Services.from_client(client)


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[dim]{message}[/dim]")


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    print_error(message)
    raise typer.Exit(1)


def print_validation_errors(exc: ValidationError) -> NoReturn:
    """Print field-scoped validation messages and exit."""
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"]) or "form"
        message = err["msg"].removeprefix("Value error, ")
        console.print(f"[bold red]Invalid {field}:[/bold red] {message}")
    raise typer.Exit(1)


def format_date(value: Optional[Union[date, datetime]]) -> str:
    if value is None:
        return "-"
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date().isoformat()
    return value.isoformat()


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.strftime("%Y-%m-%d %H:%M")


def parse_date_option(value: Optional[str], name: str) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        fail(f"Invalid {name}: {value} (expected YYYY-MM-DD)")


def status_badge(status) -> str:
    from .lending import LoanStatus

    if status == LoanStatus.RETURNED:
        return "[green]Returned[/green]"
    if status == LoanStatus.OVERDUE:
        return "[bold red]Overdue[/bold red]"
    return "[yellow]Borrowed[/yellow]"


def confirm_or_cancel(question: str, yes: bool) -> bool:
    if yes or typer.confirm(question):
        return True
    print_info("Cancelled")
    return False


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Administer the library: books, readers, lendings and overdue notices."""
    config = get_config()
    configure_logging("DEBUG" if verbose else config.log_level)
    for problem in config.validate():
        print_warning(problem)


@app.command()
def version() -> None:
    """Show the version."""
    console.print(f"libraryconsole {__version__}")


# ============================================================================
# Auth Commands
# ============================================================================


@auth_app.command("login")
def auth_login(
    email: str = typer.Option(..., "--email", "-e", prompt=True, help="Account e-mail"),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True),
) -> None:
    """Log in and remember the session."""
    try:
        request = LoginRequest(email=email, password=password)
    except ValidationError as e:
        print_validation_errors(e)

    services = get_services()
    try:
        session = services.auth.login(request.email, request.password)
    except BackendError as e:
        fail(f"Login failed: {e}")

    get_session_store().save(session)
    print_success(f"Logged in as {session.user.name or session.user.email or request.email}")


@auth_app.command("signup")
def auth_signup(
    name: str = typer.Option(..., "--name", "-n", prompt=True),
    email: str = typer.Option(..., "--email", "-e", prompt=True),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True
    ),
) -> None:
    """Create an administrator account."""
    try:
        request = SignupRequest(
            name=name, email=email, password=password, confirm_password=password
        )
    except ValidationError as e:
        print_validation_errors(e)

    try:
        message = get_services().auth.signup(request)
    except BackendError as e:
        fail(f"Registration failed: {e}")
    print_success(message)


@auth_app.command("logout")
def auth_logout() -> None:
    """Log out and forget the stored session."""
    store = get_session_store()
    if store.load() is None:
        print_info("Not logged in")
        return

    try:
        get_services().auth.logout()
    except BackendError as e:
        print_warning(f"Backend logout failed: {e}")
    finally:
        store.clear()
    print_success("Logged out")


@auth_app.command("forgot-password")
def auth_forgot_password(
    email: str = typer.Argument(..., help="Account e-mail"),
) -> None:
    """Request a password reset token by e-mail."""
    try:
        request = ForgotPasswordRequest(email=email)
    except ValidationError as e:
        print_validation_errors(e)

    try:
        message = get_services().auth.forgot_password(request.email)
    except BackendError as e:
        fail(str(e))
    print_success(message)


@auth_app.command("reset-password")
def auth_reset_password(
    token: str = typer.Option(..., "--token", "-t", prompt=True, help="Token from the e-mail"),
    password: str = typer.Option(
        ..., "--password", "-p", prompt="New password", hide_input=True
    ),
) -> None:
    """Set a new password using a reset token."""
    try:
        request = ResetPasswordRequest(token=token, new_password=password)
    except ValidationError as e:
        print_validation_errors(e)

    try:
        message = get_services().auth.reset_password(request)
    except BackendError as e:
        fail(str(e))
    print_success(message)


@auth_app.command("whoami")
def auth_whoami() -> None:
    """Show the logged-in account."""
    session = get_session_store().load()
    if session is None:
        print_info("Not logged in")
        return
    user = session.user
    console.print(f"[bold]{user.name or '-'}[/bold] <{user.email or '-'}>")
    if user.role:
        print_info(f"Role: {user.role}")


# ============================================================================
# Book Commands
# ============================================================================


@books_app.command("list")
def books_list(
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Title, author or ISBN"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Category ID"),
) -> None:
    """List books."""
    from .catalog import filter_books

    try:
        books = get_services().books.list()
    except BackendError as e:
        fail(f"Failed to load books: {e}")

    books = filter_books(books, search=search, category_id=category)
    if not books:
        print_info("No books found")
        return

    table = Table(title="Books", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan", max_width=40)
    table.add_column("Author", style="green", max_width=25)
    table.add_column("ISBN")
    table.add_column("Category")
    table.add_column("Available", justify="right")

    for book in books:
        available = f"{book.available_copies}/{book.total_copies}"
        if not book.is_available:
            available = f"[red]{available}[/red]"
        table.add_row(
            book.id,
            book.title,
            book.author or "-",
            book.isbn or "-",
            book.category_name or book.category_id or "-",
            available,
        )

    console.print(table)


@books_app.command("add")
def books_add(
    title: str = typer.Option(..., "--title", "-t", help="Book title"),
    author: str = typer.Option(..., "--author", "-a", help="Author"),
    isbn: str = typer.Option(..., "--isbn", "-i", help="ISBN"),
    category: str = typer.Option(..., "--category", "-c", help="Category ID"),
    copies: int = typer.Option(1, "--copies", "-n", help="Total copies"),
) -> None:
    """Add a book."""
    from .catalog import BookCreate

    try:
        data = BookCreate(
            title=title, author=author, isbn=isbn, category=category, total_copies=copies
        )
    except ValidationError as e:
        print_validation_errors(e)

    try:
        book = get_services().books.create(data)
    except BackendError as e:
        fail(f"Failed to add book: {e}")
    print_success(f"Added: {book.title} ({book.id})")


@books_app.command("update")
def books_update(
    book_id: str = typer.Argument(..., help="Book ID"),
    title: Optional[str] = typer.Option(None, "--title", "-t"),
    author: Optional[str] = typer.Option(None, "--author", "-a"),
    isbn: Optional[str] = typer.Option(None, "--isbn", "-i"),
    category: Optional[str] = typer.Option(None, "--category", "-c"),
    copies: Optional[int] = typer.Option(None, "--copies", "-n"),
    available: Optional[int] = typer.Option(None, "--available"),
) -> None:
    """Update a book."""
    from .catalog import BookUpdate

    try:
        data = BookUpdate(
            title=title,
            author=author,
            isbn=isbn,
            category=category,
            total_copies=copies,
            available_copies=available,
        )
    except ValidationError as e:
        print_validation_errors(e)

    if not data.to_payload():
        fail("Nothing to update")

    try:
        book = get_services().books.update(book_id, data)
    except BackendError as e:
        fail(f"Failed to update book: {e}")
    print_success(f"Updated: {book.title}")


@books_app.command("delete")
def books_delete(
    book_id: str = typer.Argument(..., help="Book ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a book."""
    if not confirm_or_cancel(f"Delete book {book_id}?", yes):
        return
    try:
        get_services().books.delete(book_id)
    except BackendError as e:
        fail(f"Failed to delete book: {e}")
    print_success("Book deleted")


# ============================================================================
# Category Commands
# ============================================================================


@categories_app.command("list")
def categories_list(
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Name or description"),
) -> None:
    """List categories."""
    from .catalog import filter_categories

    try:
        categories = get_services().categories.list()
    except BackendError as e:
        fail(f"Failed to load categories: {e}")

    categories = filter_categories(categories, search=search)
    if not categories:
        print_info("No categories found")
        return

    table = Table(title="Categories", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    for category in categories:
        table.add_row(category.id, category.name, category.description or "-")
    console.print(table)


@categories_app.command("add")
def categories_add(
    name: str = typer.Option(..., "--name", "-n", help="Category name"),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
) -> None:
    """Add a category."""
    from .catalog import CategoryCreate

    try:
        data = CategoryCreate(name=name, description=description)
    except ValidationError as e:
        print_validation_errors(e)

    try:
        category = get_services().categories.create(data)
    except BackendError as e:
        fail(f"Failed to add category: {e}")
    print_success(f"Added category: {category.name} ({category.id})")


@categories_app.command("update")
def categories_update(
    category_id: str = typer.Argument(..., help="Category ID"),
    name: Optional[str] = typer.Option(None, "--name", "-n"),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
) -> None:
    """Update a category."""
    from .catalog import CategoryUpdate

    try:
        data = CategoryUpdate(name=name, description=description)
    except ValidationError as e:
        print_validation_errors(e)

    if not data.to_payload():
        fail("Nothing to update")

    try:
        category = get_services().categories.update(category_id, data)
    except BackendError as e:
        fail(f"Failed to update category: {e}")
    print_success(f"Updated category: {category.name}")


@categories_app.command("delete")
def categories_delete(
    category_id: str = typer.Argument(..., help="Category ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a category."""
    if not confirm_or_cancel(f"Delete category {category_id}?", yes):
        return
    try:
        get_services().categories.delete(category_id)
    except BackendError as e:
        fail(f"Failed to delete category: {e}")
    print_success("Category deleted")


# ============================================================================
# Reader Commands
# ============================================================================


@readers_app.command("list")
def readers_list(
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Name, e-mail or phone"),
    domain: Optional[str] = typer.Option(None, "--domain", "-d", help="E-mail domain"),
) -> None:
    """List readers."""
    from .catalog import email_domains, filter_readers

    try:
        readers = get_services().readers.list()
    except BackendError as e:
        fail(f"Failed to load readers: {e}")

    matched = filter_readers(readers, search=search, domain=domain)
    if not matched:
        print_info("No readers found")
        return

    table = Table(title="Readers", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Email", style="green")
    table.add_column("Phone")
    table.add_column("Address", max_width=30)
    for reader in matched:
        table.add_row(
            reader.id,
            reader.name,
            reader.email or "-",
            reader.phone or "-",
            reader.address or "-",
        )
    console.print(table)

    domains = email_domains(readers)
    if domains:
        print_info(f"Domains: {', '.join(domains)}")


@readers_app.command("add")
def readers_add(
    name: str = typer.Option(..., "--name", "-n"),
    email: str = typer.Option(..., "--email", "-e"),
    phone: str = typer.Option(..., "--phone", "-p"),
    address: Optional[str] = typer.Option(None, "--address", "-a"),
) -> None:
    """Add a reader."""
    from .catalog import ReaderCreate

    try:
        data = ReaderCreate(name=name, email=email, phone=phone, address=address)
    except ValidationError as e:
        print_validation_errors(e)

    try:
        reader = get_services().readers.create(data)
    except BackendError as e:
        fail(f"Failed to add reader: {e}")
    print_success(f"Added reader: {reader.name} ({reader.id})")


@readers_app.command("update")
def readers_update(
    reader_id: str = typer.Argument(..., help="Reader ID"),
    name: Optional[str] = typer.Option(None, "--name", "-n"),
    email: Optional[str] = typer.Option(None, "--email", "-e"),
    phone: Optional[str] = typer.Option(None, "--phone", "-p"),
    address: Optional[str] = typer.Option(None, "--address", "-a"),
) -> None:
    """Update a reader."""
    from .catalog import ReaderUpdate

    try:
        data = ReaderUpdate(name=name, email=email, phone=phone, address=address)
    except ValidationError as e:
        print_validation_errors(e)

    if not data.to_payload():
        fail("Nothing to update")

    try:
        reader = get_services().readers.update(reader_id, data)
    except BackendError as e:
        fail(f"Failed to update reader: {e}")
    print_success(f"Updated reader: {reader.name}")


@readers_app.command("delete")
def readers_delete(
    reader_id: str = typer.Argument(..., help="Reader ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a reader."""
    if not confirm_or_cancel(f"Delete reader {reader_id}?", yes):
        return
    try:
        get_services().readers.delete(reader_id)
    except BackendError as e:
        fail(f"Failed to delete reader: {e}")
    print_success("Reader deleted")


# ============================================================================
# Lending Commands
# ============================================================================


def get_lending_manager(services: Services):
    from .lending import LendingManager

    return LendingManager(
        services.lendings,
        books=services.books,
        readers=services.readers,
        email=services.email,
        max_workers=get_config().fetch_workers,
    )


@loans_app.command("list")
def loans_list(
    search: Optional[str] = typer.Option(
        None, "--search", "-s", help="Reader, book, date or status"
    ),
    reader: Optional[str] = typer.Option(None, "--reader", "-r", help="Reader ID"),
    book: Optional[str] = typer.Option(None, "--book", "-b", help="Book ID"),
    status: Optional[str] = typer.Option(
        None, "--status", help="BORROWED, OVERDUE or RETURNED"
    ),
) -> None:
    """List lendings."""
    from .lending import LoanStatus, derive_status, filter_loans, is_overdue

    status_filter = None
    if status:
        try:
            status_filter = LoanStatus(status.upper())
        except ValueError:
            print_error(f"Invalid status: {status}")
            print_info(f"Valid: {', '.join(s.value for s in LoanStatus)}")
            raise typer.Exit(1)

    manager = get_lending_manager(get_services())
    results = manager.load_workspace()
    if not results["loans"].ok:
        fail(f"Failed to load lending data: {results['loans'].error}")
    for name in ("books", "readers"):
        if not results[name].ok:
            print_warning(f"Failed to load {name}: {results[name].error}")

    loans = filter_loans(
        manager.loans,
        search=search,
        reader_id=reader,
        book_id=book,
        status=status_filter,
    )
    if not loans:
        print_info("No lending records found")
        return

    table = Table(title="Lendings", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Reader", style="cyan")
    table.add_column("Book", style="green", max_width=35)
    table.add_column("Borrowed")
    table.add_column("Due")
    table.add_column("Status")

    for loan in loans:
        due = format_date(loan.due_date)
        if is_overdue(loan):
            due = f"[bold red]{due}[/bold red]"
        table.add_row(
            loan.id,
            loan.reader_name,
            loan.book_title,
            format_date(loan.borrowed_at),
            due,
            status_badge(derive_status(loan)),
        )

    console.print(table)


@loans_app.command("lend")
def loans_lend(
    reader_id: str = typer.Argument(..., help="Reader ID"),
    book_id: str = typer.Argument(..., help="Book ID"),
    days: Optional[int] = typer.Option(None, "--days", "-d", help="Loan length in days (1-365)"),
    borrow_date: Optional[str] = typer.Option(
        None, "--borrow-date", help="Borrow date (YYYY-MM-DD), default today"
    ),
    due_date: Optional[str] = typer.Option(
        None, "--due-date", help="Provisional due date (YYYY-MM-DD), default from loan days"
    ),
) -> None:
    """Lend a book to a reader."""
    from .lending import LendForm

    form = LendForm.initial(loan_days=get_config().default_loan_days)
    form.reader_id = reader_id
    form.book_id = book_id
    if borrow_date:
        form.set_borrow_date(parse_date_option(borrow_date, "borrow date"))
    if days is not None:
        form.set_loan_days(days)
    if due_date:
        form.set_due_date(parse_date_option(due_date, "due date"))

    errors = form.validate()
    if errors:
        for field, message in errors.items():
            console.print(f"[bold red]Invalid {field}:[/bold red] {message}")
        raise typer.Exit(1)

    print_info(f"Borrowed {form.borrow_date.isoformat()}, due {format_date(form.due_date)}")
    if form.due_date_edited:
        print_warning("The backend sets the due date from loan days")

    try:
        data = form.to_loan_create()
    except ValidationError as e:
        print_validation_errors(e)

    manager = get_lending_manager(get_services())
    try:
        loan = manager.create_loan(data)
    except BackendError as e:
        fail(f"Failed to create lending: {e}")

    print_success("Lending created")
    console.print(f"[dim]Loan {loan.id}, due {format_date(loan.due_date)}[/dim]")


@loans_app.command("return")
def loans_return(
    loan_id: str = typer.Argument(..., help="Loan ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Mark a lending as returned."""
    manager = get_lending_manager(get_services())
    try:
        manager.refresh()
    except BackendError as e:
        fail(f"Failed to load lending data: {e}")

    if not confirm_or_cancel("Mark as returned?", yes):
        return

    try:
        manager.return_loan(loan_id)
    except ValueError as e:
        fail(str(e))
    except BackendError as e:
        fail(f"Failed to mark returned: {e}")
    print_success("Book returned")


@loans_app.command("overdue")
def loans_overdue() -> None:
    """Show overdue lendings grouped by reader."""
    from .lending import days_overdue, days_since_borrowed

    manager = get_lending_manager(get_services())
    try:
        manager.load_overdue()
    except BackendError as e:
        fail(f"Failed to load overdue lendings: {e}")

    groups = manager.overdue_groups()
    if not groups:
        print_success("No overdue lendings!")
        return

    total = sum(len(g.items) for g in groups)
    console.print(Panel(
        f"[bold red]Overdue lendings: {total}[/bold red]\nReaders affected: {len(groups)}",
        style="red",
    ))

    for group in groups:
        contact = group.reader_email or "[red]no email[/red]"
        table = Table(
            title=f"{group.reader_name} ({group.reader_id}) - {contact}",
            title_justify="left",
            show_header=True,
            header_style="bold red",
        )
        table.add_column("Loan", style="dim")
        table.add_column("Book", style="cyan")
        table.add_column("Borrowed")
        table.add_column("Due")
        table.add_column("Days Out", justify="right")
        table.add_column("Days Overdue", justify="right")

        for loan in group.items:
            table.add_row(
                loan.id,
                loan.book_title,
                format_date(loan.borrowed_at),
                format_date(loan.due_date),
                str(days_since_borrowed(loan.borrowed_at)) if loan.borrowed_at else "-",
                f"[bold red]{days_overdue(loan.due_date)}[/bold red]",
            )
        console.print(table)


@loans_app.command("notify")
def loans_notify(
    reader_id: Optional[str] = typer.Argument(None, help="Reader ID to notify"),
    notify_all: bool = typer.Option(False, "--all", "-a", help="Notify every overdue reader"),
) -> None:
    """E-mail overdue notices, one message per reader."""
    from .lending import MissingContactError

    if not reader_id and not notify_all:
        fail("Give a reader ID or --all")

    manager = get_lending_manager(get_services())
    try:
        manager.load_overdue()
    except BackendError as e:
        fail(f"Failed to load overdue lendings: {e}")

    if notify_all:
        groups = manager.overdue_groups()
    else:
        group = manager.find_group(reader_id)
        if group is None:
            fail(f"No overdue lendings for reader {reader_id}")
        groups = [group]

    if not groups:
        print_success("No overdue lendings!")
        return

    failures = 0
    for group in groups:
        try:
            message = manager.notify_overdue_group(group)
        except MissingContactError as e:
            print_error(str(e))
            failures += 1
            continue
        except BackendError as e:
            print_error(f"Failed to send email to {group.reader_name}: {e}")
            failures += 1
            continue
        print_success(message)

    if failures:
        raise typer.Exit(1)


# ============================================================================
# Audit, Activity and Dashboard
# ============================================================================


@app.command()
def audit() -> None:
    """Show the audit log."""
    try:
        logs = get_services().audit.list()
    except BackendError as e:
        fail(f"Failed to fetch audit logs: {e}")

    if not logs:
        print_info("No audit logs found")
        return

    table = Table(title="Audit Logs", show_header=True, header_style="bold magenta")
    table.add_column("Timestamp")
    table.add_column("User", style="cyan")
    table.add_column("Action")
    table.add_column("Entity")
    table.add_column("Description", max_width=50)

    for log in logs:
        user = log.user_name
        if log.user and log.user.email:
            user = f"{user}\n[dim]{log.user.email}[/dim]"
        table.add_row(
            format_timestamp(log.timestamp),
            user,
            log.action.lower(),
            log.entity,
            log.description or "-",
        )
    console.print(table)


ACTIVITY_STYLES = {
    "LEND": "indian_red",
    "RETURN": "green",
    "READER": "blue",
    "BOOK": "magenta",
    "OVERDUE": "bold red",
}


def print_activities(activities: list) -> None:
    if not activities:
        print_info("No recent activity")
        return
    for activity in activities:
        style = ACTIVITY_STYLES.get(activity.type.value, "white")
        console.print(
            f"[{style}]{activity.type.value:<8}[/{style}] "
            f"{activity.message} [dim]{format_timestamp(activity.timestamp)}[/dim]"
        )


@app.command()
def activity() -> None:
    """Show recent activity."""
    try:
        activities = get_services().activity.recent()
    except BackendError as e:
        fail(f"Failed to load recent activity: {e}")
    print_activities(activities)


@app.command()
def dashboard() -> None:
    """Show the library summary at a glance."""
    from .dashboard import DashboardLoader

    summary = DashboardLoader(get_services(), max_workers=get_config().fetch_workers).load()

    def count(value: Optional[int]) -> str:
        return "-" if value is None else str(value)

    console.print(Panel(
        f"[bold]Total Books:[/bold] {count(summary.book_count)}\n"
        f"[bold]Readers:[/bold] {count(summary.reader_count)}\n"
        f"[bold]Lendings:[/bold] {count(summary.lending_count)}\n"
        f"[bold red]Overdue:[/bold red] {count(summary.overdue_count)}",
        title="Library Summary",
        style="cyan",
    ))

    if summary.monthly_lendings:
        peak = max(m.count for m in summary.monthly_lendings) or 1
        table = Table(title="Monthly Lendings", show_header=True, header_style="bold magenta")
        table.add_column("Month")
        table.add_column("Count", justify="right")
        table.add_column("")
        for month in summary.monthly_lendings:
            bar = "█" * round(30 * month.count / peak)
            table.add_row(month.month, str(month.count), f"[indian_red]{bar}[/indian_red]")
        console.print(table)

    console.print("\n[bold]Recent Activity[/bold]")
    print_activities(summary.recent_activities)

    for name, error in summary.errors.items():
        print_warning(f"Failed to load {name}: {error}")
