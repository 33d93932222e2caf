"""Tests for the CLI interface."""

import pytest
from typer.testing import CliRunner

from libraryconsole.api.client import BackendConflictError, BackendError
from libraryconsole.auth.schemas import AuthSession, UserProfile
from libraryconsole.auth.session import SessionStore
from libraryconsole.catalog.schemas import Book
from libraryconsole.cli import app


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def services(mock_services, monkeypatch):
    """Route every command to mocked backend services."""
    monkeypatch.setattr("libraryconsole.cli.get_services", lambda: mock_services)
    return mock_services


class TestCLIBasics:
    """Tests for basic CLI functionality."""

    def test_help(self, runner: CliRunner):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Administer the library" in result.stdout

    def test_version(self, runner: CliRunner):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.stdout


class TestAuthCommands:
    """Tests for auth commands."""

    def test_whoami_logged_out(self, runner: CliRunner):
        result = runner.invoke(app, ["auth", "whoami"])
        assert result.exit_code == 0
        assert "Not logged in" in result.stdout

    def test_login_saves_session(self, runner: CliRunner, services, isolated_config):
        services.auth.login.return_value = AuthSession(
            token="t0k", user=UserProfile(name="Admin", email="admin@example.com")
        )

        result = runner.invoke(
            app, ["auth", "login", "--email", "admin@example.com", "--password", "pw"]
        )

        assert result.exit_code == 0
        assert "Logged in as Admin" in result.stdout
        assert SessionStore(isolated_config).load().token == "t0k"

    def test_login_invalid_email(self, runner: CliRunner, services):
        result = runner.invoke(app, ["auth", "login", "--email", "admin", "--password", "pw"])
        assert result.exit_code == 1
        assert "Invalid email" in result.stdout
        services.auth.login.assert_not_called()

    def test_login_rejected(self, runner: CliRunner, services, isolated_config):
        services.auth.login.side_effect = BackendError("Invalid credentials")
        result = runner.invoke(
            app, ["auth", "login", "--email", "admin@example.com", "--password", "pw"]
        )
        assert result.exit_code == 1
        assert "Login failed" in result.stdout
        assert not isolated_config.exists()

    def test_logout_clears_session(self, runner: CliRunner, services, isolated_config):
        SessionStore(isolated_config).save(AuthSession(token="t0k"))

        result = runner.invoke(app, ["auth", "logout"])

        assert result.exit_code == 0
        assert "Logged out" in result.stdout
        services.auth.logout.assert_called_once()
        assert not isolated_config.exists()


class TestCatalogCommands:
    """Tests for book, category and reader commands."""

    def test_books_list(self, runner: CliRunner, services):
        services.books.list.return_value = [
            Book(id="b1", title="Dune", author="Herbert", total_copies=2, available_copies=1),
            Book(id="b2", title="Emma", author="Austen", total_copies=1, available_copies=1),
        ]
        result = runner.invoke(app, ["books", "list", "--search", "dune"])
        assert result.exit_code == 0
        assert "Dune" in result.stdout
        assert "Emma" not in result.stdout

    def test_books_list_failure(self, runner: CliRunner, services):
        services.books.list.side_effect = BackendError("down")
        result = runner.invoke(app, ["books", "list"])
        assert result.exit_code == 1
        assert "Failed to load books" in result.stdout

    def test_books_update_nothing(self, runner: CliRunner, services):
        result = runner.invoke(app, ["books", "update", "b1"])
        assert result.exit_code == 1
        assert "Nothing to update" in result.stdout
        services.books.update.assert_not_called()

    def test_readers_add_requires_phone(self, runner: CliRunner, services):
        result = runner.invoke(
            app, ["readers", "add", "--name", "Alice", "--email", "a@example.com", "--phone", " "]
        )
        assert result.exit_code == 1
        assert "Invalid phone" in result.stdout
        services.readers.create.assert_not_called()

    def test_delete_cancelled(self, runner: CliRunner, services):
        result = runner.invoke(app, ["categories", "delete", "c1"], input="n\n")
        assert "Cancelled" in result.stdout
        services.categories.delete.assert_not_called()


class TestLoansList:
    """Tests for loans list."""

    def test_empty(self, runner: CliRunner, services):
        result = runner.invoke(app, ["loans", "list"])
        assert result.exit_code == 0
        assert "No lending records found" in result.stdout

    def test_rows(self, runner: CliRunner, services, make_loan):
        services.lendings.list.return_value = [make_loan(loan_id="l1")]
        result = runner.invoke(app, ["loans", "list"])
        assert result.exit_code == 0
        assert "Alice" in result.stdout
        assert "Dune" in result.stdout

    def test_invalid_status(self, runner: CliRunner, services):
        result = runner.invoke(app, ["loans", "list", "--status", "lost"])
        assert result.exit_code == 1
        assert "Invalid status" in result.stdout

    def test_load_failure(self, runner: CliRunner, services):
        services.lendings.list.side_effect = BackendError("down")
        result = runner.invoke(app, ["loans", "list"])
        assert result.exit_code == 1
        assert "Failed to load lending data" in result.stdout


class TestLoansLend:
    """Tests for loans lend."""

    def test_lend(self, runner: CliRunner, services, make_loan):
        services.lendings.lend.return_value = make_loan(loan_id="new")

        result = runner.invoke(
            app, ["loans", "lend", "r1", "b1", "--days", "7", "--borrow-date", "2024-06-01"]
        )

        assert result.exit_code == 0
        assert "due 2024-06-08" in result.stdout
        assert "Lending created" in result.stdout
        data = services.lendings.lend.call_args.args[0]
        assert data.to_payload() == {"bookId": "b1", "readerId": "r1", "loanDays": 7}

    @pytest.mark.parametrize("days", ["0", "366"])
    def test_invalid_days(self, runner: CliRunner, services, days):
        result = runner.invoke(app, ["loans", "lend", "r1", "b1", "--days", days])
        assert result.exit_code == 1
        assert "Invalid loan_days" in result.stdout
        services.lendings.lend.assert_not_called()

    def test_manual_due_date(self, runner: CliRunner, services, make_loan):
        services.lendings.lend.return_value = make_loan(loan_id="new")

        result = runner.invoke(
            app,
            ["loans", "lend", "r1", "b1", "--days", "7",
             "--borrow-date", "2024-06-01", "--due-date", "2024-06-20"],
        )

        assert result.exit_code == 0
        assert "due 2024-06-20" in result.stdout
        assert "from loan days" in result.stdout
        data = services.lendings.lend.call_args.args[0]
        assert data.loan_days == 7

    def test_due_date_before_borrow_date(self, runner: CliRunner, services):
        result = runner.invoke(
            app,
            ["loans", "lend", "r1", "b1", "--borrow-date", "2024-06-01", "--due-date", "2024-05-01"],
        )
        assert result.exit_code == 1
        assert "Invalid due_date" in result.stdout
        services.lendings.lend.assert_not_called()

    def test_invalid_borrow_date(self, runner: CliRunner, services):
        result = runner.invoke(app, ["loans", "lend", "r1", "b1", "--borrow-date", "June"])
        assert result.exit_code == 1
        assert "Invalid borrow date" in result.stdout

    def test_backend_rejects(self, runner: CliRunner, services):
        services.lendings.lend.side_effect = BackendConflictError("No copies available")
        result = runner.invoke(app, ["loans", "lend", "r1", "b1"])
        assert result.exit_code == 1
        assert "No copies available" in result.stdout


class TestLoansReturn:
    """Tests for loans return."""

    def test_return(self, runner: CliRunner, services, make_loan):
        services.lendings.list.return_value = [make_loan(loan_id="l1")]
        services.lendings.return_book.return_value = None

        result = runner.invoke(app, ["loans", "return", "l1", "--yes"])

        assert result.exit_code == 0
        assert "Book returned" in result.stdout
        services.lendings.return_book.assert_called_once_with("l1")

    def test_unknown_loan(self, runner: CliRunner, services):
        result = runner.invoke(app, ["loans", "return", "missing", "--yes"])
        assert result.exit_code == 1
        services.lendings.return_book.assert_not_called()

    def test_conflict(self, runner: CliRunner, services, make_loan):
        services.lendings.list.return_value = [make_loan(loan_id="l1")]
        services.lendings.return_book.side_effect = BackendConflictError("Already returned")

        result = runner.invoke(app, ["loans", "return", "l1", "--yes"])

        assert result.exit_code == 1
        assert "Failed to mark returned" in result.stdout
        assert services.lendings.return_book.call_count == 1


class TestOverdue:
    """Tests for overdue listing and notices."""

    def test_none_overdue(self, runner: CliRunner, services):
        services.lendings.list_overdue.return_value = []
        result = runner.invoke(app, ["loans", "overdue"])
        assert result.exit_code == 0
        assert "No overdue lendings!" in result.stdout

    def test_grouped(self, runner: CliRunner, services, make_loan):
        services.lendings.list_overdue.return_value = [
            make_loan(loan_id="l1", due_date="2020-01-01T00:00:00"),
            make_loan(loan_id="l2", book={"_id": "b2", "title": "Emma"}, due_date="2020-02-01T00:00:00"),
        ]
        result = runner.invoke(app, ["loans", "overdue"])
        assert result.exit_code == 0
        assert "Overdue lendings: 2" in result.stdout
        assert "Alice" in result.stdout

    def test_notify_reader(self, runner: CliRunner, services, make_loan):
        services.lendings.list_overdue.return_value = [
            make_loan(loan_id="l1", due_date="2020-01-01T00:00:00"),
        ]
        services.email.send_overdue_notice.return_value = "Email sent to Alice"

        result = runner.invoke(app, ["loans", "notify", "r1"])

        assert result.exit_code == 0
        assert "Email sent to Alice" in result.stdout
        services.email.send_overdue_notice.assert_called_once()

    def test_notify_missing_email(self, runner: CliRunner, services, make_loan):
        services.lendings.list_overdue.return_value = [
            make_loan(loan_id="l1", reader={"_id": "r9", "name": "Zed"}, due_date="2020-01-01T00:00:00"),
        ]
        result = runner.invoke(app, ["loans", "notify", "--all"])
        assert result.exit_code == 1
        assert "Missing email for Zed" in result.stdout
        services.email.send_overdue_notice.assert_not_called()

    def test_notify_unknown_reader(self, runner: CliRunner, services):
        services.lendings.list_overdue.return_value = []
        result = runner.invoke(app, ["loans", "notify", "r1"])
        assert result.exit_code == 1
        assert "No overdue lendings for reader r1" in result.stdout


class TestDashboard:
    """Tests for dashboard, audit and activity."""

    def test_dashboard_partial(self, runner: CliRunner, services):
        services.books.count.return_value = 10
        services.readers.count.return_value = 4
        services.lendings.count_total.return_value = 20
        services.lendings.count_overdue.side_effect = BackendError("down")
        services.lendings.monthly_summary.return_value = []
        services.activity.recent.return_value = []

        result = runner.invoke(app, ["dashboard"])

        assert result.exit_code == 0
        assert "Total Books: 10" in result.stdout
        assert "Failed to load overdue" in result.stdout

    def test_audit_empty(self, runner: CliRunner, services):
        services.audit.list.return_value = []
        result = runner.invoke(app, ["audit"])
        assert result.exit_code == 0
        assert "No audit logs found" in result.stdout
