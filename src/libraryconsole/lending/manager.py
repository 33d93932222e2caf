"""Lending manager: the console's working set of loans and its transitions."""

import logging
from typing import TYPE_CHECKING, Optional

from ..api.client import BackendError
from ..api.parallel import FetchResult, fetch_all
from ..catalog.schemas import Book, Reader
from .rules import group_overdue_by_reader, is_overdue, is_returned
from .schemas import Loan, LoanCreate, OverdueGroup

if TYPE_CHECKING:
    from ..api.services import BookService, EmailService, LendingService, ReaderService

logger = logging.getLogger(__name__)


class LoanNotFoundError(ValueError):
    """Raised when a loan is not in the working set."""

    pass


class LoanAlreadyReturnedError(ValueError):
    """Raised when returning a loan that is already closed."""

    pass


class MissingContactError(ValueError):
    """Raised when notifying a reader without an e-mail address."""

    def __init__(self, reader_name: str):
        super().__init__(f"Missing email for {reader_name}")
        self.reader_name = reader_name


class LendingManager:
    """Manages loans for one fetch cycle.

    The backend is the only writer of loan state. The manager holds
    read-only snapshots, replaces them only after a successful fetch and
    never inserts a loan before the backend has confirmed it.
    """

    def __init__(
        self,
        lendings: "LendingService",
        books: Optional["BookService"] = None,
        readers: Optional["ReaderService"] = None,
        email: Optional["EmailService"] = None,
        max_workers: int = 4,
    ):
        """Initialize lending manager.

        Args:
            lendings: Lending service
            books: Book service, needed for load_workspace
            readers: Reader service, needed for load_workspace
            email: Email service, needed for notify_overdue_group
            max_workers: Concurrent fetches in load_workspace
        """
        self.lendings = lendings
        self.book_service = books
        self.reader_service = readers
        self.email_service = email
        self.max_workers = max_workers

        self.loans: list[Loan] = []
        self.books: list[Book] = []
        self.readers: list[Reader] = []

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def refresh(self) -> list[Loan]:
        """Re-fetch all loans. The working set is untouched if the fetch fails."""
        loans = self.lendings.list()
        self.loans = loans
        return loans

    def load_workspace(self) -> dict[str, FetchResult]:
        """Fetch loans, books and readers concurrently.

        Each successful fetch replaces its part of the working set; a failed
        one keeps the previous data and is reported under its own key.

        Returns:
            Results keyed by "loans", "books" and "readers"
        """
        tasks = {"loans": self.lendings.list}
        if self.book_service is not None:
            tasks["books"] = self.book_service.list
        if self.reader_service is not None:
            tasks["readers"] = self.reader_service.list

        results = fetch_all(tasks, max_workers=self.max_workers)

        if results["loans"].ok:
            self.loans = results["loans"].value
        if "books" in results and results["books"].ok:
            self.books = results["books"].value
        if "readers" in results and results["readers"].ok:
            self.readers = results["readers"].value

        return results

    def load_overdue(self) -> list[Loan]:
        """Fetch the overdue list and keep the loans that are overdue right now."""
        loans = [loan for loan in self.lendings.list_overdue() if is_overdue(loan)]
        self.loans = loans
        return loans

    def get_loan(self, loan_id: str) -> Optional[Loan]:
        for loan in self.loans:
            if loan.id == loan_id:
                return loan
        return None

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def create_loan(self, data: LoanCreate) -> Loan:
        """Lend a book.

        Args:
            data: Validated create request

        Returns:
            The loan as created by the backend

        Raises:
            BackendError: If the backend rejects the loan; nothing is added
        """
        loan = self.lendings.lend(data)
        self.loans.append(loan)
        logger.info("Loan %s created: book %s to reader %s", loan.id, data.book_id, data.reader_id)
        return loan

    def return_loan(self, loan_id: str) -> None:
        """Mark a loan returned.

        The request is sent once. Whatever the outcome, the working set is
        re-fetched so it reflects the backend rather than a local guess.

        Raises:
            LoanNotFoundError: If the loan is not in the working set
            LoanAlreadyReturnedError: If the loan is already closed
            BackendError: If the backend rejects the return
        """
        loan = self.get_loan(loan_id)
        if loan is None:
            raise LoanNotFoundError(f"Loan not found: {loan_id}")
        if is_returned(loan):
            raise LoanAlreadyReturnedError("Loan is already returned")

        try:
            updated = self.lendings.return_book(loan_id)
        except BackendError:
            self._try_refresh("failed return")
            raise

        logger.info("Loan %s returned", loan_id)
        if not self._try_refresh("return") and updated is not None:
            # Fall back to the backend's echo of the closed loan
            self.loans = [updated if l.id == loan_id else l for l in self.loans]

    def _try_refresh(self, after: str) -> bool:
        try:
            self.refresh()
        except BackendError as e:
            logger.warning("Could not refresh loans after %s: %s", after, e)
            return False
        return True

    # -------------------------------------------------------------------------
    # Overdue notices
    # -------------------------------------------------------------------------

    def overdue_groups(self) -> list[OverdueGroup]:
        """Currently overdue loans of the working set, grouped per reader."""
        return group_overdue_by_reader(self.loans)

    def find_group(self, reader_id: str) -> Optional[OverdueGroup]:
        for group in self.overdue_groups():
            if group.reader_id == reader_id:
                return group
        return None

    def notify_overdue_group(self, group: OverdueGroup) -> str:
        """Send one overdue notice covering all of a reader's overdue loans.

        Raises:
            MissingContactError: If the reader has no e-mail; nothing is sent
            BackendError: If the e-mail service rejects the request
        """
        if not group.has_contact:
            raise MissingContactError(group.reader_name)
        if self.email_service is None:
            raise RuntimeError("LendingManager was created without an email service")

        message = self.email_service.send_overdue_notice(
            group.reader_email.strip(),
            group.reader_name,
            group.notice_books(),
        )
        logger.info(
            "Overdue notice sent to %s for %d loan(s)", group.reader_name, len(group.items)
        )
        return message
