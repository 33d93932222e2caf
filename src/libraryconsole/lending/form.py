"""Lend form state.

Keeps the provisional due date consistent with the borrow date and loan
days before a loan is submitted. The backend computes the authoritative
due date; the value held here is only for display.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..config import MAX_LOAN_DAYS, MIN_LOAN_DAYS
from .rules import compute_due_date
from .schemas import LoanCreate

DEFAULT_LOAN_DAYS = 14


@dataclass
class LendForm:
    """Working state of the "new lending" form."""

    reader_id: str = ""
    book_id: str = ""
    borrow_date: date = field(default_factory=date.today)
    loan_days: int = DEFAULT_LOAN_DAYS
    due_date: Optional[date] = None

    def __post_init__(self):
        if self.due_date is None:
            self._rederive()

    @classmethod
    def initial(cls, loan_days: int = DEFAULT_LOAN_DAYS, today: Optional[date] = None) -> "LendForm":
        """Fresh form: borrowed today, due loan_days from now."""
        return cls(borrow_date=today or date.today(), loan_days=loan_days)

    def _rederive(self) -> None:
        try:
            self.due_date = compute_due_date(self.borrow_date, self.loan_days)
        except ValueError:
            # Out-of-range loan days; validate() reports it
            self.due_date = None

    def set_loan_days(self, loan_days: int) -> None:
        self.loan_days = loan_days
        self._rederive()

    def set_borrow_date(self, borrow_date: Optional[date]) -> None:
        """Change the borrow date; an empty value falls back to today."""
        self.borrow_date = borrow_date or date.today()
        self._rederive()

    def set_due_date(self, due_date: date) -> None:
        """Edit the due date directly, without touching loan days."""
        self.due_date = due_date

    @property
    def due_date_edited(self) -> bool:
        """True when the due date no longer follows borrow date and loan days."""
        try:
            return self.due_date != compute_due_date(self.borrow_date, self.loan_days)
        except ValueError:
            return False

    def validate(self) -> dict[str, str]:
        """Field-scoped validation messages; empty when the form is valid."""
        errors = {}
        if not self.reader_id.strip():
            errors["reader_id"] = "Select a reader."
        if not self.book_id.strip():
            errors["book_id"] = "Select a book."
        if not MIN_LOAN_DAYS <= self.loan_days <= MAX_LOAN_DAYS:
            errors["loan_days"] = (
                f"Loan days must be between {MIN_LOAN_DAYS} and {MAX_LOAN_DAYS}."
            )
        if self.due_date is not None and self.due_date < self.borrow_date:
            errors["due_date"] = "Due date cannot be before the borrow date."
        return errors

    def is_valid(self) -> bool:
        return not self.validate()

    def to_loan_create(self) -> LoanCreate:
        """Build the create request.

        Raises:
            ValidationError: If reader, book or loan days are invalid
        """
        return LoanCreate(
            reader_id=self.reader_id,
            book_id=self.book_id,
            loan_days=self.loan_days,
        )

    def reset(self, loan_days: int = DEFAULT_LOAN_DAYS, today: Optional[date] = None) -> None:
        """Clear the form back to its initial state."""
        fresh = LendForm.initial(loan_days, today)
        self.reader_id = fresh.reader_id
        self.book_id = fresh.book_id
        self.borrow_date = fresh.borrow_date
        self.loan_days = fresh.loan_days
        self.due_date = fresh.due_date
