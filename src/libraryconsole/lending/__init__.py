"""Lending lifecycle module.

Provides functionality for:
- Due date computation for new loans
- Status derivation (borrowed / overdue / returned)
- Lend and return workflows against the backend
- Overdue grouping and notification per reader
"""

from .form import DEFAULT_LOAN_DAYS, LendForm
from .manager import (
    LendingManager,
    LoanAlreadyReturnedError,
    LoanNotFoundError,
    MissingContactError,
)
from .rules import (
    compute_due_date,
    days_overdue,
    days_since_borrowed,
    derive_status,
    filter_loans,
    group_overdue_by_reader,
    is_overdue,
    is_returned,
)
from .schemas import (
    BookRef,
    Loan,
    LoanCreate,
    LoanStatus,
    OverdueBook,
    OverdueGroup,
    ReaderRef,
)

__all__ = [
    "DEFAULT_LOAN_DAYS",
    "LendForm",
    "LendingManager",
    "LoanAlreadyReturnedError",
    "LoanNotFoundError",
    "MissingContactError",
    "compute_due_date",
    "days_overdue",
    "days_since_borrowed",
    "derive_status",
    "filter_loans",
    "group_overdue_by_reader",
    "is_overdue",
    "is_returned",
    "BookRef",
    "Loan",
    "LoanCreate",
    "LoanStatus",
    "OverdueBook",
    "OverdueGroup",
    "ReaderRef",
]
