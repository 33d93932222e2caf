"""Lending lifecycle rules.

Pure functions over Loan snapshots: due date arithmetic, status derivation,
overdue classification and per-reader grouping. Nothing here caches a result;
"now" is read fresh on every call unless passed explicitly.

Naive datetimes are interpreted as local time.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional, Union

from ..config import MAX_LOAN_DAYS, MIN_LOAN_DAYS
from .schemas import (
    UNKNOWN_READER_ID,
    UNKNOWN_READER_NAME,
    Loan,
    LoanStatus,
    OverdueGroup,
    local_date,
)

DateLike = Union[date, datetime]


def _aware(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.astimezone()
    return moment


def _now(now: Optional[datetime]) -> datetime:
    return _aware(now) if now is not None else datetime.now(timezone.utc)


def compute_due_date(borrow_date: date, loan_days: int) -> date:
    """Return borrow_date plus loan_days calendar days.

    Raises:
        ValueError: If loan_days is outside [1, 365]
    """
    if not MIN_LOAN_DAYS <= loan_days <= MAX_LOAN_DAYS:
        raise ValueError(
            f"loan_days must be between {MIN_LOAN_DAYS} and {MAX_LOAN_DAYS}"
        )
    return borrow_date + timedelta(days=loan_days)


def derive_status(loan: Loan, now: Optional[datetime] = None) -> LoanStatus:
    """Current status of a loan.

    An authoritative status from the backend always wins. Otherwise a
    returned loan is RETURNED, and an open loan is OVERDUE strictly after
    its due date.
    """
    if loan.status is not None:
        return loan.status
    if loan.returned_at is not None:
        return LoanStatus.RETURNED
    if _now(now) > _aware(loan.due_date):
        return LoanStatus.OVERDUE
    return LoanStatus.BORROWED


def is_returned(loan: Loan) -> bool:
    """True once the loan has been closed."""
    return loan.returned_at is not None or derive_status(loan) == LoanStatus.RETURNED


def is_overdue(loan: Loan, now: Optional[datetime] = None) -> bool:
    """True for an open loan whose due date has passed.

    Only the return state is consulted; an authoritative BORROWED or
    OVERDUE status does not change the answer.
    """
    if is_returned(loan):
        return False
    return _aware(loan.due_date) < _now(now)


def _days_between(reference: DateLike, today: Optional[date]) -> int:
    today = today or date.today()
    return max((today - local_date(reference)).days, 0)


def days_overdue(due_date: DateLike, today: Optional[date] = None) -> int:
    """Whole calendar days past the due date, never negative."""
    return _days_between(due_date, today)


def days_since_borrowed(borrowed_at: DateLike, today: Optional[date] = None) -> int:
    """Whole calendar days since the loan started, never negative."""
    return _days_between(borrowed_at, today)


def group_overdue_by_reader(
    loans: Iterable[Loan],
    now: Optional[datetime] = None,
) -> list[OverdueGroup]:
    """Group currently overdue loans per reader.

    Loans keep their source order within a group; groups are ordered by
    reader name, case-insensitively. Loans without a reader land in a
    single "Unknown Reader" group, as do loans whose reader
    reference carries no id.
    """
    groups: dict[str, OverdueGroup] = {}

    for loan in loans:
        if not is_overdue(loan, now):
            continue

        reader = loan.reader
        reader_id = (reader.id if reader else None) or UNKNOWN_READER_ID
        if reader_id not in groups:
            groups[reader_id] = OverdueGroup(
                reader_id=reader_id,
                reader_name=(reader.name if reader and reader.name else UNKNOWN_READER_NAME),
                reader_email=reader.email if reader else None,
            )
        groups[reader_id].items.append(loan)

    return sorted(groups.values(), key=lambda g: g.reader_name.casefold())


def filter_loans(
    loans: Iterable[Loan],
    search: Optional[str] = None,
    reader_id: Optional[str] = None,
    book_id: Optional[str] = None,
    status: Optional[LoanStatus] = None,
    now: Optional[datetime] = None,
) -> list[Loan]:
    """Filter loans the way the lending list view does.

    Args:
        loans: Loans to filter
        search: Case-insensitive term matched against reader name, book
            title, borrow date, due date (YYYY-MM-DD) and derived status
        reader_id: Only loans for this reader
        book_id: Only loans of this book
        status: Only loans with this derived status
        now: Reference time for status derivation

    Returns:
        Matching loans in their original order
    """
    term = (search or "").strip().lower()
    results = []

    for loan in loans:
        derived = derive_status(loan, now)

        if reader_id and loan.reader_id != reader_id:
            continue
        if book_id and loan.book_id != book_id:
            continue
        if status and derived != status:
            continue

        if term:
            haystack = [
                (loan.reader.name or "").lower() if loan.reader else "",
                (loan.book.title or "").lower() if loan.book else "",
                local_date(loan.borrowed_at).isoformat() if loan.borrowed_at else "",
                local_date(loan.due_date).isoformat(),
                derived.value.lower(),
            ]
            if not any(term in field for field in haystack):
                continue

        results.append(loan)

    return results
