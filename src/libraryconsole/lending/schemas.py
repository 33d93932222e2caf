"""Pydantic schemas for lendings.

Loans arrive from the backend with camelCase keys and populated (or bare id)
reader/book references. They are parsed into frozen snapshots: the
denormalized reader name and book title are copied at fetch time and never
written back.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..config import MAX_LOAN_DAYS, MIN_LOAN_DAYS

UNKNOWN_READER_ID = "unknown"
UNKNOWN_READER_NAME = "Unknown Reader"


def local_date(value: Union[date, datetime]) -> date:
    """Calendar day of a date or datetime, in local time."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone().date()
        return value.date()
    return value


class LoanStatus(str, Enum):
    """Status of a loan."""

    BORROWED = "BORROWED"
    OVERDUE = "OVERDUE"
    RETURNED = "RETURNED"


def _coerce_reference(value: Any) -> Any:
    """Expand an unpopulated reference (bare id) into a mapping."""
    if isinstance(value, str):
        return {"_id": value} if value else None
    return value


class ReaderRef(BaseModel):
    """Reader snapshot embedded in a loan."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: Optional[str] = Field(None, alias="_id")
    name: Optional[str] = None
    email: Optional[str] = None


class BookRef(BaseModel):
    """Book snapshot embedded in a loan."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: Optional[str] = Field(None, alias="_id")
    title: Optional[str] = None


class Loan(BaseModel):
    """A single lending record as reported by the backend."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., alias="_id")
    reader: Optional[ReaderRef] = None
    book: Optional[BookRef] = None
    borrowed_at: Optional[datetime] = Field(None, alias="borrowedAt")
    due_date: datetime = Field(..., alias="dueDate")
    returned_at: Optional[datetime] = Field(None, alias="returnedAt")
    # Authoritative status; None means "derive locally"
    status: Optional[LoanStatus] = None

    @field_validator("reader", "book", mode="before")
    @classmethod
    def expand_reference(cls, v):
        return _coerce_reference(v)

    @field_validator("status", mode="before")
    @classmethod
    def blank_status_is_absent(cls, v):
        if isinstance(v, str):
            v = v.strip().upper()
            return v or None
        return v

    @property
    def reader_id(self) -> Optional[str]:
        return self.reader.id if self.reader else None

    @property
    def reader_name(self) -> str:
        if self.reader and self.reader.name:
            return self.reader.name
        return "-"

    @property
    def book_id(self) -> Optional[str]:
        return self.book.id if self.book else None

    @property
    def book_title(self) -> str:
        if self.book and self.book.title:
            return self.book.title
        return "-"


class LoanCreate(BaseModel):
    """Schema for creating a loan."""

    model_config = ConfigDict(populate_by_name=True)

    reader_id: str = Field(..., min_length=1, alias="readerId")
    book_id: str = Field(..., min_length=1, alias="bookId")
    loan_days: int = Field(14, ge=MIN_LOAN_DAYS, le=MAX_LOAN_DAYS, alias="loanDays")

    @field_validator("reader_id", "book_id")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    def to_payload(self) -> dict:
        """Request body for the lend endpoint."""
        return {
            "bookId": self.book_id,
            "readerId": self.reader_id,
            "loanDays": self.loan_days,
        }


class OverdueBook(BaseModel):
    """One line of an overdue notice."""

    title: str
    due_date: date

    def to_payload(self) -> dict:
        return {"title": self.title, "dueDate": self.due_date.isoformat()}


class OverdueGroup(BaseModel):
    """A reader's currently overdue loans, notified as one message."""

    reader_id: str
    reader_name: str
    reader_email: Optional[str] = None
    items: list[Loan] = Field(default_factory=list)

    @property
    def has_contact(self) -> bool:
        return bool(self.reader_email and self.reader_email.strip())

    def notice_books(self) -> list[OverdueBook]:
        """Title and due date of every loan in the group."""
        return [
            OverdueBook(title=loan.book_title, due_date=local_date(loan.due_date))
            for loan in self.items
        ]
