"""Typed service facades over the backend REST API.

One class per backend resource. Each method performs exactly one request,
parses the response into schemas and lets BackendError propagate to the
caller. Nothing is retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..auth.schemas import AuthSession, ResetPasswordRequest, SignupRequest, UserProfile
from ..catalog.schemas import (
    Book,
    BookCreate,
    BookUpdate,
    Category,
    CategoryCreate,
    CategoryUpdate,
    Reader,
    ReaderCreate,
    ReaderUpdate,
)
from ..dashboard.schemas import Activity, AuditLog, MonthlyLending
from ..lending.schemas import Loan, LoanCreate, OverdueBook
from .client import BackendClient, BackendResponseError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_list(data: Any, model: Type[ModelT], label: str) -> list[ModelT]:
    """Parse a list response.

    Accepts a bare array or an envelope with a "data" array. Rows that do
    not match the schema are skipped and logged.

    Raises:
        BackendResponseError: If the body holds no list at all
    """
    if isinstance(data, dict) and isinstance(data.get("data"), list):
        data = data["data"]
    if not isinstance(data, list):
        raise BackendResponseError(f"Invalid {label} format received")

    items = []
    for index, row in enumerate(data):
        try:
            items.append(model.model_validate(row))
        except ValidationError as e:
            logger.warning(
                "Skipping malformed %s row %d: %s", label, index, e.errors()[0]["msg"]
            )
    return items


def parse_one(data: Any, model: Type[ModelT], label: str) -> ModelT:
    """Parse a single-entity response, unwrapping a "data" envelope."""
    if isinstance(data, dict) and isinstance(data.get("data"), dict):
        data = data["data"]
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise BackendResponseError(f"Invalid {label} received: {e.errors()[0]['msg']}")


def parse_count(data: Any, label: str) -> int:
    """Parse a count response: a bare integer, or {"count": n} / {"total": n}."""
    if isinstance(data, dict):
        data = data.get("count", data.get("total"))
    if isinstance(data, bool) or not isinstance(data, (int, float, str)):
        raise BackendResponseError(f"Invalid {label} count received")
    try:
        return int(data)
    except ValueError:
        raise BackendResponseError(f"Invalid {label} count received")


def _message(data: Any, default: str) -> str:
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return default


class AuthService:
    """Login, signup and password management."""

    def __init__(self, client: BackendClient):
        self.client = client

    def login(self, email: str, password: str) -> AuthSession:
        """Log in and attach the returned token to the client."""
        data = self.client.post("/auth/login", json={"email": email, "password": password})
        if not isinstance(data, dict) or not data.get("token"):
            raise BackendResponseError("Login response did not include a token")
        session = AuthSession(
            token=data["token"],
            user=UserProfile.model_validate(data.get("user") or {}),
        )
        self.client.set_token(session.token)
        return session

    def signup(self, request: SignupRequest) -> str:
        data = self.client.post("/auth/signup", json=request.to_payload())
        return _message(data, "Account created")

    def logout(self) -> None:
        """End the session server-side and drop the token."""
        try:
            self.client.post("/auth/logout")
        finally:
            self.client.set_token(None)

    def forgot_password(self, email: str) -> str:
        data = self.client.post("/auth/forgot-password", json={"email": email})
        return _message(data, "Reset token sent to your email")

    def reset_password(self, request: ResetPasswordRequest) -> str:
        data = self.client.post("/auth/reset-password", json=request.to_payload())
        return _message(data, "Password reset successfully")


class BookService:
    def __init__(self, client: BackendClient):
        self.client = client

    def list(self) -> list[Book]:
        return parse_list(self.client.get("/books"), Book, "book")

    def create(self, data: BookCreate) -> Book:
        return parse_one(self.client.post("/books", json=data.to_payload()), Book, "book")

    def update(self, book_id: str, data: BookUpdate) -> Book:
        return parse_one(
            self.client.put(f"/books/{book_id}", json=data.to_payload()), Book, "book"
        )

    def delete(self, book_id: str) -> None:
        self.client.delete(f"/books/{book_id}")

    def count(self) -> int:
        return parse_count(self.client.get("/books/count"), "book")


class CategoryService:
    def __init__(self, client: BackendClient):
        self.client = client

    def list(self) -> list[Category]:
        return parse_list(self.client.get("/categories"), Category, "category")

    def create(self, data: CategoryCreate) -> Category:
        return parse_one(
            self.client.post("/categories", json=data.to_payload()), Category, "category"
        )

    def update(self, category_id: str, data: CategoryUpdate) -> Category:
        return parse_one(
            self.client.put(f"/categories/{category_id}", json=data.to_payload()),
            Category,
            "category",
        )

    def delete(self, category_id: str) -> None:
        self.client.delete(f"/categories/{category_id}")


class ReaderService:
    def __init__(self, client: BackendClient):
        self.client = client

    def list(self) -> list[Reader]:
        return parse_list(self.client.get("/readers"), Reader, "reader")

    def create(self, data: ReaderCreate) -> Reader:
        return parse_one(self.client.post("/readers", json=data.to_payload()), Reader, "reader")

    def update(self, reader_id: str, data: ReaderUpdate) -> Reader:
        return parse_one(
            self.client.put(f"/readers/{reader_id}", json=data.to_payload()),
            Reader,
            "reader",
        )

    def delete(self, reader_id: str) -> None:
        self.client.delete(f"/readers/{reader_id}")

    def count(self) -> int:
        return parse_count(self.client.get("/readers/count"), "reader")


class LendingService:
    """Lendings endpoints. The backend is the only writer of loan state."""

    def __init__(self, client: BackendClient):
        self.client = client

    def list(self) -> list[Loan]:
        return parse_list(self.client.get("/lendings"), Loan, "lending")

    def lend(self, data: LoanCreate) -> Loan:
        return parse_one(self.client.post("/lendings", json=data.to_payload()), Loan, "lending")

    def return_book(self, loan_id: str) -> Optional[Loan]:
        """Close a loan. Returns the updated loan when the backend echoes it.

        The return has already succeeded once the request does, so a body
        without a usable loan yields None rather than an error.
        """
        data = self.client.put(f"/lendings/{loan_id}/return")
        if isinstance(data, dict) and "data" in data:
            data = data["data"]
        if not isinstance(data, dict) or "dueDate" not in data:
            return None
        try:
            return parse_one(data, Loan, "lending")
        except BackendResponseError as e:
            logger.warning("Ignoring unreadable return echo for %s: %s", loan_id, e)
            return None

    def list_overdue(self) -> list[Loan]:
        return parse_list(self.client.get("/lendings/overdue"), Loan, "lending")

    def count_overdue(self) -> int:
        return parse_count(self.client.get("/lendings/overdue/count"), "overdue lending")

    def count_total(self) -> int:
        return parse_count(self.client.get("/lendings/count"), "lending")

    def monthly_summary(self) -> list[MonthlyLending]:
        return parse_list(self.client.get("/lendings/monthly"), MonthlyLending, "monthly lending")


class AuditService:
    def __init__(self, client: BackendClient):
        self.client = client

    def list(self) -> list[AuditLog]:
        return parse_list(self.client.get("/audit-logs"), AuditLog, "audit log")


class ActivityService:
    def __init__(self, client: BackendClient):
        self.client = client

    def recent(self) -> list[Activity]:
        return parse_list(self.client.get("/activity/recent"), Activity, "activity")


class EmailService:
    def __init__(self, client: BackendClient):
        self.client = client

    def send_overdue_notice(
        self,
        email: str,
        reader_name: str,
        books: Sequence[OverdueBook],
    ) -> str:
        """Send one overdue notice listing every book."""
        data = self.client.post(
            "/email/overdue",
            json={
                "email": email,
                "readerName": reader_name,
                "books": [book.to_payload() for book in books],
            },
        )
        return _message(data, f"Email sent to {reader_name}")


@dataclass
class Services:
    """All service facades sharing one client."""

    client: BackendClient
    auth: AuthService
    books: BookService
    categories: CategoryService
    readers: ReaderService
    lendings: LendingService
    audit: AuditService
    activity: ActivityService
    email: EmailService

    @classmethod
    def from_client(cls, client: BackendClient) -> "Services":
        return cls(
            client=client,
            auth=AuthService(client),
            books=BookService(client),
            categories=CategoryService(client),
            readers=ReaderService(client),
            lendings=LendingService(client),
            audit=AuditService(client),
            activity=ActivityService(client),
            email=EmailService(client),
        )
