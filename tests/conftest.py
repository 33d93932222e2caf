"""Pytest configuration and shared fixtures.

This module provides fixtures for testing libraryconsole, including loan
factories, mocked backend services and an isolated configuration.
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Generator, Optional
from unittest.mock import MagicMock

import pytest

from libraryconsole.config import reset_config
from libraryconsole.lending.schemas import Loan


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path) -> Generator[Path, None, None]:
    """Point the config at a temporary session file for every test."""
    reset_config()
    session_path = tmp_path / "session.json"
    saved = {
        key: os.environ.get(key)
        for key in ("LIBRARY_SESSION_PATH", "LIBRARY_API_URL", "LIBRARY_DEFAULT_LOAN_DAYS")
    }
    os.environ["LIBRARY_SESSION_PATH"] = str(session_path)
    os.environ["LIBRARY_API_URL"] = "http://backend.test/api"
    os.environ.pop("LIBRARY_DEFAULT_LOAN_DAYS", None)

    yield session_path

    reset_config()
    for key, value in saved.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value


# ============================================================================
# Sample Data Fixtures
# ============================================================================


def loan_data(
    loan_id: str = "loan-1",
    reader: Optional[dict] = None,
    book: Optional[dict] = None,
    borrowed_at: Optional[str] = "2024-06-01T10:00:00",
    due_date: str = "2024-06-15T10:00:00",
    returned_at: Optional[str] = None,
    status: Optional[str] = None,
    no_reader: bool = False,
) -> dict:
    """Raw backend JSON for a loan."""
    data = {
        "_id": loan_id,
        "reader": None if no_reader else (reader or {"_id": "r1", "name": "Alice", "email": "alice@example.com"}),
        "book": book or {"_id": "b1", "title": "Dune"},
        "borrowedAt": borrowed_at,
        "dueDate": due_date,
        "returnedAt": returned_at,
    }
    if status is not None:
        data["status"] = status
    return data


@pytest.fixture
def make_loan():
    """Factory building Loan snapshots from backend-shaped data."""

    def _make(**kwargs) -> Loan:
        return Loan.model_validate(loan_data(**kwargs))

    return _make


@pytest.fixture
def now() -> datetime:
    """Reference time: 2024-06-20 noon, local."""
    return datetime(2024, 6, 20, 12, 0, 0)


# ============================================================================
# Mock Service Fixtures
# ============================================================================


@pytest.fixture
def mock_services() -> MagicMock:
    """A Services stand-in whose every facade is a MagicMock."""
    services = MagicMock()
    services.lendings.list.return_value = []
    services.books.list.return_value = []
    services.readers.list.return_value = []
    return services


# ============================================================================
# CLI Testing Fixtures
# ============================================================================


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner."""
    from typer.testing import CliRunner
    return CliRunner()


@pytest.fixture
def cli_app():
    """Get the CLI app for testing."""
    from libraryconsole.cli import app
    return app
