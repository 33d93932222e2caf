"""Tests for the lend form state."""

from datetime import date

import pytest
from pydantic import ValidationError

from libraryconsole.lending.form import DEFAULT_LOAN_DAYS, LendForm


@pytest.fixture
def form():
    return LendForm.initial(today=date(2024, 1, 20))


class TestLendForm:
    """Tests for LendForm."""

    def test_initial_state(self, form):
        assert form.reader_id == ""
        assert form.book_id == ""
        assert form.borrow_date == date(2024, 1, 20)
        assert form.loan_days == DEFAULT_LOAN_DAYS
        assert form.due_date == date(2024, 2, 3)

    def test_changing_loan_days_rederives_due_date(self, form):
        form.set_loan_days(15)
        assert form.due_date == date(2024, 2, 4)

    def test_changing_borrow_date_rederives_due_date(self, form):
        form.set_loan_days(10)
        form.set_borrow_date(date(2024, 12, 25))
        assert form.due_date == date(2025, 1, 4)

    def test_empty_borrow_date_falls_back_to_today(self, form):
        form.set_borrow_date(None)
        assert form.borrow_date == date.today()

    def test_due_date_editable_independently(self, form):
        form.set_due_date(date(2024, 3, 1))
        assert form.due_date == date(2024, 3, 1)
        assert form.loan_days == DEFAULT_LOAN_DAYS

    def test_due_date_edited_flag(self, form):
        assert not form.due_date_edited
        form.set_due_date(date(2024, 3, 1))
        assert form.due_date_edited
        form.set_loan_days(10)
        assert not form.due_date_edited

    def test_edit_after_manual_due_date_rederives(self, form):
        form.set_due_date(date(2024, 3, 1))
        form.set_loan_days(1)
        assert form.due_date == date(2024, 1, 21)

    def test_out_of_range_days_clears_due_date(self, form):
        form.set_loan_days(400)
        assert form.due_date is None
        assert "loan_days" in form.validate()

    def test_validate_requires_reader_and_book(self, form):
        errors = form.validate()
        assert set(errors) == {"reader_id", "book_id"}
        assert not form.is_valid()

    def test_validate_due_before_borrow(self, form):
        form.reader_id = "r1"
        form.book_id = "b1"
        form.set_due_date(date(2024, 1, 1))
        assert "due_date" in form.validate()

    def test_valid_form_builds_request(self, form):
        form.reader_id = "r1"
        form.book_id = "b1"
        form.set_loan_days(7)

        assert form.is_valid()
        request = form.to_loan_create()
        assert request.to_payload() == {"bookId": "b1", "readerId": "r1", "loanDays": 7}

    def test_invalid_form_refuses_request(self, form):
        with pytest.raises(ValidationError):
            form.to_loan_create()

    def test_reset(self, form):
        form.reader_id = "r1"
        form.set_loan_days(30)
        form.reset(today=date(2024, 5, 1))

        assert form.reader_id == ""
        assert form.loan_days == DEFAULT_LOAN_DAYS
        assert form.due_date == date(2024, 5, 15)
