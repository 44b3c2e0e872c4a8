"""
Unit tests for Expense and Vendor Bill Operations.
"""

import pytest
from datetime import date

from data import create_database
from domain.exceptions import NotFoundError, ValidationError
from domain.models import Expense, VendorBill
from operations.expense_ops import (
    create_expense,
    create_vendor_bill,
    delete_expense,
    delete_vendor_bill,
    filter_expenses,
    filter_vendor_bills,
    generate_vendor_job_number,
    get_expense_stats,
    list_expenses,
    list_vendor_bills,
    mark_expense_paid,
    mark_vendor_bill_paid,
    update_expense,
    update_vendor_bill,
)

TODAY = date(2024, 6, 15)


@pytest.fixture
def db():
    """Create in-memory database for testing."""
    database = create_database("sqlite", ":memory:")
    yield database
    database.close()


# ==================== Expenses ====================


def test_create_expense_defaults_date(db):
    created = create_expense(db, Expense(category="travel", amount="120.50"), today=TODAY)

    assert created.id is not None
    assert created.amount == 120.5
    assert created.date == "2024-06-15"
    assert created.paid_date == ""


def test_create_paid_expense_stamps_paid_date(db):
    created = create_expense(db, Expense(amount=10.0, status="paid", date="2024-06-01"), today=TODAY)
    assert created.paid_date == "2024-06-15"


def test_create_expense_requires_positive_amount(db):
    with pytest.raises(ValidationError) as exc_info:
        create_expense(db, Expense(amount=0.0))

    assert "amount" in exc_info.value.field_errors
    assert list_expenses(db) == []


def test_list_expenses_newest_first(db):
    create_expense(db, Expense(amount=1.0, date="2024-01-01"))
    create_expense(db, Expense(amount=2.0, date="2024-03-01"))

    assert [e.date for e in list_expenses(db)] == ["2024-03-01", "2024-01-01"]


def test_update_and_mark_expense_paid(db):
    created = create_expense(db, Expense(amount=10.0, date="2024-06-01"))

    updated = update_expense(db, created.id, {"description": "Taxi"})
    assert updated.description == "Taxi"

    paid = mark_expense_paid(db, updated, today=TODAY)
    assert paid.status == "paid"
    assert paid.paid_date == "2024-06-15"

    assert mark_expense_paid(db, paid, today=date(2025, 1, 1)).paid_date == "2024-06-15"


def test_update_missing_expense_raises(db):
    with pytest.raises(NotFoundError):
        update_expense(db, "missing", {"description": "x"})


def test_delete_expense(db):
    created = create_expense(db, Expense(amount=10.0))
    assert delete_expense(db, created.id) is True
    assert delete_expense(db, created.id) is False


def test_filter_expenses():
    expenses = [
        Expense(id="1", category="travel", currency="USD", amount=1.0),
        Expense(id="2", category="travel", currency="EUR", amount=1.0),
        Expense(id="3", category="bills", currency="USD", amount=1.0),
    ]

    assert [e.id for e in filter_expenses(expenses)] == ["1", "2", "3"]
    assert [e.id for e in filter_expenses(expenses, category="travel")] == ["1", "2"]
    assert [e.id for e in filter_expenses(expenses, currency="USD")] == ["1", "3"]
    assert [e.id for e in filter_expenses(expenses, "travel", "EUR")] == ["2"]


def test_expense_stats():
    stats = get_expense_stats([
        Expense(category="travel", amount=100.0, status="paid"),
        Expense(category="travel", amount=50.0),
        Expense(category="salaries", amount=25.0),
    ])

    assert stats["total"] == 175.0
    assert stats["paid"] == 100.0
    assert stats["pending"] == 75.0
    assert stats["by_category"]["travel"] == 150.0
    assert stats["by_category"]["salaries"] == 25.0
    assert stats["by_category"]["marketing"] == 0.0


# ==================== Vendor Bills ====================


def test_vendor_job_number():
    assert generate_vendor_job_number(year=2024).startswith("VJB-2024-")


def test_create_vendor_bill_generates_job_number(db):
    created = create_vendor_bill(db, VendorBill(vendor_id="v1", vendor_name="Fuel Co", amount=300.0, date="2024-05-01"))

    assert created.job_number.startswith("VJB-")
    assert list_vendor_bills(db, "v1")[0].id == created.id
    assert list_vendor_bills(db, "v2") == []


def test_create_vendor_bill_requires_vendor(db):
    with pytest.raises(ValidationError) as exc_info:
        create_vendor_bill(db, VendorBill(amount=10.0))

    assert exc_info.value.field_errors == {"vendor_id": "Please select a vendor"}


def test_update_and_pay_vendor_bill(db):
    created = create_vendor_bill(db, VendorBill(vendor_id="v1", amount=300.0, job_number="VJB-2024-0001"))
    created.amount = 350.0

    updated = update_vendor_bill(db, created.id, created)
    assert updated.amount == 350.0
    assert updated.job_number == "VJB-2024-0001"

    paid = mark_vendor_bill_paid(db, updated, today=TODAY)
    assert paid.status == "paid"
    assert paid.paid_date == "2024-06-15"

    assert delete_vendor_bill(db, created.id) is True


def test_filter_vendor_bills():
    bills = [
        VendorBill(id="1", vendor_id="v1", status="pending"),
        VendorBill(id="2", vendor_id="v1", status="paid"),
        VendorBill(id="3", vendor_id="v2", status="pending"),
    ]

    assert [b.id for b in filter_vendor_bills(bills, vendor_id="v1")] == ["1", "2"]
    assert [b.id for b in filter_vendor_bills(bills, status="pending")] == ["1", "3"]
    assert [b.id for b in filter_vendor_bills(bills, "v2", "paid")] == []
