"""
Unit tests for Ledger Operations.

Tests cover manual entries, ledger views, the chart of accounts and
ledger rows derived from invoices and expenses.
"""

import pytest

from data import create_database
from domain.exceptions import ValidationError
from domain.models import Expense, Invoice, LedgerEntry
from operations.ledger_ops import (
    build_customer_group_ledger,
    build_party_ledger,
    create_ledger_entry,
    delete_ledger_entry,
    derive_expense_entries,
    derive_ledger_entries,
    find_account,
    get_ledger_totals,
    group_accounts_by_type,
    list_ledger_entries,
)


@pytest.fixture
def db():
    """Create in-memory database for testing."""
    database = create_database("sqlite", ":memory:")
    yield database
    database.close()


def _entry(**kwargs):
    values = {
        "date": "2024-01-01",
        "party_id": "c1",
        "party_name": "Acme",
        "description": "Invoice INV-1",
        "debit": 100.0,
    }
    values.update(kwargs)
    return LedgerEntry(**values)


# ==================== Entries ====================


def test_create_and_list_entries(db):
    create_ledger_entry(db, _entry(date="2024-01-01", debit=1000.0))
    create_ledger_entry(db, _entry(date="2024-02-01", debit=0.0, credit=300.0, type="payment"))
    create_ledger_entry(db, _entry(party_type="vendor", party_id="v1", party_name="Carrier"))

    customer_entries = list_ledger_entries(db, "customer", "c1")
    assert [e.date for e in customer_entries] == ["2024-02-01", "2024-01-01"]
    assert len(list_ledger_entries(db)) == 3
    assert [e.party_id for e in list_ledger_entries(db, "vendor")] == ["v1"]


def test_create_entry_rejects_both_amounts(db):
    with pytest.raises(ValidationError):
        create_ledger_entry(db, _entry(debit=10.0, credit=10.0))

    assert list_ledger_entries(db) == []


def test_non_numeric_amount_stored_as_zero(db):
    created = create_ledger_entry(db, _entry(debit="nan", credit=100.0, type="payment"))

    assert created.debit == 0.0
    assert created.credit == 100.0
    assert [e.credit for e in list_ledger_entries(db, party_id="c1")] == [100.0]


def test_delete_entry(db):
    created = create_ledger_entry(db, _entry())

    assert delete_ledger_entry(db, created.id) is True
    assert delete_ledger_entry(db, created.id) is False


# ==================== Views ====================


def test_ledger_totals():
    totals = get_ledger_totals([
        _entry(debit=1000.0),
        _entry(debit=0.0, credit=300.0),
        _entry(debit=200.0),
    ])

    assert totals["count"] == 3
    assert totals["total_debit"] == 1200.0
    assert totals["total_credit"] == 300.0
    assert totals["balance"] == 900.0
    assert totals["outstanding"] == 900.0


def test_ledger_totals_overpaid_has_no_outstanding():
    totals = get_ledger_totals([_entry(debit=0.0, credit=50.0)])
    assert totals["balance"] == -50.0
    assert totals["outstanding"] == 0.0


def test_party_ledger_running_balance():
    entries = [
        _entry(id="3", date="2024-03-01", debit=200.0),
        _entry(id="1", date="2024-01-01", debit=1000.0),
        _entry(id="x", party_id="c2", date="2024-01-15", debit=999.0),
        _entry(id="2", date="2024-02-01", debit=0.0, credit=300.0),
    ]

    ledger = build_party_ledger(entries, "c1")

    assert [e.id for e in ledger] == ["1", "2", "3"]
    assert [e.balance for e in ledger] == [1000.0, 700.0, 900.0]


def test_customer_group_ledger_excludes_vendors():
    entries = [
        _entry(id="1", party_id="c1"),
        _entry(id="2", party_id="c2", date="2024-01-02"),
        _entry(id="3", party_type="vendor", party_id="v1"),
    ]

    assert [e.id for e in build_customer_group_ledger(entries)] == ["1", "2"]
    assert [e.id for e in build_customer_group_ledger(entries, "c2")] == ["2"]


def test_chart_of_accounts():
    grouped = group_accounts_by_type()

    assert set(grouped) == {"asset", "liability", "equity", "revenue", "expense"}
    assert find_account("1100").name == "Accounts Receivable"
    assert find_account("0000") is None


# ==================== Derived Entries ====================


def test_derive_ledger_entries_skips_settled():
    invoices = [
        Invoice(id="1", invoice_number="INV-1", total=100.0, paid_amount=0.0, status="sent"),
        Invoice(id="2", invoice_number="INV-2", total=100.0, paid_amount=100.0, status="sent"),
        Invoice(id="3", invoice_number="INV-3", total=100.0, paid_amount=0.0, status="paid"),
        Invoice(id="4", invoice_number="INV-4", total=100.0, paid_amount=0.0, status="cancelled"),
        Invoice(id="5", invoice_number="INV-5", total=100.0, paid_amount=40.0, status="partially_paid"),
    ]

    rows = derive_ledger_entries(invoices, "USD")

    assert [r.id for r in rows] == ["1", "5"]
    assert rows[1].outstanding == 60.0
    assert rows[0].description == "Invoice INV-1"
    assert len(derive_ledger_entries(invoices, "USD", include_settled=True)) == 5


def test_derive_ledger_entries_converts_currency():
    invoices = [Invoice(id="1", total=100.0, currency="GBP", status="sent")]

    row = derive_ledger_entries(invoices, "USD")[0]

    assert row.total == pytest.approx(127.0)
    assert row.outstanding == pytest.approx(127.0)
    assert row.source == "invoice"


def test_derive_expense_entries():
    expenses = [
        Expense(id="e1", category="travel", amount=100.0, currency="EUR", status="pending"),
        Expense(id="e2", category="bills", amount=50.0, status="paid", vendor_name="Power Co"),
    ]

    rows = derive_expense_entries(expenses, "USD")

    assert rows[0].outstanding == pytest.approx(108.0)
    assert rows[0].party_name == "Operational Expense"
    assert rows[0].invoice_number == "EXP-TRAVEL"
    assert rows[0].category == "travel"
    assert rows[1].outstanding == 0.0
    assert rows[1].paid == 50.0
    assert rows[1].status == "paid"
