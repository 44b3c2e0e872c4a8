"""
Unit tests for Financial Statement Operations (P&L and balance sheet).
"""

import pytest

from data import create_database
from domain.models import BalanceSheet, Expense, Invoice, LineItem, VendorBill
from operations.expense_ops import create_expense, create_vendor_bill
from operations.financial_ops import (
    balance_sheet_is_balanced,
    calculate_balance_sheet,
    calculate_profit_loss,
    generate_balance_sheet,
    generate_profit_loss,
)
from operations.invoice_ops import create_invoice


@pytest.fixture
def db():
    """Create in-memory database for testing."""
    database = create_database("sqlite", ":memory:")
    yield database
    database.close()


# ==================== Profit & Loss ====================


def test_profit_loss_mapping():
    invoices = [
        Invoice(party_type="customer", invoice_date="2024-03-10", total=1000.0),
        Invoice(party_type="customer", invoice_date="2024-03-20", total=100.0, currency="EUR"),
        Invoice(party_type="vendor", invoice_date="2024-03-15", total=300.0),
        Invoice(party_type="customer", invoice_date="2024-05-01", total=5000.0),
    ]
    vendor_bills = [
        VendorBill(category="fuel", amount=50.0, date="2024-03-02"),
        VendorBill(category="customs", amount=40.0, date="2024-03-03"),
        VendorBill(category="warehousing", amount=30.0, date="2024-03-04"),
    ]
    expenses = [
        Expense(category="salaries", amount=200.0, date="2024-03-31"),
        Expense(category="bills", amount=20.0, date="2024-03-05"),
        Expense(category="travel", amount=10.0, date="2024-02-28"),
    ]

    pl = calculate_profit_loss(invoices, expenses, vendor_bills, "2024-03-01", "2024-03-31")

    assert pl.service_revenue == pytest.approx(1108.0)
    assert pl.total_revenue == pytest.approx(1108.0)
    assert pl.freight_costs == pytest.approx(350.0)
    assert pl.handling_costs == pytest.approx(40.0)
    assert pl.total_cost_of_services == pytest.approx(390.0)
    assert pl.gross_profit == pytest.approx(718.0)
    assert pl.salaries == 200.0
    assert pl.utilities == 20.0
    assert pl.administrative == 30.0
    assert pl.other_operating == 0.0
    assert pl.total_operating_expenses == pytest.approx(250.0)
    assert pl.net_income == pytest.approx(468.0)
    assert pl.net_margin == pytest.approx(468.0 / 1108.0 * 100)
    assert pl.period == "2024-03-01 to 2024-03-31"


def test_profit_loss_without_revenue_has_zero_margins():
    pl = calculate_profit_loss([], [Expense(amount=10.0, date="2024-01-01")], [], "2024-01-01", "2024-12-31")

    assert pl.total_revenue == 0.0
    assert pl.gross_margin == 0.0
    assert pl.net_margin == 0.0
    assert pl.net_income == -10.0


def test_generate_profit_loss_from_database(db):
    create_invoice(db, Invoice(party_id="c1", party_name="Acme", invoice_date="2024-04-01"))
    create_expense(db, Expense(category="marketing", amount=25.0, date="2024-04-02"))
    create_vendor_bill(db, VendorBill(vendor_id="v1", category="port_fees", amount=15.0, date="2024-04-03"))

    pl = generate_profit_loss(db, "2024-04-01", "2024-04-30")

    assert pl.marketing == 25.0
    assert pl.handling_costs == 15.0
    assert pl.net_income == -40.0


# ==================== Balance Sheet ====================


def test_balance_sheet_receivables_and_payables():
    invoices = [
        Invoice(party_type="customer", invoice_date="2024-01-10", total=1000.0, paid_amount=400.0),
        Invoice(party_type="customer", invoice_date="2024-01-11", total=100.0, paid_amount=150.0),
        Invoice(party_type="vendor", invoice_date="2024-01-12", total=300.0),
        Invoice(party_type="customer", invoice_date="2024-12-01", total=9999.0),
    ]
    expenses = [
        Expense(amount=50.0, date="2024-01-05"),
        Expense(amount=70.0, date="2024-01-06", status="paid"),
    ]

    sheet = calculate_balance_sheet(invoices, expenses, "2024-06-30")

    assert sheet.as_of_date == "2024-06-30"
    assert sheet.accounts_receivable == 600.0
    assert sheet.accounts_payable == 350.0
    assert sheet.current_year_earnings == 250.0
    assert sheet.total_assets == 600.0
    assert sheet.total_liabilities == 350.0
    assert sheet.total_equity == 250.0
    assert sheet.total_liabilities_and_equity == 600.0
    assert balance_sheet_is_balanced(sheet)


def test_balance_sheet_is_balanced_boundary():
    assert balance_sheet_is_balanced(BalanceSheet(total_assets=100.0, total_liabilities_and_equity=100.005))
    assert not balance_sheet_is_balanced(BalanceSheet(total_assets=100.0, total_liabilities_and_equity=100.02))
    assert not balance_sheet_is_balanced(BalanceSheet(total_assets=0.0, total_liabilities_and_equity=0.01))


def test_generate_balance_sheet_from_database(db):
    create_invoice(db, Invoice(party_id="c1", party_name="Acme", invoice_date="2024-01-01",
                               line_items=[LineItem(id="IMP-1", amount=500.0)]))
    create_expense(db, Expense(amount=120.0, date="2024-01-02"))

    sheet = generate_balance_sheet(db, "2024-12-31")

    assert sheet.accounts_receivable == 500.0
    assert sheet.accounts_payable == 120.0
    assert balance_sheet_is_balanced(sheet)
