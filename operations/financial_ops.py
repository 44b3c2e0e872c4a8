"""
Financial Statement Operations for FreightDesk.

Profit & loss and balance sheet, computed from invoices, expenses and
vendor bills. All amounts are converted to USD.

P&L mapping:
- customer invoices -> service revenue
- vendor invoices -> freight costs
- vendor bills: fuel / airline charges -> freight costs,
  port fees / customs -> handling costs, warehousing -> administrative,
  logistics overheads -> other operating
- expenses: salaries -> salaries, bills -> utilities, marketing -> marketing,
  office supplies -> administrative, travel / miscellaneous -> other operating
"""

import logging
from datetime import date
from typing import Iterable, Optional

from data.interface import DatabaseInterface
from domain.currency import convert_currency
from domain.models import BalanceSheet, Expense, Invoice, ProfitLoss, VendorBill
from domain.rules import is_balanced

from .expense_ops import list_expenses, list_vendor_bills
from .invoice_ops import list_invoices

logger = logging.getLogger(__name__)

REPORTING_CURRENCY = "USD"

VENDOR_BILL_PL_LINES = {
    "fuel": "freight_costs",
    "airline_charges": "freight_costs",
    "port_fees": "handling_costs",
    "customs": "handling_costs",
    "warehousing": "administrative",
    "logistics_overheads": "other_operating",
}

EXPENSE_PL_LINES = {
    "salaries": "salaries",
    "bills": "utilities",
    "marketing": "marketing",
    "office_supplies": "administrative",
    "travel": "other_operating",
    "miscellaneous": "other_operating",
}


def _to_usd(amount: float, currency: str) -> float:
    return convert_currency(amount or 0, currency or "USD", REPORTING_CURRENCY)


def _in_range(value: str, start_date: str, end_date: str) -> bool:
    # ISO dates compare correctly as strings
    return bool(value) and start_date <= value[:10] <= end_date


# ==================== Profit & Loss ====================


def calculate_profit_loss(
    invoices: Iterable[Invoice],
    expenses: Iterable[Expense],
    vendor_bills: Iterable[VendorBill],
    start_date: str,
    end_date: str,
) -> ProfitLoss:
    """
    Build a profit & loss statement for [start_date, end_date] (inclusive).

    Margins are 0 when there is no revenue.
    """
    pl = ProfitLoss(start_date=start_date, end_date=end_date)

    for invoice in invoices:
        if not _in_range(invoice.invoice_date, start_date, end_date):
            continue
        amount = _to_usd(invoice.total, invoice.currency)
        if invoice.party_type == "vendor":
            pl.freight_costs += amount
        else:
            pl.service_revenue += amount

    for bill in vendor_bills:
        if not _in_range(bill.date, start_date, end_date):
            continue
        line = VENDOR_BILL_PL_LINES.get(bill.category, "other_operating")
        setattr(pl, line, getattr(pl, line) + _to_usd(bill.amount, bill.currency))

    for expense in expenses:
        if not _in_range(expense.date, start_date, end_date):
            continue
        line = EXPENSE_PL_LINES.get(expense.category, "other_operating")
        setattr(pl, line, getattr(pl, line) + _to_usd(expense.amount, expense.currency))

    pl.total_revenue = pl.service_revenue + pl.freight_revenue + pl.other_income
    pl.total_cost_of_services = pl.freight_costs + pl.handling_costs
    pl.gross_profit = pl.total_revenue - pl.total_cost_of_services
    pl.gross_margin = (pl.gross_profit / pl.total_revenue * 100) if pl.total_revenue > 0 else 0.0

    pl.total_operating_expenses = (
        pl.salaries
        + pl.rent
        + pl.utilities
        + pl.insurance
        + pl.depreciation
        + pl.marketing
        + pl.administrative
        + pl.other_operating
    )
    pl.operating_income = pl.gross_profit - pl.total_operating_expenses

    pl.total_other_expenses = pl.interest_expense + pl.taxes
    pl.net_income = pl.operating_income - pl.total_other_expenses
    pl.net_margin = (pl.net_income / pl.total_revenue * 100) if pl.total_revenue > 0 else 0.0

    return pl


def generate_profit_loss(db: DatabaseInterface, start_date: str, end_date: str) -> ProfitLoss:
    """
    Load invoices, expenses and vendor bills and build the P&L.

    Raises:
        DatabaseError: If loading fails
    """
    pl = calculate_profit_loss(
        list_invoices(db),
        list_expenses(db),
        list_vendor_bills(db),
        start_date,
        end_date,
    )
    logger.info(f"P&L {pl.period}: revenue {pl.total_revenue:.2f}, net {pl.net_income:.2f} USD")
    return pl


# ==================== Balance Sheet ====================


def calculate_balance_sheet(
    invoices: Iterable[Invoice],
    expenses: Iterable[Expense],
    as_of_date: Optional[str] = None,
) -> BalanceSheet:
    """
    Build a balance sheet.

    - receivables: customer invoices, max(total - paid, 0)
    - payables: vendor invoices max(total - paid, 0) + unpaid expenses
    - current year earnings: receivables - payables

    Documents dated after as_of_date are left out.
    """
    as_of = as_of_date or date.today().isoformat()
    sheet = BalanceSheet(as_of_date=as_of)

    receivables = 0.0
    vendor_payables = 0.0
    for invoice in invoices:
        if invoice.invoice_date and invoice.invoice_date[:10] > as_of:
            continue
        total = _to_usd(invoice.total, invoice.currency)
        paid = _to_usd(invoice.paid_amount, invoice.currency)
        outstanding = max(total - paid, 0.0)
        if invoice.party_type == "vendor":
            vendor_payables += outstanding
        else:
            receivables += outstanding

    outstanding_expenses = sum(
        _to_usd(e.amount, e.currency)
        for e in expenses
        if e.status != "paid" and not (e.date and e.date[:10] > as_of)
    )

    sheet.accounts_receivable = receivables
    sheet.accounts_payable = vendor_payables + outstanding_expenses
    sheet.current_year_earnings = receivables - sheet.accounts_payable

    sheet.total_current_assets = (
        sheet.cash + sheet.accounts_receivable + sheet.inventory + sheet.prepaid_expenses
    )
    sheet.net_fixed_assets = sheet.property_plant_equipment + sheet.accumulated_depreciation
    sheet.total_assets = sheet.total_current_assets + sheet.net_fixed_assets + sheet.other_assets

    sheet.total_current_liabilities = (
        sheet.accounts_payable + sheet.accrued_expenses + sheet.short_term_debt
    )
    sheet.total_long_term_liabilities = sheet.long_term_debt + sheet.other_long_term
    sheet.total_liabilities = sheet.total_current_liabilities + sheet.total_long_term_liabilities

    sheet.total_equity = sheet.owners_equity + sheet.retained_earnings + sheet.current_year_earnings
    sheet.total_liabilities_and_equity = sheet.total_liabilities + sheet.total_equity

    return sheet


def generate_balance_sheet(db: DatabaseInterface, as_of_date: Optional[str] = None) -> BalanceSheet:
    """
    Load invoices and expenses and build the balance sheet.

    Raises:
        DatabaseError: If loading fails
    """
    sheet = calculate_balance_sheet(list_invoices(db), list_expenses(db), as_of_date)
    logger.info(
        f"Balance sheet as of {sheet.as_of_date}: assets {sheet.total_assets:.2f}, "
        f"liabilities+equity {sheet.total_liabilities_and_equity:.2f} USD"
    )
    return sheet


def balance_sheet_is_balanced(sheet: BalanceSheet) -> bool:
    """True when assets equal liabilities + equity within 0.01."""
    return is_balanced(sheet.total_assets, sheet.total_liabilities_and_equity)
