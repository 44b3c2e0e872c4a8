"""
Ledger Operations for FreightDesk.

Manual ledger entries and the ledger views built on them:
- customer / vendor ledger (one party)
- customer group ledger (all customer entries, optional party filter)
- general ledger (every entry plus the chart of accounts)

Running balance: entries sorted by date, balance_n = balance_(n-1) +
debit_n - credit_n (domain.rules.apply_running_balance).

Also derives ledger rows from invoices and expenses for the outstanding
receivables/payables views.
"""

import logging
from typing import Dict, Iterable, List, Optional

from config.constants import COLLECTION_LEDGER
from data.interface import DatabaseInterface
from domain.currency import convert_currency
from domain.exceptions import DatabaseError
from domain.models import (
    Account,
    DerivedLedgerEntry,
    Expense,
    Invoice,
    LedgerEntry,
    STANDARD_ACCOUNTS,
)
from domain.rules import AMOUNT_EPSILON, apply_running_balance, is_settled
from domain.validators import validate_ledger_entry

logger = logging.getLogger(__name__)


# ==================== Entries ====================


def create_ledger_entry(db: DatabaseInterface, entry: LedgerEntry) -> LedgerEntry:
    """
    Validate and store a manual ledger entry.

    Args:
        db: Database instance (injected)
        entry: Entry from the form

    Returns:
        Stored entry with id

    Raises:
        ValidationError: Party missing, description empty, or not exactly
                         one of debit/credit non-zero
        DatabaseError: If the write fails

    Example:
        >>> entry = create_ledger_entry(db, LedgerEntry(party_id=customer.id,
        ...     party_name="Acme", description="Payment received", credit=500,
        ...     type="payment", date="2024-03-01"))
    """
    validated = validate_ledger_entry(entry)
    data = validated.to_dict()
    for key in ("id", "created_at", "updated_at", "balance"):
        data.pop(key, None)

    try:
        document = db.create_document(COLLECTION_LEDGER, data)
    except Exception as e:
        logger.exception(f"Error creating ledger entry for {validated.party_name}")
        raise DatabaseError(
            f"Failed to create ledger entry: {e}",
            details={"party_id": validated.party_id},
        )

    logger.info(
        f"Ledger entry {document['id']} for {validated.party_type} {validated.party_name}: "
        f"debit {validated.debit:.2f} credit {validated.credit:.2f}"
    )
    return LedgerEntry.from_dict(document)


def list_ledger_entries(
    db: DatabaseInterface,
    party_type: Optional[str] = None,
    party_id: Optional[str] = None,
) -> List[LedgerEntry]:
    """
    List ledger entries, newest date first.

    Raises:
        DatabaseError: If query fails
    """
    filters = {}
    if party_type:
        filters["party_type"] = party_type
    if party_id:
        filters["party_id"] = party_id

    try:
        documents = db.list_documents(
            COLLECTION_LEDGER,
            filters=filters or None,
            order_by="date",
            descending=True,
        )
    except Exception as e:
        logger.exception("Error listing ledger entries")
        raise DatabaseError(f"Failed to list ledger entries: {e}", details=filters)

    return [LedgerEntry.from_dict(doc) for doc in documents]


def delete_ledger_entry(db: DatabaseInterface, entry_id: str) -> bool:
    """Delete ledger entry. Returns False if it did not exist."""
    try:
        deleted = db.delete_document(COLLECTION_LEDGER, entry_id)
    except Exception as e:
        logger.exception(f"Error deleting ledger entry {entry_id}")
        raise DatabaseError(f"Failed to delete ledger entry: {e}", details={"entry_id": entry_id})

    if deleted:
        logger.info(f"Deleted ledger entry {entry_id}")
    return deleted


# ==================== Ledger Views ====================


def get_ledger_totals(entries: Iterable[LedgerEntry]) -> Dict[str, float]:
    """
    Totals for a ledger view.

    Returns:
        total_debit, total_credit, balance (debit - credit) and
        outstanding (balance floored at 0)
    """
    entries = list(entries)
    total_debit = sum(e.debit for e in entries)
    total_credit = sum(e.credit for e in entries)
    balance = total_debit - total_credit
    return {
        "count": len(entries),
        "total_debit": total_debit,
        "total_credit": total_credit,
        "balance": balance,
        "outstanding": max(balance, 0.0),
    }


def build_party_ledger(
    entries: Iterable[LedgerEntry],
    party_id: Optional[str] = None,
) -> List[LedgerEntry]:
    """
    Entries for one party (or all when party_id is None) in date order with
    the running balance filled in.
    """
    selected = [e for e in entries if party_id is None or e.party_id == party_id]
    return apply_running_balance(selected)


def build_customer_group_ledger(
    entries: Iterable[LedgerEntry],
    customer_id: Optional[str] = None,
) -> List[LedgerEntry]:
    """Customer entries only, optionally narrowed to one customer."""
    customer_entries = [e for e in entries if e.party_type == "customer" and e.party_id]
    return build_party_ledger(customer_entries, customer_id)


def group_accounts_by_type(accounts: Iterable[Account] = STANDARD_ACCOUNTS) -> Dict[str, List[Account]]:
    """Chart of accounts grouped as asset / liability / equity / revenue / expense."""
    grouped: Dict[str, List[Account]] = {}
    for account in accounts:
        grouped.setdefault(account.type, []).append(account)
    return grouped


def find_account(code: str, accounts: Iterable[Account] = STANDARD_ACCOUNTS) -> Optional[Account]:
    """Find account by code."""
    return next((a for a in accounts if a.code == code), None)


# ==================== Derived Entries ====================


def derive_ledger_entries(
    invoices: Iterable[Invoice],
    display_currency: str,
    include_settled: bool = False,
    epsilon: float = AMOUNT_EPSILON,
) -> List[DerivedLedgerEntry]:
    """
    Ledger rows from invoices, converted to display_currency.

    outstanding = max(total - paid, 0). An invoice is settled when
    outstanding <= epsilon or it is paid/cancelled; settled invoices are
    left out unless include_settled is True.
    """
    rows = []
    for invoice in invoices:
        currency = invoice.currency or "USD"
        total = convert_currency(invoice.total or 0, currency, display_currency)
        paid = convert_currency(invoice.paid_amount or 0, currency, display_currency)
        outstanding = max(total - paid, 0.0)

        if not include_settled and is_settled(total, paid, invoice.status, epsilon):
            continue

        rows.append(DerivedLedgerEntry(
            id=invoice.id,
            party_type=invoice.party_type or "customer",
            party_id=invoice.party_id,
            party_name=invoice.party_name,
            invoice_number=invoice.invoice_number,
            job_number=invoice.job_number,
            description=invoice.notes or f"Invoice {invoice.invoice_number}",
            date=invoice.invoice_date,
            status=invoice.status,
            total=total,
            paid=paid,
            outstanding=outstanding,
            source="invoice",
        ))
    return rows


def derive_expense_entries(expenses: Iterable[Expense], display_currency: str) -> List[DerivedLedgerEntry]:
    """Ledger rows from expenses (paid expenses have nothing outstanding)."""
    rows = []
    for expense in expenses:
        amount = convert_currency(expense.amount or 0, expense.currency or "USD", display_currency)
        paid = expense.status == "paid"
        rows.append(DerivedLedgerEntry(
            id=expense.id,
            party_type="vendor",
            party_id=expense.vendor_name,
            party_name=expense.vendor_name or "Operational Expense",
            invoice_number=expense.reference or f"EXP-{expense.category.upper()}",
            job_number=expense.job_number,
            description=expense.description or expense.reference or "Logistics Expense",
            date=expense.date,
            status="paid" if paid else "sent",
            total=amount,
            paid=amount if paid else 0.0,
            outstanding=0.0 if paid else amount,
            source="expense",
            category=expense.category,
        ))
    return rows
