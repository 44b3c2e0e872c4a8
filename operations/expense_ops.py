"""
Expense and Vendor Bill Operations for FreightDesk.

Company expenses (bills, salaries, travel, ...) and operational vendor
bills (fuel, port fees, customs, ...). Both have a pending/paid status;
marking as paid stamps today's date.
"""

import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from config.constants import COLLECTION_EXPENSES, COLLECTION_VENDOR_BILLS
from data.interface import DatabaseInterface
from domain.exceptions import DatabaseError, NotFoundError, ValidationError
from domain.models import Expense, VendorBill, EXPENSE_CATEGORIES
from domain.rules import generate_document_number
from domain.validators import validate_positive_amount

logger = logging.getLogger(__name__)

VENDOR_JOB_PREFIX = "VJB"


def _today(today: Optional[date] = None) -> str:
    return (today or date.today()).isoformat()


def _strip_reserved(data: Dict[str, Any]) -> Dict[str, Any]:
    for key in ("id", "created_at", "updated_at"):
        data.pop(key, None)
    return data


def _update(db: DatabaseInterface, collection: str, doc_id: str, changes: Dict[str, Any]) -> dict:
    try:
        return db.update_document(collection, doc_id, _strip_reserved(dict(changes)))
    except NotFoundError:
        raise
    except Exception as e:
        logger.exception(f"Error updating {collection}/{doc_id}")
        raise DatabaseError(
            f"Failed to update record: {e}",
            details={"collection": collection, "id": doc_id},
        )


def _delete(db: DatabaseInterface, collection: str, doc_id: str) -> bool:
    try:
        deleted = db.delete_document(collection, doc_id)
    except Exception as e:
        logger.exception(f"Error deleting {collection}/{doc_id}")
        raise DatabaseError(
            f"Failed to delete record: {e}",
            details={"collection": collection, "id": doc_id},
        )

    if deleted:
        logger.info(f"Deleted {collection}/{doc_id}")
    return deleted


# ==================== Expenses ====================


def list_expenses(db: DatabaseInterface) -> List[Expense]:
    """
    List expenses, newest date first.

    Raises:
        DatabaseError: If query fails
    """
    try:
        documents = db.list_documents(COLLECTION_EXPENSES, order_by="date", descending=True)
    except Exception as e:
        logger.exception("Error listing expenses")
        raise DatabaseError(f"Failed to list expenses: {e}")

    return [Expense.from_dict(doc) for doc in documents]


def create_expense(db: DatabaseInterface, expense: Expense, today: Optional[date] = None) -> Expense:
    """
    Store a new expense.

    A paid expense without a paid date gets today's date.

    Raises:
        ValidationError: If amount is not greater than zero
        DatabaseError: If the write fails

    Example:
        >>> create_expense(db, Expense(category="travel", amount=120, date="2024-05-02"))
    """
    expense.amount = validate_positive_amount(expense.amount)
    if expense.status == "paid" and not expense.paid_date:
        expense.paid_date = _today(today)
    if not expense.date:
        expense.date = _today(today)

    try:
        document = db.create_document(COLLECTION_EXPENSES, _strip_reserved(expense.to_dict()))
    except Exception as e:
        logger.exception("Error creating expense")
        raise DatabaseError(
            f"Failed to create expense: {e}",
            details={"category": expense.category, "amount": expense.amount},
        )

    logger.info(f"Created {expense.category} expense {expense.amount:.2f} {expense.currency}")
    return Expense.from_dict(document)


def update_expense(db: DatabaseInterface, expense_id: str, changes: Dict[str, Any]) -> Expense:
    """Partially update an expense."""
    return Expense.from_dict(_update(db, COLLECTION_EXPENSES, expense_id, changes))


def mark_expense_paid(db: DatabaseInterface, expense: Expense, today: Optional[date] = None) -> Expense:
    """Mark expense as paid today. Already-paid expenses are returned unchanged."""
    if expense.status == "paid":
        return expense
    updated = update_expense(db, expense.id, {"status": "paid", "paid_date": _today(today)})
    logger.info(f"Expense {expense.id} marked as paid")
    return updated


def delete_expense(db: DatabaseInterface, expense_id: str) -> bool:
    """Delete expense. Returns False if it did not exist."""
    return _delete(db, COLLECTION_EXPENSES, expense_id)


def filter_expenses(
    expenses: Iterable[Expense],
    category: str = "all",
    currency: str = "ALL",
) -> List[Expense]:
    """Filter by category ("all" = any) and currency ("ALL" = any)."""
    return [
        e for e in expenses
        if (category == "all" or e.category == category)
        and (currency == "ALL" or e.currency == currency)
    ]


def get_expense_stats(expenses: Iterable[Expense]) -> Dict[str, Any]:
    """
    Totals for the expenses screen (amounts summed as entered).

    Returns:
        total, paid, pending and by_category (category -> amount)
    """
    stats: Dict[str, Any] = {
        "total": 0.0,
        "paid": 0.0,
        "pending": 0.0,
        "by_category": {category: 0.0 for category in EXPENSE_CATEGORIES},
    }
    for expense in expenses:
        stats["total"] += expense.amount
        if expense.status == "paid":
            stats["paid"] += expense.amount
        else:
            stats["pending"] += expense.amount
        stats["by_category"][expense.category] += expense.amount
    return stats


# ==================== Vendor Bills ====================


def generate_vendor_job_number(year: Optional[int] = None, rng=None) -> str:
    """Generate vendor bill job number: VJB-YYYY-NNNN."""
    return generate_document_number(VENDOR_JOB_PREFIX, year, rng)


def list_vendor_bills(db: DatabaseInterface, vendor_id: Optional[str] = None) -> List[VendorBill]:
    """
    List vendor bills, newest date first.

    Raises:
        DatabaseError: If query fails
    """
    try:
        documents = db.list_documents(
            COLLECTION_VENDOR_BILLS,
            filters={"vendor_id": vendor_id} if vendor_id else None,
            order_by="date",
            descending=True,
        )
    except Exception as e:
        logger.exception("Error listing vendor bills")
        raise DatabaseError(f"Failed to list vendor bills: {e}", details={"vendor_id": vendor_id})

    return [VendorBill.from_dict(doc) for doc in documents]


def _validate_vendor_bill(bill: VendorBill) -> None:
    if not bill.vendor_id:
        message = "Please select a vendor"
        raise ValidationError(message, field_errors={"vendor_id": message})


def create_vendor_bill(db: DatabaseInterface, bill: VendorBill) -> VendorBill:
    """
    Store a new vendor bill. A job number is generated when missing.

    Raises:
        ValidationError: If no vendor is selected
        DatabaseError: If the write fails
    """
    _validate_vendor_bill(bill)
    if not bill.job_number:
        bill.job_number = generate_vendor_job_number()

    try:
        document = db.create_document(COLLECTION_VENDOR_BILLS, _strip_reserved(bill.to_dict()))
    except Exception as e:
        logger.exception(f"Error creating vendor bill {bill.job_number}")
        raise DatabaseError(
            f"Failed to create vendor bill: {e}",
            details={"job_number": bill.job_number, "vendor_id": bill.vendor_id},
        )

    logger.info(f"Created vendor bill {bill.job_number} for {bill.vendor_name}")
    return VendorBill.from_dict(document)


def update_vendor_bill(db: DatabaseInterface, bill_id: str, bill: VendorBill) -> VendorBill:
    """
    Save an edited vendor bill.

    Raises:
        ValidationError: If no vendor is selected
        NotFoundError: If bill does not exist
    """
    _validate_vendor_bill(bill)
    if not bill.job_number:
        bill.job_number = generate_vendor_job_number()
    return VendorBill.from_dict(_update(db, COLLECTION_VENDOR_BILLS, bill_id, bill.to_dict()))


def mark_vendor_bill_paid(db: DatabaseInterface, bill: VendorBill, today: Optional[date] = None) -> VendorBill:
    """Mark vendor bill as paid today. Already-paid bills are returned unchanged."""
    if bill.status == "paid":
        return bill
    updated = VendorBill.from_dict(
        _update(db, COLLECTION_VENDOR_BILLS, bill.id, {"status": "paid", "paid_date": _today(today)})
    )
    logger.info(f"Vendor bill {bill.job_number} marked as paid")
    return updated


def delete_vendor_bill(db: DatabaseInterface, bill_id: str) -> bool:
    """Delete vendor bill. Returns False if it did not exist."""
    return _delete(db, COLLECTION_VENDOR_BILLS, bill_id)


def filter_vendor_bills(
    bills: Iterable[VendorBill],
    vendor_id: str = "all",
    status: str = "all",
) -> List[VendorBill]:
    """Filter by vendor ("all" = any) and status ("all" = any)."""
    return [
        b for b in bills
        if (vendor_id == "all" or b.vendor_id == vendor_id)
        and (status == "all" or b.status == status)
    ]
