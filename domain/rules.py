"""
Business rules for FreightDesk.

Pure functions - no database, no UI. Totals, line-item upserts, search
predicates, running balances and cache helpers live here so operations
and UI share one implementation.
"""

import random
import secrets
from datetime import date
from typing import Callable, List, Optional, TypeVar, Union

from .currency import convert_currency
from .models import (
    CustomerProfile,
    VendorProfile,
    Shipment,
    ExportShipment,
    Invoice,
    LineItem,
    LedgerEntry,
)

AMOUNT_EPSILON = 0.01

T = TypeVar("T")


# ==================== Document Numbers ====================


def generate_document_number(
    prefix: str,
    year: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> str:
    """
    Generate a document number like IMP-2024-0042.

    Four random digits, zero-padded. Uniqueness is not guaranteed.

    Args:
        prefix: IMP, EXP, INV, BILL or VJB
        year: Year component (defaults to current year)
        rng: Random source (tests pass a seeded Random)
    """
    year = year or date.today().year
    number = (rng or random).randint(0, 9999)
    return f"{prefix}-{year}-{number:04d}"


# ==================== Shipments ====================


def compute_total_charges(shipment: Shipment) -> float:
    """
    Sum the shipment's charge fields, rounded to 2 decimals.

    Also stores the result on shipment.total_charges.
    """
    total = round(sum(float(v or 0) for v in shipment.charges().values()), 2)
    shipment.total_charges = total
    return total


def shipment_invoice_amount(shipment: Shipment) -> float:
    """
    Amount a shipment contributes to its linked invoice (shipment currency).

    Export: invoice value + total charges. Import: total charges.
    """
    if isinstance(shipment, ExportShipment):
        return float(shipment.invoice_value or 0) + float(shipment.total_charges or 0)
    return float(shipment.total_charges or 0)


def build_shipment_line_item(shipment: Shipment, invoice_currency: str) -> LineItem:
    """
    Build the invoice line item that represents a shipment.

    The line-item id is the shipment's stable reference (job number, then
    booking number / bill of lading, then a random token), so re-saving
    the same shipment replaces its line instead of adding another.
    """
    amount = convert_currency(
        shipment_invoice_amount(shipment),
        shipment.currency or "USD",
        invoice_currency or "USD",
    )
    reference = shipment.job_number or shipment.alternate_reference()
    item_id = reference or secrets.token_hex(8)
    label = "Export" if isinstance(shipment, ExportShipment) else "Import"
    description = f"{reference or ''} • {label} ({shipment.mode})".strip()

    return LineItem(
        id=item_id,
        description=description,
        quantity=1,
        unit_price=amount,
        amount=amount,
    )


# ==================== Invoices ====================


def upsert_line_item(items: List[LineItem], item: LineItem) -> List[LineItem]:
    """Return items with any line of the same id removed and item appended."""
    return [existing for existing in items if existing.id != item.id] + [item]


def calculate_line_amount(quantity: float, unit_price: float) -> float:
    return round(float(quantity or 0) * float(unit_price or 0), 2)


def recalculate_invoice(invoice: Invoice) -> Invoice:
    """
    Recompute subtotal, tax amount and total from line items.

    subtotal = sum(amount); tax = subtotal * rate / 100;
    total = subtotal + tax - discount. Mutates and returns invoice.
    """
    subtotal = sum(float(item.amount or 0) for item in invoice.line_items)
    tax_amount = subtotal * float(invoice.tax_rate or 0) / 100
    invoice.subtotal = subtotal
    invoice.tax_amount = tax_amount
    invoice.total = subtotal + tax_amount - float(invoice.discount or 0)
    return invoice


def is_settled(total: float, paid: float, status: str, epsilon: float = AMOUNT_EPSILON) -> bool:
    """An invoice/expense is settled when nothing is outstanding or it is paid/cancelled."""
    outstanding = max(total - paid, 0.0)
    return outstanding <= epsilon or status in ("paid", "cancelled")


# ==================== Search ====================


def _contains(haystack: Optional[str], needle: str) -> bool:
    return needle in (haystack or "").lower()


def matches_customer_search(customer: CustomerProfile, term: str) -> bool:
    """Case-insensitive match on name, city, main commodity or any consignee name."""
    needle = (term or "").strip().lower()
    if not needle:
        return True
    return (
        _contains(customer.customer_name, needle)
        or _contains(customer.city, needle)
        or _contains(customer.main_commodity, needle)
        or any(_contains(c.name, needle) for c in customer.consignees)
    )


def matches_vendor_search(vendor: VendorProfile, term: str) -> bool:
    """Case-insensitive match on name, city or vendor type."""
    needle = (term or "").strip().lower()
    if not needle:
        return True
    return (
        _contains(vendor.vendor_name, needle)
        or _contains(vendor.city, needle)
        or _contains(vendor.type, needle)
    )


def matches_shipment_search(shipment: Shipment, term: str) -> bool:
    """
    Case-insensitive match on job number, B/L, container and party name.

    Export shipments also match on booking number.
    """
    needle = (term or "").strip().lower()
    if not needle:
        return True
    candidates = [
        shipment.job_number,
        shipment.bill_of_lading,
        shipment.container_number,
        shipment.party_name,
    ]
    if isinstance(shipment, ExportShipment):
        candidates.append(shipment.booking_number)
    return any(_contains(value, needle) for value in candidates)


# ==================== Ledger ====================


def apply_running_balance(entries: List[LedgerEntry]) -> List[LedgerEntry]:
    """
    Sort entries by date and fill in the cumulative balance.

    balance_n = balance_(n-1) + debit_n - credit_n. Entries with the same
    date keep their creation order.
    """
    ordered = sorted(entries, key=lambda e: (e.date or "", e.created_at or ""))
    balance = 0.0
    for entry in ordered:
        balance += float(entry.debit or 0) - float(entry.credit or 0)
        entry.balance = balance
    return ordered


def is_balanced(total_assets: float, total_liabilities_and_equity: float) -> bool:
    """Balance sheet check with a 0.01 tolerance (strictly less than)."""
    return abs(total_assets - total_liabilities_and_equity) < AMOUNT_EPSILON


# ==================== Local Cache Helpers ====================


def replace_record(records: List[T], record: T, key: Callable[[T], str] = lambda r: r.id) -> List[T]:
    """
    Return a new list with record replacing the entry of the same id.

    Unknown ids are prepended (newly created records show first).
    """
    record_id = key(record)
    if any(key(r) == record_id for r in records):
        return [record if key(r) == record_id else r for r in records]
    return [record] + list(records)


def remove_record(records: List[T], record_id: Union[str, int], key: Callable[[T], str] = lambda r: r.id) -> List[T]:
    """Return a new list without the record of the given id."""
    return [r for r in records if key(r) != record_id]
