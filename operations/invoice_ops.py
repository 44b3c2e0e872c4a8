"""
Invoice Operations for FreightDesk.

Customer invoices and vendor bills (party_type "customer" / "vendor"),
billing dashboard stats, and the shipment -> invoice synchronisation.

Synchronisation
---------------
A shipment linked to an invoice (shipment.invoice_id) owns exactly one line
item on that invoice. The line item id is the shipment's job number (or
booking number / bill of lading), so saving the same shipment again
replaces the line instead of appending a second one. After the upsert the
invoice totals are recomputed and the invoice is persisted.
"""

import logging
from dataclasses import asdict
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from config.constants import COLLECTION_INVOICES
from data.interface import DatabaseInterface
from domain.exceptions import (
    DatabaseError,
    InvoiceSyncError,
    NotFoundError,
    ValidationError,
)
from domain.models import Invoice, Shipment, INVOICE_STATUSES
from domain.rules import (
    build_shipment_line_item,
    generate_document_number,
    recalculate_invoice,
    upsert_line_item,
)

logger = logging.getLogger(__name__)

INVOICE_NUMBER_PREFIX = {
    "customer": "INV",
    "vendor": "BILL",
}


def generate_invoice_number(party_type: str = "customer", year: Optional[int] = None, rng=None) -> str:
    """
    Generate invoice number: INV-YYYY-NNNN (customers) or BILL-YYYY-NNNN (vendors).

    Example:
        >>> generate_invoice_number("vendor")
        'BILL-2024-0173'
    """
    return generate_document_number(INVOICE_NUMBER_PREFIX.get(party_type, "INV"), year, rng)


# ==================== CRUD ====================


def list_invoices(
    db: DatabaseInterface,
    party_type: Optional[str] = None,
    party_id: Optional[str] = None,
) -> List[Invoice]:
    """
    List invoices, newest invoice date first.

    Args:
        db: Database instance (injected)
        party_type: "customer" or "vendor" (None = both)
        party_id: Restrict to one customer/vendor

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
            COLLECTION_INVOICES,
            filters=filters or None,
            order_by="invoice_date",
            descending=True,
        )
    except Exception as e:
        logger.exception("Error listing invoices")
        raise DatabaseError(f"Failed to list invoices: {e}", details=filters)

    return [Invoice.from_dict(doc) for doc in documents]


def get_invoice(db: DatabaseInterface, invoice_id: str) -> Invoice:
    """
    Get invoice by id.

    Raises:
        NotFoundError: If invoice does not exist
    """
    document = db.get_document(COLLECTION_INVOICES, invoice_id)
    if document is None:
        raise NotFoundError("Invoice not found", details={"invoice_id": invoice_id})
    return Invoice.from_dict(document)


def create_invoice(db: DatabaseInterface, invoice: Invoice) -> Invoice:
    """
    Store a new invoice or vendor bill.

    Totals are recomputed from the line items and an invoice number is
    generated when missing. Issue date defaults to today.

    Raises:
        ValidationError: If no party is selected
        DatabaseError: If the write fails

    Example:
        >>> invoice = create_invoice(db, Invoice(party_id=customer.id,
        ...     party_name=customer.customer_name, tax_rate=10))
        >>> invoice.invoice_number.startswith("INV-")
        True
    """
    if not invoice.party_id:
        message = "Please select a vendor" if invoice.party_type == "vendor" else "Please select a customer"
        raise ValidationError(message, field_errors={"party_id": message})

    recalculate_invoice(invoice)
    if not invoice.invoice_number:
        invoice.invoice_number = generate_invoice_number(invoice.party_type)
    if not invoice.invoice_date:
        invoice.invoice_date = date.today().isoformat()

    data = invoice.to_dict()
    data.pop("id", None)

    try:
        document = db.create_document(COLLECTION_INVOICES, data)
    except Exception as e:
        logger.exception(f"Error creating invoice {invoice.invoice_number}")
        raise DatabaseError(
            f"Failed to create invoice: {e}",
            details={"invoice_number": invoice.invoice_number},
        )

    logger.info(
        f"Created {invoice.party_type} invoice {invoice.invoice_number} "
        f"for {invoice.party_name} (total {invoice.total:.2f} {invoice.currency})"
    )
    return Invoice.from_dict(document)


def update_invoice(db: DatabaseInterface, invoice_id: str, changes: Dict[str, Any]) -> Invoice:
    """
    Partially update an invoice.

    Args:
        db: Database instance (injected)
        invoice_id: Invoice to update
        changes: Field -> new value (line items may be LineItem or dict)

    Returns:
        Updated invoice

    Raises:
        NotFoundError: If invoice does not exist
        DatabaseError: If the write fails
    """
    fields = dict(changes)
    if "line_items" in fields:
        fields["line_items"] = [
            item if isinstance(item, dict) else asdict(item)
            for item in fields["line_items"]
        ]
    for key in ("id", "created_at", "updated_at"):
        fields.pop(key, None)

    try:
        document = db.update_document(COLLECTION_INVOICES, invoice_id, fields)
    except NotFoundError:
        raise
    except Exception as e:
        logger.exception(f"Error updating invoice {invoice_id}")
        raise DatabaseError(
            f"Failed to update invoice: {e}",
            details={"invoice_id": invoice_id},
        )

    logger.debug(f"Updated invoice {invoice_id}: {', '.join(fields)}")
    return Invoice.from_dict(document)


def save_invoice(db: DatabaseInterface, invoice: Invoice) -> Invoice:
    """
    Save an edited invoice (all fields), recomputing totals first.

    Raises:
        NotFoundError: If invoice does not exist
    """
    recalculate_invoice(invoice)
    return update_invoice(db, invoice.id, invoice.to_dict())


def delete_invoice(db: DatabaseInterface, invoice_id: str) -> bool:
    """Delete invoice. Returns False if it did not exist."""
    try:
        deleted = db.delete_document(COLLECTION_INVOICES, invoice_id)
    except Exception as e:
        logger.exception(f"Error deleting invoice {invoice_id}")
        raise DatabaseError(f"Failed to delete invoice: {e}", details={"invoice_id": invoice_id})

    if deleted:
        logger.info(f"Deleted invoice {invoice_id}")
    return deleted


# ==================== Status & Stats ====================


def update_invoice_status(
    db: DatabaseInterface,
    invoice: Invoice,
    status: str,
    today: Optional[date] = None,
) -> Invoice:
    """
    Change invoice status.

    - paid: paid_amount = total, paid_date = today
    - draft / sent: paid_amount = 0, paid_date cleared
    - other statuses: payment fields unchanged

    Raises:
        ValidationError: If status is unknown
    """
    if status not in INVOICE_STATUSES:
        raise ValidationError(
            f"Unknown invoice status: {status}",
            details={"status": status, "allowed": ", ".join(INVOICE_STATUSES)},
        )

    changes: Dict[str, Any] = {"status": status}
    if status == "paid":
        changes["paid_amount"] = invoice.total
        changes["paid_date"] = (today or date.today()).isoformat()
    elif status in ("draft", "sent"):
        changes["paid_amount"] = 0.0
        changes["paid_date"] = ""

    updated = update_invoice(db, invoice.id, changes)
    logger.info(f"Invoice {invoice.invoice_number} status -> {status}")
    return updated


def get_billing_stats(invoices: Iterable[Invoice], party_type: Optional[str] = None) -> Dict[str, float]:
    """
    Dashboard totals for the billing screen.

    Returns:
        Dict with total_billed, paid, outstanding (neither paid nor
        cancelled) and overdue. Amounts are summed as stored (no
        currency conversion), matching the billing screen.
    """
    selected = [i for i in invoices if party_type is None or i.party_type == party_type]
    return {
        "count": len(selected),
        "total_billed": sum(i.total for i in selected),
        "paid": sum(i.total for i in selected if i.status == "paid"),
        "outstanding": sum(i.total for i in selected if i.status not in ("paid", "cancelled")),
        "overdue": sum(i.total for i in selected if i.status == "overdue"),
    }


# ==================== Shipment Synchronisation ====================


def _resolve_invoice(
    db: DatabaseInterface,
    invoice_id: str,
    selected_invoice: Optional[Invoice],
    cached_invoices: Optional[Iterable[Invoice]],
) -> Optional[Invoice]:
    if selected_invoice is not None and selected_invoice.id == invoice_id:
        return selected_invoice

    for invoice in cached_invoices or []:
        if invoice.id == invoice_id:
            return invoice

    document = db.get_document(COLLECTION_INVOICES, invoice_id)
    return Invoice.from_dict(document) if document else None


def sync_invoice_from_shipment(
    db: DatabaseInterface,
    shipment: Shipment,
    selected_invoice: Optional[Invoice] = None,
    cached_invoices: Optional[Iterable[Invoice]] = None,
) -> Optional[Invoice]:
    """
    Upsert the shipment's line item on its linked invoice and persist it.

    Steps:
    1. No invoice_id -> no-op. Resolve the invoice from selected_invoice,
       then cached_invoices, then the database; not found -> no-op.
    2. Amount: export = invoice_value + total_charges, import = total_charges,
       converted from the shipment currency to the invoice currency.
    3. Replace any line item with the same id, recompute totals, save.

    Args:
        db: Database instance (injected)
        shipment: Saved ImportShipment or ExportShipment
        selected_invoice: Invoice currently selected in the form, if any
        cached_invoices: Invoices already loaded for the shipment's party

    Returns:
        The updated invoice (caller replaces it in its cache), or None

    Raises:
        InvoiceSyncError: If the invoice could not be read or written

    Example:
        >>> updated = sync_invoice_from_shipment(db, shipment, cached_invoices=invoices)
        >>> [item.id for item in updated.line_items]
        ['EXP-2024-0042']
    """
    if not shipment.invoice_id:
        return None

    try:
        invoice = _resolve_invoice(db, shipment.invoice_id, selected_invoice, cached_invoices)
    except Exception as e:
        raise InvoiceSyncError(
            f"Could not load invoice for shipment {shipment.job_number}: {e}",
            details={"invoice_id": shipment.invoice_id},
        )

    if invoice is None:
        logger.warning(
            f"Shipment {shipment.job_number} links to missing invoice {shipment.invoice_id} - skipping sync"
        )
        return None

    # Work on a copy; cached objects change only after the write succeeded
    invoice = Invoice.from_dict(invoice.to_dict())
    line_item = build_shipment_line_item(shipment, invoice.currency or "USD")
    invoice.line_items = upsert_line_item(invoice.line_items, line_item)
    recalculate_invoice(invoice)

    try:
        updated = update_invoice(
            db,
            invoice.id,
            {
                "line_items": invoice.line_items,
                "subtotal": invoice.subtotal,
                "tax_amount": invoice.tax_amount,
                "total": invoice.total,
            },
        )
    except Exception as e:
        raise InvoiceSyncError(
            f"Could not update invoice {invoice.invoice_number}: {e}",
            details={"invoice_id": invoice.id, "job_number": shipment.job_number},
        )

    logger.info(
        f"Synced {shipment.kind} shipment {line_item.id} to invoice {updated.invoice_number}: "
        f"line {line_item.amount:.2f}, total {updated.total:.2f} {updated.currency}"
    )
    return updated
