"""
Shipment Operations for FreightDesk.

Import and export shipment forms and the shipment detail reports.

Saving a shipment:
1. validate required references
2. recompute total_charges from the charge fields
3. generate a job number (IMP-/EXP-YYYY-NNNN) when missing
4. create or update the shipment
5. sync the linked invoice (invoice_ops.sync_invoice_from_shipment)

A failed sync does not undo the shipment write; the error is logged and
returned in ShipmentSaveResult.sync_error.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Union

from config.constants import COLLECTION_SHIPMENTS
from data.interface import DatabaseInterface
from domain.currency import convert_currency
from domain.exceptions import DatabaseError, InvoiceSyncError, NotFoundError
from domain.models import (
    ExportShipment,
    ImportShipment,
    Invoice,
    Shipment,
    shipment_from_dict,
)
from domain.rules import (
    compute_total_charges,
    generate_document_number,
    matches_shipment_search,
)
from domain.validators import validate_shipment

from .invoice_ops import sync_invoice_from_shipment

logger = logging.getLogger(__name__)

AnyShipment = Union[ImportShipment, ExportShipment]


@dataclass
class ShipmentSaveResult:
    """Outcome of saving a shipment form."""

    shipment: AnyShipment
    invoice: Optional[Invoice] = None  # updated linked invoice, if synced
    sync_error: Optional[str] = None


def generate_job_number(kind: str, year: Optional[int] = None, rng=None) -> str:
    """
    Generate shipment job number.

    Example:
        >>> generate_job_number("export")
        'EXP-2024-0815'
    """
    prefix = ExportShipment.JOB_PREFIX if kind == ExportShipment.KIND else ImportShipment.JOB_PREFIX
    return generate_document_number(prefix, year, rng)


# ==================== CRUD ====================


def list_shipments(db: DatabaseInterface, kind: Optional[str] = None) -> List[AnyShipment]:
    """
    List shipments, newest first.

    Args:
        db: Database instance (injected)
        kind: "import", "export" or None for both

    Raises:
        DatabaseError: If query fails
    """
    try:
        documents = db.list_documents(
            COLLECTION_SHIPMENTS,
            filters={"kind": kind} if kind else None,
            descending=True,
        )
    except Exception as e:
        logger.exception("Error listing shipments")
        raise DatabaseError(f"Failed to list shipments: {e}", details={"kind": kind})

    return [shipment_from_dict(doc) for doc in documents]


def get_shipment(db: DatabaseInterface, shipment_id: str) -> AnyShipment:
    """
    Get shipment by id.

    Raises:
        NotFoundError: If shipment does not exist
    """
    document = db.get_document(COLLECTION_SHIPMENTS, shipment_id)
    if document is None:
        raise NotFoundError("Shipment not found", details={"shipment_id": shipment_id})
    return shipment_from_dict(document)


def delete_shipment(db: DatabaseInterface, shipment_id: str) -> bool:
    """
    Delete shipment. Returns False if it did not exist.

    The shipment's line item on a linked invoice is left in place.
    """
    try:
        deleted = db.delete_document(COLLECTION_SHIPMENTS, shipment_id)
    except Exception as e:
        logger.exception(f"Error deleting shipment {shipment_id}")
        raise DatabaseError(f"Failed to delete shipment: {e}", details={"shipment_id": shipment_id})

    if deleted:
        logger.info(f"Deleted shipment {shipment_id}")
    return deleted


def save_shipment(
    db: DatabaseInterface,
    shipment: AnyShipment,
    selected_invoice: Optional[Invoice] = None,
    cached_invoices: Optional[Iterable[Invoice]] = None,
) -> ShipmentSaveResult:
    """
    Create (no id) or update (id set) an import/export shipment, then sync
    its linked invoice.

    Args:
        db: Database instance (injected)
        shipment: Shipment from the form
        selected_invoice: Invoice currently selected in the form
        cached_invoices: Invoices loaded for the shipment's party

    Returns:
        ShipmentSaveResult with the stored shipment and, when a linked
        invoice was updated, the new invoice state

    Raises:
        ValidationError: If required references are missing
        NotFoundError: If updating a shipment that no longer exists
        DatabaseError: If the shipment write fails

    Example:
        >>> result = save_shipment(db, ExportShipment(booking_number="BK-1",
        ...     shipper_id=vendor.id, invoice_id=invoice.id, invoice_value=1000,
        ...     freight_charges=200))
        >>> result.invoice.total
        1200.0
    """
    validate_shipment(shipment)
    compute_total_charges(shipment)
    if not shipment.job_number:
        shipment.job_number = generate_job_number(shipment.kind)

    data = shipment.to_dict()
    for key in ("id", "created_at", "updated_at"):
        data.pop(key, None)

    try:
        if shipment.id:
            document = db.update_document(COLLECTION_SHIPMENTS, shipment.id, data)
            logger.info(f"Updated {shipment.kind} shipment {shipment.job_number}")
        else:
            document = db.create_document(COLLECTION_SHIPMENTS, data)
            logger.info(f"Created {shipment.kind} shipment {shipment.job_number}")
    except NotFoundError:
        raise
    except Exception as e:
        logger.exception(f"Error saving shipment {shipment.job_number}")
        raise DatabaseError(
            f"Failed to save shipment: {e}",
            details={"job_number": shipment.job_number, "kind": shipment.kind},
        )

    saved = shipment_from_dict(document)
    result = ShipmentSaveResult(shipment=saved)

    try:
        result.invoice = sync_invoice_from_shipment(
            db,
            saved,
            selected_invoice=selected_invoice,
            cached_invoices=cached_invoices,
        )
    except InvoiceSyncError as e:
        # Shipment stays saved; the caller shows the message
        logger.exception(f"Invoice sync failed for shipment {saved.job_number}")
        result.sync_error = e.message

    return result


def save_import_shipment(db: DatabaseInterface, shipment: ImportShipment, **kwargs) -> ShipmentSaveResult:
    """Save import shipment form (see save_shipment)."""
    return save_shipment(db, shipment, **kwargs)


def save_export_shipment(db: DatabaseInterface, shipment: ExportShipment, **kwargs) -> ShipmentSaveResult:
    """Save export shipment form (see save_shipment)."""
    return save_shipment(db, shipment, **kwargs)


# ==================== Detail Reports ====================


def filter_shipments(
    shipments: Iterable[Shipment],
    status: str = "all",
    search: str = "",
) -> List[Shipment]:
    """
    Filter shipments for the detail report.

    Args:
        shipments: Loaded shipments (one kind)
        status: Status name or "all"
        search: Matches job number, B/L, container, party name
                (and booking number for exports)
    """
    return [
        s for s in shipments
        if (status in ("all", "", None) or s.status == status)
        and matches_shipment_search(s, search)
    ]


def get_shipment_report_stats(
    shipments: Iterable[Shipment],
    display_currency: str = "USD",
) -> Dict[str, float]:
    """
    Summary cards for the shipment detail report.

    Returns:
        total, in_transit, delivered and total_charges converted to
        display_currency
    """
    shipments = list(shipments)
    return {
        "total": len(shipments),
        "in_transit": sum(1 for s in shipments if s.status == "In Transit"),
        "delivered": sum(1 for s in shipments if s.status == "Delivered"),
        "total_charges": sum(
            convert_currency(s.total_charges or 0, s.currency or "USD", display_currency)
            for s in shipments
        ),
    }
