"""
Unit tests for Shipment Operations.

Tests cover saving import/export shipments, invoice sync through the
save path, and the shipment detail report helpers.
"""

import random

import pytest
from unittest.mock import patch

from data import create_database
from domain.exceptions import InvoiceSyncError, NotFoundError, ValidationError
from domain.models import ExportShipment, ImportShipment, Invoice
from operations.invoice_ops import create_invoice, get_invoice
from operations.shipment_ops import (
    delete_shipment,
    filter_shipments,
    generate_job_number,
    get_shipment,
    get_shipment_report_stats,
    list_shipments,
    save_export_shipment,
    save_import_shipment,
    save_shipment,
)


@pytest.fixture
def db():
    """Create in-memory database for testing."""
    database = create_database("sqlite", ":memory:")
    yield database
    database.close()


@pytest.fixture
def customer_invoice(db):
    return create_invoice(db, Invoice(
        party_id="c1", party_name="Acme Traders", tax_rate=10, invoice_date="2024-03-01",
    ))


@pytest.fixture
def vendor_invoice(db):
    return create_invoice(db, Invoice(
        party_type="vendor", party_id="v1", party_name="Shipper Co", invoice_date="2024-03-01",
    ))


def test_generate_job_number():
    assert generate_job_number("import", year=2024, rng=random.Random(3)).startswith("IMP-2024-")
    assert generate_job_number("export", year=2024).startswith("EXP-2024-")


def test_save_import_shipment_generates_job_and_totals(db):
    result = save_import_shipment(db, ImportShipment(
        bill_of_lading="BL-1",
        customer_id="c1",
        customer_name="Acme",
        freight_charges=300.0,
        customs_duty=150.0,
        logistic_charges=50.0,
    ))

    shipment = result.shipment
    assert shipment.id is not None
    assert shipment.job_number.startswith("IMP-")
    assert shipment.total_charges == 500.0
    assert result.invoice is None
    assert result.sync_error is None

    stored = get_shipment(db, shipment.id)
    assert isinstance(stored, ImportShipment)
    assert stored.total_charges == 500.0


def test_save_shipment_validation_error_not_stored(db):
    with pytest.raises(ValidationError) as exc_info:
        save_export_shipment(db, ExportShipment(booking_number="BK-1"))

    assert "shipper_id" in exc_info.value.field_errors
    assert list_shipments(db) == []


def test_save_import_syncs_invoice(db, customer_invoice):
    result = save_import_shipment(db, ImportShipment(
        job_number="IMP-2024-0001",
        bill_of_lading="BL-1",
        customer_id="c1",
        invoice_id=customer_invoice.id,
        freight_charges=500.0,
    ))

    assert result.invoice.subtotal == 500.0
    assert result.invoice.total == pytest.approx(550.0)
    assert get_invoice(db, customer_invoice.id).line_items[0].id == "IMP-2024-0001"


def test_save_export_syncs_vendor_invoice(db, vendor_invoice):
    result = save_export_shipment(
        db,
        ExportShipment(
            booking_number="BK-1",
            shipper_id="v1",
            shipper_name="Shipper Co",
            invoice_id=vendor_invoice.id,
            invoice_value=1000.0,
            freight_charges=200.0,
        ),
        cached_invoices=[vendor_invoice],
    )

    assert [item.amount for item in result.invoice.line_items] == [1200.0]
    assert result.invoice.total == 1200.0
    assert "Export" in result.invoice.line_items[0].description


def test_resaving_shipment_keeps_single_line(db, customer_invoice):
    first = save_import_shipment(db, ImportShipment(
        bill_of_lading="BL-1", customer_id="c1", invoice_id=customer_invoice.id, freight_charges=100.0,
    ))

    shipment = first.shipment
    shipment.freight_charges = 250.0
    second = save_import_shipment(db, shipment, cached_invoices=[first.invoice])

    assert len(second.invoice.line_items) == 1
    assert second.invoice.line_items[0].amount == 250.0
    assert len(list_shipments(db, "import")) == 1


def test_sync_failure_keeps_shipment(db, customer_invoice):
    error = InvoiceSyncError("Could not update invoice INV-1: locked")

    with patch("operations.shipment_ops.sync_invoice_from_shipment", side_effect=error):
        result = save_import_shipment(db, ImportShipment(
            bill_of_lading="BL-1", customer_id="c1", invoice_id=customer_invoice.id, freight_charges=100.0,
        ))

    assert result.invoice is None
    assert result.sync_error == "Could not update invoice INV-1: locked"
    assert get_shipment(db, result.shipment.id).bill_of_lading == "BL-1"
    assert get_invoice(db, customer_invoice.id).line_items == []


def test_update_missing_shipment_raises(db):
    with pytest.raises(NotFoundError):
        save_shipment(db, ImportShipment(id="gone", bill_of_lading="BL-1", customer_id="c1"))


def test_list_shipments_by_kind(db):
    save_import_shipment(db, ImportShipment(bill_of_lading="BL-1", customer_id="c1"))
    save_export_shipment(db, ExportShipment(booking_number="BK-1", shipper_id="v1"))
    save_export_shipment(db, ExportShipment(booking_number="BK-2", shipper_id="v1"))

    assert len(list_shipments(db)) == 3
    assert [s.bill_of_lading for s in list_shipments(db, "import")] == ["BL-1"]
    assert all(isinstance(s, ExportShipment) for s in list_shipments(db, "export"))


def test_delete_shipment(db):
    saved = save_import_shipment(db, ImportShipment(bill_of_lading="BL-1", customer_id="c1")).shipment

    assert delete_shipment(db, saved.id) is True
    assert delete_shipment(db, saved.id) is False


# ==================== Detail Reports ====================


def _report_shipments():
    return [
        ExportShipment(job_number="EXP-1", booking_number="BK-1", shipper_name="Alpha",
                       status="In Transit", total_charges=100.0, currency="USD"),
        ExportShipment(job_number="EXP-2", booking_number="BK-2", shipper_name="Beta",
                       status="Delivered", total_charges=100.0, currency="EUR"),
        ExportShipment(job_number="EXP-3", booking_number="BK-3", shipper_name="Gamma",
                       status="Booked", total_charges=0.0, currency="USD"),
    ]


def test_filter_shipments():
    shipments = _report_shipments()

    assert [s.job_number for s in filter_shipments(shipments)] == ["EXP-1", "EXP-2", "EXP-3"]
    assert [s.job_number for s in filter_shipments(shipments, status="Delivered")] == ["EXP-2"]
    assert [s.job_number for s in filter_shipments(shipments, search="bk-3")] == ["EXP-3"]
    assert filter_shipments(shipments, status="In Transit", search="beta") == []


def test_shipment_report_stats():
    stats = get_shipment_report_stats(_report_shipments(), "USD")

    assert stats["total"] == 3
    assert stats["in_transit"] == 1
    assert stats["delivered"] == 1
    assert stats["total_charges"] == pytest.approx(208.0)
