"""
Unit tests for business rules (totals, line items, search, running balance).
"""

import random

import pytest

from domain.models import (
    Consignee,
    CustomerProfile,
    ExportShipment,
    ImportShipment,
    Invoice,
    LedgerEntry,
    LineItem,
    VendorProfile,
)
from domain.rules import (
    apply_running_balance,
    build_shipment_line_item,
    calculate_line_amount,
    compute_total_charges,
    generate_document_number,
    is_balanced,
    is_settled,
    matches_customer_search,
    matches_shipment_search,
    matches_vendor_search,
    recalculate_invoice,
    remove_record,
    replace_record,
    shipment_invoice_amount,
    upsert_line_item,
)


# ==================== Document Numbers ====================


def test_document_number_format():
    number = generate_document_number("IMP", year=2024, rng=random.Random(1))
    prefix, year, digits = number.split("-")
    assert prefix == "IMP"
    assert year == "2024"
    assert len(digits) == 4 and digits.isdigit()


def test_document_number_is_zero_padded():
    class Fixed:
        def randint(self, a, b):
            return 7

    assert generate_document_number("INV", year=2025, rng=Fixed()) == "INV-2025-0007"


# ==================== Shipment Amounts ====================


def test_compute_total_charges_import():
    shipment = ImportShipment(
        freight_charges=100.0,
        insurance_charges=20.5,
        customs_duty=300.0,
        logistic_charges=50.0,
        other_charges=29.5,
    )
    assert compute_total_charges(shipment) == 500.0
    assert shipment.total_charges == 500.0


def test_compute_total_charges_export_rounds():
    shipment = ExportShipment(
        freight_charges=0.1,
        insurance_charges=0.2,
        handling_charges=0.0,
        documentation_fees=0.0,
        other_charges=0.0,
    )
    assert compute_total_charges(shipment) == 0.3


def test_export_invoice_amount_includes_invoice_value():
    shipment = ExportShipment(invoice_value=1000.0, total_charges=200.0)
    assert shipment_invoice_amount(shipment) == 1200.0


def test_import_invoice_amount_is_total_charges():
    shipment = ImportShipment(total_charges=500.0)
    assert shipment_invoice_amount(shipment) == 500.0


def test_line_item_uses_job_number_as_id():
    shipment = ImportShipment(job_number="IMP-2024-0001", total_charges=500.0, currency="USD")
    item = build_shipment_line_item(shipment, "USD")

    assert item.id == "IMP-2024-0001"
    assert item.quantity == 1
    assert item.unit_price == item.amount == 500.0
    assert "IMP-2024-0001" in item.description
    assert "Import" in item.description


def test_line_item_falls_back_to_booking_number():
    shipment = ExportShipment(booking_number="BK-77", invoice_value=10.0, currency="USD")
    item = build_shipment_line_item(shipment, "USD")
    assert item.id == "BK-77"
    assert "Export" in item.description


def test_line_item_converts_to_invoice_currency():
    shipment = ImportShipment(job_number="IMP-1", total_charges=100.0, currency="EUR")
    item = build_shipment_line_item(shipment, "USD")
    assert item.amount == pytest.approx(108.0)


# ==================== Invoice Totals ====================


def test_upsert_replaces_existing_line():
    items = [LineItem(id="a", amount=1.0), LineItem(id="b", amount=2.0)]
    result = upsert_line_item(items, LineItem(id="a", amount=5.0))

    assert [i.id for i in result] == ["b", "a"]
    assert result[-1].amount == 5.0
    assert len(items) == 2


def test_upsert_appends_new_line():
    result = upsert_line_item([LineItem(id="a")], LineItem(id="b"))
    assert [i.id for i in result] == ["a", "b"]


def test_calculate_line_amount():
    assert calculate_line_amount(3, 19.99) == 59.97
    assert calculate_line_amount(None, 10) == 0.0


def test_recalculate_invoice():
    invoice = Invoice(
        line_items=[LineItem(id="1", amount=500.0), LineItem(id="2", amount=1200.0)],
        tax_rate=10,
        discount=70.0,
    )
    recalculate_invoice(invoice)

    assert invoice.subtotal == 1700.0
    assert invoice.tax_amount == pytest.approx(170.0)
    assert invoice.total == pytest.approx(1800.0)


def test_is_settled():
    assert is_settled(100.0, 100.0, "sent")
    assert is_settled(100.0, 99.995, "sent")
    assert is_settled(100.0, 0.0, "paid")
    assert is_settled(100.0, 0.0, "cancelled")
    assert not is_settled(100.0, 50.0, "partially_paid")


# ==================== Search ====================


def test_customer_search_matches_consignee():
    customer = CustomerProfile(
        customer_name="Acme Traders",
        city="Karachi",
        main_commodity="Textiles",
        consignees=[Consignee(name="Harbor Logistics")],
    )
    assert matches_customer_search(customer, "acme")
    assert matches_customer_search(customer, "KARACHI")
    assert matches_customer_search(customer, "textile")
    assert matches_customer_search(customer, "harbor")
    assert matches_customer_search(customer, "  ")
    assert not matches_customer_search(customer, "lahore")


def test_vendor_search():
    vendor = VendorProfile(vendor_name="Blue Line", city="Dubai", type="Shipping Line")
    assert matches_vendor_search(vendor, "blue")
    assert matches_vendor_search(vendor, "shipping")
    assert not matches_vendor_search(vendor, "airline")


def test_shipment_search_booking_number_only_for_exports():
    export = ExportShipment(booking_number="BK-123", shipper_name="Shipper Co")
    imported = ImportShipment(bill_of_lading="BL-9", customer_name="Acme")

    assert matches_shipment_search(export, "bk-123")
    assert matches_shipment_search(export, "shipper")
    assert matches_shipment_search(imported, "bl-9")
    assert matches_shipment_search(imported, "acme")
    assert not matches_shipment_search(imported, "bk-123")


# ==================== Ledger ====================


def test_running_balance_sorted_by_date():
    entries = [
        LedgerEntry(id="2", date="2024-02-01", debit=0.0, credit=300.0, description="payment"),
        LedgerEntry(id="1", date="2024-01-01", debit=1000.0, credit=0.0, description="invoice"),
        LedgerEntry(id="3", date="2024-03-01", debit=200.0, credit=0.0, description="invoice"),
    ]

    ordered = apply_running_balance(entries)

    assert [e.id for e in ordered] == ["1", "2", "3"]
    assert [e.balance for e in ordered] == [1000.0, 700.0, 900.0]


def test_running_balance_same_date_keeps_creation_order():
    entries = [
        LedgerEntry(id="b", date="2024-01-01", debit=10.0, created_at="2024-01-01T10:00:01"),
        LedgerEntry(id="a", date="2024-01-01", credit=4.0, created_at="2024-01-01T10:00:00"),
    ]
    ordered = apply_running_balance(entries)
    assert [e.id for e in ordered] == ["a", "b"]
    assert ordered[-1].balance == 6.0


def test_is_balanced_boundary():
    assert is_balanced(100.0, 100.0)
    assert is_balanced(100.0, 100.009)
    assert not is_balanced(100.0, 100.02)
    assert not is_balanced(0.0, 0.01)
    assert not is_balanced(0.01, 0.0)


# ==================== Cache Helpers ====================


def test_replace_record_updates_in_place():
    records = [Invoice(id="1", total=1.0), Invoice(id="2", total=2.0)]
    result = replace_record(records, Invoice(id="2", total=20.0))

    assert [r.id for r in result] == ["1", "2"]
    assert result[1].total == 20.0
    assert records[1].total == 2.0


def test_replace_record_prepends_unknown():
    records = [Invoice(id="1")]
    result = replace_record(records, Invoice(id="9"))
    assert [r.id for r in result] == ["9", "1"]


def test_remove_record():
    records = [Invoice(id="1"), Invoice(id="2")]
    assert [r.id for r in remove_record(records, "1")] == ["2"]
    assert remove_record(records, "missing") == records
