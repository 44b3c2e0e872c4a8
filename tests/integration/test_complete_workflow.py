"""
Integration tests for complete workflow.

Tests the end-to-end flow from profiles and shipments through invoices,
ledger and financial statements to report rendering.
"""

import pytest
from pathlib import Path

from data import create_database
from domain.models import (
    CustomerProfile,
    Expense,
    ExportShipment,
    ImportShipment,
    Invoice,
    LedgerEntry,
    VendorBill,
    VendorProfile,
)
from operations import (
    balance_sheet_is_balanced,
    build_party_ledger,
    create_customer,
    create_expense,
    create_invoice,
    create_ledger_entry,
    create_vendor,
    create_vendor_bill,
    derive_ledger_entries,
    generate_balance_sheet,
    generate_profit_loss,
    get_invoice,
    get_ledger_totals,
    list_invoices,
    list_ledger_entries,
    list_shipments,
    save_export_shipment,
    save_import_shipment,
    update_invoice_status,
)
from operations.report_ops import (
    generate_invoice_html,
    generate_ledger_statement_html,
    generate_profit_loss_html,
)
from config.app_context import create_app_context


# ==================== Fixtures ====================


@pytest.fixture
def test_db():
    """Create in-memory database for testing."""
    db = create_database("sqlite", path=":memory:")
    yield db
    db.close()


@pytest.fixture
def app_context(test_db, tmp_path):
    """Create application context for testing."""
    from config.settings import Settings

    settings = Settings(
        database_path=Path(":memory:"),
        data_dir=tmp_path,
        temp_dir=tmp_path / "temp",
        reports_dir=tmp_path / "reports",
    )

    return create_app_context(database=test_db, settings=settings, user_name="accounts")


@pytest.fixture
def parties(app_context):
    db = app_context.database
    customer = create_customer(db, CustomerProfile(
        customer_name="Acme Traders", email1="ops@acme.test", contact1="021-555-0100", city="Karachi",
    ))
    vendor = create_vendor(db, VendorProfile(
        vendor_name="Blue Line Shipping", email1="desk@blueline.test", contact1="04-555-0100",
        type="Shipping Line",
    ))
    return customer, vendor


# ==================== Tests ====================


def test_shipments_to_financial_statements(app_context, parties):
    db = app_context.database
    customer, vendor = parties

    # 1. Invoices for both sides
    customer_invoice = create_invoice(db, Invoice(
        party_type="customer", party_id=customer.id, party_name=customer.customer_name,
        invoice_date="2024-03-01", tax_rate=10,
    ))
    vendor_invoice = create_invoice(db, Invoice(
        party_type="vendor", party_id=vendor.id, party_name=vendor.vendor_name,
        invoice_date="2024-03-02",
    ))
    assert customer_invoice.invoice_number.startswith("INV-")
    assert vendor_invoice.invoice_number.startswith("BILL-")

    # 2. Shipments linked to the invoices
    imported = save_import_shipment(
        db,
        ImportShipment(
            bill_of_lading="BL-100", customer_id=customer.id, customer_name=customer.customer_name,
            invoice_id=customer_invoice.id, freight_charges=300.0, customs_duty=200.0,
        ),
        cached_invoices=list_invoices(db, "customer", customer.id),
    )
    exported = save_export_shipment(
        db,
        ExportShipment(
            booking_number="BK-200", shipper_id=vendor.id, shipper_name=vendor.vendor_name,
            invoice_id=vendor_invoice.id, invoice_value=1000.0, freight_charges=200.0,
        ),
        cached_invoices=list_invoices(db, "vendor", vendor.id),
    )

    assert imported.sync_error is None and exported.sync_error is None
    assert imported.invoice.total == pytest.approx(550.0)
    assert exported.invoice.total == pytest.approx(1200.0)
    assert len(list_shipments(db)) == 2

    # 3. Edit the import shipment; its line is replaced, not duplicated
    shipment = imported.shipment
    shipment.customs_duty = 400.0
    resaved = save_import_shipment(db, shipment, selected_invoice=imported.invoice)

    stored_invoice = get_invoice(db, customer_invoice.id)
    assert len(stored_invoice.line_items) == 1
    assert stored_invoice.line_items[0].id == shipment.job_number
    assert stored_invoice.subtotal == 700.0
    assert stored_invoice.total == pytest.approx(770.0)
    assert resaved.invoice.total == stored_invoice.total

    # 4. Ledger
    create_ledger_entry(db, LedgerEntry(
        date="2024-03-01", party_id=customer.id, party_name=customer.customer_name,
        invoice_number=customer_invoice.invoice_number, description="Invoice", debit=770.0,
    ))
    create_ledger_entry(db, LedgerEntry(
        date="2024-03-20", party_id=customer.id, party_name=customer.customer_name,
        description="Payment received", credit=300.0, type="payment",
    ))
    ledger = build_party_ledger(list_ledger_entries(db, "customer", customer.id), customer.id)
    assert [e.balance for e in ledger] == [770.0, 470.0]
    assert get_ledger_totals(ledger)["outstanding"] == 470.0

    # 5. Outstanding receivables in another display currency
    update_invoice_status(db, stored_invoice, "sent")
    eur_context = app_context.with_display_currency("eur")
    rows = derive_ledger_entries(list_invoices(db, "customer"), eur_context.display_currency)
    assert eur_context.display_currency == "EUR"
    assert rows[0].outstanding == pytest.approx(770.0 / 1.08)

    # 6. Costs
    create_expense(db, Expense(category="bills", amount=100.0, date="2024-03-05"))
    create_vendor_bill(db, VendorBill(
        vendor_id=vendor.id, vendor_name=vendor.vendor_name, category="fuel", amount=50.0, date="2024-03-06",
    ))

    # 7. Financial statements
    pl = generate_profit_loss(db, "2024-01-01", "2024-12-31")
    assert pl.service_revenue == pytest.approx(770.0)
    assert pl.freight_costs == pytest.approx(1250.0)
    assert pl.utilities == pytest.approx(100.0)
    assert pl.net_income == pytest.approx(-580.0)

    sheet = generate_balance_sheet(db, "2024-12-31")
    assert sheet.accounts_receivable == pytest.approx(770.0)
    assert sheet.accounts_payable == pytest.approx(1300.0)
    assert balance_sheet_is_balanced(sheet)

    # 8. Reports
    invoice_html = generate_invoice_html(get_invoice(db, customer_invoice.id))
    assert shipment.job_number in invoice_html
    assert "Import (shipping)" in invoice_html

    statement_html = generate_ledger_statement_html(ledger, "Customer Ledger", customer.customer_name)
    assert "Acme Traders" in statement_html
    assert "$470.00" in statement_html

    assert "Net Income" in generate_profit_loss_html(pl)


def test_paid_invoice_drops_out_of_outstanding(app_context, parties):
    db = app_context.database
    customer, _ = parties

    invoice = create_invoice(db, Invoice(
        party_id=customer.id, party_name=customer.customer_name, invoice_date="2024-05-01",
    ))
    save_import_shipment(db, ImportShipment(
        bill_of_lading="BL-9", customer_id=customer.id, invoice_id=invoice.id, freight_charges=90.0,
    ))
    invoice = update_invoice_status(db, get_invoice(db, invoice.id), "sent")
    assert len(derive_ledger_entries([invoice], "USD")) == 1

    paid = update_invoice_status(db, invoice, "paid")

    assert paid.paid_amount == 90.0
    assert derive_ledger_entries([paid], "USD") == []
    assert generate_balance_sheet(db, "2024-12-31").accounts_receivable == 0.0
