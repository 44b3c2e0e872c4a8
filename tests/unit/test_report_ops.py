"""
Unit tests for Report Operations.

Tests cover HTML generation, PDF report creation and Excel export.
"""

import pytest
import pandas as pd
from pathlib import Path
from unittest.mock import Mock, patch

from domain.exceptions import ReportGenerationError
from domain.models import (
    BalanceSheet,
    ExportShipment,
    ImportShipment,
    Invoice,
    LedgerEntry,
    LineItem,
    ProfitLoss,
)
from operations.report_ops import (
    export_ledger_to_excel,
    export_shipments_to_excel,
    generate_balance_sheet_html,
    generate_html_pdf,
    generate_invoice_html,
    generate_invoice_pdf,
    generate_ledger_statement_html,
    generate_profit_loss_html,
    generate_shipment_report_html,
    generate_statement_pack,
)


# ==================== Fixtures ====================


@pytest.fixture
def sample_invoice():
    return Invoice(
        id="i1",
        invoice_number="INV-2024/0001",
        invoice_date="2024-03-01",
        party_name="Acme & Sons",
        currency="EUR",
        line_items=[LineItem(id="IMP-1", description="IMP-1 • Import (shipping)", amount=1234.5, unit_price=1234.5)],
        subtotal=1234.5,
        total=1234.5,
        notes="Thank you",
    )


@pytest.fixture
def ledger_entries():
    return [
        LedgerEntry(id="2", date="2024-02-01", party_name="Acme", description="Payment", credit=300.0),
        LedgerEntry(id="1", date="2024-01-01", party_name="Acme", description="Invoice", debit=1000.0),
    ]


@pytest.fixture
def mock_pdf_service():
    return Mock()


# ==================== HTML ====================


def test_invoice_html(sample_invoice):
    html = generate_invoice_html(sample_invoice, company_name="FreightDesk")

    assert "INV-2024/0001" in html
    assert "Acme &amp; Sons" in html
    assert "€1,234.50" in html
    assert "Bill To" in html
    assert "Thank you" in html


def test_vendor_invoice_html():
    html = generate_invoice_html(Invoice(party_type="vendor", invoice_number="BILL-1", party_name="Carrier"))

    assert "Vendor Invoice" in html
    assert "(No line items)" in html


def test_ledger_statement_html_running_balance(ledger_entries):
    html = generate_ledger_statement_html(ledger_entries, "Customer Ledger", "Acme")

    assert html.index("2024-01-01") < html.index("2024-02-01")
    assert "$700.00" in html
    assert "Customer Ledger" in html


def test_shipment_report_html():
    shipments = [
        ImportShipment(job_number="IMP-1", customer_name="Acme", status="In Transit", total_charges=10.0),
        ExportShipment(job_number="EXP-1", shipper_name="Shipper <Co>", total_charges=5.0),
    ]
    stats = {"total": 2, "in_transit": 1, "delivered": 0, "total_charges": 15.0}

    html = generate_shipment_report_html(shipments, stats, "USD", title="Import Report")

    assert "Import Report" in html
    assert "IMP-1" in html
    assert "Shipper &lt;Co&gt;" in html
    assert "Charges: $15.00" in html


def test_shipment_report_html_empty():
    html = generate_shipment_report_html([], {"total": 0})
    assert "(No shipments)" in html


def test_profit_loss_html():
    html = generate_profit_loss_html(ProfitLoss(
        start_date="2024-01-01", end_date="2024-12-31", service_revenue=1000.0,
        total_revenue=1000.0, net_income=250.0, net_margin=25.0,
    ))

    assert "Period: 2024-01-01 to 2024-12-31" in html
    assert "$1,000.00" in html
    assert "Net margin: 25.0%" in html


def test_balance_sheet_html_badge():
    balanced = generate_balance_sheet_html(BalanceSheet(total_assets=10.0, total_liabilities_and_equity=10.0))
    unbalanced = generate_balance_sheet_html(BalanceSheet(total_assets=10.0, total_liabilities_and_equity=12.0))

    assert "Balanced" in balanced and "Not balanced" not in balanced
    assert "Not balanced" in unbalanced


# ==================== PDF ====================


def test_generate_invoice_pdf(mock_pdf_service, sample_invoice, tmp_path):
    with patch("operations.report_ops.add_page_footer") as mock_footer:
        path = generate_invoice_pdf(mock_pdf_service, sample_invoice, tmp_path)

    assert path == tmp_path / "INV-2024_0001.pdf"
    html_arg, path_arg = mock_pdf_service.html_to_pdf.call_args[0]
    assert "INV-2024/0001" in html_arg
    assert path_arg == path
    mock_footer.assert_called_once_with(path, label="INV-2024/0001")


def test_generate_html_pdf_landscape(mock_pdf_service, tmp_path):
    output = tmp_path / "ledger.pdf"

    with patch("operations.report_ops.add_page_footer") as mock_footer:
        result = generate_html_pdf(mock_pdf_service, "<html></html>", output, label="Ledger", landscape=True)

    assert result == output
    mock_pdf_service.html_to_pdf.assert_called_once_with("<html></html>", output, landscape=True)
    mock_footer.assert_called_once_with(output, label="Ledger")


def test_generate_statement_pack(mock_pdf_service, sample_invoice, ledger_entries, tmp_path):
    output = tmp_path / "pack.pdf"
    second = Invoice(id="i2", invoice_number="INV-2", party_name="Acme & Sons")
    progress = []

    with patch("operations.report_ops.add_page_footer") as mock_footer:
        result = generate_statement_pack(
            mock_pdf_service, "Acme & Sons", [sample_invoice, second], ledger_entries, output,
            progress_callback=progress.append,
        )

    assert result == output
    assert mock_pdf_service.html_to_pdf.call_count == 3
    parts, merged = mock_pdf_service.merge_pdfs.call_args[0]
    assert merged == output
    assert [Path(p).name for p in parts] == ["000_statement.pdf", "001_INV-2024_0001.pdf", "002_INV-2.pdf"]
    assert progress == [10, 45, 80, 100]
    mock_footer.assert_called_once_with(output, label="Statement - Acme & Sons")


def test_generate_statement_pack_wraps_errors(mock_pdf_service, tmp_path):
    mock_pdf_service.html_to_pdf.side_effect = RuntimeError("browser crashed")

    with pytest.raises(ReportGenerationError) as exc_info:
        generate_statement_pack(mock_pdf_service, "Acme", [], [], tmp_path / "pack.pdf")

    assert "browser crashed" in exc_info.value.message


def test_generate_statement_pack_keeps_report_errors(mock_pdf_service, tmp_path):
    mock_pdf_service.merge_pdfs.side_effect = ReportGenerationError("No PDFs to merge")

    with pytest.raises(ReportGenerationError) as exc_info:
        generate_statement_pack(mock_pdf_service, "Acme", [], [], tmp_path / "pack.pdf")

    assert exc_info.value.message == "No PDFs to merge"


# ==================== Excel ====================


def test_export_shipments_to_excel(tmp_path):
    shipments = [ExportShipment(job_number="EXP-1", shipper_name="Shipper Co", total_charges=200.0)]

    path = export_shipments_to_excel(shipments, tmp_path / "shipments.xlsx")

    df = pd.read_excel(path)
    assert df["Job #"].tolist() == ["EXP-1"]
    assert df["Customer / Shipper"].tolist() == ["Shipper Co"]
    assert df["Total Charges"].tolist() == [200.0]


def test_export_ledger_to_excel(tmp_path, ledger_entries):
    path = export_ledger_to_excel(ledger_entries, tmp_path / "ledger.xlsx")

    df = pd.read_excel(path)
    assert df["Date"].tolist() == ["2024-01-01", "2024-02-01"]
    assert df["Balance"].tolist() == [1000.0, 700.0]
