"""
Report Operations for FreightDesk.

HTML rendering of invoices, party statements, shipment reports and
financial statements; PDF output through PDFService; Excel export of
report tables.
"""

import logging
import shutil
import tempfile
from datetime import datetime
from html import escape
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from config.paths import sanitize_filename
from domain.currency import format_currency_value
from domain.exceptions import ReportGenerationError
from domain.models import BalanceSheet, Invoice, LedgerEntry, ProfitLoss, Shipment
from domain.rules import apply_running_balance
from services.excel_writer import write_table
from services.pdf_service import PDFService
from services.pdf_utils import add_page_footer, count_pdf_pages
from ui.styles import REPORT_CSS

from .financial_ops import balance_sheet_is_balanced

logger = logging.getLogger(__name__)

SHIPMENT_REPORT_COLUMNS = {
    "job_number": "Job #",
    "party_name": "Customer / Shipper",
    "bill_of_lading": "B/L",
    "container_number": "Container",
    "mode": "Mode",
    "status": "Status",
    "etd": "ETD",
    "eta": "ETA",
    "currency": "Currency",
    "total_charges": "Total Charges",
}

LEDGER_COLUMNS = {
    "date": "Date",
    "party_name": "Party",
    "job_number": "Job #",
    "invoice_number": "Invoice #",
    "description": "Description",
    "debit": "Debit",
    "credit": "Credit",
    "balance": "Balance",
}


def _page(title: str, body: str) -> str:
    """Wrap body in the standard report document."""
    return "\n".join([
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        "<meta charset='UTF-8'>",
        f"<title>{escape(title)}</title>",
        REPORT_CSS,
        "</head>",
        "<body>",
        '<div class="container">',
        body,
        _build_footer(),
        "</div>",
        "</body>",
        "</html>",
    ])


def _build_header(title: str, meta_lines: List[str]) -> str:
    meta = "<br>".join(escape(line) for line in meta_lines if line)
    return f"""
    <header class="page-header">
        <h1 class="page-header__title">{escape(title)}</h1>
        <div class="page-header__meta">{meta}</div>
    </header>
    """


def _build_footer() -> str:
    return f"""
    <footer class="page-footer">
        <p>Generated by FreightDesk on {datetime.now().strftime('%Y-%m-%d %H:%M')}</p>
    </footer>
    """


def _money(amount: float, currency: str = "USD") -> str:
    return escape(format_currency_value(amount, currency))


# ==================== Invoice ====================


def generate_invoice_html(invoice: Invoice, company_name: str = "FreightDesk") -> str:
    """
    Render an invoice (customer invoice or vendor bill) as HTML.

    Args:
        invoice: Invoice to render
        company_name: Issuer shown in the header

    Returns:
        HTML string

    Example:
        >>> html = generate_invoice_html(invoice)
        >>> pdf_service.html_to_pdf(html, Path("INV-2024-0001.pdf"))
    """
    currency = invoice.currency or "USD"
    title = "Invoice" if invoice.party_type == "customer" else "Vendor Invoice"

    header = _build_header(title, [
        company_name,
        f"No. {invoice.invoice_number}",
        f"Date: {invoice.invoice_date}",
        f"Due: {invoice.due_date}" if invoice.due_date else "",
        f"Status: {invoice.status.replace('_', ' ').title()}",
    ])

    bill_to = f"""
    <div class="info-block">
        <div>
            <h3>{'Bill To' if invoice.party_type == 'customer' else 'Vendor'}</h3>
            <strong>{escape(invoice.party_name)}</strong><br>
            {escape(invoice.party_address)}<br>
            {f'Tax ID: {escape(invoice.party_tax_id)}' if invoice.party_tax_id else ''}
        </div>
        <div>
            <h3>Reference</h3>
            Job #: {escape(invoice.job_number or '-')}<br>
            PO #: {escape(invoice.po_number or '-')}<br>
            Terms: {escape(invoice.payment_terms)}
        </div>
    </div>
    """

    rows = []
    rows.append("<table class='data-table'>")
    rows.append("<thead><tr>")
    rows.append("<th>Description</th><th class='num'>Qty</th>")
    rows.append("<th class='num'>Unit Price</th><th class='num'>Amount</th>")
    rows.append("</tr></thead>")
    rows.append("<tbody>")
    for item in invoice.line_items:
        rows.append("<tr>")
        rows.append(f"<td>{escape(item.description)}</td>")
        rows.append(f"<td class='num'>{item.quantity:g}</td>")
        rows.append(f"<td class='num'>{_money(item.unit_price, currency)}</td>")
        rows.append(f"<td class='num'>{_money(item.amount, currency)}</td>")
        rows.append("</tr>")
    if not invoice.line_items:
        rows.append("<tr><td colspan='4'>(No line items)</td></tr>")
    rows.append("</tbody>")
    rows.append("</table>")

    totals = f"""
    <table class="totals">
        <tr><td>Subtotal</td><td class="num">{_money(invoice.subtotal, currency)}</td></tr>
        <tr><td>Tax ({invoice.tax_rate:g}%)</td><td class="num">{_money(invoice.tax_amount, currency)}</td></tr>
        <tr><td>Discount</td><td class="num">-{_money(invoice.discount, currency)}</td></tr>
        <tr class="grand"><td>Total</td><td class="num">{_money(invoice.total, currency)}</td></tr>
        <tr><td>Paid</td><td class="num">{_money(invoice.paid_amount, currency)}</td></tr>
        <tr><td>Balance Due</td><td class="num">{_money(invoice.outstanding, currency)}</td></tr>
    </table>
    """

    extras = ""
    if invoice.bank_details:
        extras += f"<h2 class='section-title'>Bank Details</h2><div class='notes'>{escape(invoice.bank_details)}</div>"
    if invoice.notes:
        extras += f"<h2 class='section-title'>Notes</h2><div class='notes'>{escape(invoice.notes)}</div>"

    return _page(f"{title} {invoice.invoice_number}", header + bill_to + "\n".join(rows) + totals + extras)


# ==================== Ledger Statement ====================


def generate_ledger_statement_html(
    entries: Iterable[LedgerEntry],
    title: str,
    party_name: str = "",
    currency: str = "USD",
) -> str:
    """
    Render ledger entries with running balance (oldest first).

    Args:
        entries: Ledger entries (order does not matter)
        title: Report title, e.g. "Customer Ledger"
        party_name: Party shown in the header (empty for the general ledger)
        currency: Currency used for formatting

    Returns:
        HTML string
    """
    ordered = apply_running_balance(list(entries))
    total_debit = sum(e.debit for e in ordered)
    total_credit = sum(e.credit for e in ordered)

    header = _build_header(title, [
        party_name,
        f"Entries: {len(ordered)}",
        f"As of {datetime.now().strftime('%Y-%m-%d')}",
    ])

    rows = ["<table class='data-table'>", "<thead><tr>"]
    for label in LEDGER_COLUMNS.values():
        css = " class='num'" if label in ("Debit", "Credit", "Balance") else ""
        rows.append(f"<th{css}>{label}</th>")
    rows.append("</tr></thead>")
    rows.append("<tbody>")
    for entry in ordered:
        rows.append("<tr>")
        rows.append(f"<td>{escape(entry.date)}</td>")
        rows.append(f"<td>{escape(entry.party_name)}</td>")
        rows.append(f"<td>{escape(entry.job_number)}</td>")
        rows.append(f"<td>{escape(entry.invoice_number)}</td>")
        rows.append(f"<td>{escape(entry.description)}</td>")
        rows.append(f"<td class='num'>{_money(entry.debit, currency) if entry.debit else ''}</td>")
        rows.append(f"<td class='num'>{_money(entry.credit, currency) if entry.credit else ''}</td>")
        rows.append(f"<td class='num'>{_money(entry.balance, currency)}</td>")
        rows.append("</tr>")
    rows.append(
        f"<tr class='subtotal'><td colspan='5'>Totals</td>"
        f"<td class='num'>{_money(total_debit, currency)}</td>"
        f"<td class='num'>{_money(total_credit, currency)}</td>"
        f"<td class='num'>{_money(total_debit - total_credit, currency)}</td></tr>"
    )
    rows.append("</tbody>")
    rows.append("</table>")

    return _page(title, header + "\n".join(rows))


# ==================== Shipment Report ====================


def generate_shipment_report_html(
    shipments: Iterable[Shipment],
    stats: Dict[str, float],
    display_currency: str = "USD",
    title: str = "Shipment Report",
) -> str:
    """
    Render a shipment detail report.

    Args:
        shipments: Shipments already filtered for the report
        stats: Output of shipment_ops.get_shipment_report_stats
        display_currency: Currency of stats["total_charges"]
        title: Report title

    Returns:
        HTML string
    """
    shipments = list(shipments)
    header = _build_header(title, [
        f"Total: {stats.get('total', len(shipments))}",
        f"In transit: {stats.get('in_transit', 0)}",
        f"Delivered: {stats.get('delivered', 0)}",
        f"Charges: {format_currency_value(stats.get('total_charges', 0.0), display_currency)}",
    ])

    rows = ["<table class='data-table'>", "<thead><tr>"]
    for label in SHIPMENT_REPORT_COLUMNS.values():
        rows.append(f"<th{' class=num' if label == 'Total Charges' else ''}>{label}</th>")
    rows.append("</tr></thead>")
    rows.append("<tbody>")
    for shipment in shipments:
        rows.append("<tr>")
        rows.append(f"<td>{escape(shipment.job_number)}</td>")
        rows.append(f"<td>{escape(shipment.party_name)}</td>")
        rows.append(f"<td>{escape(shipment.bill_of_lading)}</td>")
        rows.append(f"<td>{escape(shipment.container_number)}</td>")
        rows.append(f"<td>{escape(shipment.mode.title())}</td>")
        rows.append(f"<td><span class='badge'>{escape(shipment.status)}</span></td>")
        rows.append(f"<td>{escape(shipment.etd)}</td>")
        rows.append(f"<td>{escape(shipment.eta)}</td>")
        rows.append(f"<td>{escape(shipment.currency)}</td>")
        rows.append(f"<td class='num'>{_money(shipment.total_charges, shipment.currency)}</td>")
        rows.append("</tr>")
    if not shipments:
        rows.append(f"<tr><td colspan='{len(SHIPMENT_REPORT_COLUMNS)}'>(No shipments)</td></tr>")
    rows.append("</tbody>")
    rows.append("</table>")

    return _page(title, header + "\n".join(rows))


# ==================== Financial Statements ====================


def _statement_rows(lines: List[tuple]) -> str:
    rows = ["<table class='data-table'>", "<tbody>"]
    for label, amount, is_total in lines:
        css = " class='subtotal'" if is_total else ""
        rows.append(f"<tr{css}><td>{escape(label)}</td><td class='num'>{_money(amount)}</td></tr>")
    rows.append("</tbody>")
    rows.append("</table>")
    return "\n".join(rows)


def generate_profit_loss_html(pl: ProfitLoss) -> str:
    """Render a profit & loss statement (USD)."""
    header = _build_header("Profit & Loss", [f"Period: {pl.period}", "Amounts in USD"])

    body = [header]
    body.append("<h2 class='section-title'>Revenue</h2>")
    body.append(_statement_rows([
        ("Service Revenue", pl.service_revenue, False),
        ("Freight Revenue", pl.freight_revenue, False),
        ("Other Income", pl.other_income, False),
        ("Total Revenue", pl.total_revenue, True),
    ]))
    body.append("<h2 class='section-title'>Cost of Services</h2>")
    body.append(_statement_rows([
        ("Freight Costs", pl.freight_costs, False),
        ("Handling Costs", pl.handling_costs, False),
        ("Total Cost of Services", pl.total_cost_of_services, True),
        ("Gross Profit", pl.gross_profit, True),
    ]))
    body.append(f"<p>Gross margin: {pl.gross_margin:.1f}%</p>")
    body.append("<h2 class='section-title'>Operating Expenses</h2>")
    body.append(_statement_rows([
        ("Salaries and Wages", pl.salaries, False),
        ("Rent", pl.rent, False),
        ("Utilities", pl.utilities, False),
        ("Insurance", pl.insurance, False),
        ("Depreciation", pl.depreciation, False),
        ("Marketing", pl.marketing, False),
        ("Administrative", pl.administrative, False),
        ("Other Operating", pl.other_operating, False),
        ("Total Operating Expenses", pl.total_operating_expenses, True),
        ("Operating Income", pl.operating_income, True),
    ]))
    body.append("<h2 class='section-title'>Other Expenses</h2>")
    body.append(_statement_rows([
        ("Interest Expense", pl.interest_expense, False),
        ("Taxes", pl.taxes, False),
        ("Net Income", pl.net_income, True),
    ]))
    body.append(f"<p>Net margin: {pl.net_margin:.1f}%</p>")

    return _page("Profit & Loss", "\n".join(body))


def generate_balance_sheet_html(sheet: BalanceSheet) -> str:
    """Render a balance sheet (USD) with the balanced badge."""
    balanced = balance_sheet_is_balanced(sheet)
    badge = (
        "<span class='badge badge--ok'>Balanced</span>"
        if balanced
        else "<span class='badge badge--error'>Not balanced</span>"
    )
    header = _build_header("Balance Sheet", [f"As of {sheet.as_of_date}", "Amounts in USD"])

    body = [header, f"<p>{badge}</p>"]
    body.append("<h2 class='section-title'>Assets</h2>")
    body.append(_statement_rows([
        ("Cash and Cash Equivalents", sheet.cash, False),
        ("Accounts Receivable", sheet.accounts_receivable, False),
        ("Inventory", sheet.inventory, False),
        ("Prepaid Expenses", sheet.prepaid_expenses, False),
        ("Total Current Assets", sheet.total_current_assets, True),
        ("Property, Plant & Equipment", sheet.property_plant_equipment, False),
        ("Accumulated Depreciation", sheet.accumulated_depreciation, False),
        ("Net Fixed Assets", sheet.net_fixed_assets, True),
        ("Other Assets", sheet.other_assets, False),
        ("Total Assets", sheet.total_assets, True),
    ]))
    body.append("<h2 class='section-title'>Liabilities</h2>")
    body.append(_statement_rows([
        ("Accounts Payable", sheet.accounts_payable, False),
        ("Accrued Expenses", sheet.accrued_expenses, False),
        ("Short-term Debt", sheet.short_term_debt, False),
        ("Total Current Liabilities", sheet.total_current_liabilities, True),
        ("Long-term Debt", sheet.long_term_debt, False),
        ("Other Long-term Liabilities", sheet.other_long_term, False),
        ("Total Liabilities", sheet.total_liabilities, True),
    ]))
    body.append("<h2 class='section-title'>Equity</h2>")
    body.append(_statement_rows([
        ("Owner's Equity", sheet.owners_equity, False),
        ("Retained Earnings", sheet.retained_earnings, False),
        ("Current Year Earnings", sheet.current_year_earnings, False),
        ("Total Equity", sheet.total_equity, True),
        ("Total Liabilities & Equity", sheet.total_liabilities_and_equity, True),
    ]))

    return _page("Balance Sheet", "\n".join(body))


# ==================== PDF Output ====================


def generate_invoice_pdf(
    pdf_service: PDFService,
    invoice: Invoice,
    output_dir: Path,
) -> Path:
    """
    Render an invoice to <output_dir>/<invoice_number>.pdf with page footer.

    Args:
        pdf_service: PDFService instance (injected)
        invoice: Invoice to render
        output_dir: Target directory

    Returns:
        Path to the PDF

    Raises:
        ReportGenerationError: If generation fails
    """
    output_path = Path(output_dir) / f"{sanitize_filename(invoice.invoice_number)}.pdf"
    pdf_service.html_to_pdf(generate_invoice_html(invoice), output_path)
    add_page_footer(output_path, label=invoice.invoice_number)
    logger.info(f"Invoice PDF written: {output_path}")
    return output_path


def generate_html_pdf(
    pdf_service: PDFService,
    html_content: str,
    output_path: Path,
    label: Optional[str] = None,
    landscape: bool = False,
) -> Path:
    """Render any report HTML to PDF and number its pages."""
    pdf_service.html_to_pdf(html_content, output_path, landscape=landscape)
    add_page_footer(output_path, label=label)
    return Path(output_path)


def generate_statement_pack(
    pdf_service: PDFService,
    party_name: str,
    invoices: List[Invoice],
    ledger_entries: List[LedgerEntry],
    output_path: Path,
    progress_callback: Optional[Callable[[int], None]] = None,
) -> Path:
    """
    Build one PDF for a party: ledger statement followed by every invoice.

    Pipeline:
    1. Statement HTML -> PDF
    2. Each invoice HTML -> PDF
    3. Merge in order
    4. Number all pages "Page X/Y"

    Args:
        pdf_service: PDFService instance (injected)
        party_name: Customer or vendor name
        invoices: Invoices to attach (e.g. all open invoices of the party)
        ledger_entries: Ledger entries for the statement page
        output_path: Final PDF path
        progress_callback: Optional progress callback (0-100)

    Returns:
        Path to the merged PDF

    Raises:
        ReportGenerationError: If any step fails
    """
    logger.info(f"Generating statement pack for {party_name} ({len(invoices)} invoices)")
    temp_dir = Path(tempfile.mkdtemp(prefix="freightdesk_pack_"))

    try:
        statement_pdf = temp_dir / "000_statement.pdf"
        pdf_service.html_to_pdf(
            generate_ledger_statement_html(ledger_entries, "Statement of Account", party_name),
            statement_pdf,
        )
        parts = [statement_pdf]

        if progress_callback:
            progress_callback(10)

        for index, invoice in enumerate(invoices, 1):
            invoice_pdf = temp_dir / f"{index:03d}_{sanitize_filename(invoice.invoice_number)}.pdf"
            pdf_service.html_to_pdf(generate_invoice_html(invoice), invoice_pdf)
            parts.append(invoice_pdf)
            if progress_callback:
                progress_callback(10 + int(index / len(invoices) * 70))

        pdf_service.merge_pdfs(parts, output_path)
        add_page_footer(output_path, label=f"Statement - {party_name}")

        if progress_callback:
            progress_callback(100)

        logger.info(f"Statement pack written: {output_path} ({count_pdf_pages(output_path)} pages)")
        return Path(output_path)

    except ReportGenerationError:
        raise
    except Exception as e:
        logger.exception(f"Statement pack failed for {party_name}")
        raise ReportGenerationError(
            f"Failed to generate statement pack: {e}",
            details={"party_name": party_name, "output_path": str(output_path)},
        )
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)


# ==================== Excel Output ====================


def export_shipments_to_excel(shipments: Iterable[Shipment], output_path: Path) -> Path:
    """Write the shipment report table to Excel."""
    rows = []
    for shipment in shipments:
        row = shipment.to_dict()
        row["party_name"] = shipment.party_name
        rows.append(row)
    return write_table(rows, output_path, sheet_name="Shipments", columns=SHIPMENT_REPORT_COLUMNS)


def export_ledger_to_excel(entries: Iterable[LedgerEntry], output_path: Path) -> Path:
    """Write ledger entries with running balance to Excel."""
    rows = [entry.to_dict() for entry in apply_running_balance(list(entries))]
    return write_table(rows, output_path, sheet_name="Ledger", columns=LEDGER_COLUMNS)
