"""
Invoices Tab for FreightDesk Main Window.

Customer invoices and vendor bills: list with billing totals, an editor
for line items, tax and discount, status changes, invoice PDF and the
statement pack (ledger statement followed by every open invoice).
"""

import logging
from datetime import date, timedelta
from pathlib import Path
from typing import List, Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QPushButton,
    QLabel, QGroupBox, QMessageBox, QLineEdit, QComboBox, QSplitter,
    QTextEdit, QFileDialog
)
from PySide6.QtCore import Qt, Signal

from config import AppContext
from config.constants import DEFAULT_PAYMENT_TERMS
from config.paths import sanitize_filename
from domain.exceptions import FreightDeskError, ValidationError
from domain.models import INVOICE_STATUSES, Invoice
from domain.rules import recalculate_invoice, remove_record, replace_record
from operations import (
    create_invoice,
    delete_invoice,
    generate_invoice_pdf,
    generate_statement_pack,
    get_billing_stats,
    list_invoices,
    list_ledger_entries,
    save_invoice,
    update_invoice_status,
)
from services import create_pdf_service
from ui.dialogs import LineItemDialog, ReportProgressDialog
from ui.widgets import (
    ErrorLabel,
    RecordTable,
    amount_spin,
    currency_combo,
    date_edit,
    iso_date,
    list_combo,
    set_combo_data,
    set_iso_date,
)
from ui.workers import ReportGenerationWorker

logger = logging.getLogger(__name__)

PARTY_TYPE_LABELS = {"customer": "Customer Invoices", "vendor": "Vendor Bills"}

PACK_STATUS_MESSAGES = {
    0: "Preparing...",
    10: "Statement rendered, rendering invoices...",
    100: "Done!",
}


class InvoicesTab(QWidget):
    """
    Billing screen.

    Signals:
        invoices_changed(list): Emitted with the cached invoice list after a change
    """

    invoices_changed = Signal(list)

    def __init__(self, context: AppContext, parent=None):
        super().__init__(parent)
        self.context = context
        self.invoices: List[Invoice] = []
        self.customers: List = []
        self.vendors: List = []
        self.current: Optional[Invoice] = None
        self.line_items = []
        self.worker: Optional[ReportGenerationWorker] = None

        self._setup_ui()
        self.refresh()

    # ---- UI ----

    def _setup_ui(self):
        layout = QVBoxLayout(self)

        # Filters
        filter_layout = QHBoxLayout()
        filter_layout.addWidget(QLabel("Show:"))
        self.party_type_filter = QComboBox()
        for party_type, label in PARTY_TYPE_LABELS.items():
            self.party_type_filter.addItem(label, party_type)
        self.party_type_filter.currentIndexChanged.connect(self._on_party_type_changed)
        filter_layout.addWidget(self.party_type_filter)

        filter_layout.addWidget(QLabel("Party:"))
        self.party_filter = QComboBox()
        self.party_filter.currentIndexChanged.connect(self._apply_filter)
        filter_layout.addWidget(self.party_filter)
        filter_layout.addStretch()

        btn_refresh = QPushButton("Refresh")
        btn_refresh.clicked.connect(self.refresh)
        filter_layout.addWidget(btn_refresh)
        layout.addLayout(filter_layout)

        # Stats
        self.stats_label = QLabel()
        self.stats_label.setStyleSheet("font-weight: bold; padding: 4px;")
        layout.addWidget(self.stats_label)

        splitter = QSplitter(Qt.Horizontal)

        # Invoice list
        self.table = RecordTable([
            ("Invoice #", lambda i: i.invoice_number),
            ("Date", lambda i: i.invoice_date),
            ("Party", lambda i: i.party_name),
            ("Job #", lambda i: i.job_number),
            ("Currency", lambda i: i.currency),
            ("Total", lambda i: i.total),
            ("Paid", lambda i: i.paid_amount),
            ("Status", lambda i: i.status),
        ], status_column="Status")
        self.table.record_activated.connect(self.load_invoice)
        splitter.addWidget(self.table)

        splitter.addWidget(self._build_editor())
        splitter.setSizes([520, 640])
        layout.addWidget(splitter)

    def _build_editor(self) -> QWidget:
        editor = QWidget()
        layout = QVBoxLayout(editor)

        self.mode_label = QLabel()
        self.mode_label.setStyleSheet("font-size: 13pt; font-weight: bold;")
        layout.addWidget(self.mode_label)

        header_group = QGroupBox("Invoice")
        grid = QGridLayout()

        grid.addWidget(QLabel("Party *"), 0, 0)
        self.party_combo = QComboBox()
        grid.addWidget(self.party_combo, 0, 1)
        self.party_error = ErrorLabel()
        grid.addWidget(self.party_error, 1, 1)

        grid.addWidget(QLabel("Invoice #"), 0, 2)
        self.number_label = QLabel("(generated on save)")
        grid.addWidget(self.number_label, 0, 3)

        grid.addWidget(QLabel("Invoice date"), 2, 0)
        self.invoice_date = date_edit()
        grid.addWidget(self.invoice_date, 2, 1)

        grid.addWidget(QLabel("Due date"), 2, 2)
        self.due_date = date_edit((date.today() + timedelta(days=30)).isoformat())
        grid.addWidget(self.due_date, 2, 3)

        grid.addWidget(QLabel("Job #"), 3, 0)
        self.job_input = QLineEdit()
        grid.addWidget(self.job_input, 3, 1)

        grid.addWidget(QLabel("PO #"), 3, 2)
        self.po_input = QLineEdit()
        grid.addWidget(self.po_input, 3, 3)

        grid.addWidget(QLabel("Currency"), 4, 0)
        self.currency_input = currency_combo("USD")
        grid.addWidget(self.currency_input, 4, 1)

        grid.addWidget(QLabel("Payment terms"), 4, 2)
        self.terms_input = QLineEdit(DEFAULT_PAYMENT_TERMS)
        grid.addWidget(self.terms_input, 4, 3)

        grid.addWidget(QLabel("Status"), 5, 0)
        self.status_input = list_combo(INVOICE_STATUSES, "draft")
        grid.addWidget(self.status_input, 5, 1)

        header_group.setLayout(grid)
        layout.addWidget(header_group)

        # Line items
        items_group = QGroupBox("Line Items")
        items_layout = QVBoxLayout()
        self.items_table = RecordTable([
            ("Description", lambda li: li.description),
            ("Qty", lambda li: li.quantity),
            ("Unit price", lambda li: li.unit_price),
            ("Amount", lambda li: li.amount),
        ])
        self.items_table.record_activated.connect(self._edit_line_item)
        items_layout.addWidget(self.items_table)

        item_buttons = QHBoxLayout()
        btn_add_item = QPushButton("Add item")
        btn_add_item.clicked.connect(lambda: self._edit_line_item(None))
        item_buttons.addWidget(btn_add_item)
        btn_remove_item = QPushButton("Remove item")
        btn_remove_item.clicked.connect(self._remove_line_item)
        item_buttons.addWidget(btn_remove_item)
        item_buttons.addStretch()
        items_layout.addLayout(item_buttons)
        items_group.setLayout(items_layout)
        layout.addWidget(items_group)

        # Totals
        totals_group = QGroupBox("Totals")
        totals = QGridLayout()
        totals.addWidget(QLabel("Tax rate (%)"), 0, 0)
        self.tax_input = amount_spin(100.0)
        self.tax_input.valueChanged.connect(self._update_totals)
        totals.addWidget(self.tax_input, 0, 1)
        totals.addWidget(QLabel("Discount"), 0, 2)
        self.discount_input = amount_spin()
        self.discount_input.valueChanged.connect(self._update_totals)
        totals.addWidget(self.discount_input, 0, 3)
        self.totals_label = QLabel()
        self.totals_label.setStyleSheet("font-weight: bold;")
        totals.addWidget(self.totals_label, 1, 0, 1, 4)
        totals_group.setLayout(totals)
        layout.addWidget(totals_group)

        self.notes_input = QTextEdit()
        self.notes_input.setPlaceholderText("Notes")
        self.notes_input.setMaximumHeight(60)
        layout.addWidget(self.notes_input)

        self.bank_input = QTextEdit()
        self.bank_input.setPlaceholderText("Bank details")
        self.bank_input.setMaximumHeight(60)
        layout.addWidget(self.bank_input)

        self.form_error = ErrorLabel()
        layout.addWidget(self.form_error)

        buttons = QHBoxLayout()
        for label, handler in (
            ("New", self.clear_form),
            ("Save", self.save),
            ("Apply status", self._apply_status),
            ("Delete", self._delete_current),
            ("Invoice PDF", self._export_pdf),
            ("Statement pack", self._export_statement_pack),
        ):
            button = QPushButton(label)
            button.clicked.connect(handler)
            buttons.addWidget(button)
        layout.addLayout(buttons)

        self._update_totals()
        return editor

    # ---- data ----

    @property
    def party_type(self) -> str:
        return self.party_type_filter.currentData()

    def _parties(self) -> List:
        return self.vendors if self.party_type == "vendor" else self.customers

    def set_customers(self, customers: List):
        self.customers = list(customers)
        if self.party_type == "customer":
            self._fill_party_combos()

    def set_vendors(self, vendors: List):
        self.vendors = list(vendors)
        if self.party_type == "vendor":
            self._fill_party_combos()

    def _fill_party_combos(self):
        filter_value = self.party_filter.currentData()
        editor_value = self.party_combo.currentData()

        self.party_filter.blockSignals(True)
        self.party_filter.clear()
        self.party_filter.addItem("All", "")
        self.party_combo.clear()
        self.party_combo.addItem("Select...", "")
        for party in self._parties():
            self.party_filter.addItem(party.name, party.id)
            self.party_combo.addItem(party.name, party.id)
        set_combo_data(self.party_filter, filter_value or "")
        set_combo_data(self.party_combo, editor_value or "")
        self.party_filter.blockSignals(False)

    def refresh(self):
        """Reload all invoices."""
        try:
            self.invoices = list_invoices(self.context.database)
        except FreightDeskError as e:
            logger.exception("Failed to load invoices")
            QMessageBox.warning(self, "Error", f"Could not load invoices:\n{e.message}")
            return
        self._apply_filter()

    def set_invoice(self, invoice: Invoice):
        """An invoice changed elsewhere (e.g. shipment sync)."""
        self.invoices = replace_record(self.invoices, invoice)
        if self.current is not None and self.current.id == invoice.id:
            self.load_invoice(invoice)
        self._apply_filter()

    def _on_party_type_changed(self, *_):
        self._fill_party_combos()
        self.clear_form()
        self._apply_filter()

    def _visible_invoices(self) -> List[Invoice]:
        party_id = self.party_filter.currentData()
        return [
            i for i in self.invoices
            if i.party_type == self.party_type and (not party_id or i.party_id == party_id)
        ]

    def _apply_filter(self, *_):
        visible = self._visible_invoices()
        self.table.set_records(visible)

        stats = get_billing_stats(visible)
        self.stats_label.setText(
            f"{stats['count']} invoices | Billed: {stats['total_billed']:,.2f} | "
            f"Paid: {stats['paid']:,.2f} | Outstanding: {stats['outstanding']:,.2f} | "
            f"Overdue: {stats['overdue']:,.2f}"
        )

    # ---- editor ----

    def _update_mode_label(self):
        kind = "Vendor Bill" if self.party_type == "vendor" else "Invoice"
        if self.current is None:
            self.mode_label.setText(f"New {kind}")
        else:
            self.mode_label.setText(f"{kind} {self.current.invoice_number}")

    def _update_totals(self, *_):
        preview = Invoice(
            line_items=self.line_items,
            tax_rate=self.tax_input.value(),
            discount=self.discount_input.value(),
        )
        recalculate_invoice(preview)
        self.totals_label.setText(
            f"Subtotal: {preview.subtotal:,.2f}   Tax: {preview.tax_amount:,.2f}   "
            f"Discount: {preview.discount:,.2f}   Total: {preview.total:,.2f}"
        )

    def _edit_line_item(self, line_item=None):
        dialog = LineItemDialog(line_item, self)
        if dialog.exec():
            updated = dialog.line_item
            if line_item is None:
                self.line_items = self.line_items + [updated]
            else:
                self.line_items = replace_record(self.line_items, updated)
            self.items_table.set_records(self.line_items)
            self._update_totals()

    def _remove_line_item(self):
        item = self.items_table.selected_record()
        if item is None:
            return
        self.line_items = remove_record(self.line_items, item.id)
        self.items_table.set_records(self.line_items)
        self._update_totals()

    def clear_form(self):
        self.current = None
        self.line_items = []
        self.items_table.set_records([])
        set_combo_data(self.party_combo, "")
        set_iso_date(self.invoice_date, "")
        set_iso_date(self.due_date, (date.today() + timedelta(days=30)).isoformat())
        self.job_input.clear()
        self.po_input.clear()
        set_combo_data(self.currency_input, "USD")
        self.terms_input.setText(DEFAULT_PAYMENT_TERMS)
        set_combo_data(self.status_input, "draft")
        self.tax_input.setValue(0.0)
        self.discount_input.setValue(0.0)
        self.notes_input.clear()
        self.bank_input.clear()
        self.number_label.setText("(generated on save)")
        self.party_error.clear_error()
        self.form_error.clear_error()
        self._update_mode_label()
        self._update_totals()

    def load_invoice(self, invoice: Invoice):
        """Show an invoice in the editor."""
        if invoice.party_type != self.party_type:
            set_combo_data(self.party_type_filter, invoice.party_type)

        self.current = invoice
        self.line_items = list(invoice.line_items)
        self.items_table.set_records(self.line_items)
        set_combo_data(self.party_combo, invoice.party_id)
        set_iso_date(self.invoice_date, invoice.invoice_date)
        set_iso_date(self.due_date, invoice.due_date)
        self.job_input.setText(invoice.job_number)
        self.po_input.setText(invoice.po_number)
        set_combo_data(self.currency_input, invoice.currency)
        self.terms_input.setText(invoice.payment_terms)
        set_combo_data(self.status_input, invoice.status)
        self.tax_input.setValue(invoice.tax_rate)
        self.discount_input.setValue(invoice.discount)
        self.notes_input.setPlainText(invoice.notes)
        self.bank_input.setPlainText(invoice.bank_details)
        self.number_label.setText(invoice.invoice_number)
        self.party_error.clear_error()
        self.form_error.clear_error()
        self._update_mode_label()
        self._update_totals()

    def collect_invoice(self) -> Invoice:
        party_id = self.party_combo.currentData() or ""
        party = next((p for p in self._parties() if p.id == party_id), None)
        base = self.current.to_dict() if self.current is not None else {}
        base.update({
            "party_type": self.party_type,
            "party_id": party_id,
            "party_name": party.name if party else "",
            "party_address": party.address if party else "",
            "party_tax_id": party.ntn_number if party else "",
            "invoice_date": iso_date(self.invoice_date),
            "due_date": iso_date(self.due_date),
            "job_number": self.job_input.text().strip(),
            "po_number": self.po_input.text().strip(),
            "currency": self.currency_input.currentData(),
            "payment_terms": self.terms_input.text().strip(),
            "tax_rate": self.tax_input.value(),
            "discount": self.discount_input.value(),
            "notes": self.notes_input.toPlainText().strip(),
            "bank_details": self.bank_input.toPlainText().strip(),
            "line_items": list(self.line_items),
        })
        if self.current is None:
            base["status"] = self.status_input.currentData()
        return Invoice.from_dict(base)

    def _store(self, invoice: Invoice):
        self.invoices = replace_record(self.invoices, invoice)
        self.invoices_changed.emit(self.invoices)
        self._apply_filter()
        self.load_invoice(invoice)

    def save(self):
        """Create or save the invoice in the editor."""
        self.party_error.clear_error()
        self.form_error.clear_error()
        invoice = self.collect_invoice()

        try:
            if self.current is None:
                saved = create_invoice(self.context.database, invoice)
            else:
                saved = save_invoice(self.context.database, invoice)
        except ValidationError as e:
            if "party_id" in e.field_errors:
                self.party_error.show_error(e.field_errors["party_id"])
            else:
                self.form_error.show_error(e.message)
            return
        except FreightDeskError as e:
            logger.exception("Failed to save invoice")
            QMessageBox.warning(self, "Error", f"Could not save invoice:\n{e.message}")
            return

        self._store(saved)

    def _apply_status(self):
        if self.current is None:
            QMessageBox.information(self, "No invoice", "Save the invoice first.")
            return
        status = self.status_input.currentData()
        try:
            updated = update_invoice_status(self.context.database, self.current, status)
        except FreightDeskError as e:
            logger.exception("Failed to update invoice status")
            QMessageBox.warning(self, "Error", f"Could not update status:\n{e.message}")
            return
        self._store(updated)

    def _delete_current(self):
        if self.current is None:
            return
        reply = QMessageBox.question(self, "Delete invoice", f"Delete invoice {self.current.invoice_number}?")
        if reply != QMessageBox.Yes:
            return
        try:
            delete_invoice(self.context.database, self.current.id)
        except FreightDeskError as e:
            logger.exception("Failed to delete invoice")
            QMessageBox.warning(self, "Error", f"Could not delete invoice:\n{e.message}")
            return
        self.invoices = remove_record(self.invoices, self.current.id)
        self.invoices_changed.emit(self.invoices)
        self.clear_form()
        self._apply_filter()

    # ---- documents ----

    def _create_pdf_service(self):
        try:
            return create_pdf_service(self.context.settings.pdf_page_size)
        except EnvironmentError as e:
            QMessageBox.critical(self, "Chrome not found", str(e))
            return None

    def _run_report(self, job, output_hint: str):
        progress_dialog = ReportProgressDialog(self)
        self.worker = ReportGenerationWorker(job, PACK_STATUS_MESSAGES)
        self.worker.progress.connect(progress_dialog.update_progress)
        self.worker.completed.connect(progress_dialog.set_complete)
        self.worker.error.connect(progress_dialog.set_error)
        logger.info(f"Generating {output_hint}")
        self.worker.start()
        progress_dialog.exec()

    def _export_pdf(self):
        if self.current is None:
            QMessageBox.information(self, "No invoice", "Select or save an invoice first.")
            return
        pdf_service = self._create_pdf_service()
        if pdf_service is None:
            return

        invoice = self.current
        output_dir = self.context.reports_dir

        def job(progress):
            progress(0)
            path = generate_invoice_pdf(pdf_service, invoice, output_dir)
            progress(100)
            return path

        self._run_report(job, f"invoice PDF {invoice.invoice_number}")

    def _export_statement_pack(self):
        party_id = self.party_filter.currentData()
        if not party_id:
            QMessageBox.information(self, "Select party", "Choose a party in the filter first.")
            return

        party = next((p for p in self._parties() if p.id == party_id), None)
        party_name = party.name if party else party_id
        default_path = self.context.reports_dir / f"Statement_{sanitize_filename(party_name)}.pdf"
        output_path, _ = QFileDialog.getSaveFileName(
            self, "Save statement pack", str(default_path), "PDF Files (*.pdf)"
        )
        if not output_path:
            return

        try:
            entries = list_ledger_entries(self.context.database, self.party_type, party_id)
        except FreightDeskError as e:
            QMessageBox.warning(self, "Error", f"Could not load ledger:\n{e.message}")
            return

        pdf_service = self._create_pdf_service()
        if pdf_service is None:
            return

        open_invoices = [i for i in self._visible_invoices() if i.status not in ("paid", "cancelled")]

        def job(progress):
            return generate_statement_pack(
                pdf_service,
                party_name,
                open_invoices,
                entries,
                Path(output_path),
                progress_callback=progress,
            )

        self._run_report(job, f"statement pack for {party_name}")
