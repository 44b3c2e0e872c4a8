"""
Ledger Tab for FreightDesk Main Window.

Manual ledger entries and the ledger views:
- Customer / Vendor ledger for one party
- Customer group ledger (all customers)
- General ledger (every entry, with the chart of accounts)
- Outstanding: receivables/payables derived from invoices and expenses

Running balances are always computed oldest first.
"""

import logging
from pathlib import Path
from typing import Dict, List

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QPushButton,
    QLabel, QGroupBox, QMessageBox, QLineEdit, QComboBox, QSplitter,
    QFileDialog, QTreeWidget, QTreeWidgetItem
)
from PySide6.QtCore import Qt

from config import AppContext
from config.paths import sanitize_filename
from domain.exceptions import FreightDeskError, ValidationError
from domain.models import LEDGER_ENTRY_TYPES, LedgerEntry
from domain.rules import remove_record, replace_record
from operations import (
    build_customer_group_ledger,
    build_party_ledger,
    create_ledger_entry,
    delete_ledger_entry,
    derive_expense_entries,
    derive_ledger_entries,
    export_ledger_to_excel,
    generate_html_pdf,
    generate_ledger_statement_html,
    get_ledger_totals,
    group_accounts_by_type,
    list_expenses,
    list_invoices,
    list_ledger_entries,
)
from services import create_pdf_service
from ui.widgets import (
    ErrorLabel,
    RecordTable,
    amount_spin,
    date_edit,
    iso_date,
    list_combo,
    set_combo_data,
)

logger = logging.getLogger(__name__)

VIEW_CUSTOMER = "customer"
VIEW_VENDOR = "vendor"
VIEW_CUSTOMER_GROUP = "customer_group"
VIEW_GENERAL = "general"
VIEW_OUTSTANDING = "outstanding"

VIEW_LABELS = {
    VIEW_CUSTOMER: "Customer Ledger",
    VIEW_VENDOR: "Vendor Ledger",
    VIEW_CUSTOMER_GROUP: "Customer Group Ledger",
    VIEW_GENERAL: "General Ledger",
    VIEW_OUTSTANDING: "Outstanding Balances",
}

ACCOUNT_TYPE_LABELS = {
    "asset": "Assets",
    "liability": "Liabilities",
    "equity": "Equity",
    "revenue": "Revenue",
    "expense": "Expenses",
}

ENTRY_COLUMNS = [
    ("Date", lambda e: e.date),
    ("Party", lambda e: e.party_name),
    ("Type", lambda e: e.type),
    ("Job #", lambda e: e.job_number),
    ("Invoice #", lambda e: e.invoice_number),
    ("Description", lambda e: e.description),
    ("Debit", lambda e: e.debit),
    ("Credit", lambda e: e.credit),
    ("Balance", lambda e: e.balance),
]

OUTSTANDING_COLUMNS = [
    ("Date", lambda d: d.date),
    ("Party", lambda d: d.party_name),
    ("Source", lambda d: d.source),
    ("Invoice #", lambda d: d.invoice_number),
    ("Job #", lambda d: d.job_number),
    ("Total", lambda d: d.total),
    ("Paid", lambda d: d.paid),
    ("Outstanding", lambda d: d.outstanding),
    ("Status", lambda d: d.status),
]


class LedgerTab(QWidget):
    """Ledger entries and views."""

    def __init__(self, context: AppContext, parent=None):
        super().__init__(parent)
        self.context = context
        self.entries: List[LedgerEntry] = []
        self.shown: List[LedgerEntry] = []
        self.parties: Dict[str, List] = {"customer": [], "vendor": []}

        self._setup_ui()
        self.refresh()

    # ---- UI ----

    def _setup_ui(self):
        layout = QVBoxLayout(self)

        view_layout = QHBoxLayout()
        view_layout.addWidget(QLabel("View:"))
        self.view_combo = QComboBox()
        for view, label in VIEW_LABELS.items():
            self.view_combo.addItem(label, view)
        self.view_combo.currentIndexChanged.connect(self._on_view_changed)
        view_layout.addWidget(self.view_combo)

        view_layout.addWidget(QLabel("Party:"))
        self.party_filter = QComboBox()
        self.party_filter.currentIndexChanged.connect(self._apply_view)
        view_layout.addWidget(self.party_filter)
        view_layout.addStretch()

        btn_pdf = QPushButton("Export PDF")
        btn_pdf.clicked.connect(self._export_pdf)
        view_layout.addWidget(btn_pdf)
        btn_excel = QPushButton("Export Excel")
        btn_excel.clicked.connect(self._export_excel)
        view_layout.addWidget(btn_excel)
        layout.addLayout(view_layout)

        self.totals_label = QLabel()
        self.totals_label.setStyleSheet("font-weight: bold; padding: 4px;")
        layout.addWidget(self.totals_label)

        splitter = QSplitter(Qt.Horizontal)

        tables = QWidget()
        tables_layout = QVBoxLayout(tables)
        tables_layout.setContentsMargins(0, 0, 0, 0)
        self.table = RecordTable(ENTRY_COLUMNS)
        tables_layout.addWidget(self.table)
        self.outstanding_table = RecordTable(OUTSTANDING_COLUMNS, status_column="Status")
        self.outstanding_table.hide()
        tables_layout.addWidget(self.outstanding_table)
        splitter.addWidget(tables)

        self.accounts_tree = QTreeWidget()
        self.accounts_tree.setHeaderLabels(["Code", "Account"])
        self._fill_accounts()
        self.accounts_tree.hide()
        splitter.addWidget(self.accounts_tree)
        layout.addWidget(splitter)

        layout.addWidget(self._build_entry_form())

    def _fill_accounts(self):
        for account_type, accounts in group_accounts_by_type().items():
            parent = QTreeWidgetItem([ACCOUNT_TYPE_LABELS.get(account_type, account_type), ""])
            for account in accounts:
                QTreeWidgetItem(parent, [account.code, account.name])
            self.accounts_tree.addTopLevelItem(parent)
        self.accounts_tree.expandAll()

    def _build_entry_form(self) -> QGroupBox:
        group = QGroupBox("New Ledger Entry")
        grid = QGridLayout()

        grid.addWidget(QLabel("Party type"), 0, 0)
        self.entry_party_type = QComboBox()
        self.entry_party_type.addItem("Customer", "customer")
        self.entry_party_type.addItem("Vendor", "vendor")
        self.entry_party_type.currentIndexChanged.connect(self._fill_entry_parties)
        grid.addWidget(self.entry_party_type, 0, 1)

        grid.addWidget(QLabel("Party *"), 0, 2)
        self.entry_party = QComboBox()
        grid.addWidget(self.entry_party, 0, 3)

        grid.addWidget(QLabel("Date"), 1, 0)
        self.entry_date = date_edit()
        grid.addWidget(self.entry_date, 1, 1)

        grid.addWidget(QLabel("Type"), 1, 2)
        self.entry_type = list_combo(LEDGER_ENTRY_TYPES, "invoice")
        grid.addWidget(self.entry_type, 1, 3)

        grid.addWidget(QLabel("Description *"), 2, 0)
        self.entry_description = QLineEdit()
        grid.addWidget(self.entry_description, 2, 1, 1, 3)

        grid.addWidget(QLabel("Job #"), 3, 0)
        self.entry_job = QLineEdit()
        grid.addWidget(self.entry_job, 3, 1)

        grid.addWidget(QLabel("Invoice #"), 3, 2)
        self.entry_invoice = QLineEdit()
        grid.addWidget(self.entry_invoice, 3, 3)

        grid.addWidget(QLabel("Debit"), 4, 0)
        self.entry_debit = amount_spin()
        grid.addWidget(self.entry_debit, 4, 1)

        grid.addWidget(QLabel("Credit"), 4, 2)
        self.entry_credit = amount_spin()
        grid.addWidget(self.entry_credit, 4, 3)

        self.entry_error = ErrorLabel()
        grid.addWidget(self.entry_error, 5, 0, 1, 4)

        buttons = QHBoxLayout()
        buttons.addStretch()
        btn_delete = QPushButton("Delete selected")
        btn_delete.clicked.connect(self._delete_selected)
        buttons.addWidget(btn_delete)
        btn_add = QPushButton("Add Entry")
        btn_add.clicked.connect(self._add_entry)
        buttons.addWidget(btn_add)
        grid.addLayout(buttons, 6, 0, 1, 4)

        group.setLayout(grid)
        return group

    # ---- data ----

    @property
    def view(self) -> str:
        return self.view_combo.currentData()

    def set_customers(self, customers: List):
        self.parties["customer"] = list(customers)
        self._fill_party_filter()
        self._fill_entry_parties()

    def set_vendors(self, vendors: List):
        self.parties["vendor"] = list(vendors)
        self._fill_party_filter()
        self._fill_entry_parties()

    def _filter_parties(self) -> List:
        if self.view == VIEW_VENDOR:
            return self.parties["vendor"]
        if self.view in (VIEW_CUSTOMER, VIEW_CUSTOMER_GROUP):
            return self.parties["customer"]
        return []

    def _fill_party_filter(self):
        selected = self.party_filter.currentData()
        self.party_filter.blockSignals(True)
        self.party_filter.clear()
        self.party_filter.addItem("All", "")
        for party in self._filter_parties():
            self.party_filter.addItem(party.name, party.id)
        set_combo_data(self.party_filter, selected or "")
        self.party_filter.setEnabled(self.view in (VIEW_CUSTOMER, VIEW_VENDOR, VIEW_CUSTOMER_GROUP))
        self.party_filter.blockSignals(False)

    def _fill_entry_parties(self, *_):
        party_type = self.entry_party_type.currentData()
        self.entry_party.clear()
        self.entry_party.addItem("Select...", "")
        for party in self.parties[party_type]:
            self.entry_party.addItem(party.name, party.id)

    def refresh(self):
        """Reload ledger entries from the database."""
        try:
            self.entries = list_ledger_entries(self.context.database)
        except FreightDeskError as e:
            logger.exception("Failed to load ledger")
            QMessageBox.warning(self, "Error", f"Could not load ledger:\n{e.message}")
            return
        self._apply_view()

    def _on_view_changed(self, *_):
        self._fill_party_filter()
        self._apply_view()

    def _apply_view(self, *_):
        view = self.view
        party_id = self.party_filter.currentData() or None
        outstanding = view == VIEW_OUTSTANDING

        self.table.setVisible(not outstanding)
        self.outstanding_table.setVisible(outstanding)
        self.accounts_tree.setVisible(view == VIEW_GENERAL)

        if outstanding:
            self._show_outstanding()
            return

        if view == VIEW_CUSTOMER_GROUP:
            self.shown = build_customer_group_ledger(self.entries, party_id)
        elif view in (VIEW_CUSTOMER, VIEW_VENDOR):
            self.shown = build_party_ledger([e for e in self.entries if e.party_type == view], party_id)
        else:
            self.shown = build_party_ledger(self.entries)

        self.table.set_records(self.shown)
        totals = get_ledger_totals(self.shown)
        self.totals_label.setText(
            f"{totals['count']} entries | Debit: {totals['total_debit']:,.2f} | "
            f"Credit: {totals['total_credit']:,.2f} | Balance: {totals['balance']:,.2f} | "
            f"Outstanding: {totals['outstanding']:,.2f}"
        )

    def _show_outstanding(self):
        currency = self.context.display_currency
        try:
            rows = derive_ledger_entries(list_invoices(self.context.database), currency)
            rows += [r for r in derive_expense_entries(list_expenses(self.context.database), currency) if r.outstanding]
        except FreightDeskError as e:
            logger.exception("Failed to derive outstanding balances")
            QMessageBox.warning(self, "Error", f"Could not load balances:\n{e.message}")
            return

        self.outstanding_table.set_records(rows)
        receivable = sum(r.outstanding for r in rows if r.party_type == "customer")
        payable = sum(r.outstanding for r in rows if r.party_type == "vendor")
        self.totals_label.setText(
            f"Receivable: {receivable:,.2f} {currency} | Payable: {payable:,.2f} {currency}"
        )

    # ---- entries ----

    def _add_entry(self):
        self.entry_error.clear_error()
        party_type = self.entry_party_type.currentData()
        party_id = self.entry_party.currentData() or ""
        party = next((p for p in self.parties[party_type] if p.id == party_id), None)

        entry = LedgerEntry(
            date=iso_date(self.entry_date),
            party_type=party_type,
            party_id=party_id,
            party_name=party.name if party else "",
            job_number=self.entry_job.text().strip(),
            description=self.entry_description.text().strip(),
            invoice_number=self.entry_invoice.text().strip(),
            debit=self.entry_debit.value(),
            credit=self.entry_credit.value(),
            type=self.entry_type.currentData(),
        )

        try:
            saved = create_ledger_entry(self.context.database, entry)
        except ValidationError as e:
            messages = list(e.field_errors.values()) or [e.message]
            self.entry_error.show_error("\n".join(messages))
            return
        except FreightDeskError as e:
            logger.exception("Failed to create ledger entry")
            QMessageBox.warning(self, "Error", f"Could not save entry:\n{e.message}")
            return

        self.entries = replace_record(self.entries, saved)
        self.entry_description.clear()
        self.entry_job.clear()
        self.entry_invoice.clear()
        self.entry_debit.setValue(0.0)
        self.entry_credit.setValue(0.0)
        self._apply_view()

    def _delete_selected(self):
        entry = self.table.selected_record()
        if entry is None:
            return
        if QMessageBox.question(self, "Delete entry", f"Delete entry '{entry.description}'?") != QMessageBox.Yes:
            return
        try:
            delete_ledger_entry(self.context.database, entry.id)
        except FreightDeskError as e:
            logger.exception("Failed to delete ledger entry")
            QMessageBox.warning(self, "Error", f"Could not delete entry:\n{e.message}")
            return
        self.entries = remove_record(self.entries, entry.id)
        self._apply_view()

    # ---- export ----

    def _report_name(self) -> str:
        title = VIEW_LABELS[self.view]
        party = self.party_filter.currentText() if self.party_filter.currentData() else ""
        return f"{title} {party}".strip()

    def _export_pdf(self):
        if self.view == VIEW_OUTSTANDING:
            QMessageBox.information(self, "Not available", "Choose a ledger view to export.")
            return

        name = self._report_name()
        default_path = self.context.reports_dir / f"{sanitize_filename(name)}.pdf"
        output_path, _ = QFileDialog.getSaveFileName(self, "Export ledger", str(default_path), "PDF Files (*.pdf)")
        if not output_path:
            return

        party = self.party_filter.currentText() if self.party_filter.currentData() else ""
        html = generate_ledger_statement_html(
            self.shown, VIEW_LABELS[self.view], party, self.context.display_currency
        )
        try:
            pdf_service = create_pdf_service(self.context.settings.pdf_page_size)
            generate_html_pdf(pdf_service, html, Path(output_path), label=name, landscape=True)
        except EnvironmentError as e:
            QMessageBox.critical(self, "Chrome not found", str(e))
            return
        except FreightDeskError as e:
            logger.exception("Ledger PDF export failed")
            QMessageBox.warning(self, "Error", f"Could not export ledger:\n{e.message}")
            return

        QMessageBox.information(self, "Exported", f"Ledger exported to:\n{output_path}")

    def _export_excel(self):
        if self.view == VIEW_OUTSTANDING:
            QMessageBox.information(self, "Not available", "Choose a ledger view to export.")
            return

        default_path = self.context.reports_dir / f"{sanitize_filename(self._report_name())}.xlsx"
        output_path, _ = QFileDialog.getSaveFileName(self, "Export ledger", str(default_path), "Excel Files (*.xlsx)")
        if not output_path:
            return

        try:
            export_ledger_to_excel(self.shown, Path(output_path))
        except FreightDeskError as e:
            logger.exception("Ledger Excel export failed")
            QMessageBox.warning(self, "Error", f"Could not export ledger:\n{e.message}")
            return

        QMessageBox.information(self, "Exported", f"Ledger exported to:\n{output_path}")
