"""
Reports Tab for FreightDesk Main Window.

- Shipment detail report (import or export) with status filter, search
  and summary figures in the display currency
- Profit & loss for a date range
- Balance sheet as of a date, flagged balanced / unbalanced
"""

import logging
from datetime import date
from pathlib import Path
from typing import List

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QLabel,
    QMessageBox, QLineEdit, QComboBox, QTabWidget, QTextBrowser,
    QFileDialog
)

from config import AppContext
from config.paths import sanitize_filename
from domain.exceptions import FreightDeskError
from domain.models import EXPORT_STATUSES, IMPORT_STATUSES
from operations import (
    balance_sheet_is_balanced,
    export_shipments_to_excel,
    filter_shipments,
    generate_balance_sheet,
    generate_balance_sheet_html,
    generate_html_pdf,
    generate_profit_loss,
    generate_profit_loss_html,
    generate_shipment_report_html,
    get_shipment_report_stats,
    list_shipments,
)
from services import create_pdf_service
from ui.styles import BALANCED_STYLE, UNBALANCED_STYLE
from ui.widgets import date_edit, iso_date

logger = logging.getLogger(__name__)

STATUSES_BY_KIND = {"import": IMPORT_STATUSES, "export": EXPORT_STATUSES}


def _save_pdf(parent: QWidget, context: AppContext, html: str, name: str, landscape: bool = False):
    """Ask for a path and render html to PDF there."""
    default_path = context.reports_dir / f"{sanitize_filename(name)}.pdf"
    output_path, _ = QFileDialog.getSaveFileName(parent, "Export PDF", str(default_path), "PDF Files (*.pdf)")
    if not output_path:
        return

    try:
        pdf_service = create_pdf_service(context.settings.pdf_page_size)
        generate_html_pdf(pdf_service, html, Path(output_path), label=name, landscape=landscape)
    except EnvironmentError as e:
        QMessageBox.critical(parent, "Chrome not found", str(e))
        return
    except FreightDeskError as e:
        logger.exception(f"PDF export failed: {name}")
        QMessageBox.warning(parent, "Error", f"Could not export PDF:\n{e.message}")
        return

    QMessageBox.information(parent, "Exported", f"Report exported to:\n{output_path}")


class ShipmentReportPanel(QWidget):
    """Shipment detail report."""

    def __init__(self, context: AppContext, parent=None):
        super().__init__(parent)
        self.context = context
        self.shipments: List = []
        self.filtered: List = []

        layout = QVBoxLayout(self)

        filters = QHBoxLayout()
        filters.addWidget(QLabel("Shipments:"))
        self.kind_combo = QComboBox()
        self.kind_combo.addItem("Import", "import")
        self.kind_combo.addItem("Export", "export")
        self.kind_combo.currentIndexChanged.connect(self._on_kind_changed)
        filters.addWidget(self.kind_combo)

        filters.addWidget(QLabel("Status:"))
        self.status_combo = QComboBox()
        self.status_combo.currentIndexChanged.connect(self._apply_filter)
        filters.addWidget(self.status_combo)

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search job #, B/L, container, party...")
        self.search_input.textChanged.connect(self._apply_filter)
        filters.addWidget(self.search_input)

        btn_refresh = QPushButton("Refresh")
        btn_refresh.clicked.connect(self.refresh)
        filters.addWidget(btn_refresh)
        btn_pdf = QPushButton("Export PDF")
        btn_pdf.clicked.connect(self._export_pdf)
        filters.addWidget(btn_pdf)
        btn_excel = QPushButton("Export Excel")
        btn_excel.clicked.connect(self._export_excel)
        filters.addWidget(btn_excel)
        layout.addLayout(filters)

        self.stats_label = QLabel()
        self.stats_label.setStyleSheet("font-weight: bold; padding: 4px;")
        layout.addWidget(self.stats_label)

        self.preview = QTextBrowser()
        layout.addWidget(self.preview)

        self._fill_statuses()
        self.refresh()

    @property
    def kind(self) -> str:
        return self.kind_combo.currentData()

    def _title(self) -> str:
        return f"{self.kind.title()} Shipment Report"

    def _fill_statuses(self):
        self.status_combo.blockSignals(True)
        self.status_combo.clear()
        self.status_combo.addItem("All statuses", "all")
        for status in STATUSES_BY_KIND[self.kind]:
            self.status_combo.addItem(status, status)
        self.status_combo.blockSignals(False)

    def _on_kind_changed(self, *_):
        self._fill_statuses()
        self.refresh()

    def refresh(self):
        try:
            self.shipments = list_shipments(self.context.database, self.kind)
        except FreightDeskError as e:
            logger.exception("Failed to load shipments for report")
            QMessageBox.warning(self, "Error", f"Could not load shipments:\n{e.message}")
            return
        self._apply_filter()

    def _apply_filter(self, *_):
        self.filtered = filter_shipments(
            self.shipments,
            status=self.status_combo.currentData(),
            search=self.search_input.text(),
        )
        currency = self.context.display_currency
        stats = get_shipment_report_stats(self.filtered, currency)
        self.stats_label.setText(
            f"Total: {stats['total']} | In transit: {stats['in_transit']} | "
            f"Delivered: {stats['delivered']} | Charges: {stats['total_charges']:,.2f} {currency}"
        )
        self.preview.setHtml(generate_shipment_report_html(self.filtered, stats, currency, self._title()))

    def _export_pdf(self):
        stats = get_shipment_report_stats(self.filtered, self.context.display_currency)
        html = generate_shipment_report_html(self.filtered, stats, self.context.display_currency, self._title())
        _save_pdf(self, self.context, html, self._title(), landscape=True)

    def _export_excel(self):
        default_path = self.context.reports_dir / f"{sanitize_filename(self._title())}.xlsx"
        output_path, _ = QFileDialog.getSaveFileName(self, "Export Excel", str(default_path), "Excel Files (*.xlsx)")
        if not output_path:
            return
        try:
            export_shipments_to_excel(self.filtered, Path(output_path))
        except FreightDeskError as e:
            logger.exception("Shipment Excel export failed")
            QMessageBox.warning(self, "Error", f"Could not export report:\n{e.message}")
            return
        QMessageBox.information(self, "Exported", f"Report exported to:\n{output_path}")


class ProfitLossPanel(QWidget):
    """Profit & loss for a date range."""

    def __init__(self, context: AppContext, parent=None):
        super().__init__(parent)
        self.context = context
        self.html = ""

        layout = QVBoxLayout(self)
        controls = QHBoxLayout()
        controls.addWidget(QLabel("From:"))
        self.start_input = date_edit(date.today().replace(month=1, day=1).isoformat())
        controls.addWidget(self.start_input)
        controls.addWidget(QLabel("To:"))
        self.end_input = date_edit()
        controls.addWidget(self.end_input)
        btn_generate = QPushButton("Generate")
        btn_generate.clicked.connect(self.generate)
        controls.addWidget(btn_generate)
        btn_pdf = QPushButton("Export PDF")
        btn_pdf.clicked.connect(self._export_pdf)
        controls.addWidget(btn_pdf)
        controls.addStretch()
        layout.addLayout(controls)

        self.summary_label = QLabel()
        self.summary_label.setStyleSheet("font-weight: bold; padding: 4px;")
        layout.addWidget(self.summary_label)

        self.preview = QTextBrowser()
        layout.addWidget(self.preview)

    def generate(self):
        start, end = iso_date(self.start_input), iso_date(self.end_input)
        if start > end:
            QMessageBox.warning(self, "Invalid period", "Start date must be before end date.")
            return
        try:
            pl = generate_profit_loss(self.context.database, start, end)
        except FreightDeskError as e:
            logger.exception("Profit & loss failed")
            QMessageBox.warning(self, "Error", f"Could not build profit & loss:\n{e.message}")
            return

        self.html = generate_profit_loss_html(pl)
        self.preview.setHtml(self.html)
        self.summary_label.setText(
            f"Revenue: {pl.total_revenue:,.2f} | Gross profit: {pl.gross_profit:,.2f} "
            f"({pl.gross_margin:.1f}%) | Net income: {pl.net_income:,.2f} ({pl.net_margin:.1f}%) USD"
        )

    def _export_pdf(self):
        if not self.html:
            self.generate()
        if self.html:
            name = f"Profit and Loss {iso_date(self.start_input)} to {iso_date(self.end_input)}"
            _save_pdf(self, self.context, self.html, name)


class BalanceSheetPanel(QWidget):
    """Balance sheet as of a date."""

    def __init__(self, context: AppContext, parent=None):
        super().__init__(parent)
        self.context = context
        self.html = ""

        layout = QVBoxLayout(self)
        controls = QHBoxLayout()
        controls.addWidget(QLabel("As of:"))
        self.as_of_input = date_edit()
        controls.addWidget(self.as_of_input)
        btn_generate = QPushButton("Generate")
        btn_generate.clicked.connect(self.generate)
        controls.addWidget(btn_generate)
        btn_pdf = QPushButton("Export PDF")
        btn_pdf.clicked.connect(self._export_pdf)
        controls.addWidget(btn_pdf)
        controls.addStretch()
        layout.addLayout(controls)

        self.balanced_label = QLabel()
        layout.addWidget(self.balanced_label)

        self.preview = QTextBrowser()
        layout.addWidget(self.preview)

    def generate(self):
        try:
            sheet = generate_balance_sheet(self.context.database, iso_date(self.as_of_input))
        except FreightDeskError as e:
            logger.exception("Balance sheet failed")
            QMessageBox.warning(self, "Error", f"Could not build balance sheet:\n{e.message}")
            return

        self.html = generate_balance_sheet_html(sheet)
        self.preview.setHtml(self.html)
        if balance_sheet_is_balanced(sheet):
            self.balanced_label.setText("Balanced")
            self.balanced_label.setStyleSheet(BALANCED_STYLE)
        else:
            difference = sheet.total_assets - sheet.total_liabilities_and_equity
            self.balanced_label.setText(f"Not balanced (difference {difference:,.2f} USD)")
            self.balanced_label.setStyleSheet(UNBALANCED_STYLE)

    def _export_pdf(self):
        if not self.html:
            self.generate()
        if self.html:
            _save_pdf(self, self.context, self.html, f"Balance Sheet {iso_date(self.as_of_input)}")


class ReportsTab(QTabWidget):
    """Shipment and financial reports."""

    def __init__(self, context: AppContext, parent=None):
        super().__init__(parent)
        self.shipment_report = ShipmentReportPanel(context)
        self.profit_loss = ProfitLossPanel(context)
        self.balance_sheet = BalanceSheetPanel(context)
        self.addTab(self.shipment_report, "Shipment Report")
        self.addTab(self.profit_loss, "Profit & Loss")
        self.addTab(self.balance_sheet, "Balance Sheet")

    def set_context(self, context: AppContext):
        for panel in (self.shipment_report, self.profit_loss, self.balance_sheet):
            panel.context = context
        self.shipment_report.refresh()

