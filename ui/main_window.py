"""
Main Window for FreightDesk.

Tab-based UI:
- Customers / Vendors: profiles
- Import / Export: shipments (saving syncs the linked invoice)
- Invoices, Ledger, Expenses, Reports
"""

import logging

from PySide6.QtWidgets import (
    QMainWindow, QTabWidget, QWidget, QVBoxLayout,
    QToolBar, QMessageBox, QLabel, QComboBox, QSizePolicy
)
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QAction

from config import AppContext, APP_NAME, APP_VERSION
from domain.currency import get_currency_options
from services import SessionStore
from ui.tabs import (
    CustomersTab,
    VendorsTab,
    ImportShipmentTab,
    ExportShipmentTab,
    InvoicesTab,
    LedgerTab,
    ExpensesTab,
    ReportsTab,
)
from ui.widgets import set_combo_data

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """
    Main application window with tab-based UI.

    Features:
    - Profile changes are pushed to every tab that selects a party
    - Invoices updated by a shipment save are pushed to the invoices tab
    - Toolbar with display currency and logout
    - Status bar with the active tab

    Signals:
        logged_out(): Emitted after the session was cleared
    """

    logged_out = Signal()

    def __init__(self, context: AppContext, session_store: SessionStore, parent=None):
        """
        Initialize main window.

        Args:
            context: AppContext with database and settings
            session_store: Session token storage (cleared on logout)
            parent: Parent widget
        """
        super().__init__(parent)

        self.context = context
        self.session_store = session_store

        self._setup_ui()
        self._create_tabs()
        self._connect_tabs()
        self._setup_toolbar()
        self._setup_statusbar()

        logger.info(f"MainWindow initialized for user: {context.user_name}")

    def _setup_ui(self):
        """Setup main window properties."""
        self.setWindowTitle(f"{APP_NAME} - v{APP_VERSION}")
        self.resize(
            self.context.settings.window_width,
            self.context.settings.window_height,
        )

        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        self.main_layout = QVBoxLayout(central_widget)
        self.main_layout.setContentsMargins(0, 0, 0, 0)

    def _create_tabs(self):
        """Create tab widget with all tabs."""
        self.tab_widget = QTabWidget()
        self.tab_widget.setTabPosition(QTabWidget.North)
        self.tab_widget.setMovable(False)

        self.customers_tab = CustomersTab(self.context, parent=self)
        self.vendors_tab = VendorsTab(self.context, parent=self)
        self.import_tab = ImportShipmentTab(self.context, parent=self)
        self.export_tab = ExportShipmentTab(self.context, parent=self)
        self.invoices_tab = InvoicesTab(self.context, parent=self)
        self.ledger_tab = LedgerTab(self.context, parent=self)
        self.expenses_tab = ExpensesTab(self.context, parent=self)
        self.reports_tab = ReportsTab(self.context, parent=self)

        self.tabs = [
            (self.customers_tab, "Customers"),
            (self.vendors_tab, "Vendors"),
            (self.import_tab, "Import"),
            (self.export_tab, "Export"),
            (self.invoices_tab, "Invoices"),
            (self.ledger_tab, "Ledger"),
            (self.expenses_tab, "Expenses"),
            (self.reports_tab, "Reports"),
        ]
        for tab, title in self.tabs:
            self.tab_widget.addTab(tab, title)

        self.main_layout.addWidget(self.tab_widget)
        logger.debug(f"Tabs created: {', '.join(title for _, title in self.tabs)}")

    def _connect_tabs(self):
        """Wire cross-tab updates and push the initial profile lists."""
        self.customers_tab.profiles_changed.connect(self._on_customers_changed)
        self.vendors_tab.profiles_changed.connect(self._on_vendors_changed)

        self.import_tab.invoice_updated.connect(self._on_invoice_updated)
        self.export_tab.invoice_updated.connect(self._on_invoice_updated)
        self.invoices_tab.invoices_changed.connect(self._on_invoices_changed)

        self._on_customers_changed(self.customers_tab.profiles)
        self._on_vendors_changed(self.vendors_tab.profiles)

    def _setup_toolbar(self):
        """Create toolbar with display currency and logout."""
        toolbar = QToolBar("Session")
        toolbar.setMovable(False)
        self.addToolBar(Qt.TopToolBarArea, toolbar)

        toolbar.addWidget(QLabel("Display currency: "))
        self.currency_combo = QComboBox()
        for code in get_currency_options():
            self.currency_combo.addItem(code, code)
        set_combo_data(self.currency_combo, self.context.display_currency)
        self.currency_combo.currentIndexChanged.connect(self._on_display_currency_changed)
        toolbar.addWidget(self.currency_combo)

        spacer = QWidget()
        spacer.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)
        toolbar.addWidget(spacer)

        self.user_label = QLabel(f"<b>{self.context.user_name}</b>  ")
        toolbar.addWidget(self.user_label)

        logout_action = QAction("Log out", self)
        logout_action.triggered.connect(self._logout_clicked)
        toolbar.addAction(logout_action)

    def _setup_statusbar(self):
        """Create status bar."""
        self.tab_widget.currentChanged.connect(self._update_statusbar)
        self._update_statusbar(0)

    def _update_statusbar(self, index: int):
        """Update status bar when tab changes."""
        if 0 <= index < len(self.tabs):
            title = self.tabs[index][1]
            self.statusBar().showMessage(f"{title} | Display currency: {self.context.display_currency}")

    # ---- cross-tab updates ----

    def _on_customers_changed(self, customers: list):
        self.import_tab.set_parties(customers)
        self.invoices_tab.set_customers(customers)
        self.ledger_tab.set_customers(customers)

    def _on_vendors_changed(self, vendors: list):
        self.export_tab.set_parties(vendors)
        self.invoices_tab.set_vendors(vendors)
        self.ledger_tab.set_vendors(vendors)
        self.expenses_tab.set_vendors(vendors)

    def _on_invoice_updated(self, invoice):
        self.invoices_tab.set_invoice(invoice)
        logger.debug(f"Invoice {invoice.invoice_number} pushed to invoices tab")

    def _on_invoices_changed(self, invoices: list):
        for invoice in invoices:
            self.import_tab.set_invoice(invoice)
            self.export_tab.set_invoice(invoice)

    def _on_display_currency_changed(self, *_):
        currency = self.currency_combo.currentData()
        self.context = self.context.with_display_currency(currency)
        for tab, _ in self.tabs:
            tab.context = self.context
        self.ledger_tab.refresh()
        self.reports_tab.set_context(self.context)
        self._update_statusbar(self.tab_widget.currentIndex())
        logger.info(f"Display currency changed to {currency}")

    def _logout_clicked(self):
        reply = QMessageBox.question(self, "Log out", "Log out and close FreightDesk?")
        if reply != QMessageBox.Yes:
            return

        self.session_store.clear()
        logger.info(f"User {self.context.user_name} logged out")
        self.logged_out.emit()
        self.close()

    def closeEvent(self, event):
        """Handle window close event."""
        logger.info("MainWindow closing")
        event.accept()
