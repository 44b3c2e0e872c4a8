"""
Expenses Tab for FreightDesk Main Window.

Two sub-tabs:
- Expenses: company running costs with category/currency filters and totals
- Vendor Bills: operational bills from vendors, filtered by vendor and status
"""

import logging
from typing import List, Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QPushButton,
    QLabel, QGroupBox, QMessageBox, QLineEdit, QComboBox, QTabWidget
)

from config import AppContext
from domain.exceptions import FreightDeskError, ValidationError
from domain.models import (
    EXPENSE_CATEGORIES,
    PAYMENT_STATUSES,
    VENDOR_BILL_CATEGORIES,
    Expense,
    VendorBill,
)
from domain.rules import remove_record, replace_record
from operations import (
    create_expense,
    create_vendor_bill,
    delete_expense,
    delete_vendor_bill,
    filter_expenses,
    filter_vendor_bills,
    get_expense_stats,
    list_expenses,
    list_vendor_bills,
    mark_expense_paid,
    mark_vendor_bill_paid,
    update_expense,
    update_vendor_bill,
)
from ui.widgets import (
    ErrorLabel,
    RecordTable,
    amount_spin,
    choice_combo,
    currency_combo,
    date_edit,
    iso_date,
    list_combo,
    set_combo_data,
    set_iso_date,
)

logger = logging.getLogger(__name__)


class ExpensesPanel(QWidget):
    """Expense list, filters, totals and editor."""

    def __init__(self, context: AppContext, parent=None):
        super().__init__(parent)
        self.context = context
        self.expenses: List[Expense] = []
        self.current: Optional[Expense] = None

        self._setup_ui()
        self.refresh()

    def _setup_ui(self):
        layout = QVBoxLayout(self)

        filters = QHBoxLayout()
        filters.addWidget(QLabel("Category:"))
        self.category_filter = choice_combo(EXPENSE_CATEGORIES, "all", all_label="All categories")
        self.category_filter.currentIndexChanged.connect(self._apply_filter)
        filters.addWidget(self.category_filter)
        filters.addWidget(QLabel("Currency:"))
        self.currency_filter = currency_combo("ALL", include_all=True)
        self.currency_filter.currentIndexChanged.connect(self._apply_filter)
        filters.addWidget(self.currency_filter)
        filters.addStretch()
        layout.addLayout(filters)

        self.stats_label = QLabel()
        self.stats_label.setStyleSheet("font-weight: bold; padding: 4px;")
        self.stats_label.setWordWrap(True)
        layout.addWidget(self.stats_label)

        self.table = RecordTable([
            ("Date", lambda e: e.date),
            ("Category", lambda e: e.category_label),
            ("Description", lambda e: e.description),
            ("Vendor", lambda e: e.vendor_name),
            ("Reference", lambda e: e.reference),
            ("Currency", lambda e: e.currency),
            ("Amount", lambda e: e.amount),
            ("Status", lambda e: e.status),
        ], status_column="Status")
        self.table.record_activated.connect(self.load_expense)
        layout.addWidget(self.table)

        form_group = QGroupBox("Expense")
        grid = QGridLayout()

        grid.addWidget(QLabel("Category"), 0, 0)
        self.category_input = choice_combo(EXPENSE_CATEGORIES, "bills")
        grid.addWidget(self.category_input, 0, 1)

        grid.addWidget(QLabel("Date"), 0, 2)
        self.date_input = date_edit()
        grid.addWidget(self.date_input, 0, 3)

        grid.addWidget(QLabel("Amount *"), 1, 0)
        self.amount_input = amount_spin()
        grid.addWidget(self.amount_input, 1, 1)

        grid.addWidget(QLabel("Currency"), 1, 2)
        self.currency_input = currency_combo("USD")
        grid.addWidget(self.currency_input, 1, 3)

        grid.addWidget(QLabel("Description"), 2, 0)
        self.description_input = QLineEdit()
        grid.addWidget(self.description_input, 2, 1, 1, 3)

        grid.addWidget(QLabel("Vendor"), 3, 0)
        self.vendor_input = QLineEdit()
        grid.addWidget(self.vendor_input, 3, 1)

        grid.addWidget(QLabel("Reference"), 3, 2)
        self.reference_input = QLineEdit()
        grid.addWidget(self.reference_input, 3, 3)

        grid.addWidget(QLabel("Job #"), 4, 0)
        self.job_input = QLineEdit()
        grid.addWidget(self.job_input, 4, 1)

        grid.addWidget(QLabel("Status"), 4, 2)
        self.status_input = list_combo(PAYMENT_STATUSES, "pending")
        grid.addWidget(self.status_input, 4, 3)

        self.form_error = ErrorLabel()
        grid.addWidget(self.form_error, 5, 0, 1, 4)

        form_group.setLayout(grid)
        layout.addWidget(form_group)

        buttons = QHBoxLayout()
        for label, handler in (
            ("New", self.clear_form),
            ("Save", self.save),
            ("Mark paid", self._mark_paid),
            ("Delete", self._delete_selected),
        ):
            button = QPushButton(label)
            button.clicked.connect(handler)
            buttons.addWidget(button)
        buttons.addStretch()
        layout.addLayout(buttons)

    def refresh(self):
        try:
            self.expenses = list_expenses(self.context.database)
        except FreightDeskError as e:
            logger.exception("Failed to load expenses")
            QMessageBox.warning(self, "Error", f"Could not load expenses:\n{e.message}")
            return
        self._apply_filter()

    def _apply_filter(self, *_):
        visible = filter_expenses(
            self.expenses,
            category=self.category_filter.currentData(),
            currency=self.currency_filter.currentData(),
        )
        self.table.set_records(visible)

        stats = get_expense_stats(visible)
        by_category = ", ".join(
            f"{EXPENSE_CATEGORIES[c]}: {amount:,.2f}"
            for c, amount in stats["by_category"].items() if amount
        )
        self.stats_label.setText(
            f"Total: {stats['total']:,.2f} | Paid: {stats['paid']:,.2f} | "
            f"Pending: {stats['pending']:,.2f}" + (f"\n{by_category}" if by_category else "")
        )

    def clear_form(self):
        self.current = None
        set_combo_data(self.category_input, "bills")
        set_iso_date(self.date_input, "")
        self.amount_input.setValue(0.0)
        set_combo_data(self.currency_input, "USD")
        for edit in (self.description_input, self.vendor_input, self.reference_input, self.job_input):
            edit.clear()
        set_combo_data(self.status_input, "pending")
        self.form_error.clear_error()

    def load_expense(self, expense: Expense):
        self.current = expense
        set_combo_data(self.category_input, expense.category)
        set_iso_date(self.date_input, expense.date)
        self.amount_input.setValue(expense.amount)
        set_combo_data(self.currency_input, expense.currency)
        self.description_input.setText(expense.description)
        self.vendor_input.setText(expense.vendor_name)
        self.reference_input.setText(expense.reference)
        self.job_input.setText(expense.job_number)
        set_combo_data(self.status_input, expense.status)
        self.form_error.clear_error()

    def collect_expense(self) -> Expense:
        return Expense(
            id=self.current.id if self.current else None,
            category=self.category_input.currentData(),
            amount=self.amount_input.value(),
            currency=self.currency_input.currentData(),
            date=iso_date(self.date_input),
            description=self.description_input.text().strip(),
            status=self.status_input.currentData(),
            paid_date=self.current.paid_date if self.current else "",
            vendor_name=self.vendor_input.text().strip(),
            reference=self.reference_input.text().strip(),
            job_number=self.job_input.text().strip(),
        )

    def save(self):
        self.form_error.clear_error()
        expense = self.collect_expense()
        try:
            if self.current is None:
                saved = create_expense(self.context.database, expense)
            else:
                changes = expense.to_dict()
                saved = update_expense(self.context.database, self.current.id, changes)
        except ValidationError as e:
            self.form_error.show_error(e.message)
            return
        except FreightDeskError as e:
            logger.exception("Failed to save expense")
            QMessageBox.warning(self, "Error", f"Could not save expense:\n{e.message}")
            return

        self.expenses = replace_record(self.expenses, saved)
        self._apply_filter()
        self.load_expense(saved)

    def _mark_paid(self):
        expense = self.table.selected_record() or self.current
        if expense is None:
            return
        try:
            updated = mark_expense_paid(self.context.database, expense)
        except FreightDeskError as e:
            logger.exception("Failed to mark expense paid")
            QMessageBox.warning(self, "Error", f"Could not update expense:\n{e.message}")
            return
        self.expenses = replace_record(self.expenses, updated)
        self._apply_filter()

    def _delete_selected(self):
        expense = self.table.selected_record()
        if expense is None:
            return
        if QMessageBox.question(self, "Delete expense", "Delete the selected expense?") != QMessageBox.Yes:
            return
        try:
            delete_expense(self.context.database, expense.id)
        except FreightDeskError as e:
            logger.exception("Failed to delete expense")
            QMessageBox.warning(self, "Error", f"Could not delete expense:\n{e.message}")
            return
        self.expenses = remove_record(self.expenses, expense.id)
        self._apply_filter()
        if self.current is not None and self.current.id == expense.id:
            self.clear_form()


class VendorBillsPanel(QWidget):
    """Vendor bill list, filters and editor."""

    def __init__(self, context: AppContext, parent=None):
        super().__init__(parent)
        self.context = context
        self.bills: List[VendorBill] = []
        self.vendors: List = []
        self.current: Optional[VendorBill] = None

        self._setup_ui()
        self.refresh()

    def _setup_ui(self):
        layout = QVBoxLayout(self)

        filters = QHBoxLayout()
        filters.addWidget(QLabel("Vendor:"))
        self.vendor_filter = QComboBox()
        self.vendor_filter.addItem("All vendors", "all")
        self.vendor_filter.currentIndexChanged.connect(self._apply_filter)
        filters.addWidget(self.vendor_filter)
        filters.addWidget(QLabel("Status:"))
        self.status_filter = choice_combo({s: s.title() for s in PAYMENT_STATUSES}, "all", all_label="All")
        self.status_filter.currentIndexChanged.connect(self._apply_filter)
        filters.addWidget(self.status_filter)
        filters.addStretch()
        layout.addLayout(filters)

        self.stats_label = QLabel()
        self.stats_label.setStyleSheet("font-weight: bold; padding: 4px;")
        layout.addWidget(self.stats_label)

        self.table = RecordTable([
            ("Job #", lambda b: b.job_number),
            ("Bill #", lambda b: b.bill_number),
            ("Vendor", lambda b: b.vendor_name),
            ("Category", lambda b: b.category_label),
            ("Date", lambda b: b.date),
            ("Due", lambda b: b.due_date),
            ("Currency", lambda b: b.currency),
            ("Amount", lambda b: b.amount),
            ("Status", lambda b: b.status),
        ], status_column="Status")
        self.table.record_activated.connect(self.load_bill)
        layout.addWidget(self.table)

        form_group = QGroupBox("Vendor Bill")
        grid = QGridLayout()

        grid.addWidget(QLabel("Vendor *"), 0, 0)
        self.vendor_input = QComboBox()
        grid.addWidget(self.vendor_input, 0, 1)
        self.vendor_error = ErrorLabel()
        grid.addWidget(self.vendor_error, 1, 1)

        grid.addWidget(QLabel("Category"), 0, 2)
        self.category_input = choice_combo(VENDOR_BILL_CATEGORIES, "fuel")
        grid.addWidget(self.category_input, 0, 3)

        grid.addWidget(QLabel("Bill #"), 2, 0)
        self.bill_number_input = QLineEdit()
        grid.addWidget(self.bill_number_input, 2, 1)

        grid.addWidget(QLabel("Job #"), 2, 2)
        self.job_input = QLineEdit()
        self.job_input.setPlaceholderText("(generated when empty)")
        grid.addWidget(self.job_input, 2, 3)

        grid.addWidget(QLabel("Amount"), 3, 0)
        self.amount_input = amount_spin()
        grid.addWidget(self.amount_input, 3, 1)

        grid.addWidget(QLabel("Currency"), 3, 2)
        self.currency_input = currency_combo("USD")
        grid.addWidget(self.currency_input, 3, 3)

        grid.addWidget(QLabel("Date"), 4, 0)
        self.date_input = date_edit()
        grid.addWidget(self.date_input, 4, 1)

        grid.addWidget(QLabel("Due date"), 4, 2)
        self.due_input = date_edit()
        grid.addWidget(self.due_input, 4, 3)

        grid.addWidget(QLabel("Description"), 5, 0)
        self.description_input = QLineEdit()
        grid.addWidget(self.description_input, 5, 1, 1, 3)

        grid.addWidget(QLabel("Status"), 6, 0)
        self.status_input = list_combo(PAYMENT_STATUSES, "pending")
        grid.addWidget(self.status_input, 6, 1)

        self.form_error = ErrorLabel()
        grid.addWidget(self.form_error, 7, 0, 1, 4)

        form_group.setLayout(grid)
        layout.addWidget(form_group)

        buttons = QHBoxLayout()
        for label, handler in (
            ("New", self.clear_form),
            ("Save", self.save),
            ("Mark paid", self._mark_paid),
            ("Delete", self._delete_selected),
        ):
            button = QPushButton(label)
            button.clicked.connect(handler)
            buttons.addWidget(button)
        buttons.addStretch()
        layout.addLayout(buttons)

    def set_vendors(self, vendors: List):
        self.vendors = list(vendors)
        filter_value = self.vendor_filter.currentData()
        editor_value = self.vendor_input.currentData()

        self.vendor_filter.blockSignals(True)
        self.vendor_filter.clear()
        self.vendor_filter.addItem("All vendors", "all")
        self.vendor_input.clear()
        self.vendor_input.addItem("Select...", "")
        for vendor in self.vendors:
            self.vendor_filter.addItem(vendor.name, vendor.id)
            self.vendor_input.addItem(vendor.name, vendor.id)
        set_combo_data(self.vendor_filter, filter_value or "all")
        set_combo_data(self.vendor_input, editor_value or "")
        self.vendor_filter.blockSignals(False)
        self._apply_filter()

    def refresh(self):
        try:
            self.bills = list_vendor_bills(self.context.database)
        except FreightDeskError as e:
            logger.exception("Failed to load vendor bills")
            QMessageBox.warning(self, "Error", f"Could not load vendor bills:\n{e.message}")
            return
        self._apply_filter()

    def _apply_filter(self, *_):
        visible = filter_vendor_bills(
            self.bills,
            vendor_id=self.vendor_filter.currentData() or "all",
            status=self.status_filter.currentData(),
        )
        self.table.set_records(visible)
        pending = sum(b.amount for b in visible if b.status != "paid")
        self.stats_label.setText(
            f"{len(visible)} bills | Total: {sum(b.amount for b in visible):,.2f} | Pending: {pending:,.2f}"
        )

    def clear_form(self):
        self.current = None
        set_combo_data(self.vendor_input, "")
        set_combo_data(self.category_input, "fuel")
        for edit in (self.bill_number_input, self.job_input, self.description_input):
            edit.clear()
        self.amount_input.setValue(0.0)
        set_combo_data(self.currency_input, "USD")
        set_iso_date(self.date_input, "")
        set_iso_date(self.due_input, "")
        set_combo_data(self.status_input, "pending")
        self.vendor_error.clear_error()
        self.form_error.clear_error()

    def load_bill(self, bill: VendorBill):
        self.current = bill
        set_combo_data(self.vendor_input, bill.vendor_id)
        set_combo_data(self.category_input, bill.category)
        self.bill_number_input.setText(bill.bill_number)
        self.job_input.setText(bill.job_number)
        self.amount_input.setValue(bill.amount)
        set_combo_data(self.currency_input, bill.currency)
        set_iso_date(self.date_input, bill.date)
        set_iso_date(self.due_input, bill.due_date)
        self.description_input.setText(bill.description)
        set_combo_data(self.status_input, bill.status)
        self.vendor_error.clear_error()
        self.form_error.clear_error()

    def collect_bill(self) -> VendorBill:
        vendor_id = self.vendor_input.currentData() or ""
        vendor = next((v for v in self.vendors if v.id == vendor_id), None)
        return VendorBill(
            id=self.current.id if self.current else None,
            bill_number=self.bill_number_input.text().strip(),
            job_number=self.job_input.text().strip(),
            vendor_id=vendor_id,
            vendor_name=vendor.name if vendor else "",
            invoice_id=self.current.invoice_id if self.current else "",
            amount=self.amount_input.value(),
            currency=self.currency_input.currentData(),
            date=iso_date(self.date_input),
            due_date=iso_date(self.due_input),
            description=self.description_input.text().strip(),
            status=self.status_input.currentData(),
            category=self.category_input.currentData(),
            paid_date=self.current.paid_date if self.current else "",
        )

    def save(self):
        self.vendor_error.clear_error()
        self.form_error.clear_error()
        bill = self.collect_bill()
        try:
            if self.current is None:
                saved = create_vendor_bill(self.context.database, bill)
            else:
                saved = update_vendor_bill(self.context.database, self.current.id, bill)
        except ValidationError as e:
            if "vendor_id" in e.field_errors:
                self.vendor_error.show_error(e.field_errors["vendor_id"])
            else:
                self.form_error.show_error(e.message)
            return
        except FreightDeskError as e:
            logger.exception("Failed to save vendor bill")
            QMessageBox.warning(self, "Error", f"Could not save vendor bill:\n{e.message}")
            return

        self.bills = replace_record(self.bills, saved)
        self._apply_filter()
        self.load_bill(saved)

    def _mark_paid(self):
        bill = self.table.selected_record() or self.current
        if bill is None:
            return
        try:
            updated = mark_vendor_bill_paid(self.context.database, bill)
        except FreightDeskError as e:
            logger.exception("Failed to mark vendor bill paid")
            QMessageBox.warning(self, "Error", f"Could not update vendor bill:\n{e.message}")
            return
        self.bills = replace_record(self.bills, updated)
        self._apply_filter()

    def _delete_selected(self):
        bill = self.table.selected_record()
        if bill is None:
            return
        if QMessageBox.question(self, "Delete vendor bill", f"Delete bill {bill.job_number}?") != QMessageBox.Yes:
            return
        try:
            delete_vendor_bill(self.context.database, bill.id)
        except FreightDeskError as e:
            logger.exception("Failed to delete vendor bill")
            QMessageBox.warning(self, "Error", f"Could not delete vendor bill:\n{e.message}")
            return
        self.bills = remove_record(self.bills, bill.id)
        self._apply_filter()
        if self.current is not None and self.current.id == bill.id:
            self.clear_form()


class ExpensesTab(QTabWidget):
    """Expenses and vendor bills."""

    def __init__(self, context: AppContext, parent=None):
        super().__init__(parent)
        self.expenses_panel = ExpensesPanel(context)
        self.vendor_bills_panel = VendorBillsPanel(context)
        self.addTab(self.expenses_panel, "Expenses")
        self.addTab(self.vendor_bills_panel, "Vendor Bills")

    def set_vendors(self, vendors: List):
        self.vendor_bills_panel.set_vendors(vendors)

    def refresh(self):
        self.expenses_panel.refresh()
        self.vendor_bills_panel.refresh()
