"""
Profile Tabs for FreightDesk Main Window.

Customer and vendor profile forms. Both share the same flow:
- New / Save / Profiles... / Import from Excel buttons
- validation messages shown next to the offending inputs
- possible duplicates (similar names) confirmed before a create
- the cached profile list changes only after the save returned
"""

import logging
from typing import Dict, List, Optional, Tuple

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QPushButton,
    QLabel, QGroupBox, QMessageBox, QFileDialog, QLineEdit,
    QTableWidget, QTableWidgetItem, QHeaderView
)
from PySide6.QtCore import Signal

from config import AppContext
from domain.exceptions import FreightDeskError, ValidationError
from domain.models import Consignee, CustomerProfile, VendorProfile
from domain.rules import remove_record, replace_record
from operations import (
    create_customer,
    create_vendor,
    delete_customer,
    delete_vendor,
    find_similar_profiles,
    import_customers_from_excel,
    import_vendors_from_excel,
    list_customers,
    list_vendors,
    search_customers,
    search_vendors,
    update_customer,
    update_vendor,
)
from ui.dialogs import ProfileListDialog, ACTION_DELETE, ACTION_EDIT
from ui.widgets import ErrorLabel

logger = logging.getLogger(__name__)

FieldSpec = Tuple[str, str]  # (field name, label)

CONTACT_FIELDS: List[FieldSpec] = [
    ("email1", "Email 1 *"),
    ("email2", "Email 2"),
    ("email3", "Email 3"),
    ("contact1", "Contact 1 *"),
    ("contact2", "Contact 2"),
    ("contact3", "Contact 3"),
]

ADDRESS_FIELDS: List[FieldSpec] = [
    ("address", "Address"),
    ("city", "City"),
    ("country", "Country"),
]

TAX_FIELDS: List[FieldSpec] = [
    ("ntn_number", "NTN Number"),
    ("gst_number", "GST Number"),
    ("srb_number", "SRB Number"),
]


class ProfileTab(QWidget):
    """
    Base tab for a profile form.

    Subclasses set the model, field layout and operation functions.

    Signals:
        profiles_changed(list): Emitted with the new cached list after a change
    """

    profiles_changed = Signal(list)

    TITLE = ""
    MODEL: type = CustomerProfile
    NAME_FIELD = ""
    SECTIONS: List[Tuple[str, List[FieldSpec]]] = []
    LIST_COLUMNS = []

    def __init__(self, context: AppContext, parent=None):
        super().__init__(parent)
        self.context = context
        self.profiles: List = []
        self.current_id: Optional[str] = None
        self.inputs: Dict[str, QLineEdit] = {}
        self.errors: Dict[str, ErrorLabel] = {}

        self._setup_ui()
        self.refresh()

    # ---- subclass hooks ----

    def _list(self) -> List:
        raise NotImplementedError

    def _create(self, profile):
        raise NotImplementedError

    def _update(self, profile_id: str, profile):
        raise NotImplementedError

    def _delete(self, profile_id: str) -> bool:
        raise NotImplementedError

    def _search(self, profiles: List, term: str) -> List:
        raise NotImplementedError

    def _import(self, file_path):
        raise NotImplementedError

    def _extra_sections(self, layout: QVBoxLayout):
        """Add subclass-specific widgets below the standard sections."""

    def _collect_extra(self, profile):
        """Copy subclass-specific widget values onto profile."""

    def _load_extra(self, profile):
        """Fill subclass-specific widgets from profile."""

    # ---- UI ----

    def _setup_ui(self):
        layout = QVBoxLayout(self)

        header = QLabel(self.TITLE)
        header.setProperty("class", "header")
        header.setStyleSheet("font-size: 14pt; font-weight: bold;")
        layout.addWidget(header)

        for section_title, field_specs in self.SECTIONS:
            group = QGroupBox(section_title)
            grid = QGridLayout()
            for index, (field_name, label) in enumerate(field_specs):
                row, col = divmod(index, 3)
                edit = QLineEdit()
                error = ErrorLabel()
                self.inputs[field_name] = edit
                self.errors[field_name] = error
                cell = QVBoxLayout()
                cell.addWidget(QLabel(label))
                cell.addWidget(edit)
                cell.addWidget(error)
                grid.addLayout(cell, row, col)
            group.setLayout(grid)
            layout.addWidget(group)

        self._extra_sections(layout)

        self.form_error = ErrorLabel()
        layout.addWidget(self.form_error)

        buttons = QHBoxLayout()
        self.btn_new = QPushButton("New")
        self.btn_new.clicked.connect(self.clear_form)
        buttons.addWidget(self.btn_new)

        self.btn_list = QPushButton("Profiles...")
        self.btn_list.clicked.connect(self._show_profile_list)
        buttons.addWidget(self.btn_list)

        self.btn_import = QPushButton("Import from Excel...")
        self.btn_import.clicked.connect(self._import_from_excel)
        buttons.addWidget(self.btn_import)

        buttons.addStretch()

        self.mode_label = QLabel()
        buttons.addWidget(self.mode_label)

        self.btn_save = QPushButton("Save")
        self.btn_save.clicked.connect(self.save)
        buttons.addWidget(self.btn_save)

        layout.addLayout(buttons)
        layout.addStretch()

        self._update_mode_label()

    def _update_mode_label(self):
        self.mode_label.setText("Editing existing profile" if self.current_id else "New profile")

    def _clear_errors(self):
        for error in self.errors.values():
            error.clear_error()
        self.form_error.clear_error()

    def _show_errors(self, error: ValidationError):
        shown = False
        for field_name, message in error.field_errors.items():
            if field_name in self.errors:
                self.errors[field_name].show_error(message)
                shown = True
        if not shown:
            self.form_error.show_error(error.message)

    # ---- data ----

    def refresh(self):
        """Reload profiles from the database."""
        try:
            self.profiles = self._list()
        except FreightDeskError as e:
            logger.exception("Failed to load profiles")
            QMessageBox.warning(self, "Error", f"Could not load profiles:\n{e.message}")
            return
        self.profiles_changed.emit(self.profiles)

    def clear_form(self):
        self.current_id = None
        for edit in self.inputs.values():
            edit.clear()
        self._load_extra(self.MODEL())
        self._clear_errors()
        self._update_mode_label()

    def load_profile(self, profile):
        """Fill the form with an existing profile (edit mode)."""
        self.current_id = profile.id
        for field_name, edit in self.inputs.items():
            edit.setText(str(getattr(profile, field_name, "") or ""))
        self._load_extra(profile)
        self._clear_errors()
        self._update_mode_label()

    def collect_profile(self):
        values = {name: edit.text() for name, edit in self.inputs.items()}
        profile = self.MODEL.from_dict(values)
        self._collect_extra(profile)
        return profile

    def _confirm_duplicates(self, profile) -> bool:
        similar = find_similar_profiles(profile.name, self.profiles, exclude_id=self.current_id)
        if not similar:
            return True
        names = "\n".join(f"• {match.name} ({score:.0f}% similar)" for match, score in similar[:5])
        reply = QMessageBox.question(
            self,
            "Possible duplicate",
            f"Similar profiles already exist:\n\n{names}\n\nSave anyway?",
        )
        return reply == QMessageBox.Yes

    def save(self):
        """Validate and save the form."""
        self._clear_errors()
        profile = self.collect_profile()

        if self.current_id is None and not self._confirm_duplicates(profile):
            return

        try:
            if self.current_id:
                saved = self._update(self.current_id, profile)
            else:
                saved = self._create(profile)
        except ValidationError as e:
            self._show_errors(e)
            return
        except FreightDeskError as e:
            logger.exception("Failed to save profile")
            QMessageBox.warning(self, "Error", f"Could not save profile:\n{e.message}")
            return

        self.profiles = replace_record(self.profiles, saved)
        self.profiles_changed.emit(self.profiles)
        self.load_profile(saved)
        QMessageBox.information(self, "Saved", f"{saved.name} saved.")

    def _show_profile_list(self):
        dialog = ProfileListDialog(
            f"{self.TITLE}s",
            self.profiles,
            self._search,
            self.LIST_COLUMNS,
            parent=self,
        )
        if not dialog.exec():
            return

        if dialog.action == ACTION_DELETE:
            self._delete_profile(dialog.profile)
        else:
            self.load_profile(dialog.profile)
            if dialog.action == ACTION_EDIT:
                self.inputs[self.NAME_FIELD].setFocus()

    def _delete_profile(self, profile):
        try:
            self._delete(profile.id)
        except FreightDeskError as e:
            logger.exception("Failed to delete profile")
            QMessageBox.warning(self, "Error", f"Could not delete profile:\n{e.message}")
            return

        self.profiles = remove_record(self.profiles, profile.id)
        self.profiles_changed.emit(self.profiles)
        if self.current_id == profile.id:
            self.clear_form()

    def _import_from_excel(self):
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            f"Import {self.TITLE.lower()}s",
            "",
            "Excel files (*.xlsx *.xls)",
        )
        if not file_path:
            return

        try:
            summary = self._import(file_path)
        except FreightDeskError as e:
            logger.exception("Profile import failed")
            QMessageBox.warning(self, "Import failed", e.message)
            return

        self.refresh()
        QMessageBox.information(self, "Import finished", summary.to_message())


class CustomersTab(ProfileTab):
    """Customer profiles with consignee list."""

    TITLE = "Customer Profile"
    MODEL = CustomerProfile
    NAME_FIELD = "customer_name"
    SECTIONS = [
        ("Company", [
            ("customer_name", "Customer Name *"),
            ("main_commodity", "Main Commodity"),
            ("other_commodity", "Other Commodity"),
        ] + ADDRESS_FIELDS),
        ("Contacts", CONTACT_FIELDS),
        ("Tax Registration", TAX_FIELDS),
    ]
    LIST_COLUMNS = [
        ("Name", lambda c: c.customer_name),
        ("City", lambda c: c.city),
        ("Commodity", lambda c: c.main_commodity),
        ("Email", lambda c: c.email1),
        ("Contact", lambda c: c.contact1),
        ("Consignees", lambda c: len(c.consignees)),
    ]

    def _list(self):
        return list_customers(self.context.database)

    def _create(self, profile):
        return create_customer(self.context.database, profile)

    def _update(self, profile_id, profile):
        return update_customer(self.context.database, profile_id, profile)

    def _delete(self, profile_id):
        return delete_customer(self.context.database, profile_id)

    def _search(self, profiles, term):
        return search_customers(profiles, term)

    def _import(self, file_path):
        return import_customers_from_excel(self.context.database, file_path)

    def _extra_sections(self, layout: QVBoxLayout):
        group = QGroupBox("Consignees")
        group_layout = QVBoxLayout()

        self.consignee_table = QTableWidget(0, 2)
        self.consignee_table.setHorizontalHeaderLabels(["Consignee Name", "Trade License"])
        self.consignee_table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.consignee_table.setMaximumHeight(160)
        group_layout.addWidget(self.consignee_table)

        buttons = QHBoxLayout()
        add_button = QPushButton("Add consignee")
        add_button.clicked.connect(lambda: self._add_consignee_row())
        buttons.addWidget(add_button)
        remove_button = QPushButton("Remove selected")
        remove_button.clicked.connect(self._remove_consignee_row)
        buttons.addWidget(remove_button)
        buttons.addStretch()
        group_layout.addLayout(buttons)

        group.setLayout(group_layout)
        layout.addWidget(group)

    def _add_consignee_row(self, consignee: Optional[Consignee] = None):
        row = self.consignee_table.rowCount()
        self.consignee_table.insertRow(row)
        self.consignee_table.setItem(row, 0, QTableWidgetItem(consignee.name if consignee else ""))
        self.consignee_table.setItem(row, 1, QTableWidgetItem(consignee.trade_license if consignee else ""))

    def _remove_consignee_row(self):
        row = self.consignee_table.currentRow()
        if row >= 0:
            self.consignee_table.removeRow(row)

    def _cell_text(self, row: int, col: int) -> str:
        item = self.consignee_table.item(row, col)
        return item.text().strip() if item else ""

    def _collect_extra(self, profile):
        profile.consignees = [
            Consignee(name=self._cell_text(row, 0), trade_license=self._cell_text(row, 1))
            for row in range(self.consignee_table.rowCount())
        ]

    def _load_extra(self, profile):
        self.consignee_table.setRowCount(0)
        for consignee in profile.consignees:
            self._add_consignee_row(consignee)


class VendorsTab(ProfileTab):
    """Vendor profiles (carriers, transporters, agents...)."""

    TITLE = "Vendor Profile"
    MODEL = VendorProfile
    NAME_FIELD = "vendor_name"
    SECTIONS = [
        ("Company", [
            ("vendor_name", "Vendor Name *"),
            ("type", "Type"),
            ("services", "Services"),
        ] + ADDRESS_FIELDS),
        ("Contacts", CONTACT_FIELDS),
        ("Tax Registration", TAX_FIELDS),
    ]
    LIST_COLUMNS = [
        ("Name", lambda v: v.vendor_name),
        ("Type", lambda v: v.type),
        ("City", lambda v: v.city),
        ("Email", lambda v: v.email1),
        ("Contact", lambda v: v.contact1),
    ]

    def _list(self):
        return list_vendors(self.context.database)

    def _create(self, profile):
        return create_vendor(self.context.database, profile)

    def _update(self, profile_id, profile):
        return update_vendor(self.context.database, profile_id, profile)

    def _delete(self, profile_id):
        return delete_vendor(self.context.database, profile_id)

    def _search(self, profiles, term):
        return search_vendors(profiles, term)

    def _import(self, file_path):
        return import_vendors_from_excel(self.context.database, file_path)
