"""
Shipment Tabs for FreightDesk Main Window.

Import and export shipment forms. Saving a shipment that is linked to an
invoice also updates that invoice's line item; the tab then replaces the
invoice in its cache and notifies the invoices tab.
"""

import logging
from typing import Dict, List, Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QPushButton,
    QLabel, QGroupBox, QMessageBox, QLineEdit, QComboBox, QScrollArea
)
from PySide6.QtCore import Signal

from config import AppContext
from domain.exceptions import FreightDeskError, ValidationError
from domain.models import (
    ExportShipment,
    ImportShipment,
    Invoice,
    SHIPMENT_MODES,
)
from domain.rules import remove_record, replace_record
from domain.validators import parse_amount
from operations import (
    delete_shipment,
    list_invoices,
    list_shipments,
    save_export_shipment,
    save_import_shipment,
)
from ui.widgets import ErrorLabel, RecordTable, currency_combo, list_combo, set_combo_data

logger = logging.getLogger(__name__)

COMMON_REFERENCE_FIELDS = [
    ("bill_of_lading", "Bill of Lading"),
    ("container_number", "Container Number"),
    ("vessel_name", "Vessel / Flight"),
    ("voyage_number", "Voyage Number"),
    ("port_of_loading", "Port of Loading"),
    ("etd", "ETD (YYYY-MM-DD)"),
    ("eta", "ETA (YYYY-MM-DD)"),
]

CARGO_FIELDS = [
    ("consignee_name", "Consignee Name"),
    ("consignee_address", "Consignee Address"),
    ("commodity_description", "Commodity"),
    ("hs_code", "HS Code"),
    ("gross_weight", "Gross Weight (kg)"),
    ("net_weight", "Net Weight (kg)"),
    ("cbm", "CBM"),
    ("number_of_packages", "Packages"),
    ("package_type", "Package Type"),
]

NOTES_FIELDS = [
    ("special_instructions", "Special Instructions"),
    ("remarks", "Remarks"),
]

NUMERIC_FIELDS = {
    "gross_weight", "net_weight", "cbm", "invoice_value",
    "freight_charges", "insurance_charges", "other_charges",
    "customs_duty", "logistic_charges", "handling_charges", "documentation_fees",
}

CHARGE_LABELS = {
    "freight_charges": "Freight",
    "insurance_charges": "Insurance",
    "customs_duty": "Customs Duty",
    "logistic_charges": "Logistic Charges",
    "handling_charges": "Handling",
    "documentation_fees": "Documentation Fees",
    "other_charges": "Other Charges",
}


class ShipmentTab(QWidget):
    """
    Base shipment form.

    Signals:
        invoice_updated(object): Emitted with the invoice after a successful sync
    """

    invoice_updated = Signal(object)

    MODEL: type = ImportShipment
    TITLE = ""
    PARTY_LABEL = ""
    PARTY_TYPE = "customer"
    PARTY_ID_FIELD = ""
    PARTY_NAME_FIELD = ""
    EXTRA_REFERENCE_FIELDS: List = []

    def __init__(self, context: AppContext, parent=None):
        super().__init__(parent)
        self.context = context
        self.current: Optional[ImportShipment] = None
        self.shipments: List = []
        self.parties: List = []
        self.invoices: List[Invoice] = []
        self.inputs: Dict[str, QLineEdit] = {}
        self.errors: Dict[str, ErrorLabel] = {}

        self._setup_ui()
        self.refresh()

    def _save(self, shipment):
        raise NotImplementedError

    # ---- UI ----

    def _field_group(self, title: str, field_specs, columns: int = 3) -> QGroupBox:
        group = QGroupBox(title)
        grid = QGridLayout()
        for index, (field_name, label) in enumerate(field_specs):
            row, col = divmod(index, columns)
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
        return group

    def _setup_ui(self):
        outer = QVBoxLayout(self)
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        content = QWidget()
        layout = QVBoxLayout(content)
        scroll.setWidget(content)
        outer.addWidget(scroll)

        header = QLabel(self.TITLE)
        header.setStyleSheet("font-size: 14pt; font-weight: bold;")
        layout.addWidget(header)

        # Party, invoice link, mode, status
        link_group = QGroupBox("Party & Invoice")
        link_layout = QGridLayout()

        link_layout.addWidget(QLabel(f"{self.PARTY_LABEL} *"), 0, 0)
        self.party_combo = QComboBox()
        self.party_combo.currentIndexChanged.connect(self._on_party_changed)
        link_layout.addWidget(self.party_combo, 0, 1)
        self.party_error = ErrorLabel()
        link_layout.addWidget(self.party_error, 1, 1)

        link_layout.addWidget(QLabel("Linked Invoice"), 0, 2)
        self.invoice_combo = QComboBox()
        link_layout.addWidget(self.invoice_combo, 0, 3)

        link_layout.addWidget(QLabel("Mode"), 2, 0)
        self.mode_combo = list_combo(SHIPMENT_MODES, "shipping")
        link_layout.addWidget(self.mode_combo, 2, 1)

        link_layout.addWidget(QLabel("Status"), 2, 2)
        self.status_combo = list_combo(self.MODEL.STATUSES, self.MODEL.STATUSES[0])
        link_layout.addWidget(self.status_combo, 2, 3)

        link_layout.addWidget(QLabel("Job Number"), 3, 0)
        self.job_label = QLabel("(generated on save)")
        link_layout.addWidget(self.job_label, 3, 1)

        link_group.setLayout(link_layout)
        layout.addWidget(link_group)

        layout.addWidget(self._field_group("References & Schedule", self.EXTRA_REFERENCE_FIELDS + COMMON_REFERENCE_FIELDS))
        layout.addWidget(self._field_group("Cargo", CARGO_FIELDS))

        # Charges
        charge_specs = [("invoice_value", "Invoice Value")] if self.MODEL is ExportShipment else []
        charge_specs += [(name, CHARGE_LABELS[name]) for name in self.MODEL.CHARGE_FIELDS]
        charges_group = self._field_group("Charges", charge_specs)
        charges_layout = charges_group.layout()
        self.currency_combo = currency_combo("USD")
        self.total_label = QLabel()
        self.total_label.setStyleSheet("font-weight: bold;")
        row = charges_layout.rowCount()
        charges_layout.addWidget(QLabel("Currency"), row, 0)
        charges_layout.addWidget(self.currency_combo, row, 1)
        charges_layout.addWidget(self.total_label, row, 2)
        for name in charge_specs:
            self.inputs[name[0]].textChanged.connect(self._update_total)
        layout.addWidget(charges_group)

        layout.addWidget(self._field_group("Notes", NOTES_FIELDS, columns=2))

        self.form_error = ErrorLabel()
        layout.addWidget(self.form_error)

        buttons = QHBoxLayout()
        btn_new = QPushButton("New")
        btn_new.clicked.connect(self.clear_form)
        buttons.addWidget(btn_new)
        buttons.addStretch()
        btn_save = QPushButton("Save Shipment")
        btn_save.clicked.connect(self.save)
        buttons.addWidget(btn_save)
        layout.addLayout(buttons)

        # Existing shipments
        list_group = QGroupBox("Shipments")
        list_layout = QVBoxLayout()
        self.table = RecordTable([
            ("Job #", lambda s: s.job_number),
            (self.PARTY_LABEL, lambda s: s.party_name),
            ("Reference", lambda s: s.alternate_reference()),
            ("Mode", lambda s: s.mode),
            ("Status", lambda s: s.status),
            ("Invoice", lambda s: s.invoice_number),
            ("Currency", lambda s: s.currency),
            ("Total Charges", lambda s: s.total_charges),
        ])
        self.table.record_activated.connect(self.load_shipment)
        list_layout.addWidget(self.table)
        btn_delete = QPushButton("Delete selected")
        btn_delete.clicked.connect(self._delete_selected)
        list_layout.addWidget(btn_delete)
        list_group.setLayout(list_layout)
        layout.addWidget(list_group)

        self._update_total()

    # ---- data ----

    def refresh(self):
        """Reload shipments of this kind."""
        try:
            self.shipments = list_shipments(self.context.database, self.MODEL.KIND)
        except FreightDeskError as e:
            logger.exception("Failed to load shipments")
            QMessageBox.warning(self, "Error", f"Could not load shipments:\n{e.message}")
            return
        self.table.set_records(self.shipments)

    def set_parties(self, parties: List):
        """Called when the customer/vendor list changed."""
        selected = self.party_combo.currentData()
        self.parties = list(parties)
        self.party_combo.blockSignals(True)
        self.party_combo.clear()
        self.party_combo.addItem("Select...", "")
        for party in self.parties:
            self.party_combo.addItem(party.name, party.id)
        set_combo_data(self.party_combo, selected or "")
        self.party_combo.blockSignals(False)
        self._on_party_changed()

    def set_invoice(self, invoice: Invoice):
        """Invoice changed elsewhere; keep the cached copy current."""
        if any(i.id == invoice.id for i in self.invoices):
            self.invoices = replace_record(self.invoices, invoice)

    def _on_party_changed(self, *_):
        party_id = self.party_combo.currentData()
        self.invoices = []
        if party_id:
            try:
                self.invoices = list_invoices(self.context.database, self.PARTY_TYPE, party_id)
            except FreightDeskError as e:
                logger.exception("Failed to load invoices for party")
                self.form_error.show_error(f"Could not load invoices: {e.message}")
        self._fill_invoice_combo(self.current.invoice_id if self.current else "")

    def _fill_invoice_combo(self, selected_id: str = ""):
        self.invoice_combo.clear()
        self.invoice_combo.addItem("(not linked)", "")
        for invoice in self.invoices:
            self.invoice_combo.addItem(
                f"{invoice.invoice_number} ({invoice.currency} {invoice.total:,.2f})",
                invoice.id,
            )
        set_combo_data(self.invoice_combo, selected_id or "")

    def _selected_invoice(self) -> Optional[Invoice]:
        invoice_id = self.invoice_combo.currentData()
        return next((i for i in self.invoices if i.id == invoice_id), None)

    def _update_total(self, *_):
        total = sum(parse_amount(self.inputs[name].text()) for name in self.MODEL.CHARGE_FIELDS)
        self.total_label.setText(f"Total charges: {total:,.2f}")

    def clear_form(self):
        self.current = None
        for edit in self.inputs.values():
            edit.clear()
        set_combo_data(self.party_combo, "")
        set_combo_data(self.mode_combo, "shipping")
        self.status_combo.setCurrentIndex(0)
        set_combo_data(self.currency_combo, "USD")
        self.job_label.setText("(generated on save)")
        self._clear_errors()
        self._update_total()

    def load_shipment(self, shipment):
        """Fill the form from a stored shipment."""
        self.current = shipment
        for field_name, edit in self.inputs.items():
            value = getattr(shipment, field_name, "")
            edit.setText("" if value in (None, "") else str(value))
        set_combo_data(self.party_combo, shipment.party_id)
        self._on_party_changed()
        set_combo_data(self.mode_combo, shipment.mode)
        set_combo_data(self.status_combo, shipment.status)
        set_combo_data(self.currency_combo, shipment.currency)
        self.job_label.setText(shipment.job_number)
        self._clear_errors()
        self._update_total()

    def collect_shipment(self):
        values = {}
        for field_name, edit in self.inputs.items():
            text = edit.text().strip()
            if field_name in NUMERIC_FIELDS:
                values[field_name] = parse_amount(text)
            elif field_name == "number_of_packages":
                values[field_name] = int(parse_amount(text))
            else:
                values[field_name] = text

        party_id = self.party_combo.currentData() or ""
        party = next((p for p in self.parties if p.id == party_id), None)
        values[self.PARTY_ID_FIELD] = party_id
        values[self.PARTY_NAME_FIELD] = party.name if party else ""

        invoice = self._selected_invoice()
        values["invoice_id"] = invoice.id if invoice else ""
        values["invoice_number"] = invoice.invoice_number if invoice else ""

        values["mode"] = self.mode_combo.currentData()
        values["status"] = self.status_combo.currentData()
        values["currency"] = self.currency_combo.currentData()

        if self.current is not None:
            values["id"] = self.current.id
            values["job_number"] = self.current.job_number

        return self.MODEL.from_dict(values)

    def _clear_errors(self):
        for error in self.errors.values():
            error.clear_error()
        self.party_error.clear_error()
        self.form_error.clear_error()

    def save(self):
        """Save the shipment and sync its linked invoice."""
        self._clear_errors()
        shipment = self.collect_shipment()

        try:
            result = self._save(shipment)
        except ValidationError as e:
            for field_name, message in e.field_errors.items():
                if field_name == self.PARTY_ID_FIELD:
                    self.party_error.show_error(message)
                elif field_name in self.errors:
                    self.errors[field_name].show_error(message)
            if not e.field_errors:
                self.form_error.show_error(e.message)
            return
        except FreightDeskError as e:
            logger.exception("Failed to save shipment")
            QMessageBox.warning(self, "Error", f"Could not save shipment:\n{e.message}")
            return

        self.shipments = replace_record(self.shipments, result.shipment)
        self.table.set_records(self.shipments)

        if result.invoice is not None:
            self.invoices = replace_record(self.invoices, result.invoice)
            self.invoice_updated.emit(result.invoice)

        self.load_shipment(result.shipment)

        if result.sync_error:
            QMessageBox.warning(
                self,
                "Invoice not updated",
                f"Shipment {result.shipment.job_number} was saved, but the linked "
                f"invoice could not be updated:\n\n{result.sync_error}",
            )
        else:
            QMessageBox.information(self, "Saved", f"Shipment {result.shipment.job_number} saved.")

    def _delete_selected(self):
        shipment = self.table.selected_record()
        if shipment is None:
            return
        reply = QMessageBox.question(self, "Delete shipment", f"Delete shipment {shipment.job_number}?")
        if reply != QMessageBox.Yes:
            return

        try:
            delete_shipment(self.context.database, shipment.id)
        except FreightDeskError as e:
            logger.exception("Failed to delete shipment")
            QMessageBox.warning(self, "Error", f"Could not delete shipment:\n{e.message}")
            return

        self.shipments = remove_record(self.shipments, shipment.id)
        self.table.set_records(self.shipments)
        if self.current is not None and self.current.id == shipment.id:
            self.clear_form()


class ImportShipmentTab(ShipmentTab):
    """Import shipment form (customer)."""

    MODEL = ImportShipment
    TITLE = "Import Shipment"
    PARTY_LABEL = "Customer"
    PARTY_TYPE = "customer"
    PARTY_ID_FIELD = "customer_id"
    PARTY_NAME_FIELD = "customer_name"
    EXTRA_REFERENCE_FIELDS = [
        ("port_of_discharge", "Port of Discharge"),
        ("ata", "ATA (YYYY-MM-DD)"),
        ("customs_clearance_date", "Customs Clearance (YYYY-MM-DD)"),
        ("delivery_date", "Delivery Date (YYYY-MM-DD)"),
    ]

    def _save(self, shipment):
        return save_import_shipment(
            self.context.database,
            shipment,
            selected_invoice=self._selected_invoice(),
            cached_invoices=self.invoices,
        )


class ExportShipmentTab(ShipmentTab):
    """Export shipment form (shipper from vendor profiles)."""

    MODEL = ExportShipment
    TITLE = "Export Shipment"
    PARTY_LABEL = "Shipper"
    PARTY_TYPE = "vendor"
    PARTY_ID_FIELD = "shipper_id"
    PARTY_NAME_FIELD = "shipper_name"
    EXTRA_REFERENCE_FIELDS = [
        ("booking_number", "Booking Number *"),
        ("booking_date", "Booking Date (YYYY-MM-DD)"),
        ("atd", "ATD (YYYY-MM-DD)"),
        ("shipper_address", "Shipper Address"),
        ("consignee_country", "Consignee Country"),
        ("port_of_destination", "Port of Destination"),
        ("final_destination", "Final Destination"),
        ("export_license_number", "Export License"),
        ("letter_of_credit_number", "L/C Number"),
    ]

    def _save(self, shipment):
        return save_export_shipment(
            self.context.database,
            shipment,
            selected_invoice=self._selected_invoice(),
            cached_invoices=self.invoices,
        )
