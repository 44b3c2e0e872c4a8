"""
Form helpers for FreightDesk tabs.

Small factories for the combo boxes every form needs and a label that
shows a field's validation message under the input.
"""

from typing import Dict, Iterable, Optional

from PySide6.QtWidgets import QComboBox, QLabel, QDoubleSpinBox, QDateEdit
from PySide6.QtCore import QDate

from domain.currency import get_currency_options


def currency_combo(selected: str = "USD", include_all: bool = False) -> QComboBox:
    """Combo box with supported currency codes (optionally "ALL" first)."""
    combo = QComboBox()
    if include_all:
        combo.addItem("All currencies", "ALL")
    for code in get_currency_options():
        combo.addItem(code, code)
    set_combo_data(combo, selected)
    return combo


def choice_combo(choices: Dict[str, str], selected: Optional[str] = None, all_label: Optional[str] = None) -> QComboBox:
    """Combo box over value -> label pairs; all_label adds an "all" entry first."""
    combo = QComboBox()
    if all_label:
        combo.addItem(all_label, "all")
    for value, label in choices.items():
        combo.addItem(label, value)
    if selected is not None:
        set_combo_data(combo, selected)
    return combo


def list_combo(values: Iterable[str], selected: Optional[str] = None) -> QComboBox:
    """Combo box where label and value are the same."""
    return choice_combo({v: v for v in values}, selected)


def set_combo_data(combo: QComboBox, value) -> None:
    """Select the item holding value (no-op if missing)."""
    index = combo.findData(value)
    if index >= 0:
        combo.setCurrentIndex(index)


def amount_spin(maximum: float = 1e12) -> QDoubleSpinBox:
    spin = QDoubleSpinBox()
    spin.setDecimals(2)
    spin.setRange(0.0, maximum)
    spin.setGroupSeparatorShown(True)
    return spin


def date_edit(iso_date: str = "") -> QDateEdit:
    """Calendar date input; empty value means today."""
    edit = QDateEdit()
    edit.setCalendarPopup(True)
    edit.setDisplayFormat("yyyy-MM-dd")
    set_iso_date(edit, iso_date)
    return edit


def set_iso_date(edit: QDateEdit, iso_date: str) -> None:
    parsed = QDate.fromString((iso_date or "")[:10], "yyyy-MM-dd")
    edit.setDate(parsed if parsed.isValid() else QDate.currentDate())


def iso_date(edit: QDateEdit) -> str:
    return edit.date().toString("yyyy-MM-dd")


class ErrorLabel(QLabel):
    """Red inline validation message, hidden while empty."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setProperty("class", "error")
        self.setStyleSheet("color: #c0392b;")
        self.setWordWrap(True)
        self.hide()

    def show_error(self, message: str):
        self.setText(message)
        self.setVisible(bool(message))

    def clear_error(self):
        self.setText("")
        self.hide()
