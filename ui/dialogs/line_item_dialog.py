"""
Line Item Dialog for FreightDesk.

Add or edit a single invoice line item; amount = quantity * unit price.
"""

import secrets
from typing import Optional

from PySide6.QtWidgets import (
    QDialog, QFormLayout, QLineEdit, QDoubleSpinBox,
    QDialogButtonBox, QLabel
)

from domain.models import LineItem
from domain.rules import calculate_line_amount
from ui.widgets import amount_spin


class LineItemDialog(QDialog):
    """Edit a LineItem; result in `line_item` after accept."""

    def __init__(self, line_item: Optional[LineItem] = None, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Line item")
        self.line_item = line_item

        form = QFormLayout(self)

        self.description_input = QLineEdit(line_item.description if line_item else "")
        form.addRow("Description:", self.description_input)

        self.quantity_input = QDoubleSpinBox()
        self.quantity_input.setDecimals(2)
        self.quantity_input.setRange(0.0, 1e9)
        self.quantity_input.setValue(line_item.quantity if line_item else 1.0)
        form.addRow("Quantity:", self.quantity_input)

        self.unit_price_input = amount_spin()
        self.unit_price_input.setValue(line_item.unit_price if line_item else 0.0)
        form.addRow("Unit price:", self.unit_price_input)

        self.amount_label = QLabel()
        form.addRow("Amount:", self.amount_label)

        self.quantity_input.valueChanged.connect(self._update_amount)
        self.unit_price_input.valueChanged.connect(self._update_amount)
        self._update_amount()

        buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self._on_accept)
        buttons.rejected.connect(self.reject)
        form.addRow(buttons)

    def _amount(self) -> float:
        return calculate_line_amount(self.quantity_input.value(), self.unit_price_input.value())

    def _update_amount(self):
        self.amount_label.setText(f"{self._amount():,.2f}")

    def _on_accept(self):
        item_id = self.line_item.id if self.line_item else secrets.token_hex(8)
        self.line_item = LineItem(
            id=item_id,
            description=self.description_input.text().strip(),
            quantity=self.quantity_input.value(),
            unit_price=self.unit_price_input.value(),
            amount=self._amount(),
        )
        self.accept()
