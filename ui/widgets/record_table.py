"""
Record Table Widget for FreightDesk.

QTableWidget bound to a list of records (dataclasses). Columns are
(header, getter) pairs; the row's record is kept so the selection can be
mapped back without a lookup.
"""

import logging
from typing import Any, Callable, List, Optional, Sequence, Tuple

from PySide6.QtWidgets import QTableWidget, QTableWidgetItem, QAbstractItemView, QHeaderView
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QColor

from ui.styles import get_status_color

logger = logging.getLogger(__name__)

Column = Tuple[str, Callable[[Any], Any]]


class RecordTable(QTableWidget):
    """
    Read-only table of records.

    Signals:
        record_activated(object): Emitted on double-click with the row's record
    """

    record_activated = Signal(object)

    def __init__(self, columns: Sequence[Column], status_column: Optional[str] = None, parent=None):
        """
        Args:
            columns: (header, getter) pairs
            status_column: Header of a column whose value picks the row colour
        """
        super().__init__(parent)
        self.columns = list(columns)
        self.status_column = status_column
        self.records: List[Any] = []

        self.setColumnCount(len(self.columns))
        self.setHorizontalHeaderLabels([header for header, _ in self.columns])
        self.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.setSelectionMode(QAbstractItemView.SingleSelection)
        self.setAlternatingRowColors(True)
        self.verticalHeader().setVisible(False)
        self.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeToContents)
        self.horizontalHeader().setStretchLastSection(True)

        self.cellDoubleClicked.connect(self._on_double_click)

    def set_records(self, records: Sequence[Any]):
        """Replace table contents."""
        self.records = list(records)
        self.setRowCount(len(self.records))

        for row, record in enumerate(self.records):
            status_value = None
            for col, (header, getter) in enumerate(self.columns):
                value = getter(record)
                if header == self.status_column:
                    status_value = value
                item = QTableWidgetItem(self._format(value))
                if isinstance(value, (int, float)) and not isinstance(value, bool):
                    item.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
                self.setItem(row, col, item)

            if status_value:
                color = QColor(get_status_color(str(status_value)))
                for col in range(len(self.columns)):
                    self.item(row, col).setBackground(color)

    def selected_record(self) -> Optional[Any]:
        """Record of the selected row, or None."""
        row = self.currentRow()
        if 0 <= row < len(self.records):
            return self.records[row]
        return None

    def _format(self, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, float):
            return f"{value:,.2f}"
        return str(value)

    def _on_double_click(self, row: int, column: int):
        if 0 <= row < len(self.records):
            self.record_activated.emit(self.records[row])
