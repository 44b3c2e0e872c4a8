"""
Profile List Dialog for FreightDesk.

Searchable list of customer or vendor profiles with Open / Edit / Delete.
The dialog itself does not touch the database: it reports the chosen
action and profile, and the owning tab performs it.
"""

import logging
from typing import Callable, List, Optional

from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLineEdit,
    QPushButton, QLabel, QMessageBox
)

from ui.widgets import RecordTable

logger = logging.getLogger(__name__)

ACTION_OPEN = "open"
ACTION_EDIT = "edit"
ACTION_DELETE = "delete"


class ProfileListDialog(QDialog):
    """
    Pick a profile and an action.

    After exec() returns Accepted, `action` is one of open/edit/delete and
    `profile` the selected record.
    """

    def __init__(
        self,
        title: str,
        profiles: List,
        search: Callable[[List, str], List],
        columns,
        parent=None,
    ):
        super().__init__(parent)
        self.profiles = profiles
        self.search = search
        self.action: Optional[str] = None
        self.profile = None

        self.setWindowTitle(title)
        self.resize(760, 480)

        layout = QVBoxLayout(self)

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search...")
        self.search_input.textChanged.connect(self._apply_search)
        layout.addWidget(self.search_input)

        self.table = RecordTable(columns)
        self.table.record_activated.connect(lambda _: self._finish(ACTION_OPEN))
        layout.addWidget(self.table)

        self.count_label = QLabel()
        layout.addWidget(self.count_label)

        buttons = QHBoxLayout()
        buttons.addStretch()
        for label, action in (("Open", ACTION_OPEN), ("Edit", ACTION_EDIT), ("Delete", ACTION_DELETE)):
            button = QPushButton(label)
            button.clicked.connect(lambda _=False, a=action: self._finish(a))
            buttons.addWidget(button)
        close = QPushButton("Close")
        close.clicked.connect(self.reject)
        buttons.addWidget(close)
        layout.addLayout(buttons)

        self._apply_search("")

    def _apply_search(self, term: str):
        shown = self.search(self.profiles, term) if term.strip() else self.profiles
        self.table.set_records(shown)
        self.count_label.setText(f"{len(shown)} of {len(self.profiles)} profiles")

    def _finish(self, action: str):
        profile = self.table.selected_record()
        if profile is None:
            QMessageBox.information(self, "No selection", "Please select a profile first.")
            return

        if action == ACTION_DELETE:
            reply = QMessageBox.question(
                self,
                "Delete profile",
                f"Delete '{profile.name}'? This cannot be undone.",
            )
            if reply != QMessageBox.Yes:
                return

        self.action = action
        self.profile = profile
        self.accept()
