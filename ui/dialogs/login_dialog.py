"""
Login Dialog for FreightDesk.

Asks for a user name and starts a workstation session (token file).
"""

import logging

from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QFormLayout, QLineEdit,
    QDialogButtonBox, QLabel
)

from config import APP_NAME
from services.session_store import SessionStore, generate_secure_token
from ui.widgets import ErrorLabel

logger = logging.getLogger(__name__)


class LoginDialog(QDialog):
    """Collect user name and store a session token on accept."""

    def __init__(self, session_store: SessionStore, default_user: str = "", parent=None):
        super().__init__(parent)
        self.session_store = session_store
        self.user_name = ""

        self.setWindowTitle(f"{APP_NAME} - Sign in")
        self.setModal(True)
        self.setMinimumWidth(320)

        layout = QVBoxLayout(self)
        layout.addWidget(QLabel(f"<b>Welcome to {APP_NAME}</b>"))

        form = QFormLayout()
        self.user_input = QLineEdit(default_user)
        self.user_input.setPlaceholderText("Your name")
        form.addRow("User:", self.user_input)
        layout.addLayout(form)

        self.error_label = ErrorLabel()
        layout.addWidget(self.error_label)

        buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self._on_accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def _on_accept(self):
        user_name = self.user_input.text().strip()
        if not user_name:
            self.error_label.show_error("Please enter your name")
            return

        self.session_store.set_token(generate_secure_token(), user_name=user_name)
        self.user_name = user_name
        logger.info(f"User signed in: {user_name}")
        self.accept()
