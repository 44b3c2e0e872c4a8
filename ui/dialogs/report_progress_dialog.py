"""
Report Progress Dialog for FreightDesk.

Shows progress while invoices / statement packs are rendered to PDF, with
an option to open the file when done.
"""

import logging
from pathlib import Path

from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QPushButton,
    QLabel, QProgressBar
)
from PySide6.QtCore import QUrl
from PySide6.QtGui import QDesktopServices

logger = logging.getLogger(__name__)


class ReportProgressDialog(QDialog):
    """Progress dialog for PDF generation."""

    def __init__(self, parent=None):
        super().__init__(parent)

        self.report_path = None
        self.is_complete = False

        self._setup_ui()

    def _setup_ui(self):
        self.setWindowTitle("Generating document...")
        self.setModal(True)
        self.setMinimumWidth(400)

        layout = QVBoxLayout()

        self.status_label = QLabel("Preparing...")
        layout.addWidget(self.status_label)

        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 100)
        layout.addWidget(self.progress_bar)

        button_layout = QHBoxLayout()
        button_layout.addStretch()

        self.btn_open_report = QPushButton("Open document")
        self.btn_open_report.clicked.connect(self._open_report)
        self.btn_open_report.setVisible(False)
        button_layout.addWidget(self.btn_open_report)

        self.btn_close = QPushButton("Close")
        self.btn_close.clicked.connect(self.accept)
        self.btn_close.setVisible(False)
        button_layout.addWidget(self.btn_close)

        layout.addLayout(button_layout)
        self.setLayout(layout)

    def update_progress(self, value: int, status: str = None):
        """
        Update progress bar and optional status message.

        Args:
            value: Progress value (0-100)
            status: Optional status message
        """
        self.progress_bar.setValue(value)
        if status:
            self.status_label.setText(status)

    def set_complete(self, report_path: Path):
        """Show the finished file and the open/close buttons."""
        self.is_complete = True
        self.report_path = Path(report_path)

        self.setWindowTitle("Document ready")
        self.progress_bar.setValue(100)
        self.status_label.setText(f"Document generated.\n\nFile: {self.report_path.name}")

        self.btn_open_report.setVisible(True)
        self.btn_close.setVisible(True)

    def set_error(self, error_message: str):
        """Show error state."""
        self.setWindowTitle("Document generation failed")
        self.status_label.setText(f"An error occurred:\n\n{error_message}")
        self.btn_close.setVisible(True)
        logger.error(f"Report generation error: {error_message}")

    def _open_report(self):
        """Open file in the system PDF viewer."""
        if not self.report_path or not self.report_path.exists():
            logger.warning("Cannot open report - file not found")
            return

        if QDesktopServices.openUrl(QUrl.fromLocalFile(str(self.report_path))):
            logger.info(f"Opened report in system viewer: {self.report_path}")
        else:
            logger.warning(f"Failed to open report: {self.report_path}")
