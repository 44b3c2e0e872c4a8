"""
Background workers for FreightDesk UI.

PDF rendering drives a headless browser and can take several seconds per
document, so it runs off the GUI thread.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, Optional

from PySide6.QtCore import QThread, Signal

from domain.exceptions import FreightDeskError

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]

DEFAULT_STATUS_MESSAGES = {
    0: "Preparing...",
    10: "Rendering statement...",
    80: "Merging documents...",
    100: "Done!",
}


class ReportGenerationWorker(QThread):
    """
    Run a report job in a worker thread.

    The job receives a progress callback (0-100) and returns the path of the
    generated file.
    """

    # Signals
    progress = Signal(int, str)  # (progress_value, status_message)
    completed = Signal(Path)  # (report_path)
    error = Signal(str)  # (error_message)

    def __init__(
        self,
        job: Callable[[ProgressCallback], Path],
        status_messages: Optional[Dict[int, str]] = None,
    ):
        super().__init__()
        self.job = job
        self.status_messages = status_messages or DEFAULT_STATUS_MESSAGES

    def _report_progress(self, value: int):
        status = self.status_messages.get(value, f"Processing... {value}%")
        self.progress.emit(value, status)

    def run(self):
        """Run the job and emit completed or error."""
        try:
            report_path = self.job(self._report_progress)
            self.completed.emit(Path(report_path))
        except FreightDeskError as e:
            logger.error(f"Report generation failed: {e}")
            self.error.emit(e.message)
        except Exception as e:
            logger.exception("Unexpected error during report generation")
            self.error.emit(str(e))
