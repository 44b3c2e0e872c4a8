"""
Services layer for FreightDesk.

Infrastructure services that support operations and UI layers.
"""

from .chrome_checker import (
    has_system_chrome,
    get_chrome_path,
    ensure_chrome_installed,
    get_chrome_info,
)

from .excel_reader import ExcelReader
from .excel_writer import write_table
from .pdf_service import PDFService, create_pdf_service
from .pdf_utils import add_page_footer, count_pdf_pages
from .session_store import SessionStore, generate_secure_token

__all__ = [
    # Chrome Checker
    "has_system_chrome",
    "get_chrome_path",
    "ensure_chrome_installed",
    "get_chrome_info",
    # Excel
    "ExcelReader",
    "write_table",
    # PDF
    "PDFService",
    "create_pdf_service",
    "add_page_footer",
    "count_pdf_pages",
    # Session
    "SessionStore",
    "generate_secure_token",
]
