"""
Application constants for FreightDesk.

Centralized location for all application-wide constants.
"""

# ==================== Application Info ====================

APP_NAME = "FreightDesk"
APP_VERSION = "1.0.0"
APP_ORGANIZATION = "FreightDesk"

# ==================== File Extensions ====================

EXCEL_EXTENSIONS = [".xlsx", ".xls"]

# ==================== Default Values ====================

DEFAULT_DATABASE_NAME = "freightdesk.db"
DEFAULT_USER_NAME = "user"
DEFAULT_PDF_PAGE_SIZE = "A4"
DEFAULT_CURRENCY = "USD"
DEFAULT_PAYMENT_TERMS = "Net 30"
SESSION_FILE_NAME = "session.json"

# ==================== Collections ====================

COLLECTION_CUSTOMERS = "customers"
COLLECTION_VENDORS = "vendors"
COLLECTION_SHIPMENTS = "shipments"
COLLECTION_INVOICES = "invoices"
COLLECTION_EXPENSES = "expenses"
COLLECTION_VENDOR_BILLS = "vendor_bills"
COLLECTION_LEDGER = "ledger"

# ==================== Similar Profiles ====================

# rapidfuzz token_sort_ratio threshold (0-100) for "possible duplicate"
SIMILAR_PROFILE_THRESHOLD = 85
