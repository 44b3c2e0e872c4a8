"""
Domain layer for FreightDesk.

Framework-agnostic models, validators, business rules and exceptions.
"""

from .exceptions import (
    FreightDeskError,
    DatabaseError,
    ImportValidationError,
    ReportGenerationError,
    ValidationError,
    NotFoundError,
    InvoiceSyncError,
)

from .models import (
    Consignee,
    CustomerProfile,
    VendorProfile,
    Shipment,
    ImportShipment,
    ExportShipment,
    shipment_from_dict,
    LineItem,
    Invoice,
    Expense,
    VendorBill,
    LedgerEntry,
    DerivedLedgerEntry,
    Account,
    STANDARD_ACCOUNTS,
    ProfitLoss,
    BalanceSheet,
)

from .currency import (
    convert_currency,
    format_currency_value,
    get_currency_options,
    get_currency_symbol,
)

__all__ = [
    # Exceptions
    "FreightDeskError",
    "DatabaseError",
    "ImportValidationError",
    "ReportGenerationError",
    "ValidationError",
    "NotFoundError",
    "InvoiceSyncError",
    # Models
    "Consignee",
    "CustomerProfile",
    "VendorProfile",
    "Shipment",
    "ImportShipment",
    "ExportShipment",
    "shipment_from_dict",
    "LineItem",
    "Invoice",
    "Expense",
    "VendorBill",
    "LedgerEntry",
    "DerivedLedgerEntry",
    "Account",
    "STANDARD_ACCOUNTS",
    "ProfitLoss",
    "BalanceSheet",
    # Currency
    "convert_currency",
    "format_currency_value",
    "get_currency_options",
    "get_currency_symbol",
]
