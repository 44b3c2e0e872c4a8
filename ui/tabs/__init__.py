"""
Tabs package for FreightDesk MainWindow.

Contains:
- CustomersTab / VendorsTab: Profile forms, Excel import
- ImportShipmentTab / ExportShipmentTab: Shipment forms with invoice sync
- InvoicesTab: Customer invoices and vendor bills
- LedgerTab: Ledger entries and views
- ExpensesTab: Expenses and vendor bills
- ReportsTab: Shipment report, profit & loss, balance sheet
"""

from .profile_tab import CustomersTab, VendorsTab
from .shipment_tab import ImportShipmentTab, ExportShipmentTab
from .invoices_tab import InvoicesTab
from .ledger_tab import LedgerTab
from .expenses_tab import ExpensesTab
from .reports_tab import ReportsTab

__all__ = [
    "CustomersTab",
    "VendorsTab",
    "ImportShipmentTab",
    "ExportShipmentTab",
    "InvoicesTab",
    "LedgerTab",
    "ExpensesTab",
    "ReportsTab",
]
