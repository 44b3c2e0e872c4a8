"""
Operations layer for FreightDesk.

Business logic operations - plain functions with the database injected.
Create/update operations return the stored record; the UI applies it to
its cached lists only after the call returned.
"""

from .profile_ops import (
    list_customers,
    get_customer,
    create_customer,
    update_customer,
    delete_customer,
    search_customers,
    list_vendors,
    get_vendor,
    create_vendor,
    update_vendor,
    delete_vendor,
    search_vendors,
    find_similar_profiles,
)

from .shipment_ops import (
    ShipmentSaveResult,
    generate_job_number,
    list_shipments,
    get_shipment,
    delete_shipment,
    save_shipment,
    save_import_shipment,
    save_export_shipment,
    filter_shipments,
    get_shipment_report_stats,
)

from .invoice_ops import (
    generate_invoice_number,
    list_invoices,
    get_invoice,
    create_invoice,
    update_invoice,
    save_invoice,
    delete_invoice,
    update_invoice_status,
    get_billing_stats,
    sync_invoice_from_shipment,
)

from .ledger_ops import (
    create_ledger_entry,
    list_ledger_entries,
    delete_ledger_entry,
    get_ledger_totals,
    build_party_ledger,
    build_customer_group_ledger,
    group_accounts_by_type,
    find_account,
    derive_ledger_entries,
    derive_expense_entries,
)

from .expense_ops import (
    list_expenses,
    create_expense,
    update_expense,
    mark_expense_paid,
    delete_expense,
    filter_expenses,
    get_expense_stats,
    generate_vendor_job_number,
    list_vendor_bills,
    create_vendor_bill,
    update_vendor_bill,
    mark_vendor_bill_paid,
    delete_vendor_bill,
    filter_vendor_bills,
)

from .financial_ops import (
    calculate_profit_loss,
    generate_profit_loss,
    calculate_balance_sheet,
    generate_balance_sheet,
    balance_sheet_is_balanced,
)

from .import_ops import (
    ImportSummary,
    import_customers_from_excel,
    import_vendors_from_excel,
    preview_profile_file,
)

from .report_ops import (
    generate_invoice_html,
    generate_ledger_statement_html,
    generate_shipment_report_html,
    generate_profit_loss_html,
    generate_balance_sheet_html,
    generate_invoice_pdf,
    generate_html_pdf,
    generate_statement_pack,
    export_shipments_to_excel,
    export_ledger_to_excel,
)

__all__ = [
    # Profiles
    "list_customers",
    "get_customer",
    "create_customer",
    "update_customer",
    "delete_customer",
    "search_customers",
    "list_vendors",
    "get_vendor",
    "create_vendor",
    "update_vendor",
    "delete_vendor",
    "search_vendors",
    "find_similar_profiles",
    # Shipments
    "ShipmentSaveResult",
    "generate_job_number",
    "list_shipments",
    "get_shipment",
    "delete_shipment",
    "save_shipment",
    "save_import_shipment",
    "save_export_shipment",
    "filter_shipments",
    "get_shipment_report_stats",
    # Invoices
    "generate_invoice_number",
    "list_invoices",
    "get_invoice",
    "create_invoice",
    "update_invoice",
    "save_invoice",
    "delete_invoice",
    "update_invoice_status",
    "get_billing_stats",
    "sync_invoice_from_shipment",
    # Ledger
    "create_ledger_entry",
    "list_ledger_entries",
    "delete_ledger_entry",
    "get_ledger_totals",
    "build_party_ledger",
    "build_customer_group_ledger",
    "group_accounts_by_type",
    "find_account",
    "derive_ledger_entries",
    "derive_expense_entries",
    # Expenses & vendor bills
    "list_expenses",
    "create_expense",
    "update_expense",
    "mark_expense_paid",
    "delete_expense",
    "filter_expenses",
    "get_expense_stats",
    "generate_vendor_job_number",
    "list_vendor_bills",
    "create_vendor_bill",
    "update_vendor_bill",
    "mark_vendor_bill_paid",
    "delete_vendor_bill",
    "filter_vendor_bills",
    # Financial statements
    "calculate_profit_loss",
    "generate_profit_loss",
    "calculate_balance_sheet",
    "generate_balance_sheet",
    "balance_sheet_is_balanced",
    # Import
    "ImportSummary",
    "import_customers_from_excel",
    "import_vendors_from_excel",
    "preview_profile_file",
    # Reports
    "generate_invoice_html",
    "generate_ledger_statement_html",
    "generate_shipment_report_html",
    "generate_profit_loss_html",
    "generate_balance_sheet_html",
    "generate_invoice_pdf",
    "generate_html_pdf",
    "generate_statement_pack",
    "export_shipments_to_excel",
    "export_ledger_to_excel",
]
