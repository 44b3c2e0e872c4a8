"""
Domain models for FreightDesk.

These dataclasses represent the core business entities.
They are framework-agnostic and have no dependencies on database or UI.
Records are stored as JSON documents, so every model converts to and from
plain dicts. Dates are ISO strings ("YYYY-MM-DD").
"""

from dataclasses import dataclass, field, fields, asdict
from typing import Optional, List, Dict, Any, ClassVar


# ==================== Vocabulary ====================

SHIPMENT_MODES = ["shipping", "flight"]

IMPORT_STATUSES = [
    "Booked",
    "In Transit",
    "Arrived",
    "Customs Clearance",
    "Released",
    "Delivered",
]

EXPORT_STATUSES = [
    "Booked",
    "Documentation",
    "Loaded",
    "In Transit",
    "Arrived",
    "Delivered",
]

PARTY_TYPES = ["customer", "vendor"]

INVOICE_STATUSES = ["draft", "sent", "paid", "partially_paid", "overdue", "cancelled"]

PAYMENT_STATUSES = ["pending", "paid"]

EXPENSE_CATEGORIES = {
    "bills": "Bills & Utilities",
    "salaries": "Salaries & Wages",
    "office_supplies": "Office Supplies",
    "travel": "Travel & Meals",
    "marketing": "Marketing & Advertising",
    "miscellaneous": "Miscellaneous",
}

VENDOR_BILL_CATEGORIES = {
    "fuel": "Fuel & Trucking",
    "port_fees": "Port & Terminal Fees",
    "customs": "Customs & Duties",
    "warehousing": "Warehousing & Storage",
    "airline_charges": "Airline / Carrier Charges",
    "logistics_overheads": "Logistics Overheads",
}

LEDGER_ENTRY_TYPES = ["invoice", "payment", "adjustment", "credit_note"]


def _known_fields(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only keys that are dataclass fields of cls."""
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in (data or {}).items() if k in names}


@dataclass
class Record:
    """Base for stored records (id and timestamps assigned by the database)."""

    id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to plain dict (nested dataclasses included)."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        """Create instance from dict, ignoring unknown keys."""
        return cls(**_known_fields(cls, data))


# ==================== Profiles ====================


@dataclass
class Consignee:
    """Consignee registered under a customer (name + trade license)."""

    name: str = ""
    trade_license: str = ""


@dataclass
class CustomerProfile(Record):
    """
    Customer profile.

    Up to three e-mail addresses and contact numbers; at least one of each
    is required when saving (see validators.validate_customer_profile).
    """

    customer_name: str = ""
    address: str = ""
    city: str = ""
    country: str = ""
    email1: str = ""
    email2: str = ""
    email3: str = ""
    contact1: str = ""
    contact2: str = ""
    contact3: str = ""
    main_commodity: str = ""
    other_commodity: str = ""
    ntn_number: str = ""
    gst_number: str = ""
    srb_number: str = ""
    consignees: List[Consignee] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.customer_name

    @property
    def emails(self) -> List[str]:
        return [e for e in (self.email1, self.email2, self.email3) if e]

    @property
    def contacts(self) -> List[str]:
        return [c for c in (self.contact1, self.contact2, self.contact3) if c]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CustomerProfile":
        values = _known_fields(cls, data)
        values["consignees"] = [
            c if isinstance(c, Consignee) else Consignee(**_known_fields(Consignee, c))
            for c in values.get("consignees") or []
        ]
        return cls(**values)


@dataclass
class VendorProfile(Record):
    """Vendor profile (carriers, agents, transporters, etc.)."""

    vendor_name: str = ""
    address: str = ""
    city: str = ""
    country: str = ""
    email1: str = ""
    email2: str = ""
    email3: str = ""
    contact1: str = ""
    contact2: str = ""
    contact3: str = ""
    type: str = ""
    services: str = ""
    ntn_number: str = ""
    gst_number: str = ""
    srb_number: str = ""

    @property
    def name(self) -> str:
        return self.vendor_name

    @property
    def emails(self) -> List[str]:
        return [e for e in (self.email1, self.email2, self.email3) if e]

    @property
    def contacts(self) -> List[str]:
        return [c for c in (self.contact1, self.contact2, self.contact3) if c]


# ==================== Shipments ====================


@dataclass
class Shipment(Record):
    """
    Fields shared by import and export shipments.

    Subclasses define KIND, JOB_PREFIX, STATUSES and CHARGE_FIELDS.
    total_charges is derived; call rules.compute_total_charges before saving.
    """

    KIND: ClassVar[str] = ""
    JOB_PREFIX: ClassVar[str] = ""
    STATUSES: ClassVar[List[str]] = []
    CHARGE_FIELDS: ClassVar[List[str]] = []

    kind: str = ""
    job_number: str = ""
    mode: str = "shipping"
    bill_of_lading: str = ""
    container_number: str = ""
    consignee_name: str = ""
    consignee_address: str = ""
    vessel_name: str = ""
    voyage_number: str = ""
    port_of_loading: str = ""
    etd: str = ""
    eta: str = ""
    commodity_description: str = ""
    hs_code: str = ""
    gross_weight: float = 0.0
    net_weight: float = 0.0
    cbm: float = 0.0
    number_of_packages: int = 0
    package_type: str = ""
    invoice_id: str = ""
    invoice_number: str = ""
    invoice_value: float = 0.0
    currency: str = "USD"
    freight_charges: float = 0.0
    insurance_charges: float = 0.0
    other_charges: float = 0.0
    total_charges: float = 0.0
    status: str = "Booked"
    special_instructions: str = ""
    remarks: str = ""

    def __post_init__(self):
        """Validate shipment vocabulary."""
        if not self.kind:
            self.kind = self.KIND
        if self.mode not in SHIPMENT_MODES:
            raise ValueError(f"mode must be one of {SHIPMENT_MODES}")
        if self.STATUSES and self.status not in self.STATUSES:
            raise ValueError(f"status must be one of {self.STATUSES}")

    @property
    def party_id(self) -> str:
        raise NotImplementedError

    @property
    def party_name(self) -> str:
        raise NotImplementedError

    def alternate_reference(self) -> str:
        """Reference used for the invoice line item when no job number exists."""
        raise NotImplementedError

    def charges(self) -> Dict[str, float]:
        """Charge field name -> value."""
        return {name: getattr(self, name) for name in self.CHARGE_FIELDS}


@dataclass
class ImportShipment(Shipment):
    """Inbound shipment billed to a customer."""

    KIND: ClassVar[str] = "import"
    JOB_PREFIX: ClassVar[str] = "IMP"
    STATUSES: ClassVar[List[str]] = IMPORT_STATUSES
    CHARGE_FIELDS: ClassVar[List[str]] = [
        "freight_charges",
        "insurance_charges",
        "customs_duty",
        "logistic_charges",
        "other_charges",
    ]

    customer_id: str = ""
    customer_name: str = ""
    port_of_discharge: str = ""
    ata: str = ""
    customs_clearance_date: str = ""
    delivery_date: str = ""
    customs_duty: float = 0.0
    logistic_charges: float = 0.0

    @property
    def party_id(self) -> str:
        return self.customer_id

    @property
    def party_name(self) -> str:
        return self.customer_name

    def alternate_reference(self) -> str:
        return self.bill_of_lading


@dataclass
class ExportShipment(Shipment):
    """Outbound shipment; the shipper is selected from vendor profiles."""

    KIND: ClassVar[str] = "export"
    JOB_PREFIX: ClassVar[str] = "EXP"
    STATUSES: ClassVar[List[str]] = EXPORT_STATUSES
    CHARGE_FIELDS: ClassVar[List[str]] = [
        "freight_charges",
        "insurance_charges",
        "handling_charges",
        "documentation_fees",
        "other_charges",
    ]

    booking_number: str = ""
    shipper_id: str = ""
    shipper_name: str = ""
    shipper_address: str = ""
    consignee_country: str = ""
    port_of_destination: str = ""
    final_destination: str = ""
    booking_date: str = ""
    atd: str = ""
    export_license_number: str = ""
    letter_of_credit_number: str = ""
    handling_charges: float = 0.0
    documentation_fees: float = 0.0

    @property
    def party_id(self) -> str:
        return self.shipper_id

    @property
    def party_name(self) -> str:
        return self.shipper_name

    def alternate_reference(self) -> str:
        return self.booking_number


def shipment_from_dict(data: Dict[str, Any]) -> Shipment:
    """Create ImportShipment or ExportShipment based on the stored kind."""
    if (data or {}).get("kind") == ExportShipment.KIND:
        return ExportShipment.from_dict(data)
    return ImportShipment.from_dict(data)


# ==================== Invoices ====================


@dataclass
class LineItem:
    """Invoice line item. amount = quantity * unit_price."""

    id: str
    description: str = ""
    quantity: float = 1.0
    unit_price: float = 0.0
    amount: float = 0.0


@dataclass
class Invoice(Record):
    """
    Customer invoice or vendor bill.

    Totals invariant (kept by rules.recalculate_invoice):
        subtotal = sum(line_item.amount)
        tax_amount = subtotal * tax_rate / 100
        total = subtotal + tax_amount - discount
    """

    invoice_number: str = ""
    invoice_date: str = ""
    due_date: str = ""
    party_type: str = "customer"
    party_id: str = ""
    party_name: str = ""
    party_address: str = ""
    party_tax_id: str = ""
    job_number: str = ""
    po_number: str = ""
    line_items: List[LineItem] = field(default_factory=list)
    subtotal: float = 0.0
    tax_rate: float = 0.0
    tax_amount: float = 0.0
    discount: float = 0.0
    total: float = 0.0
    payment_terms: str = "Net 30"
    bank_details: str = ""
    notes: str = ""
    status: str = "draft"
    paid_amount: float = 0.0
    paid_date: str = ""
    currency: str = "USD"

    def __post_init__(self):
        """Validate invoice vocabulary."""
        if self.party_type not in PARTY_TYPES:
            raise ValueError(f"party_type must be one of {PARTY_TYPES}")
        if self.status not in INVOICE_STATUSES:
            raise ValueError(f"status must be one of {INVOICE_STATUSES}")

    @property
    def outstanding(self) -> float:
        return max(self.total - self.paid_amount, 0.0)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Invoice":
        values = _known_fields(cls, data)
        values["line_items"] = [
            item if isinstance(item, LineItem) else LineItem(**_known_fields(LineItem, item))
            for item in values.get("line_items") or []
        ]
        return cls(**values)


# ==================== Expenses & Vendor Bills ====================


@dataclass
class Expense(Record):
    """Company expense (bills, salaries, travel, ...)."""

    category: str = "bills"
    amount: float = 0.0
    currency: str = "USD"
    date: str = ""
    description: str = ""
    status: str = "pending"
    paid_date: str = ""
    vendor_name: str = ""
    reference: str = ""
    job_number: str = ""

    def __post_init__(self):
        """Validate expense vocabulary."""
        if self.category not in EXPENSE_CATEGORIES:
            raise ValueError(f"category must be one of {list(EXPENSE_CATEGORIES)}")
        if self.status not in PAYMENT_STATUSES:
            raise ValueError(f"status must be one of {PAYMENT_STATUSES}")

    @property
    def category_label(self) -> str:
        return EXPENSE_CATEGORIES[self.category]


@dataclass
class VendorBill(Record):
    """Operational bill from a vendor (fuel, port fees, customs, ...)."""

    bill_number: str = ""
    job_number: str = ""
    vendor_id: str = ""
    vendor_name: str = ""
    invoice_id: str = ""
    amount: float = 0.0
    currency: str = "USD"
    date: str = ""
    due_date: str = ""
    description: str = ""
    status: str = "pending"
    category: str = "fuel"
    paid_date: str = ""

    def __post_init__(self):
        """Validate vendor bill vocabulary."""
        if self.category not in VENDOR_BILL_CATEGORIES:
            raise ValueError(f"category must be one of {list(VENDOR_BILL_CATEGORIES)}")
        if self.status not in PAYMENT_STATUSES:
            raise ValueError(f"status must be one of {PAYMENT_STATUSES}")

    @property
    def category_label(self) -> str:
        return VENDOR_BILL_CATEGORIES[self.category]


# ==================== Ledger ====================


@dataclass
class LedgerEntry(Record):
    """
    Manual ledger entry against a customer or vendor.

    Exactly one of debit/credit is non-zero (validators.validate_ledger_entry).
    balance is filled in by the ledger views (running balance), not stored.
    """

    date: str = ""
    party_type: str = "customer"
    party_id: str = ""
    party_name: str = ""
    job_number: str = ""
    description: str = ""
    invoice_number: str = ""
    debit: float = 0.0
    credit: float = 0.0
    balance: float = 0.0
    type: str = "invoice"

    def __post_init__(self):
        """Validate ledger vocabulary."""
        if self.party_type not in PARTY_TYPES:
            raise ValueError(f"party_type must be one of {PARTY_TYPES}")
        if self.type not in LEDGER_ENTRY_TYPES:
            raise ValueError(f"type must be one of {LEDGER_ENTRY_TYPES}")


@dataclass
class DerivedLedgerEntry:
    """Ledger row computed from an invoice or expense (not stored)."""

    id: str
    party_type: str
    party_id: str
    party_name: str
    invoice_number: str
    job_number: str
    description: str
    date: str
    status: str
    total: float
    paid: float
    outstanding: float
    source: str  # "invoice" | "expense"
    category: Optional[str] = None


# ==================== Chart of Accounts ====================


@dataclass
class Account:
    """Chart-of-accounts entry."""

    code: str
    name: str
    type: str  # asset | liability | equity | revenue | expense
    balance: float = 0.0
    parent_code: Optional[str] = None
    is_active: bool = True


STANDARD_ACCOUNTS: List[Account] = [
    Account("1000", "Cash and Cash Equivalents", "asset"),
    Account("1100", "Accounts Receivable", "asset"),
    Account("1200", "Inventory", "asset"),
    Account("1300", "Prepaid Expenses", "asset"),
    Account("1500", "Property, Plant & Equipment", "asset"),
    Account("1510", "Accumulated Depreciation", "asset"),
    Account("2000", "Accounts Payable", "liability"),
    Account("2100", "Accrued Expenses", "liability"),
    Account("2200", "Short-term Debt", "liability"),
    Account("2500", "Long-term Debt", "liability"),
    Account("3000", "Owner's Equity", "equity"),
    Account("3100", "Retained Earnings", "equity"),
    Account("3200", "Current Year Earnings", "equity"),
    Account("4000", "Service Revenue", "revenue"),
    Account("4100", "Freight Revenue", "revenue"),
    Account("4900", "Other Income", "revenue"),
    Account("5000", "Freight Costs", "expense"),
    Account("5100", "Handling Costs", "expense"),
    Account("5200", "Salaries and Wages", "expense"),
    Account("5300", "Rent", "expense"),
    Account("5400", "Utilities", "expense"),
    Account("5500", "Insurance", "expense"),
    Account("5600", "Depreciation", "expense"),
    Account("5700", "Marketing", "expense"),
    Account("5800", "Administrative Expenses", "expense"),
    Account("5900", "Interest Expense", "expense"),
    Account("5950", "Income Tax", "expense"),
    Account("5999", "Other Expenses", "expense"),
]


# ==================== Financial Statements ====================


@dataclass
class ProfitLoss:
    """Profit & loss statement for a date range (amounts in USD)."""

    start_date: str = ""
    end_date: str = ""
    service_revenue: float = 0.0
    freight_revenue: float = 0.0
    other_income: float = 0.0
    total_revenue: float = 0.0
    freight_costs: float = 0.0
    handling_costs: float = 0.0
    total_cost_of_services: float = 0.0
    gross_profit: float = 0.0
    gross_margin: float = 0.0
    salaries: float = 0.0
    rent: float = 0.0
    utilities: float = 0.0
    insurance: float = 0.0
    depreciation: float = 0.0
    marketing: float = 0.0
    administrative: float = 0.0
    other_operating: float = 0.0
    total_operating_expenses: float = 0.0
    operating_income: float = 0.0
    interest_expense: float = 0.0
    taxes: float = 0.0
    total_other_expenses: float = 0.0
    net_income: float = 0.0
    net_margin: float = 0.0

    @property
    def period(self) -> str:
        return f"{self.start_date} to {self.end_date}"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class BalanceSheet:
    """Balance sheet as of a date (amounts in USD)."""

    as_of_date: str = ""
    cash: float = 0.0
    accounts_receivable: float = 0.0
    inventory: float = 0.0
    prepaid_expenses: float = 0.0
    total_current_assets: float = 0.0
    property_plant_equipment: float = 0.0
    accumulated_depreciation: float = 0.0
    net_fixed_assets: float = 0.0
    other_assets: float = 0.0
    total_assets: float = 0.0
    accounts_payable: float = 0.0
    accrued_expenses: float = 0.0
    short_term_debt: float = 0.0
    total_current_liabilities: float = 0.0
    long_term_debt: float = 0.0
    other_long_term: float = 0.0
    total_long_term_liabilities: float = 0.0
    total_liabilities: float = 0.0
    owners_equity: float = 0.0
    retained_earnings: float = 0.0
    current_year_earnings: float = 0.0
    total_equity: float = 0.0
    total_liabilities_and_equity: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
