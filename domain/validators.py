"""
Input validators for FreightDesk.

These validators ensure data integrity before it reaches the database.
All validators raise ValidationError on failure. Form validators collect
every problem into field_errors so the UI can show them together.
"""

import math
import re
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .exceptions import ValidationError
from .models import CustomerProfile, VendorProfile, LedgerEntry, ImportShipment, ExportShipment

MSG_CUSTOMER_NAME_REQUIRED = "Customer Name is required"
MSG_VENDOR_NAME_REQUIRED = "Vendor Name is required"
MSG_EMAIL_REQUIRED = "At least one email is required"
MSG_CONTACT_REQUIRED = "At least one contact number is required"
MSG_INVALID_EMAIL = "Invalid email address"

MSG_SELECT_CUSTOMER = "Please select a customer"
MSG_SELECT_VENDOR = "Please select a vendor"
MSG_DESCRIPTION_REQUIRED = "Please enter a description"
MSG_DEBIT_OR_CREDIT_REQUIRED = "Please enter either a debit or credit amount"
MSG_DEBIT_AND_CREDIT = "Please enter only debit OR credit, not both"

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def parse_amount(value: Any) -> float:
    """
    Parse a user-entered amount.

    Empty, missing, unparseable or non-finite (nan, inf) values count as 0.

    Example:
        >>> parse_amount("1,250.50")
        1250.5
        >>> parse_amount("abc")
        0.0
        >>> parse_amount("nan")
        0.0
    """
    if value is None:
        return 0.0
    if not isinstance(value, (int, float)):
        value = str(value).strip().replace(",", "")
        if not value:
            return 0.0
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def validate_email(email: str) -> str:
    """
    Validate e-mail address format.

    Returns:
        Cleaned e-mail (trimmed)

    Raises:
        ValidationError: If format is invalid
    """
    cleaned = (email or "").strip()
    if not EMAIL_PATTERN.match(cleaned):
        raise ValidationError(MSG_INVALID_EMAIL, details={"email": cleaned})
    return cleaned


def _contact_errors(profile: Union[CustomerProfile, VendorProfile]) -> Dict[str, str]:
    errors = {}

    if not profile.email1.strip():
        errors["email1"] = MSG_EMAIL_REQUIRED

    for name in ("email1", "email2", "email3"):
        value = getattr(profile, name).strip()
        if value and name not in errors and not EMAIL_PATTERN.match(value):
            errors[name] = MSG_INVALID_EMAIL

    if not profile.contact1.strip():
        errors["contact1"] = MSG_CONTACT_REQUIRED

    return errors


def validate_customer_profile(profile: CustomerProfile) -> CustomerProfile:
    """
    Validate customer profile form.

    Rules:
    - Customer name required
    - At least one e-mail (email1), well-formed when given
    - At least one contact number (contact1)

    Returns:
        The profile with text fields trimmed and blank consignee rows dropped

    Raises:
        ValidationError: With field_errors for every failing field
    """
    errors = {}
    if not profile.customer_name.strip():
        errors["customer_name"] = MSG_CUSTOMER_NAME_REQUIRED
    errors.update(_contact_errors(profile))

    if errors:
        raise ValidationError(
            "Customer profile is invalid",
            details={"fields": ", ".join(errors)},
            field_errors=errors,
        )

    profile.customer_name = profile.customer_name.strip()
    profile.consignees = [c for c in profile.consignees if c.name.strip()]
    return profile


def validate_vendor_profile(profile: VendorProfile) -> VendorProfile:
    """
    Validate vendor profile form.

    Same contact rules as customers; vendor name required.

    Raises:
        ValidationError: With field_errors for every failing field
    """
    errors = {}
    if not profile.vendor_name.strip():
        errors["vendor_name"] = MSG_VENDOR_NAME_REQUIRED
    errors.update(_contact_errors(profile))

    if errors:
        raise ValidationError(
            "Vendor profile is invalid",
            details={"fields": ", ".join(errors)},
            field_errors=errors,
        )

    profile.vendor_name = profile.vendor_name.strip()
    return profile


def validate_shipment(shipment: Union[ImportShipment, ExportShipment]) -> None:
    """
    Validate required shipment references.

    Import: bill of lading and customer. Export: booking number and shipper.

    Raises:
        ValidationError: With field_errors for every failing field
    """
    errors = {}
    if isinstance(shipment, ExportShipment):
        if not shipment.booking_number.strip():
            errors["booking_number"] = "Booking Number is required"
        if not shipment.shipper_id:
            errors["shipper_id"] = "Please select a shipper"
    else:
        if not shipment.bill_of_lading.strip():
            errors["bill_of_lading"] = "Bill of Lading is required"
        if not shipment.customer_id:
            errors["customer_id"] = MSG_SELECT_CUSTOMER

    if errors:
        raise ValidationError(
            f"{shipment.kind.capitalize()} shipment is invalid",
            details={"fields": ", ".join(errors)},
            field_errors=errors,
        )


def validate_ledger_entry(entry: LedgerEntry) -> LedgerEntry:
    """
    Validate a manual ledger entry.

    Rules:
    - Party selected
    - Description not empty
    - Exactly one of debit/credit is non-zero

    Raises:
        ValidationError: First failing rule (matches the form's single message)
    """
    if not entry.party_id:
        message = MSG_SELECT_VENDOR if entry.party_type == "vendor" else MSG_SELECT_CUSTOMER
        raise ValidationError(message, field_errors={"party_id": message})

    if not entry.description.strip():
        raise ValidationError(
            MSG_DESCRIPTION_REQUIRED,
            field_errors={"description": MSG_DESCRIPTION_REQUIRED},
        )

    debit = parse_amount(entry.debit)
    credit = parse_amount(entry.credit)

    if debit == 0 and credit == 0:
        raise ValidationError(
            MSG_DEBIT_OR_CREDIT_REQUIRED,
            field_errors={"debit": MSG_DEBIT_OR_CREDIT_REQUIRED},
        )

    if debit > 0 and credit > 0:
        raise ValidationError(
            MSG_DEBIT_AND_CREDIT,
            details={"debit": debit, "credit": credit},
            field_errors={"debit": MSG_DEBIT_AND_CREDIT},
        )

    if debit < 0 or credit < 0:
        raise ValidationError(
            "Amounts cannot be negative",
            details={"debit": debit, "credit": credit},
        )

    entry.debit = debit
    entry.credit = credit
    entry.description = entry.description.strip()
    return entry


def validate_positive_amount(amount: Any, field_name: str = "amount") -> float:
    """
    Validate that an amount is greater than zero.

    Returns:
        Parsed amount

    Raises:
        ValidationError: If amount <= 0
    """
    value = parse_amount(amount)
    if value <= 0:
        message = "Please enter a valid amount"
        raise ValidationError(
            message,
            details={field_name: amount},
            field_errors={field_name: message},
        )
    return value


def validate_file_path(
    file_path: Union[str, Path],
    must_exist: bool = True,
    allowed_extensions: Optional[list] = None,
) -> Path:
    """
    Validate file path.

    Args:
        file_path: Path to validate
        must_exist: If True, file must exist
        allowed_extensions: List of allowed extensions (e.g. [".xlsx"])

    Returns:
        Validated Path object

    Raises:
        ValidationError: If path is invalid
    """
    if not file_path:
        raise ValidationError("File path cannot be empty")

    path = Path(file_path)

    if must_exist and not path.exists():
        raise ValidationError(
            f"File not found: {path}",
            details={"file_path": str(path)},
        )

    if allowed_extensions and path.suffix.lower() not in allowed_extensions:
        raise ValidationError(
            f"Invalid file type: {path.suffix}",
            details={"file_path": str(path), "allowed": ", ".join(allowed_extensions)},
        )

    return path
