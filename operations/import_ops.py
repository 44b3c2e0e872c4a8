"""
Import Operations for FreightDesk.

Bulk import of customer and vendor profiles from Excel sheets.

Each row is validated like a form save; invalid rows are reported and
skipped, likely duplicates (rapidfuzz name similarity against existing and
already-imported profiles) are skipped unless explicitly allowed.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from data.interface import DatabaseInterface
from domain.exceptions import ImportValidationError, ValidationError
from domain.models import CustomerProfile, VendorProfile
from services.excel_reader import ExcelReader

from .profile_ops import (
    Profile,
    create_customer,
    create_vendor,
    find_similar_profiles,
    list_customers,
    list_vendors,
)

logger = logging.getLogger(__name__)


@dataclass
class ImportSummary:
    """Outcome of a bulk import."""

    imported: List[Profile] = field(default_factory=list)
    duplicates: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def imported_count(self) -> int:
        return len(self.imported)

    def to_message(self) -> str:
        """One-paragraph summary for a message box."""
        lines = [f"Imported: {self.imported_count}"]
        if self.duplicates:
            lines.append(f"Skipped as possible duplicates: {len(self.duplicates)}")
        if self.errors:
            lines.append(f"Rows with errors: {len(self.errors)}")
            lines.extend(self.errors[:10])
        return "\n".join(lines)


def _import_profiles(
    rows: List[dict],
    existing: List[Profile],
    model: type,
    create: Callable[[Profile], Profile],
    allow_duplicates: bool,
) -> ImportSummary:
    summary = ImportSummary()
    known = list(existing)

    for row in rows:
        row_number = row.pop("_row", "?")
        profile = model.from_dict(row)

        if not allow_duplicates:
            similar = find_similar_profiles(profile.name, known)
            if similar:
                match, score = similar[0]
                summary.duplicates.append(f"Row {row_number}: {profile.name} ~ {match.name} ({score:.0f}%)")
                continue

        try:
            created = create(profile)
        except ValidationError as e:
            problems = "; ".join(e.field_errors.values()) or e.message
            summary.errors.append(f"Row {row_number}: {problems}")
            continue

        summary.imported.append(created)
        known.append(created)

    return summary


def import_customers_from_excel(
    db: DatabaseInterface,
    file_path: Path,
    allow_duplicates: bool = False,
) -> ImportSummary:
    """
    Import customer profiles from an Excel sheet.

    Args:
        db: Database instance (injected)
        file_path: .xlsx/.xls file with a name column and optional
            email/contact/address/commodity/tax number columns
        allow_duplicates: Import rows even when a similar name exists

    Returns:
        ImportSummary with created profiles, skipped duplicates and row errors

    Raises:
        ImportValidationError: If the file cannot be read or has no name column
        DatabaseError: If a write fails

    Example:
        >>> summary = import_customers_from_excel(db, Path("customers.xlsx"))
        >>> summary.imported_count
        12
    """
    logger.info(f"Importing customers from: {file_path}")

    rows = ExcelReader(file_path).read_customers()
    if not rows:
        raise ImportValidationError(
            "No customer rows found in file",
            details={"file": str(file_path)},
        )

    summary = _import_profiles(
        rows,
        list_customers(db),
        CustomerProfile,
        lambda profile: create_customer(db, profile),
        allow_duplicates,
    )
    logger.info(
        f"Customer import finished: {summary.imported_count} imported, "
        f"{len(summary.duplicates)} duplicates, {len(summary.errors)} errors"
    )
    return summary


def import_vendors_from_excel(
    db: DatabaseInterface,
    file_path: Path,
    allow_duplicates: bool = False,
) -> ImportSummary:
    """
    Import vendor profiles from an Excel sheet.

    Raises:
        ImportValidationError: If the file cannot be read or has no name column
        DatabaseError: If a write fails
    """
    logger.info(f"Importing vendors from: {file_path}")

    rows = ExcelReader(file_path).read_vendors()
    if not rows:
        raise ImportValidationError(
            "No vendor rows found in file",
            details={"file": str(file_path)},
        )

    summary = _import_profiles(
        rows,
        list_vendors(db),
        VendorProfile,
        lambda profile: create_vendor(db, profile),
        allow_duplicates,
    )
    logger.info(
        f"Vendor import finished: {summary.imported_count} imported, "
        f"{len(summary.duplicates)} duplicates, {len(summary.errors)} errors"
    )
    return summary


def preview_profile_file(file_path: Path, kind: str = "customer") -> List[dict]:
    """
    Parse a profile sheet without saving (for a preview table).

    Raises:
        ImportValidationError: If the file cannot be read
    """
    reader = ExcelReader(file_path)
    rows: Optional[List[dict]] = reader.read_customers() if kind == "customer" else reader.read_vendors()
    return rows or []
