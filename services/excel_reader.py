"""
Excel Reader Service.

Handles reading customer and vendor profile sheets for bulk import.
Column headers are matched flexibly ("Customer Name", "Name", "Company", ...).

Uses pandas and openpyxl for Excel processing.
"""

import logging
from pathlib import Path
from typing import List, Dict, Any, Optional
import pandas as pd

from config.constants import EXCEL_EXTENSIONS
from domain.exceptions import ImportValidationError, ValidationError
from domain.validators import validate_file_path

logger = logging.getLogger(__name__)


# Column name mappings for flexible matching
CUSTOMER_NAME_VARIANTS = ['customer name', 'customer', 'company', 'name']
VENDOR_NAME_VARIANTS = ['vendor name', 'vendor', 'company', 'name']
VENDOR_TYPE_VARIANTS = ['vendor type', 'type', 'category']
SERVICES_VARIANTS = ['services', 'service']
ADDRESS_VARIANTS = ['address', 'street']
CITY_VARIANTS = ['city', 'town']
COUNTRY_VARIANTS = ['country']
COMMODITY_VARIANTS = ['main commodity', 'commodity']
OTHER_COMMODITY_VARIANTS = ['other commodity']
NTN_VARIANTS = ['ntn number', 'ntn']
GST_VARIANTS = ['gst number', 'gst']
SRB_VARIANTS = ['srb number', 'srb']
EMAIL_VARIANTS = {
    "email1": ['email 1', 'email1', 'email', 'e-mail'],
    "email2": ['email 2', 'email2'],
    "email3": ['email 3', 'email3'],
}
CONTACT_VARIANTS = {
    "contact1": ['contact 1', 'contact1', 'contact', 'phone', 'mobile'],
    "contact2": ['contact 2', 'contact2'],
    "contact3": ['contact 3', 'contact3'],
}


class ExcelReader:
    """
    Excel file reader for customer and vendor profile lists.

    Rows are returned as plain dicts keyed by profile field name, ready for
    CustomerProfile.from_dict / VendorProfile.from_dict.
    """

    def __init__(self, file_path: Path):
        """
        Initialize Excel reader.

        Args:
            file_path: Path to Excel file (.xlsx or .xls)

        Raises:
            ImportValidationError: If file is invalid or doesn't exist
        """
        try:
            self.file_path = validate_file_path(
                file_path,
                must_exist=True,
                allowed_extensions=EXCEL_EXTENSIONS,
            )
        except ValidationError as e:
            raise ImportValidationError(e.message, details=e.details)
        logger.info(f"Initialized Excel reader for: {self.file_path}")

    def _find_column(self, columns: List[str], search_terms: List[str]) -> Optional[str]:
        """
        Find column name using flexible matching.

        Tries exact match first, then partial match (case-insensitive).

        Args:
            columns: Available column names in DataFrame
            search_terms: Possible column name variations, most specific first

        Returns:
            Matched column name, or None if not found
        """
        for term in search_terms:
            for col in columns:
                if term.lower() == str(col).strip().lower():
                    return col

        for term in search_terms:
            for col in columns:
                if term.lower() in str(col).lower():
                    logger.debug(f"Found partial match: '{col}' contains '{term}'")
                    return col

        return None

    def read_dataframe(self, sheet_name: Optional[str] = None, header_row: int = 0) -> pd.DataFrame:
        """
        Read Excel file into pandas DataFrame.

        Args:
            sheet_name: Sheet to read (None = first sheet)
            header_row: Row index for column headers (0-indexed)

        Returns:
            DataFrame with cleaned data

        Raises:
            ImportValidationError: If file cannot be read
        """
        try:
            df = pd.read_excel(
                self.file_path,
                sheet_name=sheet_name or 0,
                header=header_row,
            )
            df = self._clean_dataframe(df)

            logger.debug(f"Read {len(df)} rows from {self.file_path.name}")
            return df

        except Exception as e:
            raise ImportValidationError(
                f"Could not read Excel file: {e}",
                details={"file": str(self.file_path), "error": str(e)},
            )

    def _clean_dataframe(self, df: pd.DataFrame) -> pd.DataFrame:
        """Drop empty rows, strip text cells and turn NaN into None."""
        df = df.dropna(how="all")

        for col in df.columns:
            if df[col].dtype == "object":
                df[col] = df[col].map(lambda v: v.strip() if isinstance(v, str) else v)

        df = df.astype(object).where(pd.notnull(df), None)

        return df

    def _safe_str(self, value, default: str = "") -> str:
        """
        Convert value to string safely, handling None/NaN.

        Numbers read from phone/NTN columns lose their ".0" suffix.

        Examples:
            >>> _safe_str(None) → ""
            >>> _safe_str(3001234567.0) → "3001234567"
        """
        if value is None:
            return default
        if pd.isna(value):
            return default
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value).strip()

    def _map_columns(self, columns: List[str], variants: Dict[str, List[str]]) -> Dict[str, str]:
        mapping = {}
        used = set()
        for field_name, terms in variants.items():
            found = self._find_column([c for c in columns if c not in used], terms)
            if found is not None:
                mapping[field_name] = found
                used.add(found)
        return mapping

    def _read_rows(self, name_field: str, variants: Dict[str, List[str]], label: str) -> List[Dict[str, Any]]:
        df = self.read_dataframe()
        columns = list(df.columns)

        logger.info(f"Available columns in {label} sheet: {columns}")

        mapping = self._map_columns(columns, variants)

        if name_field not in mapping:
            raise ImportValidationError(
                f"Missing name column in {label} sheet",
                details={
                    "file": str(self.file_path),
                    "missing": [name_field],
                    "available": columns,
                },
            )

        logger.info(f"Using columns: {mapping}")

        rows = []
        for idx, row in df.iterrows():
            record = {field_name: self._safe_str(row.get(col)) for field_name, col in mapping.items()}
            if not record[name_field]:
                logger.warning(f"Skipping row {idx}: No name")
                continue
            # Excel row number (header is row 1)
            record["_row"] = int(idx) + 2
            rows.append(record)

        logger.info(f"Parsed {len(rows)} {label} rows from {self.file_path.name}")
        return rows

    def read_customers(self) -> List[Dict[str, Any]]:
        """
        Read customer profiles with flexible column matching.

        Returns:
            List of dicts with CustomerProfile field names plus "_row"

        Raises:
            ImportValidationError: If no customer name column can be found
        """
        variants = {
            "customer_name": CUSTOMER_NAME_VARIANTS,
            **EMAIL_VARIANTS,
            **CONTACT_VARIANTS,
            "main_commodity": COMMODITY_VARIANTS,
            "other_commodity": OTHER_COMMODITY_VARIANTS,
            "ntn_number": NTN_VARIANTS,
            "gst_number": GST_VARIANTS,
            "srb_number": SRB_VARIANTS,
            "address": ADDRESS_VARIANTS,
            "city": CITY_VARIANTS,
            "country": COUNTRY_VARIANTS,
        }
        return self._read_rows("customer_name", variants, "customer")

    def read_vendors(self) -> List[Dict[str, Any]]:
        """
        Read vendor profiles with flexible column matching.

        Returns:
            List of dicts with VendorProfile field names plus "_row"

        Raises:
            ImportValidationError: If no vendor name column can be found
        """
        variants = {
            "vendor_name": VENDOR_NAME_VARIANTS,
            "type": VENDOR_TYPE_VARIANTS,
            "services": SERVICES_VARIANTS,
            **EMAIL_VARIANTS,
            **CONTACT_VARIANTS,
            "ntn_number": NTN_VARIANTS,
            "gst_number": GST_VARIANTS,
            "srb_number": SRB_VARIANTS,
            "address": ADDRESS_VARIANTS,
            "city": CITY_VARIANTS,
            "country": COUNTRY_VARIANTS,
        }
        return self._read_rows("vendor_name", variants, "vendor")

    def get_sheet_names(self) -> List[str]:
        """List sheet names in the workbook."""
        try:
            excel_file = pd.ExcelFile(self.file_path)
            return excel_file.sheet_names
        except Exception as e:
            raise ImportValidationError(
                f"Could not read sheet names from Excel: {e}",
                details={"file": str(self.file_path)},
            )
