"""
Unit tests for Excel Reader service.

Tests cover Excel file reading and flexible column matching.
"""

import pytest
import pandas as pd

from services.excel_reader import ExcelReader
from domain.exceptions import ImportValidationError


@pytest.fixture
def customers_file(tmp_path):
    """Customer sheet with loosely named headers."""
    path = tmp_path / "customers.xlsx"
    pd.DataFrame({
        "Customer Name": ["  Acme Traders ", "Global Freight", None],
        "E-mail": ["ops@acme.test", "info@global.test", None],
        "Phone": [3001234567, 2135550100, None],
        "City": ["Karachi", None, None],
        "NTN": ["1234567-8", None, None],
    }).to_excel(path, index=False)
    return path


@pytest.fixture
def vendors_file(tmp_path):
    path = tmp_path / "vendors.xlsx"
    pd.DataFrame({
        "Vendor": ["Blue Line", ""],
        "Vendor Type": ["Shipping Line", "Trucker"],
        "Services": ["FCL, LCL", "Haulage"],
        "Email 1": ["desk@blueline.test", "x@y.test"],
        "Contact 1": ["04-555-0100", "1"],
    }).to_excel(path, index=False)
    return path


def test_excel_reader_init_with_valid_file(customers_file):
    reader = ExcelReader(customers_file)
    assert reader.file_path == customers_file


def test_excel_reader_init_missing_file(tmp_path):
    with pytest.raises(ImportValidationError) as exc_info:
        ExcelReader(tmp_path / "missing.xlsx")
    assert "File not found" in exc_info.value.message


def test_excel_reader_init_wrong_extension(tmp_path):
    path = tmp_path / "customers.csv"
    path.write_text("name\nAcme\n")

    with pytest.raises(ImportValidationError):
        ExcelReader(path)


def test_read_customers(customers_file):
    rows = ExcelReader(customers_file).read_customers()

    assert len(rows) == 2
    first = rows[0]
    assert first["customer_name"] == "Acme Traders"
    assert first["email1"] == "ops@acme.test"
    assert first["contact1"] == "3001234567"
    assert first["city"] == "Karachi"
    assert first["ntn_number"] == "1234567-8"
    assert first["_row"] == 2
    assert rows[1]["city"] == ""


def test_read_vendors_skips_rows_without_name(vendors_file):
    rows = ExcelReader(vendors_file).read_vendors()

    assert [r["vendor_name"] for r in rows] == ["Blue Line"]
    assert rows[0]["type"] == "Shipping Line"
    assert rows[0]["services"] == "FCL, LCL"
    assert rows[0]["contact1"] == "04-555-0100"


def test_missing_name_column(tmp_path):
    path = tmp_path / "bad.xlsx"
    pd.DataFrame({"Foo": ["a"], "Bar": ["b"]}).to_excel(path, index=False)

    with pytest.raises(ImportValidationError) as exc_info:
        ExcelReader(path).read_customers()

    assert exc_info.value.details["missing"] == ["customer_name"]


def test_find_column_prefers_exact_match(customers_file):
    reader = ExcelReader(customers_file)

    assert reader._find_column(["Company Name", "Name"], ["name"]) == "Name"
    assert reader._find_column(["Customer Name (legal)"], ["customer name"]) == "Customer Name (legal)"
    assert reader._find_column(["Foo"], ["name"]) is None


def test_safe_str(customers_file):
    reader = ExcelReader(customers_file)

    assert reader._safe_str(None) == ""
    assert reader._safe_str(float("nan")) == ""
    assert reader._safe_str(3001234567.0) == "3001234567"
    assert reader._safe_str(" text ") == "text"


def test_get_sheet_names(customers_file):
    assert ExcelReader(customers_file).get_sheet_names() == ["Sheet1"]
