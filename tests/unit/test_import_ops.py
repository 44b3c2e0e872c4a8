"""
Unit tests for Import Operations (bulk profile import from Excel).
"""

import pytest
import pandas as pd

from data import create_database
from domain.exceptions import ImportValidationError
from domain.models import CustomerProfile
from operations.import_ops import (
    import_customers_from_excel,
    import_vendors_from_excel,
    preview_profile_file,
)
from operations.profile_ops import create_customer, list_customers, list_vendors


@pytest.fixture
def db():
    """Create in-memory database for testing."""
    database = create_database("sqlite", ":memory:")
    yield database
    database.close()


@pytest.fixture
def customers_file(tmp_path):
    path = tmp_path / "customers.xlsx"
    pd.DataFrame({
        "Customer Name": ["Acme Traders", "Global Freight", "No Email Co", "global freight"],
        "Email": ["a@acme.test", "info@global.test", None, "dup@global.test"],
        "Contact": ["111", "222", "333", "444"],
    }).to_excel(path, index=False)
    return path


def test_import_customers(db, customers_file):
    create_customer(db, CustomerProfile(customer_name="ACME traders", email1="x@acme.test", contact1="1"))

    summary = import_customers_from_excel(db, customers_file)

    assert [p.customer_name for p in summary.imported] == ["Global Freight"]
    assert len(summary.duplicates) == 2
    assert summary.duplicates[0].startswith("Row 2: Acme Traders")
    assert summary.errors == ["Row 4: At least one email is required"]
    assert len(list_customers(db)) == 2


def test_import_customers_allow_duplicates(db, customers_file):
    summary = import_customers_from_excel(db, customers_file, allow_duplicates=True)

    assert summary.imported_count == 3
    assert summary.duplicates == []
    assert len(summary.errors) == 1


def test_summary_message(db, customers_file):
    message = import_customers_from_excel(db, customers_file).to_message()

    assert message.startswith("Imported: 2")
    assert "Rows with errors: 1" in message
    assert "Skipped as possible duplicates: 1" in message


def test_import_vendors(db, tmp_path):
    path = tmp_path / "vendors.xlsx"
    pd.DataFrame({
        "Vendor Name": ["Blue Line", "Sky Cargo"],
        "Type": ["Shipping Line", "Airline"],
        "Email": ["desk@blueline.test", "ops@sky.test"],
        "Phone": ["04-1", "04-2"],
    }).to_excel(path, index=False)

    summary = import_vendors_from_excel(db, path)

    assert summary.imported_count == 2
    assert {v.type for v in list_vendors(db)} == {"Shipping Line", "Airline"}


def test_import_empty_sheet_raises(db, tmp_path):
    path = tmp_path / "empty.xlsx"
    pd.DataFrame({"Customer Name": [None], "Email": [None]}).to_excel(path, index=False)

    with pytest.raises(ImportValidationError):
        import_customers_from_excel(db, path)


def test_import_missing_file_raises(db, tmp_path):
    with pytest.raises(ImportValidationError):
        import_vendors_from_excel(db, tmp_path / "missing.xlsx")


def test_preview_does_not_save(db, customers_file):
    rows = preview_profile_file(customers_file, "customer")

    assert len(rows) == 4
    assert list_customers(db) == []
