"""
Unit tests for SQLite database implementation.

Tests cover document CRUD, filtering and ordering.
"""

import pytest
import tempfile
from pathlib import Path

from data import create_database
from domain.exceptions import DatabaseError, NotFoundError


@pytest.fixture
def db():
    """Create a temporary database for testing."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name

    database = create_database("sqlite", db_path)
    yield database
    database.close()

    # Cleanup
    Path(db_path).unlink(missing_ok=True)


def test_create_database():
    """Test database creation and migrations."""
    with tempfile.TemporaryDirectory() as tmp:
        db = create_database("sqlite", Path(tmp) / "nested" / "test.db")
        assert db is not None
        assert db.count_documents("customers") == 0
        db.close()


def test_migrations_are_not_reapplied():
    """Opening an existing database twice keeps its data."""
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "test.db"
        db = create_database("sqlite", path)
        db.create_document("customers", {"customer_name": "Acme"})
        db.close()

        db = create_database("sqlite", path)
        assert db.count_documents("customers") == 1
        db.close()


def test_unknown_backend_raises():
    with pytest.raises(ValueError):
        create_database("postgres", ":memory:")


def test_create_and_get_document(db):
    """Test storing and retrieving a document."""
    created = db.create_document("customers", {"customer_name": "Acme", "city": "Karachi"})

    assert created["id"]
    assert created["customer_name"] == "Acme"
    assert created["created_at"] == created["updated_at"]

    fetched = db.get_document("customers", created["id"])
    assert fetched == created


def test_get_missing_document_returns_none(db):
    assert db.get_document("customers", "missing") is None


def test_reserved_fields_not_stored_in_payload(db):
    """id/timestamps in the payload are ignored except a caller-chosen id."""
    created = db.create_document("vendors", {"id": "v1", "vendor_name": "Carrier", "created_at": "x"})

    assert created["id"] == "v1"
    assert created["created_at"] != "x"


def test_duplicate_id_raises_error(db):
    db.create_document("vendors", {"id": "v1", "vendor_name": "A"})

    with pytest.raises(DatabaseError) as exc_info:
        db.create_document("vendors", {"id": "v1", "vendor_name": "B"})

    assert "already exists" in str(exc_info.value)


def test_same_id_in_different_collections(db):
    db.create_document("vendors", {"id": "x", "vendor_name": "A"})
    db.create_document("customers", {"id": "x", "customer_name": "B"})

    assert db.get_document("vendors", "x")["vendor_name"] == "A"
    assert db.get_document("customers", "x")["customer_name"] == "B"


def test_update_document_merges_fields(db):
    created = db.create_document("invoices", {"invoice_number": "INV-1", "total": 100.0, "status": "draft"})

    updated = db.update_document("invoices", created["id"], {"status": "sent"})

    assert updated["status"] == "sent"
    assert updated["total"] == 100.0
    assert updated["created_at"] == created["created_at"]
    assert updated["updated_at"] >= created["updated_at"]


def test_update_missing_document_raises_not_found(db):
    with pytest.raises(NotFoundError):
        db.update_document("invoices", "missing", {"status": "sent"})


def test_delete_document(db):
    created = db.create_document("expenses", {"amount": 10.0})

    assert db.delete_document("expenses", created["id"]) is True
    assert db.get_document("expenses", created["id"]) is None
    assert db.delete_document("expenses", created["id"]) is False


def test_list_documents_with_filters(db):
    db.create_document("invoices", {"party_type": "customer", "party_id": "c1"})
    db.create_document("invoices", {"party_type": "customer", "party_id": "c2"})
    db.create_document("invoices", {"party_type": "vendor", "party_id": "v1"})

    customers = db.list_documents("invoices", filters={"party_type": "customer"})
    assert len(customers) == 2

    one = db.list_documents("invoices", filters={"party_type": "customer", "party_id": "c2"})
    assert [d["party_id"] for d in one] == ["c2"]


def test_list_documents_ordering(db):
    db.create_document("ledger", {"date": "2024-02-01"})
    db.create_document("ledger", {"date": "2024-01-01"})
    db.create_document("ledger", {"date": "2024-03-01"})

    ascending = db.list_documents("ledger", order_by="date")
    assert [d["date"] for d in ascending] == ["2024-01-01", "2024-02-01", "2024-03-01"]

    descending = db.list_documents("ledger", order_by="date", descending=True)
    assert [d["date"] for d in descending] == ["2024-03-01", "2024-02-01", "2024-01-01"]


def test_invalid_filter_field_rejected(db):
    with pytest.raises(DatabaseError):
        db.list_documents("customers", filters={"name') OR 1=1 --": "x"})


def test_non_finite_number_rejected(db):
    db.create_document("ledger", {"party_id": "c1", "credit": 100.0})

    with pytest.raises(DatabaseError):
        db.create_document("ledger", {"party_id": "c1", "debit": float("nan")})

    created = db.create_document("ledger", {"party_id": "c2", "debit": 5.0})
    with pytest.raises(DatabaseError):
        db.update_document("ledger", created["id"], {"debit": float("inf")})

    assert len(db.list_documents("ledger", filters={"party_id": "c1"})) == 1
    assert db.get_document("ledger", created["id"])["debit"] == 5.0


def test_nested_values_roundtrip(db):
    created = db.create_document("customers", {
        "customer_name": "Acme",
        "consignees": [{"name": "Warehouse", "trade_license": "TL-1"}],
    })

    fetched = db.get_document("customers", created["id"])
    assert fetched["consignees"][0]["trade_license"] == "TL-1"


def test_in_memory_database():
    db = create_database("sqlite", ":memory:")
    db.create_document("customers", {"customer_name": "Acme"})
    assert db.count_documents("customers") == 1
    db.close()
