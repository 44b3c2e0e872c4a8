"""
Unit tests for Profile Operations.

Tests cover customer/vendor CRUD, search and duplicate detection.
"""

import pytest

from data import create_database
from domain.exceptions import NotFoundError, ValidationError
from domain.models import Consignee, CustomerProfile, VendorProfile
from operations.profile_ops import (
    create_customer,
    create_vendor,
    delete_customer,
    delete_vendor,
    find_similar_profiles,
    get_customer,
    get_vendor,
    list_customers,
    list_vendors,
    search_customers,
    update_customer,
    update_vendor,
)


# ==================== Fixtures ====================


@pytest.fixture
def db():
    """Create in-memory database for testing."""
    database = create_database("sqlite", ":memory:")
    yield database
    database.close()


def _customer(name="Acme Traders", **kwargs):
    values = {"customer_name": name, "email1": "ops@acme.test", "contact1": "021-555-0100"}
    values.update(kwargs)
    return CustomerProfile(**values)


def _vendor(name="Blue Line Shipping", **kwargs):
    values = {"vendor_name": name, "email1": "desk@blueline.test", "contact1": "04-555-0100"}
    values.update(kwargs)
    return VendorProfile(**values)


# ==================== Customers ====================


def test_create_and_get_customer(db):
    created = create_customer(db, _customer(consignees=[Consignee(name="Harbor", trade_license="TL-9")]))

    assert created.id is not None
    assert created.created_at is not None

    fetched = get_customer(db, created.id)
    assert fetched.customer_name == "Acme Traders"
    assert fetched.consignees == [Consignee(name="Harbor", trade_license="TL-9")]


def test_create_customer_validation_error_not_stored(db):
    with pytest.raises(ValidationError) as exc_info:
        create_customer(db, CustomerProfile(customer_name="No Contact"))

    assert "email1" in exc_info.value.field_errors
    assert list_customers(db) == []


def test_list_customers_sorted_by_name(db):
    create_customer(db, _customer("Zeta Imports"))
    create_customer(db, _customer("Alpha Exports"))

    names = [c.customer_name for c in list_customers(db)]
    assert names == ["Alpha Exports", "Zeta Imports"]


def test_list_customers_with_search(db):
    create_customer(db, _customer("Acme", city="Karachi"))
    create_customer(db, _customer("Other", city="Lahore"))

    assert [c.customer_name for c in list_customers(db, search="karachi")] == ["Acme"]


def test_update_customer(db):
    created = create_customer(db, _customer())
    created.city = "Karachi"

    updated = update_customer(db, created.id, created)

    assert updated.city == "Karachi"
    assert updated.id == created.id


def test_update_missing_customer_raises(db):
    with pytest.raises(NotFoundError):
        update_customer(db, "missing", _customer())


def test_get_missing_customer_raises(db):
    with pytest.raises(NotFoundError):
        get_customer(db, "missing")


def test_delete_customer(db):
    created = create_customer(db, _customer())

    assert delete_customer(db, created.id) is True
    assert delete_customer(db, created.id) is False
    assert list_customers(db) == []


def test_search_customers_in_memory():
    customers = [
        _customer("Acme", main_commodity="Rice"),
        _customer("Other", consignees=[Consignee(name="Rice Mills Depot")]),
        _customer("Third"),
    ]
    assert [c.customer_name for c in search_customers(customers, "rice")] == ["Acme", "Other"]


# ==================== Vendors ====================


def test_vendor_crud(db):
    created = create_vendor(db, _vendor(type="Shipping Line", services="FCL, LCL"))
    assert get_vendor(db, created.id).services == "FCL, LCL"

    created.city = "Dubai"
    assert update_vendor(db, created.id, created).city == "Dubai"

    assert [v.vendor_name for v in list_vendors(db, search="dubai")] == ["Blue Line Shipping"]
    assert delete_vendor(db, created.id) is True

    with pytest.raises(NotFoundError):
        get_vendor(db, created.id)


def test_create_vendor_requires_contacts(db):
    with pytest.raises(ValidationError) as exc_info:
        create_vendor(db, VendorProfile(vendor_name="Nobody"))

    assert set(exc_info.value.field_errors) == {"email1", "contact1"}


# ==================== Duplicate Detection ====================


def test_find_similar_profiles_ignores_case_and_order():
    existing = [
        _customer("Acme Traders Ltd", id="1"),
        _customer("Global Freight", id="2"),
    ]

    matches = find_similar_profiles("ltd ACME traders", existing)

    assert len(matches) == 1
    assert matches[0][0].id == "1"
    assert matches[0][1] == 100


def test_find_similar_profiles_threshold():
    existing = [_customer("Acme Traders", id="1")]

    assert find_similar_profiles("Totally Different Co", existing) == []
    assert find_similar_profiles("Acme Trader", existing)


def test_find_similar_profiles_excludes_edited_profile():
    existing = [_customer("Acme Traders", id="1")]
    assert find_similar_profiles("Acme Traders", existing, exclude_id="1") == []


def test_find_similar_profiles_empty_name():
    assert find_similar_profiles("   ", [_customer(id="1")]) == []
