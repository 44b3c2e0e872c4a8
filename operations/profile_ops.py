"""
Profile Operations for FreightDesk.

Customer and vendor profile management.
Pure functions with dependency injection - no global state.

- create/update/delete validate first, persist second, and return the
  stored record so the caller can update its cached list afterwards.
- search_* filter an already-loaded list (no database round trip).
- find_similar_profiles flags likely duplicates before a create.
"""

import logging
from typing import List, Optional, Tuple, Union

from rapidfuzz import fuzz

from config.constants import (
    COLLECTION_CUSTOMERS,
    COLLECTION_VENDORS,
    SIMILAR_PROFILE_THRESHOLD,
)
from data.interface import DatabaseInterface
from domain.exceptions import DatabaseError, NotFoundError, ValidationError
from domain.models import CustomerProfile, VendorProfile
from domain.rules import matches_customer_search, matches_vendor_search
from domain.validators import validate_customer_profile, validate_vendor_profile

logger = logging.getLogger(__name__)

Profile = Union[CustomerProfile, VendorProfile]


# ==================== Customers ====================


def list_customers(db: DatabaseInterface, search: str = "") -> List[CustomerProfile]:
    """
    List customer profiles sorted by name.

    Args:
        db: Database instance (injected)
        search: Optional case-insensitive search term

    Raises:
        DatabaseError: If query fails
    """
    try:
        documents = db.list_documents(COLLECTION_CUSTOMERS, order_by="customer_name")
    except Exception as e:
        logger.exception("Error listing customers")
        raise DatabaseError(f"Failed to list customers: {e}")

    customers = [CustomerProfile.from_dict(doc) for doc in documents]
    return search_customers(customers, search) if search else customers


def get_customer(db: DatabaseInterface, customer_id: str) -> CustomerProfile:
    """
    Get customer profile by id.

    Raises:
        NotFoundError: If customer does not exist
    """
    document = db.get_document(COLLECTION_CUSTOMERS, customer_id)
    if document is None:
        raise NotFoundError("Customer not found", details={"customer_id": customer_id})
    return CustomerProfile.from_dict(document)


def create_customer(db: DatabaseInterface, profile: CustomerProfile) -> CustomerProfile:
    """
    Validate and store a new customer profile.

    Args:
        db: Database instance (injected)
        profile: Profile from the form (id is ignored)

    Returns:
        Stored profile with id and timestamps

    Raises:
        ValidationError: If required fields are missing (field_errors set)
        DatabaseError: If the write fails

    Example:
        >>> customer = create_customer(db, CustomerProfile(
        ...     customer_name="Acme Traders", email1="ops@acme.test", contact1="021-555"))
        >>> customer.id is not None
        True
    """
    validated = validate_customer_profile(profile)
    data = validated.to_dict()
    data.pop("id", None)

    try:
        document = db.create_document(COLLECTION_CUSTOMERS, data)
    except Exception as e:
        logger.exception(f"Error creating customer {validated.customer_name}")
        raise DatabaseError(
            f"Failed to create customer: {e}",
            details={"customer_name": validated.customer_name},
        )

    logger.info(f"Created customer {document['id']} ({validated.customer_name})")
    return CustomerProfile.from_dict(document)


def update_customer(
    db: DatabaseInterface,
    customer_id: str,
    profile: CustomerProfile,
) -> CustomerProfile:
    """
    Validate and save changes to an existing customer profile.

    Raises:
        ValidationError: If required fields are missing
        NotFoundError: If customer does not exist
        DatabaseError: If the write fails
    """
    validated = validate_customer_profile(profile)
    return CustomerProfile.from_dict(
        _update_profile(db, COLLECTION_CUSTOMERS, customer_id, validated)
    )


def delete_customer(db: DatabaseInterface, customer_id: str) -> bool:
    """Delete customer profile. Returns False if it did not exist."""
    return _delete_profile(db, COLLECTION_CUSTOMERS, customer_id)


def search_customers(customers: List[CustomerProfile], term: str) -> List[CustomerProfile]:
    """Filter customers on name, city, main commodity or consignee names."""
    return [c for c in customers if matches_customer_search(c, term)]


# ==================== Vendors ====================


def list_vendors(db: DatabaseInterface, search: str = "") -> List[VendorProfile]:
    """
    List vendor profiles sorted by name.

    Raises:
        DatabaseError: If query fails
    """
    try:
        documents = db.list_documents(COLLECTION_VENDORS, order_by="vendor_name")
    except Exception as e:
        logger.exception("Error listing vendors")
        raise DatabaseError(f"Failed to list vendors: {e}")

    vendors = [VendorProfile.from_dict(doc) for doc in documents]
    return search_vendors(vendors, search) if search else vendors


def get_vendor(db: DatabaseInterface, vendor_id: str) -> VendorProfile:
    """
    Get vendor profile by id.

    Raises:
        NotFoundError: If vendor does not exist
    """
    document = db.get_document(COLLECTION_VENDORS, vendor_id)
    if document is None:
        raise NotFoundError("Vendor not found", details={"vendor_id": vendor_id})
    return VendorProfile.from_dict(document)


def create_vendor(db: DatabaseInterface, profile: VendorProfile) -> VendorProfile:
    """
    Validate and store a new vendor profile.

    Raises:
        ValidationError: If required fields are missing (field_errors set)
        DatabaseError: If the write fails
    """
    validated = validate_vendor_profile(profile)
    data = validated.to_dict()
    data.pop("id", None)

    try:
        document = db.create_document(COLLECTION_VENDORS, data)
    except Exception as e:
        logger.exception(f"Error creating vendor {validated.vendor_name}")
        raise DatabaseError(
            f"Failed to create vendor: {e}",
            details={"vendor_name": validated.vendor_name},
        )

    logger.info(f"Created vendor {document['id']} ({validated.vendor_name})")
    return VendorProfile.from_dict(document)


def update_vendor(
    db: DatabaseInterface,
    vendor_id: str,
    profile: VendorProfile,
) -> VendorProfile:
    """Validate and save changes to an existing vendor profile."""
    validated = validate_vendor_profile(profile)
    return VendorProfile.from_dict(
        _update_profile(db, COLLECTION_VENDORS, vendor_id, validated)
    )


def delete_vendor(db: DatabaseInterface, vendor_id: str) -> bool:
    """Delete vendor profile. Returns False if it did not exist."""
    return _delete_profile(db, COLLECTION_VENDORS, vendor_id)


def search_vendors(vendors: List[VendorProfile], term: str) -> List[VendorProfile]:
    """Filter vendors on name, city or type."""
    return [v for v in vendors if matches_vendor_search(v, term)]


# ==================== Duplicate Detection ====================


def find_similar_profiles(
    name: str,
    profiles: List[Profile],
    threshold: int = SIMILAR_PROFILE_THRESHOLD,
    exclude_id: Optional[str] = None,
) -> List[Tuple[Profile, float]]:
    """
    Find existing profiles whose name is similar to name.

    Uses rapidfuzz token_sort_ratio so word order and case do not matter
    ("Acme Traders Ltd" ~ "ltd acme traders").

    Args:
        name: Name entered in the form
        profiles: Existing customer or vendor profiles
        threshold: Minimum score (0-100) to report
        exclude_id: Profile being edited (never reported as its own duplicate)

    Returns:
        List of (profile, score) sorted by score, best first

    Example:
        >>> find_similar_profiles("ACME traders", customers)
        [(CustomerProfile(customer_name='Acme Traders', ...), 100.0)]
    """
    candidate = (name or "").strip().lower()
    if not candidate:
        return []

    matches = []
    for profile in profiles:
        if exclude_id and profile.id == exclude_id:
            continue
        score = fuzz.token_sort_ratio(candidate, profile.name.lower())
        if score >= threshold:
            matches.append((profile, score))

    matches.sort(key=lambda match: match[1], reverse=True)
    if matches:
        logger.debug(f"Found {len(matches)} profiles similar to '{name}'")
    return matches


# ==================== Helpers ====================


def _update_profile(db: DatabaseInterface, collection: str, profile_id: str, profile: Profile) -> dict:
    data = profile.to_dict()
    for key in ("id", "created_at", "updated_at"):
        data.pop(key, None)

    try:
        document = db.update_document(collection, profile_id, data)
    except (NotFoundError, ValidationError):
        raise
    except Exception as e:
        logger.exception(f"Error updating {collection}/{profile_id}")
        raise DatabaseError(
            f"Failed to update profile: {e}",
            details={"collection": collection, "id": profile_id},
        )

    logger.info(f"Updated {collection}/{profile_id} ({profile.name})")
    return document


def _delete_profile(db: DatabaseInterface, collection: str, profile_id: str) -> bool:
    try:
        deleted = db.delete_document(collection, profile_id)
    except Exception as e:
        logger.exception(f"Error deleting {collection}/{profile_id}")
        raise DatabaseError(
            f"Failed to delete profile: {e}",
            details={"collection": collection, "id": profile_id},
        )

    if deleted:
        logger.info(f"Deleted {collection}/{profile_id}")
    else:
        logger.warning(f"Delete requested for missing {collection}/{profile_id}")
    return deleted
