"""
Database Interface - Abstract Base Class for database operations.

This module defines the contract for all database implementations in FreightDesk.
Any database backend (SQLite, a hosted document store, etc.) must implement
this interface.

The store is a set of named collections of JSON-like documents
(customers, vendors, shipments, invoices, expenses, vendor_bills, ledger).
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Dict, Any


class DatabaseInterface(ABC):
    """
    Abstract base class for database operations.

    Every document is a dict. The database assigns "id", "created_at" and
    "updated_at" on create and "updated_at" on update.
    """

    @abstractmethod
    def create_document(self, collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Store a new document.

        Args:
            collection: Collection name (e.g. "invoices")
            data: Document fields; an "id" key is used if present and non-empty

        Returns:
            Stored document including id and timestamps

        Raises:
            DatabaseError: If the write fails (e.g. duplicate id)
        """
        pass

    @abstractmethod
    def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """
        Get document by id.

        Returns:
            Document dict, or None if not found
        """
        pass

    @abstractmethod
    def list_documents(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        """
        List documents in a collection.

        Args:
            collection: Collection name
            filters: Field -> value equality filters (AND-ed)
            order_by: Field to sort on (default: creation time)
            descending: Reverse sort order

        Returns:
            List of documents (empty list if none)
        """
        pass

    @abstractmethod
    def update_document(
        self,
        collection: str,
        doc_id: str,
        fields: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Partially update a document (fields are merged into the stored data).

        Returns:
            Updated document

        Raises:
            NotFoundError: If document does not exist
            DatabaseError: If the write fails
        """
        pass

    @abstractmethod
    def delete_document(self, collection: str, doc_id: str) -> bool:
        """
        Delete a document.

        Returns:
            True if a document was deleted, False if it did not exist
        """
        pass

    @abstractmethod
    def count_documents(self, collection: str) -> int:
        """Count documents in a collection."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the database connection."""
        pass
