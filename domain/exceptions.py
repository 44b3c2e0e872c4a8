"""
Custom exceptions for FreightDesk.

All exceptions inherit from FreightDeskError for easier catching.
Each exception includes a message and optional details dict.
"""

from typing import Dict, Optional


class FreightDeskError(Exception):
    """Base exception for all FreightDesk-related errors."""

    def __init__(self, message: str, details: dict = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            details: Optional dict with additional context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """String representation with details if available."""
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class DatabaseError(FreightDeskError):
    """Database operation failed."""
    pass


class ImportValidationError(FreightDeskError):
    """Import file validation failed."""
    pass


class ReportGenerationError(FreightDeskError):
    """Report generation failed."""
    pass


class ValidationError(FreightDeskError):
    """
    Data validation failed.

    field_errors maps form field names to messages so the UI can
    show them next to the offending inputs.
    """

    def __init__(
        self,
        message: str,
        details: dict = None,
        field_errors: Optional[Dict[str, str]] = None,
    ):
        super().__init__(message, details)
        self.field_errors = field_errors or {}


class NotFoundError(FreightDeskError):
    """Requested resource not found."""
    pass


class InvoiceSyncError(FreightDeskError):
    """Updating an invoice from a linked shipment failed."""
    pass
