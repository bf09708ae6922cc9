"""
Error taxonomy for the invoice save pipeline.

Each error carries the HTTP status it maps to; the handlers registered in
``invoicedesk.main`` turn them into JSON responses.
"""

from typing import Any


class InvoiceDeskError(Exception):
    """Base class for domain errors."""

    status_code: int = 500
    default_message: str = "Unexpected error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvoiceValidationError(InvoiceDeskError):
    """Draft failed validation. Never reaches the store."""

    status_code = 422
    default_message = "Invoice validation failed"

    def __init__(self, errors: dict[str, Any], message: str | None = None):
        super().__init__(message)
        self.errors = errors


class AuthRequired(InvoiceDeskError):
    """No authenticated user at save time."""

    status_code = 401
    default_message = "Authentication required to save invoices"


class NotFoundOrForbidden(InvoiceDeskError):
    """Target id does not exist or belongs to another user."""

    status_code = 404
    default_message = "Invoice not found"


class PersistenceError(InvoiceDeskError):
    """A header or line-item write/delete/read failed in the store."""

    status_code = 500
    default_message = "Failed to save invoice"
