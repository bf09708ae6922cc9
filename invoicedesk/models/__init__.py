"""
Database models.
All SQLAlchemy models are exported from here so the metadata sees every table.
"""

from invoicedesk.models.user import User
from invoicedesk.models.customer import Customer
from invoicedesk.models.product import Product
from invoicedesk.models.invoice import Invoice, InvoiceLineItem, InvoiceStatus


__all__ = [
    "User",
    "Customer",
    "Product",
    "Invoice",
    "InvoiceLineItem",
    "InvoiceStatus",
]
