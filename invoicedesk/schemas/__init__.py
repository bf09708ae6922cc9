"""
Pydantic schemas for request/response validation.
"""

from invoicedesk.schemas.user import UserResponse
from invoicedesk.schemas.customer import (
    CustomerCreate,
    CustomerUpdate,
    CustomerResponse,
)
from invoicedesk.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
)
from invoicedesk.schemas.invoice import (
    InvoiceDraft,
    InvoiceErrors,
    InvoiceResponse,
    LineItemDraft,
    LineItemResponse,
)
from invoicedesk.schemas.draft import (
    DraftAction,
    DraftApplyRequest,
    DraftStateResponse,
)
from invoicedesk.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    RefreshTokenRequest,
)

__all__ = [
    # User
    "UserResponse",
    # Customer
    "CustomerCreate",
    "CustomerUpdate",
    "CustomerResponse",
    # Product
    "ProductCreate",
    "ProductUpdate",
    "ProductResponse",
    # Invoice
    "InvoiceDraft",
    "InvoiceErrors",
    "InvoiceResponse",
    "LineItemDraft",
    "LineItemResponse",
    # Drafts
    "DraftAction",
    "DraftApplyRequest",
    "DraftStateResponse",
    # Auth
    "LoginRequest",
    "RegisterRequest",
    "RefreshTokenRequest",
]
