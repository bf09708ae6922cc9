"""
Customer schemas for request/response validation.
"""

from datetime import datetime
from pydantic import EmailStr, Field

from invoicedesk.schemas.base import BaseSchema, PaginatedResponse


class CustomerBase(BaseSchema):
    """Base customer schema with common fields."""

    name: str = Field(..., min_length=1, max_length=255)
    address: str = ""
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    vat_number: str | None = Field(None, max_length=100)
    contact_person: str | None = Field(None, max_length=255)
    website: str | None = Field(None, max_length=500)
    preferred_currency: str | None = Field(None, min_length=3, max_length=3)


class CustomerCreate(CustomerBase):
    """Schema for creating a customer."""
    pass


class CustomerUpdate(BaseSchema):
    """Schema for updating a customer. Unset fields are left untouched."""

    name: str | None = Field(None, min_length=1, max_length=255)
    address: str | None = None
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=50)
    vat_number: str | None = Field(None, max_length=100)
    contact_person: str | None = Field(None, max_length=255)
    website: str | None = Field(None, max_length=500)
    preferred_currency: str | None = Field(None, min_length=3, max_length=3)


class CustomerResponse(CustomerBase):
    """Customer response schema."""

    id: int
    user_id: int
    created_at: datetime
    updated_at: datetime


class CustomerListResponse(PaginatedResponse):
    """Paginated customer list response."""

    items: list[CustomerResponse]


class CustomerBulkImport(BaseSchema):
    customers: list[CustomerCreate] = Field(..., min_length=1)


class RecentCustomer(BaseSchema):
    id: int
    name: str
    email: str | None
    created_at: datetime


class CurrencyCount(BaseSchema):
    preferred_currency: str | None
    count: int


class CustomerStats(BaseSchema):
    total_count: int
    recent_customers: list[RecentCustomer]
    by_currency: list[CurrencyCount]
