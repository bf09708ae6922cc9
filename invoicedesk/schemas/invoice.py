"""
Invoice schemas.

Drafts are deliberately loose: numeric fields accept text so that bad input
reaches the invoice validator and comes back as a field-keyed error map
instead of a generic 422. Responses are strict and carry totals recomputed
from the stored line items.
"""

import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import uuid4
from pydantic import Field, field_validator, model_validator

from invoicedesk.schemas.base import BaseSchema, PaginatedResponse
from invoicedesk.models.invoice import InvoiceStatus
from invoicedesk.services.totals import InvoiceTotals, calculate_invoice_totals


def new_client_id() -> str:
    """Client-side id for unsaved line items and taxes."""
    return uuid4().hex


LooseNumber = Decimal | str | None


class CurrencyInfo(BaseSchema):
    """Currency used to display amounts."""

    code: str = Field(default="USD", min_length=1, max_length=3)
    symbol: str = Field(default="$", max_length=5)
    name: str | None = None
    precision: int | None = Field(None, ge=0, le=4)


class ShippingInfo(BaseSchema):
    """Shipping recipient, method and cost."""

    name: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None
    method: str | None = None
    cost: Decimal = Field(default=Decimal("0"), ge=0)


class TaxInfo(BaseSchema):
    """Named tax definition available on an invoice."""

    id: str = Field(default_factory=new_client_id)
    name: str = ""
    rate: Decimal = Field(default=Decimal("0"), ge=0)
    is_default: bool = False


# Drafts

class LineItemDraft(BaseSchema):
    """Line item as edited by the user, before validation."""

    id: int | str = Field(default_factory=new_client_id)
    description: str | None = ""
    quantity: LooseNumber = Decimal("1")
    price: LooseNumber = Decimal("0")
    tax_rate: LooseNumber = Decimal("0")
    product_id: int | None = None


class InvoiceDraft(BaseSchema):
    """
    Invoice as composed by the user.

    ``id`` is absent until the invoice is first saved; saving a draft with an
    id updates that invoice.
    """

    id: int | None = None
    company: str | None = ""
    company_address: str | None = ""
    client: str | None = ""
    client_address: str | None = ""
    invoice_number: str | None = ""
    due_date: date | datetime | str | None = None
    notes: str | None = ""
    terms: str | None = ""
    logo: str | None = None
    logo_zoom: Decimal = Field(default=Decimal("1"), gt=0, le=10, decimal_places=2)
    status: InvoiceStatus = InvoiceStatus.DRAFT
    customer_id: int | None = None
    template_id: str = "professional"
    currency: CurrencyInfo = Field(default_factory=CurrencyInfo)
    show_shipping: bool = False
    show_discount: bool = False
    show_tax_column: bool = False
    show_signature: bool = False
    show_payment_details: bool = False
    shipping: ShippingInfo = Field(default_factory=ShippingInfo)
    taxes: list[TaxInfo] = Field(default_factory=list)
    discount: LooseNumber = Decimal("0")
    items: list[LineItemDraft] = Field(default_factory=list)


class InvoiceErrors(BaseSchema):
    """
    Validation result for a draft.

    ``items`` is aligned with the draft's item list: entry ``i`` holds the
    error for item ``i`` or None when that row is valid.
    """

    company: str | None = None
    company_address: str | None = None
    client: str | None = None
    client_address: str | None = None
    invoice_number: str | None = None
    due_date: str | None = None
    discount: str | None = None
    items: list[str | None] | None = None
    general: str | None = None

    @property
    def has_errors(self) -> bool:
        return bool(self.as_dict())

    def as_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


# Totals

class InvoiceTotalsResponse(BaseSchema):
    """Derived totals, never stored."""

    subtotal: Decimal
    tax_total: Decimal
    discount_amount: Decimal
    shipping_amount: Decimal
    total: Decimal

    @classmethod
    def from_totals(cls, totals: InvoiceTotals) -> "InvoiceTotalsResponse":
        return cls(
            subtotal=totals.subtotal,
            tax_total=totals.tax_total,
            discount_amount=totals.discount_amount,
            shipping_amount=totals.shipping_amount,
            total=totals.total,
        )


# Responses

class LineItemResponse(BaseSchema):
    """Persisted line item."""

    id: int
    invoice_id: int
    description: str
    quantity: Decimal
    price: Decimal
    tax_rate: Decimal
    product_id: int | None
    amount: Decimal
    created_at: datetime
    updated_at: datetime


class InvoiceResponse(BaseSchema):
    """Canonical persisted invoice."""

    id: int
    user_id: int
    customer_id: int | None
    company: str
    company_address: str
    client: str
    client_address: str
    invoice_number: str
    due_date: date
    status: InvoiceStatus
    notes: str
    terms: str
    logo: str | None
    logo_zoom: Decimal
    template_id: str
    currency: CurrencyInfo
    show_shipping: bool
    show_discount: bool
    show_tax_column: bool
    show_signature: bool
    show_payment_details: bool
    shipping: ShippingInfo
    taxes: list[TaxInfo]
    discount: Decimal
    items: list[LineItemResponse]
    totals: InvoiceTotalsResponse | None = None
    created_at: datetime
    updated_at: datetime

    @field_validator("currency", "shipping", "taxes", mode="before")
    @classmethod
    def _load_json(cls, value: Any) -> Any:
        """Nested sub-objects are stored as JSON text."""
        if isinstance(value, str):
            return json.loads(value) if value else None
        return value

    @model_validator(mode="after")
    def _recompute_totals(self) -> "InvoiceResponse":
        self.totals = InvoiceTotalsResponse.from_totals(calculate_invoice_totals(self))
        return self


class InvoiceListResponse(PaginatedResponse):
    """Paginated invoice list response."""

    items: list[InvoiceResponse]


class InvoiceStatusUpdate(BaseSchema):
    """Status change request."""

    status: InvoiceStatus


class MonthlyTotal(BaseSchema):
    month: str
    total: Decimal


class InvoiceStats(BaseSchema):
    """Invoice counts by status and monthly billed totals."""

    by_status: dict[str, int]
    timeline: list[MonthlyTotal]
