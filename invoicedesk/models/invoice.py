"""
Invoice header and line item models.

Nested sub-objects (currency, shipping, taxes) are stored as JSON text.
Totals are not stored: they are recomputed from the line items on every read.
"""

from typing import Optional, List, TYPE_CHECKING
from decimal import Decimal
from datetime import date
from enum import Enum
from sqlalchemy import (
    String,
    Text,
    ForeignKey,
    Integer,
    Numeric,
    Date,
    Boolean,
    Enum as SQLEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from invoicedesk.models.base import BaseModel

if TYPE_CHECKING:
    from invoicedesk.models.user import User


class InvoiceStatus(str, Enum):
    """Invoice status enumeration."""
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"


DEFAULT_CURRENCY_JSON = '{"code": "USD", "symbol": "$"}'


class Invoice(BaseModel):
    """
    Invoice header.

    Attributes:
        user_id: Owner; every update and delete is scoped to it
        customer_id: Customer the client fields were copied from, if any
        due_date: Bare calendar date
        logo: Image reference (URL or data URL)
        logo_zoom: Display zoom factor for the logo
        template_id: Print template identifier
        currency: JSON ``{"code", "symbol", ...}``
        shipping: JSON shipping info (recipient, method, address parts, cost)
        taxes: JSON list of named tax definitions
        discount: Overall discount percentage
        show_*: Display toggles, independent of the underlying data
    """

    __tablename__ = "invoices"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    customer_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("customers.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Parties
    company: Mapped[str] = mapped_column(String(255), nullable=False)
    company_address: Mapped[str] = mapped_column(Text, nullable=False)
    client: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    client_address: Mapped[str] = mapped_column(Text, nullable=False)

    # Invoice info
    invoice_number: Mapped[str] = mapped_column(
        String(50),
        index=True,
        nullable=False,
    )
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[InvoiceStatus] = mapped_column(
        SQLEnum(InvoiceStatus),
        default=InvoiceStatus.DRAFT,
        nullable=False,
    )
    notes: Mapped[str] = mapped_column(Text, default="", nullable=False)
    terms: Mapped[str] = mapped_column(Text, default="", nullable=False)

    # Presentation
    logo: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    logo_zoom: Mapped[Decimal] = mapped_column(
        Numeric(precision=4, scale=2),
        default=Decimal("1.00"),
        nullable=False,
    )
    template_id: Mapped[str] = mapped_column(
        String(50),
        default="professional",
        nullable=False,
    )
    currency: Mapped[str] = mapped_column(
        Text,
        default=DEFAULT_CURRENCY_JSON,
        nullable=False,
    )

    # Display toggles
    show_shipping: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    show_discount: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    show_tax_column: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    show_signature: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    show_payment_details: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Nested aggregates
    shipping: Mapped[str] = mapped_column(Text, default="{}", nullable=False)
    taxes: Mapped[str] = mapped_column(Text, default="[]", nullable=False)
    discount: Mapped[Decimal] = mapped_column(
        Numeric(precision=5, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )

    owner: Mapped["User"] = relationship(
        "User",
        back_populates="invoices",
    )
    items: Mapped[List["InvoiceLineItem"]] = relationship(
        "InvoiceLineItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceLineItem.id",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Invoice(id={self.id}, number='{self.invoice_number}', user_id={self.user_id})>"


class InvoiceLineItem(BaseModel):
    """
    One billable row, owned by exactly one invoice.

    Attributes:
        invoice_id: Owning invoice
        product_id: Product the row was copied from, if any
        quantity: Units billed
        price: Unit price
        tax_rate: Tax percentage, never null
    """

    __tablename__ = "invoice_line_items"

    invoice_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("invoices.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("products.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    description: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=2),
        default=Decimal("1.00"),
        nullable=False,
    )
    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )
    tax_rate: Mapped[Decimal] = mapped_column(
        Numeric(precision=5, scale=2),
        default=Decimal("0.00"),
        server_default="0",
        nullable=False,
    )

    invoice: Mapped["Invoice"] = relationship(
        "Invoice",
        back_populates="items",
    )

    @property
    def amount(self) -> Decimal:
        """Quantity times unit price, before tax."""
        return self.quantity * self.price

    def __repr__(self) -> str:
        return f"<InvoiceLineItem(id={self.id}, invoice_id={self.invoice_id}, description='{self.description[:30]}')>"
