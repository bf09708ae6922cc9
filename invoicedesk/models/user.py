"""
User model: the authenticated owner of invoices, customers and products.
"""

from typing import Optional, List, TYPE_CHECKING
from sqlalchemy import String, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship

from invoicedesk.models.base import BaseModel

if TYPE_CHECKING:
    from invoicedesk.models.customer import Customer
    from invoicedesk.models.product import Product
    from invoicedesk.models.invoice import Invoice


class User(BaseModel):
    """
    Account owning invoicing data.

    Attributes:
        email: Unique login email
        hashed_password: Bcrypt hash
        full_name: Display name
        business_name: Default company name for new invoices
        is_active: Disabled accounts cannot authenticate
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    full_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    business_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    customers: Mapped[List["Customer"]] = relationship(
        "Customer",
        back_populates="owner",
        cascade="all, delete-orphan",
    )
    products: Mapped[List["Product"]] = relationship(
        "Product",
        back_populates="owner",
        cascade="all, delete-orphan",
    )
    invoices: Mapped[List["Invoice"]] = relationship(
        "Invoice",
        back_populates="owner",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
