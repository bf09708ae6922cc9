"""
Product/service catalogue model.
Products seed invoice line items by copy; editing one never touches saved invoices.
"""

from typing import Optional, TYPE_CHECKING
from decimal import Decimal
from sqlalchemy import String, Text, ForeignKey, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from invoicedesk.models.base import BaseModel

if TYPE_CHECKING:
    from invoicedesk.models.user import User


class Product(BaseModel):
    """
    Product/Service model.

    Attributes:
        user_id: Owner
        name: Copied into the line item description
        default_price: Copied into the line item price
        default_tax_rate: Copied into the line item tax rate (percent)
        unit: Unit of measurement (hours, items, ...)
        sku: Stock keeping unit
        category: Free-form grouping
    """

    __tablename__ = "products"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
    description: Mapped[str] = mapped_column(
        Text,
        default="",
        nullable=False,
    )
    default_price: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )
    default_tax_rate: Mapped[Decimal] = mapped_column(
        Numeric(precision=5, scale=2),
        default=Decimal("0.00"),
        nullable=False,
    )
    unit: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )
    sku: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        index=True,
    )
    category: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        index=True,
    )

    owner: Mapped["User"] = relationship(
        "User",
        back_populates="products",
    )

    @property
    def price_with_tax(self) -> Decimal:
        """Default price including the default tax rate."""
        return self.default_price * (1 + self.default_tax_rate / 100)

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name='{self.name}', price={self.default_price})>"
