"""
Customer model.
Customers seed the client fields of an invoice by copy.
"""

from typing import Optional, TYPE_CHECKING
from sqlalchemy import String, Text, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from invoicedesk.models.base import BaseModel

if TYPE_CHECKING:
    from invoicedesk.models.user import User


class Customer(BaseModel):
    """
    Customer reference entity.

    Attributes:
        user_id: Owner
        name: Person or company name
        address: Billing address, copied into invoices
        vat_number: Tax identification number
        preferred_currency: ISO code used when the customer is picked for an invoice
    """

    __tablename__ = "customers"

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
    address: Mapped[str] = mapped_column(
        Text,
        default="",
        nullable=False,
    )
    email: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    phone: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )
    vat_number: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )
    contact_person: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    website: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )
    preferred_currency: Mapped[Optional[str]] = mapped_column(
        String(3),
        nullable=True,
    )

    owner: Mapped["User"] = relationship(
        "User",
        back_populates="customers",
    )

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, name='{self.name}', user_id={self.user_id})>"
