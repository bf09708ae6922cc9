"""
Customer service.
Handles customer CRUD, bulk import and statistics.
"""

import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import Select, or_, select, func
from fastapi import HTTPException, status

from invoicedesk.models.customer import Customer
from invoicedesk.models.invoice import Invoice
from invoicedesk.models.user import User
from invoicedesk.schemas.base import SortOrder
from invoicedesk.schemas.customer import CustomerCreate, CustomerUpdate


logger = logging.getLogger(__name__)


SORTABLE_FIELDS = {
    "name": Customer.name,
    "email": Customer.email,
    "created_at": Customer.created_at,
    "preferred_currency": Customer.preferred_currency,
}

RECENT_LIMIT = 5


class CustomerService:
    """Service for customer operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, owner: User, data: CustomerCreate) -> Customer:
        """
        Create a new customer.

        Args:
            owner: Authenticated user
            data: Customer data

        Returns:
            Created customer
        """
        customer = Customer(
            user_id=owner.id,
            **data.model_dump(),
        )

        self.db.add(customer)
        await self.db.flush()
        await self.db.refresh(customer)

        return customer

    async def bulk_create(self, owner: User, items: list[CustomerCreate]) -> list[Customer]:
        """Create several customers in one flush."""
        customers = [Customer(user_id=owner.id, **data.model_dump()) for data in items]
        self.db.add_all(customers)
        await self.db.flush()
        logger.info("Imported %d customers for user %s", len(customers), owner.id)
        return customers

    async def get_by_id(self, customer_id: int, owner_id: int) -> Customer | None:
        """Get customer by ID, ensuring owner access."""
        result = await self.db.execute(
            select(Customer).where(
                Customer.id == customer_id,
                Customer.user_id == owner_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_or_404(self, customer_id: int, owner_id: int) -> Customer:
        """
        Get customer by ID or raise 404.

        Raises:
            HTTPException: If customer not found
        """
        customer = await self.get_by_id(customer_id, owner_id)
        if not customer:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Customer not found",
            )
        return customer

    def _filtered(
        self,
        query: Select,
        owner_id: int,
        search: str | None = None,
        name: str | None = None,
        email: str | None = None,
        phone: str | None = None,
        vat_number: str | None = None,
        currency: str | None = None,
    ) -> Select:
        query = query.where(Customer.user_id == owner_id)

        if search:
            search_filter = f"%{search}%"
            query = query.where(
                or_(
                    Customer.name.ilike(search_filter),
                    Customer.email.ilike(search_filter),
                    Customer.phone.ilike(search_filter),
                    Customer.vat_number.ilike(search_filter),
                )
            )

        if name:
            query = query.where(Customer.name.ilike(f"%{name}%"))
        if email:
            query = query.where(Customer.email.ilike(f"%{email}%"))
        if phone:
            query = query.where(Customer.phone.ilike(f"%{phone}%"))
        if vat_number:
            query = query.where(Customer.vat_number.ilike(f"%{vat_number}%"))
        if currency:
            query = query.where(Customer.preferred_currency == currency.upper())

        return query

    async def list_customers(
        self,
        owner_id: int,
        skip: int = 0,
        limit: int | None = 20,
        sort_by: str = "name",
        sort_order: SortOrder = "asc",
        **filters,
    ) -> tuple[list[Customer], int]:
        """
        List customers with pagination, filters and search.

        Args:
            owner_id: Owner's user ID
            skip: Number of records to skip
            limit: Maximum records to return, None for all
            sort_by: One of ``SORTABLE_FIELDS``
            sort_order: ``asc`` or ``desc``
            **filters: search, name, email, phone, vat_number, currency

        Returns:
            Tuple of (customers list, total count)
        """
        count_query = self._filtered(select(func.count(Customer.id)), owner_id, **filters)
        total_result = await self.db.execute(count_query)
        total = total_result.scalar() or 0

        column = SORTABLE_FIELDS.get(sort_by, Customer.name)
        ordering = column.asc() if sort_order == "asc" else column.desc()

        query = (
            self._filtered(select(Customer), owner_id, **filters)
            .order_by(ordering, Customer.id)
            .offset(skip)
        )
        if limit is not None:
            query = query.limit(limit)

        result = await self.db.execute(query)
        customers = list(result.scalars().all())

        return customers, total

    async def update(self, customer: Customer, data: CustomerUpdate) -> Customer:
        """Apply the fields that were set on ``data``."""
        update_data = data.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            setattr(customer, field, value)

        await self.db.flush()
        await self.db.refresh(customer)

        return customer

    async def delete(self, customer: Customer) -> None:
        """
        Delete customer.

        Raises:
            HTTPException: 409 while invoices still reference the customer
        """
        result = await self.db.execute(
            select(func.count(Invoice.id)).where(Invoice.customer_id == customer.id)
        )
        if result.scalar():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Customer is referenced by existing invoices",
            )

        await self.db.delete(customer)
        await self.db.flush()

    async def get_stats(self, owner_id: int) -> dict:
        """Total count, most recent customers and counts per preferred currency."""
        total_result = await self.db.execute(
            select(func.count(Customer.id)).where(Customer.user_id == owner_id)
        )

        recent_result = await self.db.execute(
            select(Customer)
            .where(Customer.user_id == owner_id)
            .order_by(Customer.created_at.desc(), Customer.id.desc())
            .limit(RECENT_LIMIT)
        )

        currency_result = await self.db.execute(
            select(Customer.preferred_currency, func.count(Customer.id))
            .where(Customer.user_id == owner_id)
            .group_by(Customer.preferred_currency)
            .order_by(func.count(Customer.id).desc())
        )

        return {
            "total_count": total_result.scalar() or 0,
            "recent_customers": list(recent_result.scalars().all()),
            "by_currency": [
                {"preferred_currency": currency, "count": count}
                for currency, count in currency_result.all()
            ],
        }
