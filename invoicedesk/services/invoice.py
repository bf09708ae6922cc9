"""
Invoice service.
Listing, filtering, status changes, deletion and statistics over stored invoices.
Saving goes through ``InvoiceSavePipeline``.
"""

import logging
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import Select, select, func

from invoicedesk.core.config import settings
from invoicedesk.models.invoice import Invoice, InvoiceLineItem, InvoiceStatus
from invoicedesk.schemas.base import SortOrder
from invoicedesk.schemas.invoice import InvoiceResponse
from invoicedesk.services.invoice_repository import InvoiceRepository
from invoicedesk.utils.numbers import ZERO


logger = logging.getLogger(__name__)


SORTABLE_FIELDS = {
    "created_at": Invoice.created_at,
    "due_date": Invoice.due_date,
    "invoice_number": Invoice.invoice_number,
    "client": Invoice.client,
    "status": Invoice.status,
}


def _start_of(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def _month_keys(today: date, months: int) -> list[str]:
    """``YYYY-MM`` keys for the last ``months`` months, oldest first."""
    keys = []
    year, month = today.year, today.month
    for _ in range(months):
        keys.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


class InvoiceService:
    """Service for invoice queries."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repository = InvoiceRepository(db)

    async def get_or_404(self, invoice_id: int, owner_id: int) -> Invoice:
        """Get an owned invoice or raise NotFoundOrForbidden."""
        return await self.repository.fetch_by_id(invoice_id, owner_id)

    def _filtered(
        self,
        query: Select,
        owner_id: int,
        client: str | None = None,
        customer_id: int | None = None,
        status: InvoiceStatus | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
        min_amount: Decimal | None = None,
        max_amount: Decimal | None = None,
    ) -> Select:
        query = query.where(Invoice.user_id == owner_id)

        if client:
            query = query.where(Invoice.client.ilike(f"%{client}%"))

        if customer_id is not None:
            query = query.where(Invoice.customer_id == customer_id)

        if status:
            query = query.where(Invoice.status == status)

        if from_date:
            query = query.where(Invoice.created_at >= _start_of(from_date))

        if to_date:
            query = query.where(Invoice.created_at < _start_of(to_date + timedelta(days=1)))

        if min_amount is not None or max_amount is not None:
            # Amount is the pre-tax sum of quantity x price over the items
            amounts = (
                select(
                    InvoiceLineItem.invoice_id.label("invoice_id"),
                    func.sum(InvoiceLineItem.quantity * InvoiceLineItem.price).label("amount"),
                )
                .group_by(InvoiceLineItem.invoice_id)
                .subquery()
            )
            amount = func.coalesce(amounts.c.amount, 0)
            query = query.outerjoin(amounts, amounts.c.invoice_id == Invoice.id)
            if min_amount is not None:
                query = query.where(amount >= min_amount)
            if max_amount is not None:
                query = query.where(amount <= max_amount)

        return query

    async def list_invoices(
        self,
        owner_id: int,
        skip: int = 0,
        limit: int | None = 20,
        sort_by: str = "created_at",
        sort_order: SortOrder = "desc",
        **filters,
    ) -> tuple[list[Invoice], int]:
        """
        List invoices with pagination, filters and sorting.

        Args:
            owner_id: Owner's user ID
            skip: Number of records to skip
            limit: Maximum records to return, None for all
            sort_by: One of ``SORTABLE_FIELDS``; unknown values fall back to created_at
            sort_order: ``asc`` or ``desc``
            **filters: client, customer_id, status, from_date, to_date,
                min_amount, max_amount

        Returns:
            Tuple of (invoices list, total count)
        """
        count_query = self._filtered(select(func.count(Invoice.id)), owner_id, **filters)
        total_result = await self.db.execute(count_query)
        total = total_result.scalar() or 0

        column = SORTABLE_FIELDS.get(sort_by, Invoice.created_at)
        ordering = column.asc() if sort_order == "asc" else column.desc()

        query = (
            self._filtered(select(Invoice), owner_id, **filters)
            .order_by(ordering, Invoice.id)
            .offset(skip)
        )
        if limit is not None:
            query = query.limit(limit)

        result = await self.db.execute(query)
        invoices = list(result.scalars().all())

        return invoices, total

    async def update_status(
        self,
        invoice_id: int,
        owner_id: int,
        status: InvoiceStatus,
    ) -> Invoice:
        """Change the status of an owned invoice."""
        invoice = await self.repository.update_status(invoice_id, owner_id, status)
        logger.info("Invoice %s marked %s", invoice_id, status.value)
        return invoice

    async def delete(self, invoice_id: int, owner_id: int) -> None:
        """Delete an owned invoice and its items."""
        await self.repository.delete(invoice_id, owner_id)

    async def get_status_distribution(self, owner_id: int) -> dict[str, int]:
        """Get invoice count by status; every status is present."""
        result = await self.db.execute(
            select(Invoice.status, func.count(Invoice.id))
            .where(Invoice.user_id == owner_id)
            .group_by(Invoice.status)
        )
        counts = {row[0]: row[1] for row in result.all()}
        return {status.value: counts.get(status, 0) for status in InvoiceStatus}

    async def get_monthly_totals(
        self,
        owner_id: int,
        months: int | None = None,
        today: date | None = None,
    ) -> list[dict]:
        """
        Billed totals per creation month for the last ``months`` months.

        Totals are recomputed from line items, discount and shipping, so they
        are summed here rather than in SQL.
        """
        months = months or settings.STATS_MONTHS
        today = today or date.today()
        keys = _month_keys(today, months)
        first_year, first_month = (int(part) for part in keys[0].split("-"))

        result = await self.db.execute(
            select(Invoice).where(
                Invoice.user_id == owner_id,
                Invoice.created_at >= _start_of(date(first_year, first_month, 1)),
            )
        )

        totals = {key: ZERO for key in keys}
        for invoice in result.scalars().all():
            key = invoice.created_at.strftime("%Y-%m")
            if key in totals:
                totals[key] += InvoiceResponse.model_validate(invoice).totals.total

        return [{"month": key, "total": totals[key]} for key in keys]

    async def get_stats(self, owner_id: int) -> dict:
        """Counts by status and the monthly timeline."""
        return {
            "by_status": await self.get_status_distribution(owner_id),
            "timeline": await self.get_monthly_totals(owner_id),
        }
