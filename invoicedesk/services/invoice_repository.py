"""
Invoice repository.

Persists an invoice header and replaces its line-item set. Writes happen in
a fixed order: header first, then item delete, then item insert; no item
write is attempted if the header write failed. All statements share the
caller's session, so they commit or roll back together with the request.
"""

import logging
from typing import Any

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from invoicedesk.core.exceptions import NotFoundOrForbidden, PersistenceError
from invoicedesk.models.customer import Customer
from invoicedesk.models.invoice import Invoice, InvoiceLineItem, InvoiceStatus
from invoicedesk.models.product import Product


logger = logging.getLogger(__name__)


class InvoiceRepository:
    """Storage adapter for invoices and their line items."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def save(
        self,
        owner_id: int,
        header: dict[str, Any],
        items: list[dict[str, Any]],
        invoice_id: int | None = None,
    ) -> Invoice:
        """
        Insert or update a header, then replace its line items.

        Args:
            owner_id: Authenticated user; updates are scoped to it
            header: Column values for the ``invoices`` row
            items: Column values for each ``invoice_line_items`` row, in order
            invoice_id: Existing invoice to update, None to create

        Returns:
            The invoice as read back from the store

        Raises:
            NotFoundOrForbidden: ``invoice_id`` is missing or not owned by ``owner_id``
                or a referenced customer or product belongs to another user
            PersistenceError: Any store failure
        """
        try:
            await self._check_references(owner_id, header, items)

            if invoice_id is None:
                invoice_id = await self._insert_header(owner_id, header)
                logger.debug("Created invoice header %s", invoice_id)
            else:
                await self._update_header(invoice_id, owner_id, header)
                await self._delete_items(invoice_id)
                logger.debug("Updated invoice header %s and cleared its items", invoice_id)

            await self._insert_items(invoice_id, items)
        except SQLAlchemyError as exc:
            logger.exception("Failed to persist invoice %s", invoice_id)
            raise PersistenceError(f"Failed to save invoice: {exc.__class__.__name__}") from exc

        return await self.fetch_by_id(invoice_id, owner_id)

    async def get_by_id(self, invoice_id: int, owner_id: int) -> Invoice | None:
        """Header with its items in insertion order, or None."""
        try:
            result = await self.db.execute(
                select(Invoice)
                .options(selectinload(Invoice.items))
                .where(
                    Invoice.id == invoice_id,
                    Invoice.user_id == owner_id,
                )
                .execution_options(populate_existing=True)
            )
        except SQLAlchemyError as exc:
            logger.exception("Failed to fetch invoice %s", invoice_id)
            raise PersistenceError("Failed to fetch invoice") from exc
        return result.scalar_one_or_none()

    async def fetch_by_id(self, invoice_id: int, owner_id: int) -> Invoice:
        """Like ``get_by_id`` but raises NotFoundOrForbidden when absent."""
        invoice = await self.get_by_id(invoice_id, owner_id)
        if invoice is None:
            raise NotFoundOrForbidden(f"Invoice {invoice_id} not found")
        return invoice

    async def update_status(
        self,
        invoice_id: int,
        owner_id: int,
        status: InvoiceStatus,
    ) -> Invoice:
        """Change only the status of an owned invoice."""
        try:
            await self._update_header(invoice_id, owner_id, {"status": status})
        except SQLAlchemyError as exc:
            logger.exception("Failed to update status of invoice %s", invoice_id)
            raise PersistenceError("Failed to update invoice status") from exc
        return await self.fetch_by_id(invoice_id, owner_id)

    async def delete(self, invoice_id: int, owner_id: int) -> None:
        """Delete an owned invoice and all of its line items."""
        try:
            owned = await self.db.execute(
                select(Invoice.id).where(
                    Invoice.id == invoice_id,
                    Invoice.user_id == owner_id,
                )
            )
            if owned.scalar_one_or_none() is None:
                raise NotFoundOrForbidden(f"Invoice {invoice_id} not found")

            await self._delete_items(invoice_id)
            await self.db.execute(
                delete(Invoice)
                .where(Invoice.id == invoice_id, Invoice.user_id == owner_id)
                .execution_options(synchronize_session=False)
            )
            self._forget(invoice_id)
        except SQLAlchemyError as exc:
            logger.exception("Failed to delete invoice %s", invoice_id)
            raise PersistenceError("Failed to delete invoice") from exc

        logger.info("Deleted invoice %s", invoice_id)

    async def _check_references(
        self,
        owner_id: int,
        header: dict[str, Any],
        items: list[dict[str, Any]],
    ) -> None:
        """Customers and products linked from an invoice must belong to its owner."""
        customer_id = header.get("customer_id")
        if customer_id is not None:
            found = await self.db.execute(
                select(Customer.id).where(
                    Customer.id == customer_id,
                    Customer.user_id == owner_id,
                )
            )
            if found.scalar_one_or_none() is None:
                raise NotFoundOrForbidden(f"Customer {customer_id} not found")

        product_ids = {item["product_id"] for item in items if item.get("product_id") is not None}
        if product_ids:
            found = await self.db.execute(
                select(Product.id).where(
                    Product.id.in_(product_ids),
                    Product.user_id == owner_id,
                )
            )
            missing = product_ids - set(found.scalars().all())
            if missing:
                raise NotFoundOrForbidden(f"Product {min(missing)} not found")

    async def _insert_header(self, owner_id: int, header: dict[str, Any]) -> int:
        invoice = Invoice(user_id=owner_id, **header)
        self.db.add(invoice)
        await self.db.flush()
        return invoice.id

    async def _update_header(
        self,
        invoice_id: int,
        owner_id: int,
        values: dict[str, Any],
    ) -> None:
        result = await self.db.execute(
            update(Invoice)
            .where(Invoice.id == invoice_id, Invoice.user_id == owner_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundOrForbidden(f"Invoice {invoice_id} not found")

    async def _delete_items(self, invoice_id: int) -> None:
        await self.db.execute(
            delete(InvoiceLineItem)
            .where(InvoiceLineItem.invoice_id == invoice_id)
            .execution_options(synchronize_session=False)
        )

    async def _insert_items(self, invoice_id: int, items: list[dict[str, Any]]) -> None:
        if not items:
            return
        rows = [{**item, "invoice_id": invoice_id} for item in items]
        await self.db.execute(insert(InvoiceLineItem), rows)

    def _forget(self, invoice_id: int) -> None:
        """Drop a deleted invoice from the session's identity map."""
        for obj in list(self.db.identity_map.values()):
            if isinstance(obj, Invoice) and obj.id == invoice_id:
                self.db.expunge(obj)
