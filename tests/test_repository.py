"""
Invoice repository and save pipeline tests against the test database.
"""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import func, select
from httpx import AsyncClient
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from invoicedesk.core.exceptions import NotFoundOrForbidden
from invoicedesk.models.invoice import Invoice, InvoiceLineItem, InvoiceStatus
from invoicedesk.models.user import User
from invoicedesk.schemas.invoice import InvoiceDraft, InvoiceResponse
from invoicedesk.services.invoice import InvoiceService
from invoicedesk.services.invoice_repository import InvoiceRepository
from invoicedesk.services.product import ProductService
from invoicedesk.services.save_pipeline import (
    InvoiceSavePipeline,
    SaveState,
    build_header,
    build_items,
)
from conftest import make_draft


async def _item_count(db_session: AsyncSession) -> int:
    result = await db_session.execute(select(func.count(InvoiceLineItem.id)))
    return result.scalar()


async def test_round_trip_normalizes_due_date(db_session: AsyncSession, test_user: User):
    draft = InvoiceDraft(**make_draft(due_date="2026-11-18T22:15:00.000Z"))

    outcome = await InvoiceSavePipeline(db_session).run(test_user, draft)

    assert outcome.state == SaveState.PERSISTED
    saved = outcome.invoice
    assert saved.id is not None

    fetched = await InvoiceRepository(db_session).fetch_by_id(saved.id, test_user.id)
    response = InvoiceResponse.model_validate(fetched).model_dump(mode="json")

    assert fetched.due_date == date(2026, 11, 18)
    assert response["due_date"] == "2026-11-18"
    assert [
        (item.description, item.quantity, item.price, item.tax_rate)
        for item in fetched.items
    ] == [
        ("Consulting", Decimal("2"), Decimal("10"), Decimal("10")),
        ("Hosting", Decimal("1"), Decimal("5.50"), Decimal("0")),
    ]


async def test_update_with_fewer_items_leaves_no_orphans(db_session: AsyncSession, test_user: User):
    repository = InvoiceRepository(db_session)
    draft = InvoiceDraft(**make_draft())
    header = build_header(draft, "2026-11-18")
    invoice = await repository.save(test_user.id, header, build_items(draft))
    assert await _item_count(db_session) == 2

    smaller = InvoiceDraft(**make_draft(items=[
        {"description": "Only this", "quantity": "3", "price": "1"},
    ]))
    updated = await repository.save(
        test_user.id,
        build_header(smaller, "2026-12-01"),
        build_items(smaller),
        invoice_id=invoice.id,
    )

    assert updated.id == invoice.id
    assert updated.due_date == date(2026, 12, 1)
    assert [item.description for item in updated.items] == ["Only this"]
    assert await _item_count(db_session) == 1


async def test_update_of_foreign_invoice_is_refused(
    db_session: AsyncSession,
    test_user: User,
    other_user: User,
):
    repository = InvoiceRepository(db_session)
    draft = InvoiceDraft(**make_draft())
    invoice = await repository.save(test_user.id, build_header(draft, "2026-11-18"), build_items(draft))

    hijack = InvoiceDraft(**make_draft(company="Mallory", items=[]))
    with pytest.raises(NotFoundOrForbidden):
        await repository.save(
            other_user.id,
            build_header(hijack, "2026-11-18"),
            [],
            invoice_id=invoice.id,
        )

    untouched = await repository.fetch_by_id(invoice.id, test_user.id)
    assert untouched.company == "Acme Corp"
    assert len(untouched.items) == 2


async def test_update_of_missing_invoice_is_refused(db_session: AsyncSession, test_user: User):
    outcome = await InvoiceSavePipeline(db_session).run(
        test_user, InvoiceDraft(**make_draft(id=999))
    )

    assert outcome.state == SaveState.FAILED
    assert isinstance(outcome.error, NotFoundOrForbidden)


async def test_fetch_is_scoped_to_owner(db_session: AsyncSession, test_user: User, other_user: User):
    repository = InvoiceRepository(db_session)
    draft = InvoiceDraft(**make_draft())
    invoice = await repository.save(test_user.id, build_header(draft, "2026-11-18"), build_items(draft))

    assert await repository.get_by_id(invoice.id, other_user.id) is None
    with pytest.raises(NotFoundOrForbidden):
        await repository.fetch_by_id(invoice.id, other_user.id)


async def test_delete_removes_header_and_items(db_session: AsyncSession, test_user: User, other_user: User):
    repository = InvoiceRepository(db_session)
    draft = InvoiceDraft(**make_draft())
    invoice = await repository.save(test_user.id, build_header(draft, "2026-11-18"), build_items(draft))

    with pytest.raises(NotFoundOrForbidden):
        await repository.delete(invoice.id, other_user.id)
    assert await _item_count(db_session) == 2

    await repository.delete(invoice.id, test_user.id)

    assert await repository.get_by_id(invoice.id, test_user.id) is None
    assert await _item_count(db_session) == 0


async def test_update_status(db_session: AsyncSession, test_user: User):
    repository = InvoiceRepository(db_session)
    draft = InvoiceDraft(**make_draft())
    invoice = await repository.save(test_user.id, build_header(draft, "2026-11-18"), build_items(draft))

    updated = await repository.update_status(invoice.id, test_user.id, InvoiceStatus.PAID)

    assert updated.status == InvoiceStatus.PAID


async def test_fractional_values_are_stored_exactly(db_session: AsyncSession, test_user: User):
    draft = InvoiceDraft(**make_draft(
        show_discount=True,
        discount="12.5",
        items=[{"description": "Support", "quantity": "1.5", "price": "19.99", "tax_rate": "7.25"}],
    ))

    outcome = await InvoiceSavePipeline(db_session).run(test_user, draft)
    assert outcome.state == SaveState.PERSISTED

    fetched = await InvoiceRepository(db_session).fetch_by_id(outcome.invoice.id, test_user.id)
    item = fetched.items[0]

    assert (Decimal(str(item.quantity)), Decimal(str(item.price)), Decimal(str(item.tax_rate))) == (
        Decimal("1.5"), Decimal("19.99"), Decimal("7.25"),
    )
    assert Decimal(str(fetched.discount)) == Decimal("12.5")
    assert InvoiceResponse.model_validate(fetched).totals.total == outcome.totals.total


async def test_header_is_rolled_back_when_item_insert_fails(
    auth_client: AsyncClient,
    db_session: AsyncSession,
    monkeypatch: pytest.MonkeyPatch,
):
    async def failing_insert(self, invoice_id, items):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(InvoiceRepository, "_insert_items", failing_insert)

    response = await auth_client.post("/api/v1/invoices", json=make_draft())

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to save invoice: SQLAlchemyError"
    headers = await db_session.execute(select(func.count(Invoice.id)))
    assert headers.scalar() == 0
    assert await _item_count(db_session) == 0


async def test_services_list_owned_records(db_session: AsyncSession, test_user: User):
    draft = InvoiceDraft(**make_draft())
    await InvoiceSavePipeline(db_session).run(test_user, draft)

    invoices, total = await InvoiceService(db_session).list_invoices(test_user.id, limit=None)
    products, product_total = await ProductService(db_session).list_products(test_user.id)

    assert total == 1
    assert invoices[0].invoice_number == "INV-2026-0001"
    assert (products, product_total) == ([], 0)
