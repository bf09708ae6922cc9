"""
Save pipeline state machine tests, with an in-memory repository stand-in.
"""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from invoicedesk.core.exceptions import (
    AuthRequired,
    InvoiceValidationError,
    NotFoundOrForbidden,
    PersistenceError,
)
from invoicedesk.schemas.invoice import InvoiceDraft, ShippingInfo
from invoicedesk.services.save_pipeline import (
    InvoiceSavePipeline,
    SaveState,
    build_header,
    build_items,
)
from conftest import make_draft


class RecordingRepository:
    """Records save calls and returns a canned invoice or raises."""

    def __init__(self, error: Exception | None = None):
        self.calls = []
        self.error = error

    async def save(self, owner_id, header, items, invoice_id=None):
        self.calls.append((owner_id, header, items, invoice_id))
        if self.error is not None:
            raise self.error
        return SimpleNamespace(id=invoice_id or 1)


OWNER = SimpleNamespace(id=5)


async def test_valid_draft_is_persisted():
    repository = RecordingRepository()

    outcome = await InvoiceSavePipeline(None, repository).run(OWNER, InvoiceDraft(**make_draft()))

    assert outcome.state == SaveState.PERSISTED
    assert outcome.transitions == [
        SaveState.DRAFT,
        SaveState.VALIDATING,
        SaveState.PERSISTING,
        SaveState.PERSISTED,
    ]
    assert outcome.succeeded
    assert outcome.invoice.id == 1
    assert outcome.totals.subtotal == Decimal("25.50")
    assert len(repository.calls) == 1
    owner_id, header, items, invoice_id = repository.calls[0]
    assert owner_id == 5
    assert invoice_id is None
    assert header["due_date"] == date(2026, 11, 18)
    assert [item["description"] for item in items] == ["Consulting", "Hosting"]


async def test_no_user_fails_with_auth_required_and_no_repository_call():
    repository = RecordingRepository()

    outcome = await InvoiceSavePipeline(None, repository).run(None, InvoiceDraft(**make_draft()))

    assert outcome.state == SaveState.FAILED
    assert isinstance(outcome.error, AuthRequired)
    assert outcome.transitions[-2:] == [SaveState.PERSISTING, SaveState.FAILED]
    assert repository.calls == []
    with pytest.raises(AuthRequired):
        outcome.raise_for_failure()


async def test_invalid_draft_stops_before_persisting():
    repository = RecordingRepository()
    draft = InvoiceDraft(**make_draft(company="", items=[]))

    outcome = await InvoiceSavePipeline(None, repository).run(OWNER, draft)

    assert outcome.state == SaveState.INVALID
    assert outcome.transitions == [SaveState.DRAFT, SaveState.VALIDATING, SaveState.INVALID]
    assert set(outcome.errors.as_dict()) == {"company", "general"}
    assert repository.calls == []
    with pytest.raises(InvoiceValidationError) as exc_info:
        outcome.raise_for_failure()
    assert exc_info.value.errors["general"] == "At least one line item is required"


async def test_invalid_draft_without_user_is_still_invalid():
    outcome = await InvoiceSavePipeline(None, RecordingRepository()).run(
        None, InvoiceDraft(**make_draft(client=""))
    )

    assert outcome.state == SaveState.INVALID


@pytest.mark.parametrize("error", [PersistenceError("boom"), NotFoundOrForbidden()])
async def test_repository_errors_are_passed_through_unchanged(error):
    repository = RecordingRepository(error=error)

    outcome = await InvoiceSavePipeline(None, repository).run(
        OWNER, InvoiceDraft(**make_draft(id=3))
    )

    assert outcome.state == SaveState.FAILED
    assert outcome.error is error
    assert repository.calls[0][3] == 3
    with pytest.raises(type(error)) as exc_info:
        outcome.raise_for_failure()
    assert exc_info.value is error


async def test_explicit_invoice_id_overrides_draft_id():
    repository = RecordingRepository()

    await InvoiceSavePipeline(None, repository).run(
        OWNER, InvoiceDraft(**make_draft(id=3)), invoice_id=8
    )

    assert repository.calls[0][3] == 8


async def test_terminal_state_cannot_be_left():
    outcome = await InvoiceSavePipeline(None, RecordingRepository()).run(
        OWNER, InvoiceDraft(**make_draft())
    )

    with pytest.raises(RuntimeError):
        outcome.move_to(SaveState.VALIDATING)


def test_header_serializes_nested_objects_and_items_default_tax_rate():
    draft = InvoiceDraft(**make_draft(
        shipping=ShippingInfo(city="Paris", cost=Decimal("4")),
        taxes=[{"id": "vat", "name": "VAT", "rate": "20"}],
        discount="",
    ))

    header = build_header(draft, "2026-11-18")
    items = build_items(draft)

    assert '"city": "Paris"' in header["shipping"]
    assert '"name": "VAT"' in header["taxes"]
    assert '"code": "USD"' in header["currency"]
    assert header["discount"] == Decimal("0")
    assert items[1]["tax_rate"] == Decimal("0")
    assert items[0]["quantity"] == Decimal("2")
