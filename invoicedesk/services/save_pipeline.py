"""
Invoice save pipeline.

Runs one save attempt through an explicit state machine:

    draft -> validating -> invalid
                        -> persisting -> persisted
                                      -> failed

Validation errors end the attempt before anything touches the store. The
owner is only required once the draft is known to be valid; a missing owner
ends in ``failed`` with ``AuthRequired`` and no repository call. Repository
errors end in ``failed`` and are handed back unchanged.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from invoicedesk.core.exceptions import (
    AuthRequired,
    InvoiceDeskError,
    InvoiceValidationError,
)
from invoicedesk.models.invoice import Invoice
from invoicedesk.models.user import User
from invoicedesk.schemas.invoice import InvoiceDraft, InvoiceErrors
from invoicedesk.services.invoice_repository import InvoiceRepository
from invoicedesk.services.totals import InvoiceTotals, calculate_invoice_totals
from invoicedesk.services.validation import validate_invoice
from invoicedesk.utils.dates import normalize_due_date
from invoicedesk.utils.numbers import to_decimal


logger = logging.getLogger(__name__)


class SaveState(str, Enum):
    """States of one save attempt."""
    DRAFT = "draft"
    VALIDATING = "validating"
    INVALID = "invalid"
    PERSISTING = "persisting"
    PERSISTED = "persisted"
    FAILED = "failed"


TERMINAL_STATES = frozenset({SaveState.INVALID, SaveState.PERSISTED, SaveState.FAILED})


@dataclass
class SaveOutcome:
    """
    Result of a save attempt.

    Attributes:
        state: Final state
        transitions: Every state visited, in order, starting with ``draft``
        errors: Validation errors (``invalid`` only)
        error: The exception that ended the attempt (``failed`` only)
        totals: Totals derived from the validated draft
        invoice: Canonical record read back from the store (``persisted`` only)
    """

    state: SaveState = SaveState.DRAFT
    transitions: list[SaveState] = field(default_factory=lambda: [SaveState.DRAFT])
    errors: InvoiceErrors | None = None
    error: InvoiceDeskError | None = None
    totals: InvoiceTotals | None = None
    invoice: Invoice | None = None

    def move_to(self, state: SaveState) -> None:
        if self.state in TERMINAL_STATES:
            raise RuntimeError(f"Save attempt already ended in {self.state.value}")
        logger.debug("Save pipeline: %s -> %s", self.state.value, state.value)
        self.state = state
        self.transitions.append(state)

    @property
    def succeeded(self) -> bool:
        return self.state == SaveState.PERSISTED

    def raise_for_failure(self) -> Invoice:
        """Return the saved invoice, or raise the error that ended the attempt."""
        if self.state == SaveState.INVALID:
            raise InvoiceValidationError(self.errors.as_dict())
        if self.state == SaveState.FAILED:
            raise self.error
        return self.invoice


def build_header(draft: InvoiceDraft, due_date: str) -> dict[str, Any]:
    """Column values for the invoice header; nested objects become JSON text."""
    return {
        "company": draft.company,
        "company_address": draft.company_address,
        "client": draft.client,
        "client_address": draft.client_address,
        "invoice_number": draft.invoice_number,
        "due_date": date.fromisoformat(due_date),
        "notes": draft.notes or "",
        "terms": draft.terms or "",
        "logo": draft.logo,
        "logo_zoom": draft.logo_zoom,
        "status": draft.status,
        "customer_id": draft.customer_id,
        "template_id": draft.template_id,
        "currency": json.dumps(draft.currency.model_dump(mode="json", exclude_none=True)),
        "show_shipping": draft.show_shipping,
        "show_discount": draft.show_discount,
        "show_tax_column": draft.show_tax_column,
        "show_signature": draft.show_signature,
        "show_payment_details": draft.show_payment_details,
        "shipping": json.dumps(draft.shipping.model_dump(mode="json")),
        "taxes": json.dumps([tax.model_dump(mode="json") for tax in draft.taxes]),
        "discount": to_decimal(draft.discount),
    }


def build_items(draft: InvoiceDraft) -> list[dict[str, Any]]:
    """Column values for each line item, in draft order. Blank tax rates become 0."""
    return [
        {
            "description": item.description,
            "quantity": to_decimal(item.quantity),
            "price": to_decimal(item.price),
            "tax_rate": to_decimal(item.tax_rate),
            "product_id": item.product_id,
        }
        for item in draft.items
    ]


class InvoiceSavePipeline:
    """Validate, derive totals and persist one invoice draft."""

    def __init__(self, db: AsyncSession, repository: InvoiceRepository | None = None):
        self.repository = repository or InvoiceRepository(db)

    async def run(
        self,
        owner: User | None,
        draft: InvoiceDraft,
        invoice_id: int | None = None,
    ) -> SaveOutcome:
        """
        Run one save attempt.

        Args:
            owner: Authenticated user, or None for an anonymous request
            draft: Invoice as composed by the user
            invoice_id: Target to update; defaults to ``draft.id``

        Returns:
            Outcome in a terminal state. Domain errors are recorded on the
            outcome, not raised.
        """
        outcome = SaveOutcome()
        target_id = invoice_id if invoice_id is not None else draft.id

        outcome.move_to(SaveState.VALIDATING)
        errors = validate_invoice(draft)
        if errors.has_errors:
            outcome.errors = errors
            outcome.move_to(SaveState.INVALID)
            logger.info("Invoice draft rejected by validation: %s", sorted(errors.as_dict()))
            return outcome

        outcome.totals = calculate_invoice_totals(draft)

        outcome.move_to(SaveState.PERSISTING)
        if owner is None:
            outcome.error = AuthRequired()
            outcome.move_to(SaveState.FAILED)
            logger.warning("Invoice save attempted without an authenticated user")
            return outcome

        try:
            invoice = await self.repository.save(
                owner.id,
                build_header(draft, normalize_due_date(draft.due_date)),
                build_items(draft),
                invoice_id=target_id,
            )
        except InvoiceDeskError as exc:
            outcome.error = exc
            outcome.move_to(SaveState.FAILED)
            logger.warning("Invoice save failed: %s", exc.message)
            return outcome

        outcome.invoice = invoice
        outcome.move_to(SaveState.PERSISTED)
        logger.info("Invoice %s saved for user %s", invoice.id, owner.id)
        return outcome
