"""
Draft editing endpoints.
Stateless: the client sends its current draft and gets the next one back,
together with live totals and validation errors. Nothing is stored.
"""

from fastapi import APIRouter

from invoicedesk.api.deps import CurrentUser
from invoicedesk.schemas.draft import DraftApplyRequest, DraftStateResponse
from invoicedesk.schemas.invoice import InvoiceDraft, InvoiceErrors, InvoiceTotalsResponse
from invoicedesk.services.draft_state import apply_action, new_draft
from invoicedesk.services.totals import calculate_invoice_totals
from invoicedesk.services.validation import validate_invoice


router = APIRouter()


def _snapshot(draft: InvoiceDraft) -> DraftStateResponse:
    return DraftStateResponse(
        state=draft,
        totals=InvoiceTotalsResponse.from_totals(calculate_invoice_totals(draft)),
        errors=validate_invoice(draft),
    )


@router.post(
    "/new",
    response_model=DraftStateResponse,
    summary="New draft",
    description="Blank draft prefilled with the user's business name",
)
async def create_draft(current_user: CurrentUser) -> DraftStateResponse:
    return _snapshot(new_draft(company=current_user.business_name or ""))


@router.post(
    "/apply",
    response_model=DraftStateResponse,
    summary="Apply an editing action",
)
async def apply_draft_action(
    data: DraftApplyRequest,
    current_user: CurrentUser,
) -> DraftStateResponse:
    """Apply one action to the given draft."""
    return _snapshot(apply_action(data.state, data.action))


@router.post(
    "/validate",
    response_model=InvoiceErrors,
    response_model_exclude_none=True,
    summary="Validate a draft",
)
async def validate_draft(
    draft: InvoiceDraft,
    current_user: CurrentUser,
) -> InvoiceErrors:
    return validate_invoice(draft)


@router.post(
    "/totals",
    response_model=InvoiceTotalsResponse,
    summary="Compute draft totals",
)
async def draft_totals(
    draft: InvoiceDraft,
    current_user: CurrentUser,
) -> InvoiceTotalsResponse:
    return InvoiceTotalsResponse.from_totals(calculate_invoice_totals(draft))
