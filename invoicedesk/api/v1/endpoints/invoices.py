"""
Invoice endpoints.
Saving drafts through the save pipeline, listing, status changes, export.
"""

from datetime import date
from decimal import Decimal
from fastapi import APIRouter, Query, Response, status

from invoicedesk.api.deps import DbSession, CurrentUser, OptionalUser
from invoicedesk.schemas.base import MessageResponse, SortOrder
from invoicedesk.schemas.invoice import (
    InvoiceDraft,
    InvoiceListResponse,
    InvoiceResponse,
    InvoiceStats,
    InvoiceStatusUpdate,
)
from invoicedesk.models.invoice import InvoiceStatus
from invoicedesk.services.export import ExportFormat, export_response
from invoicedesk.services.invoice import InvoiceService
from invoicedesk.services.save_pipeline import InvoiceSavePipeline


router = APIRouter()


EXPORT_HEADERS = {
    "id": "ID",
    "invoice_number": "Invoice Number",
    "client": "Client",
    "client_address": "Client Address",
    "due_date": "Due Date",
    "status": "Status",
    "currency.code": "Currency",
    "totals.subtotal": "Subtotal",
    "totals.tax_total": "Tax",
    "totals.total": "Total",
    "shipping.city": "Shipping City",
    "created_at": "Created At",
}


@router.post(
    "",
    response_model=InvoiceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save an invoice draft",
    description="Create the invoice, or update it when the draft carries an id",
)
async def save_invoice(
    draft: InvoiceDraft,
    response: Response,
    current_user: OptionalUser,
    db: DbSession,
) -> InvoiceResponse:
    """Validate and persist a draft."""
    outcome = await InvoiceSavePipeline(db).run(current_user, draft)
    invoice = outcome.raise_for_failure()
    if draft.id is not None:
        response.status_code = status.HTTP_200_OK
    return InvoiceResponse.model_validate(invoice)


@router.get(
    "",
    response_model=InvoiceListResponse,
    summary="List invoices",
    description="Paginated, filtered and sorted list of invoices",
)
async def list_invoices(
    current_user: CurrentUser,
    db: DbSession,
    page: int = Query(1, ge=1, description="Page number"),
    per_page: int = Query(20, ge=1, le=100, description="Items per page"),
    sort_by: str = Query("created_at", description="Sort field"),
    sort_order: SortOrder = Query("desc", description="Sort direction"),
    client: str | None = Query(None, description="Client name contains"),
    customer_id: int | None = Query(None, description="Filter by customer"),
    status: InvoiceStatus | None = Query(None, description="Filter by status"),
    from_date: date | None = Query(None, description="Created on or after"),
    to_date: date | None = Query(None, description="Created on or before"),
    min_amount: Decimal | None = Query(None, ge=0, description="Minimum amount"),
    max_amount: Decimal | None = Query(None, ge=0, description="Maximum amount"),
) -> InvoiceListResponse:
    """List invoices with pagination and filters."""
    service = InvoiceService(db)
    skip = (page - 1) * per_page

    invoices, total = await service.list_invoices(
        owner_id=current_user.id,
        skip=skip,
        limit=per_page,
        sort_by=sort_by,
        sort_order=sort_order,
        client=client,
        customer_id=customer_id,
        status=status,
        from_date=from_date,
        to_date=to_date,
        min_amount=min_amount,
        max_amount=max_amount,
    )

    return InvoiceListResponse(
        items=[InvoiceResponse.model_validate(i) for i in invoices],
        total=total,
        page=page,
        per_page=per_page,
        pages=InvoiceListResponse.page_count(total, per_page),
    )


@router.get(
    "/stats",
    response_model=InvoiceStats,
    summary="Invoice statistics",
    description="Counts by status and monthly totals",
)
async def get_invoice_stats(
    current_user: CurrentUser,
    db: DbSession,
) -> InvoiceStats:
    """Get invoice statistics."""
    service = InvoiceService(db)
    return InvoiceStats.model_validate(await service.get_stats(current_user.id))


@router.get(
    "/export",
    summary="Export invoices",
    description="Download all invoices as CSV or JSON",
)
async def export_invoices(
    current_user: CurrentUser,
    db: DbSession,
    format: ExportFormat = Query("csv", description="csv or json"),
) -> Response:
    """Export every invoice of the current user."""
    service = InvoiceService(db)
    invoices, _ = await service.list_invoices(owner_id=current_user.id, limit=None)
    records = [InvoiceResponse.model_validate(i).model_dump(mode="json") for i in invoices]
    return export_response("invoices", records, EXPORT_HEADERS, format)


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    summary="Invoice details",
    description="Get one invoice with its line items and totals",
)
async def get_invoice(
    invoice_id: int,
    current_user: CurrentUser,
    db: DbSession,
) -> InvoiceResponse:
    """Get invoice by ID."""
    service = InvoiceService(db)
    invoice = await service.get_or_404(invoice_id, current_user.id)
    return InvoiceResponse.model_validate(invoice)


@router.put(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    summary="Update an invoice",
    description="Save a draft over an existing invoice, replacing its line items",
)
async def update_invoice(
    invoice_id: int,
    draft: InvoiceDraft,
    current_user: OptionalUser,
    db: DbSession,
) -> InvoiceResponse:
    """Validate and persist a draft as an update of ``invoice_id``."""
    outcome = await InvoiceSavePipeline(db).run(current_user, draft, invoice_id=invoice_id)
    return InvoiceResponse.model_validate(outcome.raise_for_failure())


@router.patch(
    "/{invoice_id}/status",
    response_model=InvoiceResponse,
    summary="Change invoice status",
)
async def update_invoice_status(
    invoice_id: int,
    data: InvoiceStatusUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> InvoiceResponse:
    """Change only the status of an invoice."""
    service = InvoiceService(db)
    invoice = await service.update_status(invoice_id, current_user.id, data.status)
    return InvoiceResponse.model_validate(invoice)


@router.delete(
    "/{invoice_id}",
    response_model=MessageResponse,
    summary="Delete an invoice",
    description="Delete an invoice and its line items",
)
async def delete_invoice(
    invoice_id: int,
    current_user: CurrentUser,
    db: DbSession,
) -> MessageResponse:
    """Delete an invoice."""
    service = InvoiceService(db)
    await service.delete(invoice_id, current_user.id)
    return MessageResponse(message="Invoice deleted")
