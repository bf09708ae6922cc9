"""
Customer management endpoints.
CRUD, bulk import, statistics and export.
"""

from fastapi import APIRouter, Query, Response, status

from invoicedesk.api.deps import DbSession, CurrentUser
from invoicedesk.schemas.customer import (
    CustomerBulkImport,
    CustomerCreate,
    CustomerUpdate,
    CustomerResponse,
    CustomerListResponse,
    CustomerStats,
)
from invoicedesk.schemas.base import BulkImportResult, MessageResponse, SortOrder
from invoicedesk.services.customer import CustomerService
from invoicedesk.services.export import ExportFormat, export_response


router = APIRouter()


EXPORT_HEADERS = {
    "id": "ID",
    "name": "Name",
    "email": "Email",
    "phone": "Phone",
    "address": "Address",
    "vat_number": "VAT Number",
    "contact_person": "Contact Person",
    "website": "Website",
    "preferred_currency": "Currency",
    "created_at": "Created At",
}


@router.post(
    "",
    response_model=CustomerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a customer",
)
async def create_customer(
    data: CustomerCreate,
    current_user: CurrentUser,
    db: DbSession,
) -> CustomerResponse:
    """Create a new customer."""
    service = CustomerService(db)
    customer = await service.create(current_user, data)
    return CustomerResponse.model_validate(customer)


@router.get(
    "",
    response_model=CustomerListResponse,
    summary="List customers",
    description="Paginated list of customers with filters and search",
)
async def list_customers(
    current_user: CurrentUser,
    db: DbSession,
    page: int = Query(1, ge=1, description="Page number"),
    per_page: int = Query(20, ge=1, le=100, description="Items per page"),
    sort_by: str = Query("name", description="Sort field"),
    sort_order: SortOrder = Query("asc", description="Sort direction"),
    search: str | None = Query(None, description="Search name, email, phone or VAT number"),
    name: str | None = Query(None),
    email: str | None = Query(None),
    phone: str | None = Query(None),
    vat_number: str | None = Query(None),
    currency: str | None = Query(None, min_length=3, max_length=3),
) -> CustomerListResponse:
    """List customers with pagination."""
    service = CustomerService(db)
    skip = (page - 1) * per_page

    customers, total = await service.list_customers(
        owner_id=current_user.id,
        skip=skip,
        limit=per_page,
        sort_by=sort_by,
        sort_order=sort_order,
        search=search,
        name=name,
        email=email,
        phone=phone,
        vat_number=vat_number,
        currency=currency,
    )

    return CustomerListResponse(
        items=[CustomerResponse.model_validate(c) for c in customers],
        total=total,
        page=page,
        per_page=per_page,
        pages=CustomerListResponse.page_count(total, per_page),
    )


@router.get(
    "/stats",
    response_model=CustomerStats,
    summary="Customer statistics",
)
async def get_customer_stats(
    current_user: CurrentUser,
    db: DbSession,
) -> CustomerStats:
    service = CustomerService(db)
    return CustomerStats.model_validate(await service.get_stats(current_user.id))


@router.get(
    "/export",
    summary="Export customers",
    description="Download all customers as CSV or JSON",
)
async def export_customers(
    current_user: CurrentUser,
    db: DbSession,
    format: ExportFormat = Query("csv", description="csv or json"),
) -> Response:
    service = CustomerService(db)
    customers, _ = await service.list_customers(owner_id=current_user.id, limit=None)
    records = [CustomerResponse.model_validate(c).model_dump(mode="json") for c in customers]
    return export_response("customers", records, EXPORT_HEADERS, format)


@router.post(
    "/bulk",
    response_model=BulkImportResult,
    status_code=status.HTTP_201_CREATED,
    summary="Import customers",
)
async def bulk_import_customers(
    data: CustomerBulkImport,
    current_user: CurrentUser,
    db: DbSession,
) -> BulkImportResult:
    """Create several customers at once."""
    service = CustomerService(db)
    customers = await service.bulk_create(current_user, data.customers)
    return BulkImportResult(count=len(customers))


@router.get(
    "/{customer_id}",
    response_model=CustomerResponse,
    summary="Customer details",
)
async def get_customer(
    customer_id: int,
    current_user: CurrentUser,
    db: DbSession,
) -> CustomerResponse:
    service = CustomerService(db)
    customer = await service.get_or_404(customer_id, current_user.id)
    return CustomerResponse.model_validate(customer)


@router.patch(
    "/{customer_id}",
    response_model=CustomerResponse,
    summary="Update a customer",
)
async def update_customer(
    customer_id: int,
    data: CustomerUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> CustomerResponse:
    """Update a customer. Invoices that copied from it are not touched."""
    service = CustomerService(db)
    customer = await service.get_or_404(customer_id, current_user.id)
    customer = await service.update(customer, data)
    return CustomerResponse.model_validate(customer)


@router.delete(
    "/{customer_id}",
    response_model=MessageResponse,
    summary="Delete a customer",
    description="Refused while invoices reference the customer",
)
async def delete_customer(
    customer_id: int,
    current_user: CurrentUser,
    db: DbSession,
) -> MessageResponse:
    service = CustomerService(db)
    customer = await service.get_or_404(customer_id, current_user.id)
    await service.delete(customer)
    return MessageResponse(message="Customer deleted")
