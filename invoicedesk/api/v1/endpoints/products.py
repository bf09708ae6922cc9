"""
Product catalogue endpoints.
CRUD, categories, bulk import, statistics and export.
"""

from decimal import Decimal
from fastapi import APIRouter, Query, Response, status

from invoicedesk.api.deps import DbSession, CurrentUser
from invoicedesk.schemas.product import (
    ProductBulkImport,
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductListResponse,
    ProductStats,
)
from invoicedesk.schemas.base import BulkImportResult, MessageResponse, SortOrder
from invoicedesk.services.export import ExportFormat, export_response
from invoicedesk.services.product import ProductService


router = APIRouter()


EXPORT_HEADERS = {
    "id": "ID",
    "name": "Name",
    "description": "Description",
    "default_price": "Price",
    "default_tax_rate": "Tax Rate",
    "price_with_tax": "Price With Tax",
    "unit": "Unit",
    "sku": "SKU",
    "category": "Category",
    "created_at": "Created At",
}


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product",
)
async def create_product(
    data: ProductCreate,
    current_user: CurrentUser,
    db: DbSession,
) -> ProductResponse:
    """Create a new product."""
    service = ProductService(db)
    product = await service.create(current_user, data)
    return ProductResponse.model_validate(product)


@router.get(
    "",
    response_model=ProductListResponse,
    summary="List products",
    description="Paginated list of products with filters",
)
async def list_products(
    current_user: CurrentUser,
    db: DbSession,
    page: int = Query(1, ge=1, description="Page number"),
    per_page: int = Query(20, ge=1, le=100, description="Items per page"),
    sort_by: str = Query("name", description="Sort field"),
    sort_order: SortOrder = Query("asc", description="Sort direction"),
    search: str | None = Query(None, description="Search name or SKU"),
    name: str | None = Query(None),
    min_price: Decimal | None = Query(None, ge=0),
    max_price: Decimal | None = Query(None, ge=0),
    tax_rate: Decimal | None = Query(None, ge=0),
    category: str | None = Query(None),
) -> ProductListResponse:
    """List products with pagination and filters."""
    service = ProductService(db)
    skip = (page - 1) * per_page

    products, total = await service.list_products(
        owner_id=current_user.id,
        skip=skip,
        limit=per_page,
        sort_by=sort_by,
        sort_order=sort_order,
        search=search,
        name=name,
        min_price=min_price,
        max_price=max_price,
        tax_rate=tax_rate,
        category=category,
    )

    return ProductListResponse(
        items=[ProductResponse.model_validate(p) for p in products],
        total=total,
        page=page,
        per_page=per_page,
        pages=ProductListResponse.page_count(total, per_page),
    )


@router.get(
    "/categories",
    response_model=list[str],
    summary="Product categories",
)
async def list_categories(
    current_user: CurrentUser,
    db: DbSession,
) -> list[str]:
    service = ProductService(db)
    return await service.list_categories(current_user.id)


@router.get(
    "/stats",
    response_model=ProductStats,
    summary="Product statistics",
)
async def get_product_stats(
    current_user: CurrentUser,
    db: DbSession,
) -> ProductStats:
    service = ProductService(db)
    return ProductStats.model_validate(await service.get_stats(current_user.id))


@router.get(
    "/export",
    summary="Export products",
    description="Download all products as CSV or JSON",
)
async def export_products(
    current_user: CurrentUser,
    db: DbSession,
    format: ExportFormat = Query("csv", description="csv or json"),
) -> Response:
    service = ProductService(db)
    products, _ = await service.list_products(owner_id=current_user.id, limit=None)
    records = [ProductResponse.model_validate(p).model_dump(mode="json") for p in products]
    return export_response("products", records, EXPORT_HEADERS, format)


@router.post(
    "/bulk",
    response_model=BulkImportResult,
    status_code=status.HTTP_201_CREATED,
    summary="Import products",
)
async def bulk_import_products(
    data: ProductBulkImport,
    current_user: CurrentUser,
    db: DbSession,
) -> BulkImportResult:
    """Create several products at once."""
    service = ProductService(db)
    products = await service.bulk_create(current_user, data.products)
    return BulkImportResult(count=len(products))


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Product details",
)
async def get_product(
    product_id: int,
    current_user: CurrentUser,
    db: DbSession,
) -> ProductResponse:
    service = ProductService(db)
    product = await service.get_or_404(product_id, current_user.id)
    return ProductResponse.model_validate(product)


@router.patch(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Update a product",
)
async def update_product(
    product_id: int,
    data: ProductUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> ProductResponse:
    """Update a product. Line items that copied from it are not touched."""
    service = ProductService(db)
    product = await service.get_or_404(product_id, current_user.id)
    product = await service.update(product, data)
    return ProductResponse.model_validate(product)


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    summary="Delete a product",
    description="Refused while invoice line items reference the product",
)
async def delete_product(
    product_id: int,
    current_user: CurrentUser,
    db: DbSession,
) -> MessageResponse:
    service = ProductService(db)
    product = await service.get_or_404(product_id, current_user.id)
    await service.delete(product)
    return MessageResponse(message="Product deleted")
