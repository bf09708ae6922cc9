"""
Product schemas for request/response validation.
"""

from datetime import datetime
from decimal import Decimal
from pydantic import Field

from invoicedesk.schemas.base import BaseSchema, PaginatedResponse


class ProductBase(BaseSchema):
    """Base product schema with common fields."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    default_price: Decimal = Field(default=Decimal("0.00"), ge=0, decimal_places=2)
    default_tax_rate: Decimal = Field(default=Decimal("0.00"), ge=0, le=100, decimal_places=2)
    unit: str | None = Field(None, max_length=50)
    sku: str | None = Field(None, max_length=100)
    category: str | None = Field(None, max_length=100)


class ProductCreate(ProductBase):
    """Schema for creating a product."""
    pass


class ProductUpdate(BaseSchema):
    """Schema for updating a product. Unset fields are left untouched."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    default_price: Decimal | None = Field(None, ge=0, decimal_places=2)
    default_tax_rate: Decimal | None = Field(None, ge=0, le=100, decimal_places=2)
    unit: str | None = Field(None, max_length=50)
    sku: str | None = Field(None, max_length=100)
    category: str | None = Field(None, max_length=100)


class ProductResponse(ProductBase):
    """Product response schema."""

    id: int
    user_id: int
    price_with_tax: Decimal
    created_at: datetime
    updated_at: datetime


class ProductListResponse(PaginatedResponse):
    """Paginated product list response."""

    items: list[ProductResponse]


class ProductBulkImport(BaseSchema):
    products: list[ProductCreate] = Field(..., min_length=1)


class RecentProduct(BaseSchema):
    id: int
    name: str
    default_price: Decimal
    created_at: datetime


class PriceStats(BaseSchema):
    avg_price: Decimal
    min_price: Decimal
    max_price: Decimal


class ProductStats(BaseSchema):
    total_count: int
    recent_products: list[RecentProduct]
    price_stats: PriceStats
