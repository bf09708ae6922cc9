"""
Product service.
Handles product catalogue CRUD, categories, bulk import and statistics.
"""

import logging
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import Select, select, func
from fastapi import HTTPException, status

from invoicedesk.models.invoice import InvoiceLineItem
from invoicedesk.models.product import Product
from invoicedesk.models.user import User
from invoicedesk.schemas.base import SortOrder
from invoicedesk.schemas.product import ProductCreate, ProductUpdate


logger = logging.getLogger(__name__)


SORTABLE_FIELDS = {
    "name": Product.name,
    "default_price": Product.default_price,
    "default_tax_rate": Product.default_tax_rate,
    "category": Product.category,
    "created_at": Product.created_at,
}

RECENT_LIMIT = 5


class ProductService:
    """Service for product operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, owner: User, data: ProductCreate) -> Product:
        """
        Create a new product.

        Args:
            owner: Authenticated user
            data: Product data

        Returns:
            Created product
        """
        product = Product(
            user_id=owner.id,
            **data.model_dump(),
        )

        self.db.add(product)
        await self.db.flush()
        await self.db.refresh(product)

        return product

    async def bulk_create(self, owner: User, items: list[ProductCreate]) -> list[Product]:
        """Create several products in one flush."""
        products = [Product(user_id=owner.id, **data.model_dump()) for data in items]
        self.db.add_all(products)
        await self.db.flush()
        logger.info("Imported %d products for user %s", len(products), owner.id)
        return products

    async def get_by_id(self, product_id: int, owner_id: int) -> Product | None:
        """Get product by ID, ensuring owner access."""
        result = await self.db.execute(
            select(Product).where(
                Product.id == product_id,
                Product.user_id == owner_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_or_404(self, product_id: int, owner_id: int) -> Product:
        """
        Get product by ID or raise 404.

        Raises:
            HTTPException: If product not found
        """
        product = await self.get_by_id(product_id, owner_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def _filtered(
        self,
        query: Select,
        owner_id: int,
        search: str | None = None,
        name: str | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
        tax_rate: Decimal | None = None,
        category: str | None = None,
    ) -> Select:
        query = query.where(Product.user_id == owner_id)

        if search:
            search_filter = f"%{search}%"
            query = query.where(
                (Product.name.ilike(search_filter)) |
                (Product.sku.ilike(search_filter))
            )

        if name:
            query = query.where(Product.name.ilike(f"%{name}%"))
        if min_price is not None:
            query = query.where(Product.default_price >= min_price)
        if max_price is not None:
            query = query.where(Product.default_price <= max_price)
        if tax_rate is not None:
            query = query.where(Product.default_tax_rate == tax_rate)
        if category:
            query = query.where(Product.category == category)

        return query

    async def list_products(
        self,
        owner_id: int,
        skip: int = 0,
        limit: int | None = 20,
        sort_by: str = "name",
        sort_order: SortOrder = "asc",
        **filters,
    ) -> tuple[list[Product], int]:
        """
        List products with pagination and filters.

        Args:
            owner_id: Owner's user ID
            skip: Number of records to skip
            limit: Maximum records to return, None for all
            sort_by: One of ``SORTABLE_FIELDS``
            sort_order: ``asc`` or ``desc``
            **filters: search, name, min_price, max_price, tax_rate, category

        Returns:
            Tuple of (products list, total count)
        """
        count_query = self._filtered(select(func.count(Product.id)), owner_id, **filters)
        total_result = await self.db.execute(count_query)
        total = total_result.scalar() or 0

        column = SORTABLE_FIELDS.get(sort_by, Product.name)
        ordering = column.asc() if sort_order == "asc" else column.desc()

        query = (
            self._filtered(select(Product), owner_id, **filters)
            .order_by(ordering, Product.id)
            .offset(skip)
        )
        if limit is not None:
            query = query.limit(limit)

        result = await self.db.execute(query)
        products = list(result.scalars().all())

        return products, total

    async def list_categories(self, owner_id: int) -> list[str]:
        """Distinct non-empty categories, sorted."""
        result = await self.db.execute(
            select(Product.category)
            .where(
                Product.user_id == owner_id,
                Product.category.is_not(None),
                Product.category != "",
            )
            .distinct()
            .order_by(Product.category)
        )
        return list(result.scalars().all())

    async def update(self, product: Product, data: ProductUpdate) -> Product:
        """Apply the fields that were set on ``data``."""
        update_data = data.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            setattr(product, field, value)

        await self.db.flush()
        await self.db.refresh(product)

        return product

    async def delete(self, product: Product) -> None:
        """
        Delete product.

        Raises:
            HTTPException: 409 while invoice line items still reference the product
        """
        result = await self.db.execute(
            select(func.count(InvoiceLineItem.id)).where(InvoiceLineItem.product_id == product.id)
        )
        if result.scalar():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Product is used on existing invoices",
            )

        await self.db.delete(product)
        await self.db.flush()

    async def get_stats(self, owner_id: int) -> dict:
        """Total count, most recent products and default price aggregates."""
        total_result = await self.db.execute(
            select(func.count(Product.id)).where(Product.user_id == owner_id)
        )

        recent_result = await self.db.execute(
            select(Product)
            .where(Product.user_id == owner_id)
            .order_by(Product.created_at.desc(), Product.id.desc())
            .limit(RECENT_LIMIT)
        )

        price_result = await self.db.execute(
            select(
                func.avg(Product.default_price),
                func.min(Product.default_price),
                func.max(Product.default_price),
            ).where(Product.user_id == owner_id)
        )
        avg_price, min_price, max_price = price_result.one()

        return {
            "total_count": total_result.scalar() or 0,
            "recent_products": list(recent_result.scalars().all()),
            "price_stats": {
                "avg_price": Decimal(str(avg_price or 0)),
                "min_price": Decimal(str(min_price or 0)),
                "max_price": Decimal(str(max_price or 0)),
            },
        }
