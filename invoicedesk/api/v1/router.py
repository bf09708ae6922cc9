"""
API v1 router - aggregates all endpoint routers.
"""

from fastapi import APIRouter

from invoicedesk.api.v1.endpoints import (
    auth,
    customers,
    drafts,
    invoices,
    products,
)

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Authentication"],
)

api_router.include_router(
    invoices.router,
    prefix="/invoices",
    tags=["Invoices"],
)

api_router.include_router(
    drafts.router,
    prefix="/drafts",
    tags=["Drafts"],
)

api_router.include_router(
    customers.router,
    prefix="/customers",
    tags=["Customers"],
)

api_router.include_router(
    products.router,
    prefix="/products",
    tags=["Products"],
)
