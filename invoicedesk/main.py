"""
InvoiceDesk API - Main Application Entry Point
Invoice composition, persistence and export.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from invoicedesk.core.config import settings
from invoicedesk.core.database import init_db, close_db
from invoicedesk.core.exceptions import (
    AuthRequired,
    InvoiceDeskError,
    InvoiceValidationError,
)
from invoicedesk.api.v1.router import api_router


logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("invoicedesk")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info("Starting %s v%s (%s)", settings.APP_NAME, settings.APP_VERSION, settings.ENVIRONMENT)

    # Tables are managed by alembic outside development
    if settings.is_development:
        await init_db()
        logger.info("Database tables initialized")

    yield

    logger.info("Shutting down")
    await close_db()


app = FastAPI(
    title=settings.APP_NAME,
    description="""
## InvoiceDesk API

Backend for composing, saving and exporting invoices.

* **Authentication** - Registration, login, JWT tokens
* **Drafts** - Stateless draft editing with live totals and validation
* **Invoices** - Validated save of header and line items, listing, stats, export
* **Customers** and **Products** - Catalogues that seed invoices by copy
    """,
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    openapi_url="/openapi.json" if settings.is_development else None,
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvoiceDeskError)
async def invoicedesk_exception_handler(request: Request, exc: InvoiceDeskError):
    """Map domain errors to their HTTP status."""
    errors = exc.errors if isinstance(exc, InvoiceValidationError) else None
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthRequired) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "errors": errors},
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Flatten request validation errors."""
    errors = []
    for error in exc.errors():
        field = " -> ".join(str(loc) for loc in error["loc"])
        errors.append({
            "field": field,
            "message": error["msg"],
            "type": error["type"],
        })

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Request validation failed",
            "errors": errors,
        },
    )


app.include_router(api_router, prefix="/api/v1")


@app.get(
    "/health",
    tags=["Health"],
    summary="Health check",
)
async def health_check():
    """Check if the API is running."""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
    }


@app.get(
    "/",
    tags=["Info"],
    summary="API information",
)
async def root():
    """Get API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs" if settings.is_development else "Disabled in production",
        "health": "/health",
    }


if __name__ == "__main__":
    import os
    import uvicorn

    port = int(os.getenv("PORT", "8000"))

    uvicorn.run(
        "invoicedesk.main:app",
        host=settings.HOST,
        port=port,
        reload=settings.is_development,
    )
