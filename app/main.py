# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Catalog API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
#   python -m app.main
# =============================================================================

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.context import build_context
from app.exceptions import (
    CatalogException,
    catalog_exception_handler,
    store_exception_handler,
    validation_exception_handler,
)
from app.routers import health, products, users
from lib.supabase_client import SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup: build the application context (unless one was installed
    already) and make sure the staging directory exists.
    """
    logger.info(f"Starting Catalog API in {settings.ENVIRONMENT} mode")

    if getattr(app.state, "context", None) is None:
        app.state.context = build_context(settings)

    os.makedirs(app.state.context.settings.UPLOAD_DIR, exist_ok=True)

    yield

    logger.info("Shutting down Catalog API")


# Create FastAPI application
app = FastAPI(
    title="Catalog API",
    description="""
## Product & User API

Manage catalog products and user accounts. Product images and profile
pictures are uploaded to a media bucket; records reference them by URL.

### Authentication

1. **Register** - `POST /users/register` (multipart, with `profilePicture`)
2. **Login** - `POST /users/login` returns a token
3. **Call protected routes** with `Authorization: Bearer <token>`
4. **Logout** - `POST /users/logout` invalidates every token issued so far

### Quick Start

```bash
curl -X POST http://localhost:1230/products/create \\
  -H "Authorization: Bearer $TOKEN" \\
  -F "productName=Chicken Burger" -F "price=12.99" \\
  -F "description=Juicy grilled chicken burger with fries" \\
  -F "productImage=@burger.jpg"
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Products",
            "description": "Create, list, update and delete catalog products",
        },
        {
            "name": "Users",
            "description": "Registration, login/logout and profile management",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

app.add_exception_handler(CatalogException, catalog_exception_handler)
app.add_exception_handler(SupabaseClientError, store_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "message": f"Internal Server Error: {exc}",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

app.include_router(
    products.router,
    prefix="/products",
    tags=["Products"]
)

app.include_router(
    users.router,
    prefix="/users",
    tags=["Users"]
)

app.include_router(
    health.router,
    tags=["Health"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Catalog API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )
