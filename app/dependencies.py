# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request

from app.context import AppContext
from core.services.product_service import ProductService
from core.services.user_service import UserService


def get_context(request: Request) -> AppContext:
    """
    Get the application context.

    Built by the lifespan handler and stored on app.state.
    """
    return request.app.state.context


def get_product_service(context: AppContext = Depends(get_context)) -> ProductService:
    """Product workflows bound to the current context."""
    return context.product_service


def get_user_service(context: AppContext = Depends(get_context)) -> UserService:
    """User workflows bound to the current context."""
    return context.user_service


# Type aliases for dependency injection
ContextDep = Annotated[AppContext, Depends(get_context)]
ProductServiceDep = Annotated[ProductService, Depends(get_product_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
