# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - common.py: CatalogModel base (camelCase wire format) and ImageRef
# - user.py: User account schemas
# - product.py: Product catalog schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

from .common import CatalogModel, ImageRef

from .user import (
    LoginRequest,
    User,
    UserCreate,
    UserUpdate,
)

from .product import (
    Product,
    ProductCreate,
    ProductUpdate,
)

__all__ = [
    # Common
    "CatalogModel",
    "ImageRef",
    # User
    "LoginRequest",
    "User",
    "UserCreate",
    "UserUpdate",
    # Product
    "Product",
    "ProductCreate",
    "ProductUpdate",
]
