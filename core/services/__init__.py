# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .staging import StagedFile
from .asset_service import AssetStore
from .product_service import ProductService
from .user_service import UserService

__all__ = [
    "StagedFile",
    "AssetStore",
    "ProductService",
    "UserService",
]
