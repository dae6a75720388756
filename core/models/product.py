# =============================================================================
# core/models/product.py - Product Schemas
# =============================================================================
# These models define the contract for product operations:
# - Product: a stored catalog record
# - ProductCreate / ProductUpdate: validated create and update input
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, Field

from .common import CatalogModel, ImageRef


class Product(CatalogModel):
    """
    A catalog record as stored in the products table.

    Example response:
        {
            "id": "660e8400-e29b-41d4-a716-446655440001",
            "productName": "Chicken Burger",
            "price": 12.99,
            "description": "Juicy grilled chicken burger with fries",
            "productImage": {"imageUrl": "https://...", "publicId": "products/ab12.jpeg"},
            "userId": "550e8400-e29b-41d4-a716-446655440000",
            "createdAt": "2024-01-15T10:30:00Z",
            "updatedAt": "2024-01-15T10:30:00Z"
        }
    """

    id: str = Field(..., description="Unique product identifier")

    product_name: str = Field(..., description="Product name (unique)")

    price: float = Field(..., ge=0, description="Price")

    description: str = Field(..., description="Product description")

    product_image: ImageRef | None = Field(
        default=None,
        description="Product image held by the media host"
    )

    # Owning account, when the product was created by a known user
    user_id: str | None = Field(default=None, description="Owning user ID")

    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductCreate(BaseModel):
    """Create input (after form parsing)."""
    product_name: str
    price: float
    description: str
    user_id: str | None = None


class ProductUpdate(BaseModel):
    """Partial update input; None means keep the stored value."""
    product_name: str | None = None
    price: float | None = None
    description: str | None = None
