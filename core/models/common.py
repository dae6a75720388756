# =============================================================================
# core/models/common.py - Shared Schema Pieces
# =============================================================================
# Records are stored with snake_case columns and returned to clients with
# camelCase keys (productName, profilePicture.imageUrl, ...). CatalogModel
# accepts either spelling and serializes by alias.
# =============================================================================

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CatalogModel(BaseModel):
    """Base model: snake_case attributes, camelCase wire format."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_response(self) -> dict[str, Any]:
        """Serialize for an API response (camelCase, JSON-safe values)."""
        return self.model_dump(mode="json", by_alias=True)


class ImageRef(CatalogModel):
    """
    Reference to an image held by the remote media host.

    Both fields are set together, only after a successful upload.

    Example:
        {
            "imageUrl": "https://xxx.supabase.co/storage/v1/object/public/images/products/ab12.jpeg",
            "publicId": "products/ab12.jpeg"
        }
    """

    image_url: str = Field(..., description="Public URL of the stored image")
    public_id: str = Field(..., description="Asset identifier used to delete the image")

    def to_row(self) -> dict[str, str]:
        """Column value for the record store."""
        return {"image_url": self.image_url, "public_id": self.public_id}
