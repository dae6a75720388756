# =============================================================================
# core/services/product_service.py - Product Business Logic
# =============================================================================
# Create/read/update/delete for catalog products.
#
# Image handling follows one rule: a new image is uploaded before the record
# is written; when the write succeeds the replaced image is destroyed, when
# it fails the new image is destroyed instead. The staged local file is
# removed on every exit path.
# =============================================================================

import logging
import math

from app.exceptions import (
    MissingFieldsError,
    MissingImageError,
    ProductAlreadyExistsError,
    ProductNotFoundError,
    UserNotFoundError,
    ValidationFailedError,
)
from core.models import ImageRef, Product, ProductCreate, ProductUpdate
from core.services.asset_service import AssetStore
from core.services.staging import StagedFile
from lib.supabase_client import DuplicateKeyError, SupabaseTable
from lib.utils import clean_text, utc_now_iso

logger = logging.getLogger(__name__)

# Folder inside the media bucket
PRODUCTS_FOLDER = "products"


def _check_price(price: float) -> None:
    # NaN compares false against everything, so test finiteness first
    if not math.isfinite(price):
        raise ValidationFailedError("price must be a finite number", {"price": str(price)})
    if price < 0:
        raise ValidationFailedError("price must not be negative", {"price": price})


class ProductService:
    """
    Service for product operations.

    Provides a clean interface between API routes and the record store.
    """

    def __init__(
        self,
        products: SupabaseTable,
        users: SupabaseTable,
        assets: AssetStore,
        description_unique: bool = False,
    ):
        self.products = products
        self.users = users
        self.assets = assets
        self.description_unique = description_unique

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_products(self) -> list[Product]:
        """Return every product, newest first."""
        return [Product.model_validate(row) for row in self.products.fetch_all()]

    def get_product(self, product_id: str) -> Product:
        """
        Get a product by ID.

        Raises:
            ProductNotFoundError: If no product has this ID
        """
        row = self.products.fetch_by_id(product_id)
        if not row:
            raise ProductNotFoundError(product_id)
        return Product.model_validate(row)

    # -------------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------------

    def create_product(
        self,
        data: ProductCreate,
        image: StagedFile | None,
        owner_id: str | None = None,
    ) -> Product:
        """
        Create a product.

        Steps:
        1. Validate required fields
        2. Reject duplicates (name, and description when configured)
        3. Resolve the owning user (explicit user_id wins over owner_id)
        4. Upload the image and remove the staged file
        5. Insert the record; destroy the uploaded image if the insert fails

        Args:
            data: Parsed create input
            image: Staged product image (required)
            owner_id: Authenticated user, used when data.user_id is absent

        Returns:
            The created product

        Raises:
            ValidationFailedError: Missing or invalid fields
            ProductAlreadyExistsError: Name/description already taken
            UserNotFoundError: Owning user doesn't exist
            MissingImageError: No image supplied
            StorageUploadError: Media host rejected the image
        """
        try:
            name = clean_text(data.product_name)
            description = clean_text(data.description)
            if not name or not description:
                raise ValidationFailedError("productName, price and description are required")
            _check_price(data.price)

            self._ensure_unique(name, description)

            owner = clean_text(data.user_id) or owner_id
            if owner and not self.users.fetch_by_id(owner):
                raise UserNotFoundError("Cannot create product for unexisting user", owner)

            if image is None:
                raise MissingImageError("productImage")

            stored = self.assets.store_staged(image, PRODUCTS_FOLDER)

            row = {
                "product_name": name,
                "price": data.price,
                "description": description,
                "product_image": stored.to_row(),
                "user_id": owner,
            }
            try:
                created = self.products.insert(row)
            except DuplicateKeyError:
                self.assets.discard_quietly(stored)
                raise ProductAlreadyExistsError("productName")
            except Exception:
                self.assets.discard_quietly(stored)
                raise

            logger.info(f"Created product: {created.get('id')} ({name})")
            return Product.model_validate(created)

        finally:
            if image is not None:
                image.discard()

    # -------------------------------------------------------------------------
    # Update
    # -------------------------------------------------------------------------

    def update_product(
        self,
        product_id: str,
        data: ProductUpdate,
        image: StagedFile | None,
    ) -> Product:
        """
        Partially update a product.

        Scalar fields keep their stored value when not provided. The image
        is only replaced when a new file is supplied; the previous image is
        destroyed after the record write succeeds.

        Raises:
            MissingFieldsError: Nothing to update
            ProductNotFoundError: No product has this ID
            ProductAlreadyExistsError: Rename collides with another product
            ValidationFailedError: Invalid price
        """
        try:
            name = clean_text(data.product_name)
            description = clean_text(data.description)
            if name is None and description is None and data.price is None and image is None:
                raise MissingFieldsError()

            existing = self.get_product(product_id)

            changes: dict = {}
            if name is not None and name != existing.product_name:
                if self.products.fetch_one("product_name", name):
                    raise ProductAlreadyExistsError("productName")
                changes["product_name"] = name
            if description is not None and description != existing.description:
                if self.description_unique and self.products.fetch_one("description", description):
                    raise ProductAlreadyExistsError("description")
                changes["description"] = description
            if data.price is not None:
                _check_price(data.price)
                changes["price"] = data.price

            stored: ImageRef | None = None
            if image is not None:
                stored = self.assets.store_staged(image, PRODUCTS_FOLDER)
                changes["product_image"] = stored.to_row()

            changes["updated_at"] = utc_now_iso()

            try:
                updated = self.products.update(product_id, changes)
            except DuplicateKeyError:
                self.assets.discard_quietly(stored)
                raise ProductAlreadyExistsError("productName")
            except Exception:
                self.assets.discard_quietly(stored)
                raise

            if updated is None:
                # Deleted between the read and the write
                self.assets.discard_quietly(stored)
                raise ProductNotFoundError(product_id)

            if stored is not None and existing.product_image is not None:
                self.assets.destroy(existing.product_image.public_id)

            logger.info(f"Updated product: {product_id} ({', '.join(sorted(changes))})")
            return Product.model_validate(updated)

        finally:
            if image is not None:
                image.discard()

    # -------------------------------------------------------------------------
    # Delete
    # -------------------------------------------------------------------------

    def delete_product(self, product_id: str) -> Product:
        """
        Delete a product and, once the record is gone, its image.

        Raises:
            ProductNotFoundError: No product has this ID
        """
        existing = self.get_product(product_id)

        deleted = self.products.delete(product_id)
        if deleted is None:
            raise ProductNotFoundError(product_id)

        if existing.product_image is not None:
            self.assets.destroy(existing.product_image.public_id)

        logger.info(f"Deleted product: {product_id}")
        return existing

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _ensure_unique(self, name: str, description: str) -> None:
        if self.products.fetch_one("product_name", name):
            raise ProductAlreadyExistsError("productName")
        if self.description_unique and self.products.fetch_one("description", description):
            raise ProductAlreadyExistsError("description")
