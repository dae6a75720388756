# =============================================================================
# core/services/asset_service.py - Remote Image Storage
# =============================================================================
# Pushes staged images to a Supabase Storage bucket and removes them again.
# An asset's identifier is its path inside the bucket.
# =============================================================================

import logging
import uuid

from supabase import Client

from app.exceptions import StorageUploadError
from core.models import ImageRef
from core.services.staging import StagedFile

logger = logging.getLogger(__name__)


class AssetStore:
    """
    Client for the remote media host.

    upload() returns the public URL and asset id of the stored image;
    destroy() is idempotent from the caller's point of view.
    """

    def __init__(self, client: Client, bucket: str):
        self.client = client
        self.bucket = bucket

    def _bucket(self):
        return self.client.storage.from_(self.bucket)

    def upload(self, local_path: str, folder: str, content_type: str) -> ImageRef:
        """
        Upload a local file to the bucket.

        Args:
            local_path: Path of the staged file
            folder: Top-level folder inside the bucket ("products", "users")
            content_type: MIME type stored with the object

        Returns:
            ImageRef with the public URL and the asset id

        Raises:
            StorageUploadError: If the file can't be read or the host rejects it
        """
        extension = content_type.split("/", 1)[-1]
        asset_id = f"{folder}/{uuid.uuid4().hex}.{extension}"

        try:
            with open(local_path, "rb") as fh:
                content = fh.read()

            self._bucket().upload(
                path=asset_id,
                file=content,
                file_options={"content-type": content_type, "upsert": "false"},
            )
            url = self._bucket().get_public_url(asset_id).rstrip("?")

        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(str(e))

        logger.info(f"Uploaded image to storage: {asset_id}")
        return ImageRef(image_url=url, public_id=asset_id)

    def store_staged(self, staged: StagedFile, folder: str) -> ImageRef:
        """
        Upload a staged file, then remove it from local disk.

        The local file is only removed after the upload succeeds; on
        failure it is left for the caller's cleanup path.
        """
        image = self.upload(staged.path, folder, staged.content_type)
        staged.discard()
        return image

    def discard_quietly(self, image: ImageRef | None) -> None:
        """Best-effort removal of an image a failed write left behind."""
        if image is not None:
            logger.warning(f"Rolling back uploaded image: {image.public_id}")
            self.destroy(image.public_id)

    def destroy(self, asset_id: str) -> bool:
        """
        Delete an image from the bucket.

        Returns:
            True if an object was removed, False if it was already gone
            or the host could not be reached
        """
        try:
            removed = self._bucket().remove([asset_id])
        except Exception as e:
            logger.error(f"Failed to delete image {asset_id}: {e}")
            return False

        if not removed:
            logger.info(f"Image already absent from storage: {asset_id}")
            return False

        logger.info(f"Deleted image from storage: {asset_id}")
        return True

    def ping(self) -> None:
        """Cheap round-trip used by readiness checks."""
        self.client.storage.get_bucket(self.bucket)
