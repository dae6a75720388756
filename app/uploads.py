# =============================================================================
# app/uploads.py - Image Upload Staging
# =============================================================================
# Accepts an incoming multipart image, checks it, and writes it to the local
# upload directory under a generated name:
#
#   IMG_<unix-ms>_<random 0..1e9>.<mime subtype>
#
# Rules:
# - declared content type must start with "image/"
# - size is capped at MAX_UPLOAD_SIZE_MB (checked while streaming to disk)
#
# staged_image() builds a yield-dependency: whatever the handler does, the
# staged file is removed when the request finishes.
# =============================================================================

import logging
import os
import random
import re
import time
from typing import Annotated, AsyncIterator, Callable

from fastapi import File, UploadFile

from app.dependencies import ContextDep
from app.exceptions import FileTooLargeError, InvalidFileTypeError
from core.services.staging import StagedFile

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
STAGED_PREFIX = "IMG_"


def _normalize_content_type(content_type: str | None) -> str:
    """'Image/PNG; charset=x' -> 'image/png'"""
    return (content_type or "").split(";", 1)[0].strip().lower()


def staged_filename(content_type: str) -> str:
    """
    Generate a unique local filename for an image.

    The extension is the MIME subtype, restricted to filename-safe
    characters (image/svg+xml -> .svg+xml).
    """
    subtype = content_type.split("/", 1)[-1]
    subtype = re.sub(r"[^a-z0-9.+-]", "", subtype).strip(".") or "bin"
    suffix = f"{int(time.time() * 1000)}_{random.randint(0, 10**9)}"
    return f"{STAGED_PREFIX}{suffix}.{subtype}"


async def stage_upload(upload: UploadFile, upload_dir: str, max_bytes: int) -> StagedFile:
    """
    Write an uploaded image to the staging directory.

    Args:
        upload: Incoming multipart file
        upload_dir: Staging directory (created if missing)
        max_bytes: Size cap

    Returns:
        StagedFile pointing at the written file

    Raises:
        InvalidFileTypeError: Content type is not image/*
        FileTooLargeError: File exceeds max_bytes (partial file removed)
    """
    content_type = _normalize_content_type(upload.content_type)
    if not content_type.startswith("image/"):
        logger.warning(f"Rejected upload {upload.filename!r}: content type {content_type!r}")
        await upload.close()
        raise InvalidFileTypeError(upload.content_type)

    os.makedirs(upload_dir, exist_ok=True)
    path = os.path.join(upload_dir, staged_filename(content_type))

    size = 0
    try:
        with open(path, "wb") as out:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_bytes:
                    raise FileTooLargeError(max_bytes // (1024 * 1024))
                out.write(chunk)
    except Exception:
        if os.path.exists(path):
            os.remove(path)
        raise
    finally:
        await upload.close()

    logger.info(f"Staged upload {upload.filename!r} -> {path} ({size} bytes)")
    return StagedFile(
        path=path,
        content_type=content_type,
        size=size,
        original_filename=upload.filename,
    )


def staged_image(field_name: str, description: str) -> Callable[..., AsyncIterator[StagedFile | None]]:
    """
    Build a dependency staging the optional image in `field_name`.

    Yields None when the field is absent. The staged file is discarded
    when the request finishes, on success and failure alike.

    Usage:
        @router.post("/create")
        async def create(image: StagedFile | None = Depends(staged_image("productImage", "..."))):
            ...
    """

    async def _stage(
        context: ContextDep,
        upload: Annotated[
            UploadFile | None,
            File(alias=field_name, description=description),
        ] = None,
    ) -> AsyncIterator[StagedFile | None]:
        staged = None
        # Browsers send an empty part when no file was chosen
        if upload is not None and upload.filename:
            staged = await stage_upload(
                upload,
                upload_dir=context.settings.UPLOAD_DIR,
                max_bytes=context.settings.max_upload_size_bytes,
            )
        try:
            yield staged
        finally:
            if staged is not None:
                staged.discard()

    return _stage
