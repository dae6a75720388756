# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error response uses the same envelope as successful ones:
#   {"message": "...", "code": "..."}
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from lib.supabase_client import SupabaseClientError

logger = logging.getLogger(__name__)


class CatalogException(Exception):
    """
    Base exception for the Catalog API.

    All custom exceptions inherit from this class.
    Carries the HTTP status and the free-text message returned to the caller.
    """

    def __init__(
        self,
        message: str,
        code: str = "CATALOG_ERROR",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result: dict[str, Any] = {
            "message": self.message,
            "code": self.code,
        }
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Validation Exceptions
# =============================================================================

class ValidationFailedError(CatalogException):
    """Raised when a request field is present but invalid."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            details=details,
        )


class MissingFieldsError(CatalogException):
    """Raised when an update carries nothing to change."""

    def __init__(self):
        super().__init__(
            message="An input field is required",
            code="MISSING_FIELDS",
            status_code=400,
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidFileTypeError(CatalogException):
    """Raised when an uploaded file is not an image."""

    def __init__(self, content_type: str | None):
        super().__init__(
            message="Invalid file format: Images only",
            code="INVALID_FILE_TYPE",
            status_code=400,
            details={"content_type": content_type},
        )


class FileTooLargeError(CatalogException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, max_mb: int):
        super().__init__(
            message=f"File too large (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            details={"max_mb": max_mb},
        )


class MissingImageError(CatalogException):
    """Raised when a create request arrives without its image."""

    def __init__(self, field: str):
        super().__init__(
            message=f"{field} is required",
            code="MISSING_IMAGE",
            status_code=400,
            details={"field": field},
        )


class StorageUploadError(CatalogException):
    """Raised when pushing a staged file to the media bucket fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to upload image: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            details={"error": error},
        )


# =============================================================================
# User Exceptions
# =============================================================================

class UserNotFoundError(CatalogException):
    """Raised when a user ID (or email) doesn't exist."""

    def __init__(self, message: str = "User not found", user_ref: str | None = None):
        super().__init__(
            message=message,
            code="USER_NOT_FOUND",
            status_code=404,
            details={"user": user_ref} if user_ref else None,
        )


class UserAlreadyExistsError(CatalogException):
    """Raised when the email or phone number is already registered."""

    def __init__(self):
        super().__init__(
            message="User already exist",
            code="USER_EXISTS",
            status_code=400,
        )


class IncorrectPasswordError(CatalogException):
    """Raised when login credentials don't match."""

    def __init__(self):
        super().__init__(
            message="Incorrect password",
            code="INCORRECT_PASSWORD",
            status_code=400,
        )


# =============================================================================
# Product Exceptions
# =============================================================================

class ProductNotFoundError(CatalogException):
    """Raised when a product ID doesn't exist."""

    def __init__(self, product_id: str):
        super().__init__(
            message="Product not found",
            code="PRODUCT_NOT_FOUND",
            status_code=404,
            details={"product_id": product_id},
        )


class ProductAlreadyExistsError(CatalogException):
    """Raised when a product name (or description) is already taken."""

    def __init__(self, field: str):
        super().__init__(
            message="Product already exist",
            code="PRODUCT_EXISTS",
            status_code=400,
            details={"field": field},
        )


# =============================================================================
# Authentication Exceptions
# =============================================================================

class AuthenticationError(CatalogException):
    """Raised by the authentication gate; status varies per failure."""

    def __init__(self, message: str, code: str, status_code: int):
        super().__init__(message=message, code=code, status_code=status_code)


# =============================================================================
# Exception Handlers
# =============================================================================

async def catalog_exception_handler(
    request: Request,
    exc: CatalogException
) -> JSONResponse:
    """Convert CatalogException to JSON response."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def store_exception_handler(
    request: Request,
    exc: SupabaseClientError
) -> JSONResponse:
    """
    Handle record store failures.

    The underlying error text is surfaced to the caller.
    """
    logger.error(f"Record store failure on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "message": f"Internal Server Error: {exc.message}",
            "code": exc.code,
        }
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request validation errors.

    Missing or malformed form/body fields become a 400 with the
    offending field names in the message.
    """
    errors = exc.errors()
    fields = [
        str(err["loc"][-1])
        for err in errors
        if err.get("loc")
    ]
    message = "Validation error"
    if fields:
        message = f"Validation error: {', '.join(dict.fromkeys(fields))}"

    return JSONResponse(
        status_code=400,
        content={
            "message": message,
            "code": "VALIDATION_ERROR",
            "errors": [
                {"loc": list(err.get("loc", ())), "msg": err.get("msg")}
                for err in errors
            ],
        }
    )
