# =============================================================================
# core/models/user.py - User Schemas
# =============================================================================
# These models define the contract for user operations:
# - User: a stored account (password hash never serialized)
# - UserCreate / UserUpdate: validated registration and update input
# - LoginRequest: credentials for POST /users/login
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, Field

from .common import CatalogModel, ImageRef


class User(CatalogModel):
    """
    A registered account as stored in the users table.

    The login-state flag and session version are embedded in every issued
    token; a token is only honoured while both still match.
    """

    id: str = Field(..., description="Unique user identifier")

    full_name: str = Field(..., description="Full name")

    # Always stored trimmed and lowercased
    email: str = Field(..., description="Email address (unique)")

    # bcrypt hash; excluded from every serialization
    password: str = Field(default="", exclude=True, repr=False)

    age: int = Field(..., ge=0, description="Age in years")

    phone_number: str = Field(..., description="Phone number (unique)")

    profile_picture: ImageRef | None = Field(
        default=None,
        description="Profile picture held by the media host"
    )

    is_logged_in: bool = Field(default=False, description="Login-state flag")

    session_version: int = Field(
        default=0,
        ge=0,
        description="Incremented at logout to invalidate issued tokens"
    )

    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserCreate(BaseModel):
    """Registration input (after form parsing)."""
    full_name: str
    email: str
    password: str
    age: int
    phone_number: str


class UserUpdate(BaseModel):
    """Partial update input; None means keep the stored value."""
    full_name: str | None = None
    age: int | None = None


class LoginRequest(BaseModel):
    """Credentials for login."""
    email: str = Field(..., examples=["ada@example.com"])
    password: str = Field(..., examples=["correct horse battery staple"])
