# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from pydantic import ConfigDict, Field

from core.models import CatalogModel


class TokenClaims(CatalogModel):
    """
    Decoded session token, attached to the request once the gate passes.

    Token payloads use camelCase claim names (isLoggedIn, sessionVersion).
    """

    sub: str = Field(..., description="User ID")
    is_logged_in: bool = Field(default=False, description="Login flag at issue time")
    session_version: int = Field(default=0, description="Session version at issue time")
    iat: int | None = None  # Issued at timestamp
    exp: int | None = None  # Expiration timestamp

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def user_id(self) -> str:
        return self.sub
