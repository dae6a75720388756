# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides the bearer-token gate for protected routes.
#
# Usage:
#   from app.auth import authenticate, TokenClaims
#
#   @router.delete("/delete/{id}")
#   async def delete(id: str, claims: TokenClaims = Depends(authenticate)):
#       ...
# =============================================================================

from app.auth.dependencies import authenticate
from app.auth.models import TokenClaims

__all__ = [
    "authenticate",
    "TokenClaims",
]
