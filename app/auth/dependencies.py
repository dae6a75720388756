# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# The authentication gate for protected routes. Each request ends in exactly
# one outcome:
#
#   no Authorization header             -> 404 missing token
#   header without a second segment      -> 404 missing token
#   bad signature / expired token        -> 400 session expired
#   subject doesn't resolve to a user    -> 404 account not found
#   login flag or session version differ -> 401 not logged in
#   otherwise                            -> claims attached, handler runs
#
# Usage:
#   from app.auth import authenticate, TokenClaims
#
#   @router.get("/protected")
#   async def protected(claims: TokenClaims = Depends(authenticate)):
#       return {"user_id": claims.user_id}
# =============================================================================

import logging
from typing import Annotated

from fastapi import Header, Request, status

from app.auth.models import TokenClaims
from app.dependencies import ContextDep
from app.exceptions import AuthenticationError
from core.models import User
from lib.security import TokenError

logger = logging.getLogger(__name__)


def _extract_token(authorization: str | None) -> str:
    """Pull the token out of 'Bearer <token>'."""
    if not authorization:
        raise AuthenticationError(
            message="Missing token: authorization header not passed",
            code="TOKEN_MISSING",
            status_code=status.HTTP_404_NOT_FOUND,
        )

    parts = authorization.split(" ")
    token = parts[1].strip() if len(parts) > 1 else ""
    if not token:
        raise AuthenticationError(
            message="Missing token: bearer token not found",
            code="TOKEN_MISSING",
            status_code=status.HTTP_404_NOT_FOUND,
        )
    return token


async def authenticate(
    request: Request,
    context: ContextDep,
    authorization: Annotated[str | None, Header()] = None,
) -> TokenClaims:
    """
    Validate the bearer token and the account's session state.

    This dependency:
    1. Extracts the token from the Authorization header
    2. Verifies the JWT signature and expiry
    3. Loads the account named by the token's subject
    4. Compares the token's login flag and session version with the account
    5. Stores the claims on request.state.user and returns them

    Raises:
        AuthenticationError: 404/400/401 depending on which check failed
    """
    token = _extract_token(authorization)

    try:
        payload = context.tokens.decode(token)
    except TokenError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise AuthenticationError(
            message="Session expired, please login to continue",
            code="SESSION_EXPIRED",
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    claims = TokenClaims.model_validate(payload)

    row = context.users.fetch_by_id(claims.sub)
    if not row:
        logger.warning(f"Token subject has no account: {claims.sub}")
        raise AuthenticationError(
            message="Account not found",
            code="ACCOUNT_NOT_FOUND",
            status_code=status.HTTP_404_NOT_FOUND,
        )

    user = User.model_validate(row)
    if (
        user.is_logged_in != claims.is_logged_in
        or user.session_version != claims.session_version
    ):
        logger.warning(
            f"Stale token for user {user.id}: token session {claims.session_version}, "
            f"account session {user.session_version}, logged_in={user.is_logged_in}"
        )
        raise AuthenticationError(
            message="Authentication failed: Account is not logged in",
            code="NOT_LOGGED_IN",
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    request.state.user = claims
    logger.debug(f"Authenticated user: {user.id}")
    return claims
