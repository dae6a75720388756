# =============================================================================
# lib/security.py - Password Hashing and Session Tokens
# =============================================================================
# Two small capabilities used by the user workflow and the auth gate:
# - PasswordHasher: bcrypt one-way hashing and verification
# - TokenService: signed JWTs carrying the user id, the login-state flag
#   and the account's session version
#
# A token stays valid only while the account's is_logged_in flag and
# session_version match the values embedded at issue time.
# =============================================================================

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import jwt, JWTError

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


class TokenError(Exception):
    """Raised when a token fails signature, expiry or claim checks."""


class PasswordHasher:
    """bcrypt wrapper with a configurable cost factor."""

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """
        Hash a plaintext password.

        Raises:
            ValueError: If the password is longer than bcrypt accepts
        """
        raw = password.encode("utf-8")
        if len(raw) > BCRYPT_MAX_BYTES:
            raise ValueError(f"Password exceeds {BCRYPT_MAX_BYTES} bytes")
        return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, password: str, hashed: str) -> bool:
        """Check a plaintext password against a stored hash."""
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError as e:
            # Malformed stored hash or oversized password
            logger.warning(f"Password verification rejected: {e}")
            return False


class TokenService:
    """
    Issues and decodes session tokens.

    Claims:
        sub: user id
        isLoggedIn: login-state flag at issue time
        sessionVersion: account session version at issue time
        iat / exp: issue and expiry timestamps
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: int = 1440):
        self.secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, user_id: str, is_logged_in: bool, session_version: int) -> str:
        """Sign a token for the given account state."""
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "isLoggedIn": is_logged_in,
            "sessionVersion": session_version,
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        """
        Verify a token and return its claims.

        Raises:
            TokenError: If the signature is invalid, the token expired,
                or the subject claim is missing
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            raise TokenError(str(e)) from e

        if not payload.get("sub"):
            raise TokenError("Token missing 'sub' claim")
        return payload
