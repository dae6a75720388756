# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase table wrapper (record stores)
# - security.py: bcrypt password hashing and JWT session tokens
# - utils.py: Shared normalization helpers
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import (
    SupabaseClientError,
    DuplicateKeyError,
    SupabaseTable,
    create_supabase_client,
)
from lib.security import PasswordHasher, TokenService, TokenError
from lib.utils import normalize_email, clean_text, utc_now_iso

__all__ = [
    # Supabase
    "SupabaseClientError",
    "DuplicateKeyError",
    "SupabaseTable",
    "create_supabase_client",
    # Security
    "PasswordHasher",
    "TokenService",
    "TokenError",
    # Utils
    "normalize_email",
    "clean_text",
    "utc_now_iso",
]
