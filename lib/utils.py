# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Small normalization helpers used by the entity workflows.
# =============================================================================

from datetime import datetime, timezone


def normalize_email(value: str) -> str:
    """
    Normalize an email address for storage and lookup.

    Emails are unique case-insensitively, so they are always stored
    trimmed and lowercased.

    Example:
        normalize_email("  Ada@Example.COM ")  # "ada@example.com"
    """
    return value.strip().lower()


def clean_text(value: str | None) -> str | None:
    """
    Trim a free-text field.

    Returns None for missing or blank values so callers can treat
    "not provided" and "empty" the same way.
    """
    if value is None:
        return None
    value = value.strip()
    return value or None


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string (for updated_at columns)."""
    return datetime.now(timezone.utc).isoformat()
