# =============================================================================
# lib/supabase_client.py - Supabase Record Store Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase table operations.
# Each entity family (users, products) gets its own SupabaseTable instance,
# built once at startup and handed down through the application context
# instead of living in a module-level singleton.
#
# Unique constraints are enforced by the database; violations surface as
# DuplicateKeyError so callers can turn them into conflict responses.
#
# Usage:
#   client = create_supabase_client(url, key)
#   users = SupabaseTable(client, "users")
#   user = users.fetch_by_id("550e8400-...")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST / Postgres error codes we care about
NO_ROWS_CODE = "PGRST116"
UNIQUE_VIOLATION_CODE = "23505"
INVALID_TEXT_CODE = "22P02"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Carries the underlying error text so it can be surfaced to the caller.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class DuplicateKeyError(SupabaseClientError):
    """Raised when a write violates a unique constraint."""

    def __init__(self, table: str, error: str):
        super().__init__(
            message=f"Duplicate value in {table}: {error}",
            code="DUPLICATE_KEY",
            details={"table": table},
        )


def create_supabase_client(url: str, key: str) -> Client:
    """
    Create a Supabase client.

    Uses the service_role key which bypasses Row Level Security (RLS).
    This is appropriate for server-side operations.

    Raises:
        SupabaseClientError: If client creation fails
    """
    try:
        client = create_client(url, key)
        logger.info("Supabase client initialized successfully")
        return client
    except Exception as e:
        raise SupabaseClientError(
            message=f"Failed to create Supabase client: {e}",
            code="CLIENT_INIT_FAILED",
        )


def _error_code(error: Exception) -> str | None:
    code = getattr(error, "code", None)
    if isinstance(code, str):
        return code
    text = str(error)
    for known in (NO_ROWS_CODE, UNIQUE_VIOLATION_CODE, INVALID_TEXT_CODE):
        if known in text:
            return known
    return None


class SupabaseTable:
    """
    Record store for a single table.

    All rows are plain dicts keyed by column name. The table is expected
    to generate `id`, `created_at` and `updated_at` itself.

    Example:
        products = SupabaseTable(client, "products")
        existing = products.fetch_one("product_name", "Chicken Burger")
        if existing is None:
            row = products.insert({"product_name": "Chicken Burger", ...})
    """

    def __init__(self, client: Client, table: str):
        self.client = client
        self.table = table

    def _query(self):
        return self.client.table(self.table)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def fetch_by_id(self, record_id: str) -> dict[str, Any] | None:
        """
        Fetch a record by ID.

        Returns:
            Record dict, or None if not found (including malformed ids)

        Raises:
            SupabaseClientError: If query fails
        """
        return self.fetch_one("id", record_id)

    def fetch_one(self, column: str, value: Any) -> dict[str, Any] | None:
        """
        Fetch the first record whose `column` equals `value`.

        Raises:
            SupabaseClientError: If query fails
        """
        try:
            response = (
                self._query()
                .select("*")
                .eq(column, value)
                .limit(1)
                .execute()
            )
            rows = response.data or []
            return rows[0] if rows else None

        except Exception as e:
            if _error_code(e) in (NO_ROWS_CODE, INVALID_TEXT_CODE):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch from {self.table}: {e}",
                code="FETCH_FAILED",
                details={"table": self.table, "column": column},
            )

    def fetch_all(self) -> list[dict[str, Any]]:
        """
        Fetch every record, newest first.

        Raises:
            SupabaseClientError: If query fails
        """
        try:
            response = (
                self._query()
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
            rows = response.data or []
            logger.debug(f"Fetched {len(rows)} rows from {self.table}")
            return rows

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list {self.table}: {e}",
                code="FETCH_ALL_FAILED",
                details={"table": self.table},
            )

    def ping(self) -> None:
        """Cheap round-trip used by readiness checks."""
        self._query().select("id").limit(1).execute()

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def insert(self, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a new record.

        Returns:
            Inserted record with generated id and timestamps

        Raises:
            DuplicateKeyError: If a unique column already holds the value
            SupabaseClientError: If insert fails
        """
        try:
            response = self._query().insert(data).execute()
        except Exception as e:
            if _error_code(e) == UNIQUE_VIOLATION_CODE:
                raise DuplicateKeyError(self.table, str(e))
            raise SupabaseClientError(
                message=f"Failed to insert into {self.table}: {e}",
                code="INSERT_FAILED",
                details={"table": self.table},
            )

        if not response.data:
            raise SupabaseClientError(
                message=f"Insert into {self.table} returned no data",
                code="INSERT_NO_DATA",
            )
        return response.data[0]

    def update(self, record_id: str, data: dict[str, Any]) -> dict[str, Any] | None:
        """
        Update a record by ID.

        Returns:
            Updated record, or None if no record has that ID

        Raises:
            DuplicateKeyError: If the update collides with a unique column
            SupabaseClientError: If update fails
        """
        try:
            response = (
                self._query()
                .update(data)
                .eq("id", record_id)
                .execute()
            )
        except Exception as e:
            if _error_code(e) == UNIQUE_VIOLATION_CODE:
                raise DuplicateKeyError(self.table, str(e))
            raise SupabaseClientError(
                message=f"Failed to update {self.table}: {e}",
                code="UPDATE_FAILED",
                details={"table": self.table, "id": record_id},
            )

        rows = response.data or []
        return rows[0] if rows else None

    def delete(self, record_id: str) -> dict[str, Any] | None:
        """
        Delete a record by ID.

        Returns:
            The deleted record, or None if nothing was deleted

        Raises:
            SupabaseClientError: If delete fails
        """
        try:
            response = (
                self._query()
                .delete()
                .eq("id", record_id)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete from {self.table}: {e}",
                code="DELETE_FAILED",
                details={"table": self.table, "id": record_id},
            )

        rows = response.data or []
        return rows[0] if rows else None
