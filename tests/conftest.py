# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - In-memory record store honouring unique columns
# - Recording media store (uploads / destroys)
# - A TestClient wired to an AppContext built from those fakes
# =============================================================================

import os
import uuid
from datetime import datetime, timezone
from typing import Any

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-tokens")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.context import AppContext
from core.models import ImageRef
from core.services.asset_service import AssetStore
from lib.security import PasswordHasher, TokenService
from lib.supabase_client import DuplicateKeyError, SupabaseClientError

TEST_SECRET = "test-secret-key-for-tokens"
MEDIA_HOST = "https://test-project.supabase.co/storage/v1/object/public/images"

# Smallest valid-looking JPEG header; content is never decoded
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 64


# =============================================================================
# Fakes
# =============================================================================

class InMemoryTable:
    """Stand-in for SupabaseTable with the same method surface."""

    def __init__(self, table: str, unique: tuple[str, ...] = ()):
        self.table = table
        self.unique = unique
        self.rows: dict[str, dict[str, Any]] = {}
        # Operation names ("insert", "update", ...) that should fail
        self.fail_on: set[str] = set()

    def _maybe_fail(self, op: str) -> None:
        if op in self.fail_on:
            raise SupabaseClientError(
                message=f"Failed to {op} {self.table}: connection refused",
                code=f"{op.upper()}_FAILED",
            )

    def _check_unique(self, data: dict[str, Any], exclude_id: str | None = None) -> None:
        for column in self.unique:
            if column not in data:
                continue
            for row_id, row in self.rows.items():
                if row_id != exclude_id and row.get(column) == data[column]:
                    raise DuplicateKeyError(self.table, f"duplicate key value violates unique constraint on {column}")

    def fetch_by_id(self, record_id: str) -> dict[str, Any] | None:
        self._maybe_fail("fetch")
        row = self.rows.get(record_id)
        return dict(row) if row else None

    def fetch_one(self, column: str, value: Any) -> dict[str, Any] | None:
        self._maybe_fail("fetch")
        for row in self.rows.values():
            if row.get(column) == value:
                return dict(row)
        return None

    def fetch_all(self) -> list[dict[str, Any]]:
        self._maybe_fail("fetch")
        return [dict(row) for row in reversed(list(self.rows.values()))]

    def insert(self, data: dict[str, Any]) -> dict[str, Any]:
        self._maybe_fail("insert")
        self._check_unique(data)
        now = datetime.now(timezone.utc).isoformat()
        row = {"id": str(uuid.uuid4()), "created_at": now, "updated_at": now, **data}
        self.rows[row["id"]] = row
        return dict(row)

    def update(self, record_id: str, data: dict[str, Any]) -> dict[str, Any] | None:
        self._maybe_fail("update")
        if record_id not in self.rows:
            return None
        self._check_unique(data, exclude_id=record_id)
        self.rows[record_id].update(data)
        return dict(self.rows[record_id])

    def delete(self, record_id: str) -> dict[str, Any] | None:
        self._maybe_fail("delete")
        return self.rows.pop(record_id, None)

    def ping(self) -> None:
        self._maybe_fail("ping")


class RecordingAssetStore(AssetStore):
    """AssetStore that keeps objects in memory and records every call."""

    def __init__(self):
        super().__init__(client=None, bucket="images")
        self.objects: dict[str, bytes] = {}
        self.uploads: list[dict[str, Any]] = []
        self.destroyed: list[str] = []
        self.fail_uploads = False

    def upload(self, local_path: str, folder: str, content_type: str) -> ImageRef:
        from app.exceptions import StorageUploadError

        if self.fail_uploads:
            raise StorageUploadError("media host unavailable")

        with open(local_path, "rb") as fh:
            content = fh.read()

        asset_id = f"{folder}/{uuid.uuid4().hex}.{content_type.split('/', 1)[-1]}"
        self.objects[asset_id] = content
        self.uploads.append({"local_path": local_path, "folder": folder, "asset_id": asset_id})
        return ImageRef(image_url=f"{MEDIA_HOST}/{asset_id}", public_id=asset_id)

    def destroy(self, asset_id: str) -> bool:
        self.destroyed.append(asset_id)
        return self.objects.pop(asset_id, None) is not None

    def ping(self) -> None:
        return None


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def upload_dir(tmp_path):
    """Staging directory for this test."""
    path = tmp_path / "staging"
    path.mkdir()
    return path


@pytest.fixture
def test_settings(upload_dir):
    """Settings pointing the staging directory at a temp folder."""
    return Settings(
        UPLOAD_DIR=str(upload_dir),
        BCRYPT_ROUNDS=4,
        JWT_SECRET=TEST_SECRET,
    )


@pytest.fixture
def context(test_settings):
    """AppContext backed by in-memory stores."""
    return AppContext(
        settings=test_settings,
        users=InMemoryTable("users", unique=("email", "phone_number")),
        products=InMemoryTable("products", unique=("product_name",)),
        assets=RecordingAssetStore(),
        hasher=PasswordHasher(rounds=4),
        tokens=TokenService(secret=TEST_SECRET),
    )


@pytest.fixture
def client(context):
    """TestClient for the app, using the in-memory context."""
    from app.main import app

    app.state.context = context
    yield TestClient(app)
    app.state.context = None


def image_upload(field: str, filename: str = "photo.jpg", content_type: str = "image/jpeg", data: bytes = JPEG_BYTES):
    """Build the `files` argument for a multipart request."""
    return {field: (filename, data, content_type)}


def register_user(client, **overrides):
    """POST /users/register with sensible defaults."""
    form = {
        "fullName": "Ada Lovelace",
        "email": "ada@example.com",
        "password": "analytical-engine",
        "age": "36",
        "phoneNumber": "+2348012345678",
    }
    form.update(overrides)
    return client.post(
        "/users/register",
        data=form,
        files=image_upload("profilePicture", "ada.png", "image/png"),
    )


def login_user(client, email="ada@example.com", password="analytical-engine"):
    """POST /users/login and return the response."""
    return client.post("/users/login", json={"email": email, "password": password})


@pytest.fixture
def registered_user(client):
    """A registered (not yet logged in) user, as returned by the API."""
    response = register_user(client)
    assert response.status_code == 201
    return response.json()["data"]


@pytest.fixture
def auth_headers(client, registered_user):
    """Authorization header for a logged-in user."""
    response = login_user(client)
    assert response.status_code == 200
    # Reset the recording log so setup uploads don't leak into test assertions
    context = client.app.state.context
    context.assets.uploads.clear()
    context.assets.destroyed.clear()
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def sample_product_form():
    """Form fields for the burger example."""
    return {
        "productName": "Chicken Burger",
        "price": "12.99",
        "description": "Juicy grilled chicken burger with fries",
    }
