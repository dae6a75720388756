# =============================================================================
# tests/test_uploads.py - Image Staging Tests
# =============================================================================
# Covers the staging rules (image/* only, size cap, generated names) and
# the guarantee that staged files never outlive their request.
# =============================================================================

import asyncio
import io
import os
import re

import pytest
from starlette.datastructures import Headers, UploadFile

from app.exceptions import FileTooLargeError, InvalidFileTypeError
from app.uploads import stage_upload, staged_filename
from core.services.staging import StagedFile
from tests.conftest import image_upload, register_user


def make_upload(data: bytes, filename: str = "photo.jpg", content_type: str = "image/jpeg") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


class TestStagedFilename:

    def test_format(self):
        name = staged_filename("image/jpeg")
        assert re.fullmatch(r"IMG_\d+_\d+\.jpeg", name)

    def test_extension_from_subtype(self):
        assert staged_filename("image/svg+xml").endswith(".svg+xml")
        assert staged_filename("image/png").endswith(".png")

    def test_unsafe_characters_dropped(self):
        name = staged_filename("image/../../etc")
        assert "/" not in name
        assert name.startswith("IMG_")


class TestStageUpload:

    def test_writes_file(self, tmp_path):
        staged = asyncio.run(stage_upload(make_upload(b"abc"), str(tmp_path), 1024))

        assert os.path.dirname(staged.path) == str(tmp_path)
        assert staged.content_type == "image/jpeg"
        assert staged.size == 3
        with open(staged.path, "rb") as fh:
            assert fh.read() == b"abc"

    def test_rejects_non_image(self, tmp_path):
        upload = make_upload(b"%PDF", filename="doc.pdf", content_type="application/pdf")

        with pytest.raises(InvalidFileTypeError):
            asyncio.run(stage_upload(upload, str(tmp_path), 1024))
        assert os.listdir(tmp_path) == []

    def test_content_type_parameters_ignored(self, tmp_path):
        upload = make_upload(b"abc", content_type="Image/PNG; charset=binary")
        staged = asyncio.run(stage_upload(upload, str(tmp_path), 1024))
        assert staged.path.endswith(".png")

    def test_size_cap_removes_partial_file(self, tmp_path):
        with pytest.raises(FileTooLargeError):
            asyncio.run(stage_upload(make_upload(b"x" * 2048), str(tmp_path), 1024))
        assert os.listdir(tmp_path) == []

    def test_creates_missing_directory(self, tmp_path):
        target = tmp_path / "nested" / "images"
        staged = asyncio.run(stage_upload(make_upload(b"abc"), str(target), 1024))
        assert os.path.exists(staged.path)


class TestStagedFile:

    def test_discard_is_idempotent(self, tmp_path):
        path = tmp_path / "IMG_1_1.png"
        path.write_bytes(b"abc")
        staged = StagedFile(path=str(path), content_type="image/png", size=3)

        staged.discard()
        staged.discard()

        assert not path.exists()
        assert staged.discarded
        assert staged.extension == "png"


class TestStagingOverHttp:
    """Staged files are gone once the request finishes, whatever the outcome."""

    def test_non_image_rejected_with_400(self, client, upload_dir):
        response = client.post(
            "/users/register",
            data={
                "fullName": "Ada Lovelace",
                "email": "ada@example.com",
                "password": "analytical-engine",
                "age": "36",
                "phoneNumber": "+2348012345678",
            },
            files=image_upload("profilePicture", "notes.txt", "text/plain", b"hello"),
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid file format: Images only"
        assert os.listdir(upload_dir) == []

    def test_oversized_image_rejected(self, client, context, upload_dir):
        context.settings.MAX_UPLOAD_SIZE_MB = 1
        big = b"\xff" * (1024 * 1024 + 1)

        response = client.post(
            "/users/register",
            data={
                "fullName": "Grace Hopper",
                "email": "grace@example.com",
                "password": "cobol-cobol",
                "age": "85",
                "phoneNumber": "+15550001111",
            },
            files=image_upload("profilePicture", "big.jpg", "image/jpeg", big),
        )

        assert response.status_code == 413
        assert os.listdir(upload_dir) == []

    def test_success_leaves_nothing_behind(self, client, upload_dir):
        assert register_user(client).status_code == 201
        assert os.listdir(upload_dir) == []

    def test_conflict_leaves_nothing_behind(self, client, upload_dir):
        assert register_user(client).status_code == 201
        assert register_user(client).status_code == 400
        assert os.listdir(upload_dir) == []

    def test_upload_failure_leaves_nothing_behind(self, client, context, upload_dir):
        context.assets.fail_uploads = True

        response = register_user(client)

        assert response.status_code == 500
        assert "media host unavailable" in response.json()["message"]
        assert os.listdir(upload_dir) == []
