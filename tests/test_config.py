# =============================================================================
# tests/test_config.py - Settings Tests
# =============================================================================

import pytest
from pydantic import ValidationError

from app.config import Settings


class TestSettings:

    def test_defaults(self):
        settings = Settings()

        assert settings.API_PORT == 1230
        assert settings.UPLOAD_DIR == "./images"
        assert settings.STORAGE_BUCKET == "images"
        assert settings.PRODUCT_DESCRIPTION_UNIQUE is False
        assert settings.max_upload_size_bytes == 10 * 1024 * 1024

    def test_cors_origins_list(self):
        settings = Settings(CORS_ORIGINS="http://localhost:3000, https://shop.test ,")
        assert settings.cors_origins_list == ["http://localhost:3000", "https://shop.test"]

    def test_environment_flags(self):
        settings = Settings(ENVIRONMENT="production")

        assert settings.is_production
        assert not settings.is_development

    def test_short_secret_rejected(self):
        with pytest.raises(ValidationError):
            Settings(JWT_SECRET="short")

    def test_unknown_environment_rejected(self):
        with pytest.raises(ValidationError):
            Settings(ENVIRONMENT="qa")

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("MAX_UPLOAD_SIZE_MB", "2")
        monkeypatch.setenv("PRODUCT_DESCRIPTION_UNIQUE", "true")

        settings = Settings()

        assert settings.max_upload_size_bytes == 2 * 1024 * 1024
        assert settings.PRODUCT_DESCRIPTION_UNIQUE is True
