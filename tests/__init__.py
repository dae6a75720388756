# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Catalog API:
# - test_models.py: Pydantic model serialization
# - test_security.py: Password hashing and session tokens
# - test_supabase_client.py: Record store error translation
# - test_asset_service.py: Media bucket wrapper
# - test_uploads.py: Image staging rules and cleanup
# - test_auth.py: Authentication gate outcomes
# - test_products.py / test_users.py: Endpoint workflows
# - test_health.py, test_config.py
#
# Run tests with: pytest
# =============================================================================
