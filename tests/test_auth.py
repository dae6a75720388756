# =============================================================================
# tests/test_auth.py - Authentication Gate Tests
# =============================================================================
# One test per gate outcome. The protected route used throughout is
# DELETE /products/delete/{id}; "handler not invoked" is checked by the
# product still existing and no image being destroyed.
# =============================================================================

import pytest

from lib.security import TokenService
from tests.conftest import TEST_SECRET, image_upload, login_user


@pytest.fixture
def product_id(client, auth_headers, sample_product_form, context):
    response = client.post(
        "/products/create",
        data=sample_product_form,
        files=image_upload("productImage"),
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.json()["data"]["id"]


def assert_untouched(context, product_id):
    assert product_id in context.products.rows
    assert context.assets.destroyed == []


class TestGateOutcomes:

    def test_missing_header(self, client, context, product_id):
        response = client.delete(f"/products/delete/{product_id}")

        assert response.status_code == 404
        assert response.json()["message"].startswith("Missing token")
        assert_untouched(context, product_id)

    def test_header_without_token(self, client, context, product_id):
        response = client.delete(
            f"/products/delete/{product_id}",
            headers={"Authorization": "Bearer"},
        )

        assert response.status_code == 404
        assert response.json()["message"].startswith("Missing token")
        assert_untouched(context, product_id)

    def test_bad_signature(self, client, context, product_id, registered_user):
        forged = TokenService(secret="some-other-secret-key").issue(registered_user["id"], True, 0)

        response = client.delete(
            f"/products/delete/{product_id}",
            headers={"Authorization": f"Bearer {forged}"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Session expired, please login to continue"
        assert_untouched(context, product_id)

    def test_expired_token(self, client, context, product_id, registered_user):
        expired = TokenService(secret=TEST_SECRET, expire_minutes=-1).issue(registered_user["id"], True, 0)

        response = client.delete(
            f"/products/delete/{product_id}",
            headers={"Authorization": f"Bearer {expired}"},
        )

        assert response.status_code == 400
        assert_untouched(context, product_id)

    def test_unknown_account(self, client, context, product_id):
        token = TokenService(secret=TEST_SECRET).issue("no-such-user", True, 0)

        response = client.delete(
            f"/products/delete/{product_id}",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Account not found"
        assert_untouched(context, product_id)

    def test_token_for_logged_out_account(self, client, context, product_id, registered_user):
        # Account flag cleared after the token was issued
        token = TokenService(secret=TEST_SECRET).issue(registered_user["id"], True, 0)
        context.users.rows[registered_user["id"]]["is_logged_in"] = False

        response = client.delete(
            f"/products/delete/{product_id}",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Authentication failed: Account is not logged in"
        assert_untouched(context, product_id)

    def test_valid_token_passes(self, client, context, product_id, auth_headers):
        response = client.delete(f"/products/delete/{product_id}", headers=auth_headers)

        assert response.status_code == 200
        assert product_id not in context.products.rows


class TestSessionVersioning:

    def test_logout_invalidates_token(self, client, context, auth_headers, product_id):
        assert client.post("/users/logout", headers=auth_headers).status_code == 200

        response = client.delete(f"/products/delete/{product_id}", headers=auth_headers)

        assert response.status_code == 401
        assert_untouched(context, product_id)

    def test_old_token_stays_dead_after_new_login(self, client, context, auth_headers, product_id):
        client.post("/users/logout", headers=auth_headers)
        fresh = login_user(client).json()["token"]

        stale = client.delete(f"/products/delete/{product_id}", headers=auth_headers)
        assert stale.status_code == 401

        ok = client.delete(
            f"/products/delete/{product_id}",
            headers={"Authorization": f"Bearer {fresh}"},
        )
        assert ok.status_code == 200

    def test_logout_bumps_session_version(self, client, context, registered_user, auth_headers):
        client.post("/users/logout", headers=auth_headers)

        row = context.users.rows[registered_user["id"]]
        assert row["is_logged_in"] is False
        assert row["session_version"] == 1
