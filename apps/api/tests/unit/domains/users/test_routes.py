"""
Route tests for CEO-only user administration.
"""

import pytest

from src.core.database import get_db
from src.core.identity import get_identity
from src.main import app

USER_PAYLOAD = {
    "email": "nina@example.com",
    "password": "secret1",
    "name": "Nina",
    "role": "design",
}


@pytest.fixture
def wired(memory_db, mock_identity):
    app.dependency_overrides[get_db] = lambda: memory_db
    app.dependency_overrides[get_identity] = lambda: mock_identity
    return memory_db


class TestCreateUserRoute:
    def test_non_ceo_is_forbidden_and_nothing_is_created(
        self, client, wired, mock_identity, auth_headers
    ):
        wired.rpc_handlers["is_ceo"] = lambda params: False

        response = client.post("/api/v1/users", json=USER_PAYLOAD, headers=auth_headers)

        assert response.status_code == 403
        assert response.json()["detail"] == "Only the CEO can manage users"
        mock_identity.create_user.assert_not_awaited()
        assert wired.rows("profiles") == []
        assert wired.rows("user_roles") == []

    def test_predicate_checked_for_the_caller(self, client, wired, auth_headers, test_auth_id):
        wired.rpc_handlers["is_ceo"] = lambda params: False

        client.post("/api/v1/users", json=USER_PAYLOAD, headers=auth_headers)

        assert ("is_ceo", {"_user_id": test_auth_id}) in wired.rpc_calls

    def test_missing_token(self, client, wired):
        response = client.post("/api/v1/users", json=USER_PAYLOAD)

        assert response.status_code == 401

    def test_ceo_creates_user(self, client, wired, auth_headers):
        wired.rpc_handlers["is_ceo"] = lambda params: True

        response = client.post("/api/v1/users", json=USER_PAYLOAD, headers=auth_headers)

        assert response.status_code == 201
        assert response.json()["user"]["id"] == "new-user-id"
        assert len(wired.rows("user_roles")) == 1

    def test_short_password_is_rejected(self, client, wired, auth_headers):
        wired.rpc_handlers["is_ceo"] = lambda params: True

        response = client.post(
            "/api/v1/users",
            json={**USER_PAYLOAD, "password": "123"},
            headers=auth_headers,
        )

        assert response.status_code == 422


class TestDeleteUserRoute:
    def test_ceo_target_is_protected(self, client, wired, auth_headers):
        wired.rpc_handlers["is_ceo"] = lambda params: True

        response = client.delete("/api/v1/users/other-ceo", headers=auth_headers)

        assert response.status_code == 403

    def test_delete(self, client, wired, mock_identity, auth_headers, test_auth_id):
        wired.rpc_handlers["is_ceo"] = lambda params: params["_user_id"] == test_auth_id

        response = client.delete("/api/v1/users/u-9", headers=auth_headers)

        assert response.status_code == 200
        mock_identity.delete_user.assert_awaited_once_with("u-9")
