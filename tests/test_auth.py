"""
Tests for bearer-token authentication and registration.
"""

import pytest

from tests.conftest import INTERN


@pytest.fixture
def intern_token(db):
    db.seed("users", {"id": INTERN["id"], "email": INTERN["email"], "name": "Intern", "role": "intern", "status": "active"})
    db.seed("intern_permissions", {"intern_id": INTERN["id"], "permissions": {"analytics_view": True, "reports_export": False}})
    db.auth.add_token("good-token", INTERN["id"], INTERN["email"])
    return "good-token"


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


class TestCurrentUser:

    def test_missing_token(self, client):
        response = client.get("/api/v1/auth/me")
        assert response.status_code == 401
        assert response.json() == {"ok": False, "error": "Not authenticated"}

    def test_invalid_token(self, client, intern_token):
        response = client.get("/api/v1/auth/me", headers=_bearer("forged"))
        assert response.status_code == 401
        assert response.json()["error"] == "Not authenticated"

    def test_me_includes_role_and_permission_keys(self, client, intern_token):
        response = client.get("/api/v1/auth/me", headers=_bearer(intern_token))
        assert response.status_code == 200
        body = response.json()
        assert body["role"] == "intern"
        assert body["permissions"] == ["analytics_view"]

    def test_token_lookups_are_cached(self, client, db, intern_token):
        client.get("/api/v1/auth/me", headers=_bearer(intern_token))
        client.get("/api/v1/auth/me", headers=_bearer(intern_token))
        assert db.auth.get_user_calls == 1

    def test_logout_drops_cached_token(self, client, db, intern_token):
        client.get("/api/v1/auth/me", headers=_bearer(intern_token))
        response = client.post("/api/v1/auth/logout", headers=_bearer(intern_token))
        assert response.status_code == 200
        client.get("/api/v1/auth/me", headers=_bearer(intern_token))
        assert db.auth.get_user_calls == 2

    def test_invalid_token_on_public_route_is_anonymous(self, client):
        response = client.get("/api/v1/chapters", headers=_bearer("forged"))
        assert response.status_code == 200


class TestRegister:

    def test_register_creates_pending_volunteer(self, client, db):
        response = client.post("/api/v1/auth/register", json={
            "email": "new@school.org", "password": "s3cret-pass", "name": "New Volunteer",
        })
        assert response.status_code == 201
        [user] = db.rows("users")
        assert user["role"] == "volunteer"
        assert user["status"] == "pending"
        assert user["user_category"] == "volunteer"

    def test_register_twice(self, client, db):
        payload = {"email": "new@school.org", "password": "s3cret-pass"}
        client.post("/api/v1/auth/register", json=payload)
        response = client.post("/api/v1/auth/register", json=payload)
        assert response.status_code == 400
        assert response.json()["error"] == "User already exists"

    def test_register_validates_email(self, client):
        response = client.post("/api/v1/auth/register", json={"email": "nope", "password": "x"})
        assert response.status_code == 400
        assert response.json()["error"].startswith("email:")
