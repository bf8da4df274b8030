"""Tests for sign-up, login and bearer-token resolution."""
import uuid

from eventhub.security import create_access_token, hash_password, verify_password
from tests.conftest import auth_headers, create_test_user


class TestRegister:
    """POST /api/auth/register."""

    def test_register_defaults_to_attendee(self, client):
        data = create_test_user(client, name="Alice")
        assert data["user"]["role"] == "attendee"
        assert data["user"]["email"] == "alice@example.com"
        assert data["token"]

    def test_register_organizer(self, client):
        data = create_test_user(client, name="Olivia", role="organizer")
        assert data["user"]["role"] == "organizer"

    def test_register_duplicate_email(self, client):
        create_test_user(client, name="Alice")
        resp = client.post("/api/auth/register", json={
            "name": "Alice Again",
            "email": "alice@example.com",
            "password": "password123",
        })
        assert resp.status_code == 400
        assert resp.json() == {
            "success": False,
            "message": None,
            "data": None,
            "error": "User with this email already exists",
            "count": None,
        }

    def test_register_rejects_short_password(self, client):
        resp = client.post("/api/auth/register", json={
            "name": "Bob",
            "email": "bob@example.com",
            "password": "123",
        })
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_register_rejects_unknown_role(self, client):
        resp = client.post("/api/auth/register", json={
            "name": "Mallory",
            "email": "mallory@example.com",
            "password": "password123",
            "role": "admin",
        })
        assert resp.status_code == 400


class TestLogin:
    """POST /api/auth/login."""

    def test_login_success(self, client):
        create_test_user(client, name="Alice")
        resp = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "password123"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["data"]["user"]["name"] == "Alice"
        assert body["data"]["token"]

    def test_login_wrong_password(self, client):
        create_test_user(client, name="Alice")
        resp = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong-pass"})
        assert resp.status_code == 401
        assert resp.json()["error"] == "Invalid email or password"

    def test_login_unknown_email(self, client):
        resp = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "password123"})
        assert resp.status_code == 401


class TestPrincipalResolution:
    """Bearer token → Principal, via GET /api/auth/me."""

    def test_me(self, client):
        user = create_test_user(client, name="Alice", role="organizer")
        resp = client.get("/api/auth/me", headers=auth_headers(user))
        assert resp.status_code == 200
        me = resp.json()["data"]["user"]
        assert me["user_id"] == user["user"]["user_id"]
        assert me["role"] == "organizer"

    def test_missing_token(self, client):
        resp = client.get("/api/auth/me")
        assert resp.status_code == 401
        assert resp.json()["error"] == "No token provided"

    def test_garbage_token(self, client):
        resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401
        assert resp.json()["error"] == "Invalid or expired token"

    def test_expired_token(self, client):
        user = create_test_user(client, name="Alice")
        token = create_access_token(user["user"]["user_id"], expires_minutes=-1)
        resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json()["error"] == "Invalid or expired token"

    def test_token_for_vanished_user(self, client):
        token = create_access_token(str(uuid.uuid4()))
        resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json()["error"] == "User not found"


def test_password_hash_roundtrip():
    hashed = hash_password("s3cret-pass")
    assert hashed != "s3cret-pass"
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("other", hashed)
    assert not verify_password("s3cret-pass", "not-a-bcrypt-hash")
