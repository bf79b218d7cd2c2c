"""Authentication flow tests: register, login, /me."""

from copydrive.db.redis_db import RedisKeyPrefix
from copydrive.repositories import credit_repository, workspace_repository

BASE = "/api/v1/auth"
EMAIL = "Maria@Example.com"
PASSWORD = "segredo123"


def register(client, email: str = EMAIL, password: str = PASSWORD, name: str = "Maria"):
    return client.post(f"{BASE}/register", json={"email": email, "password": password, "name": name})


def test_auth_flow(client, db_session, redis_cache):
    """Register, log in and read /me with the issued token."""
    # 1. Register
    response = register(client)
    assert response.status_code == 200, f"Registration failed: {response.json()}"
    user_data = response.json()
    assert user_data["email"] == "maria@example.com"
    assert user_data["credits"] == 10.0
    assert workspace_repository.is_member(db_session, user_data["workspace_id"], user_data["id"])
    assert credit_repository.get_balance(db_session, user_data["workspace_id"]) == 10.0

    # 2. Login
    response = client.post(f"{BASE}/login", json={"email": EMAIL, "password": PASSWORD})
    assert response.status_code == 200, f"Login failed: {response.json()}"
    token = response.json()["access_token"]
    assert response.json()["token_type"] == "bearer"

    # 3. /me
    response = client.get(f"{BASE}/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200, f"Token verification failed: {response.json()}"
    assert response.json()["id"] == user_data["id"]
    assert redis_cache.exists(RedisKeyPrefix.user_key(user_data["id"]))

    # 4. Duplicate registration
    response = register(client, email="maria@example.com")
    assert response.status_code == 400
    assert response.json()["fields"] == ["email"]


class TestRegisterValidation:
    def test_short_password(self, client):
        response = register(client, password="123")

        assert response.status_code == 400
        assert "password" in response.json()["fields"]

    def test_invalid_email(self, client):
        response = register(client, email="not-an-email")

        assert response.status_code == 400
        assert "email" in response.json()["fields"]

    def test_free_credit_transaction_written(self, client, db_session):
        workspace_id = register(client).json()["workspace_id"]

        transactions = credit_repository.list_transactions(db_session, workspace_id)
        assert [(t.transaction_type, t.amount) for t in transactions] == [("credit", 10.0)]


class TestLogin:
    def test_wrong_password(self, client):
        register(client)

        response = client.post(f"{BASE}/login", json={"email": EMAIL, "password": "errada"})

        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"

    def test_unknown_email(self, client):
        response = client.post(f"{BASE}/login", json={"email": "ghost@example.com", "password": PASSWORD})

        assert response.status_code == 401

    def test_me_without_token(self, client):
        response = client.get(f"{BASE}/me")

        assert response.status_code == 401
