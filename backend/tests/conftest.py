"""
pytest configuration file

This file contains shared fixtures for all tests.
"""

import os

# Must be set before copydrive.settings is imported
os.environ["ENVIRONMENT"] = "test"
os.environ["REDIS_TYPE"] = "fake"
os.environ.setdefault("AI_GATEWAY_API_KEY", "test-key")

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import fakeredis  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from copydrive.components.ai_gateway import AIGatewayClient, get_ai_gateway  # noqa: E402
from copydrive.db import redis_cache as redis_cache_module  # noqa: E402
from copydrive.db.database import get_db  # noqa: E402
from copydrive.db.models import Base  # noqa: E402
from copydrive.db.redis_cache import RedisCache  # noqa: E402
from copydrive.main import app  # noqa: E402
from copydrive.repositories import credit_repository, user_repository, workspace_repository  # noqa: E402
from copydrive.services.auth_service import create_access_token, get_password_hash  # noqa: E402

from helpers import TEST_MODEL  # noqa: E402


@pytest.fixture
def db_session():
    """Create an in-memory SQLite database for testing."""
    # StaticPool: TestClient runs the app in another thread, both must see the same database
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def fake_redis_client():
    """
    Create a fakeredis client for unit tests.

    This provides an in-memory Redis implementation that allows
    unit tests to run without a real Redis server.
    """
    server = fakeredis.FakeServer()
    client = fakeredis.FakeRedis(server=server, decode_responses=True)
    yield client
    client.close()


@pytest.fixture(autouse=True)
def redis_cache(monkeypatch, fake_redis_client) -> RedisCache:
    """Fresh cache per test, installed as the get_redis_cache() singleton."""
    cache = RedisCache(client=fake_redis_client)
    monkeypatch.setattr(redis_cache_module, "_redis_cache", cache)
    return cache


@pytest.fixture
def gateway() -> MagicMock:
    """AI gateway double; tests set complete_with_tool.return_value / side_effect."""
    mock = MagicMock(spec=AIGatewayClient)
    mock.model = TEST_MODEL
    mock.complete_with_tool = AsyncMock()
    return mock


@pytest.fixture
def client(db_session: Session, gateway: MagicMock):
    """TestClient wired to the test database and the gateway double."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_gateway] = lambda: gateway
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session: Session):
    """Factory: user with a personal workspace holding ``credits``."""

    def _make_user(email: str = "ana@example.com", credits: float = 10.0, is_admin: bool = False):
        user = user_repository.create_user(
            db_session,
            name=email.split("@")[0],
            email=email,
            hashed_password=get_password_hash("secret123"),
            is_admin=is_admin,
        )
        workspace = workspace_repository.create_workspace(db_session, owner=user, name=f"{user.name} workspace")
        if credits > 0:
            credit_repository.add_workspace_credits(db_session, workspace.id, credits)
        return user, workspace

    return _make_user


@pytest.fixture
def auth_headers():
    """Factory: Authorization header for a user."""

    def _auth_headers(user) -> dict:
        return {"Authorization": f"Bearer {create_access_token({'sub': user.id})}"}

    return _auth_headers
