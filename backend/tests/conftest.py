"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import pytest
from datetime import datetime, timezone, timedelta
from typing import Callable
import jwt  # PyJWT
from fastapi.testclient import TestClient

import api.dependencies as dependencies
from api.dependencies import ServiceContainer, reset_container
from shared.config import Settings


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"


def _make_settings(**overrides) -> Settings:
    values = {
        "jwt_secret": TEST_JWT_SECRET,
        "store_backend": "memory",
        "bcrypt_rounds": 4,  # bcrypt minimum, keeps the suite fast
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture(autouse=True)
def reset_service_container():
    """Reset the service container before and after each test."""
    reset_container()
    yield
    reset_container()


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    """Build Settings for an in-memory store with a test secret."""
    return _make_settings


@pytest.fixture
def test_settings() -> Settings:
    return _make_settings()


@pytest.fixture
def container(test_settings: Settings) -> ServiceContainer:
    """Install a container backed by an in-memory store as the app's container."""
    test_container = ServiceContainer(test_settings)
    dependencies._container = test_container
    return test_container


@pytest.fixture
def client(container: ServiceContainer):
    """TestClient with the lifespan running against the test container."""
    from api import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_token() -> Callable[..., str]:
    """
    Factory for hand-built session tokens.

    Args (of the returned callable):
        user_id: Subject to embed
        expired: If True, the expiry is an hour in the past
        secret: Signing secret, the test secret by default
    """

    def _make_token(
        user_id: str = "test-user-123",
        expired: bool = False,
        secret: str = TEST_JWT_SECRET,
    ) -> str:
        now = datetime.now(timezone.utc)
        issued = now - timedelta(days=8) if expired else now
        exp = now - timedelta(hours=1) if expired else now + timedelta(days=7)
        payload = {
            "sub": user_id,
            "iat": int(issued.timestamp()),
            "exp": int(exp.timestamp()),
        }
        return jwt.encode(payload, secret, algorithm="HS256")

    return _make_token


@pytest.fixture
def registration() -> dict[str, str]:
    """A valid registration body."""
    return {"name": "Ann", "email": "Ann@X.com", "password": "Password1"}


@pytest.fixture
def registered(client: TestClient, registration: dict[str, str]) -> dict:
    """Register the default user through the API and return the response body."""
    response = client.post("/api/auth/register", json=registration)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def auth_headers(registered: dict) -> dict[str, str]:
    """Authorization headers for the registered user."""
    return {"Authorization": f"Bearer {registered['token']}"}
