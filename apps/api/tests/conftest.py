"""
Global pytest configuration and fixtures for the operations dashboard API
test suite.
"""

import os
from typing import Any, Dict, Generator

# Set test environment variables before the application settings load
os.environ["JWT_SECRET"] = "test-secret-key-for-testing-only-32-chars"
os.environ.pop("SCHEDULED_CHECKS_SECRET", None)

import jwt  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from src.main import app  # noqa: E402

# Import fixtures from fixture modules
from tests.fixtures.auth_fixtures import *  # noqa: F403, F401, E402
from tests.fixtures.database_fixtures import *  # noqa: F403, F401, E402


@pytest.fixture
def test_jwt_secret() -> str:
    """JWT secret for generating test tokens."""
    return "test-secret-key-for-testing-only-32-chars"


@pytest.fixture
def valid_jwt_payload() -> Dict[str, Any]:
    """Valid JWT payload for testing."""
    return {
        "sub": "test-user-id-123",
        "email": "test@example.com",
        "aud": "authenticated",
        "iss": "supabase",
        "role": "authenticated",
    }


@pytest.fixture
def valid_jwt_token(test_jwt_secret: str, valid_jwt_payload: Dict[str, Any]) -> str:
    """Generate a valid JWT token for testing."""
    return jwt.encode(valid_jwt_payload, test_jwt_secret, algorithm="HS256")


@pytest.fixture
def auth_headers(valid_jwt_token: str) -> Dict[str, str]:
    """Generate authentication headers with valid JWT token."""
    return {"Authorization": f"Bearer {valid_jwt_token}"}


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """FastAPI test client; dependency overrides are cleared afterwards."""
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def test_auth_id() -> str:
    """Standard test auth ID."""
    return "test-user-id-123"
