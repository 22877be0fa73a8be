"""
Backend-specific test fixtures and configuration.

These fixtures extend the global fixtures with helpers for exercising the
HTTP surface as different callers.
"""

import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "backend"))


# =============================================================================
# Caller Fixtures
# =============================================================================

@pytest.fixture
def bearer():
    """
    Build request headers carrying a bearer token.

    Usage in tests:
        response = await async_client.get("/api/posts", headers=bearer("abc"))
    """
    def _headers(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest_asyncio.fixture
async def posts_collection(async_client, super_user_headers, post_schema):
    """
    Register ``posts`` through the API.

    Public callers may read; the token ``writer`` may also create and
    modify documents.
    """
    response = await async_client.post(
        "/collections",
        json={
            "name": "posts",
            "schema": post_schema,
            "access": [
                {"key": "public", "get": True},
                {"key": "writer", "post": True, "put": True, "patch": True, "delete": True},
            ],
        },
        headers=super_user_headers,
    )
    assert response.status_code == 201
    return "posts"


# =============================================================================
# Response Assertion Helpers
# =============================================================================

@pytest.fixture
def assert_error_response():
    """Helper to assert error response structure."""
    def _assert(response, status_code: int, detail_contains: str = None):
        assert response.status_code == status_code
        data = response.json()
        assert "detail" in data
        if detail_contains:
            assert detail_contains.lower() in data["detail"].lower()
    return _assert
