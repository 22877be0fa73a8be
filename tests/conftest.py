"""
Global test fixtures for Tupplur.

This module provides shared fixtures for all tests including:
- Mock MongoDB (mongomock-motor)
- Mock Redis (fakeredis)
- Key-value stores on both backends
- Registry / document store services and sample collections
- FastAPI app and async test client
"""

import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))


SUPER_USER_KEY = "SECRET"


# =============================================================================
# Sample Schemas
# =============================================================================

@pytest.fixture
def post_schema() -> dict:
    """Blog post schema with one sub-collection (``comments``)."""
    return {
        "type": "object",
        "properties": {
            "title": {"type": "string"},
            "views": {"type": "integer"},
            "draft": {"type": "boolean"},
            "tags": {"type": "array", "items": {"type": "string"}},
            "comments": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "text": {"type": "string"},
                        "likes": {"type": "integer"},
                    },
                    "required": ["text"],
                },
            },
        },
        "required": ["title"],
    }


@pytest.fixture
def public_read_access() -> list[dict]:
    return [{"key": "public", "get": True}]


# =============================================================================
# MongoDB Fixtures (mongomock-motor)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_mongo_client():
    """
    Create an async mock MongoDB client using mongomock-motor.
    """
    try:
        from mongomock_motor import AsyncMongoMockClient
    except ImportError:
        pytest.skip("mongomock-motor not installed")
    client = AsyncMongoMockClient()
    yield client
    client.close()


# =============================================================================
# Redis Fixtures (fakeredis)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_redis():
    """
    Create an async mock Redis client using fakeredis.
    """
    try:
        import fakeredis.aioredis
    except ImportError:
        pytest.skip("fakeredis with aioredis not installed")
    redis_client = fakeredis.aioredis.FakeRedis(decode_responses=True)
    yield redis_client
    await redis_client.flushall()
    await redis_client.close()


# =============================================================================
# Key-Value Store Fixtures
# =============================================================================

@pytest.fixture
def mongo_kv_store(mock_async_mongo_client):
    """MongoKeyValueStore on an in-memory collection."""
    from tupplur.database.mongo_kv import MongoKeyValueStore
    return MongoKeyValueStore(mock_async_mongo_client["tupplur_test"]["kv"])


@pytest.fixture
def redis_kv_store(mock_async_redis):
    """RedisKeyValueStore on an in-memory server."""
    from tupplur.database.redis_kv import RedisKeyValueStore
    return RedisKeyValueStore(mock_async_redis, namespace="tupplur_test")


@pytest_asyncio.fixture(params=["mongo", "redis"])
async def kv_store(request):
    """
    The key-value store on each backend in turn.

    Tests using this fixture (directly or through the services) run once
    per backend.
    """
    if request.param == "mongo":
        from mongomock_motor import AsyncMongoMockClient
        from tupplur.database.mongo_kv import MongoKeyValueStore

        client = AsyncMongoMockClient()
        yield MongoKeyValueStore(client["tupplur_test"]["kv"])
        client.close()
    else:
        import fakeredis.aioredis
        from tupplur.database.redis_kv import RedisKeyValueStore

        redis_client = fakeredis.aioredis.FakeRedis(decode_responses=True)
        yield RedisKeyValueStore(redis_client, namespace="tupplur_test")
        await redis_client.flushall()
        await redis_client.close()


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def registry(kv_store):
    from tupplur.services.collection_registry import CollectionRegistry
    return CollectionRegistry(kv_store)


@pytest.fixture
def document_store(kv_store):
    from tupplur.services.document_store import DocumentStore
    return DocumentStore(kv_store)


@pytest_asyncio.fixture
async def posts(registry, post_schema, public_read_access):
    """A registered ``posts`` collection, publicly readable."""
    return await registry.create("posts", post_schema, public_read_access)


# =============================================================================
# Access Control Fixtures
# =============================================================================

@pytest.fixture
def super_user_key() -> str:
    return SUPER_USER_KEY


@pytest.fixture
def access_control(super_user_key):
    from tupplur.core.security import AccessControl
    return AccessControl(super_user_key)


@pytest.fixture
def super_user_headers(super_user_key) -> dict:
    return {"Authorization": f"Bearer {super_user_key}"}


# =============================================================================
# FastAPI Fixtures
# =============================================================================

@pytest.fixture
def app(kv_store, access_control):
    """
    The FastAPI app wired to the in-memory store and a known super-user key.
    """
    from tupplur.database.connections import get_kv_store
    from tupplur.dependencies.auth import get_access_control
    from tupplur.main import app as fastapi_app

    async def _store():
        return kv_store

    fastapi_app.dependency_overrides[get_kv_store] = _store
    fastapi_app.dependency_overrides[get_access_control] = lambda: access_control
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client(app):
    """
    Create an async test client.

    Requests run on the test's event loop, next to the in-memory stores.
    """
    from httpx import AsyncClient, ASGITransport

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac
