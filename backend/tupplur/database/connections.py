"""
Database connection management for MongoDB and Redis.
"""
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient
from redis.asyncio import Redis

from tupplur.config import get_settings
from tupplur.database.kv_store import KeyValueStore
from tupplur.database.mongo_kv import MongoKeyValueStore
from tupplur.database.redis_kv import RedisKeyValueStore

# Global connection instances
_mongo_client: Optional[AsyncIOMotorClient] = None
_redis_client: Optional[Redis] = None
_kv_store: Optional[KeyValueStore] = None


async def get_mongo_client() -> AsyncIOMotorClient:
    """Get or create MongoDB client."""
    global _mongo_client
    if _mongo_client is None:
        settings = get_settings()
        _mongo_client = AsyncIOMotorClient(settings.mongo_uri)
    return _mongo_client


async def get_redis_client() -> Redis:
    """Get or create Redis client."""
    global _redis_client
    if _redis_client is None:
        settings = get_settings()
        _redis_client = Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            decode_responses=True,
        )
    return _redis_client


async def get_kv_store() -> KeyValueStore:
    """
    Get or create the key-value store for the configured backend.

    The store is built once per process and shared by every request.
    """
    global _kv_store
    if _kv_store is None:
        settings = get_settings()
        if settings.kv_backend == "redis":
            client = await get_redis_client()
            _kv_store = RedisKeyValueStore(client, settings.redis_namespace)
        else:
            client = await get_mongo_client()
            collection = client[settings.mongo_db_name][settings.mongo_kv_collection]
            _kv_store = MongoKeyValueStore(collection)
    return _kv_store


async def close_connections():
    """Close all database connections."""
    global _mongo_client, _redis_client, _kv_store

    _kv_store = None

    if _mongo_client is not None:
        _mongo_client.close()
        _mongo_client = None

    if _redis_client is not None:
        await _redis_client.close()
        _redis_client = None
