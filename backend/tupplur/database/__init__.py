"""
Database module - key-value store contract, backends and connections.
"""
from tupplur.database.connections import (
    get_mongo_client,
    get_redis_client,
    get_kv_store,
    close_connections,
)
from tupplur.database.kv_store import KeyValueStore, StorageError

__all__ = [
    "get_mongo_client",
    "get_redis_client",
    "get_kv_store",
    "close_connections",
    "KeyValueStore",
    "StorageError",
]
