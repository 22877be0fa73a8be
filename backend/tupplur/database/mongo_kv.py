"""
MongoDB backend for the key-value store.

One Mongo document per key:

    {"_id": <encoded key>, "key": [<segments>], "value": <value>}

Prefix scans are range queries on ``_id``, which Mongo compares with
binary string ordering. Batched writes are issued one key at a time: a
standalone server offers no multi-document atomicity.
"""
from typing import Any, AsyncIterator, Iterable

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from tupplur.database.kv_store import (
    Key,
    KeyValueStore,
    StorageError,
    decode_key,
    encode_key,
    prefix_range,
)


class MongoKeyValueStore(KeyValueStore):
    """Key-value store on a single MongoDB collection."""

    def __init__(self, collection: AsyncIOMotorCollection):
        """Initialize with the collection holding all keys."""
        self.collection = collection

    async def get(self, key: Key) -> Any | None:
        try:
            doc = await self.collection.find_one({"_id": encode_key(key)})
        except PyMongoError as e:
            raise StorageError(str(e), "get") from e
        if doc is None:
            return None
        return doc["value"]

    async def set(self, key: Key, value: Any) -> None:
        encoded = encode_key(key)
        try:
            await self.collection.replace_one(
                {"_id": encoded},
                {"_id": encoded, "key": list(key), "value": value},
                upsert=True,
            )
        except PyMongoError as e:
            raise StorageError(str(e), "set") from e

    async def delete(self, key: Key) -> None:
        try:
            await self.collection.delete_one({"_id": encode_key(key)})
        except PyMongoError as e:
            raise StorageError(str(e), "delete") from e

    async def list(self, prefix: Key) -> AsyncIterator[tuple[Key, Any]]:
        low, high = prefix_range(prefix)
        id_range = {"$gte": low}
        if high is not None:
            id_range["$lt"] = high
        cursor = self.collection.find({"_id": id_range}).sort("_id", 1)
        try:
            async for doc in cursor:
                yield decode_key(doc["_id"]), doc["value"]
        except PyMongoError as e:
            raise StorageError(str(e), "list") from e

    async def delete_many(self, keys: Iterable[Key]) -> None:
        encoded = [encode_key(key) for key in keys]
        if not encoded:
            return
        try:
            await self.collection.delete_many({"_id": {"$in": encoded}})
        except PyMongoError as e:
            raise StorageError(str(e), "delete_many") from e

    async def ping(self) -> bool:
        try:
            await self.collection.database.command("ping")
        except PyMongoError as e:
            raise StorageError(str(e), "ping") from e
        return True
