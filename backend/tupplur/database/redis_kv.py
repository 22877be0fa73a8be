"""
Redis backend for the key-value store.

Layout under a namespace ``ns``:

- ``{ns}:keys``   sorted set of encoded keys, every score 0, so members
                  order lexicographically and ZRANGEBYLEX gives prefix scans
- ``{ns}:values`` hash of encoded key -> JSON value

Writes touching both structures run in MULTI/EXEC, which makes batched
writes atomic on this backend.
"""
import json
from typing import Any, AsyncIterator, Iterable

from redis.asyncio import Redis
from redis.exceptions import RedisError

from tupplur.database.kv_store import (
    Key,
    KeyValueStore,
    StorageError,
    decode_key,
    encode_key,
    prefix_range,
)

LIST_PAGE_SIZE = 100


class RedisKeyValueStore(KeyValueStore):
    """Key-value store on a Redis sorted set plus hash."""

    def __init__(self, client: Redis, namespace: str = "tupplur"):
        """Initialize with a client created with ``decode_responses=True``."""
        self.client = client
        self.index_key = f"{namespace}:keys"
        self.values_key = f"{namespace}:values"

    async def get(self, key: Key) -> Any | None:
        try:
            raw = await self.client.hget(self.values_key, encode_key(key))
        except RedisError as e:
            raise StorageError(str(e), "get") from e
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, key: Key, value: Any) -> None:
        await self.set_many([(key, value)])

    async def delete(self, key: Key) -> None:
        await self.delete_many([key])

    async def list(self, prefix: Key) -> AsyncIterator[tuple[Key, Any]]:
        low, high = prefix_range(prefix)
        lower = f"[{low}" if low else "-"
        upper = f"({high}" if high is not None else "+"
        while True:
            try:
                members = await self.client.zrangebylex(
                    self.index_key, lower, upper, start=0, num=LIST_PAGE_SIZE
                )
                if not members:
                    return
                values = await self.client.hmget(self.values_key, members)
            except RedisError as e:
                raise StorageError(str(e), "list") from e
            for member, raw in zip(members, values):
                # Deleted between the index read and the value read
                if raw is None:
                    continue
                yield decode_key(member), json.loads(raw)
            if len(members) < LIST_PAGE_SIZE:
                return
            lower = f"({members[-1]}"

    async def set_many(self, entries: Iterable[tuple[Key, Any]]) -> None:
        """Write all entries in a single MULTI/EXEC transaction."""
        mapping = {encode_key(key): json.dumps(value) for key, value in entries}
        if not mapping:
            return
        try:
            async with self.client.pipeline(transaction=True) as pipe:
                pipe.hset(self.values_key, mapping=mapping)
                pipe.zadd(self.index_key, {member: 0 for member in mapping})
                await pipe.execute()
        except RedisError as e:
            raise StorageError(str(e), "set") from e

    async def delete_many(self, keys: Iterable[Key]) -> None:
        """Delete all keys in a single MULTI/EXEC transaction."""
        members = [encode_key(key) for key in keys]
        if not members:
            return
        try:
            async with self.client.pipeline(transaction=True) as pipe:
                pipe.hdel(self.values_key, *members)
                pipe.zrem(self.index_key, *members)
                await pipe.execute()
        except RedisError as e:
            raise StorageError(str(e), "delete") from e

    async def ping(self) -> bool:
        try:
            return bool(await self.client.ping())
        except RedisError as e:
            raise StorageError(str(e), "ping") from e
