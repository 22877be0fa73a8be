"""
Collection registry: CRUD for collection metadata (schema + access rules).
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Union

from tupplur.core.sanitize import sanitize_collection_access
from tupplur.database import layout
from tupplur.database.kv_store import KeyValueStore
from tupplur.models.collection import CollectionAccess, CollectionMeta

logger = logging.getLogger(__name__)


def _to_rule(rule: Union[CollectionAccess, Mapping[str, Any]]) -> CollectionAccess:
    if isinstance(rule, CollectionAccess):
        return rule
    return CollectionAccess.model_validate(sanitize_collection_access(rule))


def _from_stored(name: str, value: Mapping[str, Any]) -> CollectionMeta:
    return CollectionMeta(
        name=name,
        schema=value.get("schema") or {},
        access=value.get("access") or [],
    )


class CollectionRegistry:
    """
    Service for collection metadata.

    Name uniqueness is the caller's concern: ``create`` overwrites. Access
    rule changes are read-modify-write without a version check, so two
    concurrent writers can lose one change.
    """

    def __init__(self, store: KeyValueStore):
        """Initialize with the shared key-value store."""
        self.store = store

    async def create(
        self,
        name: str,
        schema: dict[str, Any],
        access: Optional[Iterable[Union[CollectionAccess, Mapping[str, Any]]]] = None,
    ) -> CollectionMeta:
        """Persist metadata for ``name``, replacing any existing entry."""
        collection = CollectionMeta(
            name=name,
            schema=schema,
            access=[_to_rule(rule) for rule in access or []],
        )
        await self._save(collection)
        logger.info(f"Collection '{name}' saved with {len(collection.access)} access rule(s)")
        return collection

    async def get(self, name: str) -> Optional[CollectionMeta]:
        """Get collection metadata, or None if it does not exist."""
        if not layout.is_addressable(name):
            return None
        value = await self.store.get(layout.meta_key(name))
        if value is None:
            return None
        return _from_stored(name, value)

    async def list(self) -> list[CollectionMeta]:
        """All collections, ordered by name."""
        collections = []
        async for key, value in self.store.list(layout.meta_prefix()):
            if len(key) != 2:
                continue
            collections.append(_from_stored(key[1], value))
        return collections

    async def delete(self, name: str) -> None:
        """
        Delete a collection with all its documents and sub-documents.

        Keys are scanned first and deleted afterwards, so a document
        written between the scan and the delete survives as an orphan.
        """
        if not layout.is_addressable(name):
            return
        keys = [key async for key, _ in self.store.list(layout.collection_prefix(name))]
        await self.store.delete_many(keys)
        await self.store.delete(layout.meta_key(name))
        logger.info(f"Collection '{name}' deleted ({len(keys)} document key(s))")

    async def add_access(
        self, name: str, rule: Union[CollectionAccess, Mapping[str, Any]]
    ) -> bool:
        """
        Add or replace the access rule with the same key.

        Returns False if the collection does not exist.
        """
        collection = await self.get(name)
        if collection is None:
            return False
        rule = _to_rule(rule)
        collection.access = [r for r in collection.access if r.key != rule.key]
        collection.access.append(rule)
        await self._save(collection)
        logger.info(f"Access rule updated on collection '{name}'")
        return True

    async def remove_access(self, name: str, key: str) -> bool:
        """
        Remove every access rule with ``key``.

        Removing a key that has no rule is not an error. Returns False only
        if the collection does not exist.
        """
        collection = await self.get(name)
        if collection is None:
            return False
        collection.access = [r for r in collection.access if r.key != key]
        await self._save(collection)
        logger.info(f"Access rule removed from collection '{name}'")
        return True

    async def _save(self, collection: CollectionMeta) -> None:
        await self.store.set(layout.meta_key(collection.name), collection.to_stored())
