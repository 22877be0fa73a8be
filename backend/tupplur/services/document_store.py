"""
Document store: CRUD for documents and their sub-collection documents.

Documents live at ``("collection", name, id)``; each element of a
sub-collection lives at ``("collection", name, id, key, sub_id)``. Stored
values never contain ``_id``: every read path rebuilds it from the key.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from tupplur.core.identifiers import generate_id
from tupplur.core.schema_types import get_sub_collection_names, omit
from tupplur.database import layout
from tupplur.database.kv_store import KeyValueStore
from tupplur.models.collection import CollectionMeta

logger = logging.getLogger(__name__)

ID_FIELD = "_id"

DocumentFilter = Callable[[dict[str, Any], int], bool]


class DocumentStore:
    """
    Service for documents and sub-documents.

    Multi-key operations (insert with sub-collections, cascading delete)
    go through the store's batched writes; they are atomic only on backends
    whose batches are. ``update`` and ``set_sub`` are read-modify-write
    with last-write-wins semantics.
    """

    def __init__(self, store: KeyValueStore):
        """Initialize with the shared key-value store."""
        self.store = store

    # ==================== Documents ====================

    async def insert(
        self,
        collection: CollectionMeta,
        data: Mapping[str, Any],
        doc_id: Optional[str] = None,
        skip_sub_collections: bool = False,
    ) -> dict[str, Any]:
        """
        Persist a document and, unless skipped, its sub-collection items.

        Sub-collection fields are never stored on the document itself.
        When expanded, each array element gets its own id and the returned
        document carries the stored entries in place of the input array.
        """
        doc_id = doc_id or generate_id()
        sub_collections = get_sub_collection_names(collection)

        fields = omit([ID_FIELD, *sub_collections], data)
        entries = [(layout.document_key(collection.name, doc_id), fields)]
        result: dict[str, Any] = {ID_FIELD: doc_id, **fields}

        if not skip_sub_collections:
            for key in sub_collections:
                items = data.get(key)
                if not isinstance(items, list):
                    continue
                values = []
                for item in items:
                    sub_id = generate_id()
                    stored = omit([ID_FIELD], item)
                    entries.append(
                        (layout.sub_document_key(collection.name, doc_id, key, sub_id), stored)
                    )
                    values.append({ID_FIELD: sub_id, **stored})
                result[key] = values

        await self.store.set_many(entries)
        logger.debug(f"Stored {collection.name}/{doc_id} ({len(entries)} key(s))")
        return result

    async def add(
        self, collection: CollectionMeta, data: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Insert a new document under a generated id."""
        return await self.insert(collection, data)

    async def get(self, name: str, doc_id: str) -> Optional[dict[str, Any]]:
        """Get a document, or None if it does not exist."""
        if not layout.is_addressable(name, doc_id):
            return None
        value = await self.store.get(layout.document_key(name, doc_id))
        if value is None:
            return None
        return {ID_FIELD: doc_id, **value}

    async def update(
        self,
        collection: CollectionMeta,
        doc_id: str,
        data: Mapping[str, Any],
        replace: bool = False,
    ) -> Optional[dict[str, Any]]:
        """
        Replace or shallow-merge an existing document.

        With ``replace`` the new fields are ``data`` exactly; otherwise keys
        of ``data`` override the current ones and the rest are kept.
        Sub-collections are untouched. Returns None if the document is
        missing.
        """
        current = await self.get(collection.name, doc_id)
        if current is None:
            return None

        payload = dict(data) if replace else {**omit([ID_FIELD], current), **data}
        return await self.insert(
            collection, payload, doc_id=doc_id, skip_sub_collections=True
        )

    async def delete(self, name: str, doc_id: str) -> None:
        """Delete a document and all of its sub-documents."""
        if not layout.is_addressable(name, doc_id):
            return
        keys = [
            key async for key, _ in self.store.list(layout.document_key(name, doc_id))
        ]
        await self.store.delete_many(keys)
        logger.debug(f"Deleted {name}/{doc_id} ({len(keys)} key(s))")

    async def list(
        self, name: str, filter: Optional[DocumentFilter] = None
    ) -> list[dict[str, Any]]:
        """
        Direct documents of a collection in ascending id order.

        ``filter(document, index)`` is called with each document, ``_id``
        included. ``index`` is the position among direct documents only:
        sub-document keys are skipped before the filter and do not advance
        it. A name that cannot form a key lists nothing.
        """
        if not layout.is_addressable(name):
            return []
        documents = []
        index = 0
        async for key, value in self.store.list(layout.collection_prefix(name)):
            if len(key) != layout.DOCUMENT_KEY_DEPTH:
                continue
            document = {ID_FIELD: key[-1], **value}
            if filter is None or filter(document, index):
                documents.append(document)
            index += 1
        return documents

    # ==================== Sub-collections ====================

    async def get_sub(
        self, collection: CollectionMeta, doc_id: str, key: str, sub_id: str
    ) -> Optional[dict[str, Any]]:
        """Get one sub-document, or None for an unknown key or missing item."""
        if key not in get_sub_collection_names(collection):
            return None
        if not layout.is_addressable(doc_id, key, sub_id):
            return None
        value = await self.store.get(
            layout.sub_document_key(collection.name, doc_id, key, sub_id)
        )
        if value is None:
            return None
        return {ID_FIELD: sub_id, **value}

    async def add_sub(
        self,
        collection: CollectionMeta,
        doc_id: str,
        key: str,
        data: Mapping[str, Any],
    ) -> Optional[dict[str, Any]]:
        """
        Append an item to a document's sub-collection.

        Returns None for an unknown key or a missing parent document.
        """
        if key not in get_sub_collection_names(collection):
            return None
        if not layout.is_addressable(doc_id, key):
            return None
        if await self.store.get(layout.document_key(collection.name, doc_id)) is None:
            return None

        sub_id = generate_id()
        stored = omit([ID_FIELD], data)
        await self.store.set(
            layout.sub_document_key(collection.name, doc_id, key, sub_id), stored
        )
        return {ID_FIELD: sub_id, **stored}

    async def set_sub(
        self,
        collection: CollectionMeta,
        doc_id: str,
        key: str,
        sub_id: str,
        data: Mapping[str, Any],
        replace: bool = False,
    ) -> Optional[dict[str, Any]]:
        """Replace or shallow-merge an existing sub-document."""
        current = await self.get_sub(collection, doc_id, key, sub_id)
        if current is None:
            return None

        payload = data if replace else {**current, **data}
        stored = omit([ID_FIELD], payload)
        await self.store.set(
            layout.sub_document_key(collection.name, doc_id, key, sub_id), stored
        )
        return {ID_FIELD: sub_id, **stored}

    async def delete_sub(
        self, collection: CollectionMeta, doc_id: str, key: str, sub_id: str
    ) -> bool:
        """Delete one sub-document. Returns False for an unknown key or unusable id."""
        if key not in get_sub_collection_names(collection):
            return False
        if not layout.is_addressable(doc_id, key, sub_id):
            return False
        await self.store.delete(
            layout.sub_document_key(collection.name, doc_id, key, sub_id)
        )
        return True

    async def list_sub(
        self,
        collection: CollectionMeta,
        doc_id: str,
        key: str,
        filter: Optional[DocumentFilter] = None,
    ) -> Optional[list[dict[str, Any]]]:
        """Items of a sub-collection in ascending id order; None for an unknown key."""
        if key not in get_sub_collection_names(collection):
            return None
        if not layout.is_addressable(doc_id, key):
            return []
        items = []
        index = 0
        prefix = layout.sub_collection_prefix(collection.name, doc_id, key)
        async for item_key, value in self.store.list(prefix):
            if len(item_key) != layout.SUB_DOCUMENT_KEY_DEPTH:
                continue
            item = {ID_FIELD: item_key[-1], **value}
            if filter is None or filter(item, index):
                items.append(item)
            index += 1
        return items
