"""
Service dependencies backed by the shared key-value store.
"""
from typing import Annotated

from fastapi import Depends

from tupplur.database.connections import get_kv_store
from tupplur.database.kv_store import KeyValueStore
from tupplur.services.collection_registry import CollectionRegistry
from tupplur.services.document_store import DocumentStore


async def get_collection_registry(
    store: Annotated[KeyValueStore, Depends(get_kv_store)],
) -> CollectionRegistry:
    """Dependency to get CollectionRegistry instance."""
    return CollectionRegistry(store)


async def get_document_store(
    store: Annotated[KeyValueStore, Depends(get_kv_store)],
) -> DocumentStore:
    """Dependency to get DocumentStore instance."""
    return DocumentStore(store)
