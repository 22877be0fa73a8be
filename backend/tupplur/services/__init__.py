"""
Service layer for business logic.
"""
from tupplur.services.collection_registry import CollectionRegistry
from tupplur.services.document_store import DocumentStore

__all__ = [
    "CollectionRegistry",
    "DocumentStore",
]
