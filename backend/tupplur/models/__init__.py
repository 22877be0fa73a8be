"""
Pydantic models for stored metadata.
"""
from tupplur.models.collection import (
    ACCESS_METHODS,
    PUBLIC_ACCESS_KEY,
    CollectionAccess,
    CollectionMeta,
)

__all__ = [
    "ACCESS_METHODS",
    "PUBLIC_ACCESS_KEY",
    "CollectionAccess",
    "CollectionMeta",
]
