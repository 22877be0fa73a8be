"""
Dependencies for dependency injection in routes.
"""
from tupplur.dependencies.auth import (
    get_access_control,
    get_authorized_collection,
    require_super_user,
)
from tupplur.dependencies.services import get_collection_registry, get_document_store

__all__ = [
    "get_access_control",
    "get_authorized_collection",
    "require_super_user",
    "get_collection_registry",
    "get_document_store",
]
