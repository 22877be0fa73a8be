"""
Core module - authorization, validation, sanitization and schema helpers.
"""
from tupplur.core.security import AccessControl, extract_bearer_token
from tupplur.core.sanitize import sanitize_by_schema, sanitize_collection_access
from tupplur.core.validation import (
    Validation,
    validate_by_schema,
    validate_collection,
    validate_collection_access,
    validate_collection_name,
    validate_schema,
)

__all__ = [
    "AccessControl",
    "extract_bearer_token",
    "sanitize_by_schema",
    "sanitize_collection_access",
    "Validation",
    "validate_by_schema",
    "validate_collection",
    "validate_collection_access",
    "validate_collection_name",
    "validate_schema",
]
