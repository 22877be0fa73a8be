"""
Allow-list filtering of incoming payloads.
"""
from typing import Any, Mapping, Optional

from tupplur.models.collection import ACCESS_METHODS

ACCESS_STRING_FIELDS = ("key", "description")


def sanitize_by_schema(
    schema: Optional[Mapping[str, Any]], data: Mapping[str, Any]
) -> dict[str, Any]:
    """
    Keep only the keys declared in ``schema["properties"]``.

    Values are copied as-is; nothing is coerced. A missing schema allows
    nothing.
    """
    allowed = (schema or {}).get("properties") or {}
    return {key: value for key, value in data.items() if key in allowed}


def sanitize_collection_access(data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Normalize a raw access rule.

    Method flags are True only when the input is literally ``True``; string
    fields go through ``str()``; unknown keys are dropped.
    """
    result: dict[str, Any] = {}
    for key, value in data.items():
        if key in ACCESS_METHODS:
            result[key] = value is True
        elif key in ACCESS_STRING_FIELDS:
            result[key] = str(value)
    return result
