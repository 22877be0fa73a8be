"""
Structural validation of schemas, documents and collection metadata.

Every validator returns a ``Validation`` tuple instead of raising:
``(True, value)`` on success, ``(False, message)`` on failure.
"""
from typing import Any, Iterable, Mapping, Union
from urllib.parse import quote

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError, ValidationError

Validation = tuple[bool, Any]

# Characters encodeURIComponent leaves untouched besides alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"

COLLECTION_ACCESS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "key": {"type": "string"},
        "description": {"type": "string"},
        "get": {"type": "boolean"},
        "post": {"type": "boolean"},
        "patch": {"type": "boolean"},
        "put": {"type": "boolean"},
        "delete": {"type": "boolean"},
    },
    "required": ["key"],
}


def _format_path(path: Iterable[Union[str, int]]) -> str:
    rendered = "data"
    for part in path:
        if isinstance(part, int):
            rendered += f"[{part}]"
        else:
            rendered += f".{part}"
    return rendered


def _errors_text(errors: Iterable[ValidationError]) -> str:
    return ", ".join(
        f"{_format_path(error.absolute_path)} {error.message}" for error in errors
    )


def validate_schema(schema: Any) -> Validation:
    """
    Check that ``schema`` can describe a collection.

    It must be an object schema with a ``properties`` key and must itself
    be a valid draft-07 JSON-Schema.
    """
    if not isinstance(schema, dict) or not all(isinstance(k, str) for k in schema):
        return False, "schema must be an object"

    if schema.get("type") != "object" or "properties" not in schema:
        return False, 'schema must have type "object" and have a "properties" key'

    try:
        Draft7Validator.check_schema(schema)
    except SchemaError as e:
        return False, e.message
    return True, schema


def validate_by_schema(
    schema: Mapping[str, Any], data: Any, partial: bool = False
) -> Validation:
    """
    Validate ``data`` against ``schema`` without coercing anything.

    With ``partial`` the top-level ``required`` list is ignored, so a PATCH
    body may carry any subset of fields.
    """
    if partial and schema.get("required"):
        schema = {**schema, "required": []}

    errors = list(Draft7Validator(schema).iter_errors(data))
    if errors:
        return False, _errors_text(errors)
    return True, data


def validate_collection_name(name: Any) -> Validation:
    """Names must be non-empty, lowercase and unchanged by URI-component encoding."""
    if (
        isinstance(name, str)
        and name
        and name == name.lower()
        and quote(name, safe=_URI_COMPONENT_SAFE) == name
    ):
        return True, name
    return False, "collection name must be a lowercase uri component"


def validate_collection_access(data: Any) -> Validation:
    return validate_by_schema(COLLECTION_ACCESS_SCHEMA, data)


def validate_collection_accesses(data: Any) -> Validation:
    return validate_by_schema({"type": "array", "items": COLLECTION_ACCESS_SCHEMA}, data)


def validate_collection(data: Any) -> Validation:
    """
    Validate a full collection definition: ``{name, schema, access?}``.

    On success the value is a dict with exactly those three keys, ``access``
    defaulting to an empty list.
    """
    if not isinstance(data, dict):
        return False, "collection metadata must be an object"

    is_valid, name = validate_collection_name(data.get("name"))
    if not is_valid:
        return False, name

    is_valid, schema = validate_schema(data.get("schema"))
    if not is_valid:
        return False, schema

    is_valid, access = validate_collection_accesses(data.get("access") or [])
    if not is_valid:
        return False, access

    return True, {"name": name, "schema": schema, "access": access}
