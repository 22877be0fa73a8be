"""
Typed view over the JSON-Schema documents stored with each collection.

A raw schema is one of four shapes:

- ``RefSchema``     ``{"$ref": "#/definitions/Name"}``
- ``ArraySchema``   ``{"type": "array", "items": ...}``
- ``ObjectSchema``  ``{"type": "object", "properties": {...}}``
- ``SimpleSchema``  any other ``type`` (string, number, integer, boolean, ...)

``parse_schema`` turns a raw dict into one of these so callers can match on
it instead of probing dict keys.
"""
from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from tupplur.models.collection import CollectionMeta


@dataclass(frozen=True)
class RefSchema:
    ref: str


@dataclass(frozen=True)
class ArraySchema:
    items: "Schema | None"


@dataclass(frozen=True)
class ObjectSchema:
    properties: dict[str, "Schema"] = field(default_factory=dict)
    required: tuple[str, ...] = ()


@dataclass(frozen=True)
class SimpleSchema:
    type: str | None


Schema = Union[RefSchema, ArraySchema, ObjectSchema, SimpleSchema]


def parse_schema(raw: Mapping[str, Any]) -> Schema:
    """Classify a raw schema dict."""
    if "$ref" in raw:
        return RefSchema(ref=str(raw["$ref"]))
    schema_type = raw.get("type")
    if schema_type == "array":
        items = raw.get("items")
        return ArraySchema(items=parse_schema(items) if isinstance(items, Mapping) else None)
    if schema_type == "object":
        properties = raw.get("properties") or {}
        return ObjectSchema(
            properties={
                name: parse_schema(prop)
                for name, prop in properties.items()
                if isinstance(prop, Mapping)
            },
            required=tuple(raw.get("required") or ()),
        )
    return SimpleSchema(type=schema_type if isinstance(schema_type, str) else None)


def get_sub_collection_names(collection: CollectionMeta) -> list[str]:
    """Names of properties that are arrays of objects, in schema order."""
    root = parse_schema(collection.json_schema)
    if not isinstance(root, ObjectSchema):
        return []
    names = []
    for name, prop in root.properties.items():
        if isinstance(prop, ArraySchema) and isinstance(prop.items, ObjectSchema):
            names.append(name)
    return names


def get_sub_schema(collection: CollectionMeta, key: str) -> dict[str, Any] | None:
    """Raw item schema of sub-collection ``key``, or None if key is not one."""
    if key not in get_sub_collection_names(collection):
        return None
    return collection.json_schema["properties"][key]["items"]


def omit(keys, data: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of data without the given keys."""
    return {k: v for k, v in data.items() if k not in keys}


def resolve_ref(ref: str, definitions: Mapping[str, Any]) -> dict[str, Any] | None:
    """
    Resolve a local ``$ref`` against a definitions table.

    Accepts ``#/definitions/Name``, ``#/$defs/Name`` and a bare ``Name``.
    Returns None when the target is unknown.
    """
    name = ref
    for pointer in ("#/definitions/", "#/$defs/"):
        if ref.startswith(pointer):
            name = ref[len(pointer):]
            break
    target = definitions.get(name)
    return target if isinstance(target, Mapping) else None


def _definitions_of(raw: Mapping[str, Any]) -> dict[str, Any]:
    definitions = {}
    definitions.update(raw.get("definitions") or {})
    definitions.update(raw.get("$defs") or {})
    return definitions


def schema_to_example(
    raw: Mapping[str, Any],
    definitions: Mapping[str, Any] | None = None,
    _seen: frozenset = frozenset(),
) -> Any:
    """
    Build a sample value matching a raw schema.

    Strings become ``"string"``, numbers ``1``, booleans ``True``; arrays
    hold one example item. Refs are followed through ``definitions`` (by
    default the schema's own ``definitions``/``$defs``); unknown or
    recursive refs become ``{}``.
    """
    if definitions is None:
        definitions = _definitions_of(raw)

    schema = parse_schema(raw)
    if isinstance(schema, RefSchema):
        target = resolve_ref(schema.ref, definitions)
        if target is None or schema.ref in _seen:
            return {}
        return schema_to_example(target, definitions, _seen | {schema.ref})
    if isinstance(schema, ArraySchema):
        items = raw.get("items")
        if not isinstance(items, Mapping):
            return []
        return [schema_to_example(items, definitions, _seen)]
    if isinstance(schema, ObjectSchema):
        return {
            name: schema_to_example(prop, definitions, _seen)
            for name, prop in (raw.get("properties") or {}).items()
            if isinstance(prop, Mapping)
        }
    if schema.type == "string":
        return "string"
    if schema.type in ("number", "integer"):
        return 1
    if schema.type == "boolean":
        return True
    return schema.type
