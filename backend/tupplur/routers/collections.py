"""
Collections router for collection management (super-user only).
"""
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from tupplur.core.sanitize import sanitize_collection_access
from tupplur.core.schema_types import schema_to_example
from tupplur.core.validation import validate_collection, validate_collection_access
from tupplur.dependencies.auth import SuperUser
from tupplur.dependencies.services import get_collection_registry
from tupplur.models.collection import CollectionMeta
from tupplur.schemas.collection import CollectionExampleResponse, MessageResponse
from tupplur.services.collection_registry import CollectionRegistry

router = APIRouter(prefix="/collections", tags=["Collections"], dependencies=[SuperUser])

Registry = Annotated[CollectionRegistry, Depends(get_collection_registry)]


def _bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def _not_found(name: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Collection '{name}' not found",
    )


async def _save_collection(registry: CollectionRegistry, collection: dict) -> None:
    await registry.create(
        collection["name"],
        collection["schema"],
        [sanitize_collection_access(rule) for rule in collection["access"]],
    )


@router.get(
    "",
    response_model=list[CollectionMeta],
    summary="List collections",
)
async def list_collections(registry: Registry):
    """List every collection with its schema and access rules."""
    return await registry.list()


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create collection",
)
async def create_collection(registry: Registry, body: Any = Body(None)):
    """
    Create a new collection.

    - **name**: lowercase, URL-safe, unused name
    - **schema**: JSON-Schema with `type: "object"` and `properties`
    - **access**: optional list of access rules
    """
    is_valid, collection = validate_collection(body)
    if not is_valid:
        raise _bad_request(collection)

    if await registry.get(collection["name"]) is not None:
        raise _bad_request(f'collection name "{collection["name"]}" is already used')

    await _save_collection(registry, collection)
    return MessageResponse(message=f"created {collection['name']}")


@router.put(
    "",
    response_model=MessageResponse,
    summary="Create or replace collection",
)
async def put_collection(registry: Registry, body: Any = Body(None)):
    """Create a collection, overwriting any existing one with the same name."""
    is_valid, collection = validate_collection(body)
    if not is_valid:
        raise _bad_request(collection)

    await _save_collection(registry, collection)
    return MessageResponse(message=f"created {collection['name']}")


@router.get(
    "/{name}",
    response_model=CollectionMeta,
    summary="Get collection",
)
async def get_collection(name: str, registry: Registry):
    collection = await registry.get(name)
    if collection is None:
        raise _not_found(name)
    return collection


@router.get(
    "/{name}/example",
    response_model=CollectionExampleResponse,
    summary="Example document",
)
async def get_collection_example(name: str, registry: Registry):
    """Sample document built from the collection schema."""
    collection = await registry.get(name)
    if collection is None:
        raise _not_found(name)
    return CollectionExampleResponse(
        name=name, example=schema_to_example(collection.json_schema)
    )


@router.delete(
    "/{name}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete collection",
)
async def delete_collection(name: str, registry: Registry):
    """
    Delete a collection with all its documents.

    **Warning**: This action cannot be undone.
    """
    await registry.delete(name)


@router.post(
    "/{name}/access",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Add access rule",
)
async def add_collection_access(name: str, registry: Registry, body: Any = Body(None)):
    """Add an access rule, replacing any rule with the same key."""
    is_valid, access = validate_collection_access(body)
    if not is_valid:
        raise _bad_request(access)

    if not await registry.add_access(name, sanitize_collection_access(access)):
        raise _not_found(name)


@router.delete(
    "/{name}/access/{key}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove access rule",
)
async def remove_collection_access(name: str, key: str, registry: Registry):
    if not await registry.remove_access(name, key):
        raise _not_found(name)
