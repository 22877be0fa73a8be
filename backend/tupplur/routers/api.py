"""
Documents router: CRUD on collection documents and sub-collections.

Every route resolves ``{name}`` through ``get_authorized_collection``, so
an unknown collection answers 404 and a denied method 401 before any
payload is looked at. Writes are validated against the schema first and
sanitized second.
"""
from typing import Annotated, Any, Mapping

from fastapi import APIRouter, Body, Depends, HTTPException, status

from tupplur.core.sanitize import sanitize_by_schema
from tupplur.core.schema_types import get_sub_collection_names, get_sub_schema
from tupplur.core.validation import validate_by_schema
from tupplur.dependencies.auth import AuthorizedCollection
from tupplur.dependencies.services import get_document_store
from tupplur.models.collection import CollectionMeta
from tupplur.services.document_store import DocumentStore

router = APIRouter(prefix="/api", tags=["Documents"])

Documents = Annotated[DocumentStore, Depends(get_document_store)]


def _not_found(detail: str = "Document not found") -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def _validated(schema: Mapping[str, Any], data: Any, partial: bool = False) -> dict:
    is_valid, result = validate_by_schema(schema, data, partial)
    if not is_valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result)
    return result


def _sanitize_document(collection: CollectionMeta, data: Mapping[str, Any]) -> dict:
    """Strip unknown fields from a document and from its sub-collection items."""
    document = sanitize_by_schema(collection.json_schema, data)
    for key in get_sub_collection_names(collection):
        items = document.get(key)
        if isinstance(items, list):
            item_schema = get_sub_schema(collection, key)
            document[key] = [sanitize_by_schema(item_schema, item) for item in items]
    return document


def _sub_schema_or_404(collection: CollectionMeta, key: str) -> dict:
    schema = get_sub_schema(collection, key)
    if schema is None:
        raise _not_found(f"Sub-collection '{key}' not found")
    return schema


# ==================== Documents ====================


@router.get("/{name}", summary="List documents")
async def list_documents(collection: AuthorizedCollection, documents: Documents):
    return await documents.list(collection.name)


@router.post(
    "/{name}",
    status_code=status.HTTP_201_CREATED,
    summary="Create document",
)
async def create_document(
    collection: AuthorizedCollection, documents: Documents, body: Any = Body(None)
):
    """
    Create a document. Arrays given for sub-collection fields are stored
    as individual sub-documents and returned with their ids.
    """
    data = _validated(collection.json_schema, body)
    return await documents.add(collection, _sanitize_document(collection, data))


@router.get("/{name}/{doc_id}", summary="Get document")
async def get_document(
    doc_id: str, collection: AuthorizedCollection, documents: Documents
):
    document = await documents.get(collection.name, doc_id)
    if document is None:
        raise _not_found()
    return document


@router.put("/{name}/{doc_id}", summary="Replace document")
async def replace_document(
    doc_id: str,
    collection: AuthorizedCollection,
    documents: Documents,
    body: Any = Body(None),
):
    data = _validated(collection.json_schema, body)
    document = await documents.update(
        collection, doc_id, _sanitize_document(collection, data), replace=True
    )
    if document is None:
        raise _not_found()
    return document


@router.patch("/{name}/{doc_id}", summary="Update document fields")
async def patch_document(
    doc_id: str,
    collection: AuthorizedCollection,
    documents: Documents,
    body: Any = Body(None),
):
    """Shallow merge: given fields overwrite, all other fields are kept."""
    data = _validated(collection.json_schema, body, partial=True)
    document = await documents.update(
        collection, doc_id, _sanitize_document(collection, data)
    )
    if document is None:
        raise _not_found()
    return document


@router.delete(
    "/{name}/{doc_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete document",
)
async def delete_document(
    doc_id: str, collection: AuthorizedCollection, documents: Documents
):
    """Delete a document and all of its sub-collection items."""
    await documents.delete(collection.name, doc_id)


# ==================== Sub-collections ====================


@router.get("/{name}/{doc_id}/{key}", summary="List sub-collection items")
async def list_sub_documents(
    doc_id: str, key: str, collection: AuthorizedCollection, documents: Documents
):
    items = await documents.list_sub(collection, doc_id, key)
    if items is None:
        raise _not_found(f"Sub-collection '{key}' not found")
    return items


@router.post(
    "/{name}/{doc_id}/{key}",
    status_code=status.HTTP_201_CREATED,
    summary="Add sub-collection item",
)
async def create_sub_document(
    doc_id: str,
    key: str,
    collection: AuthorizedCollection,
    documents: Documents,
    body: Any = Body(None),
):
    schema = _sub_schema_or_404(collection, key)
    data = _validated(schema, body)
    item = await documents.add_sub(collection, doc_id, key, sanitize_by_schema(schema, data))
    if item is None:
        raise _not_found()
    return item


@router.get("/{name}/{doc_id}/{key}/{sub_id}", summary="Get sub-collection item")
async def get_sub_document(
    doc_id: str,
    key: str,
    sub_id: str,
    collection: AuthorizedCollection,
    documents: Documents,
):
    item = await documents.get_sub(collection, doc_id, key, sub_id)
    if item is None:
        raise _not_found()
    return item


@router.put("/{name}/{doc_id}/{key}/{sub_id}", summary="Replace sub-collection item")
async def replace_sub_document(
    doc_id: str,
    key: str,
    sub_id: str,
    collection: AuthorizedCollection,
    documents: Documents,
    body: Any = Body(None),
):
    schema = _sub_schema_or_404(collection, key)
    data = _validated(schema, body)
    item = await documents.set_sub(
        collection, doc_id, key, sub_id, sanitize_by_schema(schema, data), replace=True
    )
    if item is None:
        raise _not_found()
    return item


@router.patch("/{name}/{doc_id}/{key}/{sub_id}", summary="Update sub-collection item")
async def patch_sub_document(
    doc_id: str,
    key: str,
    sub_id: str,
    collection: AuthorizedCollection,
    documents: Documents,
    body: Any = Body(None),
):
    schema = _sub_schema_or_404(collection, key)
    data = _validated(schema, body, partial=True)
    item = await documents.set_sub(
        collection, doc_id, key, sub_id, sanitize_by_schema(schema, data)
    )
    if item is None:
        raise _not_found()
    return item


@router.delete(
    "/{name}/{doc_id}/{key}/{sub_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete sub-collection item",
)
async def delete_sub_document(
    doc_id: str,
    key: str,
    sub_id: str,
    collection: AuthorizedCollection,
    documents: Documents,
):
    if not await documents.delete_sub(collection, doc_id, key, sub_id):
        raise _not_found(f"Sub-collection '{key}' not found")
