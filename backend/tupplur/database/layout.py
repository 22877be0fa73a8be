"""
Persisted key layout.

    ("collection-meta", name)                        -> {schema, access}
    ("collection", name, doc_id)                     -> document fields
    ("collection", name, doc_id, sub_key, sub_id)    -> sub-document fields

Stored values never carry their own id; it is the last key segment.
"""
from tupplur.database.kv_store import Key, is_valid_segment

COLLECTION_META = "collection-meta"
COLLECTION = "collection"

# Key lengths of direct documents and of sub-documents
DOCUMENT_KEY_DEPTH = 3
SUB_DOCUMENT_KEY_DEPTH = 5


def meta_key(name: str) -> Key:
    return (COLLECTION_META, name)


def meta_prefix() -> Key:
    return (COLLECTION_META,)


def collection_prefix(name: str) -> Key:
    return (COLLECTION, name)


def document_key(name: str, doc_id: str) -> Key:
    return (COLLECTION, name, doc_id)


def sub_collection_prefix(name: str, doc_id: str, sub_key: str) -> Key:
    return (COLLECTION, name, doc_id, sub_key)


def sub_document_key(name: str, doc_id: str, sub_key: str, sub_id: str) -> Key:
    return (COLLECTION, name, doc_id, sub_key, sub_id)


def is_addressable(*segments: str) -> bool:
    """
    Whether every segment can appear in a key.

    Names and ids carrying control characters never address a stored
    record, so lookups on them report absence instead of raising.
    """
    return all(is_valid_segment(segment) for segment in segments)
