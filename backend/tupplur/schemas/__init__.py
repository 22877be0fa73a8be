"""
Request and response schemas for API endpoints.
"""
from tupplur.schemas.collection import CollectionExampleResponse, MessageResponse

__all__ = [
    "CollectionExampleResponse",
    "MessageResponse",
]
