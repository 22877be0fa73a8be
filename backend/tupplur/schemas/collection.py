"""
Collection request/response schemas.
"""
from typing import Any

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Plain confirmation message."""
    message: str = Field(..., description="Human-readable result")


class CollectionExampleResponse(BaseModel):
    """Sample document generated from a collection schema."""
    name: str = Field(..., description="Collection name")
    example: Any = Field(..., description="Document matching the schema")
