"""
Collection metadata models.
"""
from typing import Any, Optional

from pydantic import BaseModel, Field

PUBLIC_ACCESS_KEY = "public"

ACCESS_METHODS = ("get", "post", "patch", "put", "delete")


class CollectionAccess(BaseModel):
    """
    Access rule for a collection.

    ``key`` is either ``"public"`` (matches every caller) or a bearer token.
    Each flag grants the HTTP method of the same name.
    """
    key: str = Field(..., description="'public' or a bearer token")
    description: Optional[str] = Field(None, description="Free-form note")
    get: bool = Field(default=False, description="Allow GET")
    post: bool = Field(default=False, description="Allow POST")
    patch: bool = Field(default=False, description="Allow PATCH")
    put: bool = Field(default=False, description="Allow PUT")
    delete: bool = Field(default=False, description="Allow DELETE")

    def allows(self, method: str) -> bool:
        """Whether this rule grants ``method`` (case-insensitive)."""
        method = method.lower()
        if method not in ACCESS_METHODS:
            return False
        return getattr(self, method) is True


class CollectionMeta(BaseModel):
    """
    Collection metadata as stored under ``("collection-meta", name)``.

    The name is not part of the stored value; it comes from the key.
    """
    name: str = Field(..., description="Unique, lowercase, URL-safe name")
    json_schema: dict[str, Any] = Field(
        ..., alias="schema", description="JSON-Schema of the documents"
    )
    access: list[CollectionAccess] = Field(
        default_factory=list, description="Ordered access rules"
    )

    class Config:
        populate_by_name = True

    def to_stored(self) -> dict[str, Any]:
        """Value persisted in the key-value store."""
        return {
            "schema": self.json_schema,
            "access": [rule.model_dump(exclude_none=True) for rule in self.access],
        }

    def to_response(self) -> dict[str, Any]:
        return {"name": self.name, **self.to_stored()}
