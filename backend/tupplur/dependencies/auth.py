"""
Authorization dependencies for route protection.
"""
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from tupplur.config import get_settings
from tupplur.core.security import AccessControl
from tupplur.dependencies.services import get_collection_registry
from tupplur.models.collection import CollectionMeta
from tupplur.services.collection_registry import CollectionRegistry


@lru_cache
def get_access_control() -> AccessControl:
    """
    Process-wide AccessControl.

    The super-user key is read from settings exactly once, on first use.
    """
    return AccessControl(get_settings().super_user_key)


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authorized",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def require_super_user(
    request: Request,
    access_control: Annotated[AccessControl, Depends(get_access_control)],
) -> None:
    """
    Dependency for collection management routes.

    Raises:
        HTTPException 401: If the bearer token is not the super-user key
    """
    if not access_control.is_super_user(request.headers):
        raise _unauthorized()


async def get_authorized_collection(
    name: str,
    request: Request,
    registry: Annotated[CollectionRegistry, Depends(get_collection_registry)],
    access_control: Annotated[AccessControl, Depends(get_access_control)],
) -> CollectionMeta:
    """
    Dependency resolving ``{name}`` to a collection the caller may use.

    The request method is checked against the collection's access rules.

    Raises:
        HTTPException 404: If the collection does not exist
        HTTPException 401: If no access rule grants the method
    """
    collection = await registry.get(name)
    if collection is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Collection '{name}' not found",
        )
    if not access_control.is_authorized(request.method, collection.access, request.headers):
        raise _unauthorized()
    return collection


# Type aliases for cleaner route signatures
SuperUser = Depends(require_super_user)
AuthorizedCollection = Annotated[CollectionMeta, Depends(get_authorized_collection)]
