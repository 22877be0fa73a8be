"""
Authorization decisions for collection access.

Callers authenticate with ``Authorization: Bearer <token>``. A token equal
to the process-wide super-user key bypasses every access rule; any other
token is matched against the collection's access rules.
"""
import hmac
from typing import Any, Iterable, Mapping, Optional, Union

from tupplur.core.sanitize import sanitize_collection_access
from tupplur.models.collection import PUBLIC_ACCESS_KEY, CollectionAccess

BEARER_PREFIX = "Bearer "

AccessRule = Union[CollectionAccess, Mapping[str, Any]]


def get_header(headers: Mapping[str, str], name: str) -> Optional[str]:
    """Case-insensitive header lookup for plain dicts and Starlette headers."""
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


def extract_bearer_token(headers: Mapping[str, str]) -> Optional[str]:
    """
    Token from an ``Authorization: Bearer <token>`` header.

    Returns None when the header is missing, uses another scheme, or
    carries an empty token.
    """
    authorization = get_header(headers, "authorization")
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):]
    return token or None


def _as_rule(rule: AccessRule) -> Optional[CollectionAccess]:
    if isinstance(rule, CollectionAccess):
        return rule
    cleaned = sanitize_collection_access(rule)
    if "key" not in cleaned:
        return None
    return CollectionAccess(**cleaned)


class AccessControl:
    """
    Access decisions bound to one super-user key.

    The key is read once from settings at startup and handed to this
    object; it is never looked up per request.
    """

    def __init__(self, super_user_key: Optional[str]):
        self._super_user_key = super_user_key or None

    def is_super_user(self, headers: Mapping[str, str]) -> bool:
        """True iff the bearer token equals the configured super-user key."""
        if self._super_user_key is None:
            return False
        token = extract_bearer_token(headers)
        if token is None:
            return False
        return hmac.compare_digest(token.encode(), self._super_user_key.encode())

    def is_authorized(
        self,
        method: str,
        access: Optional[Iterable[AccessRule]],
        headers: Mapping[str, str],
    ) -> bool:
        """
        Decide whether the caller may use ``method`` on a collection.

        Rules keyed ``"public"`` or keyed with the caller's token match.
        Permissions add up: any matching rule with the method's flag set
        grants access.
        """
        if self.is_super_user(headers):
            return True

        token = extract_bearer_token(headers)
        for raw_rule in access or []:
            rule = _as_rule(raw_rule)
            if rule is None:
                continue
            matches = rule.key == PUBLIC_ACCESS_KEY or (
                token is not None and rule.key == token
            )
            if matches and rule.allows(method):
                return True
        return False
