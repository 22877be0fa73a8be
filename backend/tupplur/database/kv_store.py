"""
Ordered key-value store contract.

Keys are tuples of string segments ordered segment by segment. Backends
flatten a key into one sortable string with ``encode_key`` so that plain
string ordering of encoded keys equals tuple ordering of the keys.
"""
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Iterable, Sequence

Key = tuple[str, ...]

# Unit separator; segments may not contain control characters, so every
# character of a segment sorts after it.
KEY_SEPARATOR = "\x1f"
_PREFIX_UPPER_BOUND = chr(ord(KEY_SEPARATOR) + 1)


class StorageError(Exception):
    """The underlying key-value engine failed."""

    def __init__(self, message: str, operation: str):
        super().__init__(f"Storage {operation} failed: {message}")
        self.operation = operation


def is_valid_segment(segment: Any) -> bool:
    """Whether segment can be part of a key: a string without control characters."""
    return isinstance(segment, str) and not any(ord(ch) < 0x20 for ch in segment)


def _check_segment(segment: Any) -> str:
    if not isinstance(segment, str):
        raise ValueError(f"key segments must be strings, got {type(segment).__name__}")
    if not is_valid_segment(segment):
        raise ValueError(f"key segment {segment!r} contains control characters")
    return segment


def encode_key(key: Sequence[str]) -> str:
    """Flatten a key tuple into its sortable string form."""
    return KEY_SEPARATOR.join(_check_segment(s) for s in key)


def decode_key(encoded: str) -> Key:
    """Inverse of ``encode_key``."""
    if encoded == "":
        return ()
    return tuple(encoded.split(KEY_SEPARATOR))


def prefix_range(prefix: Sequence[str]) -> tuple[str, str | None]:
    """
    Encoded half-open range ``[low, high)`` holding every key under prefix.

    The exact prefix key is included. An empty prefix covers the whole
    key space and has no upper bound.
    """
    if not prefix:
        return "", None
    low = encode_key(prefix)
    return low, low + _PREFIX_UPPER_BOUND


class KeyValueStore(ABC):
    """
    Async ordered key-value store.

    Every single-key operation is atomic. Batched writes are atomic only
    where a backend says so.
    """

    @abstractmethod
    async def get(self, key: Key) -> Any | None:
        """Return the value stored at key, or None."""

    @abstractmethod
    async def set(self, key: Key, value: Any) -> None:
        """Insert or overwrite the value at key."""

    @abstractmethod
    async def delete(self, key: Key) -> None:
        """Delete key; deleting a missing key is a no-op."""

    @abstractmethod
    def list(self, prefix: Key) -> AsyncIterator[tuple[Key, Any]]:
        """Lazily yield ``(key, value)`` pairs under prefix in ascending key order."""

    async def set_many(self, entries: Iterable[tuple[Key, Any]]) -> None:
        """Write several keys. Not atomic unless a backend overrides it."""
        for key, value in entries:
            await self.set(key, value)

    async def delete_many(self, keys: Iterable[Key]) -> None:
        """Delete several keys. Not atomic unless a backend overrides it."""
        for key in keys:
            await self.delete(key)

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        return None
