"""
Identifier generation.

Ids are 26-character ULIDs. The monotonic provider guarantees that ids
generated within the same millisecond still sort in creation order, so
ascending key scans return documents oldest first.
"""
from ulid import monotonic as ulid


def generate_id() -> str:
    """Return a new time-sortable unique id."""
    return str(ulid.new())
