"""Identifier helpers."""

import uuid
from typing import Any


# Hey future me - link ids arrive from creator-edited JSON settings, so they can be anything!
# A spoofed or malformed id must NOT cost us the whole click event - it just becomes None.
# We return the canonical lower-case hyphenated form so the same id always compares equal in SQL.
def coerce_link_id(value: Any) -> str | None:
    """Return a canonical UUID string if value is UUID-shaped, else None."""
    if isinstance(value, uuid.UUID):
        return str(value)
    if not isinstance(value, str) or not value.strip():
        return None
    candidate = value.strip()
    # uuid.UUID() also accepts braces/urn prefixes and 32-hex forms; we only trust
    # the plain 36-char form that our own tables generate.
    if len(candidate) != 36:
        return None
    try:
        return str(uuid.UUID(candidate))
    except ValueError:
        return None
