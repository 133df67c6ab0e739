"""Row ID patterns and generation.

Every stored entity gets an opaque random ID with a type prefix.  Row IDs
are internal handles; the human-facing identifier is the visible number.

INVARIANT: IDs are permanent. Once generated, an ID never changes.
"""

from __future__ import annotations

import re
import uuid

ID_PATTERNS: dict[str, re.Pattern[str]] = {
    "book": re.compile(r"^bk_[0-9a-f]{12}$"),
    "chapter": re.compile(r"^ch_[0-9a-f]{12}$"),
    "record": re.compile(r"^rec_[0-9a-f]{12}$"),
    "insert": re.compile(r"^ins_[0-9a-f]{12}$"),
    "note": re.compile(r"^pvt_[0-9a-f]{12}$"),
}

TYPE_PREFIXES: dict[str, str] = {
    "book": "bk_",
    "chapter": "ch_",
    "record": "rec_",
    "insert": "ins_",
    "note": "pvt_",
}


def generate_id(entity_type: str) -> str:
    """Generate a fresh ``{prefix}{12 hex chars}`` ID for *entity_type*.

    Raises:
        KeyError: If *entity_type* has no registered prefix.
    """
    prefix = TYPE_PREFIXES[entity_type]
    return f"{prefix}{uuid.uuid4().hex[:12]}"


def validate_id(entity_id: str, entity_type: str) -> bool:
    """Check whether *entity_id* matches the expected pattern for *entity_type*."""
    pattern = ID_PATTERNS.get(entity_type)
    if pattern is None:
        return False
    return pattern.match(entity_id) is not None
