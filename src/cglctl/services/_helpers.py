"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any


def now_iso() -> str:
    """Current UTC time as standard ISO 8601 (for created/modified columns)."""
    return datetime.now(UTC).isoformat()


def row_to_dict(row: Any) -> dict[str, Any]:
    """Convert a SQLAlchemy row to a plain dict with a ``visible`` key.

    Rows from numbered tables carry ``major``/``minor`` columns; those are
    folded into the canonical ``MMM.mm`` string.
    """
    from cglctl.domain.numbering import format_visible

    data = dict(row._mapping)
    if "major" in data and "minor" in data:
        data["visible"] = format_visible(data.pop("major"), data.pop("minor"))
    if "show_in_contents" in data:
        data["show_in_contents"] = bool(data["show_in_contents"])
    return data
