"""SQL clause builders for visible-number range queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import and_, false, or_

from cglctl.domain.numbering import resolve_range

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement


def visible_range_clause(
    major: ColumnElement[int],
    minor: ColumnElement[int],
    start: str | None = None,
    end: str | None = None,
) -> ColumnElement[bool]:
    """Inclusive ``start..end`` filter over a ``(major, minor)`` column pair.

    Missing or malformed endpoints default to ``000.00`` and ``999.99``.
    Inverted bounds produce a clause that matches nothing.  The caller
    ANDs in the scope predicate (e.g. ``book_id == ...``).

    Examples:
        >>> from cglctl.infrastructure.database.schema import records
        >>> clause = visible_range_clause(records.c.major, records.c.minor, "010.00", "030.50")
    """
    bounds = resolve_range(start, end)
    if bounds.is_empty:
        return false()

    (lo_major, lo_minor), (hi_major, hi_minor) = bounds.lower, bounds.upper
    if lo_major == hi_major:
        return and_(major == lo_major, minor >= lo_minor, minor <= hi_minor)

    return or_(
        and_(major > lo_major, major < hi_major),
        and_(major == lo_major, minor >= lo_minor),
        and_(major == hi_major, minor <= hi_minor),
    )
