"""Atomic visible-number reservation per numbering scope.

Reading the current maximum and then inserting ``max + step`` is a race:
two writers can read the same maximum and compute the same number.  A
reservation here closes that window at the storage layer:

1. An insert-or-ignore on the scope's ``number_counters`` row is issued
   first.  Being a write, it takes the SQLite write lock, so concurrent
   reservations queue behind each other (up to the busy timeout).
2. The stored counter is compared with the scope's observed maximum
   (manual insertions can exceed the counter) and the greater one is
   advanced with :func:`next_visible`.
3. The counter row is updated to the new number.

The caller owns the transaction; pass a ``Connection`` obtained from
``engine.begin()`` so the reservation commits or rolls back together
with the entity insert.  The UNIQUE constraint on each numbered table
remains the last line of defence; a violation surfaces as
:class:`NumberConflictError`, which callers treat as retryable.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import select, update
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from cglctl.domain.numbering import EntityKind, Ordering, compare_visible, next_visible
from cglctl.infrastructure.database.schema import number_counters

if TYPE_CHECKING:
    from sqlalchemy import Connection


class NumberConflictError(Exception):
    """A visible number is already taken in its scope.

    Retryable: recompute the next number and try again.
    """

    retryable = True

    def __init__(self, scope: str, number: str) -> None:
        self.scope = scope
        self.number = number
        super().__init__(f"Visible number {number} is already taken in scope {scope!r}")


def scope_key(kind: EntityKind | str, book_id: str | None = None) -> str:
    """Build the numbering scope key for *kind*.

    Books share one global scope; chapters and records are scoped to
    their book.

    Raises:
        ValueError: If *kind* is unknown or a book-scoped kind lacks *book_id*.
    """
    kind = EntityKind(kind)
    if kind is EntityKind.BOOK:
        return "books"
    if not book_id:
        msg = f"{kind} numbering is scoped to a book; book_id is required"
        raise ValueError(msg)
    return f"book:{book_id}:{kind}s"


def _greater(a: str | None, b: str | None) -> str | None:
    if a is None:
        return b
    if b is None:
        return a
    return a if compare_visible(a, b) is not Ordering.LESS else b


def claim_scope(conn: Connection, scope: str) -> None:
    """Take the write lock for *scope*, creating its counter row if missing.

    Call this before reading the scope's observed maximum so the read
    cannot be invalidated by a concurrent writer.
    """
    conn.execute(
        sqlite_insert(number_counters)
        .values(scope=scope, last_value=None)
        .on_conflict_do_nothing(index_elements=["scope"])
    )


def reserve_visible_number(
    conn: Connection,
    scope: str,
    step: int | float | str | Decimal,
    *,
    observed_last: str | None = None,
    strict: bool = False,
) -> str:
    """Claim the next visible number in *scope*.

    Args:
        conn: Active SQLAlchemy connection (caller owns the transaction).
        scope: Scope key from :func:`scope_key`.
        step: Increment for this entity kind.
        observed_last: Highest number currently stored in the scope.
        strict: Disable the lenient numeric fallback when parsing.

    Returns:
        The reserved number, e.g. ``"005.00"``.

    Raises:
        NumberOverflowError: If the next number would exceed ``999.99``.
    """
    claim_scope(conn, scope)

    stored = conn.execute(
        select(number_counters.c.last_value).where(number_counters.c.scope == scope)
    ).scalar_one()

    number = next_visible(_greater(stored, observed_last), step, strict=strict)

    conn.execute(
        update(number_counters)
        .where(number_counters.c.scope == scope)
        .values(last_value=number)
    )
    return number
