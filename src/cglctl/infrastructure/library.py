"""Library: repository pattern over the cglctl database.

The Library is the single dependency injected into every service.  It
owns the database engine and hands out transactions.  A
:class:`LibraryTransaction` bundles the data-access patterns that need
to run under one transaction: reading a scope's highest visible number,
reserving the next one, and inserting a numbered row.
"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError

from cglctl.domain.numbering import EntityKind, format_visible
from cglctl.infrastructure.database.counters import (
    NumberConflictError,
    claim_scope,
    reserve_visible_number,
    scope_key,
)
from cglctl.infrastructure.database.engine import init_database
from cglctl.infrastructure.database.schema import books, chapters, records

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Connection, Table
    from sqlalchemy.engine import Engine

    from cglctl.config.settings import CglSettings

logger = logging.getLogger(__name__)

_NUMBERED_TABLES: dict[EntityKind, Table] = {
    EntityKind.BOOK: books,
    EntityKind.CHAPTER: chapters,
    EntityKind.RECORD: records,
}

_UNIQUE_FAILED = re.compile(r"UNIQUE constraint failed: (?P<columns>[\w.,\s]+)")


def unique_violation_columns(exc: IntegrityError) -> list[str]:
    """Column names named by a SQLite UNIQUE violation, or ``[]``.

    SQLite reports ``UNIQUE constraint failed: books.major, books.minor``.
    """
    match = _UNIQUE_FAILED.search(str(exc.orig))
    if match is None:
        return []
    return [part.strip().rsplit(".", 1)[-1] for part in match.group("columns").split(",")]


# ---------------------------------------------------------------------------
# LibraryTransaction: yielded to callers within transaction()
# ---------------------------------------------------------------------------


@dataclass
class LibraryTransaction:
    """Active transaction context with the DB connection."""

    conn: Connection
    _library: Library

    def last_visible(self, kind: EntityKind, *, book_id: str | None = None) -> str | None:
        """Highest visible number stored in the scope, or None if it is empty."""
        table = _NUMBERED_TABLES[kind]
        stmt = select(table.c.major, table.c.minor)
        if kind is not EntityKind.BOOK:
            stmt = stmt.where(table.c.book_id == book_id)
        row = self.conn.execute(
            stmt.order_by(table.c.major.desc(), table.c.minor.desc()).limit(1)
        ).first()
        if row is None:
            return None
        return format_visible(row.major, row.minor)

    def reserve_number(
        self,
        kind: EntityKind,
        step: int | float | str | Decimal,
        *,
        book_id: str | None = None,
    ) -> str:
        """Reserve the next visible number for a new *kind* in its scope."""
        scope = scope_key(kind, book_id)
        claim_scope(self.conn, scope)
        observed = self.last_visible(kind, book_id=book_id)
        number = reserve_visible_number(
            self.conn,
            scope,
            step,
            observed_last=observed,
            strict=self._library.settings.numbering.strict_parse,
        )
        logger.debug("Reserved %s in %s (observed max %s)", number, scope, observed)
        return number

    def number_taken(
        self,
        kind: EntityKind,
        major: int,
        minor: int,
        *,
        book_id: str | None = None,
    ) -> bool:
        """Whether ``major.minor`` is already used in the scope."""
        table = _NUMBERED_TABLES[kind]
        stmt = select(table.c.id).where(table.c.major == major, table.c.minor == minor)
        if kind is not EntityKind.BOOK:
            stmt = stmt.where(table.c.book_id == book_id)
        return self.conn.execute(stmt).first() is not None

    def insert_numbered(
        self,
        kind: EntityKind,
        number: str,
        values: dict[str, Any],
        *,
        book_id: str | None = None,
    ) -> None:
        """Insert a row carrying visible *number* (``MMM.mm``).

        Raises:
            NumberConflictError: If the number is already taken in its scope.
            IntegrityError: For any other constraint violation.
        """
        table = _NUMBERED_TABLES[kind]
        major_text, minor_text = number.split(".")
        row = {**values, "major": int(major_text), "minor": int(minor_text)}
        if kind is not EntityKind.BOOK:
            row["book_id"] = book_id
        try:
            self.conn.execute(insert(table).values(**row))
        except IntegrityError as exc:
            columns = unique_violation_columns(exc)
            if "major" in columns and "minor" in columns:
                raise NumberConflictError(scope_key(kind, book_id), number) from exc
            raise


# ---------------------------------------------------------------------------
# Library: the repository
# ---------------------------------------------------------------------------


class Library:
    """Repository encapsulating database access.

    Constructed once at CLI startup from :class:`CglSettings` and stored
    in ``click.Context.obj``.  Services receive the Library via their
    :class:`BaseService` constructor.
    """

    def __init__(self, settings: CglSettings) -> None:
        self._settings = settings
        self._engine: Engine = init_database(
            self.root,
            filename=settings.database.filename,
            busy_timeout=settings.database.busy_timeout,
        )

    @property
    def root(self) -> Path:
        """The library root directory."""
        return self._settings.library_root

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def settings(self) -> CglSettings:
        """The resolved settings for this library."""
        return self._settings

    def close(self) -> None:
        """Dispose of the engine's pooled connections."""
        self._engine.dispose()

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        """Read-only connection (no transaction is committed)."""
        with self._engine.connect() as conn:
            yield conn

    @contextmanager
    def transaction(self) -> Iterator[LibraryTransaction]:
        """Database transaction: commit on success, rollback on exception.

        Usage::

            with library.transaction() as txn:
                number = txn.reserve_number(EntityKind.BOOK, 5)
                txn.insert_numbered(EntityKind.BOOK, number, {...})
        """
        with self._engine.begin() as conn:
            yield LibraryTransaction(conn=conn, _library=self)
