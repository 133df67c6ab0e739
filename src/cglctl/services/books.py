"""BookService: books, chapters, and records with visible numbering.

Creation pipeline: VALIDATE → CHECK → RESERVE → PERSIST → RESPOND

RESERVE claims the next visible number in the entity's scope inside the
same transaction as PERSIST (see :mod:`cglctl.infrastructure.database.counters`).
A uniqueness conflict on PERSIST rolls both back and the pipeline is
retried from CHECK.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import func, select, update

from cglctl.domain.ids import generate_id
from cglctl.domain.lifecycle import PublicationStatus, is_valid_transition
from cglctl.domain.models import (
    BookCreate,
    ChapterCreate,
    RecordCreate,
    validate_create,
)
from cglctl.domain.numbering import (
    MAX_VISIBLE,
    MIN_VISIBLE,
    EntityKind,
    Ordering,
    VisibleNumber,
    compare_visible,
    numeric_parts,
    resolve_range,
)
from cglctl.infrastructure.database.filters import visible_range_clause
from cglctl.infrastructure.database.schema import books, chapters, records
from cglctl.services._helpers import now_iso, row_to_dict
from cglctl.services.base import BaseService
from cglctl.services.result import ServiceResult

if TYPE_CHECKING:
    from sqlalchemy import Connection

    from cglctl.infrastructure.library import LibraryTransaction

logger = structlog.get_logger(__name__)

_STATUS_TABLES = {"book": books, "chapter": chapters}


class BookService(BaseService):
    """Creates and reads books, chapters, and records."""

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_book(
        self,
        title: str,
        *,
        intro: str = "",
        slug: str | None = None,
        status: str = "draft",
        group_no: int | None = None,
    ) -> ServiceResult:
        """Create a book numbered after the highest existing book."""
        op = "create_book"

        # ── VALIDATE ──────────────────────────────────────────────
        payload: dict[str, Any] = {
            "title": title,
            "intro": intro,
            "status": status,
            "group_no": group_no,
        }
        if slug:
            payload["slug"] = slug
        model, vr = validate_create(BookCreate, payload)
        if model is None:
            return ServiceResult.failure(op, "VALIDATION_FAILED", "; ".join(vr.errors))

        step = self._library.settings.numbering.book_step

        def write(txn: LibraryTransaction) -> ServiceResult:
            # ── CHECK ─────────────────────────────────────────────
            taken = txn.conn.execute(select(books.c.id).where(books.c.slug == model.slug)).first()
            if taken is not None:
                return ServiceResult.failure(
                    op, "DUPLICATE_SLUG", f"Slug '{model.slug}' is already in use"
                )

            # ── RESERVE → PERSIST ─────────────────────────────────
            number = txn.reserve_number(EntityKind.BOOK, step)
            book_id = generate_id("book")
            now = now_iso()
            txn.insert_numbered(
                EntityKind.BOOK,
                number,
                {
                    "id": book_id,
                    "title": model.title,
                    "intro": model.intro,
                    "slug": model.slug,
                    "status": str(model.status),
                    "group_no": model.group_no,
                    "created": now,
                    "modified": now,
                },
            )
            logger.debug("book_created", id=book_id, visible=number)

            # ── RESPOND ───────────────────────────────────────────
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "id": book_id,
                    "visible": number,
                    "title": model.title,
                    "slug": model.slug,
                    "status": str(model.status),
                },
            )

        return self._write_numbered(op, write)

    def create_chapter(self, book_id: str, title: str, **fields: Any) -> ServiceResult:
        """Add a chapter to *book_id*, numbered within that book."""
        op = "create_chapter"

        model, vr = validate_create(ChapterCreate, {"title": title, **fields})
        if model is None:
            return ServiceResult.failure(op, "VALIDATION_FAILED", "; ".join(vr.errors))

        step = self._library.settings.numbering.chapter_step

        def write(txn: LibraryTransaction) -> ServiceResult:
            if not self._book_exists(txn.conn, book_id):
                return _book_not_found(op, book_id)
            taken = txn.conn.execute(
                select(chapters.c.id).where(
                    chapters.c.book_id == book_id, chapters.c.slug == model.slug
                )
            ).first()
            if taken is not None:
                return ServiceResult.failure(
                    op,
                    "DUPLICATE_SLUG",
                    f"Slug '{model.slug}' is already used by a chapter of this book",
                )

            number = txn.reserve_number(EntityKind.CHAPTER, step, book_id=book_id)
            chapter_id = generate_id("chapter")
            now = now_iso()
            values = model.model_dump(mode="json")
            values["show_in_contents"] = int(model.show_in_contents)
            values["updated_by"] = model.created_by
            txn.insert_numbered(
                EntityKind.CHAPTER,
                number,
                {"id": chapter_id, **values, "created": now, "modified": now},
                book_id=book_id,
            )
            logger.debug("chapter_created", id=chapter_id, book_id=book_id, visible=number)

            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "id": chapter_id,
                    "book_id": book_id,
                    "visible": number,
                    "title": model.title,
                    "slug": model.slug,
                },
            )

        return self._write_numbered(op, write)

    def create_record(
        self,
        book_id: str,
        content: str = "",
        *,
        chapter_id: str | None = None,
        meta: dict[str, Any] | None = None,
        visible: str | None = None,
    ) -> ServiceResult:
        """Add a record to *book_id*.

        With *visible* the record is inserted manually at that number
        (e.g. ``"002.50"`` in the gap between ``000.00`` and ``010.00``);
        otherwise the next number in the book's record scope is reserved.
        """
        op = "create_record"

        model, vr = validate_create(
            RecordCreate, {"content": content, "chapter_id": chapter_id, "meta": meta or {}}
        )
        if model is None:
            return ServiceResult.failure(op, "VALIDATION_FAILED", "; ".join(vr.errors))

        manual: VisibleNumber | None = None
        if visible is not None:
            manual = VisibleNumber.parse(visible, strict=True)
            if manual is None:
                return ServiceResult.failure(
                    op,
                    "INVALID_NUMBER",
                    f"{visible!r} is not a visible number (expected MMM.mm)",
                )

        step = self._library.settings.numbering.record_step

        def write(txn: LibraryTransaction) -> ServiceResult:
            warnings: list[str] = []
            if not self._book_exists(txn.conn, book_id):
                return _book_not_found(op, book_id)
            if model.chapter_id is not None:
                owner = txn.conn.execute(
                    select(chapters.c.book_id).where(chapters.c.id == model.chapter_id)
                ).first()
                if owner is None:
                    return ServiceResult.failure(
                        op, "NOT_FOUND", f"No chapter found with ID: {model.chapter_id}"
                    )
                if owner.book_id != book_id:
                    return ServiceResult.failure(
                        op,
                        "VALIDATION_FAILED",
                        f"Chapter {model.chapter_id} belongs to another book",
                    )

            if manual is None:
                number = txn.reserve_number(EntityKind.RECORD, step, book_id=book_id)
            else:
                number = str(manual)
                if txn.number_taken(
                    EntityKind.RECORD, manual.major, manual.minor, book_id=book_id
                ):
                    return ServiceResult.failure(
                        op,
                        "NUMBER_TAKEN",
                        f"Record {number} already exists in this book",
                        number=number,
                        retryable=False,
                    )
                last = txn.last_visible(EntityKind.RECORD, book_id=book_id)
                if last is not None and compare_visible(number, last) is Ordering.GREATER:
                    warnings.append(
                        f"Manual number {number} is above the current maximum {last}; "
                        "automatic numbering continues from it"
                    )

            record_id = generate_id("record")
            now = now_iso()
            txn.insert_numbered(
                EntityKind.RECORD,
                number,
                {
                    "id": record_id,
                    "chapter_id": model.chapter_id,
                    "content": model.content,
                    "meta": model.meta,
                    "created": now,
                    "modified": now,
                },
                book_id=book_id,
            )
            logger.debug(
                "record_created", id=record_id, book_id=book_id, visible=number, manual=bool(manual)
            )

            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "id": record_id,
                    "book_id": book_id,
                    "chapter_id": model.chapter_id,
                    "visible": number,
                },
                warnings=warnings,
            )

        return self._write_numbered(op, write)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_book(self, book_id: str) -> ServiceResult:
        """Fetch one book with its chapter and record counts."""
        op = "get_book"
        with self._library.connect() as conn:
            row = conn.execute(select(books).where(books.c.id == book_id)).first()
            if row is None:
                return _book_not_found(op, book_id)
            chapter_count = conn.execute(
                select(func.count()).select_from(chapters).where(chapters.c.book_id == book_id)
            ).scalar_one()
            record_count = conn.execute(
                select(func.count()).select_from(records).where(records.c.book_id == book_id)
            ).scalar_one()

        data = row_to_dict(row)
        data["chapters"] = int(chapter_count)
        data["records"] = int(record_count)
        return ServiceResult(ok=True, op=op, data=data)

    def list_books(
        self,
        *,
        status: str | None = None,
        group_no: int | None = None,
    ) -> ServiceResult:
        """List books in ascending visible-number order."""
        op = "list_books"
        stmt = select(books)
        if status is not None:
            stmt = stmt.where(books.c.status == status)
        if group_no is not None:
            stmt = stmt.where(books.c.group_no == group_no)
        stmt = stmt.order_by(books.c.major, books.c.minor)

        with self._library.connect() as conn:
            items = [row_to_dict(row) for row in conn.execute(stmt)]
        return ServiceResult(ok=True, op=op, data={"count": len(items), "items": items})

    def list_chapters(self, book_id: str) -> ServiceResult:
        """List a book's chapters in ascending visible-number order."""
        op = "list_chapters"
        with self._library.connect() as conn:
            if not self._book_exists(conn, book_id):
                return _book_not_found(op, book_id)
            rows = conn.execute(
                select(chapters)
                .where(chapters.c.book_id == book_id)
                .order_by(chapters.c.major, chapters.c.minor)
            )
            items = [row_to_dict(row) for row in rows]
        return ServiceResult(
            ok=True, op=op, data={"book_id": book_id, "count": len(items), "items": items}
        )

    def list_records(
        self,
        book_id: str,
        *,
        start: str | None = None,
        end: str | None = None,
        chapter_id: str | None = None,
    ) -> ServiceResult:
        """List a book's records between *start* and *end* (inclusive).

        Missing bounds default to the whole book; inverted bounds return
        an empty list.
        """
        op = "list_records"
        warnings: list[str] = []
        for label, bound, default in (("start", start, MIN_VISIBLE), ("end", end, MAX_VISIBLE)):
            if bound is not None and numeric_parts(bound, strict=True) is None:
                warnings.append(f"Ignoring malformed {label} bound {bound!r}; using {default}")

        bounds = resolve_range(start, end)
        if bounds.is_empty:
            warnings.append(f"Range {bounds} is inverted; nothing selected")

        stmt = select(records).where(
            records.c.book_id == book_id,
            visible_range_clause(records.c.major, records.c.minor, start, end),
        )
        if chapter_id is not None:
            stmt = stmt.where(records.c.chapter_id == chapter_id)
        stmt = stmt.order_by(records.c.major, records.c.minor)

        with self._library.connect() as conn:
            if not self._book_exists(conn, book_id):
                return _book_not_found(op, book_id)
            items = [row_to_dict(row) for row in conn.execute(stmt)]

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "book_id": book_id,
                "range": str(bounds),
                "count": len(items),
                "items": items,
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def set_status(self, kind: str, entity_id: str, status: str) -> ServiceResult:
        """Move a book or chapter along the publication lifecycle."""
        op = "set_status"
        table = _STATUS_TABLES.get(kind)
        if table is None:
            return ServiceResult.failure(
                op, "VALIDATION_FAILED", f"Status applies to books and chapters, not {kind!r}"
            )
        try:
            target = PublicationStatus(status)
        except ValueError:
            allowed = ", ".join(s.value for s in PublicationStatus)
            return ServiceResult.failure(
                op, "VALIDATION_FAILED", f"Unknown status {status!r} (expected one of {allowed})"
            )

        with self._library.transaction() as txn:
            row = txn.conn.execute(select(table.c.status).where(table.c.id == entity_id)).first()
            if row is None:
                return ServiceResult.failure(
                    op, "NOT_FOUND", f"No {kind} found with ID: {entity_id}"
                )
            if not is_valid_transition(row.status, str(target)):
                return ServiceResult.failure(
                    op,
                    "INVALID_TRANSITION",
                    f"Cannot move {kind} from {row.status!r} to {str(target)!r}",
                    current=row.status,
                )
            txn.conn.execute(
                update(table)
                .where(table.c.id == entity_id)
                .values(status=str(target), modified=now_iso())
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={"id": entity_id, "kind": kind, "from": row.status, "status": str(target)},
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _book_exists(conn: Connection, book_id: str) -> bool:
        return conn.execute(select(books.c.id).where(books.c.id == book_id)).first() is not None


def _book_not_found(op: str, book_id: str) -> ServiceResult:
    return ServiceResult.failure(op, "NOT_FOUND", f"No book found with ID: {book_id}")
