"""AnnotationService: insertion requests and authors' private notes.

Both annotation kinds point at a location by visible number rather than
by row ID, so they stay meaningful even for locations that do not exist
yet (an insertion request names the gap *after* a given record).
"""

from __future__ import annotations

from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError

from cglctl.domain.ids import generate_id
from cglctl.domain.models import AuthorNoteCreate, DocInsertCreate, validate_create
from cglctl.domain.numbering import VisibleNumber
from cglctl.infrastructure.database.schema import author_notes, doc_inserts
from cglctl.services._helpers import now_iso, row_to_dict
from cglctl.services.base import BaseService
from cglctl.services.result import ServiceResult


class AnnotationService(BaseService):
    """Records insertion requests and private author notes."""

    def add_doc_insert(
        self,
        after_book: str,
        after_chapter: str,
        after_record: str,
        reason: str,
    ) -> ServiceResult:
        """Log a request to insert material after the given location."""
        op = "add_doc_insert"
        model, vr = validate_create(
            DocInsertCreate,
            {
                "after_book": after_book,
                "after_chapter": after_chapter,
                "after_record": after_record,
                "reason": reason,
            },
        )
        if model is None:
            return ServiceResult.failure(op, "VALIDATION_FAILED", "; ".join(vr.errors))

        insert_id = generate_id("insert")
        with self._library.transaction() as txn:
            txn.conn.execute(
                insert(doc_inserts).values(
                    id=insert_id, **model.model_dump(), created=now_iso()
                )
            )
        return ServiceResult(ok=True, op=op, data={"id": insert_id, **model.model_dump()})

    def list_doc_inserts(self, *, after_book: str | None = None) -> ServiceResult:
        """List insertion requests, ordered by location then age."""
        op = "list_doc_inserts"
        stmt = select(doc_inserts)
        if after_book is not None:
            number = VisibleNumber.parse(after_book, strict=True)
            if number is None:
                return _invalid_number(op, after_book)
            stmt = stmt.where(doc_inserts.c.after_book == str(number))
        stmt = stmt.order_by(
            doc_inserts.c.after_book,
            doc_inserts.c.after_chapter,
            doc_inserts.c.after_record,
            doc_inserts.c.created,
        )
        with self._library.connect() as conn:
            items = [row_to_dict(row) for row in conn.execute(stmt)]
        return ServiceResult(ok=True, op=op, data={"count": len(items), "items": items})

    def add_author_note(
        self,
        book_no: str,
        chapter_no: str,
        record_no: str,
        contents: str,
    ) -> ServiceResult:
        """Pin a private note to a book/chapter/record location.

        One note per location; a second note at the same place fails with
        ``DUPLICATE_NOTE``.
        """
        op = "add_author_note"
        model, vr = validate_create(
            AuthorNoteCreate,
            {
                "book_no": book_no,
                "chapter_no": chapter_no,
                "record_no": record_no,
                "contents": contents,
            },
        )
        if model is None:
            return ServiceResult.failure(op, "VALIDATION_FAILED", "; ".join(vr.errors))

        note_id = generate_id("note")
        now = now_iso()
        try:
            with self._library.transaction() as txn:
                txn.conn.execute(
                    insert(author_notes).values(
                        id=note_id, **model.model_dump(), created=now, modified=now
                    )
                )
        except IntegrityError:
            location = f"{model.book_no}/{model.chapter_no}/{model.record_no}"
            return ServiceResult.failure(
                op,
                "DUPLICATE_NOTE",
                f"A note already exists at {location}",
                location=location,
            )
        return ServiceResult(ok=True, op=op, data={"id": note_id, **model.model_dump()})

    def list_author_notes(self, *, book_no: str | None = None) -> ServiceResult:
        """List author notes, ordered by location."""
        op = "list_author_notes"
        stmt = select(author_notes)
        if book_no is not None:
            number = VisibleNumber.parse(book_no, strict=True)
            if number is None:
                return _invalid_number(op, book_no)
            stmt = stmt.where(author_notes.c.book_no == str(number))
        stmt = stmt.order_by(
            author_notes.c.book_no, author_notes.c.chapter_no, author_notes.c.record_no
        )
        with self._library.connect() as conn:
            items = [row_to_dict(row) for row in conn.execute(stmt)]
        return ServiceResult(ok=True, op=op, data={"count": len(items), "items": items})


def _invalid_number(op: str, value: str) -> ServiceResult:
    return ServiceResult.failure(
        op, "INVALID_NUMBER", f"{value!r} is not a visible number (expected MMM.mm)"
    )
