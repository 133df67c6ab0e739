"""SQLAlchemy Core table definitions for the cglctl database.

Visible numbers are stored as two integer columns (``major``, ``minor``)
so that sorting and range queries stay numeric.  Each numbered table has
a UNIQUE constraint over its numbering scope; that constraint is the
final guard against two writers claiming the same number.
"""

from __future__ import annotations

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()


def _visible_columns() -> list[Column]:
    return [
        Column("major", Integer, nullable=False),
        Column("minor", Integer, nullable=False, default=0, server_default="0"),
    ]


def _visible_checks(table: str) -> list[CheckConstraint]:
    return [
        CheckConstraint("major BETWEEN 0 AND 999", name=f"ck_{table}_major"),
        CheckConstraint("minor BETWEEN 0 AND 99", name=f"ck_{table}_minor"),
    ]


books = Table(
    "books",
    metadata,
    Column("id", Text, primary_key=True),
    *_visible_columns(),
    Column("title", Text, nullable=False),
    Column("intro", Text, nullable=False, default="", server_default=""),
    Column("slug", Text, nullable=False, unique=True),
    Column("status", Text, nullable=False, default="draft", server_default="draft"),
    Column("group_no", Integer),
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
    UniqueConstraint("major", "minor", name="uq_books_visible"),
    *_visible_checks("books"),
)

chapters = Table(
    "chapters",
    metadata,
    Column("id", Text, primary_key=True),
    Column("book_id", Text, ForeignKey("books.id"), nullable=False),
    *_visible_columns(),
    Column("title", Text, nullable=False),
    Column("slug", Text, nullable=False),
    Column("header", Text, nullable=False, default="", server_default=""),
    Column("page_head_note", Text, nullable=False, default="", server_default=""),
    Column("show_in_contents", Integer, nullable=False, default=1, server_default="1"),
    Column("special_numbering", Text, nullable=False, default="", server_default=""),
    Column("intro", Text, nullable=False, default="", server_default=""),
    Column("content_option", Text, nullable=False, default="MIXED", server_default="MIXED"),
    Column("display_option", Text, nullable=False, default="NORMAL", server_default="NORMAL"),
    Column("content_html", Text, nullable=False, default="", server_default=""),
    Column("notes", Text, nullable=False, default="", server_default=""),
    Column("status", Text, nullable=False, default="draft", server_default="draft"),
    Column("created_by", Text, nullable=False, default="system", server_default="system"),
    Column("updated_by", Text, nullable=False, default="system", server_default="system"),
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
    UniqueConstraint("book_id", "major", "minor", name="uq_chapters_visible"),
    UniqueConstraint("book_id", "slug", name="uq_chapters_slug"),
    *_visible_checks("chapters"),
)

records = Table(
    "records",
    metadata,
    Column("id", Text, primary_key=True),
    Column("book_id", Text, ForeignKey("books.id"), nullable=False),
    Column("chapter_id", Text, ForeignKey("chapters.id")),
    *_visible_columns(),
    Column("content", Text, nullable=False, default="", server_default=""),
    Column("meta", JSON, nullable=False, default=dict),
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
    UniqueConstraint("book_id", "major", "minor", name="uq_records_visible"),
    *_visible_checks("records"),
)

doc_inserts = Table(
    "doc_inserts",
    metadata,
    Column("id", Text, primary_key=True),
    Column("after_book", Text, nullable=False),
    Column("after_chapter", Text, nullable=False),
    Column("after_record", Text, nullable=False),
    Column("reason", Text, nullable=False),
    Column("created", Text, nullable=False),
)

author_notes = Table(
    "author_notes",
    metadata,
    Column("id", Text, primary_key=True),
    Column("book_no", Text, nullable=False),
    Column("chapter_no", Text, nullable=False),
    Column("record_no", Text, nullable=False),
    Column("contents", Text, nullable=False),
    Column("created", Text, nullable=False),
    Column("modified", Text, nullable=False),
    UniqueConstraint("book_no", "chapter_no", "record_no", name="uq_author_notes_location"),
)

number_counters = Table(
    "number_counters",
    metadata,
    Column("scope", Text, primary_key=True),
    Column("last_value", Text),  # MMM.mm, NULL until the first reservation
)

# ---------------------------------------------------------------------------
# Indexes for frequently filtered columns
# ---------------------------------------------------------------------------

Index("ix_books_status", books.c.status)
Index("ix_books_group_no", books.c.group_no, books.c.major)
Index("ix_chapters_status", chapters.c.status)
Index("ix_records_chapter", records.c.chapter_id)
Index("ix_doc_inserts_after", doc_inserts.c.after_book, doc_inserts.c.after_chapter)
