"""Command group: authors' private notes (add, list)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cglctl.commands._base import CglGroup
from cglctl.services.annotations import AnnotationService

if TYPE_CHECKING:
    from cglctl.commands._context import AppContext

_NOTE_EXAMPLES = """\
  cglctl note add 005.00 010.00 020.00 "Check this against the Hebrew"
  cglctl note list --book 005.00"""


@click.group(cls=CglGroup, examples=_NOTE_EXAMPLES)
def note() -> None:
    """Private author notes pinned to a location."""


@note.command(
    examples="""\
  cglctl note add 005.00 010.00 020.00 "Check this against the Hebrew"
  cglctl --json note add 5 10 20 "Rephrase\""""
)
@click.argument("book_no")
@click.argument("chapter_no")
@click.argument("record_no")
@click.argument("contents")
@click.pass_obj
def add(app: AppContext, book_no: str, chapter_no: str, record_no: str, contents: str) -> None:
    """Pin a note to book/chapter/record numbers (one per location)."""
    svc = AnnotationService(app.library)
    app.emit(svc.add_author_note(book_no, chapter_no, record_no, contents))


@note.command(
    "list",
    examples="""\
  cglctl note list
  cglctl note list --book 005.00""",
)
@click.option("--book", "book_no", default=None, help="Only notes in this book number.")
@click.pass_obj
def list_cmd(app: AppContext, book_no: str | None) -> None:
    """List author notes by location."""
    app.emit(AnnotationService(app.library).list_author_notes(book_no=book_no))
