"""Command group: insertion requests (add, list)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cglctl.commands._base import CglGroup
from cglctl.services.annotations import AnnotationService

if TYPE_CHECKING:
    from cglctl.commands._context import AppContext

_INSERT_EXAMPLES = """\
  cglctl insert add 005.00 010.00 020.00 "Missing verse from the 1611 edition"
  cglctl insert list --book 005.00"""


@click.group(cls=CglGroup, examples=_INSERT_EXAMPLES)
def insert() -> None:
    """Request material to be inserted after a location."""


@insert.command(
    examples="""\
  cglctl insert add 005.00 010.00 020.00 "Missing verse"
  cglctl insert add 5 10 20.5 "Footnote from the margin\""""
)
@click.argument("after_book")
@click.argument("after_chapter")
@click.argument("after_record")
@click.argument("reason")
@click.pass_obj
def add(
    app: AppContext,
    after_book: str,
    after_chapter: str,
    after_record: str,
    reason: str,
) -> None:
    """Log an insertion request after book/chapter/record numbers."""
    svc = AnnotationService(app.library)
    app.emit(svc.add_doc_insert(after_book, after_chapter, after_record, reason))


@insert.command(
    "list",
    examples="""\
  cglctl insert list
  cglctl insert list --book 005.00""",
)
@click.option("--book", "after_book", default=None, help="Only requests in this book number.")
@click.pass_obj
def list_cmd(app: AppContext, after_book: str | None) -> None:
    """List insertion requests by location."""
    app.emit(AnnotationService(app.library).list_doc_inserts(after_book=after_book))
