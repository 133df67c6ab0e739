"""Command group: books (create, list, get, status)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cglctl.commands._base import CglGroup
from cglctl.domain.ids import validate_id
from cglctl.domain.lifecycle import PublicationStatus
from cglctl.services.books import BookService

if TYPE_CHECKING:
    from cglctl.commands._context import AppContext

_STATUS_CHOICE = click.Choice([s.value for s in PublicationStatus], case_sensitive=False)

_BOOK_EXAMPLES = """\
  cglctl book create "Genesis Commentary"
  cglctl book create "Psalms" --intro "Songs and prayers" --group 2
  cglctl book list --status published
  cglctl book get bk_0123456789ab
  cglctl book status bk_0123456789ab review"""


@click.group(cls=CglGroup, examples=_BOOK_EXAMPLES)
def book() -> None:
    """Create and inspect books."""


@book.command(
    examples="""\
  cglctl book create "Genesis Commentary"
  cglctl book create "Psalms" --slug psalms --status review
  cglctl --json book create "Proverbs" --group 3"""
)
@click.argument("title")
@click.option("--intro", default="", help="Introductory text.")
@click.option("--slug", default=None, help="URL slug (defaults to the slugified title).")
@click.option("--status", type=_STATUS_CHOICE, default="draft", help="Initial status.")
@click.option("--group", "group_no", type=int, default=None, help="Group number.")
@click.pass_obj
def create(
    app: AppContext,
    title: str,
    intro: str,
    slug: str | None,
    status: str,
    group_no: int | None,
) -> None:
    """Create a book with the next visible number."""
    svc = BookService(app.library)
    app.emit(svc.create_book(title, intro=intro, slug=slug, status=status, group_no=group_no))


@book.command(
    "list",
    examples="""\
  cglctl book list
  cglctl book list --status draft --group 1
  cglctl -q book list""",
)
@click.option("--status", type=_STATUS_CHOICE, default=None, help="Filter by status.")
@click.option("--group", "group_no", type=int, default=None, help="Filter by group number.")
@click.pass_obj
def list_cmd(app: AppContext, status: str | None, group_no: int | None) -> None:
    """List books in visible-number order."""
    app.emit(BookService(app.library).list_books(status=status, group_no=group_no))


@book.command(
    examples="""\
  cglctl book get bk_0123456789ab
  cglctl --json book get bk_0123456789ab"""
)
@click.argument("book_id")
@click.pass_obj
def get(app: AppContext, book_id: str) -> None:
    """Show one book with its chapter and record counts."""
    app.emit(BookService(app.library).get_book(book_id))


@book.command(
    examples="""\
  cglctl book status bk_0123456789ab review
  cglctl book status ch_0123456789ab published"""
)
@click.argument("entity_id")
@click.argument("new_status", metavar="STATUS", type=_STATUS_CHOICE)
@click.pass_obj
def status(app: AppContext, entity_id: str, new_status: str) -> None:
    """Move a book (or a chapter, by ch_ ID) to a new publication status."""
    kind = "chapter" if validate_id(entity_id, "chapter") else "book"
    app.emit(BookService(app.library).set_status(kind, entity_id, new_status))
