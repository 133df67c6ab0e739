"""Command group: chapters (add, list)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cglctl.commands._base import CglGroup
from cglctl.domain.models import ContentOption, DisplayOption
from cglctl.services.books import BookService

if TYPE_CHECKING:
    from cglctl.commands._context import AppContext

_CHAPTER_EXAMPLES = """\
  cglctl chapter add bk_0123456789ab "In the Beginning"
  cglctl chapter add bk_0123456789ab "Appendix" --display APPENDIX --hidden
  cglctl chapter list bk_0123456789ab"""


@click.group(cls=CglGroup, examples=_CHAPTER_EXAMPLES)
def chapter() -> None:
    """Add and list chapters within a book."""


@chapter.command(
    examples="""\
  cglctl chapter add bk_0123456789ab "In the Beginning"
  cglctl chapter add bk_0123456789ab "Tables" --content TABLE_ONLY
  cglctl chapter add bk_0123456789ab "Notes" --header "Editor's notes" --by editor"""
)
@click.argument("book_id")
@click.argument("title")
@click.option("--slug", default=None, help="Slug (defaults to the slugified title).")
@click.option("--header", default="", help="Chapter header line.")
@click.option("--head-note", "page_head_note", default="", help="Running page head note.")
@click.option("--intro", default="", help="Introductory text.")
@click.option(
    "--hidden",
    is_flag=True,
    help="Leave the chapter out of the table of contents.",
)
@click.option("--special-numbering", default="", help="Free-form numbering label.")
@click.option(
    "--content",
    "content_option",
    type=click.Choice([o.value for o in ContentOption]),
    default=ContentOption.MIXED.value,
    help="What the chapter holds.",
)
@click.option(
    "--display",
    "display_option",
    type=click.Choice([o.value for o in DisplayOption]),
    default=DisplayOption.NORMAL.value,
    help="How the chapter is presented.",
)
@click.option("--notes", default="", help="Editorial notes.")
@click.option("--by", "created_by", default="system", help="Author of the change.")
@click.pass_obj
def add(
    app: AppContext,
    book_id: str,
    title: str,
    slug: str | None,
    header: str,
    page_head_note: str,
    intro: str,
    hidden: bool,
    special_numbering: str,
    content_option: str,
    display_option: str,
    notes: str,
    created_by: str,
) -> None:
    """Add a chapter with the next visible number in the book."""
    fields: dict[str, object] = {
        "header": header,
        "page_head_note": page_head_note,
        "intro": intro,
        "show_in_contents": not hidden,
        "special_numbering": special_numbering,
        "content_option": content_option,
        "display_option": display_option,
        "notes": notes,
        "created_by": created_by,
    }
    if slug:
        fields["slug"] = slug
    app.emit(BookService(app.library).create_chapter(book_id, title, **fields))


@chapter.command(
    "list",
    examples="""\
  cglctl chapter list bk_0123456789ab
  cglctl --json chapter list bk_0123456789ab""",
)
@click.argument("book_id")
@click.pass_obj
def list_cmd(app: AppContext, book_id: str) -> None:
    """List a book's chapters in visible-number order."""
    app.emit(BookService(app.library).list_chapters(book_id))
