"""Command group: records (add, list)."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import click

from cglctl.commands._base import CglGroup
from cglctl.services.books import BookService

if TYPE_CHECKING:
    from cglctl.commands._context import AppContext

_RECORD_EXAMPLES = """\
  cglctl record add bk_0123456789ab "In the beginning..."
  cglctl record add bk_0123456789ab "Inserted later" --visible 002.50
  cglctl record list bk_0123456789ab --from 010.00 --to 050.00"""


def _parse_meta(_ctx: click.Context, _param: click.Parameter, value: str | None) -> Any:
    if value is None:
        return None
    try:
        meta = json.loads(value)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc.msg}") from exc
    if not isinstance(meta, dict):
        raise click.BadParameter("must be a JSON object")
    return meta


@click.group(cls=CglGroup, examples=_RECORD_EXAMPLES)
def record() -> None:
    """Add and list records within a book."""


@record.command(
    examples="""\
  cglctl record add bk_0123456789ab "Verse text"
  cglctl record add bk_0123456789ab "Verse text" --chapter ch_0123456789ab
  cglctl record add bk_0123456789ab "Between 0 and 10" --visible 002.50
  cglctl record add bk_0123456789ab "Tagged" --meta '{"source": "scan-12"}'"""
)
@click.argument("book_id")
@click.argument("content", required=False, default="")
@click.option("--chapter", "chapter_id", default=None, help="Chapter the record belongs to.")
@click.option(
    "--visible",
    default=None,
    help="Insert at this exact number (MMM.mm) instead of the next one.",
)
@click.option("--meta", callback=_parse_meta, default=None, help="JSON object of metadata.")
@click.pass_obj
def add(
    app: AppContext,
    book_id: str,
    content: str,
    chapter_id: str | None,
    visible: str | None,
    meta: dict[str, Any] | None,
) -> None:
    """Add a record, numbered automatically or at --visible."""
    svc = BookService(app.library)
    app.emit(
        svc.create_record(book_id, content, chapter_id=chapter_id, meta=meta, visible=visible)
    )


@record.command(
    "list",
    examples="""\
  cglctl record list bk_0123456789ab
  cglctl record list bk_0123456789ab --from 010.00
  cglctl record list bk_0123456789ab --from 010.00 --to 050.00 --chapter ch_0123456789ab""",
)
@click.argument("book_id")
@click.option("--from", "start", default=None, help="Lowest visible number (inclusive).")
@click.option("--to", "end", default=None, help="Highest visible number (inclusive).")
@click.option("--chapter", "chapter_id", default=None, help="Only records in this chapter.")
@click.pass_obj
def list_cmd(
    app: AppContext,
    book_id: str,
    start: str | None,
    end: str | None,
    chapter_id: str | None,
) -> None:
    """List a book's records within a visible-number range."""
    svc = BookService(app.library)
    app.emit(svc.list_records(book_id, start=start, end=end, chapter_id=chapter_id))
