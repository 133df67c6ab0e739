"""Command group: visible-number utilities (format, parse, next, compare).

None of these commands open the library; they only read the
``[numbering]`` settings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cglctl.commands._base import CglGroup
from cglctl.domain.numbering import EntityKind
from cglctl.services.numbering import NumberingService

if TYPE_CHECKING:
    from cglctl.commands._context import AppContext

_NUMBER_EXAMPLES = """\
  cglctl number format 12 5
  cglctl number parse 012.05
  cglctl number next 010.00 --kind record
  cglctl number compare 002.50 010.00"""


def _service(app: AppContext) -> NumberingService:
    return NumberingService(strict=app.settings.numbering.strict_parse)


@click.group(cls=CglGroup, examples=_NUMBER_EXAMPLES)
def number() -> None:
    """Format, parse, advance, and compare visible numbers."""


@number.command(
    "format",
    examples="""\
  cglctl number format 12
  cglctl number format 12 5
  cglctl -q number format 1 150""",
)
@click.argument("major", type=int)
@click.argument("minor", type=int, required=False, default=0)
@click.pass_obj
def format_cmd(app: AppContext, major: int, minor: int) -> None:
    """Render MAJOR and MINOR as MMM.mm."""
    app.emit(_service(app).format(major, minor))


@number.command(
    examples="""\
  cglctl number parse 012.05
  cglctl number parse 7"""
)
@click.argument("text")
@click.pass_obj
def parse(app: AppContext, text: str) -> None:
    """Split a visible number into major and minor parts."""
    app.emit(_service(app).parse(text))


@number.command(
    "next",
    examples="""\
  cglctl number next 010.00
  cglctl number next 005.00 --kind book
  cglctl number next 001.50 --step 0.25
  cglctl number next""",
)
@click.argument("last", required=False, default=None)
@click.option("--step", default=None, help="Increment (defaults to the configured step).")
@click.option(
    "--kind",
    type=click.Choice([k.value for k in EntityKind]),
    default=EntityKind.RECORD.value,
    help="Entity kind whose step applies.",
)
@click.pass_obj
def next_cmd(app: AppContext, last: str | None, step: str | None, kind: str) -> None:
    """Compute the number that follows LAST."""
    numbering = app.settings.numbering
    configured = {
        EntityKind.BOOK: numbering.book_step,
        EntityKind.CHAPTER: numbering.chapter_step,
        EntityKind.RECORD: numbering.record_step,
    }
    effective = step if step is not None else str(configured[EntityKind(kind)])
    app.emit(_service(app).next(last, step=effective, kind=EntityKind(kind)))


@number.command(
    examples="""\
  cglctl number compare 002.50 010.00
  cglctl --json number compare 010.00 010.00"""
)
@click.argument("a")
@click.argument("b")
@click.pass_obj
def compare(app: AppContext, a: str, b: str) -> None:
    """Order two visible numbers."""
    app.emit(_service(app).compare(a, b))
