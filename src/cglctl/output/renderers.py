"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from cglctl.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from cglctl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode.

    Lists print one ID per line; single results print their ID, or the
    visible number for the numbering operations.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item["id"]) for item in items if item.get("id"))

    for key in ("id", "visible", "result"):
        if key in result.data:
            return str(result.data[key])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="cgl.ok")
    op = Text(f"  {result.op}", style="cgl.op")
    console.print(label, op, sep="", end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="cgl.key")
    if isinstance(value, (dict, list)):
        v = Text(_json.dumps(value, separators=(",", ":")))
    elif key == "id" or key.endswith("_id"):
        v = Text(str(value), style="cgl.id")
    elif key == "visible":
        v = Text(str(value), style="cgl.visible")
    elif key == "title":
        v = Text(str(value), style="cgl.title")
    elif key == "status":
        v = Text(str(value), style=style_for_status(str(value)))
    else:
        v = Text(str(value))
    console.print(k, v, sep="", end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block (verbose only)."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}")


def _new_table() -> Table:
    return Table(show_header=True, show_lines=False, pad_edge=False, expand=False)


def _status_cell(item: dict[str, Any]) -> Text:
    status = str(item.get("status", ""))
    return Text(status, style=style_for_status(status))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="cgl.error")
    op = Text(f"  {result.op}", style="cgl.op")
    code = Text(f"  [{err.code}]" if err else "", style="cgl.key")
    console.print(label, op, code, Text(": "), Text(msg), sep="")

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Mutation renderers ────────────────────────────────────────────────


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render create/add/status results."""
    _status_line(console, result)
    mutation_keys = (
        "id",
        "visible",
        "book_id",
        "chapter_id",
        "title",
        "slug",
        "from",
        "status",
    )
    for key in mutation_keys:
        if key in result.data and result.data[key] is not None:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


def _render_annotation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render add_doc_insert / add_author_note results."""
    _status_line(console, result)
    d = result.data
    _field(console, "id", d["id"])
    location = [d.get(k) for k in ("after_book", "after_chapter", "after_record")]
    if not all(location):
        location = [d.get(k) for k in ("book_no", "chapter_no", "record_no")]
    _field(console, "location", " / ".join(str(part) for part in location))
    if verbose:
        _render_meta(console, result)


def _render_init(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render init_library results."""
    _status_line(console, result)
    for key in ("name", "path", "database", "config"):
        if key in result.data:
            _field(console, key, result.data[key])
    if result.data.get("config_created") is False:
        console.print("  [cgl.warning]kept existing config[/cgl.warning]")


# ── Query renderers ───────────────────────────────────────────────────


def _render_book(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render get_book as a panel."""
    d = result.data
    lines: list[str] = []
    for key in ("slug", "status", "group_no", "chapters", "records", "created", "modified"):
        val = d.get(key)
        if val is not None:
            lines.append(f"{key}: {val}")
    if verbose:
        lines.append(f"id: {d.get('id', '?')}")

    content = "\n".join(lines)
    intro = d.get("intro", "")
    if intro:
        content += f"\n\n{intro.strip()}"

    title = f"{d.get('visible', '?')} — {d.get('title', 'Untitled')}"
    style = style_for_status(str(d.get("status", "")))
    console.print(Panel(content, title=title, border_style=style or "dim", expand=False))


def _render_books(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render list_books as a table."""
    items = result.data.get("items", [])
    table = _new_table()
    table.add_column("No.", style="cgl.visible", no_wrap=True)
    table.add_column("Title", style="cgl.title")
    table.add_column("Status")
    table.add_column("Group", justify="right")
    table.add_column("ID", style="cgl.id", no_wrap=True)
    if verbose:
        table.add_column("Modified", style="dim")

    for item in items:
        group = item.get("group_no")
        row: list[Any] = [
            str(item.get("visible", "")),
            str(item.get("title", "")),
            _status_cell(item),
            "" if group is None else str(group),
            str(item.get("id", "")),
        ]
        if verbose:
            row.append(str(item.get("modified", "")))
        table.add_row(*row)

    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} books")


def _render_chapters(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render list_chapters as a table."""
    items = result.data.get("items", [])
    table = _new_table()
    table.add_column("No.", style="cgl.visible", no_wrap=True)
    table.add_column("Title", style="cgl.title")
    table.add_column("Status")
    table.add_column("Contents")
    table.add_column("ID", style="cgl.id", no_wrap=True)
    if verbose:
        table.add_column("Display")

    for item in items:
        row: list[Any] = [
            str(item.get("visible", "")),
            str(item.get("title", "")),
            _status_cell(item),
            "yes" if item.get("show_in_contents") else "no",
            str(item.get("id", "")),
        ]
        if verbose:
            row.append(str(item.get("display_option", "")))
        table.add_row(*row)

    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} chapters")


def _render_records(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render list_records as a table with the selected range."""
    items = result.data.get("items", [])
    table = _new_table()
    table.add_column("No.", style="cgl.visible", no_wrap=True)
    table.add_column("Content")
    table.add_column("Chapter", style="cgl.id", no_wrap=True)
    table.add_column("ID", style="cgl.id", no_wrap=True)
    if verbose:
        table.add_column("Meta", style="dim")

    for item in items:
        content = str(item.get("content", ""))
        if not verbose and len(content) > 60:
            content = content[:57] + "..."
        row: list[Any] = [
            str(item.get("visible", "")),
            content,
            str(item.get("chapter_id") or ""),
            str(item.get("id", "")),
        ]
        if verbose:
            row.append(_json.dumps(item.get("meta") or {}, separators=(",", ":")))
        table.add_row(*row)

    console.print(table)
    count = result.data.get("count", len(items))
    console.print(f"\n{count} records in {result.data.get('range', '')}")


def _render_doc_inserts(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render list_doc_inserts as a table."""
    items = result.data.get("items", [])
    table = _new_table()
    table.add_column("After", style="cgl.visible", no_wrap=True)
    table.add_column("Reason")
    table.add_column("ID", style="cgl.id", no_wrap=True)
    if verbose:
        table.add_column("Created", style="dim")

    for item in items:
        after = f"{item['after_book']} / {item['after_chapter']} / {item['after_record']}"
        row: list[Any] = [after, str(item.get("reason", "")), str(item.get("id", ""))]
        if verbose:
            row.append(str(item.get("created", "")))
        table.add_row(*row)

    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} insertion requests")


def _render_author_notes(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    """Render list_author_notes as a table."""
    items = result.data.get("items", [])
    table = _new_table()
    table.add_column("Location", style="cgl.visible", no_wrap=True)
    table.add_column("Contents")
    table.add_column("ID", style="cgl.id", no_wrap=True)
    if verbose:
        table.add_column("Modified", style="dim")

    for item in items:
        location = f"{item['book_no']} / {item['chapter_no']} / {item['record_no']}"
        row: list[Any] = [location, str(item.get("contents", "")), str(item.get("id", ""))]
        if verbose:
            row.append(str(item.get("modified", "")))
        table.add_row(*row)

    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} notes")


# ── Numbering renderers ───────────────────────────────────────────────


def _render_compare(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render compare_numbers as ``a < b``."""
    d = result.data
    symbol = {"less": "<", "equal": "=", "greater": ">"}[d["result"]]
    _status_line(console, result)
    console.print(f"  {d['a']} {symbol} {d['b']}")


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Mutations
    "create_book": _render_mutation,
    "create_chapter": _render_mutation,
    "create_record": _render_mutation,
    "set_status": _render_mutation,
    "add_doc_insert": _render_annotation,
    "add_author_note": _render_annotation,
    # Query
    "get_book": _render_book,
    "list_books": _render_books,
    "list_chapters": _render_chapters,
    "list_records": _render_records,
    "list_doc_inserts": _render_doc_inserts,
    "list_author_notes": _render_author_notes,
    # Numbering
    "compare_numbers": _render_compare,
    # Init
    "init_library": _render_init,
}
