"""Subcommand modules for cglctl.

Provides register_commands() which uses deferred imports to keep
``cglctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group.

    6 groups (have subcommands) + 1 standalone command.
    """
    # --- Groups ---
    from cglctl.commands.book import book
    from cglctl.commands.chapter import chapter
    from cglctl.commands.insert import insert
    from cglctl.commands.note import note
    from cglctl.commands.number import number
    from cglctl.commands.record import record

    cli.add_command(book)
    cli.add_command(chapter)
    cli.add_command(record)
    cli.add_command(insert)
    cli.add_command(note)
    cli.add_command(number)

    # --- Standalone commands ---
    from cglctl.commands.init_cmd import init_cmd

    cli.add_command(init_cmd)
