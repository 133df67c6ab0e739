"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy Library initialization and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cglctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from cglctl.config.settings import CglSettings
    from cglctl.infrastructure.library import Library
    from cglctl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The library is lazily initialized on first use so ``--help``,
    ``--version`` and the ``number`` commands never touch the database.
    """

    def __init__(self, settings: CglSettings) -> None:
        self.settings = settings
        self._library: Library | None = None

        from cglctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def library(self) -> Library:
        """The library instance (created lazily on first access)."""
        if self._library is None:
            from cglctl.config.logging import bind_library
            from cglctl.infrastructure.library import Library

            self._library = Library(self.settings)
            bind_library(self.settings.library_root)
        return self._library

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings go to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
