"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Configures logging and routes results to
stdout or stderr with the matching exit code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pkgstore.config.logging import configure_logging
from pkgstore.output.formatters import format_result

if TYPE_CHECKING:
    from pkgstore.config.settings import StoreSettings
    from pkgstore.services.result import ServiceResult


class AppContext:
    """Settings plus result emission for one CLI invocation."""

    def __init__(self, settings: StoreSettings) -> None:
        self.settings = settings
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; exit with status 1 when it failed.

        Success output goes to stdout so it can be piped. Failures, and
        warnings in human mode, go to stderr.
        """
        output = format_result(
            result,
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
        )
        if not result.ok:
            click.echo(output, err=True)
            raise SystemExit(1)

        click.echo(output)
        if not self.settings.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
