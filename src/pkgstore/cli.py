"""Root CLI group for pkgstore with global flags and command registration."""

from __future__ import annotations

import click

from pkgstore import __version__
from pkgstore.commands import register_commands
from pkgstore.commands._base import StoreGroup
from pkgstore.commands._context import AppContext
from pkgstore.config.settings import StoreSettings


@click.group(
    cls=StoreGroup,
    invoke_without_command=True,
    examples="""\
  pkgstore validate graph.json
  pkgstore install graph.json "$PWD/store"
  pkgstore -v --log-json install graph.json /tmp/store 2> install.log""",
)
@click.version_option(version=__version__, prog_name="pkgstore")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "-w",
    "--workers",
    "workers_limit",
    type=click.IntRange(min=1),
    default=None,
    help="Cap on parallel copy workers.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    workers_limit: int | None,
) -> None:
    """Install resolved dependency graphs as local package stores."""
    settings = StoreSettings.from_cli(
        config_path=config_path,
        json_output=json_output or None,
        quiet=quiet or None,
        verbose=verbose or None,
        log_json=log_json or None,
        workers_limit=workers_limit,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
