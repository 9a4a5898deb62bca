"""Subcommand modules for pkgstore.

Provides register_commands() which uses deferred imports to keep
``pkgstore --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from pkgstore.commands.copy import copy_cmd
    from pkgstore.commands.install import install
    from pkgstore.commands.validate import validate

    cli.add_command(install)
    cli.add_command(validate)
    cli.add_command(copy_cmd)
