"""Click building blocks shared by pkgstore commands.

* :class:`StoreCommand` / :class:`StoreGroup` accept an ``examples``
  string and expose it through an eager ``--examples`` flag, keeping
  ``--help`` short.
* :class:`JsonDocument` is a parameter type that reads and parses a JSON
  file, so commands receive graphs and action lists already decoded.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click


def _add_examples_option(cmd: click.Command, examples: str) -> None:
    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class StoreCommand(click.Command):
    """Command with an optional ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class StoreGroup(click.Group):
    """Group with an optional ``--examples`` flag; subcommands default to StoreCommand."""

    command_class = StoreCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class JsonDocument(click.ParamType):
    """A path to a JSON file, converted to its decoded top-level value.

    *expect* restricts the top-level value to ``dict`` or ``list``.
    """

    name = "json_file"

    def __init__(self, expect: type[dict] | type[list] | None = None) -> None:
        self.expect = expect

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> Any:
        if not isinstance(value, (str, Path)):
            return value
        path = Path(value)
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            self.fail(f"{path} does not exist.", param, ctx)
        except (OSError, UnicodeDecodeError) as exc:
            self.fail(f"Could not read {path}: {exc}", param, ctx)
        except json.JSONDecodeError as exc:
            self.fail(f"Invalid JSON in {path}: {exc}", param, ctx)

        if self.expect is not None and not isinstance(document, self.expect):
            kind = "an object" if self.expect is dict else "a list"
            self.fail(f"{path} must contain {kind} at the top level.", param, ctx)
        return document
