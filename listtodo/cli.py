"""CLI entry point for list-todo."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO

import click

from listtodo.selection import SELECT_RANDOM_TASK, SELECTION_MODES

log = logging.getLogger(__name__)

SELF_NAME = "list-todo"

EXTENDED_HELP = """\
Statuses
--------
The first word of an item's status header is its status; anything after it
(conventionally introduced by ';', '#' or parentheses) is commentary.

  todo, in-progress         active
  done, cancelled, tabled   inactive
  (anything else)           warned about, then treated like no status

An item without an explicit active/inactive status is active when any item
it is a subtask of is active, inactive when it has parents and none of them
are, and active when it has no parents at all.

An item is shovel-ready when it is active and every item it depends on has
status 'done'. Depending on a cancelled or tabled item is reported as an
inconsistency; the dependent item is not shovel-ready.

Record syntax
-------------
Input is TEF: a sequence of entries, each introduced by a line starting
with '='.

  # Lines starting with '#' before the first entry or among headers are comments
  =task FOO-2 - write the parser
  status: todo ; started on the tokenizer
  subtask-of: FOO-1
  depends-on: FOO-0, BAR-7

  Free-text description. Everything after the first blank line
  up to the next '=' line is the description.

The entry line holds the type ('task'), the ID ('FOO-2') and an optional
title, separated from the ID by whitespace and an optional '-' or '#'.
Header names are case-insensitive and dash-separated; repeating a header
accumulates its values. ID lists are separated by commas and/or whitespace.
Start a description line with '==' to get a literal line starting with '='.

Configuration
-------------
Defaults for --select and --output-format, the status vocabulary, the item
types eligible for random picks and the pretty separator width can be set in
a YAML file: '.list-todo.yaml' in the current directory, or --config PATH.
"""


class ListTodoCommand(click.Command):
    """Command whose usage errors exit with status 1 instead of click's 2."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as exc:
            exc.exit_code = 1
            raise


def _show_extended_help(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    click.echo(ctx.get_help())
    click.echo()
    click.echo(EXTENDED_HELP, nl=False)
    ctx.exit(0)


def _complain(ctx: click.Context, errors: list[str]) -> None:
    for message in errors:
        click.echo(f"{SELF_NAME}: Error: {message}", err=True)
    click.echo(f"Try `{SELF_NAME} --help` for usage information", err=True)
    ctx.exit(1)


@click.command(
    cls=ListTodoCommand,
    context_settings={
        "ignore_unknown_options": True,
        "allow_extra_args": True,
        "help_option_names": ["-h", "--help"],
    },
)
@click.option(
    "--select",
    "select",
    metavar="MODE",
    default=None,
    help=f"Which items to output: {' | '.join(SELECTION_MODES)} (default: all).",
)
@click.option(
    "--output-format",
    metavar="FORMAT",
    default=None,
    help="json | pretty (default: json).",
)
@click.option(
    "-p",
    "-r",
    "random_pretty",
    is_flag=True,
    help="Shorthand for --output-format=pretty --select=random-shovel-ready-task.",
)
@click.option(
    "-i",
    "--input",
    "input_file",
    type=click.File("rb"),
    default="-",
    help="TEF file to read (default: stdin).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file (default: ./.list-todo.yaml if present).",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
@click.option(
    "--help-extended",
    is_flag=True,
    is_eager=True,
    expose_value=False,
    callback=_show_extended_help,
    help="Show help plus the status vocabulary and record syntax.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    select: str | None,
    output_format: str | None,
    random_pretty: bool,
    input_file: BinaryIO,
    config_path: Path | None,
    verbose: bool,
) -> None:
    """Read a TEF to-do list and output selected items.

    By default every item is converted to a line of JSON. Use -p to have a
    random shovel-ready task (active, all dependencies done) picked and shown
    along with the items it is a subtask of.
    """
    from listtodo.config import ConfigError, load_config
    from listtodo.graph import ItemGraph, ResolutionError
    from listtodo.items import load_items
    from listtodo.phrases import PhraseTranslator
    from listtodo.render import OUTPUT_FORMATS, render_json_lines, render_pretty
    from listtodo.selection import EmptySelection, normalize_selection_mode, select_item_ids
    from listtodo.tef import parse_tef_pieces

    errors = [f"unrecognized argument {arg}" for arg in ctx.args]

    mode: str | None = SELECT_RANDOM_TASK if random_pretty else None
    fmt: str | None = "pretty" if random_pretty else None
    if select is not None:
        try:
            mode = normalize_selection_mode(select)
        except ValueError as exc:
            errors.append(str(exc))
    if output_format is not None:
        if output_format in OUTPUT_FORMATS:
            fmt = output_format
        else:
            errors.append(
                f"unrecognized output format '{output_format}' "
                f"(expected one of: {', '.join(OUTPUT_FORMATS)})"
            )

    if errors:
        _complain(ctx, errors)

    try:
        config = load_config(config_path)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    mode = mode or config["select"]
    fmt = fmt or config["output_format"]

    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, config["log_level"]),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    translator = PhraseTranslator()
    items = load_items(parse_tef_pieces(input_file), translator)
    log.debug("Loaded %d item(s)", len(items))

    graph = ItemGraph(
        items,
        active_statuses=config["statuses"]["active"],
        inactive_statuses=config["statuses"]["inactive"],
    )
    try:
        item_ids = select_item_ids(graph, mode, eligible_types=config["random"]["eligible_types"])
    except EmptySelection as exc:
        click.echo(f"{SELF_NAME}: {exc}", err=True)
        return
    except ResolutionError as exc:
        raise click.ClickException(str(exc)) from exc

    if fmt == "json":
        click.echo(render_json_lines(items, item_ids), nl=False)
    else:
        click.echo(
            render_pretty(
                items,
                item_ids,
                translator,
                selection_mode=mode,
                separator_width=config["pretty"]["separator_width"],
            ),
            nl=False,
        )

