"""jestrun file/all/at/rerun commands - launch jest."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from jestrun.cli.utils import execute, make_actions, resolve_path, run_options
from jestrun.runner.names import offset_for


@click.command()
@click.argument("path", type=click.Path(path_type=Path))
@run_options
@click.pass_context
def file_command(
    ctx: click.Context, path: Path, options: tuple[str, ...], runner_command: str | None
) -> None:
    """Run the tests in PATH (run-current-file).

    jest is started in the project root found above PATH.
    """
    actions = make_actions(ctx.obj["config"], options=options, runner_command=runner_command)
    ctx.exit(execute(actions, "run-current-file", path=path.expanduser()))


@click.command()
@click.argument("path", required=False, type=click.Path(path_type=Path))
@run_options
@click.pass_context
def all_command(
    ctx: click.Context, path: Path | None, options: tuple[str, ...], runner_command: str | None
) -> None:
    """Run every test of the project (run-all-tests).

    The project root is searched from PATH, or the current directory.
    """
    actions = make_actions(ctx.obj["config"], options=options, runner_command=runner_command)
    ctx.exit(execute(actions, "run-all-tests", path=resolve_path(path)))


@click.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.option("-l", "--line", type=click.IntRange(min=1), help="Cursor line (1-based).")
@click.option(
    "-c", "--column", type=click.IntRange(min=1), default=1, help="Cursor column (1-based)."
)
@click.option("--offset", type=click.IntRange(min=0), help="Cursor character offset.")
@click.option(
    "--stdin",
    "from_stdin",
    is_flag=True,
    help="Read the buffer text from stdin instead of PATH (unsaved buffers).",
)
@run_options
@click.pass_context
def at_command(
    ctx: click.Context,
    path: Path,
    line: int | None,
    column: int,
    offset: int | None,
    from_stdin: bool,
    options: tuple[str, ...],
    runner_command: str | None,
) -> None:
    """Run the test block enclosing the cursor in PATH (run-at-point).

    The nearest 'describe(' line above the cursor names the block; jest gets
    its label as a -t filter.
    """
    if (line is None) == (offset is None):
        raise click.UsageError("Give exactly one of --line or --offset.")

    actions = make_actions(ctx.obj["config"], options=options, runner_command=runner_command)
    path = path.expanduser()

    text: str | None = sys.stdin.read() if from_stdin else None
    if line is not None:
        source = text
        if source is None and path.is_file():
            source = path.read_text(encoding="utf-8", errors="replace")
        # A missing file is reported by the action itself
        offset = offset_for(source or "", line, column)

    ctx.exit(execute(actions, "run-at-point", path=path, offset=offset, text=text))


@click.command()
@click.pass_context
def rerun_command(ctx: click.Context) -> None:
    """Run the last command again, in the directory it ran in (rerun-last)."""
    actions = make_actions(ctx.obj["config"])
    ctx.exit(execute(actions, "rerun-last"))
