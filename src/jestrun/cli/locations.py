"""jestrun locations command - list stack locations in captured output."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TextIO

import click

from jestrun.cli.utils import user_errors
from jestrun.runner.navigator import find_locations, pattern_registry


@click.command()
@click.argument("source", default="-", type=click.File("r", errors="replace"))
@click.option(
    "--base-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Resolve relative paths against this directory (the directory jest ran in).",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def locations_command(
    ctx: click.Context, source: TextIO, base_dir: Path | None, as_json: bool
) -> None:
    """List file:line:column locations found in captured jest output.

    SOURCE is a file holding the output, or '-' for stdin (default).
    """
    config = ctx.obj["config"]
    with user_errors():
        pattern = pattern_registry.require(config.runner.pattern)

    found = find_locations(source.read(), pattern)

    rows = [
        {
            "file": str(loc.resolve(base_dir)) if base_dir else loc.file,
            "line": loc.line,
            "column": loc.column,
        }
        for loc in found
    ]
    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return
    for row in rows:
        click.echo(f"{row['file']}:{row['line']}:{row['column']}")
