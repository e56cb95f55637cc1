"""CLI utilities shared by the run commands."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.text import Text

from jestrun.config.models import JestRunConfig
from jestrun.core.errors import JestRunError
from jestrun.core.logging import get_logger
from jestrun.core.progress import pluralize, status
from jestrun.runner.actions import TestActions, dispatch
from jestrun.runner.models import RunState
from jestrun.runner.navigator import TestRun
from jestrun.runner.session import FileSessionStore

log = get_logger("cli")

# Exit code for runs interrupted with Ctrl-C
EXIT_CANCELLED = 130


class ConsoleSink:
    """Results sink printing process output to stdout, colours preserved."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(soft_wrap=True)

    def write(self, line: str) -> None:
        self._console.print(Text.from_ansi(line), highlight=False)


@contextmanager
def user_errors() -> Iterator[None]:
    """Turn jestrun errors into click errors (message + exit code 1)."""
    try:
        yield
    except JestRunError as e:
        log.debug("command.failed", error=e.error_name, details=e.details)
        raise click.ClickException(e.message) from e


def run_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every command that launches jest."""
    func = click.option(
        "--command",
        "runner_command",
        default=None,
        help="Runner binary to use instead of the configured one (e.g. 'yarn jest').",
    )(func)
    func = click.option(
        "-o",
        "--option",
        "options",
        multiple=True,
        help="Flag passed to jest; repeat for several. Replaces the configured options.",
    )(func)
    return func


def make_actions(
    config: JestRunConfig,
    *,
    options: tuple[str, ...] = (),
    runner_command: str | None = None,
) -> TestActions:
    """Build the action table for one CLI invocation."""
    update: dict[str, Any] = {}
    if options:
        update["options"] = list(options)
    if runner_command:
        update["command"] = runner_command
    runner_config = config.runner.model_copy(update=update)

    with user_errors():
        return TestActions.from_config(
            runner_config,
            session=FileSessionStore(config.session.resolved_state_path),
            sink=ConsoleSink(),
        )


def report_locations(run: TestRun) -> None:
    """List the navigable locations of a finished run, paths resolved."""
    locations = run.locations()
    if not locations:
        return
    status(f"{pluralize(len(locations), 'location')}:", style="none")
    for location in locations:
        path = location.resolve(run.working_directory)
        click.echo(f"{path}:{location.line}:{location.column}")


async def _execute(actions: TestActions, action: str, kwargs: dict[str, Any]) -> TestRun:
    run = await dispatch(actions, action, **kwargs)
    status(f"{run.command}  [{run.working_directory}]")
    try:
        await run.wait()
    except asyncio.CancelledError:
        await run.cancel()
        raise
    return run


def execute(actions: TestActions, action: str, **kwargs: Any) -> int:
    """Run *action* to completion and return the exit code for the CLI."""
    try:
        with user_errors():
            run = asyncio.run(_execute(actions, action, kwargs))
    except KeyboardInterrupt:
        status("Cancelled", style="warning")
        return EXIT_CANCELLED

    report_locations(run)
    if run.state is RunState.SUCCEEDED:
        status("Tests passed", style="success")
        return 0
    status(f"Tests failed (exit code {run.returncode})", style="error")
    return exit_code_for(run.returncode)


def exit_code_for(returncode: int | None) -> int:
    """Shell-style exit status for a failed run: 128+N when killed by signal N."""
    if returncode is None or returncode == 0:
        return 1
    if returncode < 0:
        return 128 - returncode
    return returncode


def resolve_path(path: Path | None) -> Path | None:
    """Expand ``~`` in a user-supplied path; keep None as None."""
    return path.expanduser() if path is not None else None
