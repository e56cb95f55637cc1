"""Command line assembly."""

from __future__ import annotations

import shlex
from collections.abc import Sequence

FILTER_FLAG = "-t"


def build_command(base: str, options: Sequence[str], target: str | None = "") -> str:
    """Join *base*, the escaped *options* and the escaped *target*.

    *base* is used verbatim so it may carry its own arguments
    (``yarn jest``, ``npx jest --config jest.e2e.js``). An empty *target*
    runs the whole project and is left out of the line.

    >>> build_command("npx jest", ["--color"], "foo.test.ts")
    'npx jest --color foo.test.ts'
    """
    parts = [base.strip()]
    parts.extend(shlex.quote(option) for option in options)
    if target:
        parts.append(shlex.quote(target))
    return " ".join(parts)


def with_filter(options: Sequence[str], name: str) -> list[str]:
    """Return a new option list ending with a ``-t <name>`` pair."""
    return [*options, FILTER_FLAG, name]


def build_filtered_command(
    base: str, options: Sequence[str], target: str | None, name: str
) -> str:
    """Build a command that only runs tests whose name matches *name*."""
    return build_command(base, with_filter(options, name), target)
